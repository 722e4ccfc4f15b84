"""Package metadata dataclasses and project.janet parsing."""

from __future__ import annotations

from dataclasses import dataclass, field

from pkgdir.descriptor.reader import Compound, Keyword, Symbol, read_forms
from pkgdir.errors import MalformedDescriptor, ReadError

DECLARE_FORM = "declare-project"
TEXT_FIELDS = ("name", "url", "description", "author", "license")


@dataclass(frozen=True)
class PackageRef:
    name: str
    repository_url: str


@dataclass
class PackageMetadata:
    name: str
    url: str = ""
    description: str = ""
    author: str | None = None
    license: str | None = None
    extra: dict[str, object] = field(default_factory=dict)


def find_declaration(forms: list) -> Compound | None:
    """Return the first top-level ``(declare-project ...)`` form."""
    for form in forms:
        if isinstance(form, Compound) and form.is_call(DECLARE_FORM):
            return form
    return None


def parse_descriptor(text: str, package: str) -> PackageMetadata:
    """Build PackageMetadata from the contents of a project.janet file."""
    try:
        forms = read_forms(text)
    except ReadError as e:
        raise MalformedDescriptor(f"{package}: {e}") from e

    declaration = find_declaration(forms)
    if declaration is None:
        raise MalformedDescriptor(f"{package}: no {DECLARE_FORM} form found")

    body = declaration.items[1:]
    if len(body) % 2:
        raise MalformedDescriptor(
            f"{package}: {DECLARE_FORM} has an odd number of key/value forms"
        )

    fields: dict[str, object] = {}
    for key, value in zip(body[::2], body[1::2]):
        if not isinstance(key, (Keyword, Symbol)):
            raise MalformedDescriptor(f"{package}: {key!r} is not a keyword")
        fields[str(key)] = value

    text = {
        key: value for key, value in fields.items()
        if key in TEXT_FIELDS
        and isinstance(value, str)
        and not isinstance(value, (Keyword, Symbol))
    }
    return PackageMetadata(
        name=text.get("name") or package,
        url=text.get("url", ""),
        description=text.get("description", ""),
        author=text.get("author"),
        license=text.get("license"),
        extra={k: v for k, v in fields.items() if k not in text},
    )
