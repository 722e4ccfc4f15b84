"""Render the package directory as a standalone HTML page."""

from __future__ import annotations

import html
from collections.abc import Iterable, Sequence

from pkgdir.cache import MetadataCache
from pkgdir.descriptor.metadata import PackageMetadata, PackageRef

PAGE_TITLE = "Janet Packages"

STYLESHEET = """\
body { font-family: sans-serif; max-width: 60em; margin: 2em auto; padding: 0 1em; color: #222; }
h1 { font-weight: normal; }
table { border-collapse: collapse; width: 100%; }
td { padding: 0.4em 0.8em; border-bottom: 1px solid #ddd; vertical-align: top; }
td.name { white-space: nowrap; }
a { color: #2a5db0; text-decoration: none; }
a:hover { text-decoration: underline; }
p.skipped { color: #888; font-size: 0.9em; }"""

PAGE_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
{style}
</style>
</head>
<body>
<h1>{title}</h1>
<table>
{rows}
</table>
{footer}</body>
</html>
"""


def _escape(value: str) -> str:
    return html.escape(value, quote=True)


def render_row(ref: PackageRef, meta: PackageMetadata) -> str:
    return (
        f'<tr><td class="name"><a href="{_escape(meta.url)}">{_escape(ref.name)}</a></td>'
        f'<td class="description">{_escape(meta.description)}</td></tr>'
    )


def render_page(
    entries: Iterable[tuple[PackageRef, PackageMetadata]],
    skipped: Sequence[str] = (),
) -> str:
    """Serialize (package, metadata) pairs, in order, as an HTML document."""
    rows = "\n".join(render_row(ref, meta) for ref, meta in entries)
    footer = ""
    if skipped:
        names = ", ".join(_escape(name) for name in skipped)
        footer = f'<p class="skipped">Not shown (unsupported host): {names}</p>\n'
    return PAGE_TEMPLATE.format(
        title=_escape(PAGE_TITLE),
        style=STYLESHEET,
        rows=rows,
        footer=footer,
    )


def render(packages: Iterable[PackageRef], cache: MetadataCache) -> str:
    """Fetch metadata for each package through ``cache`` and render the page."""
    entries = [
        (ref, cache.get_metadata(ref.name, ref.repository_url)) for ref in packages
    ]
    return render_page(entries)
