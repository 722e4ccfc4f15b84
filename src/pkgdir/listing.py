"""Load the master package list (pkgs.janet)."""

from __future__ import annotations

import logging
from pathlib import Path

from pkgdir.config import LISTING_URL
from pkgdir.descriptor.evaluator import load_module
from pkgdir.descriptor.metadata import PackageRef
from pkgdir.errors import EvaluationError, MalformedPackageList, ReadError
from pkgdir.fetch import Fetcher

logger = logging.getLogger("pkgdir.listing")

# pkgs.janet declares helpers first; the package table is the third form.
PACKAGES_FORM_INDEX = 2


class PackageListLoader:
    def __init__(
        self, listing_path: Path, fetcher: Fetcher, url: str = LISTING_URL
    ) -> None:
        self._listing_path = Path(listing_path)
        self._fetcher = fetcher
        self._url = url

    @property
    def listing_path(self) -> Path:
        return self._listing_path

    def ensure_listing(self) -> Path:
        """Download the listing unless a local copy already exists."""
        if not self._listing_path.exists():
            content = self._fetcher.fetch(self._url)
            self._listing_path.parent.mkdir(parents=True, exist_ok=True)
            self._listing_path.write_bytes(content)
            logger.info("Saved package list to %s", self._listing_path)
        return self._listing_path

    def load_packages(self) -> list[PackageRef]:
        """Return every listed package, sorted by name."""
        path = self.ensure_listing()
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise MalformedPackageList(f"{path} is not valid UTF-8: {e}") from e
        return parse_package_list(text)


def parse_package_list(text: str) -> list[PackageRef]:
    """Evaluate pkgs.janet source and return its packages sorted by name."""
    try:
        forms, values = load_module(text, limit=PACKAGES_FORM_INDEX + 1)
    except (ReadError, EvaluationError) as e:
        raise MalformedPackageList(f"Could not evaluate package list: {e}") from e

    if len(forms) <= PACKAGES_FORM_INDEX:
        raise MalformedPackageList(
            f"Package list has {len(forms)} top-level form(s), "
            f"expected at least {PACKAGES_FORM_INDEX + 1}"
        )

    mapping = values[PACKAGES_FORM_INDEX]
    if not isinstance(mapping, dict):
        raise MalformedPackageList(
            f"Form {PACKAGES_FORM_INDEX} evaluates to "
            f"{type(mapping).__name__}, not a mapping"
        )

    packages = []
    for name, url in mapping.items():
        if not isinstance(name, str) or not isinstance(url, str):
            raise MalformedPackageList(f"Bad package entry: {name!r} -> {url!r}")
        packages.append(PackageRef(name=str(name), repository_url=str(url)))

    packages.sort(key=lambda ref: ref.name)
    logger.debug("Loaded %d package(s)", len(packages))
    return packages
