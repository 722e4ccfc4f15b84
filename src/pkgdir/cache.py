"""On-disk cache of project.janet descriptors, one file per package."""

from __future__ import annotations

import logging
from pathlib import Path

from pkgdir.descriptor.metadata import PackageMetadata, parse_descriptor
from pkgdir.errors import MalformedDescriptor
from pkgdir.fetch import Fetcher
from pkgdir.sources import DESCRIPTOR_FILENAME, resolve

logger = logging.getLogger("pkgdir.cache")


class MetadataCache:
    """Fetch each package's descriptor once and reuse the stored copy.

    A cached file is never refreshed: its presence alone decides whether
    the network is touched. Delete it (or call :meth:`clear`) to refetch.
    """

    def __init__(self, cache_dir: Path, fetcher: Fetcher) -> None:
        self._cache_dir = Path(cache_dir)
        self._fetcher = fetcher

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def _ensure_dir(self) -> None:
        if not self._cache_dir.is_dir():
            logger.info("Creating cache directory %s", self._cache_dir)
        self._cache_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, name: str) -> Path:
        return self._cache_dir / f"{name}.{DESCRIPTOR_FILENAME}"

    def is_cached(self, name: str) -> bool:
        return self.path_for(name).exists()

    def get_metadata(self, name: str, repository_url: str) -> PackageMetadata:
        """Return the declared metadata for ``name``, fetching it if needed."""
        self._ensure_dir()
        dest = self.path_for(name)

        if dest.exists():
            logger.debug("Using cached descriptor for %s", name)
        else:
            url = resolve(repository_url, package=name)
            content = self._fetcher.fetch(url)
            # Written under the plain descriptor name first so a crash never
            # leaves a truncated file at the cache path.
            tmp = self._cache_dir / DESCRIPTOR_FILENAME
            tmp.write_bytes(content)
            tmp.replace(dest)
            logger.info("Cached %s descriptor at %s", name, dest)

        try:
            text = dest.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise MalformedDescriptor(f"{name}: {dest} is not valid UTF-8: {e}") from e
        return parse_descriptor(text, name)

    def clear(self) -> int:
        return clear_cache(self._cache_dir)


def clear_cache(cache_dir: Path) -> int:
    """Delete every cached descriptor in ``cache_dir``. Returns the number removed."""
    if not cache_dir.is_dir():
        return 0
    removed = 0
    for path in cache_dir.glob(f"*.{DESCRIPTOR_FILENAME}"):
        path.unlink()
        removed += 1
    logger.info("Removed %d cached descriptor(s)", removed)
    return removed
