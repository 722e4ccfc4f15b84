"""Pipeline orchestrator: package list, then metadata, then HTML."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pkgdir.cache import MetadataCache
from pkgdir.config import PkgdirConfig
from pkgdir.descriptor.metadata import PackageMetadata, PackageRef
from pkgdir.errors import UnsupportedHost
from pkgdir.fetch import Fetcher, HttpFetcher
from pkgdir.listing import PackageListLoader
from pkgdir.render import render_page

logger = logging.getLogger("pkgdir.pipeline")


@dataclass
class BuildResult:
    html: str
    rendered: int = 0
    skipped: list[str] = field(default_factory=list)


class Pipeline:
    """End-to-end directory page build."""

    def __init__(self, config: PkgdirConfig, fetcher: Fetcher | None = None) -> None:
        self.config = config
        self._owned: HttpFetcher | None = None
        if fetcher is None:
            fetcher = self._owned = HttpFetcher(timeout=config.timeout)
        self.fetcher = fetcher
        self.loader = PackageListLoader(
            config.listing_path, self.fetcher, url=config.listing_url
        )
        self.cache = MetadataCache(config.cache_dir, self.fetcher)

    def close(self) -> None:
        if self._owned is not None:
            self._owned.close()

    def collect(self) -> tuple[list[tuple[PackageRef, PackageMetadata]], list[str]]:
        """Resolve metadata for every listed package.

        Returns the (package, metadata) pairs in name order plus the names
        skipped for an unsupported host (only when the policy is "skip").
        """
        packages = self.loader.load_packages()
        logger.info("Resolving metadata for %d package(s)", len(packages))

        entries: list[tuple[PackageRef, PackageMetadata]] = []
        skipped: list[str] = []
        for ref in packages:
            try:
                meta = self.cache.get_metadata(ref.name, ref.repository_url)
            except UnsupportedHost as e:
                if self.config.on_unsupported != "skip":
                    raise
                logger.warning("Skipping %s: %s", ref.name, e)
                skipped.append(ref.name)
                continue
            entries.append((ref, meta))
        return entries, skipped

    def build(self) -> BuildResult:
        entries, skipped = self.collect()
        page = render_page(entries, skipped=skipped)
        if skipped:
            logger.warning(
                "Skipped %d package(s) with unsupported hosts: %s",
                len(skipped), ", ".join(skipped),
            )
        return BuildResult(html=page, rendered=len(entries), skipped=skipped)
