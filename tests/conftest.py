"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from pkgdir.config import PkgdirConfig
from pkgdir.errors import FetchError


class FakeFetcher:
    """In-memory stand-in for HttpFetcher that records every request."""

    def __init__(self, responses: dict[str, bytes] | None = None) -> None:
        self.responses = dict(responses or {})
        self.calls: list[str] = []

    def fetch(self, url: str) -> bytes:
        self.calls.append(url)
        if url not in self.responses:
            raise FetchError(url, "not found")
        return self.responses[url]


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def config(tmp_path: Path) -> PkgdirConfig:
    cfg = PkgdirConfig(base_dir=tmp_path)
    cfg.ensure_dirs()
    return cfg
