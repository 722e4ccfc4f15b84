"""HTTP fetching of remote listing and descriptor files."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from pkgdir.errors import FetchError

logger = logging.getLogger("pkgdir.fetch")


class Fetcher(Protocol):
    """Anything that can retrieve the bytes stored at a URL."""

    def fetch(self, url: str) -> bytes: ...


class HttpFetcher:
    """Plain GET fetcher backed by httpx. No retries."""

    def __init__(self, timeout: float = 30.0, http: httpx.Client | None = None) -> None:
        self._http = http or httpx.Client(timeout=timeout, follow_redirects=True)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> HttpFetcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def fetch(self, url: str) -> bytes:
        """Return the body at ``url``, raising FetchError on any failure."""
        logger.info("Fetching %s", url)
        try:
            resp = self._http.get(url)
        except httpx.HTTPError as e:
            raise FetchError(url, str(e) or type(e).__name__) from e
        if resp.status_code == 404:
            raise FetchError(url, "not found")
        if not 200 <= resp.status_code < 300:
            raise FetchError(url, f"HTTP {resp.status_code}")
        return resp.content
