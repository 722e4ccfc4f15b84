"""Tests for the httpx-backed fetcher."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import httpx
import pytest

from pkgdir.errors import FetchError
from pkgdir.fetch import HttpFetcher

URL = "https://raw.githubusercontent.com/janet-lang/spork/master/project.janet"


class TestHttpFetcher:
    def test_returns_body(self) -> None:
        f = HttpFetcher()
        mock_resp = MagicMock()
        mock_resp.status_code = 200
        mock_resp.content = b'(declare-project :name "spork")'

        with patch.object(f._http, "get", return_value=mock_resp) as mock_get:
            assert f.fetch(URL) == b'(declare-project :name "spork")'

        mock_get.assert_called_once_with(URL)
        f.close()

    def test_404(self) -> None:
        f = HttpFetcher()
        mock_resp = MagicMock()
        mock_resp.status_code = 404

        with patch.object(f._http, "get", return_value=mock_resp):
            with pytest.raises(FetchError, match="not found") as exc_info:
                f.fetch(URL)
        assert exc_info.value.url == URL
        f.close()

    def test_server_error(self) -> None:
        f = HttpFetcher()
        mock_resp = MagicMock()
        mock_resp.status_code = 503

        with patch.object(f._http, "get", return_value=mock_resp):
            with pytest.raises(FetchError, match="HTTP 503"):
                f.fetch(URL)
        f.close()

    def test_transport_error(self) -> None:
        f = HttpFetcher()

        with patch.object(f._http, "get", side_effect=httpx.ConnectError("refused")):
            with pytest.raises(FetchError, match="refused"):
                f.fetch(URL)
        f.close()

    def test_no_retry(self) -> None:
        f = HttpFetcher()
        mock_resp = MagicMock()
        mock_resp.status_code = 500

        with patch.object(f._http, "get", return_value=mock_resp) as mock_get:
            with pytest.raises(FetchError):
                f.fetch(URL)
        assert mock_get.call_count == 1
        f.close()

    def test_context_manager_closes_client(self) -> None:
        client = MagicMock()
        with HttpFetcher(http=client):
            pass
        client.close.assert_called_once()
