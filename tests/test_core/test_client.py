"""Tests for client.py module."""

import httpx
import pytest

from bedrock_updater.core.client import ServerPageClient
from bedrock_updater.core.config import UpdaterConfig
from bedrock_updater.core.errors import ArchiveDownloadFailed, ErrorKind, PageFetchFailed

PAGE_URL = "https://www.minecraft.net/en-us/download/server/bedrock"
ARCHIVE_URL = "https://www.minecraft.net/bin-linux/bedrock-server-1.21.0.3.zip"


def _client(handler) -> ServerPageClient:
    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    return ServerPageClient(UpdaterConfig(), http_client=http_client)


class TestServerPageClient:
    """Test ServerPageClient class."""

    def test_fetch_page_sends_common_headers(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="<html></html>")

        with _client(handler) as client:
            assert client.fetch_page(PAGE_URL) == "<html></html>"

        request = seen[0]
        assert request.headers["accept"] == "text/html"
        assert request.headers["accept-language"] == "en-US,en;q=0.5"
        assert request.headers["connection"] == "keep-alive"

    def test_fetch_page_http_error(self):
        with _client(lambda request: httpx.Response(403)) as client:
            with pytest.raises(PageFetchFailed) as exc_info:
                client.fetch_page(PAGE_URL)

        assert exc_info.value.kind is ErrorKind.TRANSPORT
        assert exc_info.value.url == PAGE_URL

    def test_fetch_page_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with _client(handler) as client:
            with pytest.raises(PageFetchFailed):
                client.fetch_page(PAGE_URL)

    def test_download(self):
        with _client(lambda request: httpx.Response(200, content=b"PK\x03\x04")) as client:
            assert client.download(ARCHIVE_URL) == b"PK\x03\x04"

    def test_download_error(self):
        with _client(lambda request: httpx.Response(404)) as client:
            with pytest.raises(ArchiveDownloadFailed):
                client.download(ARCHIVE_URL)

    def test_lazy_client_uses_config_timeout(self):
        client = ServerPageClient(UpdaterConfig(timeout=5.0))

        assert client.client.timeout.read == 5.0
        client.close()
        assert client._client is None
