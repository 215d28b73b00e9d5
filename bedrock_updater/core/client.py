"""HTTP client for the server download page and archives."""

from __future__ import annotations

import httpx
import structlog

from bedrock_updater.core.config import UpdaterConfig
from bedrock_updater.core.errors import ArchiveDownloadFailed, PageFetchFailed

logger = structlog.get_logger()


class ServerPageClient:
    """Fetches the download page and server archives.

    No retries are attempted; a failed request ends the current cycle and
    the next cycle tries again.
    """

    def __init__(
        self,
        config: UpdaterConfig | None = None,
        http_client: httpx.Client | None = None,
    ):
        """Initialize page client.

        Args:
            config: Optional updater configuration
            http_client: Pre-built HTTP client, mainly for tests
        """
        self.config = config or UpdaterConfig()
        self._client = http_client

    @property
    def client(self) -> httpx.Client:
        """Get or create sync HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.config.timeout,
                follow_redirects=True,
            )
        return self._client

    def fetch_page(self, url: str) -> str:
        """Fetch the download page HTML.

        Args:
            url: Download page URL

        Returns:
            Page HTML

        Raises:
            PageFetchFailed: On transport errors or non-2xx responses
        """
        logger.info("Attempting to fetch html document", url=url)
        try:
            response = self.client.get(url, headers=self.config.headers)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise PageFetchFailed(url, str(e)) from e

        return response.text

    def download(self, url: str) -> bytes:
        """Download a server archive.

        Args:
            url: Archive URL

        Returns:
            Archive bytes

        Raises:
            ArchiveDownloadFailed: On transport errors or non-2xx responses
        """
        logger.info("downloading new server version", url=url)
        try:
            response = self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ArchiveDownloadFailed(url, str(e)) from e

        logger.debug("download_complete", url=url, size=len(response.content))
        return response.content

    def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self) -> ServerPageClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()
