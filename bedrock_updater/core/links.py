"""Download link extraction from the server download page."""

from __future__ import annotations

from posixpath import basename

import httpx
import soupsieve
import structlog
from bs4 import BeautifulSoup

from bedrock_updater.core.errors import (
    CannotParseUrl,
    InvalidSelector,
    NoDownloadElement,
    NoDownloadLinkAttr,
    TooManyDownloadElements,
)
from bedrock_updater.core.types import DownloadReference

logger = structlog.get_logger()


def parse_document(html: str) -> BeautifulSoup:
    """Parse page HTML into a selectable document."""
    return BeautifulSoup(html, "html.parser")


class LinkExtractor:
    """Locate the single download link for a platform on the download page.

    The selector should be updated when the page layout changes.
    """

    def __init__(self, selector: str):
        self.selector = selector

    def extract(self, document: BeautifulSoup) -> DownloadReference:
        """Return the download reference for the configured selector.

        Args:
            document: Parsed download page

        Returns:
            Reference to the server archive

        Raises:
            InvalidSelector: If the selector is not valid CSS
            NoDownloadElement: If nothing matches the selector
            TooManyDownloadElements: If more than one element matches
            NoDownloadLinkAttr: If the element carries no href
            CannotParseUrl: If the href is not an absolute URL
        """
        try:
            elements = document.select(self.selector)
        except soupsieve.SelectorSyntaxError as e:
            raise InvalidSelector(self.selector, str(e)) from e

        if not elements:
            raise NoDownloadElement(self.selector)

        # The page publishes one link per platform; more than one means the
        # layout changed and the first match cannot be trusted.
        if len(elements) > 1:
            raise TooManyDownloadElements(self.selector, len(elements))

        link = elements[0].get("href")
        if not isinstance(link, str) or not link.strip():
            raise NoDownloadLinkAttr(self.selector)

        reference = parse_download_url(link.strip())
        logger.debug("download_link_found", url=reference.url, file=reference.file_name)
        return reference


def parse_download_url(link: str) -> DownloadReference:
    """Split an absolute download link into URL, path and file name.

    Only the path is kept for version extraction, so version-like text in
    query parameters is never matched.
    """
    try:
        url = httpx.URL(link)
    except httpx.InvalidURL as e:
        raise CannotParseUrl(link, str(e)) from e

    if not url.is_absolute_url or url.scheme not in {"http", "https"}:
        raise CannotParseUrl(link, "not an absolute http(s) URL")

    return DownloadReference(
        url=str(url),
        path=url.path,
        file_name=basename(url.path),
    )
