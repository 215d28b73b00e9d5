"""Error types raised by the update pipeline.

Every failure is tagged with an :class:`ErrorKind` so callers can decide how
to report it without matching on individual classes:

1. transport: the download page or the archive could not be fetched
2. page_shape: the download page no longer looks the way we expect
3. version_parse: a version string could not be derived
4. filesystem: the installation tree, staging tree or version file failed
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path


class ErrorKind(StrEnum):
    """Broad category of an updater failure."""
    TRANSPORT = "transport"
    PAGE_SHAPE = "page_shape"
    VERSION_PARSE = "version_parse"
    FILESYSTEM = "filesystem"


class UpdaterError(Exception):
    """Base class for all updater failures.

    Attributes:
        kind: Category of the failure
        recoverable: True when an operator can fix the condition locally
    """

    kind: ErrorKind
    recoverable: bool = False


class TransportError(UpdaterError):
    kind = ErrorKind.TRANSPORT


class PageShapeError(UpdaterError):
    kind = ErrorKind.PAGE_SHAPE


class VersionParseError(UpdaterError):
    kind = ErrorKind.VERSION_PARSE


class FilesystemError(UpdaterError):
    kind = ErrorKind.FILESYSTEM


class PageFetchFailed(TransportError):
    """The download page could not be retrieved."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch download page {url}: {reason}")


class ArchiveDownloadFailed(TransportError):
    """The server archive could not be downloaded."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to download server archive {url}: {reason}")


class InvalidSelector(PageShapeError):
    def __init__(self, selector: str, reason: str):
        self.selector = selector
        super().__init__(f"Invalid download selector {selector!r}: {reason}")


class NoDownloadElement(PageShapeError):
    def __init__(self, selector: str):
        self.selector = selector
        super().__init__(f"No download element matches {selector!r}")


class TooManyDownloadElements(PageShapeError):
    def __init__(self, selector: str, count: int):
        self.selector = selector
        self.count = count
        super().__init__(
            f"Expected exactly one download element for {selector!r}, found {count}"
        )


class NoDownloadLinkAttr(PageShapeError):
    def __init__(self, selector: str):
        self.selector = selector
        super().__init__(f"Download element {selector!r} has no href attribute")


class CannotParseUrl(PageShapeError):
    def __init__(self, link: str, reason: str):
        self.link = link
        super().__init__(f"Cannot parse download link {link!r}: {reason}")


class NoVersionString(VersionParseError):
    def __init__(self, text: str):
        self.text = text
        super().__init__(f"No version string found in {text!r}")


class UnparseableVersion(VersionParseError):
    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Version string {text!r} is not made of integers")


class NoCurrentVersion(VersionParseError):
    """No version record exists and no override was supplied."""

    recoverable = True

    def __init__(self, record_path: Path):
        self.record_path = record_path
        super().__init__(
            f"No current version recorded at {record_path}; "
            "set it once with --set-first-version"
        )


class InstallDirMissing(FilesystemError):
    recoverable = True

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Server directory does not exist: {path}")


class VersionRecordError(FilesystemError):
    """The version record could not be read or written."""

    def __init__(self, path: Path, operation: str, reason: str):
        self.path = path
        self.operation = operation
        super().__init__(f"Cannot {operation} version record {path}: {reason}")


class ServerZipExtractFailed(FilesystemError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Failed to extract server archive: {reason}")


class CopyFailed(FilesystemError):
    def __init__(self, source: Path, destination: Path, reason: str):
        self.source = source
        self.destination = destination
        super().__init__(f"Failed to copy {source} to {destination}: {reason}")


class StagingCleanupFailed(FilesystemError):
    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"Failed to remove staging directory {path}: {reason}")
