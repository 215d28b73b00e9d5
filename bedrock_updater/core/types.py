"""Core type definitions for bedrock_updater."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Platform(StrEnum):
    """``data-platform`` keys used on the server download page."""
    LINUX = "serverBedrockLinux"
    WINDOWS = "serverBedrockWindows"
    PREVIEW_LINUX = "serverBedrockPreviewLinux"
    PREVIEW_WINDOWS = "serverBedrockPreviewWindows"


class PipelineState(StrEnum):
    """States a single update cycle moves through."""
    IDLE = "idle"
    DOCUMENT_FETCHED = "document_fetched"
    LINK_RESOLVED = "link_resolved"
    VERSIONS_RESOLVED = "versions_resolved"
    UP_TO_DATE = "up_to_date"
    AHEAD_OF_REMOTE = "ahead_of_remote"
    UPDATING = "updating"


class DownloadReference(BaseModel):
    """The server archive published on the download page."""
    url: str = Field(..., description="Absolute download URL")
    path: str = Field(..., description="URL path component")
    file_name: str = Field(..., description="Last path segment of the URL")

    model_config = ConfigDict(frozen=True)
