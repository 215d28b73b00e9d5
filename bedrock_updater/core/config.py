"""Configuration management for bedrock-updater."""

from __future__ import annotations

import json
from pathlib import Path

import structlog
from pydantic import BaseModel, Field, field_validator

from bedrock_updater.core.types import Platform

logger = structlog.get_logger()

DEFAULT_CONFIG_FILE = Path.home() / ".config" / "bedrock-updater" / "config.json"

BEDROCK_SERVER_PAGE = "https://www.minecraft.net/en-us/download/server/bedrock"

# Operator-owned files an update must never overwrite once they exist
DEFAULT_BLACKLIST = ["permissions.json", "allowlist.json", "server.properties"]


def default_headers() -> dict[str, str]:
    return {
        "Accept": "text/html",
        "Accept-Language": "en-US,en;q=0.5",
        "Accept-Encoding": "gzip",
        "Connection": "keep-alive",
        "User-Agent": "Mozilla/5.0 (X11; Linux x86_64) bedrock-updater/0.1.0",
    }


class UpdaterConfig(BaseModel):
    """Updater configuration."""

    # Download page settings
    page_url: str = Field(
        default=BEDROCK_SERVER_PAGE,
        description="Server download page"
    )
    platform: Platform = Field(
        default=Platform.LINUX,
        description="data-platform key of the download link"
    )
    selector: str | None = Field(
        default=None,
        description="CSS selector override for the download link"
    )
    headers: dict[str, str] = Field(
        default_factory=default_headers,
        description="Headers sent with the page request"
    )
    timeout: float = Field(default=30.0, description="Request timeout in seconds")

    # Installation settings
    server_dir: Path | None = Field(
        default=None,
        description="Server installation directory"
    )
    update_dir: str = Field(
        default="update",
        description="Staging directory, relative to the server directory"
    )
    version_file: str = Field(
        default="version.txt",
        description="Version record, relative to the server directory"
    )
    blacklist: list[str] = Field(
        default_factory=lambda: list(DEFAULT_BLACKLIST),
        description="File names never overwritten when already present"
    )

    # Loop and output settings
    poll_interval: float = Field(
        default=3600.0,
        description="Seconds to wait between update cycles"
    )
    output_format: str = Field(
        default="rich",
        description="Output format (rich, json, plain)"
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    @property
    def download_selector(self) -> str:
        """Selector locating the download link for the configured platform."""
        if self.selector:
            return self.selector
        return f'a.downloadlink[data-platform="{self.platform.value}"]'

    def staging_path(self, server_dir: Path) -> Path:
        return server_dir / self.update_dir

    def version_path(self, server_dir: Path) -> Path:
        return server_dir / self.version_file

    @classmethod
    def load(cls, config_file: Path | None = None) -> UpdaterConfig:
        """Load configuration from file.

        Args:
            config_file: Path to config file, uses default if None

        Returns:
            Updater configuration
        """
        if config_file is None:
            config_file = DEFAULT_CONFIG_FILE

        if config_file.exists():
            with open(config_file) as f:
                data = json.load(f)
                return cls(**data)

        # Return defaults
        return cls()

    def save(self, config_file: Path | None = None) -> None:
        """Save configuration to file.

        Args:
            config_file: Path to config file, uses default if None
        """
        if config_file is None:
            config_file = DEFAULT_CONFIG_FILE

        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2, default=str)

        logger.info("config_saved", path=str(config_file))

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeout value."""
        if v <= 0:
            raise ValueError("Timeout must be positive")
        return v

    @field_validator("poll_interval")
    @classmethod
    def validate_poll_interval(cls, v: float) -> float:
        """Validate poll interval value."""
        if v < 0:
            raise ValueError("Poll interval must be non-negative")
        return v

    @field_validator("blacklist")
    @classmethod
    def validate_blacklist(cls, v: list[str]) -> list[str]:
        """Blacklist entries are bare file names."""
        for name in v:
            if not name or "/" in name or "\\" in name or name in {".", ".."}:
                raise ValueError(f"Invalid blacklist entry: {name!r}")
        return v

    @field_validator("update_dir", "version_file")
    @classmethod
    def validate_relative(cls, v: str) -> str:
        """Staging and record paths live inside the server directory."""
        path = Path(v)
        if not path.parts or path.is_absolute() or ".." in path.parts:
            raise ValueError(f"Path must be relative to the server directory: {v!r}")
        return v

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, v: str) -> str:
        """Validate output format."""
        valid_formats = {"rich", "json", "plain"}
        if v not in valid_formats:
            raise ValueError(f"Invalid output format: {v}. Valid formats: {valid_formats}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Valid levels: {valid_levels}")
        return v
