"""Persisted record of the installed server version."""

from __future__ import annotations

import os
from pathlib import Path

import structlog

from bedrock_updater.core.errors import VersionRecordError

logger = structlog.get_logger()


class VersionRecord:
    """Plain text file holding the installed version string.

    The file contains exactly the version text and nothing else. Writes go
    through a temporary file and ``os.replace`` so a crash never leaves a
    truncated record behind.

    Args:
        path: Location of the record, usually ``<server_dir>/version.txt``
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def read(self) -> str | None:
        """Return the recorded version text, or None if no record exists."""
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise VersionRecordError(self.path, "read", str(e)) from e

    def write(self, text: str) -> None:
        """Replace the record with ``text``."""
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp_path.write_text(text, encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise VersionRecordError(self.path, "write", str(e)) from e

        logger.debug("version_record_written", path=str(self.path), version=text)
