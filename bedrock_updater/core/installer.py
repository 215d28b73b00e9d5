"""Merge installation of a downloaded server archive.

The archive is expanded into a staging directory and its top-level entries
are merged into the live server directory one by one:

1. Blacklisted names that already exist in the server directory are skipped
2. Plain files overwrite their counterpart in the server directory
3. Directories are merged, keeping files the archive does not contain

The version record is only advanced once every copy succeeded, so a failed
merge is detected as out of date and retried on the next cycle.
"""

from __future__ import annotations

import shutil
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog

from bedrock_updater.core.errors import (
    CopyFailed,
    ServerZipExtractFailed,
    StagingCleanupFailed,
)
from bedrock_updater.core.filesystem import copy_file, copy_merge, extract_archive
from bedrock_updater.core.record import VersionRecord
from bedrock_updater.core.version import VersionString


class MergeInstaller:
    """Install server archives into a live directory without clobbering config.

    Args:
        blacklist: File names preserved when already present
        log: Bound logger, defaults to the module logger
    """

    def __init__(self, blacklist: Iterable[str], log: Any = None) -> None:
        self.blacklist = frozenset(blacklist)
        self.log = log or structlog.get_logger()
        for name in sorted(self.blacklist):
            self.log.debug("blacklisted from overwriting", file=name)

    def install(
        self,
        archive: bytes,
        server_dir: Path,
        staging_dir: Path,
        record: VersionRecord,
        new_version: VersionString,
    ) -> None:
        """Merge ``archive`` into ``server_dir`` and record ``new_version``.

        Args:
            archive: Raw server zip
            server_dir: Live installation directory
            staging_dir: Scratch directory, removed afterwards
            record: Version record advanced after a complete merge
            new_version: Version being installed

        Raises:
            ServerZipExtractFailed: If the archive cannot be expanded; the
                server directory has not been touched
            CopyFailed: If a merge step fails; the record is unchanged
            StagingCleanupFailed: If the staging directory cannot be removed
        """
        try:
            self._prepare_staging(staging_dir)

            self.log.info("extracting updated server zip", staging=str(staging_dir))
            extract_archive(archive, staging_dir, strip_top_level=True)

            self.log.info("copying files")
            self._merge(staging_dir, server_dir)

            record.write(str(new_version))
        except Exception:
            self._discard_staging(staging_dir)
            raise

        self.log.info("cleaning up")
        self._remove_staging(staging_dir)
        self.log.info("server updated", version=str(new_version))

    def is_protected(self, name: str, server_dir: Path) -> bool:
        """Return True if ``name`` must be left as the operator has it."""
        return name in self.blacklist and (server_dir / name).exists()

    def _merge(self, staging_dir: Path, server_dir: Path) -> None:
        # Only the top level is walked; subdirectories are merged whole
        for entry in sorted(staging_dir.iterdir()):
            destination = server_dir / entry.name

            if self.is_protected(entry.name, server_dir):
                self.log.info("keeping existing file", file=entry.name)
                continue

            self.log.debug("copying", source=str(entry), destination=str(destination))
            if entry.is_dir():
                copy_merge(entry, destination)
            elif entry.is_file():
                copy_file(entry, destination)
            else:
                raise CopyFailed(entry, destination, "not a regular file or directory")

    def _prepare_staging(self, staging_dir: Path) -> None:
        # Leftovers from an interrupted attempt must not leak into this one
        if staging_dir.exists():
            self.log.warning("removing stale staging directory", path=str(staging_dir))
            self._remove_staging(staging_dir)
        try:
            staging_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ServerZipExtractFailed(f"cannot create staging directory: {e}") from e

    def _remove_staging(self, staging_dir: Path) -> None:
        try:
            shutil.rmtree(staging_dir)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StagingCleanupFailed(staging_dir, str(e)) from e

    def _discard_staging(self, staging_dir: Path) -> None:
        """Best-effort cleanup while another error is already propagating."""
        try:
            self._remove_staging(staging_dir)
        except StagingCleanupFailed as e:
            self.log.error("staging cleanup failed", path=str(staging_dir), error=str(e))
