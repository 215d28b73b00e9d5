"""Resolution of the latest and currently installed server versions.

The latest version comes from the archive file name on the download page.
The current version comes from the version record, unless an operator
override is given: an override always wins and is written back to the
record before it is parsed.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from bedrock_updater.core.errors import NoCurrentVersion
from bedrock_updater.core.record import VersionRecord
from bedrock_updater.core.version import Ordering, VersionString, compare

logger = structlog.get_logger()


@dataclass(frozen=True)
class ResolvedVersions:
    """Current and latest version for one update cycle."""

    current: VersionString
    latest: VersionString

    @property
    def ordering(self) -> Ordering:
        return compare(self.current, self.latest)


def resolve_latest(file_name: str) -> VersionString:
    """Parse the latest version from the archive file name."""
    logger.info("Getting latest version", file=file_name)
    return VersionString.parse(file_name)


def resolve_current(
    persisted_text: str | None,
    override: str | None,
    record: VersionRecord,
) -> VersionString:
    """Determine the installed version.

    Args:
        persisted_text: Current contents of the version record, if any
        override: Operator supplied version, always authoritative
        record: Record that receives the override

    Returns:
        Installed version

    Raises:
        NoCurrentVersion: If neither a record nor an override exists
    """
    logger.info("Getting current version")
    if override is not None:
        record.write(override)
        return VersionString.parse(override)

    if persisted_text is None:
        raise NoCurrentVersion(record.path)

    return VersionString.parse(persisted_text)


def resolve(
    file_name: str,
    persisted_text: str | None,
    override: str | None,
    record: VersionRecord,
) -> ResolvedVersions:
    """Resolve the current and latest versions together."""
    logger.info("Getting versions")
    current = resolve_current(persisted_text, override, record)
    latest = resolve_latest(file_name)
    return ResolvedVersions(current=current, latest=latest)
