"""Four-part numeric version strings as published by the server vendor."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum

from bedrock_updater.core.errors import NoVersionString, UnparseableVersion

# Bedrock server releases always carry exactly four numeric parts.
VERSION_PATTERN = re.compile(r"\d+(?:\.\d+){3}")


class Ordering(IntEnum):
    LESS = -1
    EQUAL = 0
    GREATER = 1


@dataclass(frozen=True, order=True)
class VersionString:
    """Ordered (major, minor, patch, revision) version value.

    Instances compare lexicographically over the four components, most
    significant first.
    """

    major: int
    minor: int
    patch: int
    revision: int

    @classmethod
    def parse(cls, text: str) -> VersionString:
        """Extract the first four-part version found in ``text``.

        Args:
            text: Any string containing a version, e.g. an archive file name

        Returns:
            Parsed version

        Raises:
            NoVersionString: If ``text`` holds no four-part version
            UnparseableVersion: If the match cannot be read as integers
        """
        match = VERSION_PATTERN.search(text)
        if match is None:
            raise NoVersionString(text)

        raw = match.group(0)
        try:
            parts = [int(part) for part in raw.split(".")]
        except ValueError as e:
            raise UnparseableVersion(raw) from e

        return cls(*parts)

    @property
    def parts(self) -> tuple[int, int, int, int]:
        return (self.major, self.minor, self.patch, self.revision)

    def __str__(self) -> str:
        return ".".join(str(part) for part in self.parts)


def compare(a: VersionString, b: VersionString) -> Ordering:
    """Compare two versions field by field."""
    if a.parts < b.parts:
        return Ordering.LESS
    if a.parts > b.parts:
        return Ordering.GREATER
    return Ordering.EQUAL
