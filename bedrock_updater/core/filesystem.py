"""Archive extraction and directory merge helpers."""

from __future__ import annotations

import io
import shutil
import zipfile
from pathlib import Path, PurePosixPath

import structlog

from bedrock_updater.core.errors import CopyFailed, ServerZipExtractFailed

logger = structlog.get_logger()

# zipfile.ZipInfo.create_system value for archives built on Unix
_UNIX_SYSTEM = 3


def _common_top_level(names: list[PurePosixPath]) -> str | None:
    """Return the single directory wrapping every member, if there is one."""
    tops = {name.parts[0] for name in names}
    if len(tops) != 1:
        return None

    top = tops.pop()
    # A lone file at the root is not a wrapping directory
    if not any(len(name.parts) > 1 for name in names):
        return None
    return top


def _member_paths(archive: zipfile.ZipFile) -> list[tuple[zipfile.ZipInfo, PurePosixPath]]:
    members = []
    for info in archive.infolist():
        name = PurePosixPath(info.filename.replace("\\", "/"))
        if not name.parts:
            continue
        if name.is_absolute() or ".." in name.parts:
            raise ServerZipExtractFailed(f"unsafe member path {info.filename!r}")
        members.append((info, name))
    return members


def extract_archive(data: bytes, dest: Path, strip_top_level: bool = True) -> None:
    """Expand a zip archive into ``dest``.

    Args:
        data: Raw archive bytes
        dest: Directory that receives the archive contents
        strip_top_level: Drop a single directory wrapping every member

    Raises:
        ServerZipExtractFailed: If the archive is corrupt, holds unsafe
            member paths, or cannot be written
    """
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            members = _member_paths(archive)
            prefix = None
            if strip_top_level:
                prefix = _common_top_level([name for _, name in members])

            for info, name in members:
                parts = name.parts[1:] if prefix is not None else name.parts
                if not parts:
                    continue
                target = dest.joinpath(*parts)

                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue

                target.parent.mkdir(parents=True, exist_ok=True)
                with archive.open(info) as src, open(target, "wb") as dst:
                    shutil.copyfileobj(src, dst)

                # Keep the executable bit on the server binary
                mode = (info.external_attr >> 16) & 0o777
                if info.create_system == _UNIX_SYSTEM and mode:
                    target.chmod(mode)
    except ServerZipExtractFailed:
        raise
    except (zipfile.BadZipFile, zipfile.LargeZipFile, EOFError, OSError) as e:
        raise ServerZipExtractFailed(str(e)) from e

    logger.debug("archive_extracted", dest=str(dest), members=len(members))


def copy_file(src: Path, dest: Path) -> None:
    """Copy a single file over ``dest``, keeping its permission bits."""
    if dest.is_dir():
        raise CopyFailed(src, dest, "destination is a directory")
    try:
        shutil.copy2(src, dest)
    except OSError as e:
        raise CopyFailed(src, dest, str(e)) from e


def copy_merge(src: Path, dest: Path) -> None:
    """Merge the tree at ``src`` into ``dest``.

    Conflicting files are overwritten. Files in ``dest`` with no
    counterpart in ``src`` are left alone; ``dest`` is never cleared first.
    """
    if dest.exists() and not dest.is_dir():
        raise CopyFailed(src, dest, "destination is not a directory")
    try:
        shutil.copytree(src, dest, dirs_exist_ok=True)
    except shutil.Error as e:
        raise CopyFailed(src, dest, str(e)) from e
    except OSError as e:
        raise CopyFailed(src, dest, str(e)) from e
