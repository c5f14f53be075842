"""
Read-only directory browsing for report-browser.

Provides:
- ``list_folders()``: immediate children of a directory as ``FolderItem``
  summaries, directories first, then case-insensitive by name.
- ``is_valid_path()``: whether a logical path names an existing directory.
- ``list_report_files()`` / ``scan_file_details()``: the report files
  (filtered by allowed extension) inside a report directory.

Failure policy:
- A missing, unusable or non-directory target gives an empty listing.
- Report scans raise ``NotFoundError`` for a missing directory and
  ``AccessError`` when the path cannot be checked at all.
- Per-entry failures (unreadable attributes, broken links) are logged and
  recovered; they never abort the listing.
- Failure to open or iterate the directory itself raises ``AccessError``.
"""

from __future__ import annotations

import datetime as dt
import logging
import os
import stat
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from report_browser.detect import file_extension
from report_browser.exceptions import (
    AccessError,
    NotFoundError,
    ReportBrowserError,
)
from report_browser.sandbox import join_logical, resolve

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class FolderItem:
    """One entry of a directory listing.

    Attributes:
        name: Final path segment.
        path: Logical, slash-rooted path as seen by callers.
        is_directory: True for directories (symlinks are followed).
        has_subfolders: True iff at least one immediate child is a
            directory. Always False for files.
        size: Size in bytes, 0 if the attributes could not be read.
        last_modified: Local modification time as
            ``YYYY-MM-DD HH:MM:SS``, empty if unreadable.
    """
    name: str
    path: str
    is_directory: bool
    has_subfolders: bool = False
    size: int = 0
    last_modified: str = ""


@dataclass(frozen=True)
class FileDescriptor:
    """A report file found by ``scan_file_details()``."""
    name: str
    size: int
    last_modified: dt.datetime
    extension: str


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------

def _format_timestamp(mtime: float) -> str:
    return dt.datetime.fromtimestamp(mtime).strftime(TIMESTAMP_FORMAT)


def _has_subdirectories(path: str | Path) -> bool:
    """Return True on the first child directory found (no recursion)."""
    try:
        with os.scandir(path) as it:
            return any(entry.is_dir() for entry in it)
    except OSError as e:
        logger.debug("Could not check subdirectories for %s: %s", path, e)
        return False


def _make_folder_item(entry: os.DirEntry, logical_parent: str) -> FolderItem:
    is_directory = entry.is_dir()
    has_subfolders = is_directory and _has_subdirectories(entry.path)

    size = 0
    last_modified = ""
    try:
        st = entry.stat()
        size, last_modified = st.st_size, _format_timestamp(st.st_mtime)
    except (OSError, ValueError, OverflowError) as e:
        logger.debug("Could not read attributes for %s: %s", entry.path, e)

    return FolderItem(
        name=entry.name,
        path=join_logical(logical_parent, entry.name),
        is_directory=is_directory,
        has_subfolders=has_subfolders,
        size=size,
        last_modified=last_modified,
    )


def _sort_key(item: FolderItem) -> tuple[bool, str, str]:
    return (not item.is_directory, item.name.lower(), item.name)


def _allowed_set(allowed_extensions: Iterable[str]) -> set[str]:
    return {e.lower() for e in allowed_extensions}


def _report_files(directory: Path, allowed_extensions: Iterable[str]) -> list[Path]:
    """Regular files in *directory* whose extension is allowed."""
    try:
        is_dir = stat.S_ISDIR(directory.stat().st_mode)
    except (FileNotFoundError, NotADirectoryError):
        is_dir = False
    except OSError as e:
        raise AccessError(f"Cannot access report path: {directory} ({e})") from e
    if not is_dir:
        raise NotFoundError(
            f"Report path does not exist or is not a directory: {directory}"
        )
    allowed = _allowed_set(allowed_extensions)
    try:
        return [
            p for p in directory.iterdir()
            if p.is_file() and file_extension(p.name) in allowed
        ]
    except OSError as e:
        raise AccessError(f"Error scanning report files: {e}") from e


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def list_folders(directory: str | Path, logical_path: str = "/") -> list[FolderItem]:
    """List the immediate children of a resolved directory.

    Args:
        directory: Resolved real path of the directory.
        logical_path: The logical path *directory* was resolved from; child
            paths are built from it.

    Returns:
        Directories first, then files, each group sorted case-insensitively.
        Empty if *directory* does not exist or is not a directory.

    Raises:
        AccessError: If the directory cannot be opened or iterated.
    """
    directory = Path(directory)
    logger.debug("Browsing folders in: %s", directory)

    try:
        exists = directory.exists()
        is_dir = exists and directory.is_dir()
    except OSError as e:
        logger.warning("Cannot access path %s: %s", directory, e)
        return []
    if not exists:
        logger.warning("Path does not exist: %s", directory)
        return []
    if not is_dir:
        logger.warning("Path is not a directory: %s", directory)
        return []

    items: list[FolderItem] = []
    try:
        with os.scandir(directory) as it:
            for entry in it:
                try:
                    items.append(_make_folder_item(entry, logical_path))
                except OSError as e:
                    logger.warning("Error processing item %s: %s", entry.path, e)
    except OSError as e:
        logger.error("Error reading directory %s: %s", directory, e)
        raise AccessError(f"Cannot read directory: {directory}") from e

    items.sort(key=_sort_key)
    logger.debug("Found %d items in %s", len(items), directory)
    return items


def is_valid_path(base: str | Path, logical_path: str) -> bool:
    """Return True if *logical_path* resolves to an existing directory.

    Never raises: security violations and I/O errors both yield False.
    """
    try:
        resolved = resolve(base, logical_path)
        return resolved.is_dir()
    except (ReportBrowserError, OSError, ValueError) as e:
        logger.debug("Path validation failed for %r: %s", logical_path, e)
        return False


def list_report_files(
    directory: str | Path,
    allowed_extensions: Iterable[str],
) -> list[str]:
    """Names of the allowed report files in *directory*, ascending.

    Raises:
        NotFoundError: If *directory* is missing or not a directory.
        AccessError: If the directory cannot be read.
    """
    files = _report_files(Path(directory), allowed_extensions)
    return sorted(p.name for p in files)


def scan_file_details(
    directory: str | Path,
    allowed_extensions: Iterable[str],
) -> list[FileDescriptor]:
    """Descriptors of the allowed report files in *directory*, by name.

    Raises:
        NotFoundError: If *directory* is missing or not a directory.
        AccessError: If the directory or a file's attributes cannot be read.
    """
    details: list[FileDescriptor] = []
    for p in _report_files(Path(directory), allowed_extensions):
        try:
            st = p.stat()
        except OSError as e:
            raise AccessError(f"Error getting file details: {e}") from e
        details.append(
            FileDescriptor(
                name=p.name,
                size=st.st_size,
                last_modified=dt.datetime.fromtimestamp(st.st_mtime),
                extension=file_extension(p.name),
            )
        )
    details.sort(key=lambda d: d.name)
    return details
