"""
report-browser: sandboxed browsing and tabular parsing of report files.

Public API surface:

- ``open(path, ...)`` -- **recommended entry point**. Polymorphic: accepts
  either a storage config YAML file or a base directory and returns a
  ``Storage`` handle.

- ``Storage`` -- handle exposing ``list_folders``, ``is_valid_path``,
  ``parse_file``, ``list_report_files`` and ``scan_file_details``; every
  method takes logical, slash-rooted paths.

- ``parse_file(path, file_name)`` -- parse an already-resolved file without
  a sandbox (xlsx / xls / csv / txt).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from report_browser.browser import FileDescriptor, FolderItem
from report_browser.config import (
    DEFAULT_ALLOWED_EXTENSIONS,
    StorageConfig,
    load_config,
)
from report_browser.parsers.base import ParsedTable
from report_browser.reader import parse_file
from report_browser.storage import Storage

__all__ = [
    "open",
    "parse_file",
    "FileDescriptor",
    "FolderItem",
    "ParsedTable",
    "Storage",
    "StorageConfig",
]

logger = logging.getLogger(__name__)


def open(
    path: str | Path,
    allowed_extensions: str | Iterable[str] | None = None,
) -> Storage:
    """Single entry point: open a storage config file or a base directory.

    Polymorphic behaviour based on *path*:

    - **YAML file** (``.yaml`` / ``.yml``): Loads the config and returns a
      ``Storage`` handle. *allowed_extensions*, when given, overrides the
      value from the file.

    - **Anything else**: Used as the base directory. Extensions default to
      ``xlsx, xls, csv, txt``.

    Examples::

        storage = report_browser.open("/mnt/nas/reports")
        storage.list_folders("/")

        storage = report_browser.open("config/storage.yaml")
        table = storage.parse_file("/finance/2024", "summary.csv")
    """
    p = Path(path)

    if p.suffix.lower() in (".yaml", ".yml"):
        logger.info("open() -- loading config from %s", path)
        config = load_config(p)
        if allowed_extensions is not None:
            config = StorageConfig(
                base_dir=config.base_dir,
                allowed_extensions=allowed_extensions,
            )
        return Storage(config)

    logger.info("open() -- base_dir=%s", path)
    config = StorageConfig(
        base_dir=str(p),
        allowed_extensions=(
            allowed_extensions
            if allowed_extensions is not None
            else DEFAULT_ALLOWED_EXTENSIONS
        ),
    )
    return Storage(config)
