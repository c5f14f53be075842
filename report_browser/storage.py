"""
Storage handle for report-browser.

The ``Storage`` class is a **handle object** that encapsulates a
``StorageConfig``. Once created (via ``report_browser.open()``), it remembers
the base directory and allowed extensions so callers only ever pass logical
paths.

Every operation resolves its logical path through the sandbox first and
then delegates to the browser or reader modules, which only see real
paths. The handle keeps no state between calls beyond the frozen config,
so one instance can be shared by concurrent request handlers.
"""

from __future__ import annotations

import logging
from pathlib import Path

from report_browser.browser import (
    FileDescriptor,
    FolderItem,
    is_valid_path,
    list_folders,
    list_report_files,
    scan_file_details,
)
from report_browser.config import StorageConfig
from report_browser.parsers.base import ParsedTable
from report_browser.reader import parse_file
from report_browser.sandbox import ROOT, join_logical, resolve

logger = logging.getLogger(__name__)


class Storage:
    """Handle object for a sandboxed report storage tree.

    Attributes:
        config: The frozen ``StorageConfig``.
    """

    def __init__(self, config: StorageConfig) -> None:
        self.config = config

    @property
    def base_dir(self) -> Path:
        return self.config.base_path

    def __repr__(self) -> str:
        return (
            f"Storage(base_dir={self.config.base_dir!r}, "
            f"allowed_extensions={list(self.config.allowed_extensions)})"
        )

    # -- Browsing -----------------------------------------------------------

    def resolve(self, logical_path: str) -> Path:
        """Resolve a logical path inside the sandbox.

        Raises:
            PathSecurityError: If the path escapes the base directory.
        """
        return resolve(self.config.base_dir, logical_path)

    def list_folders(self, logical_path: str = ROOT) -> list[FolderItem]:
        """List the folders and files directly under *logical_path*.

        Raises:
            PathSecurityError: If the path escapes the base directory.
            AccessError: If the directory cannot be read.
        """
        directory = self.resolve(logical_path)
        return list_folders(directory, logical_path)

    def is_valid_path(self, logical_path: str) -> bool:
        """True if *logical_path* is an existing directory inside the sandbox."""
        return is_valid_path(self.config.base_dir, logical_path)

    # -- Report files -------------------------------------------------------

    def list_report_files(self, report_path: str) -> list[str]:
        """Allowed report file names under *report_path*, ascending."""
        directory = self.resolve(report_path)
        return list_report_files(directory, self.config.allowed_extensions)

    def scan_file_details(self, report_path: str) -> list[FileDescriptor]:
        """Allowed report files under *report_path* with size and mtime."""
        directory = self.resolve(report_path)
        return scan_file_details(directory, self.config.allowed_extensions)

    def parse_file(self, report_path: str, file_name: str) -> ParsedTable:
        """Parse *file_name* inside the report directory *report_path*.

        The file name is resolved through the sandbox as well, so names
        such as ``../../secret.csv`` are rejected.

        Raises:
            PathSecurityError: If the file path escapes the base directory.
            NotFoundError: If the file does not exist.
            UnsupportedFormatError: If the extension has no parser.
            ReadError: If the file cannot be read or is malformed.
        """
        logger.info("parse_file() -- report_path=%s, file=%s", report_path, file_name)
        path = self.resolve(join_logical(report_path, file_name))
        return parse_file(path, file_name)
