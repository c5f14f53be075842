"""
Custom exception hierarchy for report-browser.

Why a custom hierarchy:
- Callers can catch specific exceptions (e.g., UnsupportedFormatError vs
  ReadError) without relying on generic OSError/ValueError.
- Each failure carries the logical context (file name, extension) so the
  orchestration layer can build a user-facing message without re-deriving it.
"""

from __future__ import annotations


class ReportBrowserError(Exception):
    """Base exception for all report-browser errors."""


class PathSecurityError(ReportBrowserError):
    """Raised when a logical path resolves outside the storage base directory.

    Always fatal to the call. Never retried.
    """


class NotFoundError(ReportBrowserError):
    """Raised when the requested file or directory does not exist."""


class UnsupportedFormatError(ReportBrowserError):
    """Raised when a file extension has no registered parser."""

    def __init__(self, extension: str) -> None:
        super().__init__(f"Unsupported file format: {extension}")
        self.extension = extension


class ReadError(ReportBrowserError):
    """Raised when a file cannot be read or its content is malformed.

    The underlying exception is available as ``cause`` (and as
    ``__cause__`` when raised with ``raise ... from``).
    """

    def __init__(
        self,
        file_name: str,
        cause: BaseException | None = None,
        message: str | None = None,
    ) -> None:
        if message is None:
            message = f"Error reading file: {file_name}"
            if cause is not None:
                message = f"{message} ({cause})"
        super().__init__(message)
        self.file_name = file_name
        self.cause = cause


class AccessError(ReportBrowserError):
    """Raised when a directory cannot be enumerated.

    For example, permission errors when opening the directory stream.
    Per-entry attribute failures never raise this; they are logged and
    recovered during listing.
    """


class ConfigValidationError(ReportBrowserError):
    """Raised when a storage config file is empty or unusable."""
