"""
Tabular file reading for report-browser.

``parse_file()`` is the single entry point that turns a resolved file path
into a ``ParsedTable``:

1. Verify the file exists (``NotFoundError`` otherwise).
2. Pick the parser from the extension (``UnsupportedFormatError`` for
   anything outside xlsx / xls / csv / txt). This happens before any bytes
   are read, so an unsupported file never yields partial headers.
3. Run the parser. Low-level I/O and decoding failures are wrapped into
   ``ReadError`` carrying the file name and the original cause.

This module has no dependency on the storage configuration -- it works
purely with paths, keeping the read layer decoupled from the sandbox.
"""

from __future__ import annotations

import logging
from pathlib import Path

from report_browser.detect import get_parser
from report_browser.exceptions import NotFoundError, ReadError
from report_browser.parsers.base import ParsedTable

logger = logging.getLogger(__name__)


def parse_file(path: str | Path, file_name: str) -> ParsedTable:
    """Parse a report file into a ParsedTable.

    Args:
        path: Resolved real path of the file.
        file_name: The file name as requested by the caller; its extension
            selects the parser and it is echoed back in the result.

    Returns:
        The parsed table.

    Raises:
        NotFoundError: If *path* does not exist.
        UnsupportedFormatError: If the extension has no parser.
        ReadError: If the file cannot be accessed, read or parsed.
    """
    path = Path(path)
    try:
        path.stat()
    except (FileNotFoundError, NotADirectoryError) as e:
        raise NotFoundError(f"File not found: {path}") from e
    except OSError as e:
        logger.error("Cannot access file %s: %s", path, e)
        raise ReadError(file_name, e) from e

    parser = get_parser(file_name)

    try:
        table = parser.parse(path, file_name)
    except ReadError:
        raise
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Error reading file %s: %s", path, e)
        raise ReadError(file_name, e) from e

    logger.info(
        "Parsed %s: %d headers, %d rows",
        file_name, len(table.headers), table.total_rows,
    )
    return table
