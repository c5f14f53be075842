"""
Free-text parser for report-browser.

Plain ``.txt`` exports come in many shapes: tab-separated dumps, pipe or
semicolon tables, column-aligned reports padded with spaces, or simply
prose. The parser asks ``detect_delimiter`` about the first line:

- A delimiter was found -> the first line holds the headers and every
  later non-blank line is split on the same delimiter, trimmed and coerced.
- No delimiter -> single-column mode: header ``Content`` and one row per
  non-blank line, kept exactly as written.
"""

from __future__ import annotations

import logging
from pathlib import Path

from report_browser.coerce import coerce_value
from report_browser.detect import detect_delimiter, split_fields
from report_browser.parsers.base import ParsedTable, Row, zip_record

logger = logging.getLogger(__name__)

CONTENT_HEADER = "Content"


def _read_lines(path: Path) -> list[str]:
    with open(path, "r", encoding="utf-8-sig") as f:
        return [line.rstrip("\n") for line in f]


class FreeTextParser:
    """Parser for free-form ``.txt`` files."""

    def parse(self, path: str | Path, file_name: str) -> ParsedTable:
        path = Path(path)
        logger.info("Parsing text file: %s", path)

        lines = _read_lines(path)
        if not lines:
            return ParsedTable(file_name=file_name, headers=[CONTENT_HEADER])

        delimiter = detect_delimiter(lines[0])
        if delimiter is None:
            logger.debug("No delimiter detected, using single-column mode")
            rows: list[Row] = [
                {CONTENT_HEADER: line} for line in lines if line.strip()
            ]
            return ParsedTable(
                file_name=file_name, headers=[CONTENT_HEADER], rows=rows
            )

        logger.debug("Detected delimiter %r", delimiter.name)
        headers = split_fields(lines[0], delimiter)
        rows = []
        for line in lines[1:]:
            if not line.strip():
                continue
            fields = split_fields(line, delimiter)
            rows.append(zip_record(headers, fields, coerce_value))

        logger.info("Parsed %d rows x %d columns", len(rows), len(headers))
        return ParsedTable(file_name=file_name, headers=headers, rows=rows)
