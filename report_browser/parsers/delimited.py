"""
Comma-delimited text parser for report-browser.

The first record is the header row; every later record is zipped against
it and each field is run through ``coerce_value``. Splitting is quote-aware
(the ``csv`` module in strict mode), so ``"a,b"`` stays one field and an
unterminated quote is reported instead of silently swallowing the rest of
the file.
"""

from __future__ import annotations

import csv
import logging
import sys
from pathlib import Path

from report_browser.coerce import coerce_value
from report_browser.exceptions import ReadError
from report_browser.parsers.base import ParsedTable, Row, zip_record

logger = logging.getLogger(__name__)


def _lift_field_size_limit() -> None:
    """Remove the csv module's per-field size cap (128 KB by default).

    The limit is a C long, so ``sys.maxsize`` overflows on platforms where
    long is 32 bits; step down until it is accepted.
    """
    limit = sys.maxsize
    while True:
        try:
            csv.field_size_limit(limit)
            return
        except OverflowError:
            limit //= 2


class DelimitedTextParser:
    """Parser for CSV files."""

    def __init__(self, delimiter: str = ",", quotechar: str = '"') -> None:
        self.delimiter = delimiter
        self.quotechar = quotechar

    def parse(self, path: str | Path, file_name: str) -> ParsedTable:
        path = Path(path)
        logger.info("Parsing delimited file: %s", path)
        _lift_field_size_limit()

        headers: list[str] = []
        rows: list[Row] = []

        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            reader = csv.reader(
                f,
                delimiter=self.delimiter,
                quotechar=self.quotechar,
                strict=True,
            )
            first = True
            try:
                for record in reader:
                    # An empty line is a single empty field
                    if not record:
                        record = [""]
                    if first:
                        headers = list(record)
                        first = False
                        continue
                    rows.append(zip_record(headers, record, coerce_value))
            except csv.Error as e:
                raise ReadError(
                    file_name,
                    e,
                    message=(
                        f"Error parsing CSV file: {file_name} "
                        f"(line {reader.line_num}: {e})"
                    ),
                ) from e

        logger.info("Parsed %d rows x %d columns", len(rows), len(headers))
        return ParsedTable(file_name=file_name, headers=headers, rows=rows)
