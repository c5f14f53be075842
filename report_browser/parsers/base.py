"""
Shared table shape and parser protocol for report-browser.

All format-specific parsers satisfy the same contract:
1. parse() takes a resolved file path and the caller-facing file name.
2. It returns a ParsedTable: ordered headers plus one mapping per record.

Parsers are plain classes selected from a table keyed by file extension
(see ``detect.py``); they share this protocol rather than a base class.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

import pandas as pd

from report_browser.coerce import TypedValue

Row = dict[str, TypedValue]


@dataclass
class ParsedTable:
    """Standardized output from any parser.

    Attributes:
        file_name: The file name as given by the caller.
        headers: Column headers in source order. Duplicates are kept as-is;
            a later duplicate overwrites the earlier value in each row.
        rows: One mapping per record, header -> TypedValue. A row may hold
            fewer keys than there are headers (short record) but never more.
    """
    file_name: str
    headers: list[str] = field(default_factory=list)
    rows: list[Row] = field(default_factory=list)

    @property
    def total_rows(self) -> int:
        return len(self.rows)

    def to_dict(self) -> dict[str, Any]:
        """Plain mapping suitable for JSON responses."""
        return {
            "fileName": self.file_name,
            "headers": list(self.headers),
            "data": [dict(row) for row in self.rows],
            "totalRows": self.total_rows,
        }

    def to_frame(self) -> pd.DataFrame:
        """Return the rows as a DataFrame with one column per distinct header.

        Keys missing from a short row become missing values.
        """
        columns = list(dict.fromkeys(self.headers))
        return pd.DataFrame.from_records(self.rows, columns=columns)


class TableParser(Protocol):
    """Structural interface implemented by every format parser."""

    def parse(self, path: str | Path, file_name: str) -> ParsedTable:
        """Parse *path* into a ParsedTable.

        Raises:
            ReadError: If the file cannot be read or is malformed.
        """
        ...


def zip_record(
    headers: Sequence[str],
    fields: Sequence[str],
    convert=None,
) -> Row:
    """Map *fields* onto *headers* positionally.

    Only the first ``min(len(fields), len(headers))`` positions are used:
    extra fields are dropped and missing trailing fields are simply absent.
    """
    row: Row = {}
    for header, value in zip(headers, fields):
        row[header] = convert(value) if convert is not None else value
    return row
