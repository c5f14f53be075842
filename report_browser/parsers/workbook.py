"""
Spreadsheet workbook parser for report-browser.

Reads the first sheet of an ``.xlsx`` (openpyxl) or ``.xls`` (xlrd)
workbook. The first non-empty row becomes the header row; later rows are
mapped positionally onto the headers.

Cell coercion keeps the native cell types instead of re-parsing text:

- string cells -> unchanged
- date-formatted numbers -> ``YYYY-MM-DD HH:MM:SS`` text
- other numbers -> ``int`` when the value has no fractional part and fits
  in 64 bits, ``float`` otherwise
- booleans -> ``bool``
- formulas -> the formula source without the leading ``=`` (openpyxl is
  opened with ``data_only=False`` so the cached result is never used)
- blank / error cells -> ``""``

The legacy ``.xls`` format does not expose formula text through xlrd, so
formula cells there yield their cached value.

Workbooks are always closed in a ``finally`` block, including on errors.
"""

from __future__ import annotations

import datetime as dt
import logging
import math
import zipfile
from pathlib import Path

import openpyxl
import xlrd
from openpyxl.utils.exceptions import InvalidFileException

from report_browser.coerce import TypedValue, display_value, fits_int64
from report_browser.detect import file_extension
from report_browser.exceptions import ReadError
from report_browser.parsers.base import ParsedTable, Row

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_WORKBOOK_ERRORS = (
    zipfile.BadZipFile,
    InvalidFileException,
    KeyError,
    ValueError,
    xlrd.XLRDError,
)


def _format_date(value: object) -> str:
    if isinstance(value, dt.datetime):
        return value.strftime(DATE_FORMAT)
    if isinstance(value, dt.date):
        return dt.datetime.combine(value, dt.time()).strftime(DATE_FORMAT)
    if isinstance(value, dt.time):
        return value.isoformat()
    return str(value)


def coerce_number(value: int | float) -> int | float:
    """Return an ``int`` for whole numbers in the 64-bit range, else a float."""
    if isinstance(value, int):
        return value if fits_int64(value) else float(value)
    if math.isfinite(value) and value == math.trunc(value) and fits_int64(math.trunc(value)):
        return math.trunc(value)
    return float(value)


# -- xlsx (openpyxl) --------------------------------------------------------

def _coerce_openpyxl_cell(cell) -> TypedValue:
    value = cell.value
    if value is None:
        return ""
    if cell.data_type == "f":
        # ArrayFormula / DataTableFormula carry the source in .text
        text = value if isinstance(value, str) else getattr(value, "text", "") or ""
        return text[1:] if text.startswith("=") else text
    if cell.data_type == "e":
        return ""
    if isinstance(value, bool):
        return value
    if isinstance(value, (dt.datetime, dt.date, dt.time, dt.timedelta)):
        return _format_date(value)
    if isinstance(value, (int, float)):
        return coerce_number(value)
    return str(value)


def _read_xlsx(path: Path) -> list[list[TypedValue]]:
    wb = openpyxl.load_workbook(path, data_only=False)
    try:
        ws = wb.worksheets[0]
        return [
            [_coerce_openpyxl_cell(cell) for cell in row]
            for row in ws.iter_rows()
        ]
    finally:
        wb.close()


# -- xls (xlrd) -------------------------------------------------------------

def _coerce_xlrd_cell(cell, datemode: int) -> TypedValue:
    ctype = cell.ctype
    if ctype == xlrd.XL_CELL_TEXT:
        return cell.value
    if ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    if ctype == xlrd.XL_CELL_DATE:
        try:
            return _format_date(xlrd.xldate.xldate_as_datetime(cell.value, datemode))
        except OverflowError:
            logger.debug("Date serial %r out of range, keeping number", cell.value)
            return coerce_number(cell.value)
    if ctype == xlrd.XL_CELL_NUMBER:
        return coerce_number(cell.value)
    return ""


def _read_xls(path: Path) -> list[list[TypedValue]]:
    book = xlrd.open_workbook(str(path))
    try:
        if book.nsheets == 0:
            return []
        sheet = book.sheet_by_index(0)
        return [
            [_coerce_xlrd_cell(cell, book.datemode) for cell in sheet.row(r)]
            for r in range(sheet.nrows)
        ]
    finally:
        book.release_resources()


# -- Table assembly ---------------------------------------------------------

def _build_table(file_name: str, grid: list[list[TypedValue]]) -> ParsedTable:
    grid = [row for row in grid if any(v != "" for v in row)]
    if not grid:
        return ParsedTable(file_name=file_name)

    header_cells = list(grid[0])
    while header_cells and header_cells[-1] == "":
        header_cells.pop()
    headers = [display_value(v) for v in header_cells]

    rows: list[Row] = []
    for cells in grid[1:]:
        row: Row = {}
        for i, header in enumerate(headers):
            row[header] = cells[i] if i < len(cells) else ""
        rows.append(row)
    return ParsedTable(file_name=file_name, headers=headers, rows=rows)


class WorkbookParser:
    """Parser for ``.xlsx`` / ``.xls`` workbooks (first sheet only)."""

    def parse(self, path: str | Path, file_name: str) -> ParsedTable:
        path = Path(path)
        logger.info("Parsing workbook: %s", path)

        try:
            if file_extension(file_name) == "xls":
                grid = _read_xls(path)
            else:
                grid = _read_xlsx(path)
        except _WORKBOOK_ERRORS as e:
            raise ReadError(file_name, e) from e

        table = _build_table(file_name, grid)
        logger.info(
            "Parsed %d rows x %d columns", table.total_rows, len(table.headers)
        )
        return table
