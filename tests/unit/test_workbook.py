"""
Unit tests for the workbook parser (report_browser.parsers.workbook).

Workbooks are generated into ``tmp_path``: ``.xlsx`` with openpyxl and
legacy ``.xls`` with xlwt, so both readers run against real files.
"""

from __future__ import annotations

import datetime as dt
from types import SimpleNamespace

import openpyxl
import pytest
import xlrd

from report_browser.exceptions import ReadError
from report_browser.parsers import workbook
from report_browser.parsers.workbook import WorkbookParser, coerce_number


def _save(tmp_path, rows, name="book.xlsx", extra_sheet=False):
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "First"
    for row in rows:
        ws.append(row)
    if extra_sheet:
        other = wb.create_sheet("Second")
        other.append(["ignored"])
        other.append([1])
    path = tmp_path / name
    wb.save(path)
    return path


def _parse(path):
    return WorkbookParser().parse(path, path.name)


class TestCellCoercion:

    def test_integer_and_double(self, tmp_path):
        path = _save(tmp_path, [["n"], [5], [5.5], [5.0]])
        table = _parse(path)
        values = [row["n"] for row in table.rows]
        assert values == [5, 5.5, 5]
        assert isinstance(values[0], int)
        assert isinstance(values[1], float)
        assert isinstance(values[2], int)

    def test_boolean_stays_boolean(self, tmp_path):
        path = _save(tmp_path, [["flag"], [True], [False]])
        table = _parse(path)
        assert [row["flag"] for row in table.rows] == [True, False]
        assert all(isinstance(row["flag"], bool) for row in table.rows)

    def test_string_passthrough(self, tmp_path):
        path = _save(tmp_path, [["code"], ["54401E143"], [" padded "]])
        table = _parse(path)
        assert [row["code"] for row in table.rows] == ["54401E143", " padded "]

    def test_date_cell_becomes_text(self, tmp_path):
        path = _save(tmp_path, [["when"], [dt.datetime(2024, 1, 15, 9, 30)]])
        table = _parse(path)
        assert table.rows == [{"when": "2024-01-15 09:30:00"}]

    def test_formula_returns_source(self, tmp_path):
        path = _save(tmp_path, [["a", "b", "sum"], [1, 2, "=A2+B2"]])
        table = _parse(path)
        assert table.rows == [{"a": 1, "b": 2, "sum": "A2+B2"}]

    def test_missing_cells_become_empty_strings(self, tmp_path):
        path = _save(tmp_path, [["a", "b", "c"], [1, None, 3], [4]])
        table = _parse(path)
        assert table.rows == [
            {"a": 1, "b": "", "c": 3},
            {"a": 4, "b": "", "c": ""},
        ]

    @pytest.mark.parametrize("value,expected", [
        (5, 5), (5.0, 5), (-3.0, -3), (5.5, 5.5), (1e20, 1e20), (2 ** 70, float(2 ** 70)),
    ])
    def test_coerce_number(self, value, expected):
        result = coerce_number(value)
        assert result == expected
        assert type(result) is type(expected)


class TestHeaders:

    def test_headers_from_first_row(self, tmp_path):
        path = _save(tmp_path, [["id", "name"], [1, "x"], [2, "y"]])
        table = _parse(path)
        assert table.headers == ["id", "name"]
        assert table.total_rows == 2
        assert table.file_name == "book.xlsx"

    def test_non_string_headers_stringified(self, tmp_path):
        path = _save(tmp_path, [[2024, 1.5, True], [1, 2, 3]])
        table = _parse(path)
        assert table.headers == ["2024", "1.5", "true"]
        assert table.rows == [{"2024": 1, "1.5": 2, "true": 3}]

    def test_cells_beyond_headers_ignored(self, tmp_path):
        path = _save(tmp_path, [["a"], [1, 2, 3]])
        table = _parse(path)
        assert table.rows == [{"a": 1}]

    def test_wholly_empty_rows_skipped(self, tmp_path):
        wb = openpyxl.Workbook()
        ws = wb.active
        ws["A1"] = "a"
        ws["A3"] = 1
        path = tmp_path / "gaps.xlsx"
        wb.save(path)
        table = _parse(path)
        assert table.rows == [{"a": 1}]

    def test_empty_workbook(self, tmp_path):
        path = _save(tmp_path, [])
        table = _parse(path)
        assert table.headers == []
        assert table.rows == []

    def test_only_first_sheet_read(self, tmp_path):
        path = _save(tmp_path, [["a"], [1]], extra_sheet=True)
        table = _parse(path)
        assert table.headers == ["a"]
        assert table.rows == [{"a": 1}]


class TestErrors:

    def test_corrupt_xlsx_raises_read_error(self, tmp_path):
        path = tmp_path / "broken.xlsx"
        path.write_bytes(b"not a zip archive")
        with pytest.raises(ReadError) as exc_info:
            _parse(path)
        assert exc_info.value.file_name == "broken.xlsx"

    def test_corrupt_xls_raises_read_error(self, tmp_path):
        path = tmp_path / "broken.xls"
        path.write_bytes(b"not a BIFF file at all")
        with pytest.raises(ReadError):
            _parse(path)

    def test_workbook_closed_on_error(self, tmp_path, monkeypatch):
        """The workbook is released even when reading the sheet fails."""
        path = _save(tmp_path, [["a"], [1]])
        closed = []
        real_load = openpyxl.load_workbook

        def fake_load(*args, **kwargs):
            wb = real_load(*args, **kwargs)
            wb.close = lambda: closed.append(True)
            return wb

        def boom(cell):
            raise ValueError("bad cell")

        monkeypatch.setattr(workbook.openpyxl, "load_workbook", fake_load)
        monkeypatch.setattr(workbook, "_coerce_openpyxl_cell", boom)
        with pytest.raises(ReadError):
            _parse(path)
        assert closed == [True]


class TestXlsDispatch:

    def test_xls_uses_xlrd_reader(self, tmp_path, monkeypatch):
        path = tmp_path / "legacy.xls"
        path.write_bytes(b"")
        calls = []

        def fake_read_xls(p):
            calls.append(p)
            return [["id", "label"], [1, "one"], ["", ""], [2]]

        monkeypatch.setattr(workbook, "_read_xls", fake_read_xls)
        table = _parse(path)
        assert calls == [path]
        assert table.headers == ["id", "label"]
        assert table.rows == [{"id": 1, "label": "one"}, {"id": 2, "label": ""}]


def _save_xls(tmp_path, rows, name="legacy.xls"):
    xlwt = pytest.importorskip("xlwt")
    wb = xlwt.Workbook()
    ws = wb.add_sheet("First")
    date_style = xlwt.easyxf(num_format_str="YYYY-MM-DD HH:MM:SS")
    for r, row in enumerate(rows):
        for c, value in enumerate(row):
            if value is None:
                continue
            if isinstance(value, dt.datetime):
                ws.write(r, c, value, date_style)
            else:
                ws.write(r, c, value)
    other = wb.add_sheet("Second")
    other.write(0, 0, "ignored")
    path = tmp_path / name
    wb.save(str(path))
    return path


class TestXlsFiles:
    """Real .xls files read through xlrd."""

    ROWS = [
        ["name", "count", "ratio", "active", "when", "note"],
        ["north", 5, 5.5, True, dt.datetime(2024, 3, 1, 12, 30), None],
        ["south", -2, 0.25, False, dt.datetime(2024, 1, 2), "x"],
    ]

    def test_native_cell_types(self, tmp_path):
        table = _parse(_save_xls(tmp_path, self.ROWS))
        assert table.headers == ["name", "count", "ratio", "active", "when", "note"]
        first = table.rows[0]
        assert first == {
            "name": "north",
            "count": 5,
            "ratio": 5.5,
            "active": True,
            "when": "2024-03-01 12:30:00",
            "note": "",
        }
        assert isinstance(first["count"], int) and not isinstance(first["count"], bool)
        assert first["active"] is True
        assert table.rows[1] == {
            "name": "south",
            "count": -2,
            "ratio": 0.25,
            "active": False,
            "when": "2024-01-02 00:00:00",
            "note": "x",
        }

    def test_first_sheet_only(self, tmp_path):
        table = _parse(_save_xls(tmp_path, self.ROWS))
        assert table.total_rows == 2
        assert "ignored" not in table.headers

    def test_empty_rows_skipped(self, tmp_path):
        rows = [[None], ["id", "label"], [None, None], [1, "one"]]
        table = _parse(_save_xls(tmp_path, rows))
        assert table.headers == ["id", "label"]
        assert table.rows == [{"id": 1, "label": "one"}]

    def test_resources_released_on_error(self, tmp_path, monkeypatch):
        path = _save_xls(tmp_path, self.ROWS)
        released = []
        real_open = xlrd.open_workbook

        def fake_open(*args, **kwargs):
            book = real_open(*args, **kwargs)
            book.release_resources = lambda: released.append(True)
            return book

        def boom(cell, datemode):
            raise ValueError("bad cell")

        monkeypatch.setattr(workbook.xlrd, "open_workbook", fake_open)
        monkeypatch.setattr(workbook, "_coerce_xlrd_cell", boom)
        with pytest.raises(ReadError):
            _parse(path)
        assert released == [True]

    def test_not_an_xls_file(self, tmp_path):
        path = tmp_path / "fake.xls"
        path.write_bytes(b"not a workbook at all")
        with pytest.raises(ReadError, match="fake.xls"):
            _parse(path)


class TestXlrdCellCoercion:

    def test_out_of_range_date_keeps_number(self):
        cell = SimpleNamespace(ctype=xlrd.XL_CELL_DATE, value=1e10)
        assert workbook._coerce_xlrd_cell(cell, 0) == 10_000_000_000

    def test_error_and_empty_cells(self):
        for ctype in (xlrd.XL_CELL_ERROR, xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
            cell = SimpleNamespace(ctype=ctype, value=7)
            assert workbook._coerce_xlrd_cell(cell, 0) == ""

    def test_1904_datemode(self):
        cell = SimpleNamespace(ctype=xlrd.XL_CELL_DATE, value=1.5)
        assert workbook._coerce_xlrd_cell(cell, 1) == "1904-01-02 12:00:00"
