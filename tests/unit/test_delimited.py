"""
Unit tests for the CSV parser (report_browser.parsers.delimited).

All tests use small inline CSV strings written to ``tmp_path``.
"""

from __future__ import annotations

import pytest

from report_browser.exceptions import ReadError
from report_browser.parsers.delimited import DelimitedTextParser


def _parse(tmp_path, content: str, name: str = "data.csv"):
    path = tmp_path / name
    path.write_bytes(content.encode("utf-8"))
    return DelimitedTextParser().parse(path, name)


class TestDelimitedTextParser:

    def test_typed_values(self, tmp_path):
        """Alphanumeric codes stay strings; numbers and booleans are typed."""
        table = _parse(tmp_path, "id,value\n1,54401E143\n2,3.14\n3,true")
        assert table.headers == ["id", "value"]
        assert table.rows == [
            {"id": 1, "value": "54401E143"},
            {"id": 2, "value": 3.14},
            {"id": 3, "value": True},
        ]
        assert table.total_rows == 3
        assert table.file_name == "data.csv"

    def test_quoted_fields(self, tmp_path):
        table = _parse(tmp_path, 'name,note\n"Smith, J","said ""hi"""\n')
        assert table.rows == [{"name": "Smith, J", "note": 'said "hi"'}]

    def test_quoted_newline(self, tmp_path):
        table = _parse(tmp_path, 'a,b\n"line1\nline2",2\n')
        assert table.rows == [{"a": "line1\nline2", "b": 2}]

    def test_extra_fields_discarded(self, tmp_path):
        table = _parse(tmp_path, "a,b\n1,2,3,4\n")
        assert table.rows == [{"a": 1, "b": 2}]

    def test_short_record_omits_trailing_headers(self, tmp_path):
        table = _parse(tmp_path, "a,b,c\n1\n")
        assert table.rows == [{"a": 1}]

    def test_empty_fields_are_empty_strings(self, tmp_path):
        table = _parse(tmp_path, "a,b,c\n1,,3\n")
        assert table.rows == [{"a": 1, "b": "", "c": 3}]

    def test_duplicate_headers_kept(self, tmp_path):
        table = _parse(tmp_path, "x,x\n1,2\n")
        assert table.headers == ["x", "x"]
        assert table.rows == [{"x": 2}]

    def test_header_only(self, tmp_path):
        table = _parse(tmp_path, "a,b\n")
        assert table.headers == ["a", "b"]
        assert table.rows == []

    def test_empty_file(self, tmp_path):
        table = _parse(tmp_path, "")
        assert table.headers == []
        assert table.total_rows == 0

    def test_blank_line_is_single_empty_field(self, tmp_path):
        table = _parse(tmp_path, "a,b\n1,2\n\n3,4\n")
        assert table.rows == [{"a": 1, "b": 2}, {"a": ""}, {"a": 3, "b": 4}]

    def test_utf8_bom_stripped(self, tmp_path):
        table = _parse(tmp_path, "\ufeffid,name\n1,x\n")
        assert table.headers == ["id", "name"]

    def test_crlf_line_endings(self, tmp_path):
        table = _parse(tmp_path, "a,b\r\n1,2\r\n")
        assert table.rows == [{"a": 1, "b": 2}]

    def test_values_are_trimmed(self, tmp_path):
        table = _parse(tmp_path, "a,b\n 5 , text \n")
        assert table.rows == [{"a": 5, "b": "text"}]

    def test_unterminated_quote_raises(self, tmp_path):
        """A malformed record aborts the whole parse."""
        with pytest.raises(ReadError, match="bad.csv") as exc_info:
            _parse(tmp_path, 'a,b\n1,2\n"open,3\n', name="bad.csv")
        assert exc_info.value.file_name == "bad.csv"
        assert exc_info.value.cause is not None

    def test_very_long_integer_field_stays_string(self, tmp_path):
        big = "1" * 5000
        table = _parse(tmp_path, f"id,label\n{big},x\n", name="big.csv")
        assert table.rows == [{"id": big, "label": "x"}]

    def test_field_larger_than_default_csv_limit(self, tmp_path):
        """Quoted fields longer than 128 KB parse like any other field."""
        note = "x" * 200_000
        table = _parse(tmp_path, f'note\n"{note}"\n', name="wide.csv")
        assert table.rows == [{"note": note}]
