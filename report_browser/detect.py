"""
Format and delimiter detection for report-browser.

Two kinds of detection live here:

1. **Format dispatch** -- ``get_parser()`` maps a normalized file extension
   to the parser that handles it. Unknown extensions raise
   ``UnsupportedFormatError`` before any bytes are read.

2. **Delimiter detection** -- ``detect_delimiter()`` picks the field
   separator of a free-text file from its first line. Candidates are tried
   in a fixed priority order: tab -> pipe -> semicolon -> a run of two or
   more spaces. The first one that splits the line into more than one field
   wins.

Splitting follows regex-split semantics with trailing empty fields removed,
so a line that merely ends with a separator (``"total\\t"``) does not count
as delimited.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from report_browser.exceptions import UnsupportedFormatError
from report_browser.parsers.base import TableParser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Delimiter:
    """A named field separator pattern."""
    name: str
    pattern: re.Pattern[str]


DELIMITERS: tuple[Delimiter, ...] = (
    Delimiter("tab", re.compile("\t")),
    Delimiter("pipe", re.compile(r"\|")),
    Delimiter("semicolon", re.compile(";")),
    Delimiter("spaces", re.compile(r" {2,}")),
)

# Maps normalized extension to a parser factory
_PARSER_MAP: dict[str, type] = {}


def _get_parser_map() -> dict[str, type]:
    """Lazily build the parser map to avoid circular imports."""
    if not _PARSER_MAP:
        from report_browser.parsers.delimited import DelimitedTextParser
        from report_browser.parsers.text import FreeTextParser
        from report_browser.parsers.workbook import WorkbookParser

        _PARSER_MAP["xlsx"] = WorkbookParser
        _PARSER_MAP["xls"] = WorkbookParser
        _PARSER_MAP["csv"] = DelimitedTextParser
        _PARSER_MAP["txt"] = FreeTextParser
    return _PARSER_MAP


def supported_extensions() -> list[str]:
    """Extensions that have a registered parser."""
    return sorted(_get_parser_map())


def file_extension(file_name: str) -> str:
    """Return the text after the last ``.``, lowercased.

    A name without a dot yields the whole name.
    """
    return file_name.rsplit(".", 1)[-1].lower()


def get_parser(file_name: str) -> TableParser:
    """Return a parser instance for *file_name* based on its extension.

    Raises:
        UnsupportedFormatError: If no parser handles the extension.
    """
    extension = file_extension(file_name)
    parser_cls = _get_parser_map().get(extension)
    if parser_cls is None:
        raise UnsupportedFormatError(extension)
    logger.debug("Selected %s for %s", parser_cls.__name__, file_name)
    return parser_cls()


def split_fields(line: str, delimiter: Delimiter) -> list[str]:
    """Split *line* on *delimiter*, dropping trailing empty fields."""
    parts = delimiter.pattern.split(line)
    if len(parts) == 1:
        return parts
    while parts and parts[-1] == "":
        parts.pop()
    return parts


def detect_delimiter(line: str) -> Delimiter | None:
    """Pick the first candidate delimiter that splits *line* into >1 field.

    Returns:
        The matching Delimiter, or None when the line is not delimited.
    """
    for delimiter in DELIMITERS:
        if len(split_fields(line, delimiter)) > 1:
            return delimiter
    return None
