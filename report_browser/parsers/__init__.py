"""
Parsers sub-package for report-browser.

Contains format-specific parsers that convert report files into the shared
``ParsedTable`` shape (headers + typed row mappings).

Design: Strategy table
- base.py defines ParsedTable and the TableParser protocol.
- workbook.py implements WorkbookParser for .xlsx / .xls (first sheet).
- delimited.py implements DelimitedTextParser for quote-aware .csv files.
- text.py implements FreeTextParser for .txt files with delimiter detection.

The extension -> parser table lives in detect.py and is consulted by
reader.parse_file() at runtime.
"""
