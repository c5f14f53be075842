"""
Demo script: browse a storage tree and parse its report files via the public API.

Usage:
    uv run python scripts/browse.py BASE_DIR_OR_CONFIG [LOGICAL_PATH] [--parse]

Lists the folders and files under LOGICAL_PATH (default ``/``). With
``--parse``, also parses every allowed report file found there and prints
its headers and the first few rows.
"""

from __future__ import annotations

import logging
import sys

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("browse")

PREVIEW_ROWS = 5


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> int:
    import report_browser
    from report_browser.exceptions import ReportBrowserError

    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    parse = "--parse" in sys.argv
    if not args:
        print(__doc__)
        return 2

    storage = report_browser.open(args[0])
    logical_path = args[1] if len(args) > 1 else "/"
    log.info("Opened %r", storage)

    if not storage.is_valid_path(logical_path):
        log.warning("Not a directory inside the sandbox: %s", logical_path)
        return 1

    for item in storage.list_folders(logical_path):
        kind = "DIR " if item.is_directory else "FILE"
        marker = "+" if item.has_subfolders else " "
        log.info(
            "%s %s %-40s %12s  %s",
            kind, marker, item.path, f"{item.size:,}", item.last_modified,
        )

    if not parse:
        return 0

    for name in storage.list_report_files(logical_path):
        log.info("=" * 70)
        try:
            table = storage.parse_file(logical_path, name)
        except ReportBrowserError as e:
            log.error("SKIP  %s  (%s)", name, e)
            continue
        log.info("%s: %d rows, headers=%s", name, table.total_rows, table.headers)
        for row in table.rows[:PREVIEW_ROWS]:
            log.info("  %s", row)

    log.info("Done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
