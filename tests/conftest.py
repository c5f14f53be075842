"""
Shared test fixtures for report-browser tests.

All storage trees are synthetic and built under ``tmp_path``; no real
report share is required.

Default tree (``storage_root``)::

    <root>/
        b/
        a/
            nested/
        c.txt
"""

from pathlib import Path

import pytest

from report_browser.config import StorageConfig
from report_browser.storage import Storage


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (exercises the full Storage handle)",
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def storage_root(tmp_path) -> Path:
    """A small storage tree: directories ``a`` (with a child dir) and ``b``, file ``c.txt``."""
    root = tmp_path / "base"
    root.mkdir()
    (root / "b").mkdir()
    (root / "a").mkdir()
    (root / "a" / "nested").mkdir()
    (root / "c.txt").write_text("hello world\n", encoding="utf-8")
    return root


@pytest.fixture()
def storage(storage_root) -> Storage:
    return Storage(StorageConfig(base_dir=str(storage_root)))

