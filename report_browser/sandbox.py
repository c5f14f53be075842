"""
Path sandbox for report-browser.

Maps the logical, slash-rooted paths that callers see (``/``,
``/finance/2024``) onto real locations below the configured base
directory, and rejects anything that would escape it.

Resolution is purely lexical: ``.`` and ``..`` segments are collapsed with
``os.path.normpath`` and containment is checked component by component, so
``/base-evil`` never passes as a child of ``/base``. No existence check is
done here.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePath

from report_browser.exceptions import PathSecurityError

logger = logging.getLogger(__name__)

ROOT = "/"


def resolve(base: str | Path, logical: str) -> Path:
    """Resolve a logical path against *base*.

    Args:
        base: The storage base directory.
        logical: Slash-rooted logical path. ``"/"`` maps to *base* itself.

    Returns:
        The normalized real path.

    Raises:
        PathSecurityError: If the normalized path lies outside *base*.
    """
    base_norm = os.path.abspath(str(base))
    if logical == ROOT:
        return Path(base_norm)

    relative = logical.lstrip("/")
    resolved = os.path.normpath(os.path.join(base_norm, relative))

    if not _is_within(PurePath(resolved), PurePath(base_norm)):
        logger.warning("Rejected path outside base directory: %r", logical)
        raise PathSecurityError(
            "Access denied: Path outside of allowed directory"
        )
    return Path(resolved)


def join_logical(parent: str, name: str) -> str:
    """Build the logical path of *name* inside the logical directory *parent*."""
    if parent == ROOT:
        return ROOT + name
    if parent.endswith("/"):
        return parent + name
    return f"{parent}/{name}"


def _is_within(path: PurePath, base: PurePath) -> bool:
    # Compare parts, not strings: /base-evil must not match /base
    return path.parts[: len(base.parts)] == base.parts
