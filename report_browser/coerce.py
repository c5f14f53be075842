"""
Value coercion for report-browser.

Turns a raw text field from a CSV or free-text file into a typed scalar.
Rules are applied in order and the first match wins:

1. Empty / whitespace-only -> ``""``.
2. ``-?[0-9]+`` -> ``int`` (signed 64-bit range only).
3. ``-?[0-9]+.[0-9]+`` -> ``float`` (plain decimals, no exponent).
4. ``true`` / ``false`` in any case -> ``bool``.
5. Anything else -> the trimmed string.

Identifiers that only look numeric (``54401E143``, ``007A``) stay strings.
"""

from __future__ import annotations

import re

import numpy as np

TypedValue = int | float | bool | str

_INTEGER_PATTERN = re.compile(r"-?[0-9]+")
_DECIMAL_PATTERN = re.compile(r"-?[0-9]+\.[0-9]+")

_INT64 = np.iinfo(np.int64)
_INT64_MIN = int(_INT64.min)
_INT64_MAX = int(_INT64.max)
_INT64_DIGITS = len(str(_INT64_MAX))


def fits_int64(value: int) -> bool:
    """Return True if *value* is representable as a signed 64-bit integer."""
    return _INT64_MIN <= value <= _INT64_MAX


def _parse_integer(value: str) -> int | None:
    """Parse a ``-?[0-9]+`` string, or return None if it exceeds 64 bits.

    Leading zeros are not significant, so ``"0007"`` is 7 however many zeros
    precede it. Strings with more significant digits than int64 can hold are
    rejected before conversion.
    """
    digits = value.lstrip("-").lstrip("0")
    if len(digits) > _INT64_DIGITS:
        return None
    number = int(digits) if digits else 0
    if value.startswith("-"):
        number = -number
    return number if fits_int64(number) else None


def coerce_value(text: str | None) -> TypedValue:
    """Coerce a raw text field into a TypedValue.

    Integers outside the 64-bit range are left unparsed and fall through
    to the remaining rules, which return them as strings.
    """
    if text is None:
        return ""
    value = text.strip()
    if not value:
        return ""

    if _INTEGER_PATTERN.fullmatch(value):
        number = _parse_integer(value)
        if number is not None:
            return number

    if _DECIMAL_PATTERN.fullmatch(value):
        return float(value)

    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"

    return value


def display_value(value: TypedValue) -> str:
    """Render a TypedValue as text (used for workbook header cells).

    Floats use Python's ``str()`` form, e.g. ``1e+20`` and ``5.5``.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
