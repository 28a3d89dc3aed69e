"""
Number parsing for omie-ingest.

OMIE files have used several numeric conventions over the years:
- Comma as decimal separator, dots as thousands separators
  (e.g., "1.432,0", "24326,2").
- Dots only, as thousands separators (e.g., "1.234.567").
- A single dot, which is read as a decimal point (e.g., "26.377").

The single-dot case is ambiguous: older energy rows use it as a thousands
separator. The rule below is kept exactly as historical outputs were
produced, so "26.377" parses to 26.377, not 26377.
"""

from __future__ import annotations

import re

from omie_ingest.exceptions import FormatError

__all__ = ["parse_decimal", "parse_hour", "MAX_HOUR"]

# Hours run 1..23 on spring DST days and 1..25 on autumn DST days
MAX_HOUR = 25

_NUMERAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def parse_decimal(text: str | None) -> float | None:
    """Parse a locale-formatted numeral.

    Separator disambiguation:
    1. If the text contains a comma, the **last** comma is the decimal
       point. Any dots before it are thousands separators and are removed.
    2. Else, if it contains two or more dots, all dots are thousands
       separators and are removed.
    3. Else, a single dot is a decimal point.

    Args:
        text: Raw cell text, possibly padded with whitespace.

    Returns:
        The parsed value, or ``None`` when the cell is blank (missing data,
        not zero).

    Raises:
        FormatError: If the text is not a valid numeral after normalization.
    """
    if text is None:
        return None
    value = text.strip()
    if not value:
        return None

    if "," in value:
        integer, _, fraction = value.rpartition(",")
        normalized = f"{integer.replace('.', '')}.{fraction}"
    elif value.count(".") >= 2:
        normalized = value.replace(".", "")
    else:
        normalized = value

    if not _NUMERAL_RE.fullmatch(normalized):
        raise FormatError(f"invalid numeral: {text!r}")
    return float(normalized)


def parse_hour(text: str | None) -> int:
    """Parse a 1-based hour index (1..25).

    The cell goes through ``parse_decimal`` first, so "1" and "1,0" are
    both hour 1.

    Raises:
        FormatError: If the cell is blank, not a whole number, or out of range.
    """
    value = parse_decimal(text)
    if value is None:
        raise FormatError("empty hour value")
    if not value.is_integer():
        raise FormatError(f"hour is not a whole number: {text!r}")
    hour = int(value)
    if hour < 1 or hour > MAX_HOUR:
        raise FormatError(f"hour out of range (1-{MAX_HOUR}): {hour}")
    return hour
