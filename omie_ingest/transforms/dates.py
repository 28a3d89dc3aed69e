"""Date token parsing for OMIE header lines (DD/MM/YYYY)."""

from __future__ import annotations

import re
from datetime import date, datetime

from omie_ingest.exceptions import FormatError

__all__ = ["parse_date", "find_dates"]

_DATE_LAYOUT = "%d/%m/%Y"
_DATE_TOKEN_RE = re.compile(r"(?<!\d)\d{2}/\d{2}/\d{4}(?!\d)")


def parse_date(text: str) -> date:
    """Parse a ``DD/MM/YYYY`` token into a ``date``.

    Raises:
        FormatError: If the token does not follow the layout exactly or
            names an impossible calendar day.
    """
    token = text.strip()
    if not _DATE_TOKEN_RE.fullmatch(token):
        raise FormatError(f"expected DD/MM/YYYY date, got {text!r}")
    try:
        return datetime.strptime(token, _DATE_LAYOUT).date()
    except ValueError as exc:
        raise FormatError(f"invalid calendar date: {text!r}") from exc


def find_dates(text: str) -> list[date]:
    """Return every valid ``DD/MM/YYYY`` date in *text*, in order of appearance.

    Tokens that look like dates but are not real calendar days are dropped.
    """
    found: list[date] = []
    for token in _DATE_TOKEN_RE.findall(text):
        try:
            found.append(parse_date(token))
        except FormatError:
            continue
    return found
