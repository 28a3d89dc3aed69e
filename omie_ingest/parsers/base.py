"""
Base parser protocol / ABC for omie-ingest.

All document parsers implement this interface. The contract is:
1. parse() takes the decoded lines of one document and returns a
   ParseResult subclass specific to that document family.
2. Every ParseResult carries a flat list of CanonicalRecord, one per
   (hour, field) value recovered from the document.

Why one result type per family:
- Callers dispatch on the result class (``isinstance``) instead of
  casting an untyped value.
- Family-specific metadata (e.g. the market scope of a technology
  document) lives on the result, not in a loose dict.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

import pandas as pd

from omie_ingest.transforms.text import decode_document, read_lines, split_lines
from omie_ingest.types import Concept, SystemType, Technology

_RECORD_COLUMNS = ["date", "hour", "field", "value"]


@dataclass(frozen=True)
class CanonicalRecord:
    """One parsed value.

    Attributes:
        date: The document date.
        hour: 1-based hour of day (1..25; 23 or 25 hours on DST days).
        field: The canonical series identifier.
        value: The value in base units, or ``None`` when the source cell
            was blank.
    """
    date: date
    hour: int
    field: Concept | Technology
    value: float | None


@dataclass
class ParseResult:
    """Common shape of every parser output."""
    date: date
    records: list[CanonicalRecord] = field(default_factory=list)

    def hours(self) -> list[int]:
        """Distinct hours present in the records, ascending."""
        return sorted({r.hour for r in self.records})

    def values(self, field_id: Concept | Technology) -> dict[int, float | None]:
        """Hour -> value mapping for a single series.

        If several rows map to the same series, later rows win (the
        order in which they appeared in the document).
        """
        return {r.hour: r.value for r in self.records if r.field == field_id}

    def to_frame(self, wide: bool = False) -> pd.DataFrame:
        """Convert the records to a DataFrame.

        Args:
            wide: If ``False`` (default), one row per record with columns
                ``date, hour, field, value``. If ``True``, one row per hour
                with one column per field.
        """
        df = pd.DataFrame(
            [(r.date, r.hour, r.field.value, r.value) for r in self.records],
            columns=_RECORD_COLUMNS,
        )
        if not wide:
            return df
        pivoted = df.pivot_table(
            index=["date", "hour"],
            columns="field",
            values="value",
            aggfunc="last",
            dropna=False,
        ).reset_index()
        pivoted.columns.name = None
        return pivoted


@dataclass
class MarginalPriceDay(ParseResult):
    """Result of parsing a marginal price (labeled-row) document."""


@dataclass
class TechnologyEnergyDay(ParseResult):
    """Result of parsing an energy-by-technology (tabular-row) document."""
    system: SystemType = SystemType.IBERIAN


class BaseParser(ABC):
    """Abstract base class for OMIE document parsers.

    Subclasses implement ``parse()``. Parsers are stateless between calls
    and may be shared across threads.
    """

    @abstractmethod
    def parse(self, lines: Sequence[str]) -> ParseResult:
        """Parse the decoded lines of one document.

        Raises:
            ParseError: If the document yields no usable data.
        """

    def parse_text(self, text: str) -> ParseResult:
        return self.parse(split_lines(text))

    def parse_bytes(self, content: bytes) -> ParseResult:
        """Parse a document as served by OMIE (ISO-8859-1 bytes)."""
        return self.parse(split_lines(decode_document(content)))

    def parse_file(self, path: str | Path) -> ParseResult:
        return self.parse(read_lines(path))
