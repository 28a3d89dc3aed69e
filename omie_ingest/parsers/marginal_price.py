"""
Marginal price parser (labeled-row layout).

Input structure:
  - Line 0: header. Contains at least two DD/MM/YYYY dates; the second
    one is the date the data refers to (the first is the issue date).
  - Lines 1+: one series per line, ``;``-delimited. Field 0 is the label,
    fields 1..N are the values for hours 1..N.

Example (2006, prices in Cent/kWh)::

    OMIE - Mercado de electricidad;Fecha Emisión :31/12/2005;;01/01/2006;...
    Precio marginal (Cent/kWh);  6,694;  4,888;  4,525;...
    Energía en el programa resultante de la casación (MWh);  26.377;  26.070;...

The era of a document is never detected explicitly. Each row label is
looked up in the concept table, whose keys carry the unit annotation, so
"(Cent/kWh)" rows are scaled by 10 and "(EUR/MWh)" rows are not.
Rows with unknown labels are descriptive and are skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Sequence
from datetime import date

from omie_ingest.concepts import ConceptMapping, map_label
from omie_ingest.exceptions import FormatError, ParseError
from omie_ingest.parsers.base import BaseParser, CanonicalRecord, MarginalPriceDay
from omie_ingest.transforms.dates import find_dates
from omie_ingest.transforms.numbers import MAX_HOUR, parse_decimal
from omie_ingest.transforms.text import split_fields
from omie_ingest.types import Concept

logger = logging.getLogger(__name__)

DEFAULT_CONCEPTS: frozenset[Concept] = frozenset(Concept)


class MarginalPriceParser(BaseParser):
    """Parser for marginal price documents.

    Args:
        concepts: Series to keep. Rows mapping to any other concept are
            skipped. Defaults to all concepts (``None``).

    Raises:
        ValueError: If *concepts* is an empty collection.
    """

    def __init__(self, concepts: Collection[Concept] | None = None) -> None:
        if concepts is None:
            self.concepts = DEFAULT_CONCEPTS
        else:
            self.concepts = frozenset(concepts)
            if not self.concepts:
                raise ValueError("'concepts' is empty. Pass None to keep every series.")

    def parse(self, lines: Sequence[str]) -> MarginalPriceDay:
        if not lines:
            raise ParseError("empty document")

        doc_date = self._parse_header(lines[0])
        result = MarginalPriceDay(date=doc_date)

        for line_no, line in enumerate(lines[1:], start=1):
            if not line.strip():
                continue
            try:
                records = self._parse_row(line, doc_date)
            except FormatError as exc:
                logger.debug("Skipping malformed line %d: %s", line_no, exc)
                continue
            result.records.extend(records)

        if not result.records:
            raise ParseError(f"no valid data in marginal price document for {doc_date}")

        logger.info(
            "Parsed marginal price document for %s: %d records, %d hours",
            doc_date, len(result.records), len(result.hours()),
        )
        return result

    def _parse_header(self, header: str) -> date:
        """Return the data date: the second date token of the header line."""
        dates = find_dates(header)
        if len(dates) < 2:
            raise ParseError(
                f"missing date: expected at least 2 dates in header, found {len(dates)}"
            )
        return dates[1]

    def _parse_row(self, line: str, doc_date: date) -> list[CanonicalRecord]:
        fields = split_fields(line)
        if len(fields) < 2:
            raise FormatError("insufficient fields in line")

        mapping = map_label(fields[0])
        if mapping is None or mapping.field not in self.concepts:
            return []

        return self._parse_values(fields[1:MAX_HOUR + 1], mapping, doc_date)

    def _parse_values(
        self,
        cells: Sequence[str],
        mapping: ConceptMapping,
        doc_date: date,
    ) -> list[CanonicalRecord]:
        records: list[CanonicalRecord] = []
        attempted = 0
        for hour, cell in enumerate(cells, start=1):
            if not cell.strip():
                # Blank cell = missing hour (e.g. hour 24/25 on short DST days)
                continue
            attempted += 1
            try:
                value = parse_decimal(cell)
            except FormatError:
                continue
            records.append(CanonicalRecord(
                date=doc_date,
                hour=hour,
                field=mapping.field,
                value=value * mapping.multiplier,
            ))

        if attempted and not records:
            raise FormatError(f"no parsable values in row {mapping.label!r}")
        return records
