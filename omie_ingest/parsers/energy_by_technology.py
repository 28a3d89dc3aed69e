"""
Energy-by-technology parser (tabular-row layout).

Input structure:
  - Line 0: header. The **last** DD/MM/YYYY date is the data date; the
    text names the market scope ("sistema español", "sistema portugués",
    otherwise the whole Iberian market).
  - Some line N: column headers, e.g.
    ``Fecha;Hora;CARBÓN;FUEL-GAS;...;EÓLICA;...``. Its position moves
    between eras, so it is found by scanning for technology names.
  - Lines N+1+: one row per hour, ``;``-delimited. Field 1 is the hour,
    the header-mapped columns hold MWh values.

Example row (2020)::

    13/11/2020;1;1.432,0;;;6.088,9;2.405,9;3.191,6;7.371,1;25,7;3,7;6.292,4;;2.400,0;

Columns whose header is not a known technology are ignored. Each data
row yields one record per mapped column; an empty cell yields a record
with value ``None``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date

from omie_ingest.concepts import detect_system, match_category
from omie_ingest.exceptions import FormatError, ParseError
from omie_ingest.parsers.base import BaseParser, CanonicalRecord, TechnologyEnergyDay
from omie_ingest.transforms.dates import find_dates
from omie_ingest.transforms.numbers import parse_decimal, parse_hour
from omie_ingest.transforms.text import split_fields
from omie_ingest.types import SystemType, Technology

logger = logging.getLogger(__name__)

# A schema line has at least date, hour and one technology column
_MIN_SCHEMA_FIELDS = 3
_HOUR_FIELD = 1


def discover_schema(lines: Sequence[str]) -> tuple[dict[int, Technology], int]:
    """Find the column header line and map its field indexes to technologies.

    Scans top to bottom and stops at the first line with at least one
    recognized technology column.

    Returns:
        Tuple of (column_index -> technology, header_line_index).

    Raises:
        ParseError: If no line contains a recognized technology column.
    """
    for index, line in enumerate(lines):
        fields = split_fields(line)
        if len(fields) < _MIN_SCHEMA_FIELDS:
            continue
        schema: dict[int, Technology] = {}
        for col, header in enumerate(fields):
            technology = match_category(header)
            if technology is not None:
                schema[col] = technology
        if schema:
            return schema, index
    raise ParseError("no recognized columns: no technology names found in document")


class EnergyByTechnologyParser(BaseParser):
    """Parser for energy-by-technology documents."""

    def parse(self, lines: Sequence[str]) -> TechnologyEnergyDay:
        if not lines:
            raise ParseError("empty document")

        doc_date, system = self._parse_header(lines[0])
        schema, header_index = discover_schema(lines)
        logger.debug(
            "Schema found on line %d: %s",
            header_index, {col: tech.value for col, tech in schema.items()},
        )

        result = TechnologyEnergyDay(date=doc_date, system=system)
        for line_no in range(header_index + 1, len(lines)):
            line = lines[line_no]
            if not line.strip():
                continue
            try:
                records = self._parse_row(line, doc_date, schema)
            except FormatError as exc:
                logger.debug("Skipping line %d: %s", line_no, exc)
                continue
            result.records.extend(records)

        if not result.records:
            raise ParseError(f"no valid data records in technology document for {doc_date}")

        logger.info(
            "Parsed technology document for %s (%s): %d records, %d hours",
            doc_date, system.name, len(result.records), len(result.hours()),
        )
        return result

    def _parse_header(self, header: str) -> tuple[date, SystemType]:
        dates = find_dates(header)
        if not dates:
            raise ParseError("missing date: no date found in header")
        return dates[-1], detect_system(header)

    def _parse_row(
        self,
        line: str,
        doc_date: date,
        schema: dict[int, Technology],
    ) -> list[CanonicalRecord]:
        fields = split_fields(line)
        if len(fields) <= _HOUR_FIELD:
            raise FormatError("insufficient fields")
        hour = parse_hour(fields[_HOUR_FIELD])

        records: list[CanonicalRecord] = []
        for col, technology in schema.items():
            if col >= len(fields):
                continue
            try:
                value = parse_decimal(fields[col])
            except FormatError:
                continue
            records.append(CanonicalRecord(date=doc_date, hour=hour, field=technology, value=value))
        return records
