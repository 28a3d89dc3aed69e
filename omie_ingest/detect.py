"""
Format detection for OMIE documents.

Used when a document's family is not known in advance (e.g. a file
saved on disk). The check is content-based, in priority order:

1. Tabular-row: some line has at least three fields and one of them is a
   known technology column header -> EnergyByTechnologyParser.
2. Labeled-row: the header line has at least two dates and some row
   label is in the concept table -> MarginalPriceParser.
3. Otherwise: raise UnknownFormatError.

Tabular is checked first because its header line may also carry two
dates (issue date and data date).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from omie_ingest.concepts import map_label
from omie_ingest.exceptions import ParseError, UnknownFormatError
from omie_ingest.parsers.base import BaseParser, ParseResult
from omie_ingest.parsers.energy_by_technology import EnergyByTechnologyParser, discover_schema
from omie_ingest.parsers.marginal_price import MarginalPriceParser
from omie_ingest.transforms.dates import find_dates
from omie_ingest.transforms.text import split_fields

logger = logging.getLogger(__name__)

_PREVIEW_LINES = 5


def _looks_tabular(lines: Sequence[str]) -> bool:
    try:
        discover_schema(lines)
    except ParseError:
        return False
    return True


def _looks_labeled(lines: Sequence[str]) -> bool:
    if len(find_dates(lines[0])) < 2:
        return False
    return any(map_label(split_fields(line)[0]) is not None for line in lines[1:])


def detect_format(lines: Sequence[str]) -> type[BaseParser]:
    """Pick the parser class for a document.

    Raises:
        UnknownFormatError: If the document matches neither layout.
    """
    if not lines:
        raise UnknownFormatError("Document is empty.")

    if _looks_tabular(lines):
        logger.debug("Detected tabular-row (energy by technology) document")
        return EnergyByTechnologyParser
    if _looks_labeled(lines):
        logger.debug("Detected labeled-row (marginal price) document")
        return MarginalPriceParser

    preview = "\n".join(lines[:_PREVIEW_LINES])
    raise UnknownFormatError(
        f"Could not detect document format.\nFirst few lines:\n{preview}"
    )


def parse_document(lines: Sequence[str]) -> ParseResult:
    """Detect the document family and parse it with the default parser.

    Raises:
        UnknownFormatError: If no parser fits.
        ParseError: If the chosen parser finds no usable data.
    """
    parser_cls = detect_format(lines)
    return parser_cls().parse(lines)
