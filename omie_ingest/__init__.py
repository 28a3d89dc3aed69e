"""
omie-ingest: Python library for fetching and parsing OMIE daily market files.

Public API surface:

- ``import_range(start, end, ...)`` -- **recommended entry point**. Fetches
  every daily file in an inclusive date range, parses each one and returns
  a ``DayResult`` per date (sorted by date). Accepts an ``ImportConfig`` or
  the path of a YAML config.

- ``Importer`` -- the object behind ``import_range``, for streaming
  (``iter_days``), cancellation, and DataFrame output (``to_frame``).

- ``orchestrate(...)`` / ``Orchestrator`` -- the concurrent fetcher on its
  own: bounded workers, retry with linear backoff, cancellation, one
  ``FetchOutcome`` per date.

- ``parse_document(lines)`` / ``detect_format(lines)`` -- parse a document
  that is already in memory, picking the parser from its content.

- ``MarginalPriceParser`` / ``EnergyByTechnologyParser`` -- the parsers
  for the two document families.
"""

from __future__ import annotations

import logging
import threading
from datetime import date
from pathlib import Path

from omie_ingest.config import (
    ImportConfig,
    OrchestratorConfig,
    SourceConfig,
    load_config,
    save_config,
)
from omie_ingest.detect import detect_format, parse_document
from omie_ingest.fetch import FetchFailure, FetchSuccess, HttpFetcher, Orchestrator, orchestrate
from omie_ingest.fetch.client import Fetcher
from omie_ingest.importer import DayResult, Importer
from omie_ingest.parsers import (
    EnergyByTechnologyParser,
    MarginalPriceDay,
    MarginalPriceParser,
    TechnologyEnergyDay,
)
from omie_ingest.types import Concept, Dataset, FailureKind, SystemType, Technology

__all__ = [
    "Concept",
    "Dataset",
    "DayResult",
    "EnergyByTechnologyParser",
    "FailureKind",
    "FetchFailure",
    "FetchSuccess",
    "HttpFetcher",
    "ImportConfig",
    "Importer",
    "MarginalPriceDay",
    "MarginalPriceParser",
    "Orchestrator",
    "OrchestratorConfig",
    "SourceConfig",
    "SystemType",
    "Technology",
    "TechnologyEnergyDay",
    "detect_format",
    "import_range",
    "load_config",
    "orchestrate",
    "parse_document",
    "save_config",
]

logger = logging.getLogger(__name__)


def import_range(
    start: date,
    end: date,
    config: ImportConfig | str | Path | None = None,
    fetcher: Fetcher | None = None,
    cancel: threading.Event | None = None,
) -> list[DayResult]:
    """Fetch and parse every daily file from *start* to *end* (inclusive).

    Args:
        start: First date of the range.
        end: Last date of the range. Must not be before *start*.
        config: An ``ImportConfig``, or a path to a YAML config. Defaults
            to marginal prices with default retry/concurrency settings.
        fetcher: Custom fetcher. If omitted, an HTTP fetcher is used and
            closed when the import finishes.
        cancel: Event that stops the run when set from another thread.

    Returns:
        One ``DayResult`` per delivered date, sorted by date. Dates that
        were never dispatched because of cancellation are absent.

    Examples::

        days = omie_ingest.import_range(date(2024, 1, 1), date(2024, 1, 31))
        prices = [d.result.values(Concept.PRICE_SPAIN) for d in days if d.ok]

        # Energy by technology, from a saved config
        days = omie_ingest.import_range(start, end, config="omie.yaml")

    Raises:
        ValueError: If *end* is before *start*.
        FileNotFoundError: If *config* is a path that does not exist.
    """
    if isinstance(config, (str, Path)):
        logger.info("import_range() -- loading config from %s", config)
        config = load_config(config)

    with Importer(config, fetcher=fetcher, cancel=cancel) as importer:
        logger.info("import_range() -- %r, %s to %s", importer, start, end)
        return importer.import_range(start, end)
