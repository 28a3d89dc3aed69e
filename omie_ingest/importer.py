"""
Importer: fetch and parse a date range in one call.

Composes the orchestrator and the parser for one dataset:

  date range -> Orchestrator -> FetchOutcome per date
             -> parser.parse(document.lines) -> DayResult per date

Failures stay per date. A missing file or an unparsable document shows
up as a DayResult with ``error`` set; it never aborts the range. How to
judge a partially failed range is left to the caller.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date
from pathlib import Path

import pandas as pd

from omie_ingest.config import ImportConfig, load_config
from omie_ingest.exceptions import CancellationError, OmieIngestError, ParseError
from omie_ingest.fetch.client import Fetcher, HttpFetcher
from omie_ingest.fetch.locators import locator_for
from omie_ingest.fetch.orchestrator import Orchestrator
from omie_ingest.fetch.outcomes import FetchFailure, FetchSuccess
from omie_ingest.parsers.base import BaseParser, ParseResult
from omie_ingest.parsers.energy_by_technology import EnergyByTechnologyParser
from omie_ingest.parsers.marginal_price import MarginalPriceParser
from omie_ingest.types import Dataset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayResult:
    """Outcome of importing one date: a parsed document or the error."""
    date: date
    locator: str
    result: ParseResult | None = None
    error: OmieIngestError | None = None

    @property
    def ok(self) -> bool:
        return self.result is not None


def build_parser(config: ImportConfig) -> BaseParser:
    """Return the parser matching the configured dataset."""
    dataset = config.source.dataset
    if dataset is Dataset.MARGINAL_PRICE:
        return MarginalPriceParser(concepts=config.concepts)
    if dataset is Dataset.ENERGY_BY_TECHNOLOGY:
        return EnergyByTechnologyParser()
    raise ValueError(f"Unsupported dataset: {dataset!r}")


class Importer:
    """Fetches and parses one dataset over date ranges.

    Args:
        config: Import settings. Defaults to marginal prices with the
            default orchestrator settings.
        fetcher: Custom fetcher (e.g. for tests). If omitted, an
            ``HttpFetcher`` is created and closed by ``close()``.
        cancel: Event shared with the orchestrator; set it to stop a run.
    """

    def __init__(
        self,
        config: ImportConfig | None = None,
        fetcher: Fetcher | None = None,
        cancel: threading.Event | None = None,
    ) -> None:
        self.config = config or ImportConfig()
        self.parser = build_parser(self.config)
        self._owned_fetcher: HttpFetcher | None = None
        if fetcher is None:
            self._owned_fetcher = HttpFetcher(
                self.config.orchestrator, user_agent=self.config.source.user_agent
            )
            fetcher = self._owned_fetcher
        source = self.config.source
        self.locate = locator_for(source.dataset, base_url=source.base_url, system=source.system)
        self._orchestrator = Orchestrator(
            fetcher,
            self.locate,
            config=self.config.orchestrator,
            cancel=cancel,
        )

    @classmethod
    def from_config_file(cls, path: str | Path, fetcher: Fetcher | None = None) -> Importer:
        return cls(load_config(path), fetcher=fetcher)

    def __repr__(self) -> str:
        return (
            f"Importer(dataset={self.config.source.dataset.value!r}, "
            f"concurrency={self.config.orchestrator.concurrency})"
        )

    def cancel(self) -> None:
        self._orchestrator.cancel()

    def iter_days(self, start: date, end: date) -> Iterator[DayResult]:
        """Yield one DayResult per fetched date, in completion order."""
        for outcome in self._orchestrator.stream(start, end):
            if isinstance(outcome, FetchSuccess):
                yield self._parse(outcome)
            elif isinstance(outcome, FetchFailure):
                logger.warning(
                    "No document for %s (%s after %d attempt(s)): %s",
                    outcome.date, outcome.kind.value, outcome.attempts, outcome.error,
                )
                yield DayResult(date=outcome.date, locator=outcome.locator, error=outcome.error)
            else:
                raise TypeError(f"unexpected fetch outcome: {outcome!r}")

    def import_range(self, start: date, end: date) -> list[DayResult]:
        """Import every date in ``[start, end]`` and return results sorted by date."""
        days = sorted(self.iter_days(start, end), key=lambda d: d.date)
        succeeded = sum(1 for d in days if d.ok)
        logger.info(
            "Imported %s from %s to %s: %d ok, %d failed",
            self.config.source.dataset.value, start, end, succeeded, len(days) - succeeded,
        )
        return days

    def import_single_date(self, day: date) -> DayResult:
        """Import one date.

        If the run is cancelled before the date is fetched, the result
        carries a CancellationError.
        """
        days = self.import_range(day, day)
        if days:
            return days[0]
        return DayResult(
            date=day,
            locator=self.locate(day),
            error=CancellationError(f"import of {day} cancelled before it was fetched"),
        )

    def to_frame(self, start: date, end: date, wide: bool = False) -> pd.DataFrame:
        """Import a range and concatenate every parsed day into one DataFrame.

        Failed dates are left out (they are logged by ``iter_days``).
        """
        frames = [d.result.to_frame(wide=wide) for d in self.import_range(start, end) if d.ok]
        if not frames:
            return pd.DataFrame(columns=["date", "hour", "field", "value"])
        return pd.concat(frames, ignore_index=True)

    def close(self) -> None:
        if self._owned_fetcher is not None:
            self._owned_fetcher.close()

    def __enter__(self) -> Importer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _parse(self, outcome: FetchSuccess) -> DayResult:
        document = outcome.document
        try:
            result = self.parser.parse(document.lines)
        except ParseError as exc:
            logger.warning("Could not parse document for %s: %s", document.date, exc)
            return DayResult(date=document.date, locator=document.locator, error=exc)
        if result.date != document.date:
            logger.warning(
                "Document fetched for %s is dated %s (%s)",
                document.date, result.date, document.locator,
            )
        return DayResult(date=document.date, locator=document.locator, result=result)
