"""
Per-date fetch outcomes.

The orchestrator yields exactly one outcome per dispatched date, either a
FetchSuccess carrying the decoded document or a FetchFailure carrying
the reason. Outcomes arrive in completion order, so consumers key them by
``outcome.date``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Union

from omie_ingest.exceptions import OmieIngestError
from omie_ingest.transforms.text import split_lines
from omie_ingest.types import FailureKind


@dataclass(frozen=True)
class RawDocument:
    """Decoded text of the document published for one date."""
    date: date
    locator: str
    text: str

    @property
    def lines(self) -> list[str]:
        return split_lines(self.text)


@dataclass(frozen=True)
class FetchSuccess:
    document: RawDocument
    attempts: int = 1

    @property
    def date(self) -> date:
        return self.document.date

    @property
    def locator(self) -> str:
        return self.document.locator


@dataclass(frozen=True)
class FetchFailure:
    """A date for which no document could be obtained.

    Attributes:
        kind: NOT_FOUND (remote has no document; one attempt),
            TRANSIENT (retry budget exhausted), CANCELLED, or
            INVALID_LOCATOR (no locator for the date; zero attempts and an
            empty ``locator``).
        error: The last error observed.
        attempts: Fetch attempts actually made.
    """
    date: date
    locator: str
    kind: FailureKind
    error: OmieIngestError
    attempts: int


FetchOutcome = Union[FetchSuccess, FetchFailure]
