"""
Fetch sub-package for omie-ingest.

- client.py: the Fetcher protocol and its httpx implementation.
- locators.py: URL templates for each dataset's daily files.
- orchestrator.py: bounded worker pool with retry, backoff and cancellation.
- outcomes.py: FetchSuccess / FetchFailure, one per requested date.
"""

from omie_ingest.fetch.client import FetchResponse, Fetcher, HttpFetcher
from omie_ingest.fetch.locators import LocatorTemplate, locator_for
from omie_ingest.fetch.orchestrator import Orchestrator, iter_dates, orchestrate
from omie_ingest.fetch.outcomes import FetchFailure, FetchOutcome, FetchSuccess, RawDocument

__all__ = [
    "FetchFailure",
    "FetchOutcome",
    "FetchResponse",
    "FetchSuccess",
    "Fetcher",
    "HttpFetcher",
    "LocatorTemplate",
    "Orchestrator",
    "RawDocument",
    "iter_dates",
    "locator_for",
    "orchestrate",
]
