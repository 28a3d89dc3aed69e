"""
Concurrent fetch orchestrator for omie-ingest.

Turns an inclusive date range into a lazy stream of FetchOutcome, one per
date, using a fixed pool of worker threads.

Moving parts:
- **Backlog**: a queue pre-filled with every date in the range. Workers
  pull from it until it is empty or the run is cancelled.
- **Workers**: ``config.concurrency`` threads. Each fetches one date at a
  time, retrying transient failures up to ``config.max_retries`` attempts
  with linear backoff (``base_delay * n`` before retry n).
- **Results**: a bounded queue (``maxsize=config.concurrency``). When the
  consumer falls behind, workers block on it instead of buffering.
- **Cancellation**: a ``threading.Event`` owned by the caller. Once set,
  no further date is dispatched and backoff waits end immediately.
  Requests already in flight complete, and their outcomes are still
  delivered.
- **Withdrawal**: a per-run event set when the consumer stops iterating
  early. It stops that run's workers only; the orchestrator stays usable.

Attempt classification:
- HTTP 200 -> FetchSuccess.
- HTTP 404, or a fetcher raising NotFoundError -> FetchFailure(NOT_FOUND)
  straight away; OMIE does not publish files retroactively.
- Anything else (other status, transport error) -> retried; when the
  budget is spent, FetchFailure(TRANSIENT) with the last error.
- A locator that cannot be built -> FetchFailure(INVALID_LOCATOR), no
  fetch attempted.

Outcomes arrive in completion order, not date order.
"""

from __future__ import annotations

import logging
import math
import queue
import threading
from collections.abc import Callable, Iterator
from datetime import date, timedelta

from omie_ingest.config import OrchestratorConfig
from omie_ingest.exceptions import CancellationError, FetchError, NotFoundError
from omie_ingest.fetch.client import Fetcher
from omie_ingest.fetch.outcomes import FetchFailure, FetchOutcome, FetchSuccess, RawDocument
from omie_ingest.transforms.text import decode_document
from omie_ingest.types import FailureKind

logger = logging.getLogger(__name__)

# Sentinel a worker puts on the result queue when it exits
_WORKER_DONE = object()
# How often a blocked worker checks for consumer withdrawal (result queue and backoff)
_POLL_SECONDS = 0.1


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every calendar date from *start* to *end*, both inclusive."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


class Orchestrator:
    """Bounded-concurrency, retrying, cancellable fetcher of daily documents.

    Args:
        fetcher: Retrieves one locator (see ``fetch.client.Fetcher``).
        locate: Builds the locator for a date.
        config: Retry and concurrency settings, shared read-only by workers.
        cancel: Event shared with the caller. Setting it stops dispatch.
            A private event is created if omitted; use ``cancel()``.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        locate: Callable[[date], str],
        config: OrchestratorConfig | None = None,
        cancel: threading.Event | None = None,
    ) -> None:
        self.config = config or OrchestratorConfig()
        self._fetcher = fetcher
        self._locate = locate
        self._cancel = cancel if cancel is not None else threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def cancel(self) -> None:
        """Stop dispatching new dates and interrupt backoff waits."""
        self._cancel.set()

    def stream(self, start: date, end: date) -> Iterator[FetchOutcome]:
        """Fetch every date in ``[start, end]`` and yield outcomes as they complete.

        The range is checked immediately; workers start on the first
        ``next()``. Closing the iterator early (``break`` out of a loop,
        ``close()``) stops and joins this run's workers without cancelling
        the orchestrator, so it can be streamed again.

        Raises:
            ValueError: If *end* is before *start*.
        """
        if end < start:
            raise ValueError(f"end date {end} is before start date {start}")
        return self._run(start, end)

    def _run(self, start: date, end: date) -> Iterator[FetchOutcome]:
        backlog: queue.Queue[date] = queue.Queue()
        for day in iter_dates(start, end):
            backlog.put(day)
        total = backlog.qsize()

        results: queue.Queue[object] = queue.Queue(maxsize=self.config.concurrency)
        withdrawn = threading.Event()
        workers = [
            threading.Thread(
                target=self._work,
                args=(backlog, results, withdrawn),
                name=f"omie-fetch-{i}",
                daemon=True,
            )
            for i in range(min(self.config.concurrency, total))
        ]

        logger.info(
            "Fetching %d date(s) from %s to %s with %d worker(s)",
            total, start, end, len(workers),
        )
        for worker in workers:
            worker.start()

        delivered = 0
        finished = 0
        try:
            while finished < len(workers):
                item = results.get()
                if item is _WORKER_DONE:
                    finished += 1
                    continue
                delivered += 1
                yield item  # type: ignore[misc]
        finally:
            withdrawn.set()
            for worker in workers:
                worker.join()
            if delivered < total:
                logger.warning(
                    "Fetch run ended early: %d of %d date(s) delivered (cancelled=%s)",
                    delivered, total, self.cancelled,
                )
            else:
                logger.info("Fetch run complete: %d date(s) delivered", delivered)

    # ------------------------------------------------------------------
    # Worker side
    # ------------------------------------------------------------------

    def _work(
        self,
        backlog: queue.Queue[date],
        results: queue.Queue[object],
        withdrawn: threading.Event,
    ) -> None:
        try:
            while not (self._cancel.is_set() or withdrawn.is_set()):
                try:
                    day = backlog.get_nowait()
                except queue.Empty:
                    break
                outcome = self._fetch_date(day, withdrawn)
                if not self._deliver(results, outcome, withdrawn):
                    break
        finally:
            self._deliver(results, _WORKER_DONE, withdrawn)

    def _deliver(
        self,
        results: queue.Queue[object],
        item: object,
        withdrawn: threading.Event,
    ) -> bool:
        """Block until *item* is queued. Returns False if the consumer left."""
        while True:
            try:
                results.put(item, timeout=_POLL_SECONDS)
                return True
            except queue.Full:
                if withdrawn.is_set():
                    return False

    def _backoff(self, delay: float, withdrawn: threading.Event) -> bool:
        """Wait *delay* seconds on the cancel event, in short slices.

        Returns True if the run was cancelled or withdrawn meanwhile.
        """
        slices = max(1, math.ceil(delay / _POLL_SECONDS))
        for _ in range(slices):
            if self._cancel.wait(delay / slices) or withdrawn.is_set():
                return True
        return False

    def _fetch_date(self, day: date, withdrawn: threading.Event) -> FetchOutcome:
        try:
            locator = self._locate(day)
        except Exception as exc:
            error = FetchError(f"cannot build locator for {day}: {exc!r}")
            error.__cause__ = exc
            logger.error("Skipping %s: %s", day, error)
            return FetchFailure(
                date=day, locator="", kind=FailureKind.INVALID_LOCATOR, error=error, attempts=0,
            )

        max_attempts = self.config.max_retries
        last_error = FetchError(f"no fetch attempt made for {locator}")

        for attempt in range(1, max_attempts + 1):
            if attempt > 1:
                if self._backoff(self.config.base_delay * (attempt - 1), withdrawn):
                    return FetchFailure(
                        date=day,
                        locator=locator,
                        kind=FailureKind.CANCELLED,
                        error=CancellationError(f"fetch of {day} cancelled during backoff"),
                        attempts=attempt - 1,
                    )
                logger.warning(
                    "Retrying %s (attempt %d/%d): %s", day, attempt, max_attempts, last_error
                )

            try:
                response = self._fetcher(locator)
            except NotFoundError as exc:
                return self._not_found(day, locator, exc, attempt)
            except FetchError as exc:
                last_error = exc
                continue
            except Exception as exc:
                error = FetchError(f"unexpected error fetching {locator}: {exc!r}")
                error.__cause__ = exc
                last_error = error
                continue

            if response.found:
                document = RawDocument(
                    date=day, locator=locator, text=decode_document(response.content)
                )
                logger.debug("Fetched %s in %d attempt(s)", day, attempt)
                return FetchSuccess(document=document, attempts=attempt)

            if response.not_found:
                return self._not_found(
                    day, locator, NotFoundError(f"data not available for {day}"), attempt
                )

            last_error = FetchError(f"HTTP {response.status} for {locator}")

        logger.warning("Giving up on %s after %d attempt(s): %s", day, max_attempts, last_error)
        return FetchFailure(
            date=day,
            locator=locator,
            kind=FailureKind.TRANSIENT,
            error=last_error,
            attempts=max_attempts,
        )

    def _not_found(
        self, day: date, locator: str, error: NotFoundError, attempt: int
    ) -> FetchFailure:
        logger.info("No document published for %s (%s)", day, locator)
        return FetchFailure(
            date=day,
            locator=locator,
            kind=FailureKind.NOT_FOUND,
            error=error,
            attempts=attempt,
        )


def orchestrate(
    start: date,
    end: date,
    config: OrchestratorConfig,
    fetcher: Fetcher,
    locate: Callable[[date], str],
    cancel: threading.Event | None = None,
) -> Iterator[FetchOutcome]:
    """Functional shortcut for ``Orchestrator(...).stream(start, end)``."""
    return Orchestrator(fetcher, locate, config=config, cancel=cancel).stream(start, end)
