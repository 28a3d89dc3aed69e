"""HTTP fetcher for OMIE daily files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from omie_ingest.config import DEFAULT_USER_AGENT, OrchestratorConfig
from omie_ingest.exceptions import FetchError

logger = logging.getLogger(__name__)

HTTP_OK = 200
HTTP_NOT_FOUND = 404


@dataclass(frozen=True)
class FetchResponse:
    """Status and body of one fetch attempt."""
    status: int
    content: bytes = b""

    @property
    def found(self) -> bool:
        return self.status == HTTP_OK

    @property
    def not_found(self) -> bool:
        return self.status == HTTP_NOT_FOUND


class Fetcher(Protocol):
    """Anything that can retrieve one locator.

    Implementations return a FetchResponse for every HTTP answer and raise
    FetchError for transport failures. They must be safe to call from
    several worker threads at once.
    """

    def __call__(self, locator: str) -> FetchResponse:
        ...


class HttpFetcher:
    """Fetcher backed by a shared ``httpx.Client``.

    The client's connection pool is sized to the worker count so that
    every worker can hold a connection.
    """

    def __init__(
        self,
        config: OrchestratorConfig | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        config = config or OrchestratorConfig()
        self._client = httpx.Client(
            timeout=config.request_timeout,
            headers={"User-Agent": user_agent},
            follow_redirects=True,
            limits=httpx.Limits(
                max_connections=config.concurrency,
                max_keepalive_connections=config.concurrency,
            ),
            transport=transport,
        )

    def __call__(self, locator: str) -> FetchResponse:
        try:
            response = self._client.get(locator)
        except httpx.HTTPError as exc:
            raise FetchError(f"request to {locator} failed: {exc}") from exc
        logger.debug("GET %s -> %d", locator, response.status_code)
        return FetchResponse(status=response.status_code, content=response.content)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpFetcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
