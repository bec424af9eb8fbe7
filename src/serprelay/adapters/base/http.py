"""Shared plumbing for adapters that talk to a JSON-over-HTTP backend.

Handles the ``httpx.AsyncClient`` lifecycle, bounded timeouts, optional
request pacing, and the mapping of transport/status/payload problems onto
the adapter exception taxonomy.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import UTC, datetime
from typing import Any

import httpx

from serprelay.adapters.base.adapter import AdapterHealth, SearchAdapter
from serprelay.adapters.base.exceptions import (
    AdapterError,
    ConnectionError,
    QueryError,
    ResponseFormatError,
)
from serprelay.models.query import SearchQuery
from serprelay.models.response import SearchResponse

logger = logging.getLogger(__name__)

_USER_AGENT = "SerpRelay/0.1"


class HttpSearchAdapter(SearchAdapter):
    """Base class for HTTP JSON search adapters.

    Subclasses implement ``name``, ``search()`` and, when they need
    configuration, ``_check_configuration()``.

    Args:
        base_url: Backend base URL ('' for adapters that use absolute URLs).
        timeout: Default per-request timeout in seconds.
        min_request_interval: Minimum delay between consecutive requests, in seconds.
        transport: Optional httpx transport (used by tests to stub the network).
    """

    def __init__(
        self,
        base_url: str = "",
        *,
        timeout: float = 10.0,
        min_request_interval: float = 0.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._min_request_interval = min_request_interval
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._last_request_at = 0.0
        self._pace_lock = asyncio.Lock()

    def _check_configuration(self) -> None:
        """Raise ``ConfigurationError`` if required settings are missing."""

    def _default_headers(self) -> dict[str, str]:
        return {"Accept": "application/json", "User-Agent": _USER_AGENT}

    async def initialize(self) -> None:
        """Validate configuration and create the HTTP client."""
        self._check_configuration()
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._default_headers(),
            timeout=self._timeout,
            transport=self._transport,
        )
        logger.info("%s adapter initialized (base_url=%s)", self.name, self._base_url or "-")

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise ConnectionError(f"{self.name} client not initialized.")
        return self._client

    async def _pace(self) -> None:
        """Space out consecutive requests to this provider."""
        if self._min_request_interval <= 0:
            return
        async with self._pace_lock:
            wait = self._last_request_at + self._min_request_interval - time.monotonic()
            if wait > 0:
                logger.debug("Pacing %s: waiting %.2fs", self.name, wait)
                await asyncio.sleep(wait)
            self._last_request_at = time.monotonic()

    async def _request_json(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        """Send a request and decode a JSON object body.

        Raises:
            ConnectionError: Network failure or timeout.
            QueryError: Non-2xx HTTP status.
            ResponseFormatError: Body is not a JSON object.
        """
        client = self._require_client()
        budget = timeout if timeout is not None else self._timeout
        await self._pace()
        try:
            # httpx timeouts are per phase; the outer deadline bounds the whole attempt
            async with asyncio.timeout(budget):
                response = await client.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    headers=headers,
                    timeout=budget,
                )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise QueryError(f"{self.name} API error ({e.response.status_code}): {e.response.text[:200]}") from e
        except (httpx.TimeoutException, TimeoutError) as e:
            raise ConnectionError(f"{self.name} request timed out after {budget:g}s") from e
        except httpx.RequestError as e:
            raise ConnectionError(f"{self.name} request failed: {e!r}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise ResponseFormatError(f"{self.name} returned malformed JSON") from e
        if not isinstance(data, dict):
            raise ResponseFormatError(f"{self.name} returned {type(data).__name__}, expected a JSON object")
        return data

    async def _probe(self) -> SearchResponse:
        return await self.search(SearchQuery(text="health check", count=1))

    async def health_check(self) -> AdapterHealth:
        """Probe the backend with a one-result search."""
        if self._client is None:
            return AdapterHealth(status="unhealthy", message="Client not initialized")

        start = time.monotonic()
        try:
            response = await self._probe()
        except AdapterError as e:
            return AdapterHealth(
                status="unhealthy",
                latency_ms=int((time.monotonic() - start) * 1000),
                last_check=datetime.now(UTC).isoformat(),
                message=str(e),
            )
        latency_ms = int((time.monotonic() - start) * 1000)
        return AdapterHealth(
            status="degraded" if response.is_empty else "healthy",
            latency_ms=latency_ms,
            last_check=datetime.now(UTC).isoformat(),
            message="No results for probe query" if response.is_empty else None,
        )
