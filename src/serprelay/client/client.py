"""SerpRelay Python SDK — Async and sync clients for the SerpRelay REST API.

Usage::

    # Async
    async with AsyncSerpRelayClient("http://localhost:8080") as client:
        response = await client.search("coffee shops", num=5)

    # Sync (wraps async client internally)
    client = SerpRelayClient("http://localhost:8080")
    response = client.search_news("electric vehicles")
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from datetime import datetime
from typing import Any, TypeVar, cast

import httpx

_T = TypeVar("_T")

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Response types (plain dicts mirroring the server JSON)
# ═══════════════════════════════════════════════════════════════════════════════

SerpResult = dict[str, Any]
"""SERP response dict (mirrors the ``SearchResponse`` wire JSON)."""


# ═══════════════════════════════════════════════════════════════════════════════
# Async client
# ═══════════════════════════════════════════════════════════════════════════════


class AsyncSerpRelayClient:
    """Async Python client for the SerpRelay API.

    Args:
        base_url: SerpRelay server URL, e.g. ``"http://localhost:8080"``.
        api_key: Shared secret sent as ``X-API-Key`` (omit if the server has none).
        timeout: Request timeout in seconds.
        **httpx_kwargs: Additional keyword arguments passed to ``httpx.AsyncClient``.

    Example::

        async with AsyncSerpRelayClient("http://localhost:8080") as client:
            resp = await client.search("coffee shops", num=5)
            if resp["degraded"]:
                print("providers unavailable:", resp["failureReasons"])
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        *,
        api_key: str | None = None,
        timeout: float = 60.0,
        **httpx_kwargs: Any,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        headers = dict(httpx_kwargs.pop("headers", None) or {})
        if api_key:
            headers["X-API-Key"] = api_key
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            headers=headers,
            **httpx_kwargs,
        )

    async def __aenter__(self) -> AsyncSerpRelayClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    # ── Health ──

    async def health(self) -> dict[str, Any]:
        """Check server health.

        Returns:
            Health status dict.
        """
        resp = await self._client.get("/v1/health")
        resp.raise_for_status()
        return cast(dict[str, Any], resp.json())

    async def adapter_health(self) -> dict[str, Any]:
        """Check provider adapter health.

        Returns:
            Per-adapter health status dict.
        """
        resp = await self._client.get("/v1/health/adapters")
        resp.raise_for_status()
        return cast(dict[str, Any], resp.json())

    # ── Search ──

    async def search(
        self,
        query: str,
        *,
        num: int = 10,
        gl: str = "us",
        hl: str = "en",
        type: str = "web",
    ) -> SerpResult:
        """Resolve a query through the server's provider chain.

        Args:
            query: Search query.
            num: Number of results (1-100).
            gl: Geography (country code).
            hl: Language code.
            type: ``"web"`` or ``"news"``.

        Returns:
            SERP response dict with ``organic``, ``relatedSearches``,
            ``provider``, ``cached``, ``degraded`` and ``failureReasons``.

        Raises:
            httpx.HTTPStatusError: On 400 (missing query) or 401 (bad API key).
        """
        payload = {"q": query, "num": num, "gl": gl, "hl": hl, "type": type}
        resp = await self._client.post("/v1/serp", json=payload)
        resp.raise_for_status()
        return cast(dict[str, Any], resp.json())

    async def search_news(self, query: str, *, num: int = 10) -> SerpResult:
        """News results for a topic."""
        return await self.search(f"{query} news", num=num, type="news")

    async def search_competitors(self, query: str, industry: str) -> SerpResult:
        """Companies competing in an industry around a product or keyword."""
        return await self.search(f"{industry} companies competitors {query}", num=20)

    async def search_trends(self, topic: str, *, year: int | None = None) -> SerpResult:
        """Current-year trend coverage for a topic."""
        return await self.search(f"{topic} trends {year or datetime.now().year}")

    # ── Cache ──

    async def cache_stats(self) -> dict[str, Any]:
        """Response cache statistics."""
        resp = await self._client.get("/v1/cache/stats")
        resp.raise_for_status()
        return cast(dict[str, Any], resp.json())

    async def clear_cache(self) -> int:
        """Clear the server's response cache.

        Returns:
            Number of entries removed.
        """
        resp = await self._client.delete("/v1/cache")
        resp.raise_for_status()
        return int(resp.json()["cleared"])


# ═══════════════════════════════════════════════════════════════════════════════
# Sync client (wraps AsyncSerpRelayClient)
# ═══════════════════════════════════════════════════════════════════════════════


class SerpRelayClient:
    """Synchronous Python client for the SerpRelay API.

    Wraps :class:`AsyncSerpRelayClient` using ``asyncio.run``.

    Args:
        base_url: SerpRelay server URL.
        api_key: Shared secret sent as ``X-API-Key``.
        timeout: Request timeout in seconds.
        **httpx_kwargs: Additional keyword arguments passed to ``httpx.AsyncClient``.

    Example::

        client = SerpRelayClient("http://localhost:8080")
        resp = client.search("coffee shops", num=5)
        print(resp["provider"], len(resp["organic"]))
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        *,
        api_key: str | None = None,
        timeout: float = 60.0,
        **httpx_kwargs: Any,
    ) -> None:
        self._base_url = base_url
        self._api_key = api_key
        self._timeout = timeout
        self._httpx_kwargs = httpx_kwargs

    def _run(self, coro: Coroutine[Any, Any, _T]) -> _T:
        """Run an async coroutine synchronously."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop and loop.is_running():
            # Already inside an event loop (e.g. Jupyter): run on a worker thread
            import concurrent.futures

            with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
                return pool.submit(asyncio.run, coro).result()
        return asyncio.run(coro)

    def _make_client(self) -> AsyncSerpRelayClient:
        return AsyncSerpRelayClient(
            self._base_url,
            api_key=self._api_key,
            timeout=self._timeout,
            **self._httpx_kwargs,
        )

    def health(self) -> dict[str, Any]:
        """Check server health."""

        async def _call() -> dict[str, Any]:
            async with self._make_client() as c:
                return await c.health()

        return self._run(_call())

    def adapter_health(self) -> dict[str, Any]:
        """Check provider adapter health."""

        async def _call() -> dict[str, Any]:
            async with self._make_client() as c:
                return await c.adapter_health()

        return self._run(_call())

    def search(
        self,
        query: str,
        *,
        num: int = 10,
        gl: str = "us",
        hl: str = "en",
        type: str = "web",
    ) -> SerpResult:
        """Resolve a query through the server's provider chain."""

        async def _call() -> SerpResult:
            async with self._make_client() as c:
                return await c.search(query, num=num, gl=gl, hl=hl, type=type)

        return self._run(_call())

    def search_news(self, query: str, *, num: int = 10) -> SerpResult:
        """News results for a topic."""

        async def _call() -> SerpResult:
            async with self._make_client() as c:
                return await c.search_news(query, num=num)

        return self._run(_call())

    def search_competitors(self, query: str, industry: str) -> SerpResult:
        """Companies competing in an industry around a product or keyword."""

        async def _call() -> SerpResult:
            async with self._make_client() as c:
                return await c.search_competitors(query, industry)

        return self._run(_call())

    def search_trends(self, topic: str, *, year: int | None = None) -> SerpResult:
        """Current-year trend coverage for a topic."""

        async def _call() -> SerpResult:
            async with self._make_client() as c:
                return await c.search_trends(topic, year=year)

        return self._run(_call())

    def cache_stats(self) -> dict[str, Any]:
        """Response cache statistics."""

        async def _call() -> dict[str, Any]:
            async with self._make_client() as c:
                return await c.cache_stats()

        return self._run(_call())

    def clear_cache(self) -> int:
        """Clear the server's response cache."""

        async def _call() -> int:
            async with self._make_client() as c:
                return await c.clear_cache()

        return self._run(_call())
