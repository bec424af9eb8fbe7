"""SerpRelay Engine — Cache-then-fallback orchestrator for SERP resolution.

The engine manages the full request lifecycle:
  1. Cache lookup keyed by (query, count, geography, result type)
  2. Provider chain: adapters tried strictly in priority order; the first
     response with at least one organic result wins
  3. Terminal fallback: a synthetic mock response when every provider failed,
     was empty, or none is configured
  4. Cache write (mock responses only when ``cache.cache_mock_responses``)

``resolve()`` never raises for provider trouble. Adapter failures are
contained at the adapter boundary, logged, and surfaced to callers only as
``failure_reasons`` / ``degraded`` diagnostics on the response.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from serprelay.adapters.base.adapter import SearchAdapter
from serprelay.adapters.base.exceptions import AdapterError, ConfigurationError
from serprelay.adapters.base.registry import AdapterRegistry
from serprelay.adapters.novexity.adapter import NovexityAdapter
from serprelay.adapters.searxng.adapter import PublicSearxngAdapter, SearxngAdapter
from serprelay.adapters.serper.adapter import SerperAdapter
from serprelay.cache.manager import ResponseCache
from serprelay.core.mock import generate_mock_response
from serprelay.models.query import SearchQuery
from serprelay.models.response import SearchResponse

if TYPE_CHECKING:
    from serprelay.config.settings import Settings

logger = logging.getLogger(__name__)

# Built-in providers, in fallback priority order
_ADAPTER_CLASSES: dict[str, type[SearchAdapter]] = {
    "novexity": NovexityAdapter,
    "searxng": SearxngAdapter,
    "searxng-public": PublicSearxngAdapter,
    "serper": SerperAdapter,
}


class SerpEngine:
    """Core orchestrator for SERP resolution.

    Pipeline:
      SearchQuery → [Cache] → hit: cached copy (cached=True)
                            → miss: [Novexity] → [SearXNG] → [Public mirrors] → [Serper]
                                    → first non-empty response
                                    → or [Mock] (degraded=True)
                            → [Cache write] → SearchResponse

    Attributes:
        settings: Application configuration.
        cache: Response cache owned by this engine.
        adapter_registry: Active adapters in priority order.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        cache: ResponseCache | None = None,
        adapters: Sequence[SearchAdapter] | None = None,
    ) -> None:
        self.settings = settings
        self.cache = cache if cache is not None else ResponseCache(settings.cache)
        self.adapter_registry = AdapterRegistry()
        for adapter in adapters or ():
            self.adapter_registry.attach(adapter)

    async def initialize(self) -> None:
        """Create the built-in adapters declared in settings, in priority order.

        Providers without configuration are skipped rather than treated as errors.
        """
        for name, kwargs in self._adapter_kwargs():
            self.adapter_registry.register(name, _ADAPTER_CLASSES[name])
            try:
                await self.adapter_registry.initialize_adapter(name, **kwargs)
            except ConfigurationError as e:
                logger.info("Provider '%s' not configured, skipping: %s", name, e)

        active = self.adapter_registry.active_adapters
        logger.info(
            "SerpRelay engine initialized (providers: %s)",
            ", ".join(active) if active else "none, mock only",
        )

    async def shutdown(self) -> None:
        """Gracefully shut down all adapters."""
        await self.adapter_registry.shutdown_all()
        logger.info("SerpRelay engine shut down")

    def _adapter_kwargs(self) -> list[tuple[str, dict[str, Any]]]:
        providers = self.settings.providers
        pacing = {"min_request_interval": providers.min_request_interval}
        return [
            (
                "novexity",
                {
                    "base_url": providers.novexity_url,
                    "api_key": providers.novexity_api_key,
                    "timeout": providers.request_timeout,
                    **pacing,
                },
            ),
            (
                "searxng",
                {"base_url": providers.searxng_url, "timeout": providers.request_timeout, **pacing},
            ),
            (
                "searxng-public",
                {
                    "instances": providers.public_searxng_instances,
                    "timeout": providers.mirror_timeout,
                    **pacing,
                },
            ),
            (
                "serper",
                {
                    "api_key": providers.serper_api_key,
                    "search_url": providers.serper_search_url,
                    "news_url": providers.serper_news_url,
                    "timeout": providers.request_timeout,
                    **pacing,
                },
            ),
        ]

    # ──────────────────────────────────────────────────────────────────────
    # Resolution
    # ──────────────────────────────────────────────────────────────────────

    async def resolve(self, query: SearchQuery, *, use_cache: bool = True) -> SearchResponse:
        """Resolve a query to ranked results.

        Args:
            query: The query to resolve.
            use_cache: Set False to bypass the cache lookup (the fresh result
                is still stored).

        Returns:
            A populated SearchResponse. Never raises for provider failures.
        """
        cache_enabled = self.settings.cache.enabled
        cache_key = query.cache_key

        if use_cache and cache_enabled:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.info("Cache hit: %s", query.text)
                return cached.model_copy(update={"cached": True})

        start = time.monotonic()
        failures: list[str] = []
        response = await self._walk_chain_with_deadline(query, failures)

        if response is None:
            logger.warning(
                "All providers exhausted for query=%s, serving mock response (%s)",
                query.text,
                "; ".join(failures) or "no providers configured",
            )
            response = generate_mock_response(query, failures)

        if cache_enabled and (not response.degraded or self.settings.cache.cache_mock_responses):
            self.cache.set(cache_key, response)

        logger.info(
            "Resolved query=%s provider=%s results=%d in %dms",
            query.text,
            response.provider,
            len(response.organic),
            int((time.monotonic() - start) * 1000),
        )
        return response

    async def _walk_chain_with_deadline(self, query: SearchQuery, failures: list[str]) -> SearchResponse | None:
        deadline = self.settings.search.resolve_timeout
        if deadline is None:
            return await self._walk_chain(query, failures)
        try:
            async with asyncio.timeout(deadline):
                return await self._walk_chain(query, failures)
        except TimeoutError:
            logger.warning("Provider chain exceeded %.1fs deadline for query=%s", deadline, query.text)
            failures.append(f"deadline: provider chain exceeded {deadline:g}s")
            return None

    async def _walk_chain(self, query: SearchQuery, failures: list[str]) -> SearchResponse | None:
        """Try adapters in priority order; return the first non-empty response.

        ``failures`` collects one reason per adapter that was passed over.
        """
        for adapter in self.adapter_registry.adapters:
            try:
                response = await adapter.search(query)
            except AdapterError as e:
                logger.warning("Provider %s failed: %s", adapter.name, e)
                failures.append(f"{adapter.name}: {e}")
                continue
            except Exception as e:
                # Failures never unwind past the adapter boundary
                logger.error("Provider %s raised unexpectedly", adapter.name, exc_info=True)
                failures.append(f"{adapter.name}: unexpected error: {e!r}")
                continue

            if response.is_empty:
                logger.info("Provider %s returned no results", adapter.name)
                failures.append(f"{adapter.name}: no results")
                continue

            return self._conform(response, adapter, query, failures)
        return None

    @staticmethod
    def _conform(
        response: SearchResponse,
        adapter: SearchAdapter,
        query: SearchQuery,
        failures: list[str],
    ) -> SearchResponse:
        """Enforce result invariants on an adapter's response.

        Truncates to the requested count, renumbers positions from 1, and
        attaches the reasons earlier providers were skipped.
        """
        organic = [
            result.model_copy(update={"position": position})
            for position, result in enumerate(response.organic[: query.count], start=1)
        ]
        return response.model_copy(
            update={
                "organic": organic,
                "provider": response.provider or adapter.name,
                "cached": False,
                "degraded": False,
                "failure_reasons": list(failures),
            }
        )

    # ──────────────────────────────────────────────────────────────────────
    # Diagnostics
    # ──────────────────────────────────────────────────────────────────────

    def status(self) -> dict[str, Any]:
        """Provider configuration and cache policy, for diagnostics."""
        return {
            "configured": self.settings.providers.status(),
            "active": self.adapter_registry.active_adapters,
            "cache_enabled": self.settings.cache.enabled,
            "cache_mock_responses": self.settings.cache.cache_mock_responses,
        }
