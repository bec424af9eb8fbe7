"""In-process SERP service — Convenience facade over ``SerpEngine``.

For applications that embed SerpRelay rather than calling the HTTP API::

    async with SerpService(Settings()) as serp:
        response = await serp.search("coffee shops", count=5)
        news = await serp.search_news("electric vehicles")
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from serprelay.config.settings import Settings
from serprelay.core.engine import SerpEngine
from serprelay.models.query import DEFAULT_COUNT, ResultType, SearchQuery
from serprelay.models.response import SearchResponse

logger = logging.getLogger(__name__)

COMPETITOR_RESULT_COUNT = 20


class SerpService:
    """High-level search operations backed by one ``SerpEngine``.

    Args:
        settings: Application settings. Loaded from the environment if None.
        engine: An existing engine to wrap instead of building one. The
            service only initializes and shuts down engines it created.
    """

    def __init__(self, settings: Settings | None = None, *, engine: SerpEngine | None = None) -> None:
        self._owns_engine = engine is None
        self.engine = engine or SerpEngine(settings or Settings())

    async def __aenter__(self) -> SerpService:
        if self._owns_engine:
            await self.engine.initialize()
        return self

    async def __aexit__(self, *exc: object) -> None:
        if self._owns_engine:
            await self.engine.shutdown()

    async def search(
        self,
        query: str,
        *,
        count: int = DEFAULT_COUNT,
        country: str = "us",
        language: str = "en",
        type: ResultType | str = ResultType.WEB,
        skip_cache: bool = False,
    ) -> SearchResponse:
        """Resolve a query through the provider chain.

        Args:
            query: Free-text query.
            count: Number of results (1-100).
            country: Geography hint (gl).
            language: Language hint (hl).
            type: ``"web"`` or ``"news"``.
            skip_cache: Bypass the cache lookup.

        Raises:
            pydantic.ValidationError: If the query is empty or count is out of range.
        """
        search_query = SearchQuery(
            text=query.strip(),
            count=count,
            language=language,
            geography=country,
            result_type=ResultType(type),
        )
        return await self.engine.resolve(search_query, use_cache=not skip_cache)

    async def search_news(self, query: str, *, count: int = DEFAULT_COUNT) -> SearchResponse:
        """News results for a topic."""
        return await self.search(f"{query} news", count=count, type=ResultType.NEWS)

    async def search_competitors(self, query: str, industry: str) -> SearchResponse:
        """Companies competing in an industry around a product or keyword."""
        return await self.search(
            f"{industry} companies competitors {query}",
            count=COMPETITOR_RESULT_COUNT,
        )

    async def search_trends(self, topic: str, *, year: int | None = None) -> SearchResponse:
        """Current-year trend coverage for a topic."""
        return await self.search(f"{topic} trends {year or datetime.now().year}")

    def status(self) -> dict[str, Any]:
        """Provider configuration and cache statistics."""
        return {**self.engine.status(), "cache": self.engine.cache.stats()}

    def clear_cache(self) -> int:
        """Drop every cached response; returns how many were removed."""
        return self.engine.cache.clear()
