"""Novexity adapter — Primary self-hosted SERP scraper with a SerpAPI-compatible API.

API reference:
  GET /search?q=<query>&num=<count>&gl=<country>&hl=<language>

Response shape (SerpAPI-style)::

    {
      "organic_results": [{"position": 1, "title": ..., "link": ..., "snippet": ...}],
      "related_searches": [{"query": ...}],
      "people_also_ask": [{"question": ...}],
      "search_information": {"total_results": ..., "time_taken_displayed": ...}
    }

Some deployments answer with ``organic`` instead of ``organic_results`` and
``url``/``description`` instead of ``link``/``snippet``; both are accepted.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from serprelay.adapters.base.exceptions import ConfigurationError
from serprelay.adapters.base.http import HttpSearchAdapter
from serprelay.core.normalize import (
    as_float,
    as_int,
    as_list,
    normalize_questions,
    normalize_related,
    normalize_results,
)
from serprelay.models.query import SearchQuery
from serprelay.models.response import SearchResponse

logger = logging.getLogger(__name__)


class NovexityAdapter(HttpSearchAdapter):
    """Search adapter for a self-hosted Novexity instance.

    Args:
        base_url: Novexity base URL.
        api_key: Optional key sent as ``X-API-Key``.
        timeout: HTTP request timeout in seconds.
        min_request_interval: Minimum delay between requests, in seconds.
        transport: Optional httpx transport.
    """

    def __init__(
        self,
        base_url: str = "",
        api_key: str = "",
        *,
        timeout: float = 10.0,
        min_request_interval: float = 0.0,
        transport: httpx.AsyncBaseTransport | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            base_url,
            timeout=timeout,
            min_request_interval=min_request_interval,
            transport=transport,
        )
        self._api_key = api_key

    @property
    def name(self) -> str:
        return "novexity"

    def _check_configuration(self) -> None:
        if not self._base_url:
            raise ConfigurationError(
                "Novexity base URL is required. Set it via providers.novexity_url"
            )

    def _default_headers(self) -> dict[str, str]:
        headers = super()._default_headers()
        if self._api_key:
            headers["X-API-Key"] = self._api_key
        return headers

    async def search(self, query: SearchQuery) -> SearchResponse:
        """Execute a query against Novexity's ``/search`` endpoint."""
        params = {
            "q": query.text,
            "num": query.count,
            "gl": query.geography,
            "hl": query.language,
        }

        start = time.monotonic()
        data = await self._request_json("GET", "/search", params=params)
        took_ms = int((time.monotonic() - start) * 1000)

        items = as_list(data.get("organic_results")) or as_list(data.get("organic"))
        organic = normalize_results(
            items,
            query.count,
            url_keys=("link", "url"),
            snippet_keys=("snippet", "description"),
        )

        logger.debug("Novexity search: query=%s, results=%d, took=%dms", query.text, len(organic), took_ms)

        info = data.get("search_information")
        if not isinstance(info, dict):
            info = {}

        return SearchResponse(
            query=query.text,
            organic=organic,
            related_searches=normalize_related(data.get("related_searches")),
            people_also_ask=normalize_questions(data.get("people_also_ask")),
            total_results=as_int(info.get("total_results")),
            search_time=as_float(info.get("time_taken_displayed")),
            provider=self.name,
        )
