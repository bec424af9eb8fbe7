"""Serper adapter — Paid Google SERP API (serper.dev), the last real provider in the chain.

API reference:
  POST https://google.serper.dev/search   (web)
  POST https://google.serper.dev/news     (news)
  Headers: X-API-KEY: <key>
  Body:    {"q": ..., "num": ..., "gl": ..., "hl": ...}

Response: ``organic`` (web) or ``news`` array of ``{title, link, snippet, date}``,
plus ``relatedSearches`` as ``[{query}]``, ``peopleAlsoAsk`` as ``[{question}]``
and ``searchParameters.totalResults``.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

import httpx

from serprelay.adapters.base.adapter import AdapterHealth
from serprelay.adapters.base.exceptions import ConfigurationError
from serprelay.adapters.base.http import HttpSearchAdapter
from serprelay.core.normalize import as_int, as_list, normalize_questions, normalize_related, normalize_results
from serprelay.models.query import ResultType, SearchQuery
from serprelay.models.response import SearchResponse

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_URL = "https://google.serper.dev/search"
DEFAULT_NEWS_URL = "https://google.serper.dev/news"


class SerperAdapter(HttpSearchAdapter):
    """Search adapter for the Serper.dev API.

    Args:
        api_key: Serper API key (required).
        search_url: Web search endpoint.
        news_url: News search endpoint.
        timeout: HTTP request timeout in seconds.
        min_request_interval: Minimum delay between requests, in seconds.
        transport: Optional httpx transport.
    """

    def __init__(
        self,
        api_key: str = "",
        search_url: str = DEFAULT_SEARCH_URL,
        news_url: str = DEFAULT_NEWS_URL,
        *,
        timeout: float = 10.0,
        min_request_interval: float = 0.0,
        transport: httpx.AsyncBaseTransport | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            "",
            timeout=timeout,
            min_request_interval=min_request_interval,
            transport=transport,
        )
        self._api_key = api_key
        self._search_url = search_url
        self._news_url = news_url

    @property
    def name(self) -> str:
        return "serper"

    def _check_configuration(self) -> None:
        if not self._api_key:
            raise ConfigurationError(
                "Serper API key is required. Set it via providers.serper_api_key"
            )

    def _default_headers(self) -> dict[str, str]:
        headers = super()._default_headers()
        headers["X-API-KEY"] = self._api_key
        return headers

    async def search(self, query: SearchQuery) -> SearchResponse:
        """Execute a web or news query against Serper."""
        is_news = query.result_type is ResultType.NEWS
        endpoint = self._news_url if is_news else self._search_url
        payload = {
            "q": query.text,
            "num": query.count,
            "gl": query.geography,
            "hl": query.language,
        }

        data = await self._request_json("POST", endpoint, json=payload)

        primary, secondary = ("news", "organic") if is_news else ("organic", "news")
        items = as_list(data.get(primary)) or as_list(data.get(secondary))
        organic = normalize_results(items, query.count, url_keys=("link", "url"), snippet_keys=("snippet",))

        logger.debug("Serper %s search: query=%s, results=%d", primary, query.text, len(organic))

        parameters = data.get("searchParameters")
        if not isinstance(parameters, dict):
            parameters = {}

        return SearchResponse(
            query=query.text,
            organic=organic,
            related_searches=normalize_related(data.get("relatedSearches")),
            people_also_ask=normalize_questions(data.get("peopleAlsoAsk")),
            total_results=as_int(parameters.get("totalResults")),
            provider=self.name,
        )

    async def health_check(self) -> AdapterHealth:
        """Report readiness without spending API credits on a probe query."""
        if self._client is None:
            return AdapterHealth(status="unhealthy", message="Client not initialized")
        return AdapterHealth(
            status="healthy",
            last_check=datetime.now(UTC).isoformat(),
            message="API key configured (probe skipped)",
        )
