"""SearXNG adapters — Self-hosted instance and shuffled public mirrors.

API reference:
  GET /search?q=<query>&format=json&language=<hl>&pageno=1[&categories=news]

Response shape::

    {
      "results": [{"url": ..., "title": ..., "content": ..., "publishedDate": ...}],
      "suggestions": ["..."]
    }

``format=json`` must be enabled in the instance's ``settings.yml``; instances
that refuse it answer 403, which is reported as a query error.
"""

from __future__ import annotations

import logging
import random
from typing import Any

import httpx

from serprelay.adapters.base.exceptions import AdapterError, ConfigurationError, ConnectionError
from serprelay.adapters.base.http import HttpSearchAdapter
from serprelay.core.normalize import as_list, normalize_related, normalize_results
from serprelay.models.query import ResultType, SearchQuery
from serprelay.models.response import SearchResponse

logger = logging.getLogger(__name__)


class SearxngAdapter(HttpSearchAdapter):
    """Search adapter for a self-hosted SearXNG instance.

    Args:
        base_url: SearXNG base URL.
        timeout: HTTP request timeout in seconds.
        min_request_interval: Minimum delay between requests, in seconds.
        transport: Optional httpx transport.
    """

    def __init__(
        self,
        base_url: str = "",
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

    @property
    def name(self) -> str:
        return "searxng"

    def _check_configuration(self) -> None:
        if not self._base_url:
            raise ConfigurationError(
                "SearXNG base URL is required. Set it via providers.searxng_url"
            )

    @staticmethod
    def _params(query: SearchQuery) -> dict[str, Any]:
        params: dict[str, Any] = {
            "q": query.text,
            "format": "json",
            "language": query.language,
            "pageno": 1,
        }
        if query.result_type is ResultType.NEWS:
            params["categories"] = "news"
        return params

    def _to_response(self, data: dict[str, Any], query: SearchQuery) -> SearchResponse:
        organic = normalize_results(
            as_list(data.get("results")),
            query.count,
            url_keys=("url",),
            snippet_keys=("content", "snippet"),
            date_keys=("publishedDate", "date"),
        )
        return SearchResponse(
            query=query.text,
            organic=organic,
            related_searches=normalize_related(data.get("suggestions")),
            provider=self.name,
        )

    async def search(self, query: SearchQuery) -> SearchResponse:
        """Execute a query against the configured instance."""
        data = await self._request_json("GET", "/search", params=self._params(query))
        response = self._to_response(data, query)
        logger.debug("SearXNG search: query=%s, results=%d", query.text, len(response.organic))
        return response


class PublicSearxngAdapter(SearxngAdapter):
    """Search adapter over a list of interchangeable public SearXNG mirrors.

    The mirror list is shuffled on every search to spread load. Mirrors are
    tried one at a time, each bounded by ``timeout``; a mirror that errors,
    times out, or returns no results is skipped. The first mirror with results
    wins.

    Args:
        instances: Mirror base URLs.
        timeout: Per-mirror attempt timeout in seconds.
        min_request_interval: Minimum delay between requests, in seconds.
        transport: Optional httpx transport.
        rng: Random source used for shuffling.
    """

    def __init__(
        self,
        instances: list[str] | None = None,
        *,
        timeout: float = 8.0,
        min_request_interval: float = 0.0,
        transport: httpx.AsyncBaseTransport | None = None,
        rng: random.Random | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            "",
            timeout=timeout,
            min_request_interval=min_request_interval,
            transport=transport,
        )
        self._instances = [url.rstrip("/") for url in instances or [] if url]
        self._rng = rng or random.Random()

    @property
    def name(self) -> str:
        return "searxng-public"

    @property
    def instances(self) -> list[str]:
        return list(self._instances)

    def _check_configuration(self) -> None:
        if not self._instances:
            raise ConfigurationError(
                "No public SearXNG instances configured. "
                "Set them via providers.public_searxng_instances"
            )

    async def search(self, query: SearchQuery) -> SearchResponse:
        """Try shuffled mirrors until one returns results.

        Raises:
            ConnectionError: If no mirror returned results.
        """
        mirrors = list(self._instances)
        self._rng.shuffle(mirrors)

        skipped: list[str] = []
        for mirror in mirrors:
            try:
                data = await self._request_json("GET", f"{mirror}/search", params=self._params(query))
            except AdapterError as e:
                logger.info("Public instance %s failed, trying next: %s", mirror, e)
                skipped.append(f"{mirror} ({e})")
                continue

            response = self._to_response(data, query)
            if response.is_empty:
                logger.info("Public instance %s returned no results, trying next", mirror)
                skipped.append(f"{mirror} (no results)")
                continue

            logger.info("Success with public instance: %s", mirror)
            return response

        raise ConnectionError(
            f"All {len(mirrors)} public SearXNG instances failed: {'; '.join(skipped)}"
        )

    async def _probe(self) -> SearchResponse:
        """Probe one randomly chosen mirror so a health check costs one attempt."""
        query = SearchQuery(text="health check", count=1)
        mirror = self._rng.choice(self._instances)
        data = await self._request_json("GET", f"{mirror}/search", params=self._params(query))
        return self._to_response(data, query)
