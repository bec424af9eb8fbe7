"""Shared test fixtures and configuration."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import pytest

from serprelay.adapters.base.adapter import AdapterHealth, SearchAdapter
from serprelay.config.settings import Settings
from serprelay.models.query import SearchQuery
from serprelay.models.response import NormalizedResult, SearchResponse


class StaticAdapter(SearchAdapter):
    """In-memory adapter that returns canned titles or raises a canned error."""

    def __init__(
        self,
        name: str,
        titles: list[str] | None = None,
        *,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self._name = name
        self.titles = titles or []
        self.error = error
        self.delay = delay
        self.queries: list[SearchQuery] = []
        self.shut_down = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def calls(self) -> int:
        return len(self.queries)

    async def initialize(self) -> None:
        pass

    async def shutdown(self) -> None:
        self.shut_down = True

    async def search(self, query: SearchQuery) -> SearchResponse:
        self.queries.append(query)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return SearchResponse(
            query=query.text,
            organic=[
                NormalizedResult(
                    position=i,
                    title=title,
                    url=f"https://www.{self._name}.test/{i}",
                    snippet=f"{title} snippet",
                    domain=f"{self._name}.test",
                )
                for i, title in enumerate(self.titles, start=1)
            ],
            related_searches=[f"{self._name} related"],
            provider=self._name,
        )

    async def health_check(self) -> AdapterHealth:
        return AdapterHealth(status="healthy")


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with no providers configured."""
    return Settings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def make_adapter() -> Callable[..., StaticAdapter]:
    """Factory for in-memory adapters: ``make_adapter("novexity", ["A", "B"])``."""
    return StaticAdapter


@pytest.fixture
def query() -> SearchQuery:
    return SearchQuery(text="coffee shops", count=5)
