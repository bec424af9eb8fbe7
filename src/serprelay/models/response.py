"""Search response models — The normalized SERP schema shared by every provider.

Field names are snake_case in Python and camelCase on the wire
(``relatedSearches``, ``peopleAlsoAsk``, ``failureReasons``, ...); models
accept either form on input. Provider extras (``date``, ``peopleAlsoAsk``,
``totalResults``, ``searchTime``) are filled only when the provider reports them.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class NormalizedResult(BaseModel):
    """One ranked organic result."""

    position: int = Field(ge=1, description="1-based rank")
    title: str = Field(default="", description="Result title")
    url: str = Field(default="", description="Canonical result URL")
    snippet: str = Field(default="", description="Snippet or summary text")
    domain: str = Field(default="", description="Host with leading 'www.' stripped ('' when unparsable)")
    date: str | None = Field(default=None, description="Publication date as reported by the provider")


class SearchResponse(BaseModel):
    """Aggregate SERP response returned to callers.

    ``organic`` is ordered by rank; positions are contiguous from 1 and the
    list never exceeds the requested count.

    ``degraded`` and ``failure_reasons`` are diagnostics: a degraded response
    was synthesized by the mock generator because no real provider produced
    results, and ``failure_reasons`` lists why each attempted provider was
    passed over.
    """

    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(description="Original query text")
    organic: list[NormalizedResult] = Field(default_factory=list, description="Ranked organic results")
    related_searches: list[str] = Field(
        default_factory=list,
        alias="relatedSearches",
        description="Related search suggestions (provider-dependent)",
    )
    people_also_ask: list[str] = Field(
        default_factory=list,
        alias="peopleAlsoAsk",
        description="\"People also ask\" questions (provider-dependent)",
    )
    total_results: int | None = Field(
        default=None,
        alias="totalResults",
        description="Provider-reported estimate of total matching results",
    )
    search_time: float | None = Field(
        default=None,
        alias="searchTime",
        description="Provider-reported search time in seconds",
    )
    provider: str = Field(description="Identifier of the adapter that produced the response, or 'mock'")
    cached: bool = Field(default=False, description="True when served from the response cache")
    degraded: bool = Field(default=False, description="True when no real provider yielded results")
    failure_reasons: list[str] = Field(
        default_factory=list,
        alias="failureReasons",
        description="Per-provider reasons for falling through the chain",
    )

    @property
    def is_empty(self) -> bool:
        return not self.organic

    def to_wire(self) -> dict:
        """Serialize using the public (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True)
