"""Query and search request models."""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

DEFAULT_COUNT = 10
MAX_COUNT = 100

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

CacheKey = tuple[str, int, str, str]
"""(text, count, geography, result type) identifying one cacheable resolution."""


class ResultType(str, Enum):
    """Kind of results requested from the providers."""

    WEB = "web"
    NEWS = "news"


class SearchQuery(BaseModel):
    """A single SERP resolution request.

    Immutable once constructed; lives for the duration of one
    ``SerpEngine.resolve()`` call.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Free-text search query", min_length=1)
    count: int = Field(default=DEFAULT_COUNT, ge=1, le=MAX_COUNT, description="Number of results requested")
    language: str = Field(default="en", description="Interface language hint (hl)")
    geography: str = Field(default="us", description="Geography hint (gl)")
    result_type: ResultType = Field(default=ResultType.WEB, description="Result type: web or news")

    @property
    def cache_key(self) -> CacheKey:
        """Composite cache key of (text, count, geography, result type).

        A tuple rather than a joined string: free-text fields may contain any
        separator, and distinct queries must never share a key.
        """
        return (self.text, self.count, self.geography, self.result_type.value)


class SerpRequest(BaseModel):
    """Inbound SERP request as received by the HTTP API.

    Field names follow the public wire format (``q``, ``num``, ``gl``, ``hl``,
    ``type``). Parsing is lenient: only a missing query is an error, and that
    check is left to the caller so it can answer with its own error shape.
    """

    q: str | None = Field(default=None, description="Search query (required)")
    num: int = Field(default=DEFAULT_COUNT, description="Number of results (1-100)")
    gl: str = Field(default="us", description="Geography (country code)")
    hl: str = Field(default="en", description="Language code")
    type: ResultType = Field(default=ResultType.WEB, description="Result type: web or news")

    @field_validator("num", mode="before")
    @classmethod
    def _parse_num(cls, v: Any) -> int:
        """Read the leading integer, fall back to the default on garbage, clamp to range.

        ``"5.5"`` and ``"5abc"`` both read as 5.
        """
        if isinstance(v, str):
            match = _LEADING_INT.match(v)
            if match is None:
                return DEFAULT_COUNT
            num = int(match.group(1))
        else:
            try:
                num = int(v)
            except (TypeError, ValueError, OverflowError):
                return DEFAULT_COUNT
        return max(1, min(num, MAX_COUNT))

    @field_validator("type", mode="before")
    @classmethod
    def _parse_type(cls, v: Any) -> ResultType:
        if isinstance(v, ResultType):
            return v
        return ResultType.NEWS if str(v).strip().lower() == ResultType.NEWS.value else ResultType.WEB

    @field_validator("gl", "hl", mode="before")
    @classmethod
    def _blank_to_default(cls, v: Any, info: ValidationInfo) -> str:
        if v is None or not str(v).strip():
            return "us" if info.field_name == "gl" else "en"
        return str(v)

    @property
    def has_query(self) -> bool:
        return bool(self.q and self.q.strip())

    def to_search_query(self) -> SearchQuery:
        """Build the immutable ``SearchQuery`` for the engine.

        Raises:
            ValueError: If no query text was supplied.
        """
        if not self.has_query:
            raise ValueError("Query parameter (q) is required")
        return SearchQuery(
            text=self.q.strip(),  # type: ignore[union-attr]
            count=self.num,
            language=self.hl,
            geography=self.gl,
            result_type=self.type,
        )
