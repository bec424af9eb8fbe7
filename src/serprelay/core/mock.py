"""Synthetic SERP generator — the terminal fallback of the resolution chain.

Used only when no real provider produced results. Output is deterministic for
a given query and count.
"""

from __future__ import annotations

from urllib.parse import quote

from serprelay.models.query import SearchQuery
from serprelay.models.response import NormalizedResult, SearchResponse

MOCK_PROVIDER = "mock"
MOCK_DOMAIN = "example.com"


def _keyword(text: str) -> str:
    words = text.split()
    return words[0] if words else "topic"


def generate_mock_response(query: SearchQuery, failure_reasons: list[str] | None = None) -> SearchResponse:
    """Fabricate ``query.count`` placeholder results derived from the first word of the query.

    Args:
        query: The query being resolved.
        failure_reasons: Why each real provider was passed over, carried into
            the response diagnostics.

    Returns:
        A populated, degraded ``SearchResponse`` with ``provider == "mock"``.
    """
    keyword = _keyword(query.text)
    slug = quote(keyword, safe="")
    organic = [
        NormalizedResult(
            position=i,
            title=f"{keyword} - Comprehensive Guide {i}",
            url=f"https://{MOCK_DOMAIN}/{slug}-{i}",
            snippet=f"Learn about {query.text}. Expert insights and best practices.",
            domain=MOCK_DOMAIN,
        )
        for i in range(1, query.count + 1)
    ]
    return SearchResponse(
        query=query.text,
        organic=organic,
        related_searches=[f"{keyword} tips", f"{keyword} guide", f"best {keyword}"],
        provider=MOCK_PROVIDER,
        degraded=True,
        failure_reasons=list(failure_reasons or []),
    )
