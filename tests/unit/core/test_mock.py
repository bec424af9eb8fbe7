"""Tests for the synthetic SERP generator."""

from __future__ import annotations

from serprelay.core.mock import generate_mock_response
from serprelay.models.query import SearchQuery


class TestGenerateMockResponse:
    def test_coffee_shops_scenario(self) -> None:
        response = generate_mock_response(SearchQuery(text="coffee shops", count=5))

        assert response.provider == "mock"
        assert len(response.organic) == 5
        first = response.organic[0]
        assert first.url == "https://example.com/coffee-1"
        assert first.title == "coffee - Comprehensive Guide 1"
        assert first.snippet == "Learn about coffee shops. Expert insights and best practices."
        assert first.domain == "example.com"
        assert response.related_searches == ["coffee tips", "coffee guide", "best coffee"]

    def test_positions_match_count(self) -> None:
        response = generate_mock_response(SearchQuery(text="seo", count=3))

        assert [r.position for r in response.organic] == [1, 2, 3]
        assert [r.url for r in response.organic][-1] == "https://example.com/seo-3"

    def test_marked_degraded_with_reasons(self) -> None:
        response = generate_mock_response(SearchQuery(text="seo"), ["novexity: down"])

        assert response.degraded is True
        assert response.cached is False
        assert response.failure_reasons == ["novexity: down"]

    def test_deterministic(self) -> None:
        query = SearchQuery(text="coffee shops", count=4)

        assert generate_mock_response(query) == generate_mock_response(query)

    def test_keyword_is_url_safe(self) -> None:
        response = generate_mock_response(SearchQuery(text="c++/rust compare", count=1))

        assert response.organic[0].url == "https://example.com/c%2B%2B%2Frust-1"
        assert response.organic[0].title == "c++/rust - Comprehensive Guide 1"
