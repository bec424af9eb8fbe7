"""Tests for response normalization helpers."""

from __future__ import annotations

import pytest

from serprelay.core.normalize import (
    as_float,
    as_int,
    as_list,
    extract_domain,
    normalize_questions,
    normalize_related,
    normalize_results,
)


class TestExtractDomain:
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://www.example.com/path", "example.com"),
            ("http://blog.example.co.uk/a?b=c", "blog.example.co.uk"),
            ("https://EXAMPLE.com", "example.com"),
            ("https://www2.example.com", "www2.example.com"),
        ],
    )
    def test_valid_urls(self, url: str, expected: str) -> None:
        assert extract_domain(url) == expected

    @pytest.mark.parametrize("url", ["not a url", "", "   ", "/relative/path", "http://[::1", None, 42])
    def test_unparsable_input_yields_empty(self, url: object) -> None:
        assert extract_domain(url) == ""


class TestNormalizeResults:
    def test_maps_alternate_field_names(self) -> None:
        items = [{"title": "T", "link": "https://www.a.com/x", "description": "D"}]

        results = normalize_results(items, 10, url_keys=("link", "url"), snippet_keys=("snippet", "description"))

        assert results[0].model_dump() == {
            "position": 1,
            "title": "T",
            "url": "https://www.a.com/x",
            "snippet": "D",
            "domain": "a.com",
            "date": None,
        }

    def test_missing_fields_are_empty_strings(self) -> None:
        results = normalize_results([{}], 10)

        assert results[0].title == ""
        assert results[0].url == ""
        assert results[0].snippet == ""
        assert results[0].domain == ""

    def test_truncates_and_numbers_contiguously(self) -> None:
        items = [{"title": "a"}, "junk", {"title": "b"}, None, {"title": "c"}, {"title": "d"}]

        results = normalize_results(items, 3)

        assert [r.title for r in results] == ["a", "b", "c"]
        assert [r.position for r in results] == [1, 2, 3]


class TestNormalizeRelated:
    def test_strings_and_query_objects(self) -> None:
        assert normalize_related(["one", {"query": "two"}, {"other": "x"}, 3, ""]) == ["one", "two"]

    def test_non_list_yields_empty(self) -> None:
        assert normalize_related(None) == []
        assert normalize_related({"query": "x"}) == []


def test_as_list() -> None:
    assert as_list([1]) == [1]
    assert as_list({"a": 1}) == []
    assert as_list(None) == []


def test_normalize_questions() -> None:
    assert normalize_questions([{"question": "Why?"}, "How?", {"title": "no question"}, 3]) == ["Why?", "How?"]
    assert normalize_questions(None) == []


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(1200, 1200), ("1,230,000", 1_230_000), ("about 5", None), (True, None), (None, None)],
)
def test_as_int(raw: object, expected: int | None) -> None:
    assert as_int(raw) == expected


@pytest.mark.parametrize(("raw", "expected"), [(0.42, 0.42), ("0.5", 0.5), (2, 2.0), ("fast", None), (None, None)])
def test_as_float(raw: object, expected: float | None) -> None:
    assert as_float(raw) == expected
