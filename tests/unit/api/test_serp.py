"""Tests for the SERP endpoint."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from serprelay.adapters.base.exceptions import ConnectionError
from serprelay.api.app import create_app
from serprelay.api.deps import set_engine
from serprelay.config.settings import Settings
from serprelay.core.engine import SerpEngine


@pytest.fixture
def engine(settings: Settings) -> SerpEngine:
    """Engine with no providers: every request resolves to the mock."""
    return SerpEngine(settings)


@pytest.fixture
def client(settings: Settings, engine: SerpEngine) -> TestClient:
    app = create_app(settings)
    set_engine(engine)
    yield TestClient(app)
    set_engine(None)


@pytest.fixture
def secured_client() -> TestClient:
    settings = Settings(_env_file=None, server={"api_secret": "s3cret"})  # type: ignore[call-arg]
    app = create_app(settings)
    set_engine(SerpEngine(settings))
    yield TestClient(app)
    set_engine(None)


# ── Resolution ───────────────────────────────────────────────────────────────


class TestSerpGet:
    def test_mock_when_no_providers(self, client: TestClient) -> None:
        response = client.get("/v1/serp", params={"q": "coffee shops", "num": 5})

        assert response.status_code == 200
        data = response.json()
        assert data["query"] == "coffee shops"
        assert data["provider"] == "mock"
        assert len(data["organic"]) == 5
        assert data["organic"][0]["url"] == "https://example.com/coffee-1"
        assert data["organic"][0]["domain"] == "example.com"
        assert data["relatedSearches"] == ["coffee tips", "coffee guide", "best coffee"]
        assert data["cached"] is False
        assert data["degraded"] is True
        assert data["failureReasons"] == []

    def test_cache_control_header(self, client: TestClient) -> None:
        response = client.get("/v1/serp", params={"q": "coffee"})

        assert response.headers["cache-control"] == "public, max-age=3600"

    def test_defaults(self, client: TestClient) -> None:
        data = client.get("/v1/serp", params={"q": "coffee"}).json()

        assert len(data["organic"]) == 10

    @pytest.mark.parametrize(("num", "expected"), [("abc", 10), ("0", 1), ("500", 100), ("3", 3)])
    def test_lenient_num(self, client: TestClient, num: str, expected: int) -> None:
        data = client.get("/v1/serp", params={"q": "coffee", "num": num}).json()

        assert len(data["organic"]) == expected

    def test_unknown_type_treated_as_web(self, client: TestClient) -> None:
        response = client.get("/v1/serp", params={"q": "coffee", "type": "images"})

        assert response.status_code == 200

    def test_uses_provider_and_caches(self, client: TestClient, engine: SerpEngine, make_adapter) -> None:
        adapter = make_adapter("novexity", ["Best Coffee", "Coffee Map"])
        engine.adapter_registry.attach(adapter)

        first = client.get("/v1/serp", params={"q": "coffee", "gl": "de", "hl": "de", "type": "news"}).json()
        second = client.get("/v1/serp", params={"q": "coffee", "gl": "de", "hl": "de", "type": "news"}).json()

        assert first["provider"] == "novexity"
        assert first["cached"] is False
        assert second["cached"] is True
        assert second["organic"] == first["organic"]
        assert adapter.calls == 1
        sent = adapter.queries[0]
        assert (sent.geography, sent.language, sent.result_type.value) == ("de", "de", "news")

    def test_failure_reasons_exposed(self, client: TestClient, engine: SerpEngine, make_adapter) -> None:
        engine.adapter_registry.attach(make_adapter("novexity", error=ConnectionError("down")))

        data = client.get("/v1/serp", params={"q": "coffee"}).json()

        assert data["provider"] == "mock"
        assert data["failureReasons"] == ["novexity: down"]


class TestSerpPost:
    def test_json_body(self, client: TestClient) -> None:
        response = client.post("/v1/serp", json={"q": "coffee shops", "num": 3, "type": "news"})

        assert response.status_code == 200
        assert len(response.json()["organic"]) == 3

    def test_lenient_body_fields(self, client: TestClient) -> None:
        response = client.post("/v1/serp", json={"q": "coffee", "num": "lots", "gl": "", "type": None})

        assert response.status_code == 200
        assert len(response.json()["organic"]) == 10


# ── Errors ───────────────────────────────────────────────────────────────────


class TestSerpErrors:
    @pytest.mark.parametrize("params", [{}, {"q": ""}, {"q": "   "}])
    def test_get_missing_query(self, client: TestClient, params: dict) -> None:
        response = client.get("/v1/serp", params=params)

        assert response.status_code == 400
        assert response.json() == {"error": "Query parameter (q) is required"}

    def test_post_missing_query(self, client: TestClient) -> None:
        response = client.post("/v1/serp", json={"num": 5})

        assert response.status_code == 400
        assert response.json() == {"error": "Query parameter (q) is required"}

    def test_post_without_body(self, client: TestClient) -> None:
        response = client.post("/v1/serp")

        assert response.status_code == 400
        assert response.json() == {"error": "Query parameter (q) is required"}

    def test_post_malformed_json(self, client: TestClient) -> None:
        response = client.post("/v1/serp", content=b"{not json", headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert "error" in response.json()


class TestSerpAuth:
    def test_missing_key(self, secured_client: TestClient) -> None:
        response = secured_client.get("/v1/serp", params={"q": "coffee"})

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_wrong_key(self, secured_client: TestClient) -> None:
        response = secured_client.post("/v1/serp", json={"q": "coffee"}, headers={"X-API-Key": "nope"})

        assert response.status_code == 401

    def test_correct_key(self, secured_client: TestClient) -> None:
        response = secured_client.get("/v1/serp", params={"q": "coffee"}, headers={"X-API-Key": "s3cret"})

        assert response.status_code == 200

    def test_no_secret_configured_allows_anonymous(self, client: TestClient) -> None:
        assert client.get("/v1/serp", params={"q": "coffee"}).status_code == 200


class TestSerpOptions:
    def test_bare_options(self, client: TestClient) -> None:
        response = client.options("/v1/serp")

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"

    def test_cors_preflight(self, client: TestClient) -> None:
        response = client.options(
            "/v1/serp",
            headers={"Origin": "https://app.example", "Access-Control-Request-Method": "POST"},
        )

        assert response.status_code == 200
        assert "access-control-allow-origin" in response.headers

    def test_options_skips_auth(self, secured_client: TestClient) -> None:
        assert secured_client.options("/v1/serp").status_code == 200
