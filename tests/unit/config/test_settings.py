"""Tests for application settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from serprelay.config.settings import Settings


class TestSettings:
    def test_defaults(self, settings: Settings) -> None:
        assert settings.server.port == 8080
        assert settings.server.api_secret == ""
        assert settings.cache.ttl_seconds == 3600
        assert settings.cache.cache_mock_responses is False
        assert settings.cache.max_entries is None
        assert settings.providers.public_searxng_instances == []
        assert settings.providers.request_timeout == 10.0
        assert settings.providers.mirror_timeout == 8.0
        assert settings.search.resolve_timeout is None

    def test_env_vars(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SERPRELAY_PROVIDERS__NOVEXITY_URL", "http://novexity:8000")
        monkeypatch.setenv("SERPRELAY_CACHE__TTL_SECONDS", "600")

        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.providers.novexity_url == "http://novexity:8000"
        assert settings.cache.ttl_seconds == 600

    @pytest.mark.parametrize(
        "raw",
        [
            "https://a.example, https://b.example",
            '["https://a.example", "https://b.example"]',
            ["https://a.example", "https://b.example"],
        ],
    )
    def test_public_instances_parsing(self, raw: object) -> None:
        settings = Settings(_env_file=None, providers={"public_searxng_instances": raw})  # type: ignore[call-arg]

        assert settings.providers.public_searxng_instances == ["https://a.example", "https://b.example"]

    def test_provider_status(self) -> None:
        settings = Settings(  # type: ignore[call-arg]
            _env_file=None,
            providers={"searxng_url": "http://searxng:8080", "serper_api_key": "key"},
        )

        assert settings.providers.status() == {
            "novexity": False,
            "searxng": True,
            "searxng_public": False,
            "serper": True,
        }

    def test_from_yaml(self, tmp_path: Path) -> None:
        config = tmp_path / "serprelay-config.yaml"
        config.write_text(
            "providers:\n"
            "  novexity_url: http://novexity:8000\n"
            "cache:\n"
            "  cache_mock_responses: true\n"
            "  max_entries: 500\n"
        )

        settings = Settings.from_yaml(config)

        assert settings.providers.novexity_url == "http://novexity:8000"
        assert settings.cache.cache_mock_responses is True
        assert settings.cache.max_entries == 500

    def test_from_yaml_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            Settings.from_yaml(tmp_path / "missing.yaml")
