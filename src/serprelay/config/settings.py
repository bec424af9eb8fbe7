"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. YAML config file (if specified)
  2. Environment variables (SERPRELAY_ prefix)
  3. Default values

Every provider is independently optional. With nothing configured, all
requests resolve to the synthetic mock response.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class ServerSettings(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="Server bind address")
    port: int = Field(default=8080, description="Server port")
    workers: int = Field(default=1, description="Number of worker processes")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")
    api_secret: str = Field(
        default="",
        description="Shared secret expected in the X-API-Key header (empty = no inbound auth)",
    )


class ProviderSettings(BaseModel):
    """Search provider configuration, listed in fallback priority order."""

    novexity_url: str = Field(default="", description="Base URL of the self-hosted Novexity (SerpAPI-compatible) service")
    novexity_api_key: str = Field(default="", description="Optional X-API-Key for Novexity")
    searxng_url: str = Field(default="", description="Base URL of the self-hosted SearXNG instance")
    public_searxng_instances: list[str] = Field(
        default_factory=list,
        description="Public SearXNG mirror base URLs (shuffled per request)",
    )
    serper_api_key: str = Field(default="", description="Serper.dev API key")
    serper_search_url: str = Field(default="https://google.serper.dev/search", description="Serper web search endpoint")
    serper_news_url: str = Field(default="https://google.serper.dev/news", description="Serper news search endpoint")
    request_timeout: float = Field(default=10.0, gt=0, description="Per-request timeout in seconds")
    mirror_timeout: float = Field(default=8.0, gt=0, description="Per-mirror attempt timeout in seconds")
    min_request_interval: float = Field(
        default=0.0,
        ge=0,
        description="Minimum delay between consecutive requests to the same provider, in seconds",
    )

    @field_validator("public_searxng_instances", mode="before")
    @classmethod
    def _parse_instances(cls, v: Any) -> list[str]:
        """Parse instances from a JSON string, comma-separated string (env var), or list."""
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return [str(h) for h in parsed]
            except (json.JSONDecodeError, TypeError):
                pass
            return [h.strip() for h in v.split(",") if h.strip()]
        return list(v)

    def status(self) -> dict[str, bool]:
        """Which providers are configured (no network access)."""
        return {
            "novexity": bool(self.novexity_url),
            "searxng": bool(self.searxng_url),
            "searxng_public": bool(self.public_searxng_instances),
            "serper": bool(self.serper_api_key),
        }


class SearchSettings(BaseModel):
    """Resolution behaviour."""

    resolve_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Overall deadline for walking the provider chain (None = no deadline)",
    )


class CacheSettings(BaseModel):
    """Response cache configuration."""

    enabled: bool = Field(default=True, description="Whether responses are cached")
    ttl_seconds: int = Field(default=3600, gt=0, description="Time-to-live for every cache entry")
    cache_mock_responses: bool = Field(
        default=False,
        description="Also cache synthetic mock responses (otherwise a provider outage is never baked in)",
    )
    max_entries: int | None = Field(
        default=None,
        gt=0,
        description="Upper bound on cache entries with LRU eviction (None = unbounded)",
    )


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the SERPRELAY_ prefix.
    Nested settings use double underscores.

    Example:
        SERPRELAY_PROVIDERS__NOVEXITY_URL=http://novexity:8000
        SERPRELAY_PROVIDERS__SERPER_API_KEY=...
        SERPRELAY_SERVER__API_SECRET=change-me
        SERPRELAY_CACHE__TTL_SECONDS=600
    """

    model_config = {
        "env_prefix": "SERPRELAY_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    server: ServerSettings = Field(default_factory=ServerSettings)
    providers: ProviderSettings = Field(default_factory=ProviderSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values present in the YAML file override environment variables;
        anything the file omits is still read from the environment.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
