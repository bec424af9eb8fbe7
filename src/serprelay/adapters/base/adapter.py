"""Base search adapter — Abstract interface for all SERP providers.

Every search backend must implement this interface to take part in the
fallback chain. The adapter is responsible for:
  1. Executing the query against its backend
  2. Normalizing the native response into a ``SearchResponse``
  3. Reporting health status

Failures are signalled by raising an ``AdapterError`` subclass; an empty
``organic`` list means the provider answered but had nothing to offer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from serprelay.models.query import SearchQuery
from serprelay.models.response import SearchResponse


class AdapterHealth(BaseModel):
    """Health status of a search adapter."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of last health check in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of last health check")
    message: str | None = Field(default=None, description="Additional health message")


class SearchAdapter(ABC):
    """Abstract base class for SERP provider adapters.

    All adapters must implement:
      - name: Provider identifier reported in ``SearchResponse.provider``
      - initialize() / shutdown(): Resource lifecycle
      - search(): Execute a query and return a normalized response
      - health_check(): Report adapter health status
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique adapter name (e.g., 'novexity', 'serper')."""

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the adapter (HTTP clients, etc.).

        Raises:
            ConfigurationError: If the adapter is not configured; the engine
                skips such adapters.
        """

    @abstractmethod
    async def shutdown(self) -> None:
        """Release resources held by the adapter."""

    @abstractmethod
    async def search(self, query: SearchQuery) -> SearchResponse:
        """Execute a query against the backend.

        Args:
            query: The query to resolve.

        Returns:
            A normalized response; ``organic`` may be empty.

        Raises:
            AdapterError: On transport failure, non-2xx status, or malformed payload.
        """

    @abstractmethod
    async def health_check(self) -> AdapterHealth:
        """Check the health of the search backend."""
