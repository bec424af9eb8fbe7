"""Health check endpoints — Service status and provider health monitoring."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from serprelay import __version__
from serprelay.adapters.base.adapter import AdapterHealth
from serprelay.api.deps import get_engine
from serprelay.core.engine import SerpEngine

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Response models ──────────────────────────────────────────────────────


class HealthResponse(BaseModel):
    """System health check response."""

    status: str = Field(description="'healthy', or 'degraded' when no real provider is active (mock only)")
    version: str = Field(description="SerpRelay server version")
    service: str = Field(description="Service name ('serprelay')")
    providers: dict[str, bool] = Field(description="Which providers are configured")
    active_adapters: list[str] = Field(description="Active adapters in fallback priority order")
    cache_mock_responses: bool = Field(description="Whether mock responses are cached")


class AdapterHealthResponse(BaseModel):
    """Per-adapter health check response."""

    adapters: dict[str, AdapterHealth] = Field(
        description="Map of adapter name to its health status",
    )


# ── Endpoints ────────────────────────────────────────────────────────────


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="System Health Check",
    description=(
        "Returns overall service health, server version, which providers are "
        "configured, and the active adapters in fallback order."
    ),
)
async def health_check(
    engine: SerpEngine = Depends(get_engine),
) -> HealthResponse:
    """Basic health check endpoint with provider info."""
    status = engine.status()
    return HealthResponse(
        status="healthy" if status["active"] else "degraded",
        version=__version__,
        service="serprelay",
        providers=status["configured"],
        active_adapters=status["active"],
        cache_mock_responses=status["cache_mock_responses"],
    )


@router.get(
    "/health/adapters",
    response_model=AdapterHealthResponse,
    summary="Adapter Health Check",
    description=(
        "Run health checks on every active provider adapter and return "
        "per-adapter status including latency and diagnostic message."
    ),
)
async def adapter_health(
    engine: SerpEngine = Depends(get_engine),
) -> AdapterHealthResponse:
    """Check health of all provider adapters."""
    adapter_statuses = await engine.adapter_registry.health_check_all()
    return AdapterHealthResponse(adapters=adapter_statuses)
