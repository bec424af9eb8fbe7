"""Cache endpoints — Inspect and clear the response cache."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from serprelay.api.deps import get_engine, verify_api_key
from serprelay.core.engine import SerpEngine

logger = logging.getLogger(__name__)

router = APIRouter()


class CacheStatsResponse(BaseModel):
    """Response cache statistics."""

    entries: int = Field(description="Stored entries, including expired ones not yet overwritten")
    live_entries: int = Field(description="Entries that have not expired")
    ttl_seconds: int = Field(description="Time-to-live applied to new entries")
    max_entries: int | None = Field(default=None, description="Entry bound (None = unbounded)")


class CacheClearResponse(BaseModel):
    """Result of clearing the cache."""

    cleared: int = Field(description="Number of entries removed")


@router.get(
    "/cache/stats",
    response_model=CacheStatsResponse,
    summary="Cache Statistics",
)
async def cache_stats(
    engine: SerpEngine = Depends(get_engine),
) -> CacheStatsResponse:
    return CacheStatsResponse(**engine.cache.stats())


@router.delete(
    "/cache",
    response_model=CacheClearResponse,
    summary="Clear Cache",
    description="Drop every cached response. Protected by the shared secret when one is configured.",
    dependencies=[Depends(verify_api_key)],
)
async def clear_cache(
    engine: SerpEngine = Depends(get_engine),
) -> CacheClearResponse:
    """Drop every cached response."""
    cleared = engine.cache.clear()
    logger.info("Cache cleared via API (%d entries)", cleared)
    return CacheClearResponse(cleared=cleared)
