"""API v1 Router — SERP resolution, cache, and health endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from serprelay.api.v1.endpoints.cache import router as cache_router
from serprelay.api.v1.endpoints.health import router as health_router
from serprelay.api.v1.endpoints.serp import router as serp_router

router = APIRouter(tags=["v1"])
router.include_router(serp_router)
router.include_router(cache_router)
router.include_router(health_router)
