"""FastAPI application factory and lifecycle management."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from serprelay import __version__
from serprelay.api.deps import set_engine
from serprelay.api.errors import ApiError, api_error_handler, validation_error_handler
from serprelay.api.v1.router import router as v1_router
from serprelay.config.settings import Settings
from serprelay.core.engine import SerpEngine
from serprelay.observability.logging import setup_logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("serprelay-config.yaml")
CONFIG_ENV_VAR = "SERPRELAY_CONFIG"


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings for the server process.

    Sources, first match wins: ``config_path``, the file named by the
    ``SERPRELAY_CONFIG`` environment variable, ``./serprelay-config.yaml``,
    and finally environment variables alone.
    """
    config_path = config_path or os.environ.get(CONFIG_ENV_VAR)
    if config_path:
        logger.info("Loading configuration from %s", config_path)
        return Settings.from_yaml(config_path)
    if DEFAULT_CONFIG_PATH.exists():
        logger.info("Loading configuration from %s", DEFAULT_CONFIG_PATH)
        return Settings.from_yaml(DEFAULT_CONFIG_PATH)
    return Settings()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from
            ``serprelay-config.yaml`` or the environment.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = load_settings()

    setup_logging(settings.observability)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Manage application lifecycle (startup/shutdown)."""
        logger.info("Starting SerpRelay v%s", __version__)

        engine = SerpEngine(settings)
        await engine.initialize()
        set_engine(engine)

        app.state.settings = settings
        app.state.engine = engine

        logger.info("SerpRelay is ready to serve requests on port %d", settings.server.port)
        yield

        logger.info("Shutting down SerpRelay...")
        await engine.shutdown()
        set_engine(None)
        logger.info("SerpRelay shutdown complete")

    app = FastAPI(
        title="SerpRelay",
        description=(
            "SERP resolution layer — tries several search providers in priority order, "
            "normalizes their results, caches successes, and never fails outward."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_exception_handler(ApiError, api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(v1_router, prefix="/v1")

    return app
