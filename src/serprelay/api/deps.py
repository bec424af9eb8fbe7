"""API dependencies — Dependency injection for FastAPI endpoints."""

from __future__ import annotations

import hmac

from fastapi import Depends, Header

from serprelay.api.errors import ApiError
from serprelay.core.engine import SerpEngine

# Global engine instance (set during application lifespan)
_engine: SerpEngine | None = None


def set_engine(engine: SerpEngine | None) -> None:
    """Set the global engine instance (called during app lifespan)."""
    global _engine
    _engine = engine


def get_engine() -> SerpEngine:
    """Get the global SerpRelay engine instance.

    Returns:
        The initialized SerpEngine.

    Raises:
        RuntimeError: If the engine is not initialized.
    """
    if _engine is None:
        raise RuntimeError("SerpRelay engine not initialized. Is the server running?")
    return _engine


def verify_api_key(
    x_api_key: str | None = Header(default=None),
    engine: SerpEngine = Depends(get_engine),
) -> None:
    """Enforce the shared ``X-API-Key`` secret when one is configured.

    Raises:
        ApiError: 401 if a secret is configured and the header does not match.
    """
    secret = engine.settings.server.api_secret
    if not secret:
        return
    if not hmac.compare_digest((x_api_key or "").encode(), secret.encode()):
        raise ApiError(401, "Unauthorized")
