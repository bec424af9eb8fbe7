"""SERP endpoint — Resolve a query through the provider fallback chain.

Accepts the same parameters as a query string (``GET``) or a JSON body
(``POST``):

- ``q`` (required) — search query
- ``num`` — number of results, default 10, clamped to 1-100
- ``gl`` — geography, default ``us``
- ``hl`` — language, default ``en``
- ``type`` — ``web`` (default) or ``news``

The endpoint never fails because of provider trouble: when every provider
is down the response is synthesized by the mock generator and flagged
``degraded``.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Depends, Response

from serprelay.api.deps import get_engine, verify_api_key
from serprelay.api.errors import ApiError
from serprelay.core.engine import SerpEngine
from serprelay.models.query import SerpRequest
from serprelay.models.response import SearchResponse

logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_RESPONSES = {
    400: {"description": "Missing query — `{\"error\": \"Query parameter (q) is required\"}`"},
    401: {"description": "Shared secret configured and `X-API-Key` missing or wrong"},
}


async def _resolve(request: SerpRequest, engine: SerpEngine, response: Response) -> SearchResponse:
    try:
        query = request.to_search_query()
    except ValueError as e:
        raise ApiError(400, str(e)) from e

    result = await engine.resolve(query)
    response.headers["Cache-Control"] = f"public, max-age={engine.settings.cache.ttl_seconds}"
    return result


@router.get(
    "/serp",
    response_model=SearchResponse,
    summary="Resolve SERP (query string)",
    description="Resolve a search query to normalized organic results. Parameters are read from the query string.",
    responses=_ERROR_RESPONSES,
    dependencies=[Depends(verify_api_key)],
)
async def serp_get(
    response: Response,
    q: str | None = None,
    num: str | None = None,
    gl: str | None = None,
    hl: str | None = None,
    type: str | None = None,
    engine: SerpEngine = Depends(get_engine),
) -> SearchResponse:
    """Resolve a query given as URL parameters."""
    request = SerpRequest(q=q, num=num, gl=gl, hl=hl, type=type)
    return await _resolve(request, engine, response)


@router.post(
    "/serp",
    response_model=SearchResponse,
    summary="Resolve SERP (JSON body)",
    description="Resolve a search query to normalized organic results. Parameters are read from the JSON body.",
    responses=_ERROR_RESPONSES,
    dependencies=[Depends(verify_api_key)],
)
async def serp_post(
    response: Response,
    request: SerpRequest | None = Body(default=None),
    engine: SerpEngine = Depends(get_engine),
) -> SearchResponse:
    """Resolve a query given as a JSON body."""
    return await _resolve(request or SerpRequest(), engine, response)


@router.options("/serp", include_in_schema=False)
async def serp_options() -> Response:
    """Answer bare preflight probes that carry no CORS request headers."""
    return Response(
        status_code=200,
        headers={
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type, X-API-Key",
        },
    )
