"""Public HTTP routes: health, shorten, and slug redirect.

API Endpoint Overview
=====================
::
    GET  /health
        └─ HealthResponse (200)

    POST /shorten
        ├─ ShortenRequest (request body)
        └─ ShortenResponse (200) or 400/409/500

    GET  /dashboard | /login | /logout
        └─ SPA index.html (200) or 404

    GET  /{slug}
        └─ 307 Redirect, 404, 410 or 500

Key Behaviours
===============
- Domain errors raised by the allocator and store are rendered by the
  ``ShortlinkError`` handler in ``shortlink.main`` as ``{"error": ...}``.
- The redirect never waits for the click counter.
- Dotted paths are static-asset misses and get an empty 404.
- 307 keeps the request method on redirect.
- ``/{slug}`` must be registered after every other single-segment route.
"""

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse, PlainTextResponse, RedirectResponse, Response

from shortlink.allocator import SlugAllocator
from shortlink.dependencies import (
    RequestContext,
    ServiceManager,
    get_allocator,
    get_request_context,
    get_resolver,
    get_service_manager,
)
from shortlink.enums import HealthStatus, ResolutionState
from shortlink.errors import StoreError
from shortlink.resolver import Resolver
from shortlink.schemas import ErrorResponse, HealthResponse, ShortenRequest, ShortenResponse

__all__ = ["router", "redirect_router", "SPA_ROUTES"]

logger = logging.getLogger(__name__)

SPA_ROUTES = ("dashboard", "login", "logout")

router = APIRouter()
redirect_router = APIRouter()


@router.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check(manager: ServiceManager = Depends(get_service_manager)) -> HealthResponse:
    db_status = HealthStatus.HEALTHY
    try:
        await manager.store.ping()
    except StoreError as exc:
        logger.error(f"Database health check failed: {exc}")
        db_status = HealthStatus.UNHEALTHY
    return HealthResponse(status=db_status, database=db_status)


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    tags=["urls"],
    responses={
        400: {"model": ErrorResponse, "description": "Empty URL"},
        409: {"model": ErrorResponse, "description": "Custom slug already taken"},
        500: {"model": ErrorResponse, "description": "Slug space exhausted or database error"},
    },
)
async def shorten_url(
    payload: ShortenRequest,
    ctx: RequestContext = Depends(get_request_context),
    allocator: SlugAllocator = Depends(get_allocator),
) -> ShortenResponse:
    logger.info(
        f"Shorten requested: {payload.url}",
        extra={"request_id": ctx.request_id, "custom_slug": payload.custom_slug},
    )
    allocation = await allocator.allocate(payload.url, payload.custom_slug, payload.expires_at)
    logger.info(
        f"Shortened to {allocation.slug} in {ctx.get_duration():.1f}ms",
        extra={"request_id": ctx.request_id},
    )
    return ShortenResponse(
        success=True,
        short_url=allocation.short_url,
        slug=allocation.slug,
        original_url=allocation.original_url,
        expires_at=allocation.expires_at,
    )


def _spa_index(manager: ServiceManager) -> Response:
    index = Path(manager.settings.STATIC_DIR) / "index.html"
    if not index.is_file():
        raise HTTPException(status_code=404, detail="Not found")
    return FileResponse(index, media_type="text/html")


@redirect_router.get(
    "/{slug}",
    tags=["redirect"],
    responses={
        307: {"description": "Redirect to the original URL"},
        404: {"description": "Unknown slug"},
        410: {"description": "Link has expired"},
        500: {"model": ErrorResponse, "description": "Database error"},
    },
)
async def redirect_to_url(
    slug: str,
    ctx: RequestContext = Depends(get_request_context),
    manager: ServiceManager = Depends(get_service_manager),
    resolver: Resolver = Depends(get_resolver),
) -> Response:
    if slug in SPA_ROUTES:
        return _spa_index(manager)

    resolution = await resolver.resolve(slug)
    if resolution.state is ResolutionState.NOT_FOUND:
        logger.debug(f"Slug not found: {slug}", extra={"request_id": ctx.request_id})
        if "." in slug:
            return Response(status_code=404)
        return PlainTextResponse("URL not found", status_code=404)
    if resolution.state is ResolutionState.EXPIRED:
        return PlainTextResponse("URL has expired", status_code=410)

    logger.info(
        f"Redirect {slug} -> {resolution.record.original_url}",
        extra={"request_id": ctx.request_id, "client_ip": ctx.client_ip},
    )
    return RedirectResponse(url=resolution.record.original_url, status_code=307)
