"""FastAPI application entry point for the shortlink service.

Application Lifecycle Diagram
=============================
::
    ┌─────────────┐
    │  uvicorn    │
    │  startup    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ create_app()│
    │ routes, CORS│
    │ /metrics    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ lifespan()  │
    │ startup:    │
    │ init db,    │
    │ click pool  │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Serve HTTP  │
    │ requests    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ lifespan()  │
    │ shutdown:   │
    │ drain clicks│
    │ dispose db  │
    └─────────────┘

How to Use
===========
**Step 1 — Run with uvicorn**::
    uvicorn shortlink.main:app --host 0.0.0.0 --port 3006

**Step 2 — Shorten a URL**::
    curl -X POST http://localhost:3006/shorten \\
         -H "Content-Type: application/json" \\
         -d '{"url": "https://example.com"}'

**Step 3 — Follow it**::
    curl -i http://localhost:3006/<slug>

Key Behaviours
===============
- Route order matters: API, admin, auth, /health and /metrics are registered
  before the catch-all ``/{slug}``; the static mount comes last.
- ``ShortlinkError`` subclasses render as ``{"error": message}`` with their
  own status code.
- Services are created lazily on first request if the lifespan did not run
  (e.g. under an ASGI test transport).
"""

__all__ = ["app", "create_app", "main"]

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from prometheus_fastapi_instrumentator import Instrumentator

from shortlink import __version__, admin, auth, routes
from shortlink.config import Settings, get_settings
from shortlink.dependencies import ServiceManager
from shortlink.errors import ShortlinkError
from shortlink.logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    manager: ServiceManager = app.state.services
    await manager.initialize()
    yield
    await manager.cleanup()


async def shortlink_error_handler(request: Request, exc: ShortlinkError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        version=__version__,
        description="URL shortener with collision-safe slug allocation",
        lifespan=lifespan,
    )
    app.state.services = ServiceManager(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ShortlinkError, shortlink_error_handler)

    Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=False,
        should_respect_env_var=False,
    ).instrument(app).expose(app)

    app.include_router(routes.router)
    app.include_router(admin.router)
    app.include_router(auth.router)
    app.include_router(routes.redirect_router)

    static_dir = Path(settings.STATIC_DIR)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
    else:
        logger.info(f"Static directory {static_dir} not found, serving API only")

    return app


app = create_app()


def main() -> None:
    import uvicorn

    settings = get_settings()
    logger.info(f"Server running at http://0.0.0.0:{settings.PORT}")
    uvicorn.run("shortlink.main:app", host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    main()
