"""FastAPI application factory (create_app)."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from starlette.responses import Response

from zannime import __version__
from zannime.infrastructure.config import AppConfig
from zannime.interfaces.app_state import AppState
from zannime.interfaces.composition import lifespan

log = structlog.get_logger(__name__)


def create_app(config: AppConfig) -> FastAPI:
    """Create FastAPI app from configuration only, without resource initialization.

    Resources (HTTP client, source registry, use cases) are created in lifespan().
    """
    app = FastAPI(
        title="Zannime",
        description=config.stremio.addon_description,
        version=__version__,
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    from zannime.interfaces.api.stremio import router as stremio_router

    app.include_router(stremio_router)

    @app.get("/healthz")
    async def healthz() -> dict[str, str | int]:
        """Liveness probe; 200 while the process runs."""
        sources = getattr(app.state, "sources", None)
        return {"status": "ok", "sources": len(sources) if sources else 0}

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ):
        start = time.perf_counter()
        status_code = 500  # kept when call_next raises
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
            )

    return app
