"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest
from starlette.responses import Response

from sol_dashboard import __version__
from sol_dashboard.api.middleware.cors import setup_cors
from sol_dashboard.api.routes import api_router
from sol_dashboard.config.settings import AppConfig
from sol_dashboard.engine.client import LedgerEngine
from sol_dashboard.errors.definitions import ErrInternal, ErrInvalidRequest
from sol_dashboard.errors.ledger_errors import LedgerError
from sol_dashboard.metrics.collector import EngineMetrics
from sol_dashboard.metrics.middleware import PrometheusMiddleware

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle hooks.

    Initialises the engine (datastore, chain clients, background jobs) on
    startup and gracefully shuts it down on exit.
    """
    config: AppConfig = app.state.config
    engine = LedgerEngine(config, metrics=app.state.metrics)

    try:
        await engine.initialize()
        app.state.engine = engine
        yield
    finally:
        await engine.close()
        app.state.engine = None


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return ErrInvalidRequest.message
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    msg = first.get("msg", "invalid value")
    return f"{loc}: {msg}" if loc else msg


def create_app(*, config: AppConfig | None = None) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        config: Optional AppConfig. If *None*, a default config is created
            from environment variables.
    """
    if config is None:
        config = AppConfig()

    app = FastAPI(
        title="sol-dashboard",
        version=__version__,
        description="Transaction ledger and swap API for a Solana wallet dashboard",
        lifespan=_lifespan,
    )

    # Store config on app.state for lifespan access
    app.state.config = config
    app.state.metrics = EngineMetrics() if config.metrics.enabled else None

    # -- Middleware --
    setup_cors(app, config.server.cors_origins)
    if app.state.metrics is not None:
        app.add_middleware(PrometheusMiddleware, registry=app.state.metrics.registry)

    # -- Error handlers --
    @app.exception_handler(LedgerError)
    async def _ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message, "code": exc.code},
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=ErrInvalidRequest.status_code,
            content={"error": _validation_message(exc), "code": ErrInvalidRequest.code},
        )

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("%s %s failed", request.method, request.url.path)
        return JSONResponse(
            status_code=ErrInternal.status_code,
            content={"error": ErrInternal.message, "code": ErrInternal.code},
        )

    # -- Base routes --
    @app.get("/health", tags=["base"])
    async def health() -> dict[str, Any]:
        engine: LedgerEngine | None = getattr(app.state, "engine", None)
        if engine is None:
            return {"status": "ok"}
        return {"status": "ok", "components": await engine.health_check()}

    @app.get("/metrics", tags=["base"], include_in_schema=False)
    async def metrics_endpoint() -> Response:
        """Prometheus metrics endpoint."""
        if app.state.metrics is None:
            return Response(status_code=404)
        return Response(
            content=generate_latest(app.state.metrics.registry),
            media_type="text/plain; version=0.0.4; charset=utf-8",
        )

    app.include_router(api_router)

    return app
