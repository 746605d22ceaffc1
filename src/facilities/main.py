from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.middleware.base import RequestResponseEndpoint

from src.facilities.api.middlewares import logging_context_middleware
from src.facilities.api.v1.router import api_router
from src.facilities.core.config import get_settings
from src.facilities.core.db import dispose_engine, get_session
from src.facilities.core.exceptions import setup_exception_handlers
from src.facilities.core.logging import get_logger, setup_logging
from src.facilities.core.shutdown import request_tracker

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info("Starting application", app_name=settings.app_name, env=settings.app_env)

    yield

    request_tracker.start_shutdown()
    drained = await request_tracker.wait_for_drain(timeout=settings.shutdown_grace_period)
    if not drained:
        logger.warning(
            "Closing with requests in flight",
            in_flight=request_tracker.in_flight_count,
        )
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "pm-schedules", "description": "Preventive maintenance schedules and completions"},
    {"name": "pm-templates", "description": "Reusable preventive maintenance templates"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Tenant-isolated preventive maintenance scheduling API",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
    )

    setup_exception_handlers(app)

    # Innermost first: logging context needs the correlation id already set
    app.middleware("http")(logging_context_middleware)

    @app.middleware("http")
    async def track_requests_middleware(
        request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Track in-flight requests for graceful shutdown."""
        if request.url.path == "/health":
            return await call_next(request)
        async with request_tracker.track_request():
            return await call_next(request)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Authorization", "Content-Type", "X-Tenant-ID", "X-Request-ID"],
    )

    # Outermost middleware
    app.add_middleware(CorrelationIdMiddleware)

    app.include_router(api_router)

    @app.get("/health")
    async def health() -> JSONResponse:
        """Health check with a database round-trip."""
        if request_tracker.is_shutting_down:
            return JSONResponse(
                content={
                    "status": "draining",
                    "in_flight_requests": request_tracker.in_flight_count,
                },
                status_code=503,
            )

        health_status: dict[str, Any] = {"status": "healthy", "database": "unknown"}
        try:
            async with get_session() as session:
                await session.execute(text("SELECT 1"))
            health_status["database"] = "healthy"
        except Exception as e:
            logger.warning("Health check database failure", error=str(e))
            health_status["database"] = f"unhealthy: {e}"
            health_status["status"] = "unhealthy"

        status_code = 200 if health_status["status"] == "healthy" else 503
        return JSONResponse(content=health_status, status_code=status_code)

    return app


app = create_app()
