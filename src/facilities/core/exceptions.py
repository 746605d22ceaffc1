"""Exception handlers with request_id in responses."""

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.facilities.core.errors import (
    ConflictError,
    FacilitiesError,
    InfrastructureError,
    NotFoundError,
    TenantContextMissing,
    ValidationError,
)
from src.facilities.core.logging import get_logger

logger = get_logger(__name__)

# Most specific first; the first isinstance match wins.
DOMAIN_STATUS_CODES: tuple[tuple[type[FacilitiesError], int], ...] = (
    (TenantContextMissing, 401),
    (ValidationError, 422),
    (NotFoundError, 404),
    (ConflictError, 409),
    (InfrastructureError, 503),
)


def status_code_for(exc: FacilitiesError) -> int:
    for error_type, status_code in DOMAIN_STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 400


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(FacilitiesError)
    async def domain_exception_handler(request: Request, exc: FacilitiesError) -> JSONResponse:
        status_code = status_code_for(exc)
        content: dict[str, object] = {
            "detail": exc.message,
            "request_id": correlation_id.get(),
        }
        if isinstance(exc, ValidationError):
            content["errors"] = [{"field": v.field, "message": v.message} for v in exc.violations]
        if isinstance(exc, InfrastructureError):
            logger.warning(
                "Infrastructure failure",
                error_type=type(exc).__name__,
                detail=exc.message,
                path=request.url.path,
            )
        return JSONResponse(status_code=status_code, content=content)

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "request_id": request_id,
            },
        )
