"""Search feed main application module.

This module initializes the FastAPI application and configures
logging, middleware, routers, and startup/shutdown events.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from searchfeed.api.export import router as export_router
from searchfeed.api.health import router as health_router
from searchfeed.api.middleware import setup_middleware
from searchfeed.domain.exceptions import (
    InvalidExportRequestError,
    StorefrontContextError,
    UnknownShopkeyError,
)
from searchfeed.infrastructure.config import settings
from searchfeed.infrastructure.database import create_schema
from searchfeed.infrastructure.search_client import get_search_client

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(message)s",
    stream=sys.stderr,
)
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    # Startup
    logger.info(
        "Starting search feed service",
        version=settings.api_version,
        debug=settings.debug,
    )

    if settings.auto_create_schema:
        await create_schema()
        logger.info("Database schema ready")

    yield

    # Shutdown
    await get_search_client().close()
    logger.info("Shutting down search feed service")


app = FastAPI(
    title="Search Feed",
    description="Catalog export feed for an external search service",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Setup custom middleware (request ID, error handling)
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(export_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================


def error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    details: list[dict] | None = None,
) -> JSONResponse:
    """Build an error response in the common envelope."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details or [],
            "request_id": getattr(request.state, "request_id", None),
        },
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
        details = detail.get("details", [])
    else:
        error_code = "ERROR"
        message = str(detail)
        details = []

    return error_response(request, exc.status_code, error_code, message, details)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Reject malformed query parameters."""
    details = [
        {
            "field": ".".join(str(part) for part in error["loc"][1:]) or None,
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return error_response(request, 400, "INVALID_REQUEST", "Invalid request parameters", details)


@app.exception_handler(InvalidExportRequestError)
async def invalid_export_request_handler(
    request: Request, exc: InvalidExportRequestError
) -> JSONResponse:
    """Reject export parameters that violate their constraints."""
    details = [
        {"field": violation.split(":", 1)[0], "message": violation}
        for violation in exc.violations
    ]
    return error_response(request, 400, "INVALID_REQUEST", exc.message, details)


@app.exception_handler(UnknownShopkeyError)
async def unknown_shopkey_handler(request: Request, exc: UnknownShopkeyError) -> JSONResponse:
    """Reject shopkeys that are not bound to any shop."""
    logger.warning("Unknown shopkey", shopkey=exc.shopkey)
    return error_response(request, 401, "UNKNOWN_SHOPKEY", exc.message)


@app.exception_handler(StorefrontContextError)
async def storefront_context_handler(
    request: Request, exc: StorefrontContextError
) -> JSONResponse:
    """Report a shopkey bound to a missing sales channel."""
    logger.error("Storefront context unavailable", error=exc.message, **exc.details)
    return error_response(request, 500, "STOREFRONT_UNAVAILABLE", exc.message)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions with consistent format."""
    logger.exception(
        "Unhandled exception in handler",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )
    return error_response(request, 500, "INTERNAL_ERROR", "An internal error occurred")
