"""
Pattern API.

FastAPI-based REST interface exposing policy classification and example
policy generation.
"""

from __future__ import annotations

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from usagecontrol import __version__
from usagecontrol.api.routes import router
from usagecontrol.api.schemas import (
    ErrorResponse,
    HealthCheck,
    PatternInfo,
    PatternListResponse,
    PatternRequest,
    PatternResponse,
)

logger = logging.getLogger(__name__)


def create_app(
    title: str = "Usage Patterns API",
    version: str = __version__,
    debug: bool = False,
    cors_origins: list[str] | None = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        title: API title
        version: API version
        debug: Enable debug mode
        cors_origins: Allowed CORS origins; None disables CORS

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=title,
        description="Classify usage-control policies and generate example policies",
        version=version,
        debug=debug,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(router)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Return HTTP errors in the ErrorResponse shape."""
        body = ErrorResponse(error=HTTPStatus(exc.status_code).phrase, detail=exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=body.model_dump(),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error("Unhandled exception: %s", exc, exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc) if debug else None,
            },
        )

    return app


__all__ = [
    "create_app",
    "router",
    # Schemas
    "ErrorResponse",
    "HealthCheck",
    "PatternInfo",
    "PatternListResponse",
    "PatternRequest",
    "PatternResponse",
]
