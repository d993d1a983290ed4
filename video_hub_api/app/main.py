"""
Main entrypoint for the Video Hub API.

This module assembles the FastAPI application, sets up logging,
registers the JSON error handlers and includes versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``.  Run it with uvicorn,
e.g.::

    uvicorn video_hub_api.app.main:app --reload

Every error leaves the API as ``{"error": "<message>"}``.  Expected
failures keep their message; anything unexpected is logged and
reported as a generic 500.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import init_db
from .core.errors import ServiceError
from .core.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return _error_response(exc.status_code, exc.message)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report the first schema violation as a 400 with a readable message."""
    errors = exc.errors()
    if not errors:
        return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid request")
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    message = first.get("msg", "Invalid value")
    if field:
        message = f"{field}: {message}"
    return _error_response(status.HTTP_400_BAD_REQUEST, message)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = f"Internal server error: {exc}" if settings.debug else "Internal server error"
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message)


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    This function performs one‑time setup tasks such as configuring
    logging, registering error handlers, mounting the media directory
    and including versioned API routers.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Initialise logging before anything else so that imports below can
    # safely log messages.
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(title=settings.project_name, version=settings.api_version)

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(v1_router, prefix="/api/v1")

    # Uploaded media are served straight from disk.  The directory is
    # created on first upload, so do not require it to exist yet.
    app.mount(settings.media_url, StaticFiles(directory=settings.media_root, check_dir=False), name="media")

    @app.on_event("startup")
    async def startup_event() -> None:
        # Apply migrations at startup.  This will create the database
        # file if it does not exist and ensure all tables are up to date.
        init_db()

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
