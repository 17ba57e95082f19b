# studydesk/api/main.py
"""FastAPI application entry point."""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Config
from ..container import StudyDeskServices, build_services
from ..errors import StudyDeskError
from ..logging_config import setup_logging
from .errors import status_for
from .routes import catalog, library, study

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build services on startup unless they were injected."""
    owned = app.state.services is None
    if owned:
        app.state.services = await build_services(app.state.config)
    try:
        yield
    finally:
        if owned:
            await app.state.services.shutdown()
            app.state.services = None


def create_app(
    config: Optional[Config] = None,
    services: Optional[StudyDeskServices] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Application config; taken from `services` when omitted
        services: Pre-built services (tests); built in the lifespan otherwise

    Returns:
        Configured FastAPI application instance with routes, middleware, and error handlers.
    """
    if config is None:
        config = services.config if services is not None else Config()

    setup_logging(
        config.logging.level,
        json_file=config.logging.json_file,
        enable_console_logging=config.logging.console,
    )

    app = FastAPI(
        title="Study Desk API",
        description="Catalog sync and study session API for a local lecture library",
        version=__version__,
        lifespan=lifespan,
        debug=config.api.debug,
    )
    app.state.config = config
    app.state.services = services

    @app.exception_handler(StudyDeskError)
    async def study_desk_exception_handler(request: Request, exc: StudyDeskError):
        status_code = status_for(exc)
        if status_code >= 500:
            logger.error("Request failed: %s", exc.message)
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.message, "suggestion": exc.suggestion},
        )

    # Global Exception Handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        error_id = str(uuid.uuid4())[:8]
        logger.exception("Unhandled exception [%s]: %s", error_id, exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal Server Error", "error_id": error_id},
        )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_credentials=True,
        allow_methods=config.api.cors_methods,
        allow_headers=config.api.cors_headers,
    )

    # Include routers
    app.include_router(library.router, prefix="/api/library", tags=["library"])
    app.include_router(catalog.router, prefix="/api/catalog", tags=["catalog"])
    app.include_router(study.router, prefix="/api/study", tags=["study"])

    @app.get("/health", tags=["health"])
    async def health_check():
        """Health check endpoint."""
        services = app.state.services
        return {
            "status": "healthy",
            "version": __version__,
            "services": services.get_service_status() if services else {},
        }

    @app.get("/api", tags=["root"])
    async def api_root():
        """API root endpoint."""
        return {
            "name": "Study Desk API",
            "version": __version__,
            "endpoints": {
                "library": "/api/library",
                "catalog": "/api/catalog",
                "study": "/api/study",
                "health": "/health",
            },
        }

    return app
