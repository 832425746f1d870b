"""
Main FastAPI application entry point.

This module creates the FastAPI application instance and configures
all routes, middleware, error handlers and application lifecycle events.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from contactnexus import __version__
from contactnexus.api.routes import contacts, groups
from contactnexus.config.settings import Settings, settings as default_settings
from contactnexus.core.dependencies import build_services, get_database
from contactnexus.core.logging import setup_logging
from contactnexus.core.seed import load_demo_data, load_seed_file
from contactnexus.core.store import InMemoryDatabase
from contactnexus.services.base import ServiceError
from contactnexus.services.integration.suggestion_service import GroupSuggester, build_suggester

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    db: Optional[InMemoryDatabase] = None,
    suggester: Optional[GroupSuggester] = None,
) -> FastAPI:
    """
    Build the application around one in-memory database.

    ``db`` and ``suggester`` can be injected; otherwise a fresh database is
    created and seeded according to ``settings`` at startup.
    """
    settings = settings or default_settings
    seed_on_startup = db is None
    db = db or InMemoryDatabase()
    suggester = suggester or build_suggester(settings.suggestion_api_url, settings.suggestion_timeout)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        Application lifespan manager.

        Configures logging and loads seed data on startup; closes the
        suggester's HTTP client on shutdown.
        """
        setup_logging(settings.log_level)
        logger.info(f"Starting {settings.project_name} API...")

        if seed_on_startup and len(db.groups) == 0 and len(db.contacts) == 0:
            if settings.seed_file:
                load_seed_file(db, settings.seed_file)
            elif settings.seed_demo_data:
                load_demo_data(db)

        logger.info(f"{settings.project_name} API ready: {db.get_metrics()}")
        yield

        close = getattr(suggester, "close", None)
        if callable(close):
            close()
        logger.info(f"Shutting down {settings.project_name} API...")

    app = FastAPI(
        title=settings.project_name,
        description="""
    ## ContactNexus API

    Contact management with a nested family and friend group hierarchy.

    - **Contacts**: create, edit, delete, search, filter by group subtree, sort
    - **Groups**: nested groups with cycle-safe re-parenting; deleting a group
      moves its children up one level
    - **Member counts**: each group counts the distinct contacts of its whole subtree
    - **Import / export**: CSV in, CSV or plain text out
    - **Smart suggestions**: suggest a family or friend group for a new contact
    """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url=f"{settings.api_v1_str}/openapi.json",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.services = build_services(db, suggester)

    # Configure CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        """Map service layer errors onto their HTTP status codes."""
        return JSONResponse(
            status_code=exc.http_status,
            content={
                "error": type(exc).__name__,
                "error_code": exc.error_code,
                "detail": exc.message if exc.http_status < 500 or settings.debug else "Internal server error",
                "details": exc.details if exc.http_status < 500 else {},
            }
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Global exception handler for unhandled errors.

        Provides consistent error responses and logging for debugging.
        """
        logger.exception(f"Unhandled error on {request.method} {request.url}: {exc}")
        error_detail = str(exc) if settings.debug else "Internal server error"

        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "detail": error_detail,
                "path": str(request.url),
                "method": request.method
            }
        )

    @app.get("/", tags=["System"])
    async def root():
        """
        Root endpoint providing API information.

        Returns:
            Dict containing API information and available endpoints
        """
        return {
            "message": f"Welcome to {settings.project_name}",
            "version": __version__,
            "status": "operational",
            "documentation": {
                "interactive": "/docs",
                "alternative": "/redoc",
                "openapi_spec": f"{settings.api_v1_str}/openapi.json"
            },
            "endpoints": {
                "contacts": f"{settings.api_v1_str}/contacts",
                "groups": f"{settings.api_v1_str}/groups",
            },
        }

    @app.get("/health", tags=["System"])
    async def health_check(db: InMemoryDatabase = Depends(get_database)):
        """
        Health check endpoint for monitoring and load balancers.

        Returns:
            Dict containing application health status and store sizes
        """
        return {
            "status": "healthy",
            "version": __version__,
            "environment": "development" if settings.debug else "production",
            "store": db.get_metrics(),
        }

    # Include API routers
    app.include_router(
        contacts.router,
        prefix=f"{settings.api_v1_str}/contacts",
        tags=["Contacts"]
    )

    app.include_router(
        groups.router,
        prefix=f"{settings.api_v1_str}/groups",
        tags=["Groups"]
    )

    return app


# Application instance used by uvicorn
app = create_app()


# Development server entry point
if __name__ == "__main__":
    uvicorn.run(
        "contactnexus.main:app",
        host="0.0.0.0",
        port=8000,
        reload=default_settings.debug,
        log_level=default_settings.log_level.lower()
    )
