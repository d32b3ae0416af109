"""Main application entry point for the Workforce API."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from workforce.api.graph import graph_router
from workforce.config.settings import Settings, get_settings
from workforce.data.factory import Repositories, build_repositories
from workforce.middleware.request_logging import RequestLoggingMiddleware
from workforce.routes.api import api_error_handler, api_router, request_validation_handler
from workforce.utils.errors import APIError, create_validation_error, field_errors_from_pydantic


# =============================================================================
# Logging Configuration
# =============================================================================

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure root logging once for the process."""
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup/shutdown events."""
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.app_name} {settings.app_version}...")

    owns_repositories = app.state.repositories is None
    if owns_repositories:
        app.state.repositories = build_repositories(settings)

    logger.info("Application startup complete")

    yield

    logger.info(f"Shutting down {settings.app_name}...")
    if owns_repositories:
        app.state.repositories.close()
        app.state.repositories = None
    logger.info("Application shutdown complete")


# =============================================================================
# Application Factory
# =============================================================================

def create_app(
    settings: Optional[Settings] = None,
    repositories: Optional[Repositories] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    When ``repositories`` is given the app uses it as is and never closes it;
    otherwise the backend named by ``settings.store_backend`` is built at
    startup and released at shutdown.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description=(
            "API for managing departments, employees and projects, "
            "served as REST resources and as a graph-query endpoint."
        ),
        version=settings.app_version,
        debug=settings.debug,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.repositories = repositories

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    # Register routes
    app.include_router(api_router)
    app.include_router(graph_router)

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    @app.exception_handler(PydanticValidationError)
    async def pydantic_validation_handler(
        request: Request,
        exc: PydanticValidationError,
    ) -> JSONResponse:
        """Convert Pydantic validation errors to structured response."""
        error = create_validation_error(field_errors_from_pydantic(exc.errors()))
        return await api_error_handler(request, error)

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unexpected error occurred")
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "message": "An unexpected error occurred",
                    "code": "internal_error",
                    "kind": "internal",
                    "retryable": False,
                }
            },
        )

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check() -> dict:
        """Check application health."""
        return {"status": "healthy", "version": settings.app_version}

    return app


# =============================================================================
# Application Instance
# =============================================================================

app = create_app()


# =============================================================================
# Development Server
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "workforce.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
