"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from src.api.middleware.error_handler import (
    error_handler_middleware,
    request_validation_error_handler,
)
from src.api.middleware.latency_logging import latency_logging_middleware
from src.api.middleware.request_size import request_size_limit_middleware
from src.api.routes import health, profiles
from src.core import supabase
from src.core.config import get_settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Opens the database client on startup and releases it on shutdown.

    Args:
        app: FastAPI application instance.

    Yields:
        None: Control back to the application.
    """
    # Startup
    settings = get_settings()
    logger.info("Starting %s in %s mode", settings.app_name, settings.app_env)

    supabase.init_database(app)

    yield
    # Shutdown
    supabase.shutdown_database(app)
    logger.info("Shutting down %s", settings.app_name)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Profile Directory API",
        description="Public profile directory with case-insensitive username lookup",
        version="1.0.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # Configure CORS
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add error handler middleware (innermost - turns route exceptions into error responses)
    app.add_middleware(BaseHTTPMiddleware, dispatch=error_handler_middleware)

    # Add latency logging middleware (tracks request timing)
    app.add_middleware(BaseHTTPMiddleware, dispatch=latency_logging_middleware)

    # Add request size limit middleware (rejects oversized requests early)
    app.add_middleware(BaseHTTPMiddleware, dispatch=request_size_limit_middleware)

    # Malformed bodies are reported as 400, not FastAPI's default 422
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    # Fixed paths first, the catch-all profile lookup last
    app.include_router(health.router)
    app.include_router(profiles.router)
    app.include_router(profiles.lookup_router)

    return app


# Create application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
