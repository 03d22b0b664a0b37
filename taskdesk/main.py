"""
FastAPI application entry point.

Initializes FastAPI app, registers routers, adds middleware, and configures lifespan.

Dependencies: fastapi, taskdesk.api, taskdesk.observability, taskdesk.configs
System role: Application initialization and configuration
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskdesk.api import api_router
from taskdesk.api.deps.dependencies import get_service_cache
from taskdesk.boundary.db.connection import get_async_engine
from taskdesk.boundary.db.create_tables import create_all_tables
from taskdesk.configs import get_settings
from taskdesk.observability.logger import configure_logging
from taskdesk.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events. Optional backends (vector
    extension, Redis) are probed lazily on first use, so startup only needs
    the relational store when tables are auto-created.
    """
    # Startup
    settings = get_settings()
    configure_logging(getattr(logging, settings.log_level.upper(), logging.INFO))
    logger.info("Application startup: logging configured")

    if settings.database.auto_create_tables:
        await create_all_tables()

    logger.info(
        "Application startup complete",
        extra={"llm_provider": settings.llm.provider},
    )

    yield

    # Shutdown
    await get_service_cache().aclose()
    await get_async_engine().dispose()
    logger.info("Application shutdown")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title="TaskDesk Bot API",
        description="Retrieval-augmented Hebrew chat over the TaskDesk knowledge base",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add observability middleware (added first = last to execute)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register API routes
    app.include_router(api_router, prefix=API_PREFIX)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "taskdesk.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
