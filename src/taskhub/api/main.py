"""FastAPI application factory and configuration."""

from __future__ import annotations

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from taskhub.config import Settings, get_settings
from taskhub.container import AppContainer
from taskhub.logging_config import configure_logging

from .handlers import register_exception_handlers
from .middleware import RequestContextMiddleware
from .response_queue import ResponseMirror, ResponseQueueMiddleware
from .routers import health_router, hello_router, tasks_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Shutdown drains every publisher and storage connection through the
    container's coordinator. Uvicorn turns SIGINT/SIGTERM into this
    shutdown phase.

    Args:
        app: FastAPI application

    Yields:
        None
    """
    container: AppContainer = app.state.container
    settings = container.settings

    # Startup
    logger.info(
        "starting_application",
        environment=settings.api.environment,
        storage="mongodb" if settings.storage.uses_document_store else "memory",
        events="redis" if settings.queue.is_enabled else "noop",
    )

    yield

    # Shutdown
    logger.info("shutting_down_application")
    await container.close()


def create_app(
    settings: Settings | None = None,
    container: AppContainer | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings (defaults to environment settings)
        container: Pre-built dependencies (defaults to building from settings)

    Returns:
        Configured FastAPI application
    """
    if container is not None:
        settings = container.settings
    elif settings is None:
        settings = get_settings()

    configure_logging(settings.api.log_level, json_logs=settings.api.is_production)

    if container is None:
        container = AppContainer.from_settings(settings)

    app = FastAPI(
        title=settings.api.title,
        description=settings.api.description,
        version=settings.api.version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "health", "description": "Greeting and health check endpoints"},
            {"name": "tasks", "description": "Task management"},
        ],
    )
    app.state.container = container
    app.state.started_at = time.monotonic()

    # Register middleware (order matters - first added = innermost)
    if container.mirrors_responses:
        app.add_middleware(
            ResponseQueueMiddleware,
            mirror=ResponseMirror(container.queue_publisher),
            settings=settings.api,
        )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestContextMiddleware)

    # CORS
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=False,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app, settings.api)

    api_prefix = settings.api.api_prefix

    # Greeting and health checks (no prefix)
    app.include_router(health_router)

    # API routes
    app.include_router(hello_router, prefix=api_prefix)
    app.include_router(tasks_router, prefix=api_prefix)

    logger.info(
        "application_configured",
        title=settings.api.title,
        version=settings.api.version,
        environment=settings.api.environment,
        mirrors_responses=container.mirrors_responses,
    )

    return app
