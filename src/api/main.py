"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures middleware, exception handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import check_connection, run_migrations
from src.adapters.smtp.mailer import SmtpConfirmationMailer
from src.adapters.smtp.transport import TransportConfig
from src.api.error_handlers import register_error_handlers
from src.api.models import HealthResponse
from src.api.routes import router as api_router
from src.config.settings import get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "registration",
        "description": "Register users and send confirmation emails",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool on startup and checks connectivity
    - Runs migrations on startup
    - Creates the (lazily initialized) confirmation mailer
    - Closes connection pool on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")
    logger.info("Connecting to database...")

    # Requests beyond max_size wait up to `timeout` seconds for a connection
    pool = ConnectionPool(
        conninfo=settings.conninfo(),
        min_size=settings.pool_min_size,
        max_size=settings.db_connection_limit,
        timeout=settings.pool_timeout,
        open=True,
    )

    try:
        check_connection(pool)
        logger.info("Running database migrations...")
        run_migrations(pool)
    except Exception:
        pool.close()
        raise

    # Store shared services in app state for dependency injection
    app.state.pool = pool
    app.state.mailer = SmtpConfirmationMailer(TransportConfig.from_settings(settings))

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    pool.close()
    logger.info("Database connection pool closed")


app = FastAPI(
    title="confirmail",
    description="Email Confirmation System API - Registers users and sends confirmation emails",
    version=get_settings().app_version,
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(api_router, prefix="/api")


@app.get("/api/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Liveness check.

    Returns 200 OK with the API version while the process is serving requests.
    """
    return HealthResponse(
        message="Email Confirmation System API is running",
        version=get_settings().app_version,
    )
