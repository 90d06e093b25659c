"""User Registry API: FastAPI application factory and process entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Settings load -> logging -> app -> lifespan startup (connect + indexes) -> listen
    - Nothing listens unless the database connected and the schema exists
    - Missing configuration or a failed connection exits with a non-zero status
    - Shutdown disposes the connection pool before the process exits

Design Decisions:
    - create_app(settings) factory over a module-level app: tests build their own
      app around an in-memory database, and importing this module never reads env
    - Lifespan over @app.on_event: cleaner cleanup, runs before uvicorn binds its socket
    - Static files mounted AFTER API routes so /api/* and /health take precedence
"""

import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError

from user_registry import __version__
from user_registry.api.error_handlers import register_error_handlers
from user_registry.api.routes import health, users
from user_registry.config import Settings, get_settings
from user_registry.infrastructure.database import DatabaseSessionManager
from user_registry.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    manager = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        connect_timeout=settings.database_connect_timeout_seconds,
    )
    app.state.db = manager
    await manager.connect()
    logger.info("User Registry API started")
    try:
        yield
    finally:
        logger.info("User Registry API shutting down")
        await manager.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title="User Registry API", version=__version__, lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = None

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(health.router)
    app.include_router(users.router)
    register_error_handlers(app, include_detail=not settings.is_production)

    static_dir = settings.resolve_static_dir()
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
        logger.info(f"Serving static from: {static_dir}")
    else:
        logger.warning(f"Static directory not found, skipping: {static_dir}")
    return app


def run() -> None:
    """Console entry point: validate config, connect, then serve."""
    try:
        settings = get_settings()
    except ValidationError as e:
        setup_logging()
        logger.critical(f"Invalid configuration (is DATABASE_URL set?): {e}")
        sys.exit(1)

    setup_logging(settings.log_level, settings.log_format)
    app = create_app(settings)
    server = uvicorn.Server(uvicorn.Config(
        app, host=settings.host, port=settings.port,
        log_config=None, lifespan="on",
    ))
    try:
        server.run()
    except SystemExit:
        # uvicorn exits by itself (STARTUP_FAILURE) when the lifespan raises
        if server.started:
            raise
    if not server.started:
        logger.critical("Failed to start: database connection was not established")
        sys.exit(1)
