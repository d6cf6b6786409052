"""API sync FastAPI application entry point.

Configures the FastAPI app with:
- CORS middleware
- Lifespan events for the database engine and outbound HTTP client
- Sync, user and configuration routes
- OpenAPI documentation at /docs (debug mode only)
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.routes import configurations, sync
from src.api.version import API_VERSION
from src.core.config import get_settings
from src.core.database import create_engine
from src.integrations.api_invoker import ApiInvoker
from src.integrations.sql_store import SqlConfigStore, SqlRecordStore
from src.integrations.sync_service import SyncService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown.

    On startup: create the database engine, stores, and the shared
    outbound HTTP client used by the sync service.
    On shutdown: close the HTTP client and dispose of the engine.
    """
    settings = get_settings()

    # -- PostgreSQL ---
    engine, session_factory = create_engine(settings)
    app.state.db_engine = engine
    app.state.db_session_factory = session_factory
    logger.info("Database connection pool initialized")

    # -- Sync Service ---
    http_client = httpx.AsyncClient(timeout=settings.sync_request_timeout_seconds)
    config_store = SqlConfigStore(session_factory)
    app.state.config_store = config_store
    app.state.sync_service = SyncService(
        config_store,
        SqlRecordStore(session_factory),
        invoker=ApiInvoker(http_client, timeout=settings.sync_request_timeout_seconds),
        max_concurrency=settings.sync_max_concurrency,
    )
    logger.info(
        "Sync service ready (timeout=%.0fs, max_concurrency=%d)",
        settings.sync_request_timeout_seconds,
        settings.sync_max_concurrency,
    )

    yield

    # -- Shutdown ---
    await http_client.aclose()
    await engine.dispose()
    logger.info("All connections closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title=settings.app_name,
        description="Configuration-driven sync of users from external REST APIs",
        version=API_VERSION,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept"],
    )

    # /sync/all is registered before /sync/{system_name} inside the router
    app.include_router(sync.router)
    app.include_router(configurations.router)

    # -- Error Handlers ---
    @app.exception_handler(Exception)  # Intentionally broad: top-level global error handler
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    return app


# Application instance used by uvicorn
app = create_app()
