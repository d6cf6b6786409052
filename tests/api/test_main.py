"""Tests for the FastAPI application creation."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest
from fastapi import FastAPI

from src.api.main import create_app, lifespan
from src.core.config import get_settings
from src.integrations.sql_store import SqlConfigStore
from src.integrations.sync_service import SyncService


class TestAppCreation:
    """Test suite for FastAPI app factory."""

    def test_create_app_returns_fastapi(self) -> None:
        app = create_app()
        assert isinstance(app, FastAPI)

    def test_app_metadata(self) -> None:
        """App should have correct metadata."""
        app = create_app()
        assert app.title == "API Sync"
        assert app.version == "0.1.0"

    def test_routes_registered(self) -> None:
        """App should expose sync, user and configuration routes."""
        app = create_app()
        route_paths = set(app.openapi()["paths"])
        assert "/api/v1/sync/all" in route_paths
        assert "/api/v1/sync/{system_name}" in route_paths
        assert "/api/v1/users" in route_paths
        assert "/api/v1/users/{system_name}" in route_paths
        assert "/api/v1/configurations" in route_paths
        assert "/api/v1/configurations/{config_id}" in route_paths

    def test_cors_middleware_configured(self) -> None:
        """App should have CORS middleware."""
        app = create_app()
        middleware_classes = [m.cls.__name__ for m in app.user_middleware]
        assert "CORSMiddleware" in middleware_classes


class TestLifespan:
    @pytest.mark.asyncio
    async def test_lifespan_wires_state(self) -> None:
        get_settings.cache_clear()
        try:
            with patch.dict(os.environ, {"DATABASE_URL": "sqlite+aiosqlite://", "SYNC_MAX_CONCURRENCY": "3"}):
                app = FastAPI()
                async with lifespan(app):
                    assert isinstance(app.state.config_store, SqlConfigStore)
                    assert isinstance(app.state.sync_service, SyncService)
                    assert app.state.db_engine is not None
        finally:
            get_settings.cache_clear()
