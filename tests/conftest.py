"""Shared test fixtures for the API sync test suite.

Provides sample configurations, in-memory stores, an httpx mock
transport router for outbound calls, and a FastAPI test client wired to
in-memory dependencies.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from typing import Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from src.core.config import Settings
from src.integrations.api_invoker import ApiInvoker
from src.integrations.base import SystemConfig
from src.integrations.store import InMemoryConfigStore, InMemoryRecordStore
from src.integrations.sync_service import SyncService

Handler = Callable[[httpx.Request], httpx.Response]


class MockApi:
    """Routes outbound requests by host to canned handlers.

    Requests to hosts with no handler fail with a connection error, the
    way an unreachable system would.
    """

    def __init__(self) -> None:
        self.handlers: dict[str, Handler] = {}
        self.requests: list[httpx.Request] = []

    def add(self, host: str, handler: Handler) -> None:
        self.handlers[host] = handler

    def add_json(self, host: str, payload: Any, status_code: int = 200) -> None:
        self.add(host, lambda request: httpx.Response(status_code, json=payload))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.handlers.get(request.url.host)
        if handler is None:
            raise httpx.ConnectError(f"No route to host {request.url.host}", request=request)
        return handler(request)


def make_config(system_name: str = "calendly", **overrides: Any) -> SystemConfig:
    """Build a configuration pointing at ``<system_name>.example.com``."""
    values: dict[str, Any] = {
        "system_name": system_name,
        "endpoint_url": f"https://{system_name}.example.com/users",
        "http_method": "GET",
        "headers": {"Authorization": "Bearer test-token"},
        "field_mappings": {"uri": "externalId", "name": "name", "email": "email"},
        "data_path": "collection",
    }
    values.update(overrides)
    return SystemConfig(**values)


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings that don't connect to real services."""
    return Settings(
        debug=False,
        database_url="sqlite+aiosqlite:///:memory:",
        cors_origins=["http://localhost:3000"],
        sync_request_timeout_seconds=5.0,
        sync_max_concurrency=2,
        _env_file=None,  # type: ignore[call-arg]
    )


@pytest.fixture
def config_factory() -> Callable[..., SystemConfig]:
    """Factory for configurations; see ``make_config``."""
    return make_config


@pytest.fixture
def mock_api() -> MockApi:
    return MockApi()


@pytest.fixture
async def http_client(mock_api: MockApi) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(mock_api)) as client:
        yield client


@pytest.fixture
def invoker(http_client: httpx.AsyncClient) -> ApiInvoker:
    return ApiInvoker(http_client, timeout=5.0)


@pytest.fixture
def config_store() -> InMemoryConfigStore:
    return InMemoryConfigStore()


@pytest.fixture
def record_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def sync_service(
    config_store: InMemoryConfigStore,
    record_store: InMemoryRecordStore,
    invoker: ApiInvoker,
) -> SyncService:
    return SyncService(config_store, record_store, invoker=invoker, max_concurrency=2)


@pytest.fixture
def calendly_payload() -> dict[str, Any]:
    return {
        "collection": [
            {"uri": "U1", "name": "Alice", "email": "alice@example.com", "extra": {"plan": "pro"}},
            {"uri": "U2", "name": "Bob", "email": "bob@example.com"},
        ],
        "pagination": {"count": 2},
    }


@pytest.fixture
async def test_app(
    config_store: InMemoryConfigStore,
    sync_service: SyncService,
) -> AsyncGenerator[Any, None]:
    """Create a test FastAPI application with in-memory dependencies.

    The lifespan is skipped; app.state is populated directly.
    """
    from fastapi import FastAPI

    from src.api.routes import configurations, sync

    @asynccontextmanager
    async def test_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        yield

    app = FastAPI(lifespan=test_lifespan)
    app.include_router(sync.router)
    app.include_router(configurations.router)
    app.state.config_store = config_store
    app.state.sync_service = sync_service
    yield app


@pytest.fixture
async def client(test_app: Any) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP test client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
