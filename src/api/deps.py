"""Shared FastAPI dependencies.

Resolves the sync service and configuration store created by the
application lifespan and stored on ``app.state``.
"""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from src.integrations.base import ConfigStore
from src.integrations.sync_service import SyncService


def get_sync_service(request: Request) -> SyncService:
    """Get the sync service from app state."""
    service = getattr(request.app.state, "sync_service", None)
    if service is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Sync service is not available")
    return service


def get_config_store(request: Request) -> ConfigStore:
    """Get the configuration store from app state."""
    store = getattr(request.app.state, "config_store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Configuration store is not available"
        )
    return store
