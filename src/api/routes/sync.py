"""User sync routes.

Triggers configuration-driven syncs and exposes the synced users they
produced. A failed single-system sync answers 500 with the full result
body so callers can see what went wrong.
"""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from src.api.deps import get_sync_service
from src.integrations.base import SyncedRecord, SyncResult
from src.integrations.sync_service import SyncService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["sync"])


# -- Response Schemas ---------------------------------------------------------


class SyncResultResponse(BaseModel):
    """Schema for a single system's sync result."""

    system_name: str
    users_fetched: int
    users_stored: int
    success: bool
    message: str
    errors: list[str] | None = None


class SyncedUserResponse(BaseModel):
    """Schema for a synced user."""

    id: str | None = None
    system_name: str
    external_id: str | None = None
    name: str | None = None
    email: str | None = None
    phone_number: str | None = None
    timezone: str | None = None
    avatar_url: str | None = None
    scheduling_url: str | None = None
    raw_data: str | None = None
    fetched_at: datetime | None = None


class MessageResponse(BaseModel):
    message: str


def _result_to_response(result: SyncResult) -> SyncResultResponse:
    return SyncResultResponse(**result.to_dict())


def _record_to_response(record: SyncedRecord) -> SyncedUserResponse:
    return SyncedUserResponse(**record.to_dict())


# -- Routes -------------------------------------------------------------------


@router.post("/sync/all", response_model=list[SyncResultResponse])
async def sync_all_systems(
    service: SyncService = Depends(get_sync_service),
) -> list[SyncResultResponse]:
    """Sync users from every active system."""
    results = await service.sync_all()
    return [_result_to_response(r) for r in results]


@router.post("/sync/{system_name}", response_model=SyncResultResponse)
async def sync_system(
    system_name: str,
    service: SyncService = Depends(get_sync_service),
) -> JSONResponse:
    """Sync users from a single system."""
    result = await service.sync_one(system_name)
    status_code = status.HTTP_200_OK if result.success else status.HTTP_500_INTERNAL_SERVER_ERROR
    return JSONResponse(status_code=status_code, content=_result_to_response(result).model_dump())


@router.get("/users", response_model=list[SyncedUserResponse])
async def list_users(
    service: SyncService = Depends(get_sync_service),
) -> list[SyncedUserResponse]:
    """List all synced users."""
    return [_record_to_response(r) for r in await service.list_records()]


@router.get("/users/{system_name}", response_model=list[SyncedUserResponse])
async def list_users_by_system(
    system_name: str,
    service: SyncService = Depends(get_sync_service),
) -> list[SyncedUserResponse]:
    """List synced users from one system."""
    return [_record_to_response(r) for r in await service.list_records_by_system(system_name)]


@router.delete("/users", response_model=MessageResponse)
async def clear_users(
    service: SyncService = Depends(get_sync_service),
) -> MessageResponse:
    """Delete every synced user."""
    await service.clear_all_records()
    return MessageResponse(message="All synced users cleared")


@router.delete("/users/{system_name}", response_model=MessageResponse)
async def clear_users_by_system(
    system_name: str,
    service: SyncService = Depends(get_sync_service),
) -> MessageResponse:
    """Delete synced users from one system."""
    await service.clear_records_by_system(system_name)
    return MessageResponse(message=f"Synced users from {system_name} cleared")
