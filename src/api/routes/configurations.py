"""API configuration routes.

Lists, reads, saves and deletes the stored descriptions of external
APIs that drive sync.
"""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from src.api.deps import get_config_store
from src.integrations.base import ConfigStore, SystemConfig

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/configurations", tags=["configurations"])


class ConfigurationCreate(BaseModel):
    """Schema for creating or updating a configuration.

    Supplying the id of a stored configuration updates it in place.
    """

    id: str | None = None
    system_name: str = Field(..., min_length=1, max_length=255)
    endpoint_url: str = Field(..., min_length=1)
    http_method: str = Field(default="GET", min_length=1, max_length=10)
    headers: dict[str, str] = Field(default_factory=dict)
    query_params: dict[str, str] = Field(default_factory=dict)
    request_body: str = ""
    field_mappings: dict[str, str] = Field(default_factory=dict)
    data_path: str = ""
    active: bool = True


class ConfigurationResponse(ConfigurationCreate):
    """Schema for configuration responses."""

    created_at: datetime | None = None
    updated_at: datetime | None = None


class MessageResponse(BaseModel):
    message: str


def _config_to_response(config: SystemConfig) -> ConfigurationResponse:
    return ConfigurationResponse(
        id=config.id,
        system_name=config.system_name,
        endpoint_url=config.endpoint_url,
        http_method=config.http_method,
        headers=config.headers,
        query_params=config.query_params,
        request_body=config.request_body,
        field_mappings=config.field_mappings,
        data_path=config.data_path,
        active=config.active,
        created_at=config.created_at,
        updated_at=config.updated_at,
    )


@router.get("", response_model=list[ConfigurationResponse])
async def list_configurations(
    store: ConfigStore = Depends(get_config_store),
) -> list[ConfigurationResponse]:
    """List all configurations, active or not."""
    return [_config_to_response(c) for c in await store.list_configs()]


@router.get("/active", response_model=list[ConfigurationResponse])
async def list_active_configurations(
    store: ConfigStore = Depends(get_config_store),
) -> list[ConfigurationResponse]:
    """List active configurations."""
    return [_config_to_response(c) for c in await store.list_active_configs()]


@router.get("/{system_name}", response_model=ConfigurationResponse)
async def get_configuration(
    system_name: str,
    store: ConfigStore = Depends(get_config_store),
) -> ConfigurationResponse:
    """Get the active configuration for a system."""
    config = await store.get_active_config(system_name)
    if config is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No active configuration for system: {system_name}",
        )
    return _config_to_response(config)


@router.post("", response_model=ConfigurationResponse, status_code=status.HTTP_201_CREATED)
async def create_configuration(
    payload: ConfigurationCreate,
    store: ConfigStore = Depends(get_config_store),
) -> ConfigurationResponse:
    """Create or update a configuration.

    An active configuration replaces the system's current active entry.
    """
    saved = await store.save_config(SystemConfig(**payload.model_dump()))
    logger.info("Saved configuration %s for %s", saved.id, saved.system_name)
    return _config_to_response(saved)


@router.delete("/{config_id}", response_model=MessageResponse)
async def delete_configuration(
    config_id: str,
    store: ConfigStore = Depends(get_config_store),
) -> MessageResponse:
    """Delete a configuration by id."""
    if not await store.delete_config(config_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Configuration {config_id} not found")
    return MessageResponse(message="Configuration deleted")
