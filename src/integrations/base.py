"""Core types for configuration-driven API sync.

Defines the stored API description (``SystemConfig``), the normalized
record it produces (``SyncedRecord``), the per-system sync summary
(``SyncResult``) and the storage protocols the sync service depends on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol


@dataclass(frozen=True)
class SystemConfig:
    """Stored description of how to call one external API.

    Attributes:
        system_name: Unique, case-sensitive system key (e.g. "calendly").
        endpoint_url: Full endpoint URL to call.
        http_method: GET, POST, PUT or DELETE (validated at build time).
        headers: Header name to value; passed through verbatim.
        query_params: Query parameter name to value.
        request_body: Raw request body; empty means no body.
        field_mappings: Ordered source path to target field name.
        data_path: Dotted path to the record collection; empty means root.
        active: Inactive configurations are ignored by sync.
        id: Storage identity, assigned by the config store.
        created_at: When the store first saved this configuration.
        updated_at: When the store last saved this configuration.
    """

    system_name: str
    endpoint_url: str
    http_method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    query_params: dict[str, str] = field(default_factory=dict)
    request_body: str = ""
    field_mappings: dict[str, str] = field(default_factory=dict)
    data_path: str = ""
    active: bool = True
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class SyncedRecord:
    """Locally stored projection of one remote entity."""

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
    id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "system_name": self.system_name,
            "external_id": self.external_id,
            "name": self.name,
            "email": self.email,
            "phone_number": self.phone_number,
            "timezone": self.timezone,
            "avatar_url": self.avatar_url,
            "scheduling_url": self.scheduling_url,
            "raw_data": self.raw_data,
            "fetched_at": self.fetched_at.isoformat() if self.fetched_at else None,
        }


@dataclass
class SyncResult:
    """Outcome of syncing one system. Never persisted."""

    system_name: str
    users_fetched: int = 0
    users_stored: int = 0
    success: bool = False
    message: str = ""
    errors: list[str] | None = None

    def __post_init__(self) -> None:
        if not self.errors:
            self.errors = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "system_name": self.system_name,
            "users_fetched": self.users_fetched,
            "users_stored": self.users_stored,
            "success": self.success,
            "message": self.message,
            "errors": self.errors,
        }


class ConfigStore(Protocol):
    """Persistence for API configurations."""

    async def get_active_config(self, system_name: str) -> SystemConfig | None: ...

    async def list_active_configs(self) -> list[SystemConfig]: ...

    async def list_configs(self) -> list[SystemConfig]: ...

    async def save_config(self, config: SystemConfig) -> SystemConfig: ...

    async def delete_config(self, config_id: str) -> bool: ...


class RecordStore(Protocol):
    """Persistence for synced records."""

    async def find_record(self, system_name: str, external_id: str) -> SyncedRecord | None: ...

    async def save_record(self, record: SyncedRecord) -> SyncedRecord: ...

    async def list_records(self) -> list[SyncedRecord]: ...

    async def list_records_by_system(self, system_name: str) -> list[SyncedRecord]: ...

    async def delete_all_records(self) -> None: ...

    async def delete_records_by_system(self, system_name: str) -> None: ...
