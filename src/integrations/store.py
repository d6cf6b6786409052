"""In-memory configuration and record stores.

Dict-backed implementations of ``ConfigStore`` and ``RecordStore`` for
tests and single-process use. Insertion order is listing order.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import UTC, datetime

from src.integrations.base import SyncedRecord, SystemConfig

logger = logging.getLogger(__name__)


class InMemoryConfigStore:
    """Configuration store keyed by generated id."""

    def __init__(self, configs: list[SystemConfig] | None = None) -> None:
        self._configs: dict[str, SystemConfig] = {}
        for config in configs or []:
            self._put(config)

    def _put(self, config: SystemConfig) -> SystemConfig:
        if config.id is None:
            config = replace(config, id=str(uuid.uuid4()))
        now = datetime.now(UTC)
        previous = self._configs.get(config.id)  # type: ignore[arg-type]
        created_at = previous.created_at if previous is not None else config.created_at or now
        config = replace(config, created_at=created_at, updated_at=now)
        if config.active:
            # One active configuration per system name
            for key, existing in list(self._configs.items()):
                if existing.system_name == config.system_name and existing.active and key != config.id:
                    logger.info("Deactivating previous configuration %s for %s", key, config.system_name)
                    self._configs[key] = replace(existing, active=False)
        self._configs[config.id] = config  # type: ignore[index]
        return config

    async def get_active_config(self, system_name: str) -> SystemConfig | None:
        for config in self._configs.values():
            if config.system_name == system_name and config.active:
                return config
        return None

    async def list_active_configs(self) -> list[SystemConfig]:
        return [c for c in self._configs.values() if c.active]

    async def list_configs(self) -> list[SystemConfig]:
        return list(self._configs.values())

    async def save_config(self, config: SystemConfig) -> SystemConfig:
        return self._put(config)

    async def delete_config(self, config_id: str) -> bool:
        return self._configs.pop(config_id, None) is not None


class InMemoryRecordStore:
    """Record store keyed by generated id."""

    def __init__(self) -> None:
        self._records: dict[str, SyncedRecord] = {}

    async def find_record(self, system_name: str, external_id: str) -> SyncedRecord | None:
        for record in self._records.values():
            if record.system_name == system_name and record.external_id == external_id:
                return record
        return None

    async def save_record(self, record: SyncedRecord) -> SyncedRecord:
        if record.id is None:
            record = replace(record, id=str(uuid.uuid4()))
        self._records[record.id] = record  # type: ignore[index]
        return record

    async def list_records(self) -> list[SyncedRecord]:
        return list(self._records.values())

    async def list_records_by_system(self, system_name: str) -> list[SyncedRecord]:
        return [r for r in self._records.values() if r.system_name == system_name]

    async def delete_all_records(self) -> None:
        self._records.clear()

    async def delete_records_by_system(self, system_name: str) -> None:
        for record_id in [k for k, r in self._records.items() if r.system_name == system_name]:
            del self._records[record_id]
