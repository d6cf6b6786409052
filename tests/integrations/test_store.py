"""Tests for the in-memory stores."""

from __future__ import annotations

from typing import Any

import pytest

from src.integrations.base import SyncedRecord, SystemConfig
from src.integrations.store import InMemoryConfigStore, InMemoryRecordStore


def make_config(system_name: str, **overrides: Any) -> SystemConfig:
    overrides.setdefault("endpoint_url", f"https://{system_name}.example.com/users")
    return SystemConfig(system_name=system_name, **overrides)


class TestInMemoryConfigStore:
    @pytest.mark.asyncio
    async def test_save_assigns_id(self) -> None:
        store = InMemoryConfigStore()
        saved = await store.save_config(make_config("calendly"))
        assert saved.id is not None
        assert await store.get_active_config("calendly") == saved

    @pytest.mark.asyncio
    async def test_initial_configs_are_loaded(self) -> None:
        store = InMemoryConfigStore([make_config("a"), make_config("b", active=False)])
        assert [c.system_name for c in await store.list_configs()] == ["a", "b"]
        assert [c.system_name for c in await store.list_active_configs()] == ["a"]

    @pytest.mark.asyncio
    async def test_get_active_ignores_inactive(self) -> None:
        store = InMemoryConfigStore([make_config("calendly", active=False)])
        assert await store.get_active_config("calendly") is None

    @pytest.mark.asyncio
    async def test_new_active_config_deactivates_previous(self) -> None:
        store = InMemoryConfigStore()
        old = await store.save_config(make_config("calendly", endpoint_url="https://old.example.com"))
        new = await store.save_config(make_config("calendly", endpoint_url="https://new.example.com"))

        active = await store.get_active_config("calendly")
        assert active is not None and active.id == new.id
        all_configs = {c.id: c for c in await store.list_configs()}
        assert all_configs[old.id].active is False
        assert len(await store.list_active_configs()) == 1

    @pytest.mark.asyncio
    async def test_resaving_with_same_id_replaces(self) -> None:
        store = InMemoryConfigStore()
        saved = await store.save_config(make_config("calendly"))
        await store.save_config(make_config("calendly", id=saved.id, data_path="data"))

        configs = await store.list_configs()
        assert len(configs) == 1
        assert configs[0].data_path == "data"
        assert configs[0].created_at == saved.created_at
        assert configs[0].updated_at is not None and saved.updated_at is not None
        assert configs[0].updated_at >= saved.updated_at

    @pytest.mark.asyncio
    async def test_delete(self) -> None:
        store = InMemoryConfigStore()
        saved = await store.save_config(make_config("calendly"))
        assert await store.delete_config(saved.id or "") is True
        assert await store.delete_config(saved.id or "") is False
        assert await store.list_configs() == []


class TestInMemoryRecordStore:
    @pytest.mark.asyncio
    async def test_save_and_find(self) -> None:
        store = InMemoryRecordStore()
        saved = await store.save_record(SyncedRecord(system_name="s", external_id="U1", name="Alice"))
        assert saved.id is not None
        assert await store.find_record("s", "U1") == saved
        assert await store.find_record("other", "U1") is None

    @pytest.mark.asyncio
    async def test_save_with_existing_id_updates(self) -> None:
        store = InMemoryRecordStore()
        saved = await store.save_record(SyncedRecord(system_name="s", external_id="U1", name="Alice"))
        await store.save_record(SyncedRecord(system_name="s", external_id="U1", name="Alicia", id=saved.id))
        records = await store.list_records()
        assert len(records) == 1
        assert records[0].name == "Alicia"

    @pytest.mark.asyncio
    async def test_delete_by_system(self) -> None:
        store = InMemoryRecordStore()
        await store.save_record(SyncedRecord(system_name="a", external_id="1"))
        await store.save_record(SyncedRecord(system_name="b", external_id="1"))
        await store.delete_records_by_system("a")
        assert [r.system_name for r in await store.list_records()] == ["b"]
        await store.delete_all_records()
        assert await store.list_records() == []
