"""SQLAlchemy-backed configuration and record stores.

Each operation opens its own session from the async session factory and
commits before returning, so the stores can be shared across concurrent
syncs.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.models import ApiConfiguration, SyncedUser
from src.integrations.base import SyncedRecord, SystemConfig

logger = logging.getLogger(__name__)


def _parse_id(value: str | None) -> uuid.UUID | None:
    if value is None:
        return None
    try:
        return uuid.UUID(value)
    except ValueError:
        return None


def config_from_model(row: ApiConfiguration) -> SystemConfig:
    return SystemConfig(
        id=str(row.id),
        system_name=row.system_name,
        endpoint_url=row.api_url,
        http_method=row.http_method,
        headers=dict(row.headers or {}),
        query_params=dict(row.query_params or {}),
        request_body=row.request_body or "",
        field_mappings=dict(row.field_mappings or {}),
        data_path=row.data_path or "",
        active=row.active,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def record_from_model(row: SyncedUser) -> SyncedRecord:
    return SyncedRecord(
        id=str(row.id),
        system_name=row.system_name,
        external_id=row.external_id,
        name=row.name,
        email=row.email,
        phone_number=row.phone_number,
        timezone=row.timezone,
        avatar_url=row.avatar_url,
        scheduling_url=row.scheduling_url,
        raw_data=row.additional_data,
        fetched_at=row.fetched_at,
    )


def _apply_record(row: SyncedUser, record: SyncedRecord) -> None:
    row.system_name = record.system_name
    row.external_id = record.external_id
    row.name = record.name
    row.email = record.email
    row.phone_number = record.phone_number
    row.timezone = record.timezone
    row.avatar_url = record.avatar_url
    row.scheduling_url = record.scheduling_url
    row.additional_data = record.raw_data
    if record.fetched_at is not None:
        row.fetched_at = record.fetched_at


class SqlConfigStore:
    """Configuration store over the ``api_configurations`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_active_config(self, system_name: str) -> SystemConfig | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(ApiConfiguration).where(
                    ApiConfiguration.system_name == system_name,
                    ApiConfiguration.active.is_(True),
                )
            )
            row = result.scalar_one_or_none()
            return config_from_model(row) if row else None

    async def list_active_configs(self) -> list[SystemConfig]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(ApiConfiguration)
                .where(ApiConfiguration.active.is_(True))
                .order_by(ApiConfiguration.created_at, ApiConfiguration.system_name)
            )
            return [config_from_model(r) for r in result.scalars().all()]

    async def list_configs(self) -> list[SystemConfig]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(ApiConfiguration).order_by(ApiConfiguration.created_at, ApiConfiguration.system_name)
            )
            return [config_from_model(r) for r in result.scalars().all()]

    async def save_config(self, config: SystemConfig) -> SystemConfig:
        async with self._session_factory() as session:
            row_id = _parse_id(config.id)
            row = await session.get(ApiConfiguration, row_id) if row_id else None
            target_id = row.id if row is not None else (row_id or uuid.uuid4())

            if config.active:
                # One active configuration per system name
                await session.execute(
                    update(ApiConfiguration)
                    .where(
                        ApiConfiguration.system_name == config.system_name,
                        ApiConfiguration.active.is_(True),
                        ApiConfiguration.id != target_id,
                    )
                    .values(active=False)
                )

            if row is None:
                row = ApiConfiguration(id=target_id)
                session.add(row)

            row.system_name = config.system_name
            row.api_url = config.endpoint_url
            row.http_method = config.http_method
            row.headers = dict(config.headers)
            row.query_params = dict(config.query_params)
            row.request_body = config.request_body or None
            row.field_mappings = dict(config.field_mappings)
            row.data_path = config.data_path or None
            row.active = config.active
            await session.commit()
            await session.refresh(row)
            logger.info("Saved configuration %s for %s", row.id, row.system_name)
            return config_from_model(row)

    async def delete_config(self, config_id: str) -> bool:
        row_id = _parse_id(config_id)
        if row_id is None:
            return False
        async with self._session_factory() as session:
            result = await session.execute(delete(ApiConfiguration).where(ApiConfiguration.id == row_id))
            await session.commit()
            return (result.rowcount or 0) > 0


class SqlRecordStore:
    """Record store over the ``synced_users`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_record(self, system_name: str, external_id: str) -> SyncedRecord | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(SyncedUser)
                .where(SyncedUser.system_name == system_name, SyncedUser.external_id == external_id)
                .limit(1)
            )
            row = result.scalar_one_or_none()
            return record_from_model(row) if row else None

    async def save_record(self, record: SyncedRecord) -> SyncedRecord:
        async with self._session_factory() as session:
            row_id = _parse_id(record.id)
            row = await session.get(SyncedUser, row_id) if row_id else None
            if row is None:
                row = SyncedUser(id=row_id or uuid.uuid4())
                session.add(row)
            _apply_record(row, record)
            await session.commit()
            await session.refresh(row)
            return record_from_model(row)

    async def list_records(self) -> list[SyncedRecord]:
        async with self._session_factory() as session:
            result = await session.execute(select(SyncedUser).order_by(SyncedUser.fetched_at))
            return [record_from_model(r) for r in result.scalars().all()]

    async def list_records_by_system(self, system_name: str) -> list[SyncedRecord]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(SyncedUser).where(SyncedUser.system_name == system_name).order_by(SyncedUser.fetched_at)
            )
            return [record_from_model(r) for r in result.scalars().all()]

    async def delete_all_records(self) -> None:
        async with self._session_factory() as session:
            await session.execute(delete(SyncedUser))
            await session.commit()

    async def delete_records_by_system(self, system_name: str) -> None:
        async with self._session_factory() as session:
            await session.execute(delete(SyncedUser).where(SyncedUser.system_name == system_name))
            await session.commit()
