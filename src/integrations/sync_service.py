"""Sync orchestration for configured external APIs.

For one system: look up the active configuration, call the API, project
the response, and upsert every record keyed by (system, external id).
For all systems: run the single-system syncs concurrently under a
semaphore and return one result per configuration in listing order.

Sync calls never raise. Configuration, transport and parse failures
produce a failed ``SyncResult``; per-record failures are reported in the
result's error list while the remaining records are still stored.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from dataclasses import replace
from datetime import UTC, datetime

from src.integrations.api_invoker import ApiInvoker
from src.integrations.base import ConfigStore, RecordStore, SyncedRecord, SyncResult
from src.integrations.errors import ConfigNotFoundError, SyncError
from src.integrations.field_mapping import ProjectionResult, project_response
from src.integrations.request_builder import build_request

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 4


class SyncService:
    """Runs configuration-driven syncs against the given stores."""

    def __init__(
        self,
        configs: ConfigStore,
        records: RecordStore,
        invoker: ApiInvoker | None = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        self._configs = configs
        self._records = records
        self._invoker = invoker or ApiInvoker()
        self._max_concurrency = max(1, max_concurrency)
        self._system_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def sync_one(self, system_name: str) -> SyncResult:
        """Sync records from a single system."""
        try:
            config = await self._configs.get_active_config(system_name)
            if config is None:
                raise ConfigNotFoundError(system_name)

            logger.info("Starting user sync for system: %s", system_name)
            request = build_request(config)
            body = await self._invoker.invoke(request)
            projection = project_response(body, config.data_path, config.field_mappings, system_name)
            logger.info("Fetched %d users from %s", projection.fetched, system_name)
        except SyncError as exc:
            logger.error("Failed to sync users from system %s: %s", system_name, exc)
            return _failed(system_name, str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error syncing system %s", system_name)
            return _failed(system_name, str(exc) or type(exc).__name__)

        stored, upsert_errors = await self._upsert_all(system_name, projection)
        logger.info("Stored %d users for system: %s", stored, system_name)

        return SyncResult(
            system_name=system_name,
            users_fetched=projection.fetched,
            users_stored=stored,
            success=True,
            message=f"Successfully synced users from {system_name}",
            errors=projection.errors + upsert_errors,
        )

    async def sync_all(self) -> list[SyncResult]:
        """Sync every active system, at most ``max_concurrency`` at a time."""
        configs = await self._configs.list_active_configs()
        if not configs:
            logger.info("No active configurations to sync")
            return []

        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _bounded(system_name: str) -> SyncResult:
            async with semaphore:
                return await self.sync_one(system_name)

        names = [c.system_name for c in configs]
        outcomes = await asyncio.gather(*(_bounded(n) for n in names), return_exceptions=True)

        results: list[SyncResult] = []
        for name, outcome in zip(names, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                logger.error("Sync task for %s raised: %s", name, outcome)
                results.append(_failed(name, str(outcome) or type(outcome).__name__))
            else:
                results.append(outcome)

        succeeded = sum(1 for r in results if r.success)
        logger.info("Synced %d/%d systems", succeeded, len(results))
        return results

    async def _upsert_all(self, system_name: str, projection: ProjectionResult) -> tuple[int, list[str]]:
        stored = 0
        errors: list[str] = []
        async with self._system_locks[system_name]:
            for projected in projection.records:
                try:
                    await self._upsert(projected.record)
                    stored += 1
                except Exception as exc:  # noqa: BLE001
                    logger.error("Error storing user %s from %s: %s", projected.record.external_id, system_name, exc)
                    errors.append(f"Failed to store user {projected.record.external_id or '<no id>'}: {exc}")
        return stored, errors

    async def _upsert(self, record: SyncedRecord) -> SyncedRecord:
        record = replace(record, fetched_at=datetime.now(UTC))
        if record.external_id is not None:
            existing = await self._records.find_record(record.system_name, record.external_id)
            if existing is not None:
                record = replace(record, id=existing.id)
        return await self._records.save_record(record)

    # -- Record access ---

    async def list_records(self) -> list[SyncedRecord]:
        return await self._records.list_records()

    async def list_records_by_system(self, system_name: str) -> list[SyncedRecord]:
        return await self._records.list_records_by_system(system_name)

    async def clear_all_records(self) -> None:
        await self._records.delete_all_records()
        logger.info("Cleared all synced users")

    async def clear_records_by_system(self, system_name: str) -> None:
        # Locks exist only for systems that have synced
        lock = self._system_locks.get(system_name)
        if lock is None:
            await self._records.delete_records_by_system(system_name)
        else:
            async with lock:
                await self._records.delete_records_by_system(system_name)
        logger.info("Cleared synced users for system: %s", system_name)


def _failed(system_name: str, error: str) -> SyncResult:
    return SyncResult(
        system_name=system_name,
        users_fetched=0,
        users_stored=0,
        success=False,
        message=f"Failed to sync users: {error}",
        errors=[error],
    )
