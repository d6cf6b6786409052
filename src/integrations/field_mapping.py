"""Field mapping engine for configured API responses.

Parses a response body, locates the record collection with the
configured data path, and projects every element into the fixed
``SyncedRecord`` schema. The full element is always kept as raw data,
so mapping only adds typed fields on top of the original payload.
"""

from __future__ import annotations

import enum
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from src.integrations.base import SyncedRecord
from src.integrations.errors import FieldMappingError, MalformedResponseError
from src.integrations.path_navigator import resolve_path

logger = logging.getLogger(__name__)


class TargetField(enum.StrEnum):
    """Record fields a mapping may write to."""

    EXTERNAL_ID = "externalId"
    NAME = "name"
    EMAIL = "email"
    PHONE_NUMBER = "phoneNumber"
    TIMEZONE = "timezone"
    AVATAR_URL = "avatarUrl"
    SCHEDULING_URL = "schedulingUrl"


def normalize_field_name(name: str) -> str:
    """Case- and underscore-insensitive key for target field lookup."""
    return name.replace("_", "").lower()


@dataclass
class RecordAccumulator:
    """Mutable slots filled while mapping one element."""

    external_id: str | None = None
    name: str | None = None
    email: str | None = None
    phone_number: str | None = None
    timezone: str | None = None
    avatar_url: str | None = None
    scheduling_url: str | None = None

    def build(self, system_name: str, raw_data: str | None) -> SyncedRecord:
        return SyncedRecord(
            system_name=system_name,
            external_id=self.external_id,
            name=self.name,
            email=self.email,
            phone_number=self.phone_number,
            timezone=self.timezone,
            avatar_url=self.avatar_url,
            scheduling_url=self.scheduling_url,
            raw_data=raw_data,
        )


def _setter(attr: str) -> Callable[[RecordAccumulator, str], None]:
    def assign(acc: RecordAccumulator, value: str) -> None:
        setattr(acc, attr, value)

    return assign


FIELD_SETTERS: dict[str, Callable[[RecordAccumulator, str], None]] = {
    normalize_field_name(TargetField.EXTERNAL_ID): _setter("external_id"),
    normalize_field_name(TargetField.NAME): _setter("name"),
    normalize_field_name(TargetField.EMAIL): _setter("email"),
    normalize_field_name(TargetField.PHONE_NUMBER): _setter("phone_number"),
    normalize_field_name(TargetField.TIMEZONE): _setter("timezone"),
    normalize_field_name(TargetField.AVATAR_URL): _setter("avatar_url"),
    normalize_field_name(TargetField.SCHEDULING_URL): _setter("scheduling_url"),
}


def stringify(value: Any) -> str:
    """Render a JSON value as the string stored in a record field."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


@dataclass(frozen=True)
class ProjectedRecord:
    """A mapped record together with the element it came from."""

    record: SyncedRecord
    raw_element: dict[str, Any]


@dataclass
class ProjectionResult:
    """Output of projecting one response body."""

    fetched: int = 0
    records: list[ProjectedRecord] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def parse_body(body: str) -> Any:
    """Parse a response body into a JSON value tree.

    Raises:
        MalformedResponseError: If the body is not valid JSON.
    """
    try:
        return json.loads(body)
    except (json.JSONDecodeError, TypeError) as exc:
        raise MalformedResponseError(str(exc)) from exc


def extract_candidates(root: Any, data_path: str) -> list[Any]:
    """Locate the payload node and normalize it to a list of elements.

    A list yields its elements, a single object is wrapped as one
    element, and anything else (including an unresolvable path) yields
    no elements.
    """
    node = resolve_path(root, data_path)
    if node is None:
        if data_path:
            logger.warning("Data path '%s' not found in response", data_path)
        return []
    if isinstance(node, list):
        return node
    if isinstance(node, dict):
        return [node]
    logger.warning("Data path '%s' resolved to a %s, expected an object or list", data_path, type(node).__name__)
    return []


def apply_field_mapping(
    element: dict[str, Any],
    mapping: dict[str, str],
    system_name: str,
) -> SyncedRecord:
    """Project one response element into a record.

    Args:
        element: A single JSON object from the response.
        mapping: Source dotted path to target field name.
        system_name: System the record belongs to.

    Returns:
        The mapped record, with the whole element serialized as raw data.

    Raises:
        FieldMappingError: If the element is not a JSON object or cannot
            be serialized.
    """
    if not isinstance(element, dict):
        raise FieldMappingError(f"Expected a JSON object, got {type(element).__name__}")

    acc = RecordAccumulator()
    for source_path, target_field in mapping.items():
        value = resolve_path(element, source_path)
        if value is None:
            continue
        setter = FIELD_SETTERS.get(normalize_field_name(target_field))
        if setter is None:
            logger.warning("Unknown target field '%s' for source '%s'", target_field, source_path)
            continue
        setter(acc, stringify(value))

    try:
        raw_data = json.dumps(element)
    except (TypeError, ValueError) as exc:
        raise FieldMappingError(f"Failed to serialize raw data: {exc}") from exc

    return acc.build(system_name, raw_data)


def project_response(
    body: str,
    data_path: str,
    field_mappings: dict[str, str],
    system_name: str = "",
) -> ProjectionResult:
    """Parse a response body and map every located element.

    Per-element failures are collected in ``errors``; the remaining
    elements are still processed.

    Raises:
        MalformedResponseError: If the body is not valid JSON.
    """
    root = parse_body(body)
    candidates = extract_candidates(root, data_path)
    result = ProjectionResult(fetched=len(candidates))

    for index, element in enumerate(candidates):
        try:
            record = apply_field_mapping(element, field_mappings, system_name)
        except FieldMappingError as exc:
            logger.error("Error mapping record %d from %s: %s", index, system_name or "response", exc)
            result.errors.append(f"Failed to map record {index}: {exc}")
            continue
        result.records.append(ProjectedRecord(record=record, raw_element=element))

    return result
