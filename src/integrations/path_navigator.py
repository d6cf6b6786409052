"""Dotted-path lookup over parsed JSON values."""

from __future__ import annotations

from typing import Any


def split_path(path: str) -> list[str]:
    """Split a dotted path into its key segments."""
    return path.split(".") if path else []


def resolve_path(root: Any, path: str) -> Any | None:
    """Resolve a dotted path such as ``data.users`` against a JSON tree.

    Each segment is a key lookup on a dict. Lists and scalars have no
    keys, so a path that runs into one resolves to None, as does a
    missing key. JSON null and a missing value are not distinguished:
    both mean there is no data at that path.

    Args:
        root: Parsed JSON value (dict, list, str, number, bool or None).
        path: Dot-separated key path; empty returns ``root`` unchanged.

    Returns:
        The nested value, or None if any segment cannot be resolved.
    """
    current = root
    for segment in split_path(path):
        if not isinstance(current, dict):
            return None
        current = current.get(segment)
        if current is None:
            return None
    return current
