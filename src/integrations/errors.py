"""Exceptions raised by the API sync pipeline.

Every failure that aborts a single system's sync derives from
``SyncError`` so the orchestrator can turn it into a failed result.
``FieldMappingError`` is per-record and never aborts a sync.
"""

from __future__ import annotations


class SyncError(Exception):
    """Base exception for sync pipeline errors."""


class ConfigNotFoundError(SyncError):
    """Raised when no active configuration exists for a system."""

    def __init__(self, system_name: str) -> None:
        self.system_name = system_name
        super().__init__(f"No active configuration found for system: {system_name}")


class UnsupportedMethodError(SyncError):
    """Raised when a configuration names an HTTP method we cannot send."""

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Unsupported HTTP method: {method}")


class InvalidEndpointError(SyncError):
    """Raised when the configured endpoint URL cannot be parsed."""

    def __init__(self, url: str, reason: str = "") -> None:
        self.url = url
        msg = f"Invalid endpoint URL: {url!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class NetworkError(SyncError):
    """Raised on connection, DNS, TLS or protocol failures."""


class ApiTimeoutError(SyncError):
    """Raised when the external API does not answer within the bound."""

    def __init__(self, url: str, timeout: float) -> None:
        self.url = url
        self.timeout = timeout
        super().__init__(f"Request to {url} timed out after {timeout:.0f}s")


class HttpStatusError(SyncError):
    """Raised when the external API answers with a non-2xx status.

    Attributes:
        status_code: The HTTP status returned by the remote API.
        body: Response body, kept for diagnostics (may be empty).
    """

    def __init__(self, url: str, status_code: int, body: str = "") -> None:
        self.url = url
        self.status_code = status_code
        self.body = body
        msg = f"External API returned HTTP {status_code} for {url}"
        if body:
            msg += f": {body[:500]}"
        super().__init__(msg)


class MalformedResponseError(SyncError):
    """Raised when the response body is not valid JSON."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to parse API response: {reason}")


class FieldMappingError(SyncError):
    """Raised when a single response element cannot be mapped."""
