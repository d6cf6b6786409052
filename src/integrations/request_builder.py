"""Build outbound HTTP requests from a stored API configuration."""

from __future__ import annotations

import enum
import logging

import httpx

from src.integrations.base import SystemConfig
from src.integrations.errors import InvalidEndpointError, UnsupportedMethodError

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


class HttpMethod(enum.StrEnum):
    """HTTP methods a configuration may use."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @property
    def allows_body(self) -> bool:
        return self in (HttpMethod.POST, HttpMethod.PUT)


def parse_method(value: str) -> HttpMethod:
    """Match a configured method name case-insensitively.

    Raises:
        UnsupportedMethodError: If the method is not GET, POST, PUT or DELETE.
    """
    try:
        return HttpMethod((value or "").strip().upper())
    except ValueError:
        raise UnsupportedMethodError(value) from None


def build_headers(configured: dict[str, str]) -> httpx.Headers:
    """Apply configured headers, then force a JSON content type.

    The content type always ends up as ``application/json``, replacing any
    Content-Type the configuration supplied.
    """
    headers = httpx.Headers(configured)
    if headers.get("content-type", JSON_CONTENT_TYPE) != JSON_CONTENT_TYPE:
        logger.debug("Overriding configured Content-Type %r with %s", headers["content-type"], JSON_CONTENT_TYPE)
    headers["Content-Type"] = JSON_CONTENT_TYPE
    return headers


def build_request(config: SystemConfig) -> httpx.Request:
    """Turn a configuration into a fully specified request.

    Query parameters are appended for every method. A body is attached
    only for POST/PUT and only when the configuration has one.

    Raises:
        UnsupportedMethodError: For methods outside GET/POST/PUT/DELETE.
        InvalidEndpointError: If the endpoint URL cannot be parsed.
    """
    method = parse_method(config.http_method)

    try:
        url = httpx.URL(config.endpoint_url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise InvalidEndpointError(config.endpoint_url, str(exc)) from exc
    if not url.scheme or not url.host:
        raise InvalidEndpointError(config.endpoint_url, "missing scheme or host")

    if config.query_params:
        url = url.copy_merge_params(config.query_params)

    content: str | None = None
    if method.allows_body and config.request_body:
        content = config.request_body

    return httpx.Request(
        method.value,
        url,
        headers=build_headers(config.headers),
        content=content,
    )
