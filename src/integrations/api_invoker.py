"""Execute a built request against an external API.

One attempt per call, bounded end to end by a single timeout. Failures
are classified into transport errors, timeouts and non-2xx statuses.
"""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType

import httpx

from src.integrations.errors import ApiTimeoutError, HttpStatusError, NetworkError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class ApiInvoker:
    """Send requests and return the raw response body.

    An ``httpx.AsyncClient`` may be injected (tests pass one backed by
    ``httpx.MockTransport``). Without one, a short-lived client is
    created per call. Used as an async context manager, the invoker
    keeps one client open for its lifetime.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._client = client
        self._owns_client = False
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        return self._timeout

    async def __aenter__(self) -> ApiInvoker:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the client if this invoker created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
            self._owns_client = False

    async def invoke(self, request: httpx.Request) -> str:
        """Send ``request`` once and return the response body text.

        Raises:
            ApiTimeoutError: If the call does not finish within the timeout.
            NetworkError: On connection, DNS, TLS or protocol failures.
            HttpStatusError: If the response status is not 2xx.
        """
        url = str(request.url)
        logger.info("Calling external API: %s %s", request.method, url)

        try:
            if self._client is not None:
                response = await self._send(self._client, request)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await self._send(client, request)
        except (TimeoutError, httpx.TimeoutException) as exc:
            logger.error("Request to %s timed out after %.1fs", url, self._timeout)
            raise ApiTimeoutError(url, self._timeout) from exc
        except httpx.RequestError as exc:
            logger.error("Request to %s failed: %s", url, exc)
            raise NetworkError(f"Failed to call external API {url}: {exc}") from exc

        body = response.text
        if not response.is_success:
            logger.error("External API %s returned %d", url, response.status_code)
            raise HttpStatusError(url, response.status_code, body)

        logger.debug("API response from %s: %s", url, body[:1000])
        return body

    async def _send(self, client: httpx.AsyncClient, request: httpx.Request) -> httpx.Response:
        return await asyncio.wait_for(client.send(request), timeout=self._timeout)
