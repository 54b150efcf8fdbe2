"""
wiserheat_lib/transport.py

Bounded-concurrency HTTP transport for the heat hub.

The hub runs a small embedded web server that drops connections when it is
hammered, so the number of concurrent requests is capped both at the
connector and with a semaphore around each exchange.

Transport failures are returned as TransportOutcome values, never raised.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional

import aiohttp

from .types import ClientConfig, TransportOutcome

SECRET_HEADER = "SECRET"


class HubTransport:
    """Issue authenticated GET/PATCH requests against one heat hub."""

    def __init__(
        self,
        config: ClientConfig,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._config = config
        self._log = logger or logging.getLogger(__name__)
        self._session = session
        self._owns_session = session is None
        self._limit = asyncio.Semaphore(max(1, config.connection_limit))
        self._timeout = aiohttp.ClientTimeout(
            total=config.request_timeout_s,
            connect=config.request_timeout_s,
        )
        self._base_url = f"http://{config.host.strip().rstrip('/')}"

    @property
    def base_url(self) -> str:
        return self._base_url

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=max(1, self._config.connection_limit),
                limit_per_host=max(1, self._config.connection_limit),
            )
            self._session = aiohttp.ClientSession(connector=connector)
            self._owns_session = True
        return self._session

    async def async_get(self, path: str) -> TransportOutcome:
        """GET ``path`` from the hub."""
        return await self._async_request("GET", path, None)

    async def async_patch(self, path: str, body: Any) -> TransportOutcome:
        """
        PATCH ``path`` on the hub.

        ``body`` is either a JSON-able object (encoded as JSON text) or a bare
        string sent verbatim, as used for ``true``/``false`` writes.
        """
        return await self._async_request("PATCH", path, body)

    async def _async_request(self, method: str, path: str, body: Any) -> TransportOutcome:
        url = f"{self._base_url}/{path.lstrip('/')}"
        headers = {SECRET_HEADER: self._config.secret}
        data: Optional[str] = None
        if body is not None:
            data = body if isinstance(body, str) else json.dumps(body, separators=(",", ":"))
            headers["Content-Type"] = "application/json"

        self._log.debug("Sending %s to heat hub: %s", method, path)
        session = self._ensure_session()
        async with self._limit:
            try:
                async with session.request(
                    method,
                    url,
                    data=data,
                    headers=headers,
                    timeout=self._timeout,
                ) as response:
                    raw = await response.read()
                    charset = response.charset or "utf-8"
                    status = response.status
            except asyncio.TimeoutError as exc:
                self._log.debug("%s %s timed out after %.1fs", method, path, self._config.request_timeout_s)
                return TransportOutcome(method=method, path=path, error=exc, timed_out=True)
            except (aiohttp.ClientError, OSError) as exc:
                self._log.debug("%s %s failed: %s", method, path, exc)
                return TransportOutcome(method=method, path=path, error=exc)

        text = _decode(raw, charset)
        if text is None:
            self._log.debug("%s %s returned a body that is not valid %s", method, path, charset)
        self._log.debug("%s %s -> HTTP %s", method, path, status)
        return TransportOutcome(method=method, path=path, status=status, text=text)

    async def async_close(self) -> None:
        """Close the HTTP session if this transport created it."""
        session = self._session
        if session is None or not self._owns_session:
            return
        self._session = None
        if not session.closed:
            await session.close()


def _decode(body: bytes, charset: str) -> Optional[str]:
    """Decode a response body; None when it is not valid in its charset."""
    try:
        return body.decode(charset)
    except (UnicodeDecodeError, LookupError):
        return None
