"""HTTP transport for WFS key-value-pair requests."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, NoReturn
from xml.etree.ElementTree import Element

import httpx

from wfsclient.transport.base import (
    SERVICE,
    ConnectionError,
    HTTPStatusError,
    SessionError,
    TimeoutError,
    Transport,
    TransportError,
)
from wfsclient.transport.types import (
    TransportConfig,
    TransportEvent,
    TransportEventType,
)
from wfsclient.transport.xml import parse_xml

logger = logging.getLogger(__name__)

# Same as the httpx.AsyncClient pool defaults
DEFAULT_MAX_CONNECTIONS = 100
DEFAULT_MAX_KEEPALIVE = 20


class HTTPTransport(Transport):
    """
    Sends WFS requests as HTTP GET with key-value-pair parameters.

    The underlying ``httpx.AsyncClient`` is created once in connect()
    and shared by every request made through this transport:
    - connection pool size and keep-alive come from the config
    - connection failures are retried ``config.retries`` times by httpx
    - in-flight requests are bounded by ``max_connections``
    """

    def __init__(
        self,
        config: TransportConfig,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            config: Transport configuration.
            http_transport: Replacement httpx transport (e.g. ``httpx.MockTransport``).
        """
        super().__init__(config)
        self._http_transport = http_transport
        self._client: httpx.AsyncClient | None = None
        self._connected: bool = False
        self._request_semaphore: asyncio.Semaphore | None = None

    def _build_limits(self) -> httpx.Limits:
        max_connections = self.config.max_connections or DEFAULT_MAX_CONNECTIONS
        max_keepalive = min(DEFAULT_MAX_KEEPALIVE, max_connections) if self.config.keep_alive else 0
        return httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive,
        )

    async def connect(self) -> None:
        """Create the HTTP client."""
        if self._connected:
            return

        self._emit_event(
            TransportEvent(
                type=TransportEventType.CONNECTING,
                timestamp=time.time(),
                data={"url": self.config.url},
            )
        )

        try:
            timeout = httpx.Timeout(
                connect=self.config.connect_timeout,
                read=self.config.timeout,
                write=self.config.timeout,
                pool=self.config.timeout,
            )

            transport = self._http_transport
            if transport is None:
                transport = httpx.AsyncHTTPTransport(
                    verify=self.config.verify_ssl,
                    limits=self._build_limits(),
                    retries=self.config.retries,
                )

            self._client = httpx.AsyncClient(
                timeout=timeout,
                headers=self.config.request_headers(),
                transport=transport,
            )

            if self.config.max_connections:
                self._request_semaphore = asyncio.Semaphore(self.config.max_connections)
            self._connected = True

            self._emit_event(
                TransportEvent(
                    type=TransportEventType.CONNECTED,
                    timestamp=time.time(),
                )
            )

        except Exception as e:
            raise ConnectionError(f"Failed to initialize HTTP client: {e}", cause=e)

    async def disconnect(self) -> None:
        """Close the HTTP client and its connection pool."""
        if not self._connected and self._client is None:
            return

        self._emit_event(
            TransportEvent(
                type=TransportEventType.DISCONNECTING,
                timestamp=time.time(),
            )
        )

        if self._client:
            await self._client.aclose()
            self._client = None

        self._connected = False
        self._request_semaphore = None

        self._emit_event(
            TransportEvent(
                type=TransportEventType.DISCONNECTED,
                timestamp=time.time(),
            )
        )

    async def request(self, query: dict[str, Any]) -> Element:
        """
        Send a GET request to the service and parse the XML response.

        Raises:
            SessionError: If the transport is not connected.
            TransportError: If the exchange or parsing fails.
        """
        if not self._client or not self._connected:
            raise SessionError("Transport not connected")

        if self._request_semaphore is None:
            return await self._request_internal(query)

        async with self._request_semaphore:
            return await self._request_internal(query)

    async def _request_internal(self, query: dict[str, Any]) -> Element:
        """Internal request implementation."""
        params = {"service": SERVICE, **query}
        # A query already in the endpoint URL (e.g. ?map=roads) is kept
        url = httpx.URL(self.config.url).copy_merge_params(params)

        self._emit_event(
            TransportEvent(
                type=TransportEventType.REQUEST_SENT,
                timestamp=time.time(),
                data={"url": str(url), "params": params},
            )
        )
        logger.debug(f"GET {url}")

        try:
            response = await self._client.get(url)
        except httpx.TimeoutException as e:
            self._raise(TimeoutError(f"Request timed out: {e}", cause=e))
        except httpx.TransportError as e:
            self._raise(ConnectionError(f"Connection failed: {e}", cause=e))
        except httpx.HTTPError as e:
            self._raise(TransportError(f"HTTP error: {e}", cause=e))

        self._emit_event(
            TransportEvent(
                type=TransportEventType.RESPONSE_RECEIVED,
                timestamp=time.time(),
                data={"status": response.status_code, "bytes": len(response.content)},
            )
        )

        if not response.is_success:
            self._raise(
                HTTPStatusError(
                    f"HTTP {response.status_code}: {response.text[:200]}",
                    status_code=response.status_code,
                )
            )

        try:
            return parse_xml(response.content)
        except TransportError as e:
            self._raise(e)

    def _raise(self, error: TransportError) -> NoReturn:
        """Report a failed exchange and raise the error."""
        self._emit_event(
            TransportEvent(
                type=TransportEventType.ERROR,
                timestamp=time.time(),
                error=error,
            )
        )
        raise error

    def is_connected(self) -> bool:
        """Check if transport is connected."""
        return self._connected
