"""Abstract base transport and error types."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable
from xml.etree.ElementTree import Element

from wfsclient.protocol.errors import WFSError
from wfsclient.transport.types import TransportConfig, TransportEvent

logger = logging.getLogger(__name__)

SERVICE = "WFS"


class TransportError(WFSError):
    """Base exception for transport errors."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class ConnectionError(TransportError):
    """Failed to reach the service."""

    pass


class TimeoutError(TransportError):
    """Request or connection timed out."""

    pass


class SessionError(TransportError):
    """Transport used while not connected."""

    pass


class HTTPStatusError(TransportError):
    """Service answered with a non-2xx status code."""

    def __init__(self, message: str, status_code: int, cause: Exception | None = None):
        super().__init__(message, cause=cause)
        self.status_code = status_code


class EmptyResponseError(TransportError):
    """Service answered with an empty body."""

    pass


class XMLParseError(TransportError):
    """Response body is not a well-formed XML document."""

    pass


class Transport(ABC):
    """
    Abstract base class for WFS transports.

    Transports send key-value-pair requests to the service and hand back
    the parsed XML response. They know nothing about version negotiation.
    """

    def __init__(self, config: TransportConfig):
        self.config = config
        self._event_handlers: list[Callable[[TransportEvent], None]] = []

    def on_event(self, handler: Callable[[TransportEvent], None]) -> None:
        """
        Register an event handler for transport events.

        Args:
            handler: Callback invoked when transport events occur.
        """
        self._event_handlers.append(handler)

    def _emit_event(self, event: TransportEvent) -> None:
        """Emit an event to all registered handlers."""
        for handler in self._event_handlers:
            try:
                handler(event)
            except Exception:
                # Handler errors must not affect the transport
                logger.exception(f"Transport event handler failed for {event}")

    @abstractmethod
    async def connect(self) -> None:
        """
        Prepare the transport for requests.

        Raises:
            ConnectionError: If the HTTP layer cannot be initialized.
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """
        Release all resources.

        This method should be safe to call multiple times.
        """
        pass

    @abstractmethod
    async def request(self, query: dict[str, Any]) -> Element:
        """
        Send a WFS request and return the root of the parsed response.

        ``service=WFS`` is always added to the query.

        Raises:
            TransportError: If the exchange fails or the body is unusable.
        """
        pass

    @abstractmethod
    def is_connected(self) -> bool:
        """Check if the transport is ready for requests."""
        pass

    async def fetch_capabilities(self, version: str) -> Element:
        """
        Request the capabilities document for a protocol version.

        Args:
            version: Version sent as the ``version`` parameter.

        Returns:
            Root element of the capabilities document.
        """
        return await self.request({"request": "GetCapabilities", "version": version})

    async def __aenter__(self) -> "Transport":
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.disconnect()
