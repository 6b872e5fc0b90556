"""WFS client: version negotiation and feature type discovery."""

from __future__ import annotations

import logging
from typing import Any
from xml.etree.ElementTree import Element

from wfsclient.capabilities.feature_types import FeatureType, extract_feature_types
from wfsclient.config import ClientConfig
from wfsclient.protocol.errors import ConfigurationError
from wfsclient.protocol.negotiation import NegotiationResult, VersionNegotiator
from wfsclient.transport.base import Transport
from wfsclient.transport.http import HTTPTransport

logger = logging.getLogger(__name__)


class WFSClient:
    """
    Client for a single WFS endpoint.

    The configuration is validated on construction, so an unsupported
    explicit version fails before any request is made. Without an
    explicit version, every capabilities query negotiates the version
    with the server first.

    The transport is connected on the first request if needed. Outside
    of ``async with``, call close() to release the connection pool.

    Usage::

        async with WFSClient("https://example.com/wfs") as client:
            for feature_type in await client.feature_types():
                print(feature_type.name)
    """

    def __init__(
        self,
        url: str | None = None,
        config: ClientConfig | None = None,
        transport: Transport | None = None,
        **options: Any,
    ):
        """
        Initialize the client.

        Args:
            url: Service endpoint URL (may be omitted when ``config`` is given).
            config: Full client configuration.
            transport: Transport to use instead of the default HTTP transport.
            **options: Options for ClientConfig.from_dict() when no config is given.

        Raises:
            ConfigurationError: If the URL is missing or an option is invalid.
        """
        if config is None:
            config = ClientConfig.from_dict({"url": url or "", **options})
        elif url is not None or options:
            raise ConfigurationError("Pass either a config or url/options, not both")

        self.config = config
        self.transport = transport or HTTPTransport(config.transport_config())
        self._negotiator = VersionNegotiator(self.transport, registry=config.registry)

    @property
    def url(self) -> str:
        return self.config.url

    @property
    def is_connected(self) -> bool:
        return self.transport.is_connected()

    async def connect(self) -> None:
        """Prepare the transport for requests."""
        await self.transport.connect()

    async def close(self) -> None:
        """Release the transport and its connections."""
        await self.transport.disconnect()

    async def negotiate(self) -> NegotiationResult:
        """
        Settle the protocol version and fetch the matching capabilities.

        With an explicit version configured, capabilities are requested
        for that version directly and no negotiation takes place.

        Raises:
            NegotiationError: If no version can be agreed on.
            TransportError: If a capabilities request fails.
        """
        if not self.transport.is_connected():
            await self.connect()

        if self.config.version:
            logger.debug(f"Using configured WFS version {self.config.version}")
            capabilities = await self.transport.fetch_capabilities(self.config.version)
            return NegotiationResult(
                protocol_version=self.config.version,
                capabilities=capabilities,
                attempts=[self.config.version],
                explicit=True,
            )

        return await self._negotiator.negotiate()

    async def ensure_version(self) -> str:
        """Give the protocol version to use with this service."""
        if self.config.version:
            return self.config.version
        result = await self.negotiate()
        return result.protocol_version

    async def get_capabilities(self) -> Element:
        """Fetch the capabilities document for the settled version."""
        result = await self.negotiate()
        return result.capabilities

    async def feature_types(self) -> list[FeatureType]:
        """
        List the feature types the service offers.

        Returns:
            Feature types in document order.

        Raises:
            NegotiationError: If no version can be agreed on.
            TransportError: If a capabilities request fails.
        """
        capabilities = await self.get_capabilities()
        return extract_feature_types(capabilities)

    async def __aenter__(self) -> "WFSClient":
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    def __repr__(self) -> str:
        return f"WFSClient(url={self.config.url!r}, version={self.config.version!r})"
