"""WFS protocol version negotiation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from xml.etree.ElementTree import Element

from wfsclient.protocol.errors import NegotiationError
from wfsclient.protocol.versions import (
    DEFAULT_REGISTRY,
    VersionRegistry,
    clean_version,
    is_valid_version,
    parse_version,
)

if TYPE_CHECKING:
    from wfsclient.transport.base import Transport

logger = logging.getLogger(__name__)


@dataclass
class NegotiationResult:
    """
    Result of a successful version negotiation.

    Holds the capabilities document that was returned for the settled
    version, so callers don't have to request it a second time.
    """

    protocol_version: str
    """Version both client and server agreed on."""

    capabilities: Element
    """Root element of the capabilities document for that version."""

    attempts: list[str] = field(default_factory=list)
    """Candidate versions sent to the server, in order."""

    explicit: bool = False
    """True when the version was configured and not negotiated."""

    def __str__(self) -> str:
        return (
            f"NegotiationResult(version={self.protocol_version}, "
            f"attempts={self.attempts})"
        )


def read_declared_version(capabilities: Element) -> str | None:
    """Read the version attribute of the capabilities root element."""
    version = capabilities.get("version")
    if not is_valid_version(version):
        return None
    return clean_version(version)


class VersionNegotiator:
    """
    Agrees on a protocol version with the server.

    Starting from a candidate, the server's capabilities are requested and
    the version it declares is compared with the candidate:

    - equal: done.
    - higher: the server can't go as low as the candidate; fail.
    - lower and known to the client: done, use the server's version.
    - lower and unknown: retry with the nearest older version the
      client knows, or fail when there is none.

    Every retry uses a version strictly below the previous one, so the
    number of requests is bounded by the registry size.
    """

    def __init__(
        self,
        transport: "Transport",
        registry: VersionRegistry = DEFAULT_REGISTRY,
    ):
        """
        Args:
            transport: Transport used to fetch capabilities.
            registry: Versions the client can speak.
        """
        self.transport = transport
        self.registry = registry

    async def negotiate(self, candidate_version: str | None = None) -> NegotiationResult:
        """
        Negotiate a protocol version.

        Args:
            candidate_version: First version to try (defaults to the highest
                version in the registry).

        Returns:
            NegotiationResult with the settled version and its capabilities.

        Raises:
            NegotiationError: If no version can be agreed on.
            TransportError: If a capabilities request fails.
        """
        candidate = clean_version(candidate_version or self.registry.highest)
        attempts: list[str] = []

        while True:
            logger.debug(f"Client is trying with version {candidate}")
            attempts.append(candidate)

            # Transport errors are not a reason to try another version
            capabilities = await self.transport.fetch_capabilities(candidate)

            declared = read_declared_version(capabilities)
            if declared is None:
                logger.debug("Unable to read version in Capabilities")
                raise NegotiationError.version_unreadable(
                    candidate, capabilities.get("version"), attempts
                )

            logger.debug(f"Server responded with version {declared}")

            if declared == candidate:
                logger.debug("Client and server versions are matching")
                return self._settle(declared, capabilities, attempts)

            if parse_version(declared) > parse_version(candidate):
                logger.debug(
                    f"Candidate version ({candidate}) is smaller than the lowest "
                    f"supported by server ({declared}), version negotiation failed"
                )
                raise NegotiationError.below_server_floor(candidate, declared, attempts)

            logger.debug(f"Candidate version ({candidate}) is greater than server one ({declared})")
            if declared in self.registry:
                logger.debug(f"Version returned by server ({declared}) is supported by client")
                return self._settle(declared, capabilities, attempts)

            next_candidate = self.registry.greatest_below(declared)
            if next_candidate is None:
                logger.debug(f"No version below {declared} is supported by client")
                raise NegotiationError.no_compatible_version(candidate, declared, attempts)

            logger.debug(f"Nearest smaller version supported by client is {next_candidate}")
            candidate = next_candidate

    def _settle(
        self, version: str, capabilities: Element, attempts: list[str]
    ) -> NegotiationResult:
        logger.info(f"Negotiated WFS version {version} with {self.transport.config.url}")
        return NegotiationResult(
            protocol_version=version,
            capabilities=capabilities,
            attempts=attempts,
        )


async def negotiate_version(
    transport: "Transport",
    candidate_version: str | None = None,
    registry: VersionRegistry = DEFAULT_REGISTRY,
) -> NegotiationResult:
    """
    Convenience function for version negotiation.

    Args:
        transport: A connected transport.
        candidate_version: First version to try.
        registry: Versions the client can speak.

    Returns:
        NegotiationResult with the settled version.
    """
    negotiator = VersionNegotiator(transport=transport, registry=registry)
    return await negotiator.negotiate(candidate_version)
