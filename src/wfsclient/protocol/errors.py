"""Client error types and negotiation failure reasons."""

from __future__ import annotations

from dataclasses import dataclass, field

# Negotiation failure reasons
VERSION_UNREADABLE = "version_unreadable"
BELOW_SERVER_FLOOR = "below_server_floor"
NO_COMPATIBLE_VERSION = "no_compatible_version"

REASON_MESSAGES = {
    VERSION_UNREADABLE: "Unable to read version in Capabilities",
    BELOW_SERVER_FLOOR: "Candidate version is below the lowest version supported by server",
    NO_COMPATIBLE_VERSION: "No compatible version",
}


class WFSError(Exception):
    """Base exception for all client errors."""

    pass


class ConfigurationError(WFSError, ValueError):
    """Invalid client configuration (missing URL, unsupported version, ...)."""

    pass


class ExtractionError(WFSError):
    """Input given to an extractor is not an XML element."""

    pass


@dataclass
class NegotiationError(WFSError):
    """
    Version negotiation failed.

    Always carries the reason and the versions involved, so the
    failure can be diagnosed without re-running the exchange.
    """

    reason: str
    message: str
    candidate_version: str | None = None
    server_version: str | None = None
    attempts: list[str] = field(default_factory=list)

    def __post_init__(self):
        super().__init__(self.message)

    @classmethod
    def version_unreadable(
        cls,
        candidate_version: str,
        raw_version: str | None,
        attempts: list[str] | None = None,
    ) -> "NegotiationError":
        """Server capabilities carry no (valid) version attribute."""
        return cls(
            reason=VERSION_UNREADABLE,
            message=(
                f"{REASON_MESSAGES[VERSION_UNREADABLE]} "
                f"(requested {candidate_version}, got {raw_version!r})"
            ),
            candidate_version=candidate_version,
            server_version=raw_version,
            attempts=list(attempts or []),
        )

    @classmethod
    def below_server_floor(
        cls,
        candidate_version: str,
        server_version: str,
        attempts: list[str] | None = None,
    ) -> "NegotiationError":
        """Server answered with a version above the candidate."""
        return cls(
            reason=BELOW_SERVER_FLOOR,
            message=(
                "Version negotiation has failed. Lowest version supported by "
                f"server is {server_version} but candidate version was {candidate_version}"
            ),
            candidate_version=candidate_version,
            server_version=server_version,
            attempts=list(attempts or []),
        )

    @classmethod
    def no_compatible_version(
        cls,
        candidate_version: str,
        server_version: str,
        attempts: list[str] | None = None,
    ) -> "NegotiationError":
        """No registry entry is below the version the server offered."""
        return cls(
            reason=NO_COMPATIBLE_VERSION,
            message=(
                f"{REASON_MESSAGES[NO_COMPATIBLE_VERSION]}: server offered "
                f"{server_version} for candidate {candidate_version} and the client "
                f"knows no version below {server_version}"
            ),
            candidate_version=candidate_version,
            server_version=server_version,
            attempts=list(attempts or []),
        )

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"NegotiationError(reason={self.reason!r}, "
            f"candidate_version={self.candidate_version!r}, "
            f"server_version={self.server_version!r})"
        )
