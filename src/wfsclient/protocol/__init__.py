"""
WFS protocol core.

Version registry, version negotiation and the client error taxonomy.
"""

from wfsclient.protocol.errors import (
    WFSError,
    ConfigurationError,
    NegotiationError,
    ExtractionError,
    VERSION_UNREADABLE,
    BELOW_SERVER_FLOOR,
    NO_COMPATIBLE_VERSION,
)
from wfsclient.protocol.versions import (
    VersionRegistry,
    DEFAULT_REGISTRY,
    SUPPORTED_VERSIONS,
    is_valid_version,
    clean_version,
    parse_version,
)
from wfsclient.protocol.negotiation import (
    VersionNegotiator,
    NegotiationResult,
    negotiate_version,
    read_declared_version,
)

__all__ = [
    # Errors
    "WFSError",
    "ConfigurationError",
    "NegotiationError",
    "ExtractionError",
    "VERSION_UNREADABLE",
    "BELOW_SERVER_FLOOR",
    "NO_COMPATIBLE_VERSION",
    # Versions
    "VersionRegistry",
    "DEFAULT_REGISTRY",
    "SUPPORTED_VERSIONS",
    "is_valid_version",
    "clean_version",
    "parse_version",
    # Negotiation
    "VersionNegotiator",
    "NegotiationResult",
    "negotiate_version",
    "read_declared_version",
]
