"""
Asynchronous client for OGC Web Feature Services (WFS).

Submodules:
- transport: HTTP transport and XML response parsing
- protocol: version registry, version negotiation and errors
- capabilities: feature type catalog extraction
- config: client configuration and config file loading
- client: the WFSClient facade
"""

from importlib.metadata import PackageNotFoundError, version

# Transport layer
from wfsclient.transport import (
    HTTPTransport,
    Transport,
    TransportConfig,
    TransportError,
    ConnectionError,
    TimeoutError,
    SessionError,
    HTTPStatusError,
    EmptyResponseError,
    XMLParseError,
)

# Protocol layer
from wfsclient.protocol import (
    WFSError,
    ConfigurationError,
    NegotiationError,
    ExtractionError,
    VersionRegistry,
    VersionNegotiator,
    NegotiationResult,
    DEFAULT_REGISTRY,
    SUPPORTED_VERSIONS,
    negotiate_version,
)

# Capabilities
from wfsclient.capabilities import (
    FeatureType,
    extract_feature_types,
    split_qualified_name,
)

from wfsclient.config import ClientConfig, load_wfs_config
from wfsclient.client import WFSClient

try:
    __version__ = version("wfs-client")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "WFSClient",
    "ClientConfig",
    "load_wfs_config",
    # Transport
    "HTTPTransport",
    "Transport",
    "TransportConfig",
    "TransportError",
    "ConnectionError",
    "TimeoutError",
    "SessionError",
    "HTTPStatusError",
    "EmptyResponseError",
    "XMLParseError",
    # Protocol
    "WFSError",
    "ConfigurationError",
    "NegotiationError",
    "ExtractionError",
    "VersionRegistry",
    "VersionNegotiator",
    "NegotiationResult",
    "DEFAULT_REGISTRY",
    "SUPPORTED_VERSIONS",
    "negotiate_version",
    # Capabilities
    "FeatureType",
    "extract_feature_types",
    "split_qualified_name",
]
