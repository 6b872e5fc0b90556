"""WFS client configuration and config file loading."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import orjson

from wfsclient.protocol.errors import ConfigurationError
from wfsclient.protocol.versions import DEFAULT_REGISTRY, VersionRegistry, clean_version
from wfsclient.transport.types import TransportConfig

logger = logging.getLogger(__name__)

# Config file locations
WFS_CONFIG_FILENAME = "wfs.json"
GLOBAL_WFS_CONFIG = Path.home() / ".wfsclient" / WFS_CONFIG_FILENAME
LOCAL_WFS_CONFIG_DIR = ".wfsclient"

# Spellings accepted by from_dict() -> field name
OPTION_ALIASES = {
    "url": "url",
    "version": "version",
    "keepAlive": "keep_alive",
    "keep_alive": "keep_alive",
    "maxConnections": "max_connections",
    "maxSockets": "max_connections",
    "max_connections": "max_connections",
    "userAgent": "user_agent",
    "userAgentString": "user_agent",
    "user_agent": "user_agent",
    "retry": "retries",
    "retryCount": "retries",
    "retries": "retries",
    "timeout": "timeout",
    "connectTimeout": "connect_timeout",
    "connect_timeout": "connect_timeout",
    "headers": "headers",
    "verifySsl": "verify_ssl",
    "verify_ssl": "verify_ssl",
    "registry": "registry",
}


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for a WFS client."""

    url: str
    """Service endpoint URL."""

    version: str | None = None
    """Protocol version to use without negotiating (must be supported)."""

    keep_alive: bool = True
    max_connections: int | None = None
    user_agent: str | None = None
    retries: int = 0
    timeout: float = 30.0
    connect_timeout: float = 10.0
    headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True

    registry: VersionRegistry = field(default=DEFAULT_REGISTRY, repr=False, compare=False)
    """Versions the client can speak."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not self.url:
            raise ConfigurationError("URL is required")

        if not isinstance(self.registry, VersionRegistry):
            # e.g. a plain list of versions from a config file
            try:
                object.__setattr__(self, "registry", VersionRegistry(self.registry))
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid registry: {e}") from None

        if self.version is not None:
            if self.version not in self.registry:
                raise ConfigurationError(
                    f"Version {self.version!r} not supported by client. "
                    f"Supported versions: {list(self.registry.versions)}"
                )
            # frozen dataclass, bypass __setattr__
            object.__setattr__(self, "version", clean_version(self.version))

        # Fail here, not at first request
        self.transport_config()

    def transport_config(self) -> TransportConfig:
        """Build the transport configuration."""
        return TransportConfig(
            url=self.url,
            timeout=self.timeout,
            connect_timeout=self.connect_timeout,
            headers=dict(self.headers),
            keep_alive=self.keep_alive,
            max_connections=self.max_connections,
            user_agent=self.user_agent,
            retries=self.retries,
            verify_ssl=self.verify_ssl,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any], **overrides: Any) -> "ClientConfig":
        """
        Create from an options dict.

        Both snake_case and camelCase option names are accepted.

        Raises:
            ConfigurationError: For unknown options or invalid values.
        """
        options: dict[str, Any] = {}
        for key, value in {**data, **overrides}.items():
            try:
                options[OPTION_ALIASES[key]] = value
            except KeyError:
                raise ConfigurationError(f"Unknown option: {key}") from None
        return cls(**options)


def _load_config_file(path: Path) -> dict[str, ClientConfig]:
    """Read named service configs from a single file."""
    configs: dict[str, ClientConfig] = {}
    try:
        data = orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as e:
        logger.warning(f"Unable to read WFS config {path}: {e}")
        return configs

    services = data.get("wfsServices") if isinstance(data, dict) else None
    if not isinstance(services, dict):
        logger.warning(f"No wfsServices found in {path}")
        return configs

    for name, service_data in services.items():
        if not isinstance(service_data, dict) or not service_data.get("url"):
            logger.warning(f"Skipping WFS service {name!r} in {path}: no url")
            continue
        try:
            configs[name] = ClientConfig.from_dict(service_data)
        except ConfigurationError as e:
            logger.warning(f"Skipping WFS service {name!r} in {path}: {e}")

    return configs


def load_wfs_config(working_dir: Path | None = None) -> dict[str, ClientConfig]:
    """Load WFS service configs from global and local config files.

    Global config (~/.wfsclient/wfs.json) is loaded first.
    Local config ({working_dir}/.wfsclient/wfs.json) overrides global.

    Returns:
        Dict mapping service name to config.
    """
    configs: dict[str, ClientConfig] = {}

    if GLOBAL_WFS_CONFIG.exists():
        configs.update(_load_config_file(GLOBAL_WFS_CONFIG))

    if working_dir:
        local_config = working_dir / LOCAL_WFS_CONFIG_DIR / WFS_CONFIG_FILENAME
        if local_config.exists():
            configs.update(_load_config_file(local_config))

    return configs
