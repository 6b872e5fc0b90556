"""Transport layer types and configuration."""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

from wfsclient.protocol.errors import ConfigurationError


class TransportEventType(Enum):
    """Types of transport events for observability."""

    CONNECTING = auto()
    CONNECTED = auto()
    DISCONNECTING = auto()
    DISCONNECTED = auto()
    REQUEST_SENT = auto()
    RESPONSE_RECEIVED = auto()
    ERROR = auto()


@dataclass
class TransportEvent:
    """Event emitted by transport for observability."""

    type: TransportEventType
    timestamp: float
    data: dict[str, Any] | None = None
    error: Exception | None = None

    def __str__(self) -> str:
        base = f"[{self.type.name}]"
        if self.data:
            base += f" {self.data}"
        if self.error:
            base += f" error={self.error}"
        return base


@dataclass(frozen=True)
class TransportConfig:
    """Configuration for the WFS transport layer."""

    url: str
    """Service endpoint URL (GetCapabilities requests are sent here)."""

    timeout: float = 30.0
    """Request timeout in seconds."""

    connect_timeout: float = 10.0
    """Connection establishment timeout in seconds."""

    headers: dict[str, str] = field(default_factory=dict)
    """Additional HTTP headers to include in requests."""

    keep_alive: bool = True
    """Whether to keep idle connections around for reuse."""

    max_connections: int | None = None
    """Upper bound on open connections and in-flight requests (None = httpx default)."""

    user_agent: str | None = None
    """Value of the User-Agent header."""

    retries: int = 0
    """Connection attempts retried by the HTTP layer."""

    verify_ssl: bool = True
    """Whether to verify SSL certificates."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not self.url or not isinstance(self.url, str):
            raise ConfigurationError("url is required")
        _check_type("timeout", self.timeout, (int, float), "a number")
        _check_type("connect_timeout", self.connect_timeout, (int, float), "a number")
        _check_type("retries", self.retries, int, "an integer")
        if self.max_connections is not None:
            _check_type("max_connections", self.max_connections, int, "an integer")
        for name in ("keep_alive", "verify_ssl"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigurationError(f"{name} must be true or false")
        if not isinstance(self.headers, dict):
            raise ConfigurationError("headers must be a mapping")
        if self.user_agent is not None and not isinstance(self.user_agent, str):
            raise ConfigurationError("user_agent must be a string")
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")
        if self.connect_timeout <= 0:
            raise ConfigurationError("connect_timeout must be positive")
        if self.max_connections is not None and self.max_connections < 1:
            raise ConfigurationError("max_connections must be at least 1")
        if self.retries < 0:
            raise ConfigurationError("retries cannot be negative")

    def request_headers(self) -> dict[str, str]:
        """Headers sent with every request."""
        headers = dict(self.headers)
        if self.user_agent:
            headers["User-Agent"] = self.user_agent
        return headers


def _check_type(name: str, value: Any, types: type | tuple[type, ...], expected: str) -> None:
    # bool is an int subclass, but "retries": true is a config mistake
    if isinstance(value, bool) or not isinstance(value, types):
        raise ConfigurationError(f"{name} must be {expected}, got {value!r}")
