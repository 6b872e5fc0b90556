"""
WFS transport layer.

Sends key-value-pair requests over HTTP and returns parsed XML documents.
"""

from wfsclient.transport.types import TransportConfig, TransportEvent, TransportEventType
from wfsclient.transport.base import (
    Transport,
    TransportError,
    ConnectionError,
    TimeoutError,
    SessionError,
    HTTPStatusError,
    EmptyResponseError,
    XMLParseError,
)
from wfsclient.transport.http import HTTPTransport
from wfsclient.transport.xml import NSElement, parse_xml

__all__ = [
    "Transport",
    "TransportConfig",
    "TransportEvent",
    "TransportEventType",
    "TransportError",
    "ConnectionError",
    "TimeoutError",
    "SessionError",
    "HTTPStatusError",
    "EmptyResponseError",
    "XMLParseError",
    "HTTPTransport",
    "NSElement",
    "parse_xml",
]
