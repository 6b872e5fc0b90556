"""XML parsing for service responses.

This uses the etree logic from the standard library, with the elements
exposing the namespace aliases that were declared in the document.
Using defusedxml, entity expansion and external references are refused.
"""

from __future__ import annotations

import logging
import typing
from xml.etree.ElementTree import Element, TreeBuilder

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import DefusedXMLParser, ParseError

from wfsclient.transport.base import EmptyResponseError, XMLParseError

logger = logging.getLogger(__name__)

__all__ = (
    "NSElement",
    "NSTreeBuilder",
    "parse_xml",
)


class NSElement(Element):
    """XML element which also exposes the namespace aliases in scope.
    Capabilities hold QName values in text, such as
    ``<Name>topp:roads</Name>``, and the alias is needed to resolve those.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.ns_aliases = {}  # assigned by NSTreeBuilder, in {prefix: uri} format.

    def resolve_prefix(self, prefix: str) -> str | None:
        """Give the namespace URI declared for an alias, if any."""
        return self.ns_aliases.get(prefix)

    if typing.TYPE_CHECKING:

        def find(self, path: str, namespaces: dict[str, str] | None = None) -> NSElement | None:
            return super().find(path, namespaces)

        def findall(self, path: str, namespaces: dict[str, str] | None = None) -> list[NSElement]:
            return super().findall(path, namespaces)


class NSTreeBuilder(TreeBuilder):
    """Custom TreeBuilder to track namespaces."""

    def __init__(self, **kwargs):
        super().__init__(element_factory=NSElement, **kwargs)
        self.ns_stack = []
        # start_ns() is called before the start() of the declaring element
        self._pending_ns = {}

    def start(self, tag, attrs):
        element = super().start(tag, attrs)
        self.ns_stack.append(self._pending_ns)
        self._pending_ns = {}
        return element

    def start_ns(self, prefix, uri):
        self._pending_ns[prefix] = uri

    def end(self, tag) -> Element:
        element = super().end(tag)
        element.ns_aliases = self._flatten_ns()
        self.ns_stack.pop()
        return element

    def _flatten_ns(self) -> dict:
        result = {}
        for level in self.ns_stack:
            result.update(level)
        return result


def parse_xml(content: bytes | str) -> NSElement:
    """Parse a response body into an element tree.

    Raises:
        EmptyResponseError: If the body is empty.
        XMLParseError: If the body is not well-formed XML, or uses
            constructs defusedxml refuses.
    """
    if not content or not content.strip():
        raise EmptyResponseError("Empty body")

    # Passing a custom parser potentially circumvents defusedxml,
    # so the parser is configured with the same restrictions again.
    parser = DefusedXMLParser(
        target=NSTreeBuilder(),
        forbid_dtd=False,
        forbid_entities=True,
        forbid_external=True,
    )

    try:
        parser.feed(content)
        return parser.close()
    except ParseError as e:
        logger.debug(f"Parsing XML error: {e}")
        raise XMLParseError(f"Failed to parse response: {e}", cause=e)
    except DefusedXmlException as e:
        raise XMLParseError(f"Refused to parse response: {e}", cause=e)
