"""Feature type catalog extraction from capabilities documents."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from xml.etree.ElementTree import Element

from wfsclient.capabilities.namespaces import split_ns, wfs_namespaces_for
from wfsclient.protocol.errors import ExtractionError
from wfsclient.transport.xml import NSElement

logger = logging.getLogger(__name__)

CAPABILITIES_ROOT = "WFS_Capabilities"
FEATURE_TYPE_PATH = "wfs:FeatureTypeList/wfs:FeatureType"

# Child element -> FeatureType field
TEXT_FIELDS = (
    ("wfs:Name", "name"),
    ("wfs:Title", "title"),
    ("wfs:Abstract", "abstract"),
)


@dataclass(frozen=True)
class FeatureType:
    """
    A feature type advertised by the service.

    Fields are None when the capabilities document had no (or an empty)
    element for them.
    """

    name: str | None = None
    """Local name, without namespace prefix."""

    namespace: str | None = None
    """Namespace prefix the server qualified the name with."""

    title: str | None = None
    abstract: str | None = None

    namespace_uri: str | None = None
    """URI the namespace prefix is bound to, when the document declares it."""

    @property
    def qualified_name(self) -> str | None:
        """Name as the server spells it in requests (``prefix:name``)."""
        if self.name and self.namespace:
            return f"{self.namespace}:{self.name}"
        return self.name

    def to_dict(self) -> dict[str, str]:
        """Convert to a dict holding only the fields that are present."""
        return {key: value for key, value in asdict(self).items() if value is not None}


def split_qualified_name(name: str) -> tuple[str | None, str]:
    """
    Split ``prefix:local`` on the first colon.

    An empty prefix (``":Roads"``) is dropped rather than stored. A name
    with nothing after the colon (``"ns:"``) is not split at all.

    Returns:
        (namespace, local_name); namespace is None for unqualified names.
    """
    prefix, sep, local_name = name.partition(":")
    if not sep or not local_name:
        return None, name
    return (prefix or None), local_name


def _text_value(child: Element | None) -> str | None:
    if child is None or child.text is None:
        return None
    return child.text.strip() or None


def parse_feature_type(node: Element, namespaces: dict[str, str]) -> FeatureType:
    """Read a single ``<wfs:FeatureType>`` element."""
    values = {}
    name_element = None
    for path, attribute in TEXT_FIELDS:
        child = node.find(path, namespaces)
        value = _text_value(child)
        if value is not None:
            values[attribute] = value
            if attribute == "name":
                name_element = child

    if "name" in values:
        namespace, values["name"] = split_qualified_name(values["name"])
        if namespace is not None:
            values["namespace"] = namespace
            # Only documents parsed by NSTreeBuilder know their aliases
            if isinstance(name_element, NSElement):
                namespace_uri = name_element.resolve_prefix(namespace)
                if namespace_uri is not None:
                    values["namespace_uri"] = namespace_uri

    return FeatureType(**values)


def extract_feature_types(capabilities: Element) -> list[FeatureType]:
    """
    Extract the feature type catalog from a capabilities document.

    Missing elements never raise: a document without a feature type list
    gives an empty list, and missing child elements leave the matching
    field empty. The document is not modified, and the result follows
    document order.

    Args:
        capabilities: Root element of a ``WFS_Capabilities`` document.

    Returns:
        The advertised feature types.

    Raises:
        ExtractionError: If ``capabilities`` is not an XML element.
    """
    if not isinstance(capabilities, Element):
        raise ExtractionError(
            f"Expected an XML element, got {type(capabilities).__name__}"
        )

    namespaces = wfs_namespaces_for(capabilities)
    if namespaces is None or split_ns(capabilities.tag)[1] != CAPABILITIES_ROOT:
        logger.debug(f"No WFS capabilities root found, got <{capabilities.tag}>")
        return []

    nodes = capabilities.findall(FEATURE_TYPE_PATH, namespaces)
    logger.debug(f"Found {len(nodes)} feature types")
    return [parse_feature_type(node, namespaces) for node in nodes]
