"""XML namespaces found in WFS capabilities documents."""

from __future__ import annotations

from enum import Enum
from xml.etree.ElementTree import Element

__all__ = (
    "xmlns",
    "WFS_NAMESPACES",
    "split_ns",
    "wfs_namespaces_for",
)


class xmlns(Enum):
    """Common namespaces within WFS land.
    The short aliases are arbitrary; a server may use any prefix (such as ns0).
    Only the URI in ``{uri}localname`` tags is significant.
    """

    wfs1 = "http://www.opengis.net/wfs"  # WFS 1.0.0 and 1.1.0
    wfs20 = "http://www.opengis.net/wfs/2.0"

    def __str__(self):
        return self.value

    def qname(self, local_name) -> str:
        """Convert the tag name into a fully qualified name."""
        return f"{{{self.value}}}{local_name}"

    def __contains__(self, tag: Element | str) -> bool:
        """Tell whether a given tag exists in this namespace"""
        if isinstance(tag, Element):
            tag = tag.tag
        elif not isinstance(tag, str):
            return False
        return tag.startswith(f"{{{self.value}}}")


# Namespaces a WFS_Capabilities root may live in, newest first.
WFS_NAMESPACES = (xmlns.wfs20, xmlns.wfs1)


def split_ns(xml_name: str) -> tuple[str | None, str]:
    """Split the element tag into the namespace and local name.
    The stdlib etree doesn't have the properties for this (lxml does).
    """
    if xml_name.startswith("{"):
        end = xml_name.index("}")
        return xml_name[1:end], xml_name[end + 1 :]
    else:
        return None, xml_name


def wfs_namespaces_for(root: Element) -> dict[str, str] | None:
    """Give the ``{"wfs": uri}`` prefix mapping matching the document root.

    Returns None when the root is not in any known WFS namespace.
    """
    for namespace in WFS_NAMESPACES:
        if root.tag in namespace:
            return {"wfs": namespace.value}
    return None
