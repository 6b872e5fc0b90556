"""
WFS capabilities interpretation.

Reads the feature type catalog from a parsed capabilities document.
"""

from wfsclient.capabilities.namespaces import (
    xmlns,
    WFS_NAMESPACES,
    split_ns,
    wfs_namespaces_for,
)
from wfsclient.capabilities.feature_types import (
    FeatureType,
    extract_feature_types,
    parse_feature_type,
    split_qualified_name,
)

__all__ = [
    # Namespaces
    "xmlns",
    "WFS_NAMESPACES",
    "split_ns",
    "wfs_namespaces_for",
    # Feature types
    "FeatureType",
    "extract_feature_types",
    "parse_feature_type",
    "split_qualified_name",
]
