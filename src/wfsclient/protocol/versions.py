"""Protocol versions understood by the client."""

from __future__ import annotations

import re
from typing import Iterator

from packaging.version import Version

# Ordered, highest last
SUPPORTED_VERSIONS = ("1.0.0", "1.1.0", "2.0.0")

_SEMVER_RE = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)$")


def is_valid_version(version: str | None) -> bool:
    """Check that ``version`` is a MAJOR.MINOR.PATCH version string."""
    if not isinstance(version, str):
        return False
    return _SEMVER_RE.match(version.strip()) is not None


def clean_version(version: str) -> str:
    """
    Normalize a version string ("v1.1.0 " -> "1.1.0").

    Raises:
        ValueError: If the string is not a valid version.
    """
    match = _SEMVER_RE.match(version.strip()) if isinstance(version, str) else None
    if match is None:
        raise ValueError(f"Invalid version string: {version!r}")
    return ".".join(str(int(part)) for part in match.groups())


def parse_version(version: str) -> Version:
    """Parse a version string into a comparable object."""
    return Version(clean_version(version))


class VersionRegistry:
    """
    Fixed, ordered set of protocol versions.

    Entries are stored lowest first. The registry is immutable once
    constructed and can be shared freely between clients.
    """

    __slots__ = ("_versions", "_parsed")

    def __init__(self, versions: tuple[str, ...] | list[str] = SUPPORTED_VERSIONS):
        if not versions:
            raise ValueError("A version registry needs at least one version")

        cleaned = tuple(clean_version(v) for v in versions)
        parsed = tuple(Version(v) for v in cleaned)
        for lower, higher in zip(parsed, parsed[1:]):
            if not lower < higher:
                raise ValueError(f"Registry versions must be strictly ascending: {cleaned}")

        self._versions = cleaned
        self._parsed = parsed

    @property
    def versions(self) -> tuple[str, ...]:
        """All versions, highest last."""
        return self._versions

    @property
    def highest(self) -> str:
        return self._versions[-1]

    @property
    def lowest(self) -> str:
        return self._versions[0]

    def greatest_below(self, version: str) -> str | None:
        """Find the greatest entry strictly less than ``version``."""
        target = parse_version(version)
        for candidate, parsed in zip(reversed(self._versions), reversed(self._parsed)):
            if parsed < target:
                return candidate
        return None

    def __contains__(self, version: object) -> bool:
        if not is_valid_version(version):
            return False
        return clean_version(version) in self._versions

    def __iter__(self) -> Iterator[str]:
        return iter(self._versions)

    def __len__(self) -> int:
        return len(self._versions)

    def __repr__(self) -> str:
        return f"VersionRegistry({list(self._versions)})"


DEFAULT_REGISTRY = VersionRegistry(SUPPORTED_VERSIONS)
