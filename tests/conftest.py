"""Pytest configuration and fixtures."""

from typing import Any, Callable

import pytest

from wfsclient.transport import Transport, TransportConfig, parse_xml

# Async tests are marked with @pytest.mark.asyncio
pytest_plugins = ["pytest_asyncio"]

WFS20_NS = "http://www.opengis.net/wfs/2.0"
WFS1_NS = "http://www.opengis.net/wfs"

FEATURE_TYPE_LIST = """
<wfs:FeatureTypeList>
  <wfs:FeatureType>
    <wfs:Name>topp:roads</wfs:Name>
    <wfs:Title>Road Network</wfs:Title>
    <wfs:Abstract>  All roads in the area  </wfs:Abstract>
  </wfs:FeatureType>
  <wfs:FeatureType xmlns:cadastre="urn:example:cadastre">
    <wfs:Name>cadastre:Parcels</wfs:Name>
    <wfs:Title></wfs:Title>
  </wfs:FeatureType>
  <wfs:FeatureType>
    <wfs:Name>Buildings</wfs:Name>
    <wfs:Abstract/>
  </wfs:FeatureType>
  <wfs:FeatureType>
    <wfs:Title>Unnamed layer</wfs:Title>
  </wfs:FeatureType>
</wfs:FeatureTypeList>
"""


def build_capabilities(
    version: str | None,
    body: str = "",
    namespace: str = WFS20_NS,
) -> bytes:
    """Render a minimal WFS_Capabilities document."""
    version_attr = f' version="{version}"' if version is not None else ""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<wfs:WFS_Capabilities{version_attr} xmlns:wfs="{namespace}"'
        ' xmlns:ows="http://www.opengis.net/ows/1.1"'
        ' xmlns:topp="http://www.openplans.org/topp">\n'
        "  <ows:ServiceIdentification>\n"
        "    <ows:Title>Test service</ows:Title>\n"
        "  </ows:ServiceIdentification>\n"
        f"{body}\n"
        "</wfs:WFS_Capabilities>\n"
    ).encode("utf-8")


class FakeTransport(Transport):
    """Transport answering capabilities requests from a callable."""

    def __init__(self, server: Callable[[str], Any], url: str = "https://example.com/wfs"):
        super().__init__(TransportConfig(url=url))
        self.server = server
        self.requested: list[str] = []
        self._connected = False

    async def connect(self) -> None:
        self._connected = True

    async def disconnect(self) -> None:
        self._connected = False

    def is_connected(self) -> bool:
        return self._connected

    async def request(self, query):
        version = query["version"]
        self.requested.append(version)
        answer = self.server(version)
        if isinstance(answer, Exception):
            raise answer
        return parse_xml(answer)


@pytest.fixture
def capabilities_xml():
    """Builder for capabilities documents."""
    return build_capabilities


@pytest.fixture
def feature_type_list():
    """A FeatureTypeList fragment in the ``wfs`` prefix."""
    return FEATURE_TYPE_LIST


@pytest.fixture
def server_declaring():
    """Server that declares a fixed version per requested version.

    Requested versions missing from the mapping answer with ``default``.
    """

    def make(answers: dict[str, str | None], default: str | None = None, body: str = ""):
        def server(candidate: str) -> bytes:
            return build_capabilities(answers.get(candidate, default), body)

        return server

    return make


@pytest.fixture
def fake_transport():
    """Factory for FakeTransport instances."""

    def make(server: Callable[[str], Any]) -> FakeTransport:
        return FakeTransport(server)

    return make
