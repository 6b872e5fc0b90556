"""Tests for the WFSClient facade."""

import httpx
import pytest

from wfsclient import (
    ClientConfig,
    ConfigurationError,
    ConnectionError,
    FeatureType,
    HTTPTransport,
    NegotiationError,
    WFSClient,
)


class TestConstruction:
    """Configuration is validated before any request."""

    def test_url_required(self):
        with pytest.raises(ConfigurationError, match="URL is required"):
            WFSClient()

    def test_empty_url_rejected(self):
        with pytest.raises(ConfigurationError):
            WFSClient("")

    def test_unsupported_version_rejected(self, fake_transport, server_declaring):
        transport = fake_transport(server_declaring({}, default="2.0.0"))

        with pytest.raises(ConfigurationError, match="not supported by client"):
            WFSClient("https://example.com/wfs", transport=transport, version="1.5.0")

        assert transport.requested == []

    def test_options(self):
        client = WFSClient(
            "https://example.com/wfs",
            version="1.1.0",
            maxConnections=4,
            keepAlive=False,
            userAgentString="wfs-test/1.0",
            retryCount=2,
        )
        assert client.config.version == "1.1.0"
        assert client.config.max_connections == 4
        assert client.config.keep_alive is False
        assert client.config.user_agent == "wfs-test/1.0"
        assert client.config.retries == 2
        assert isinstance(client.transport, HTTPTransport)
        assert client.transport.config.user_agent == "wfs-test/1.0"

    def test_config_object(self):
        config = ClientConfig(url="https://example.com/wfs")
        client = WFSClient(config=config)
        assert client.url == "https://example.com/wfs"

    def test_config_and_options_conflict(self):
        config = ClientConfig(url="https://example.com/wfs")
        with pytest.raises(ConfigurationError, match="either"):
            WFSClient(config=config, version="2.0.0")


class TestVersionSelection:
    """Explicit versions skip negotiation; otherwise it is negotiated."""

    @pytest.mark.asyncio
    async def test_explicit_version_bypasses_negotiation(self, fake_transport, server_declaring):
        # The server would refuse 1.1.0 during negotiation
        transport = fake_transport(server_declaring({}, default="2.0.0"))
        client = WFSClient("https://example.com/wfs", transport=transport, version="1.1.0")

        async with client:
            result = await client.negotiate()

        assert result.explicit
        assert result.protocol_version == "1.1.0"
        assert transport.requested == ["1.1.0"]

    @pytest.mark.asyncio
    async def test_ensure_version_explicit_makes_no_request(self, fake_transport, server_declaring):
        transport = fake_transport(server_declaring({}, default="2.0.0"))
        client = WFSClient("https://example.com/wfs", transport=transport, version="1.0.0")

        assert await client.ensure_version() == "1.0.0"
        assert transport.requested == []

    @pytest.mark.asyncio
    async def test_ensure_version_negotiates(self, fake_transport, server_declaring):
        transport = fake_transport(server_declaring({"2.0.0": "1.1.0"}))
        client = WFSClient("https://example.com/wfs", transport=transport)

        assert await client.ensure_version() == "1.1.0"
        assert transport.requested == ["2.0.0"]

    @pytest.mark.asyncio
    async def test_negotiation_failure_propagates(self, fake_transport, server_declaring):
        transport = fake_transport(server_declaring({"2.0.0": "0.5.0"}))
        client = WFSClient("https://example.com/wfs", transport=transport)

        with pytest.raises(NegotiationError):
            await client.feature_types()

    @pytest.mark.asyncio
    async def test_transport_failure_propagates(self, fake_transport):
        transport = fake_transport(lambda version: ConnectionError("unreachable"))
        client = WFSClient("https://example.com/wfs", transport=transport)

        with pytest.raises(ConnectionError, match="unreachable"):
            await client.get_capabilities()


class TestFeatureTypes:
    """End-to-end catalog queries over a mocked HTTP service."""

    @pytest.mark.asyncio
    async def test_feature_types_after_fallback(self, capabilities_xml, feature_type_list):
        requested = []

        def handler(request: httpx.Request) -> httpx.Response:
            version = request.url.params["version"]
            requested.append(version)
            # A 1.x-only server answering every request with 1.1.0
            body = capabilities_xml("1.1.0", feature_type_list, namespace="http://www.opengis.net/wfs")
            return httpx.Response(200, content=body, headers={"Content-Type": "text/xml"})

        config = ClientConfig(url="https://example.com/wfs")
        transport = HTTPTransport(config.transport_config(), http_transport=httpx.MockTransport(handler))

        async with WFSClient(config=config, transport=transport) as client:
            assert client.is_connected
            feature_types = await client.feature_types()

        assert not client.is_connected
        assert requested == ["2.0.0"]
        assert [ft.name for ft in feature_types] == ["roads", "Parcels", "Buildings", None]
        assert feature_types[0] == FeatureType(
            name="roads",
            namespace="topp",
            title="Road Network",
            abstract="All roads in the area",
            namespace_uri="http://www.openplans.org/topp",
        )

    @pytest.mark.asyncio
    async def test_first_request_connects(self, capabilities_xml, feature_type_list):
        def handler(request: httpx.Request) -> httpx.Response:
            body = capabilities_xml(request.url.params["version"], feature_type_list)
            return httpx.Response(200, content=body)

        config = ClientConfig(url="https://example.com/wfs")
        transport = HTTPTransport(config.transport_config(), http_transport=httpx.MockTransport(handler))
        client = WFSClient(config=config, transport=transport)
        assert not client.is_connected

        try:
            feature_types = await client.feature_types()
            assert client.is_connected
        finally:
            await client.close()

        assert len(feature_types) == 4
        assert not client.is_connected

    @pytest.mark.asyncio
    async def test_feature_types_explicit_version(self, fake_transport, capabilities_xml):
        transport = fake_transport(lambda version: capabilities_xml(version))
        client = WFSClient("https://example.com/wfs", transport=transport, version="2.0.0")

        assert await client.feature_types() == []
        assert transport.requested == ["2.0.0"]
