"""Tests for the meinfernbus HTTP client."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from conftest import network_document
from flixbus_mcp.data.config import FlixbusConfig
from flixbus_mcp.data.flixbus_client import FlixbusClient
from flixbus_mcp.models.errors import MalformedResponse, TransportError


@pytest.fixture
def config() -> FlixbusConfig:
    """Create a test config."""
    return FlixbusConfig(
        FLIXBUS_API_KEY="test_api_key",
        FLIXBUS_API_BASE="https://example.com/v1/",
    )


def _response(body: bytes) -> MagicMock:
    response = MagicMock()
    response.content = body
    return response


@pytest.mark.asyncio
async def test_fetch_network_parses_stations(config: FlixbusConfig):
    """Test parsing network.json into station records."""
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(
            return_value=_response(json.dumps(network_document()).encode())
        )
        mock_client_class.return_value = mock_client

        async with FlixbusClient(config) as client:
            network = await client.fetch_network()

    mock_client.get.assert_awaited_once_with("https://example.com/v1/network.json")
    assert len(network.stations) == 3
    berlin = network.stations[0]
    assert berlin.id == 1
    assert berlin.name == "Berlin ZOB"
    assert berlin.coordinates.latitude == pytest.approx(52.507)
    assert "ZOB Berlin" in berlin.aliases


@pytest.mark.asyncio
async def test_fetch_returns_raw_body(config: FlixbusConfig):
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(return_value=_response(b'{"trips": []}'))
        mock_client_class.return_value = mock_client

        async with FlixbusClient(config) as client:
            body = await client.fetch("https://example.com/v1/trip/search.json?from=1")

    assert body == b'{"trips": []}'


@pytest.mark.asyncio
async def test_client_requires_async_context():
    """Test that client methods fail without async context."""
    client = FlixbusClient(FlixbusConfig(FLIXBUS_API_KEY="test_key"))

    with pytest.raises(RuntimeError, match="Client not initialized"):
        await client.fetch("https://example.com")


@pytest.mark.asyncio
async def test_client_sets_authentication_header(config: FlixbusConfig):
    """Test that the client sends the API key in X-API-Authentication."""
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(return_value=_response(b"{}"))
        mock_client_class.return_value = mock_client

        async with FlixbusClient(config) as client:
            await client.fetch("https://example.com")

        mock_client_class.assert_called_once()
        call_kwargs = mock_client_class.call_args.kwargs
        assert call_kwargs["headers"]["X-API-Authentication"] == "test_api_key"
        assert call_kwargs["timeout"] == 30.0
        mock_client.aclose.assert_awaited_once()


@pytest.mark.asyncio
async def test_client_without_api_key_sends_no_header():
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client_class.return_value = AsyncMock()

        async with FlixbusClient(FlixbusConfig(FLIXBUS_API_KEY=None)):
            pass

        assert mock_client_class.call_args.kwargs["headers"] == {}


@pytest.mark.asyncio
async def test_http_error_becomes_transport_error(config: FlixbusConfig):
    request = httpx.Request("GET", "https://example.com/v1/network.json")
    error_response = httpx.Response(401, request=request)

    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(return_value=error_response)
        mock_client_class.return_value = mock_client

        async with FlixbusClient(config) as client:
            with pytest.raises(TransportError, match="401"):
                await client.fetch_network()


@pytest.mark.asyncio
async def test_timeout_becomes_transport_error(config: FlixbusConfig):
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(side_effect=httpx.ReadTimeout("read timed out"))
        mock_client_class.return_value = mock_client

        async with FlixbusClient(config) as client:
            with pytest.raises(TransportError) as exc:
                await client.fetch("https://example.com/v1/trip/search.json")

    assert isinstance(exc.value.__cause__, httpx.ReadTimeout)


@pytest.mark.asyncio
async def test_bad_station_list_is_malformed(config: FlixbusConfig):
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(return_value=_response(b"not json"))
        mock_client_class.return_value = mock_client

        async with FlixbusClient(config) as client:
            with pytest.raises(MalformedResponse):
                await client.fetch_network()


@pytest.mark.asyncio
async def test_network_handles_extra_fields(config: FlixbusConfig):
    """Extra fields in the response are ignored."""
    document = {
        "stations": [
            {
                "id": 10,
                "name": "Leipzig Hbf",
                "aliases": "",
                "coordinates": {"latitude": 51.3, "longitude": 12.4, "accuracy": 3},
                "city_id": 99,
            }
        ],
        "cities": [],
    }
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(return_value=_response(json.dumps(document).encode()))
        mock_client_class.return_value = mock_client

        async with FlixbusClient(config) as client:
            network = await client.fetch_network()

    assert network.stations[0].full_address is None
