"""Tests for the green minibus stop list client."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from hktransit_mcp.data.config import PlannerConfig
from hktransit_mcp.data.gmb_client import GMBClient
from hktransit_mcp.models.transit import TransportMode


def create_stop_list_response() -> dict:
    """Create a sample /stop response for testing."""
    return {
        "type": "StopList",
        "version": "1.0",
        "generated_timestamp": "2024-01-01T05:00:00+08:00",
        "data": [
            {
                "stop_id": 20001479,
                "name_en": "Sai Yee Street",
                "name_tc": "洗衣街",
                "name_sc": "洗衣街",
                "coordinates": {"wgs84": {"latitude": 22.3175, "longitude": 114.1713}},
            },
            {
                "stop_id": 20003352,
                "name_tc": "旺角站",
                "coordinates": {"wgs84": {"latitude": 22.3189, "longitude": 114.1701}},
            },
            {
                "stop_id": 20009999,
                "name_en": "Bad Geocode",
                "coordinates": {"wgs84": {"latitude": 0.0, "longitude": 0.0}},
            },
        ],
    }


@pytest.fixture
def config() -> PlannerConfig:
    """Create a test config."""
    return PlannerConfig(gmb_stop_url="https://example.com/gmb/stop", HKT_HTTP_TIMEOUT=5)


@pytest.mark.asyncio
async def test_fetch_all_stops_parses_json(config: PlannerConfig):
    """Test parsing the stop list into surface stops."""
    mock_response = MagicMock()
    mock_response.json.return_value = create_stop_list_response()

    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(return_value=mock_response)
        mock_client_class.return_value = mock_client

        async with GMBClient(config) as client:
            stops = await client.fetch_all_stops()

    mock_client.get.assert_awaited_once_with("https://example.com/gmb/stop")

    # Stop outside Hong Kong is dropped
    assert [stop.id for stop in stops] == ["20001479", "20003352"]

    first = stops[0]
    assert first.mode is TransportMode.SURFACE
    assert first.company == "GMB"
    assert first.coordinate.latitude == pytest.approx(22.3175)
    assert first.display_name_by_locale == {
        "en": "Sai Yee Street",
        "zh-Hant": "洗衣街",
        "zh-Hans": "洗衣街",
    }

    # Missing English name falls back to the Chinese one
    assert stops[1].display_name_by_locale == {"en": "旺角站", "zh-Hant": "旺角站"}


@pytest.mark.asyncio
async def test_client_requires_async_context(config: PlannerConfig):
    """Test that client methods fail without async context."""
    client = GMBClient(config)

    with pytest.raises(RuntimeError, match="Client not initialized"):
        await client.fetch_all_stops()


@pytest.mark.asyncio
async def test_client_closed_on_exit(config: PlannerConfig):
    """Test that the HTTP client is closed when the context exits."""
    mock_response = MagicMock()
    mock_response.json.return_value = {"data": []}

    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(return_value=mock_response)
        mock_client_class.return_value = mock_client

        async with GMBClient(config) as client:
            assert await client.fetch_all_stops() == []

        mock_client.aclose.assert_awaited_once()
        assert mock_client_class.call_args.kwargs["timeout"] == 5
