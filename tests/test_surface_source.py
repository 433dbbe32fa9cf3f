"""Tests for merging surface stops across operators."""

from unittest.mock import AsyncMock, patch

import pytest
from conftest import make_stop

from hktransit_mcp.data.config import PlannerConfig
from hktransit_mcp.data.gmb_client import GMBClient
from hktransit_mcp.data.kmb_client import KMBClient
from hktransit_mcp.data.surface_source import fetch_all_surface_stops
from hktransit_mcp.models.transit import Coordinate, TransitStop, TransportMode
from hktransit_mcp.services.errors import DataUnavailableError
from hktransit_mcp.services.transit_data import TransitDataCache


def make_gmb_stop(stop_id: str, lat: float, lon: float) -> TransitStop:
    return TransitStop(
        id=stop_id,
        display_name_by_locale={"en": f"Minibus {stop_id}"},
        coordinate=Coordinate(latitude=lat, longitude=lon),
        mode=TransportMode.SURFACE,
        company="GMB",
    )


KMB_STOPS = [make_stop("K1", 22.30, 114.17), make_stop("K2", 22.31, 114.17)]
GMB_STOPS = [make_gmb_stop("20001479", 22.3175, 114.1713)]


@pytest.fixture
def config() -> PlannerConfig:
    return PlannerConfig(HKT_SURFACE_COMPANIES=["KMB", "GMB"])


@pytest.mark.asyncio
async def test_operators_are_merged_in_configured_order(config: PlannerConfig):
    with (
        patch.object(KMBClient, "fetch_all_stops", AsyncMock(return_value=KMB_STOPS)),
        patch.object(GMBClient, "fetch_all_stops", AsyncMock(return_value=GMB_STOPS)),
    ):
        stops = await fetch_all_surface_stops(config)

    assert [(stop.company, stop.id) for stop in stops] == [
        ("KMB", "K1"),
        ("KMB", "K2"),
        ("GMB", "20001479"),
    ]


@pytest.mark.asyncio
async def test_repeated_stops_are_listed_once(config: PlannerConfig):
    with (
        patch.object(KMBClient, "fetch_all_stops", AsyncMock(return_value=KMB_STOPS * 2)),
        patch.object(GMBClient, "fetch_all_stops", AsyncMock(return_value=[])),
    ):
        stops = await fetch_all_surface_stops(config)

    assert [stop.id for stop in stops] == ["K1", "K2"]


@pytest.mark.asyncio
async def test_only_configured_operators_are_fetched():
    config = PlannerConfig(HKT_SURFACE_COMPANIES=["kmb"])
    gmb_fetch = AsyncMock(return_value=GMB_STOPS)

    with (
        patch.object(KMBClient, "fetch_all_stops", AsyncMock(return_value=KMB_STOPS)),
        patch.object(GMBClient, "fetch_all_stops", gmb_fetch),
    ):
        stops = await fetch_all_surface_stops(config)

    assert {stop.company for stop in stops} == {"KMB"}
    gmb_fetch.assert_not_awaited()


@pytest.mark.asyncio
async def test_unknown_operator_is_rejected():
    config = PlannerConfig(HKT_SURFACE_COMPANIES=["KMB", "NLB"])

    with pytest.raises(ValueError, match="NLB"):
        await fetch_all_surface_stops(config)


@pytest.mark.asyncio
async def test_one_operator_failing_fails_the_fetch(config: PlannerConfig):
    with (
        patch.object(KMBClient, "fetch_all_stops", AsyncMock(return_value=KMB_STOPS)),
        patch.object(
            GMBClient, "fetch_all_stops", AsyncMock(side_effect=ConnectionError("GMB down"))
        ),
        pytest.raises(ConnectionError, match="GMB down"),
    ):
        await fetch_all_surface_stops(config)


@pytest.mark.asyncio
async def test_one_operator_failing_commits_no_snapshot(config: PlannerConfig, fetch_rail, clock):
    with (
        patch.object(KMBClient, "fetch_all_stops", AsyncMock(return_value=KMB_STOPS)),
        patch.object(
            GMBClient, "fetch_all_stops", AsyncMock(side_effect=ConnectionError("GMB down"))
        ),
    ):
        transit_data = TransitDataCache(
            fetch_rail, lambda: fetch_all_surface_stops(config), clock=clock
        )
        with pytest.raises(DataUnavailableError, match="GMB down"):
            await transit_data.ensure_loaded()

    assert transit_data.is_loaded is False
