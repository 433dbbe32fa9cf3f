"""Tests for the shared planner and its response helpers."""

from unittest.mock import AsyncMock

import pytest
from conftest import LINES, RAIL_STATIONS, SURFACE_STOPS

from hktransit_mcp.data.config import PlannerConfig
from hktransit_mcp.services import planner_service
from hktransit_mcp.services.journey_planner import JourneyComposer
from hktransit_mcp.services.station_graph import StationGraph


@pytest.fixture(autouse=True)
def reset_service():
    """Reset the service state before and after each test."""
    planner_service.reset_service()
    yield
    planner_service.reset_service()


@pytest.fixture
def shared_planner(monkeypatch, composer: JourneyComposer) -> JourneyComposer:
    monkeypatch.setattr(planner_service, "_planner", composer)
    return composer


class TestBuildPlanner:
    def test_defaults_use_packaged_network(self):
        planner = planner_service.build_planner(PlannerConfig(route_seed=1))

        assert isinstance(planner, JourneyComposer)
        assert planner.transit_data.is_loaded is False

    @pytest.mark.asyncio
    async def test_injected_sources_are_used(self):
        fetch_rail = AsyncMock(return_value=list(RAIL_STATIONS))
        fetch_surface = AsyncMock(return_value=list(SURFACE_STOPS))

        planner = planner_service.build_planner(
            PlannerConfig(),
            fetch_rail=fetch_rail,
            fetch_surface=fetch_surface,
            station_graph=StationGraph.from_lines(LINES),
        )
        response = await planner.transit_data.ensure_loaded()

        assert len(response.rail_stations) == len(RAIL_STATIONS)
        fetch_surface.assert_awaited_once()

    def test_get_planner_is_singleton(self, monkeypatch):
        monkeypatch.setattr(planner_service, "build_planner", lambda: object())

        assert planner_service.get_planner() is planner_service.get_planner()


class TestPlanJourneyBetween:
    @pytest.mark.asyncio
    async def test_success(self, shared_planner):
        response = await planner_service.plan_journey_between(22.2995, 114.170, 22.3310, 114.1705)

        assert response.success
        assert response.count == len(response.journeys) > 0
        assert response.advisory_routes is True
        assert response.origin.latitude == 22.2995

    @pytest.mark.asyncio
    async def test_invalid_coordinate_reported(self, shared_planner):
        response = await planner_service.plan_journey_between(95.0, 114.170, 22.3310, 114.1705)

        assert not response.success
        assert "origin" in response.error
        assert response.journeys == []

    @pytest.mark.asyncio
    async def test_walk_only_has_no_advisory_routes(self, shared_planner):
        response = await planner_service.plan_journey_between(22.2995, 114.170, 22.3025, 114.170)

        assert response.count == 1
        assert response.advisory_routes is False


class TestPlanJourneyByName:
    @pytest.mark.asyncio
    async def test_resolves_ids_and_plans(self, shared_planner):
        response = await planner_service.plan_journey_by_name("R1", "R4")

        assert response.success
        assert response.origin_resolution.resolved_stop_id == "R1"
        assert response.destination_resolution.confidence == "exact"
        assert response.journeys[0].legs[0].from_stop.coordinate == RAIL_STATIONS[0].coordinate

    @pytest.mark.asyncio
    async def test_resolves_names(self, shared_planner):
        response = await planner_service.plan_journey_by_name(
            "Harbour Road / Pier Street", "Hillside Estate Bus Terminus"
        )

        assert response.success
        assert response.origin_resolution.resolved_stop_id == "S1"
        assert response.destination_resolution.resolved_stop_id == "S7"

    @pytest.mark.asyncio
    async def test_unresolved_name(self, shared_planner):
        response = await planner_service.plan_journey_by_name("R1", "xqzvwk")

        assert not response.success
        assert response.error == "Could not resolve origin or destination stop"
        assert response.destination_resolution.resolved is False
        assert response.journeys == []

    @pytest.mark.asyncio
    async def test_data_unavailable(self, monkeypatch, make_composer):
        composer = make_composer(fetch_rail=AsyncMock(side_effect=RuntimeError("down")))
        monkeypatch.setattr(planner_service, "_planner", composer)

        response = await planner_service.plan_journey_by_name("R1", "R4")

        assert not response.success
        assert "down" in response.error


class TestClearJourneyCache:
    def test_without_planner(self):
        assert planner_service.clear_journey_cache() == 0

    @pytest.mark.asyncio
    async def test_reports_cleared_entries(self, shared_planner):
        await planner_service.plan_journey_between(22.2995, 114.170, 22.3310, 114.1705)
        await planner_service.plan_journey_between(22.3310, 114.1705, 22.2995, 114.170)

        assert planner_service.clear_journey_cache() == 2
        assert len(shared_planner.journey_cache) == 0
