"""Shared fixtures: a small synthetic rail and bus network.

All points sit on longitude 114.17 unless noted; 0.01 degrees of latitude
is about 1.1 km.

    R1 (22.30) - R2 (22.31) - R3 (22.32) - R4 (22.33)     line L1
                               R3 - R5 (22.32, 114.18)      line L2
    R9 (22.40) has no track at all

Bus stops: S1 beside R1 (44 m), S2 beside R2 (206 m, east), S4 beside R4
(67 m) and S7 at (22.33, 114.19) with no station within walking range.
"""

import random
from collections.abc import Callable, Mapping, Sequence
from unittest.mock import AsyncMock

import pytest

from hktransit_mcp.data.config import PlannerConfig
from hktransit_mcp.models.transit import Coordinate, RailStation, TransitStop, TransportMode
from hktransit_mcp.services.interchange_index import InterchangeIndex
from hktransit_mcp.services.journey_cache import JourneyCache
from hktransit_mcp.services.journey_planner import JourneyComposer
from hktransit_mcp.services.leg_synthesizer import LegSynthesizer
from hktransit_mcp.services.station_graph import StationGraph
from hktransit_mcp.services.transit_data import TransitDataCache


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_station(station_id: str, lat: float, lon: float, *line_codes: str) -> RailStation:
    return RailStation(
        id=station_id,
        display_name_by_locale={"en": f"Station {station_id}"},
        coordinate=Coordinate(latitude=lat, longitude=lon),
        company="MTR",
        line_codes=line_codes,
    )


def make_stop(stop_id: str, lat: float, lon: float, name: str | None = None) -> TransitStop:
    return TransitStop(
        id=stop_id,
        display_name_by_locale={"en": name or f"Stop {stop_id}"},
        coordinate=Coordinate(latitude=lat, longitude=lon),
        mode=TransportMode.SURFACE,
        company="KMB",
    )


RAIL_STATIONS = [
    make_station("R1", 22.300, 114.170, "L1"),
    make_station("R2", 22.310, 114.170, "L1"),
    make_station("R3", 22.320, 114.170, "L1", "L2"),
    make_station("R4", 22.330, 114.170, "L1"),
    make_station("R5", 22.320, 114.180, "L2"),
    make_station("R9", 22.400, 114.170, "L9"),
]

SURFACE_STOPS = [
    make_stop("S1", 22.3004, 114.170, "Harbour Road / Pier Street"),
    make_stop("S2", 22.310, 114.172, "Temple Street Market"),
    make_stop("S4", 22.3306, 114.170, "Nathan Road North"),
    make_stop("S7", 22.330, 114.190, "Hillside Estate Bus Terminus"),
]

LINES = {"L1": [["R1", "R2", "R3", "R4"]], "L2": [["R3", "R5"]]}


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def planner_config() -> PlannerConfig:
    return PlannerConfig(route_seed=7)


@pytest.fixture
def station_graph() -> StationGraph:
    return StationGraph.from_lines(LINES)


@pytest.fixture
def fetch_rail() -> AsyncMock:
    return AsyncMock(return_value=list(RAIL_STATIONS))


@pytest.fixture
def fetch_surface() -> AsyncMock:
    return AsyncMock(return_value=list(SURFACE_STOPS))


@pytest.fixture
def transit_data(fetch_rail: AsyncMock, fetch_surface: AsyncMock, clock: FakeClock):
    return TransitDataCache(fetch_rail, fetch_surface, clock=clock)


@pytest.fixture
async def loaded_transit_data(transit_data: TransitDataCache) -> TransitDataCache:
    await transit_data.ensure_loaded()
    return transit_data


@pytest.fixture
def make_composer(
    clock: FakeClock, planner_config: PlannerConfig, station_graph: StationGraph
) -> Callable[..., JourneyComposer]:
    """Factory for composers over custom data; defaults to the shared network."""

    def _make(
        rail: Sequence[RailStation] | None = None,
        surface: Sequence[TransitStop] | None = None,
        graph: StationGraph | None = None,
        allowlist: Mapping[str, Sequence[str]] | None = None,
        fetch_rail: AsyncMock | None = None,
        fetch_surface: AsyncMock | None = None,
    ) -> JourneyComposer:
        transit_data = TransitDataCache(
            fetch_rail or AsyncMock(return_value=list(RAIL_STATIONS if rail is None else rail)),
            fetch_surface
            or AsyncMock(return_value=list(SURFACE_STOPS if surface is None else surface)),
            clock=clock,
        )
        return JourneyComposer(
            transit_data,
            station_graph if graph is None else graph,
            InterchangeIndex(transit_data, allowlist or {}),
            LegSynthesizer(random.Random(7)),
            JourneyCache(clock=clock),
            planner_config,
        )

    return _make


@pytest.fixture
def composer(make_composer) -> JourneyComposer:
    return make_composer()
