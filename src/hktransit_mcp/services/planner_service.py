"""Process-wide journey planner.

Wires the transit data cache, rail graph, interchange index, leg synthesizer
and journey cache into one JourneyComposer, created lazily on first use.
"""

import logging
import random
from functools import partial

from hktransit_mcp.data.config import PlannerConfig, get_planner_config
from hktransit_mcp.data.surface_source import fetch_all_surface_stops
from hktransit_mcp.data.rail_source import (
    fetch_all_rail_stations,
    load_interchange_allowlist,
    load_mtr_lines,
)
from hktransit_mcp.matching.stop_matcher import resolve_stop
from hktransit_mcp.models.responses import PlanJourneyResponse, StopResolutionInfo
from hktransit_mcp.models.transit import Coordinate, Journey, TransitStop
from hktransit_mcp.services.errors import DataUnavailableError, InvalidCoordinateError
from hktransit_mcp.services.interchange_index import InterchangeIndex
from hktransit_mcp.services.journey_cache import JourneyCache
from hktransit_mcp.services.journey_planner import JourneyComposer
from hktransit_mcp.services.leg_synthesizer import LegSynthesizer
from hktransit_mcp.services.station_graph import StationGraph
from hktransit_mcp.services.transit_data import RailSource, SurfaceSource, TransitDataCache

logger = logging.getLogger(__name__)

# Module-level planner (lazy-initialized)
_planner: JourneyComposer | None = None


def build_planner(
    config: PlannerConfig | None = None,
    fetch_rail: RailSource | None = None,
    fetch_surface: SurfaceSource | None = None,
    station_graph: StationGraph | None = None,
) -> JourneyComposer:
    """Assemble a JourneyComposer from configuration.

    Args:
        config: Planner configuration (defaults to environment settings).
        fetch_rail: Rail station source (defaults to the packaged MTR table).
        fetch_surface: Surface stop source (defaults to every configured operator).
        station_graph: Rail topology (defaults to the packaged MTR lines).
    """
    config = config or get_planner_config()

    transit_data = TransitDataCache(
        fetch_rail or fetch_all_rail_stations,
        fetch_surface or partial(fetch_all_surface_stops, config),
        ttl=config.transit_data_ttl_seconds,
    )
    graph = station_graph
    if graph is None:
        graph = StationGraph.from_lines(load_mtr_lines())
    interchanges = InterchangeIndex(
        transit_data,
        load_interchange_allowlist(config.interchange_allowlist_path),
        walk_radius_meters=config.interchange_walk_radius_meters,
        min_interchanges=config.min_interchanges,
        max_interchanges=config.max_interchanges,
    )
    journey_cache = JourneyCache(
        ttl=config.journey_cache_ttl_seconds,
        key_precision=config.cache_key_precision,
    )
    logger.debug(f"Built journey planner with {len(graph)} rail stations in the graph")
    return JourneyComposer(
        transit_data,
        graph,
        interchanges,
        LegSynthesizer(random.Random(config.route_seed)),
        journey_cache,
        config,
    )


def get_planner() -> JourneyComposer:
    """Get or create the journey planner singleton."""
    global _planner
    if _planner is None:
        _planner = build_planner()
    return _planner


async def plan_journey(origin: Coordinate, destination: Coordinate) -> list[Journey]:
    """Plan journeys with the shared planner. See JourneyComposer.plan_journey()."""
    return await get_planner().plan_journey(origin, destination)


def clear_journey_cache() -> int:
    """Clear planned journeys.

    Useful for testing or forcing fresh plans on next request.

    Returns:
        Number of entries dropped.
    """
    if _planner is None:
        return 0
    cleared = len(_planner.journey_cache)
    _planner.clear_journey_cache()
    logger.info(f"Cleared {cleared} cached journey plans")
    return cleared


def reset_service() -> None:
    """Reset the service state completely.

    Drops the planner and its caches. Useful for testing.
    """
    global _planner
    _planner = None
    # Clear the lru_cache on get_planner_config so it re-reads .env/environment
    if hasattr(get_planner_config, "cache_clear"):
        get_planner_config.cache_clear()


def _journey_response(
    origin: Coordinate, destination: Coordinate, journeys: list[Journey], **extra
) -> PlanJourneyResponse:
    return PlanJourneyResponse(
        origin=origin,
        destination=destination,
        journeys=journeys,
        advisory_routes=any(leg.route_is_advisory for j in journeys for leg in j.legs),
        count=len(journeys),
        success=True,
        **extra,
    )


async def plan_journey_between(
    origin_lat: float, origin_lon: float, destination_lat: float, destination_lon: float
) -> PlanJourneyResponse:
    """Plan journeys between two coordinates, reporting bad input in the response."""
    origin = Coordinate(latitude=origin_lat, longitude=origin_lon)
    destination = Coordinate(latitude=destination_lat, longitude=destination_lon)
    try:
        journeys = await plan_journey(origin, destination)
    except InvalidCoordinateError as e:
        return PlanJourneyResponse(
            origin=origin, destination=destination, success=False, error=str(e)
        )
    return _journey_response(origin, destination, journeys)


def _resolve_endpoint(
    query: str, stops: tuple[TransitStop, ...]
) -> tuple[StopResolutionInfo, TransitStop | None]:
    result = resolve_stop(query, stops, limit=1)
    if result.best_match is None:
        info = StopResolutionInfo(query=query, resolved=False, error="No matching stop found")
        return info, None

    best = result.best_match
    info = StopResolutionInfo(
        query=query,
        resolved_stop_id=best.stop_id,
        resolved_stop_name=best.stop_name,
        confidence=best.confidence.value,
        resolved=result.resolved,
    )
    stop = next(stop for stop in stops if stop.id == best.stop_id)
    return info, stop


async def plan_journey_by_name(origin: str, destination: str) -> PlanJourneyResponse:
    """Resolve two stop names or codes, then plan between their coordinates."""
    planner = get_planner()
    try:
        snapshot = await planner.transit_data.ensure_loaded()
    except DataUnavailableError as e:
        return PlanJourneyResponse(success=False, error=str(e))

    origin_info, origin_stop = _resolve_endpoint(origin, snapshot.all_stops)
    destination_info, destination_stop = _resolve_endpoint(destination, snapshot.all_stops)
    if (
        origin_stop is None
        or destination_stop is None
        or not origin_info.resolved
        or not destination_info.resolved
    ):
        return PlanJourneyResponse(
            origin_resolution=origin_info,
            destination_resolution=destination_info,
            success=False,
            error="Could not resolve origin or destination stop",
        )

    journeys = await planner.plan_journey(origin_stop.coordinate, destination_stop.coordinate)
    return _journey_response(
        origin_stop.coordinate,
        destination_stop.coordinate,
        journeys,
        origin_resolution=origin_info,
        destination_resolution=destination_info,
    )
