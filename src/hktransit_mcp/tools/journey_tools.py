"""MCP tools for journey planning."""

from hktransit_mcp.app import mcp
from hktransit_mcp.models.responses import ClearCacheResponse, PlanJourneyResponse
from hktransit_mcp.services.planner_service import (
    clear_journey_cache as _clear_journey_cache,
)
from hktransit_mcp.services.planner_service import plan_journey_between
from hktransit_mcp.services.planner_service import (
    plan_journey_by_name as _plan_journey_by_name,
)


@mcp.tool()
async def plan_journey(
    origin_lat: float,
    origin_lon: float,
    destination_lat: float,
    destination_lon: float,
) -> PlanJourneyResponse:
    """Plan a journey across Hong Kong combining walking, MTR, buses and minibuses.

    Returns up to five itineraries, fastest first. Trips under about 600 m
    return a single walking itinerary. If stop data cannot be loaded, the
    walking itinerary is still returned.

    Durations are estimates from average speeds, not timetables. Bus route
    numbers flagged with route_is_advisory=true are approximations.

    Examples:
        plan_journey(22.2829, 114.1582, 22.3193, 114.1694)  # Central -> Mong Kok

    Args:
        origin_lat: Origin latitude in decimal degrees.
        origin_lon: Origin longitude in decimal degrees.
        destination_lat: Destination latitude in decimal degrees.
        destination_lon: Destination longitude in decimal degrees.

    Returns:
        PlanJourneyResponse with journeys sorted by total duration.
    """
    return await plan_journey_between(origin_lat, origin_lon, destination_lat, destination_lon)


@mcp.tool()
async def plan_journey_by_name(origin: str, destination: str) -> PlanJourneyResponse:
    """Plan a journey between two named stations or stops.

    Names are fuzzy-matched in English or Chinese; MTR station codes
    (e.g., "ADM") and bus or minibus stop ids match exactly.

    Args:
        origin: Origin station/stop - code, id, or name (e.g., "Central", "中環")
        destination: Destination station/stop - same format as origin

    Returns:
        PlanJourneyResponse including how each name was resolved.
    """
    return await _plan_journey_by_name(origin, destination)


@mcp.tool()
def clear_journey_cache() -> ClearCacheResponse:
    """Drop all cached journey plans so the next request is planned fresh."""
    return ClearCacheResponse(cleared_entries=_clear_journey_cache())
