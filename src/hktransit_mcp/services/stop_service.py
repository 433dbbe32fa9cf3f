"""Stop search and lookup against the loaded transit snapshot."""

import logging

from hktransit_mcp.matching.models import StopResolutionResponse
from hktransit_mcp.matching.stop_matcher import resolve_stop
from hktransit_mcp.models.responses import NearbyStopsResponse, StopResult
from hktransit_mcp.models.transit import Coordinate, TransportMode
from hktransit_mcp.services.errors import DataUnavailableError
from hktransit_mcp.services.planner_service import get_planner
from hktransit_mcp.services.transit_data import (
    StopFilter,
    all_of,
    company_filter,
    is_rail,
    is_surface,
)

logger = logging.getLogger(__name__)


def build_stop_filter(
    mode: TransportMode | None = None, company: str | None = None
) -> StopFilter | None:
    """Combine optional mode and company restrictions into one predicate."""
    filters: list[StopFilter] = []
    if mode is TransportMode.RAIL:
        filters.append(is_rail)
    elif mode is TransportMode.SURFACE:
        filters.append(is_surface)
    if company:
        filters.append(company_filter(company))
    if not filters:
        return None
    return all_of(*filters)


async def search_stops(
    query: str,
    limit: int = 5,
    min_score: float = 60.0,
    mode: TransportMode | None = None,
    company: str | None = None,
) -> StopResolutionResponse:
    """Fuzzy-search stations and stops by code or localized name.

    A failed data load is reported with success=False and no matches.
    """
    transit_data = get_planner().transit_data
    try:
        snapshot = await transit_data.ensure_loaded()
    except DataUnavailableError as e:
        return StopResolutionResponse(
            query=query, matches=[], resolved=False, success=False, error=str(e)
        )

    stop_filter = build_stop_filter(mode, company)
    stops = snapshot.all_stops
    if stop_filter is not None:
        stops = tuple(stop for stop in stops if stop_filter(stop))

    return resolve_stop(query, stops, limit=limit, min_score=min_score)


async def nearby_stops(
    lat: float,
    lon: float,
    radius_meters: float = 500.0,
    limit: int = 20,
    mode: TransportMode | None = None,
    company: str | None = None,
) -> NearbyStopsResponse:
    """Stops within ``radius_meters`` of a point, closest first."""
    point = Coordinate(latitude=lat, longitude=lon)
    if not point.is_valid():
        return NearbyStopsResponse(
            latitude=lat,
            longitude=lon,
            radius_meters=radius_meters,
            count=0,
            success=False,
            error=f"Invalid coordinate: ({lat}, {lon})",
        )

    transit_data = get_planner().transit_data
    try:
        await transit_data.ensure_loaded()
    except DataUnavailableError as e:
        return NearbyStopsResponse(
            latitude=lat,
            longitude=lon,
            radius_meters=radius_meters,
            count=0,
            success=False,
            error=str(e),
        )

    found = transit_data.nearest_with_distance(
        point, radius_meters, limit, build_stop_filter(mode, company)
    )
    stops = [StopResult.from_stop(stop, round(meters, 1)) for stop, meters in found]
    return NearbyStopsResponse(
        latitude=lat,
        longitude=lon,
        radius_meters=radius_meters,
        stops=stops,
        count=len(stops),
        success=True,
    )
