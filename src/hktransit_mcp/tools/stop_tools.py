"""MCP tools for searching stations and stops."""

from hktransit_mcp.app import mcp
from hktransit_mcp.matching.models import StopResolutionResponse
from hktransit_mcp.models.responses import NearbyStopsResponse
from hktransit_mcp.models.transit import TransportMode
from hktransit_mcp.services.stop_service import nearby_stops as _nearby_stops
from hktransit_mcp.services.stop_service import search_stops as _search_stops


@mcp.tool()
async def search_stops(
    query: str,
    mode: TransportMode | None = None,
    company: str | None = None,
    limit: int = 5,
    min_score: float = 60.0,
) -> StopResolutionResponse:
    """Find MTR stations, bus and minibus stops by code or name using fuzzy matching.

    Examples:
        search_stops("ADM")  # Exact station code -> confidence=EXACT
        search_stops("Tsim Sha Tsui")
        search_stops("旺角", mode="RAIL")

    Args:
        query: Station code, stop id, or name in English or Chinese.
        mode: Restrict to RAIL or SURFACE stops.
        company: Restrict to one operator (e.g., "MTR", "KMB", "GMB").
        limit: Maximum number of matches to return (default 5, max 20).
        min_score: Minimum match score 0-100 (default 60).

    Returns:
        StopResolutionResponse with:
        - matches: List of matched stops with scores and confidence
        - best_match: Top match (always set when matches exist)
        - resolved: True if best_match has EXACT or HIGH confidence (safe to auto-use)
        - success/error: success=False with an error message if stop data is unavailable
    """
    if limit < 1:
        limit = 1
    elif limit > 20:
        limit = 20

    return await _search_stops(query, limit=limit, min_score=min_score, mode=mode, company=company)


@mcp.tool()
async def nearby_stops(
    lat: float,
    lon: float,
    radius_meters: int = 500,
    mode: TransportMode | None = None,
    company: str | None = None,
    limit: int = 20,
) -> NearbyStopsResponse:
    """List MTR stations, bus and minibus stops near a coordinate, closest first.

    Args:
        lat: Latitude in decimal degrees.
        lon: Longitude in decimal degrees.
        radius_meters: Search radius (default 500m, max 5000m).
        mode: Restrict to RAIL or SURFACE stops.
        company: Restrict to one operator (e.g., "MTR", "KMB", "GMB").
        limit: Maximum number of results to return (default 20, max 100).

    Returns:
        NearbyStopsResponse with stops sorted by distance.
    """
    # Validate limit
    if limit < 1:
        limit = 1
    elif limit > 100:
        limit = 100

    # Validate radius
    if radius_meters < 1:
        radius_meters = 1
    elif radius_meters > 5000:
        radius_meters = 5000

    return await _nearby_stops(
        lat, lon, radius_meters=radius_meters, limit=limit, mode=mode, company=company
    )
