from pydantic import BaseModel, Field

from hktransit_mcp.models.transit import Coordinate, Journey, TransitStop, TransportMode


class StopResult(BaseModel):
    stop_id: str
    stop_name: str
    names: dict[str, str] = Field(
        default_factory=dict, description="Locale code (en, zh-Hant, zh-Hans) -> name"
    )
    mode: TransportMode
    company: str = ""
    latitude: float
    longitude: float
    line_codes: list[str] = Field(
        default_factory=list, description="Rail lines serving the station (rail only)"
    )
    distance_meters: float | None = Field(
        default=None, description="Distance from search coordinates (nearby search only)"
    )

    @classmethod
    def from_stop(cls, stop: TransitStop, distance_meters: float | None = None) -> "StopResult":
        return cls(
            stop_id=stop.id,
            stop_name=stop.name,
            names=dict(stop.display_name_by_locale),
            mode=stop.mode,
            company=stop.company,
            latitude=stop.coordinate.latitude,
            longitude=stop.coordinate.longitude,
            line_codes=list(getattr(stop, "line_codes", ())),
            distance_meters=distance_meters,
        )


class NearbyStopsResponse(BaseModel):
    """Response from nearby_stops tool."""

    latitude: float
    longitude: float
    radius_meters: float
    stops: list[StopResult] = Field(default_factory=list)
    count: int = Field(description="Number of stops returned")
    success: bool
    error: str | None = None


class StopResolutionInfo(BaseModel):
    """How a stop query was resolved."""

    query: str = Field(description="Original user query")
    resolved_stop_id: str | None = None
    resolved_stop_name: str | None = None
    confidence: str | None = Field(default=None, description="exact, high, medium, low")
    resolved: bool
    error: str | None = None


class PlanJourneyResponse(BaseModel):
    """Response from plan_journey and plan_journey_by_name tools."""

    origin: Coordinate | None = None
    destination: Coordinate | None = None

    # Only set when endpoints were given by name
    origin_resolution: StopResolutionInfo | None = None
    destination_resolution: StopResolutionInfo | None = None

    journeys: list[Journey] = Field(
        default_factory=list, description="Itineraries, fastest first"
    )
    advisory_routes: bool = Field(
        default=False,
        description="True if any surface route number is an approximation, not a timetable",
    )

    count: int = 0
    success: bool
    error: str | None = None


class ClearCacheResponse(BaseModel):
    """Response from clear_journey_cache tool."""

    cleared_entries: int = Field(description="Number of cached plans dropped")
    success: bool = True
