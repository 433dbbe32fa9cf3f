"""Multi-modal journey composition.

One planning request runs these steps in order:

1. Validate coordinates and check the journey cache.
2. Make sure stop data is loaded; on failure return the direct walk only.
3. Build the direct walk; short trips return it alone.
4. Rail: nearest stations at each end, joined by graph shortest paths.
5. Surface: nearest stops at each end, joined by one advisory bus leg.
6. Mixed: rail-then-surface and surface-then-rail through interchanges.
7. Rank, deduplicate, cache and return.

Every candidate in steps 4-6 is built into a ``Candidate`` result. Failed
candidates are logged and dropped without affecting the others.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from hktransit_mcp.data.config import PlannerConfig
from hktransit_mcp.models.transit import (
    Coordinate,
    InterchangePoint,
    Journey,
    JourneyLeg,
    RailStation,
    TransitStop,
    TransportMode,
)
from hktransit_mcp.services.errors import DataUnavailableError, InvalidCoordinateError
from hktransit_mcp.services.geo import distance
from hktransit_mcp.services.interchange_index import InterchangeIndex
from hktransit_mcp.services.journey_cache import JourneyCache
from hktransit_mcp.services.leg_synthesizer import LegSynthesizer
from hktransit_mcp.services.ranking import rank_and_dedup
from hktransit_mcp.services.station_graph import StationGraph
from hktransit_mcp.services.transit_data import TransitDataCache, is_rail, is_surface

logger = logging.getLogger(__name__)

ORIGIN_STOP_ID = "origin"
DESTINATION_STOP_ID = "destination"


class _CandidateError(Exception):
    """Raised inside a candidate builder; never leaves this module."""


@dataclass(frozen=True)
class Candidate:
    """Outcome of building one itinerary: a journey or the reason it failed."""

    label: str
    journey: Journey | None = None
    error: str | None = None

    @classmethod
    def ok(cls, label: str, journey: Journey) -> "Candidate":
        return cls(label=label, journey=journey)

    @classmethod
    def failed(cls, label: str, error: str) -> "Candidate":
        return cls(label=label, error=error)

    @property
    def is_ok(self) -> bool:
        return self.journey is not None


def endpoint_stop(stop_id: str, coordinate: Coordinate) -> TransitStop:
    """Pseudo-stop for the requested origin or destination."""
    names = {
        ORIGIN_STOP_ID: {"en": "Origin", "zh-Hant": "起點", "zh-Hans": "起点"},
        DESTINATION_STOP_ID: {"en": "Destination", "zh-Hant": "目的地", "zh-Hans": "目的地"},
    }
    return TransitStop(
        id=stop_id,
        display_name_by_locale=names.get(stop_id, {"en": stop_id}),
        coordinate=coordinate,
        mode=TransportMode.WALK,
    )


def collect_journeys(candidates: Sequence[Candidate]) -> list[Journey]:
    """Keep successful candidates in order, logging the failed ones."""
    journeys: list[Journey] = []
    for candidate in candidates:
        if candidate.journey is not None:
            journeys.append(candidate.journey)
        else:
            logger.info(f"Skipped candidate {candidate.label}: {candidate.error}")
    return journeys


class JourneyComposer:
    """Plans itineraries between two coordinates.

    Usage:
        composer = JourneyComposer(transit_data, graph, interchanges, legs, cache, config)
        journeys = await composer.plan_journey(origin, destination)
    """

    def __init__(
        self,
        transit_data: TransitDataCache,
        station_graph: StationGraph,
        interchange_index: InterchangeIndex,
        leg_synthesizer: LegSynthesizer,
        journey_cache: JourneyCache,
        config: PlannerConfig,
    ):
        self._transit_data = transit_data
        self._graph = station_graph
        self._interchanges = interchange_index
        self._legs = leg_synthesizer
        self._journey_cache = journey_cache
        self._config = config

    @property
    def journey_cache(self) -> JourneyCache:
        return self._journey_cache

    @property
    def transit_data(self) -> TransitDataCache:
        return self._transit_data

    def clear_journey_cache(self) -> None:
        self._journey_cache.clear()

    async def plan_journey(self, origin: Coordinate, destination: Coordinate) -> list[Journey]:
        """Find itineraries from origin to destination, fastest first.

        Always returns at least the direct walking itinerary. Missing data,
        unreachable stations and failed candidates shrink the result set
        instead of raising.

        Raises:
            InvalidCoordinateError: If either coordinate is non-finite or out
                of range.
        """
        for label, point in (("origin", origin), ("destination", destination)):
            if not point.is_valid():
                raise InvalidCoordinateError(
                    f"Invalid {label} coordinate: ({point.latitude}, {point.longitude})"
                )

        key = self._journey_cache.key_for(origin, destination)
        cached = self._journey_cache.get(key)
        if cached is not None:
            return list(cached.journeys)

        origin_stop = endpoint_stop(ORIGIN_STOP_ID, origin)
        destination_stop = endpoint_stop(DESTINATION_STOP_ID, destination)
        direct_walk = Journey.from_legs([self._legs.walk_leg(origin_stop, destination_stop)])

        try:
            await self._transit_data.ensure_loaded()
        except DataUnavailableError as e:
            logger.warning(f"Falling back to walking directions only: {e}")
            return [direct_walk]

        if direct_walk.total_distance_meters < self._config.short_trip_threshold_meters:
            logger.debug(
                f"Short trip ({direct_walk.total_distance_meters:.0f} m), walking only"
            )
            return [direct_walk]

        candidates = [Candidate.ok("direct walk", direct_walk)]
        candidates.extend(self._rail_candidates(origin_stop, destination_stop))
        candidates.extend(self._surface_candidates(origin_stop, destination_stop))
        candidates.extend(self._mixed_candidates(origin_stop, destination_stop))

        journeys = rank_and_dedup(
            collect_journeys(candidates),
            window_minutes=self._config.dedup_window_minutes,
            max_results=self._config.max_results,
        )
        logger.info(
            f"Planned {len(journeys)} journeys from {len(candidates)} candidates for {key}"
        )
        self._journey_cache.put(key, journeys)
        return journeys

    # Candidate generation

    def _rail_candidates(
        self, origin_stop: TransitStop, destination_stop: TransitStop
    ) -> list[Candidate]:
        radius = self._config.rail_search_radius_meters
        limit = self._config.nearest_candidates
        starts = self._transit_data.nearest(origin_stop.coordinate, radius, limit, is_rail)
        ends = self._transit_data.nearest(destination_stop.coordinate, radius, limit, is_rail)

        candidates: list[Candidate] = []
        for start in starts:
            for end in ends:
                if start.id == end.id:
                    continue
                path = self._graph.shortest_path(start.id, end.id)
                if not path:
                    logger.debug(f"No rail path {start.id} -> {end.id}")
                    continue
                candidates.append(
                    self._build(
                        f"rail {start.id}->{end.id}",
                        self._rail_itinerary,
                        origin_stop,
                        destination_stop,
                        path,
                    )
                )
        return candidates

    def _surface_candidates(
        self, origin_stop: TransitStop, destination_stop: TransitStop
    ) -> list[Candidate]:
        radius = self._config.surface_search_radius_meters
        limit = self._config.nearest_candidates
        starts = self._transit_data.nearest(origin_stop.coordinate, radius, limit, is_surface)
        ends = self._transit_data.nearest(destination_stop.coordinate, radius, limit, is_surface)

        candidates: list[Candidate] = []
        for start in starts:
            for end in ends:
                ride = distance(start.coordinate, end.coordinate)
                if not (
                    self._config.surface_min_leg_meters < ride < self._config.surface_max_leg_meters
                ):
                    continue
                candidates.append(
                    self._build(
                        f"surface {start.id}->{end.id}",
                        self._surface_itinerary,
                        origin_stop,
                        destination_stop,
                        start,
                        end,
                    )
                )
        return candidates

    def _mixed_candidates(
        self, origin_stop: TransitStop, destination_stop: TransitStop
    ) -> list[Candidate]:
        interchanges = self._interchanges.compute_interchanges()
        interchanges = interchanges[: self._config.mixed_interchanges_tried]
        if not interchanges:
            return []

        rail_radius = self._config.rail_search_radius_meters
        surface_radius = self._config.surface_search_radius_meters
        origin_station = self._first(
            self._transit_data.nearest(origin_stop.coordinate, rail_radius, 1, is_rail)
        )
        origin_bus_stop = self._first(
            self._transit_data.nearest(origin_stop.coordinate, surface_radius, 1, is_surface)
        )
        destination_station = self._first(
            self._transit_data.nearest(destination_stop.coordinate, rail_radius, 1, is_rail)
        )
        destination_bus_stop = self._first(
            self._transit_data.nearest(destination_stop.coordinate, surface_radius, 1, is_surface)
        )

        candidates: list[Candidate] = []
        for point in interchanges:
            via = f"{point.rail_station.id}/{point.surface_stop.id}"
            candidates.append(
                self._build(
                    f"rail-then-surface via {via}",
                    self._rail_then_surface,
                    origin_stop,
                    destination_stop,
                    point,
                    origin_station,
                    destination_bus_stop,
                )
            )
            candidates.append(
                self._build(
                    f"surface-then-rail via {via}",
                    self._surface_then_rail,
                    origin_stop,
                    destination_stop,
                    point,
                    origin_bus_stop,
                    destination_station,
                )
            )
        return candidates

    # Itinerary builders. Each returns the ordered legs or raises _CandidateError.

    def _rail_itinerary(
        self, origin_stop: TransitStop, destination_stop: TransitStop, path: list[str]
    ) -> list[JourneyLeg]:
        ride = self._rail_legs(path)
        return [
            self._legs.walk_leg(origin_stop, ride[0].from_stop),
            *ride,
            self._legs.walk_leg(ride[-1].to_stop, destination_stop),
        ]

    def _surface_itinerary(
        self,
        origin_stop: TransitStop,
        destination_stop: TransitStop,
        start: TransitStop,
        end: TransitStop,
    ) -> list[JourneyLeg]:
        return [
            self._legs.walk_leg(origin_stop, start),
            self._legs.advisory_surface_leg(start, end),
            self._legs.walk_leg(end, destination_stop),
        ]

    def _rail_then_surface(
        self,
        origin_stop: TransitStop,
        destination_stop: TransitStop,
        point: InterchangePoint,
        origin_station: TransitStop | None,
        destination_bus_stop: TransitStop | None,
    ) -> list[JourneyLeg]:
        if origin_station is None:
            raise _CandidateError("no rail station near origin")
        if destination_bus_stop is None:
            raise _CandidateError("no surface stop near destination")
        if point.surface_stop.id == destination_bus_stop.id:
            raise _CandidateError("interchange stop is the destination stop")

        ride = self._rail_ride(origin_station.id, point.rail_station.id)
        return [
            self._legs.walk_leg(origin_stop, ride[0].from_stop),
            *ride,
            self._legs.walk_leg(ride[-1].to_stop, point.surface_stop),
            self._legs.advisory_surface_leg(point.surface_stop, destination_bus_stop),
            self._legs.walk_leg(destination_bus_stop, destination_stop),
        ]

    def _surface_then_rail(
        self,
        origin_stop: TransitStop,
        destination_stop: TransitStop,
        point: InterchangePoint,
        origin_bus_stop: TransitStop | None,
        destination_station: TransitStop | None,
    ) -> list[JourneyLeg]:
        if origin_bus_stop is None:
            raise _CandidateError("no surface stop near origin")
        if destination_station is None:
            raise _CandidateError("no rail station near destination")
        if origin_bus_stop.id == point.surface_stop.id:
            raise _CandidateError("origin stop is the interchange stop")

        ride = self._rail_ride(point.rail_station.id, destination_station.id)
        return [
            self._legs.walk_leg(origin_stop, origin_bus_stop),
            self._legs.advisory_surface_leg(origin_bus_stop, point.surface_stop),
            self._legs.walk_leg(point.surface_stop, ride[0].from_stop),
            *ride,
            self._legs.walk_leg(ride[-1].to_stop, destination_stop),
        ]

    def _rail_ride(self, start_id: str, end_id: str) -> list[JourneyLeg]:
        if start_id == end_id:
            raise _CandidateError(f"no rail ride needed at {start_id}")
        path = self._graph.shortest_path(start_id, end_id)
        if not path:
            raise _CandidateError(f"no rail path {start_id} -> {end_id}")
        return self._rail_legs(path)

    def _rail_legs(self, path: list[str]) -> list[JourneyLeg]:
        """One RAIL leg per adjacent station pair along ``path``."""
        stations = [self._station(station_id) for station_id in path]
        legs: list[JourneyLeg] = []
        for current, following in zip(stations, stations[1:]):
            line_code = next(
                (code for code in current.line_codes if code in following.line_codes), None
            )
            if line_code is None:
                raise _CandidateError(f"no shared line between {current.id} and {following.id}")
            legs.append(self._legs.rail_leg(current, following, line_code))
        if not legs:
            raise _CandidateError("rail path has fewer than two stations")
        return legs

    def _station(self, station_id: str) -> RailStation:
        station = self._transit_data.rail_station(station_id)
        if station is None:
            raise _CandidateError(f"station {station_id} missing from transit data")
        return station

    @staticmethod
    def _first(stops: list[TransitStop]) -> TransitStop | None:
        return stops[0] if stops else None

    @staticmethod
    def _build(
        label: str, builder: Callable[..., list[JourneyLeg]], *args: object
    ) -> Candidate:
        try:
            return Candidate.ok(label, Journey.from_legs(builder(*args)))
        except (_CandidateError, ValueError) as e:
            return Candidate.failed(label, str(e))
