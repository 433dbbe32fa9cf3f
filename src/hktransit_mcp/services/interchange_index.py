"""Discovery of rail/surface transfer points."""

import logging
import re
from collections.abc import Mapping, Sequence

from hktransit_mcp.matching.normalizers import normalize_text
from hktransit_mcp.models.transit import InterchangePoint, RailStation, TransitStop
from hktransit_mcp.services.geo import distance
from hktransit_mcp.services.transit_data import TransitDataCache, TransitSnapshot, is_surface

logger = logging.getLogger(__name__)

NON_NAME_CHARACTERS = re.compile(r"[\W_]+")


def name_key(name: str) -> str:
    """Collapse a stop name for containment checks.

    Example: "Mong Kok MTR Stn (Argyle St)" -> "mongkokstationargylestreet"
    """
    tokens = NON_NAME_CHARACTERS.split(normalize_text(name))
    return "".join(token for token in tokens if token and token != "mtr")


class InterchangeIndex:
    """Ranked list of places to switch between rail and surface transit.

    Curated pairs come first. An allow-list entry is either a surface stop
    id or a stop name phrase (English or Chinese); a phrase selects every
    surface stop within walking radius of the station whose name contains
    it. When there are too few curated pairs, every rail station contributes
    its closest surface stop within walking radius. Results are memoized per
    transit data snapshot.
    """

    def __init__(
        self,
        transit_data: TransitDataCache,
        allowlist: Mapping[str, Sequence[str]],
        walk_radius_meters: float = 300.0,
        min_interchanges: int = 5,
        max_interchanges: int = 10,
    ):
        self._transit_data = transit_data
        self._allowlist = {station: tuple(stops) for station, stops in allowlist.items()}
        self._walk_radius_meters = walk_radius_meters
        self._min_interchanges = min_interchanges
        self._max_interchanges = max_interchanges
        self._computed_for: TransitSnapshot | None = None
        self._computed: list[InterchangePoint] = []

    def compute_interchanges(self) -> list[InterchangePoint]:
        """Interchanges sorted by walking distance, capped at max_interchanges.

        Raises:
            TransitDataNotLoadedError: If transit data has not been loaded.
        """
        snapshot = self._transit_data.snapshot
        if self._computed_for is snapshot:
            return list(self._computed)

        points: list[InterchangePoint] = []
        seen: set[tuple[str, str]] = set()

        for station_id, stop_ids in self._allowlist.items():
            station = snapshot.rail_by_id.get(station_id)
            if station is None:
                continue
            for entry in stop_ids:
                stop = snapshot.surface_by_id.get(entry)
                if stop is not None:
                    meters = distance(station.coordinate, stop.coordinate)
                    self._add(points, seen, station, stop, meters)
                    continue
                for stop, meters in self._stops_named(snapshot, station, entry):
                    self._add(points, seen, station, stop, meters)

        curated = len(points)
        if curated < self._min_interchanges:
            for station in snapshot.rail_stations:
                closest = self._transit_data.nearest_with_distance(
                    station.coordinate, self._walk_radius_meters, 1, is_surface
                )
                if closest:
                    stop, meters = closest[0]
                    self._add(points, seen, station, stop, meters)

        points.sort(key=lambda point: point.walk_distance_meters)
        points = points[: self._max_interchanges]
        logger.debug(f"Computed {len(points)} interchanges ({curated} curated)")

        self._computed_for = snapshot
        self._computed = points
        return list(points)

    def _stops_named(
        self, snapshot: TransitSnapshot, station: RailStation, phrase: str
    ) -> list[tuple[TransitStop, float]]:
        wanted = name_key(phrase)
        if not wanted:
            return []
        nearby = self._transit_data.nearest_with_distance(
            station.coordinate,
            self._walk_radius_meters,
            len(snapshot.surface_stops),
            is_surface,
        )
        return [
            (stop, meters)
            for stop, meters in nearby
            if any(wanted in name_key(name) for name in stop.display_name_by_locale.values())
        ]

    @staticmethod
    def _add(
        points: list[InterchangePoint],
        seen: set[tuple[str, str]],
        station: RailStation,
        stop: TransitStop,
        meters: float,
    ) -> None:
        key = (station.id, stop.id)
        if key in seen:
            return
        seen.add(key)
        points.append(
            InterchangePoint(rail_station=station, surface_stop=stop, walk_distance_meters=meters)
        )
