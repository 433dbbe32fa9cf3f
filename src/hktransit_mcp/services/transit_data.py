"""Lazily loaded, shared snapshot of every known rail station and surface stop.

Loading is all-or-nothing: both collaborators must succeed before the
snapshot is committed. Concurrent first callers join the same in-flight load.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field

from hktransit_mcp.data.cache import SnapshotCache
from hktransit_mcp.models.transit import Coordinate, RailStation, TransitStop, TransportMode
from hktransit_mcp.services.errors import DataUnavailableError, TransitDataNotLoadedError
from hktransit_mcp.services.geo import distance

logger = logging.getLogger(__name__)

RailSource = Callable[[], Awaitable[Sequence[RailStation]]]
SurfaceSource = Callable[[], Awaitable[Sequence[TransitStop]]]
StopFilter = Callable[[TransitStop], bool]


def is_rail(stop: TransitStop) -> bool:
    return stop.mode is TransportMode.RAIL


def is_surface(stop: TransitStop) -> bool:
    return stop.mode is TransportMode.SURFACE


def company_filter(company: str) -> StopFilter:
    """Predicate matching stops operated by ``company`` (case-insensitive)."""
    wanted = company.upper()
    return lambda stop: stop.company.upper() == wanted


def all_of(*filters: StopFilter) -> StopFilter:
    """Combine predicates; a stop must satisfy every one."""
    return lambda stop: all(f(stop) for f in filters)


@dataclass(frozen=True)
class TransitSnapshot:
    """Immutable view of one successful load."""

    rail_stations: tuple[RailStation, ...]
    surface_stops: tuple[TransitStop, ...]
    rail_by_id: dict[str, RailStation] = field(default_factory=dict)
    surface_by_id: dict[str, TransitStop] = field(default_factory=dict)

    @classmethod
    def build(
        cls, rail_stations: Sequence[RailStation], surface_stops: Sequence[TransitStop]
    ) -> "TransitSnapshot":
        return cls(
            rail_stations=tuple(rail_stations),
            surface_stops=tuple(surface_stops),
            rail_by_id={station.id: station for station in rail_stations},
            surface_by_id={stop.id: stop for stop in surface_stops},
        )

    @property
    def all_stops(self) -> tuple[TransitStop, ...]:
        return self.rail_stations + self.surface_stops


class TransitDataCache:
    """Single point of truth for "all known stops".

    Usage:
        cache = TransitDataCache(fetch_all_rail_stations, fetch_all_surface_stops)
        await cache.ensure_loaded()
        stations = cache.nearest(point, 800, 3, is_rail)
    """

    def __init__(
        self,
        fetch_rail: RailSource,
        fetch_surface: SurfaceSource,
        ttl: float = 24 * 60 * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the cache.

        Args:
            fetch_rail: Async collaborator returning every rail station.
            fetch_surface: Async collaborator returning every surface stop.
            ttl: Seconds before the snapshot is reloaded.
            clock: Callable returning the current time in seconds.
        """
        self._fetch_rail = fetch_rail
        self._fetch_surface = fetch_surface
        self._cache: SnapshotCache[TransitSnapshot] = SnapshotCache(ttl=ttl, clock=clock)
        self._current: TransitSnapshot | None = None
        self._load_task: asyncio.Task[TransitSnapshot] | None = None

    @property
    def is_loaded(self) -> bool:
        return self._current is not None

    @property
    def snapshot(self) -> TransitSnapshot:
        """The most recently loaded snapshot.

        Raises:
            TransitDataNotLoadedError: If no load has succeeded yet.
        """
        if self._current is None:
            raise TransitDataNotLoadedError("Transit data not loaded - await ensure_loaded()")
        return self._current

    async def ensure_loaded(self) -> TransitSnapshot:
        """Load stop data once per TTL window.

        Returns:
            The current snapshot.

        Raises:
            DataUnavailableError: If either collaborator fails. Nothing is
                committed in that case.
        """
        cached = self._cache.get()
        if cached is not None:
            return cached

        task = self._load_task
        if task is None:
            task = asyncio.ensure_future(self._load())
            task.add_done_callback(self._load_finished)
            self._load_task = task
        else:
            logger.debug("Joining in-flight transit data load")

        return await asyncio.shield(task)

    def _load_finished(self, task: asyncio.Task[TransitSnapshot]) -> None:
        if self._load_task is task:
            self._load_task = None
        # Retrieve the error even when every waiter was cancelled
        if not task.cancelled():
            task.exception()

    async def _load(self) -> TransitSnapshot:
        try:
            rail_stations, surface_stops = await asyncio.gather(
                self._fetch_rail(), self._fetch_surface()
            )
        except Exception as e:
            logger.warning(f"Failed to load transit data: {e}")
            raise DataUnavailableError(f"Transit data unavailable: {e}") from e

        snapshot = TransitSnapshot.build(rail_stations, surface_stops)
        self._cache.set(snapshot)
        self._current = snapshot
        logger.info(
            f"Transit data loaded: {len(snapshot.rail_stations)} rail stations, "
            f"{len(snapshot.surface_stops)} surface stops"
        )
        return snapshot

    def clear(self) -> None:
        """Drop the snapshot so the next ensure_loaded() fetches again."""
        self._cache.clear()
        self._current = None

    def rail_station(self, station_id: str) -> RailStation | None:
        return self.snapshot.rail_by_id.get(station_id)

    def surface_stop(self, stop_id: str) -> TransitStop | None:
        return self.snapshot.surface_by_id.get(stop_id)

    def nearest_with_distance(
        self,
        point: Coordinate,
        max_distance_meters: float,
        max_results: int,
        mode_filter: StopFilter | None = None,
    ) -> list[tuple[TransitStop, float]]:
        """Stops within ``max_distance_meters`` of ``point``, closest first.

        Ties keep snapshot order (rail stations before surface stops).
        """
        candidates: list[tuple[TransitStop, float]] = []
        for stop in self.snapshot.all_stops:
            if mode_filter is not None and not mode_filter(stop):
                continue
            meters = distance(point, stop.coordinate)
            if meters <= max_distance_meters:
                candidates.append((stop, meters))

        candidates.sort(key=lambda pair: pair[1])
        return candidates[:max_results]

    def nearest(
        self,
        point: Coordinate,
        max_distance_meters: float,
        max_results: int,
        mode_filter: StopFilter | None = None,
    ) -> list[TransitStop]:
        """Like nearest_with_distance() without the distances."""
        return [
            stop
            for stop, _ in self.nearest_with_distance(
                point, max_distance_meters, max_results, mode_filter
            )
        ]
