"""TTL memoization of planned journeys keyed by origin and destination."""

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from hktransit_mcp.data.cache import TTLCache
from hktransit_mcp.models.transit import Coordinate, Journey

logger = logging.getLogger(__name__)

JOURNEY_CACHE_TTL_SECONDS = 15 * 60


@dataclass(frozen=True)
class JourneyCacheEntry:
    timestamp_ms: int
    journeys: tuple[Journey, ...]


def make_cache_key(
    origin: Coordinate, destination: Coordinate, precision: int | None = None
) -> str:
    """Deterministic key for an origin/destination pair.

    With ``precision`` None the key uses exact coordinate values, so any
    floating-point jitter produces a different key. Otherwise coordinates
    are rounded to ``precision`` decimal places first.
    """
    values = [origin.latitude, origin.longitude, destination.latitude, destination.longitude]
    if precision is not None:
        values = [round(value, precision) for value in values]
    return "{!r},{!r}->{!r},{!r}".format(*values)


class JourneyCache:
    """Journey results that expire a fixed time after insertion."""

    def __init__(
        self,
        ttl: float = JOURNEY_CACHE_TTL_SECONDS,
        key_precision: int | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the cache.

        Args:
            ttl: Seconds an entry stays valid after put().
            key_precision: Decimal places coordinates are rounded to when
                building keys (None for exact keys).
            clock: Callable returning wall-clock seconds.
        """
        self._clock = clock
        self._key_precision = key_precision
        self._entries: TTLCache[str, JourneyCacheEntry] = TTLCache(ttl=ttl, clock=clock)

    def key_for(self, origin: Coordinate, destination: Coordinate) -> str:
        return make_cache_key(origin, destination, self._key_precision)

    def get(self, key: str) -> JourneyCacheEntry | None:
        entry = self._entries.get(key)
        logger.debug(f"Journey cache {'hit' if entry else 'miss'} for {key}")
        return entry

    def put(self, key: str, journeys: Sequence[Journey]) -> None:
        self._entries.set(
            key,
            JourneyCacheEntry(timestamp_ms=int(self._clock() * 1000), journeys=tuple(journeys)),
        )

    def clear(self) -> None:
        """Drop every entry unconditionally."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
