"""TTL-based caches for transit data snapshots and planned journeys."""

import threading
import time
from collections.abc import Callable
from typing import Generic, TypeVar

K = TypeVar("K")
T = TypeVar("T")


class SnapshotCache(Generic[T]):
    """Single-value TTL cache for one data snapshot.

    Expiry is measured with the injected clock (monotonic by default).
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        """Initialize the cache.

        Args:
            ttl: Time-to-live in seconds for cached values.
            clock: Callable returning the current time in seconds.
        """
        self._ttl = ttl
        self._clock = clock
        self._value: T | None = None
        self._expires_at: float = 0

    def get(self) -> T | None:
        """Get the cached value if it hasn't expired."""
        if self._value is not None and self._clock() < self._expires_at:
            return self._value
        return None

    def set(self, value: T) -> None:
        """Set a value in the cache with TTL."""
        self._value = value
        self._expires_at = self._clock() + self._ttl

    def clear(self) -> None:
        """Clear the cached value."""
        self._value = None
        self._expires_at = 0


class TTLCache(Generic[K, T]):
    """Keyed cache whose entries expire a fixed time after insertion.

    Expired entries are dropped lazily on ``get``. All access goes through a
    lock so concurrent planners can share one instance.
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[K, tuple[float, T]] = {}
        self._lock = threading.Lock()

    @property
    def ttl(self) -> float:
        return self._ttl

    def get(self, key: K) -> T | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            inserted_at, value = entry
            if self._clock() - inserted_at >= self._ttl:
                del self._entries[key]
                return None
            return value

    def set(self, key: K, value: T) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
