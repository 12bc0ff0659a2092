"""Process-wide memo of geocode lookups."""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Callable, Optional

from ...models.domain import GeoPoint
from .client import GeocodingError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Entry:
    coordinates: Optional[GeoPoint]  # None marks a failed lookup
    stored_at: float


class GeocodeCache:
    """Thread-safe memo mapping a normalized query to a point or a failure.

    At most one lookup per key is in flight at a time: callers that arrive
    while a lookup is running wait for its outcome instead of issuing their
    own. Both successes and failures are memoized. By default entries are
    kept forever; ``max_entries`` evicts the least recently used entry and
    ``ttl_seconds`` expires entries after a fixed lifetime.
    """

    def __init__(
        self,
        max_entries: int | None = None,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be at least 1.")
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive.")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: OrderedDict[str, _Entry] = OrderedDict()
        self._in_flight: dict[str, Future] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return self._get_locked(key) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def get_or_fetch(self, key: str, fetch: Callable[[], Optional[GeoPoint]]) -> Optional[GeoPoint]:
        """Return the cached outcome for *key*, running *fetch* only on a miss.

        *fetch* returns a point, None for "no match", or raises
        GeocodingError. Both failure kinds are cached as a negative entry and
        reported to every caller as None. Any other exception is propagated
        to the caller that ran the lookup and to everyone waiting on it, and
        nothing is cached.
        """
        with self._lock:
            entry = self._get_locked(key)
            if entry is not None:
                return entry.coordinates
            future = self._in_flight.get(key)
            owner = future is None
            if owner:
                future = Future()
                self._in_flight[key] = future

        if not owner:
            logger.debug("Waiting on in-flight geocode lookup for %r", key)
            return future.result()

        try:
            coordinates = fetch()
        except GeocodingError as exc:
            logger.warning("%s", exc)
            coordinates = None
        except BaseException as exc:
            with self._lock:
                self._in_flight.pop(key, None)
            future.set_exception(exc)
            raise

        with self._lock:
            self._store_locked(key, coordinates)
            self._in_flight.pop(key, None)
        future.set_result(coordinates)
        return coordinates

    def _get_locked(self, key: str) -> Optional[_Entry]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self.ttl_seconds is not None and self._clock() - entry.stored_at >= self.ttl_seconds:
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return entry

    def _store_locked(self, key: str, coordinates: Optional[GeoPoint]) -> None:
        self._entries[key] = _Entry(coordinates=coordinates, stored_at=self._clock())
        self._entries.move_to_end(key)
        if self.max_entries is not None:
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted geocode cache entry %r", evicted)
