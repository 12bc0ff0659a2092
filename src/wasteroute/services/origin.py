"""Acquisition of the collector's starting point."""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Callable, Optional, Protocol

from ..config import settings
from ..models.domain import GeoPoint
from .routing.errors import OriginReason, OriginUnavailable

logger = logging.getLogger(__name__)


class SensorPermissionDenied(Exception):
    """Raised by a sensor reader when the user refused location access."""


class OriginProvider(Protocol):
    def acquire(self) -> GeoPoint: ...


class StaticOriginProvider:
    """A stored default ("base") location."""

    def __init__(self, point: GeoPoint) -> None:
        self.point = point

    def acquire(self) -> GeoPoint:
        return self.point


class SensorOriginProvider:
    """Live position from a blocking sensor reader.

    The read is bounded by ``timeout_seconds``; a reading younger than
    ``max_age_seconds`` is reused instead of asking the sensor again. A
    reader that overruns the timeout is left to finish on its worker thread.
    """

    def __init__(
        self,
        read: Optional[Callable[[], GeoPoint]],
        timeout_seconds: float | None = None,
        max_age_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._read = read
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else settings.origin_timeout_seconds
        self.max_age_seconds = max_age_seconds if max_age_seconds is not None else settings.origin_max_age_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._last: Optional[tuple[GeoPoint, float]] = None

    def acquire(self) -> GeoPoint:
        if self._read is None:
            raise OriginUnavailable(OriginReason.UNSUPPORTED)

        with self._lock:
            if self._last is not None:
                point, read_at = self._last
                if self._clock() - read_at < self.max_age_seconds:
                    return point

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="origin-sensor")
        try:
            future = executor.submit(self._read)
            point = future.result(timeout=self.timeout_seconds)
        except FutureTimeout as exc:
            logger.warning("Location sensor did not answer within %.1fs", self.timeout_seconds)
            raise OriginUnavailable(OriginReason.TIMEOUT) from exc
        except SensorPermissionDenied as exc:
            raise OriginUnavailable(OriginReason.PERMISSION_DENIED) from exc
        except NotImplementedError as exc:
            raise OriginUnavailable(OriginReason.UNSUPPORTED) from exc
        finally:
            executor.shutdown(wait=False)

        with self._lock:
            self._last = (point, self._clock())
        return point


class FallbackOriginProvider:
    """Try *primary* first, then *fallback* if the primary is unavailable."""

    def __init__(self, primary: OriginProvider, fallback: OriginProvider) -> None:
        self.primary = primary
        self.fallback = fallback

    def acquire(self) -> GeoPoint:
        try:
            return self.primary.acquire()
        except OriginUnavailable as exc:
            logger.info("Primary origin unavailable (%s); trying fallback", exc.reason.value)
            return self.fallback.acquire()


def default_origin_provider(sensor: Optional[Callable[[], GeoPoint]] = None) -> OriginProvider:
    """Stored base location when configured, else the live sensor."""
    sensor_provider = SensorOriginProvider(sensor)
    if settings.base_latitude is None or settings.base_longitude is None:
        return sensor_provider
    base = StaticOriginProvider(GeoPoint(settings.base_latitude, settings.base_longitude))
    return FallbackOriginProvider(base, sensor_provider)
