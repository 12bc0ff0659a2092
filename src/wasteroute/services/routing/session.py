"""Single-shot orchestration of one route calculation."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Sequence

from ...models.domain import GeoPoint, WasteReport
from ..geocoding.resolver import LocationResolver
from ..geospatial import distance_km
from ..origin import OriginProvider
from .errors import InsufficientDestinations, RoutePlanningError, SessionAlreadyUsed
from .models import RouteLeg, RouteResult
from .optimizer import RouteOptimizer, get_optimizer

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    ACQUIRING_ORIGIN = "acquiring_origin"
    RESOLVING_LOCATIONS = "resolving_locations"
    OPTIMIZING = "optimizing"
    READY = "ready"
    FAILED = "failed"


class RoutePlanningSession:
    """Plan one collection route: origin, resolve locations, order, measure.

    A session runs once. It ends in READY with ``result`` set, or in FAILED
    with ``failure`` holding the exception that was raised to the caller.
    Start a new session for every new request; the geocode cache lives in
    the resolver and is shared between sessions.
    """

    def __init__(self, resolver: LocationResolver, optimizer: RouteOptimizer | None = None) -> None:
        self.resolver = resolver
        self.optimizer = optimizer or get_optimizer()
        self.state = SessionState.IDLE
        self.result: Optional[RouteResult] = None
        self.failure: Optional[Exception] = None

    def run(self, origin_provider: OriginProvider, reports: Sequence[WasteReport]) -> RouteResult:
        """Acquire the origin from *origin_provider*, then plan."""
        self._start()
        self.state = SessionState.ACQUIRING_ORIGIN
        try:
            origin = origin_provider.acquire()
        except Exception as exc:
            self._fail(exc)
            raise
        return self._plan_or_fail(origin, reports)

    def plan(self, origin: GeoPoint, reports: Sequence[WasteReport]) -> RouteResult:
        self._start()
        return self._plan_or_fail(origin, reports)

    def _start(self) -> None:
        if self.state is not SessionState.IDLE:
            raise SessionAlreadyUsed(self.state.value)

    def _fail(self, exc: Exception) -> None:
        if isinstance(exc, RoutePlanningError):
            logger.warning("Route planning failed during %s: %s", self.state.value, exc)
        else:
            logger.exception("Unexpected error during %s", self.state.value)
        self.state = SessionState.FAILED
        self.failure = exc

    def _plan_or_fail(self, origin: GeoPoint, reports: Sequence[WasteReport]) -> RouteResult:
        try:
            return self._plan(origin, reports)
        except Exception as exc:
            self._fail(exc)
            raise

    def _plan(self, origin: GeoPoint, reports: Sequence[WasteReport]) -> RouteResult:
        self.state = SessionState.RESOLVING_LOCATIONS
        resolution = self.resolver.resolve(reports)
        if not resolution.resolved:
            raise InsufficientDestinations(resolution.dropped_ids)

        self.state = SessionState.OPTIMIZING
        candidates = resolution.resolved
        ordering = self.optimizer.order(origin, [item.coordinates for item in candidates])
        stops = tuple(candidates[index] for index in ordering)

        legs: list[RouteLeg] = []
        previous = origin
        for stop in stops:
            legs.append(RouteLeg(start=previous, end=stop.coordinates, distance_km=distance_km(previous, stop.coordinates)))
            previous = stop.coordinates

        self.result = RouteResult(
            origin=origin,
            ordered_stops=stops,
            legs=tuple(legs),
            total_distance_km=sum(leg.distance_km for leg in legs),
            dropped_report_ids=frozenset(resolution.dropped_ids),
        )
        self.state = SessionState.READY
        logger.info(
            "Planned route with %d stops, %.1f km (%d dropped, strategy=%s)",
            len(stops),
            self.result.total_distance_km,
            len(resolution.dropped_ids),
            self.optimizer.name,
        )
        return self.result
