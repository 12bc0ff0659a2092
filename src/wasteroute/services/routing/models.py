"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Tuple

from ...models.domain import GeoPoint, ResolvedReport


@dataclass(frozen=True, slots=True)
class RouteLeg:
    start: GeoPoint
    end: GeoPoint
    distance_km: float


@dataclass(frozen=True, slots=True)
class RouteResult:
    """Outcome of one planning session.

    ``legs[0]`` runs from the origin to the first stop, so there is one leg
    per stop. ``dropped_report_ids`` lists reports left out because their
    location could not be resolved; a non-empty set makes the route partial.
    """

    origin: GeoPoint
    ordered_stops: Tuple[ResolvedReport, ...]
    legs: Tuple[RouteLeg, ...]
    total_distance_km: float
    dropped_report_ids: FrozenSet[str]

    @property
    def waypoints(self) -> list[GeoPoint]:
        return [self.origin, *(stop.coordinates for stop in self.ordered_stops)]

    @property
    def is_partial(self) -> bool:
        return bool(self.dropped_report_ids)

    @property
    def stop_count(self) -> int:
        return len(self.ordered_stops)

    def navigation_url(self, base_url: str = "https://www.google.com/maps/dir/") -> str:
        """Deep link for external turn-by-turn navigation: origin, then every stop."""
        return base_url.rstrip("/") + "/" + "/".join(f"{p.lat},{p.lng}" for p in self.waypoints)
