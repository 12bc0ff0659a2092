"""Stop ordering strategies."""

from __future__ import annotations

import itertools
import logging
import math
from abc import ABC, abstractmethod
from typing import Any, Sequence

from ...config import settings
from ...models.domain import GeoPoint
from ..geospatial import distance_km

logger = logging.getLogger(__name__)


class RouteOptimizer(ABC):
    """Contract for ordering destinations from a fixed origin.

    ``order`` returns positions into *destinations*, which lets callers map
    the ordering back to whatever each point came from even when two
    destinations share the same coordinates.
    """

    name = "base"

    @abstractmethod
    def order(self, origin: GeoPoint, destinations: Sequence[GeoPoint]) -> list[int]:
        raise NotImplementedError

    def optimize(self, origin: GeoPoint, destinations: Sequence[GeoPoint]) -> list[GeoPoint]:
        return [destinations[index] for index in self.order(origin, destinations)]


class NearestNeighborOptimizer(RouteOptimizer):
    """Greedy tour: always travel to the closest unvisited destination.

    Ties go to the destination that comes first in input order. O(n^2) in
    the number of destinations, with no guarantee of a shortest tour.
    """

    name = "nearest_neighbor"

    def order(self, origin: GeoPoint, destinations: Sequence[GeoPoint]) -> list[int]:
        remaining = list(range(len(destinations)))
        ordering: list[int] = []
        current = origin
        while remaining:
            best_pos = 0
            best_dist = math.inf
            for pos, index in enumerate(remaining):
                dist = distance_km(current, destinations[index])
                if dist < best_dist:
                    best_dist = dist
                    best_pos = pos
            chosen = remaining.pop(best_pos)
            ordering.append(chosen)
            current = destinations[chosen]
        return ordering


class ExhaustiveOptimizer(RouteOptimizer):
    """Shortest open path from the origin by trying every permutation.

    Only used up to ``max_stops`` destinations; larger inputs fall back to
    nearest neighbor. Among equally short paths the first permutation in
    lexicographic order wins.
    """

    name = "exhaustive"

    def __init__(self, max_stops: int | None = None) -> None:
        self.max_stops = max_stops if max_stops is not None else settings.exhaustive_max_stops
        self._fallback = NearestNeighborOptimizer()

    def order(self, origin: GeoPoint, destinations: Sequence[GeoPoint]) -> list[int]:
        count = len(destinations)
        if count > self.max_stops:
            logger.info(
                "%d destinations exceed exhaustive limit of %d; using nearest neighbor",
                count,
                self.max_stops,
            )
            return self._fallback.order(origin, destinations)
        if count <= 1:
            return list(range(count))

        from_origin = [distance_km(origin, point) for point in destinations]
        between = [[distance_km(a, b) for b in destinations] for a in destinations]

        best: tuple[int, ...] = tuple(range(count))
        best_length = math.inf
        for candidate in itertools.permutations(range(count)):
            length = from_origin[candidate[0]]
            for i in range(count - 1):
                length += between[candidate[i]][candidate[i + 1]]
                if length >= best_length:
                    break
            else:
                if length < best_length:
                    best_length = length
                    best = candidate
        return list(best)


def get_optimizer(strategy: str | None = None, **kwargs: Any) -> RouteOptimizer:
    match strategy or settings.optimizer_strategy:
        case "nearest_neighbor":
            return NearestNeighborOptimizer()
        case "exhaustive":
            return ExhaustiveOptimizer(max_stops=kwargs.get("max_stops"))
        case other:
            raise ValueError(f"Unknown optimizer strategy '{other}'.")
