import itertools

import pytest

from wasteroute.models.domain import GeoPoint
from wasteroute.services.geospatial import path_length_km
from wasteroute.services.routing.optimizer import (
    ExhaustiveOptimizer,
    NearestNeighborOptimizer,
    get_optimizer,
)

ORIGIN = GeoPoint(0, 0)


def test_empty_destinations_give_empty_route():
    assert NearestNeighborOptimizer().optimize(ORIGIN, []) == []


def test_single_destination_is_returned():
    point = GeoPoint(1, 1)
    assert NearestNeighborOptimizer().optimize(ORIGIN, [point]) == [point]


def test_nearest_neighbor_visits_closest_first():
    a, b, c = GeoPoint(0, 1), GeoPoint(0, 5), GeoPoint(0, 2)
    assert NearestNeighborOptimizer().optimize(ORIGIN, [a, b, c]) == [a, c, b]


def test_output_is_permutation_of_input():
    destinations = [GeoPoint(lat / 10, lng / 7) for lat, lng in itertools.product(range(-3, 4), range(0, 5))]
    ordering = NearestNeighborOptimizer().order(ORIGIN, destinations)
    assert sorted(ordering) == list(range(len(destinations)))
    assert sorted(NearestNeighborOptimizer().optimize(ORIGIN, destinations), key=GeoPoint.as_tuple) == sorted(
        destinations, key=GeoPoint.as_tuple
    )


def test_tie_goes_to_first_in_input_order():
    east, west = GeoPoint(0, 1), GeoPoint(0, -1)
    optimizer = NearestNeighborOptimizer()
    for _ in range(5):
        assert optimizer.order(ORIGIN, [east, west]) == [0, 1]
        assert optimizer.order(ORIGIN, [west, east]) == [0, 1]


def test_duplicate_points_are_kept_apart():
    same = GeoPoint(0.5, 0.5)
    assert NearestNeighborOptimizer().order(ORIGIN, [same, same, GeoPoint(3, 3)]) == [0, 1, 2]


def test_exhaustive_beats_greedy_on_trap_layout():
    # greedy takes 1, then 3, then has to come all the way back to -1.5
    destinations = [GeoPoint(0, 1), GeoPoint(0, -1.5), GeoPoint(0, 3)]
    greedy = NearestNeighborOptimizer().optimize(ORIGIN, destinations)
    exact = ExhaustiveOptimizer(max_stops=8).optimize(ORIGIN, destinations)
    assert path_length_km([ORIGIN, *exact]) <= path_length_km([ORIGIN, *greedy])
    assert exact == [GeoPoint(0, -1.5), GeoPoint(0, 1), GeoPoint(0, 3)]


def test_exhaustive_falls_back_above_limit():
    destinations = [GeoPoint(0, i) for i in (4, 1, 3, 2)]
    assert ExhaustiveOptimizer(max_stops=2).order(ORIGIN, destinations) == NearestNeighborOptimizer().order(
        ORIGIN, destinations
    )


def test_exhaustive_small_inputs():
    assert ExhaustiveOptimizer().order(ORIGIN, []) == []
    assert ExhaustiveOptimizer().order(ORIGIN, [GeoPoint(1, 1)]) == [0]


def test_get_optimizer():
    assert isinstance(get_optimizer("nearest_neighbor"), NearestNeighborOptimizer)
    exhaustive = get_optimizer("exhaustive", max_stops=5)
    assert isinstance(exhaustive, ExhaustiveOptimizer)
    assert exhaustive.max_stops == 5
    with pytest.raises(ValueError):
        get_optimizer("genetic")
