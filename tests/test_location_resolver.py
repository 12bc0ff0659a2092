import threading

from wasteroute.models.domain import GeoPoint, WasteReport
from wasteroute.services.geocoding.cache import GeocodeCache
from wasteroute.services.geocoding.client import GeocodingError
from wasteroute.services.geocoding.resolver import LocationResolver, normalize_location

SUFFIX = ", Tharaka Nithi County, Kenya"


class FakeGeocoder:
    def __init__(self, answers: dict[str, GeoPoint | None], failing: set[str] = frozenset()):
        self.answers = answers
        self.failing = failing
        self.queries: list[str] = []
        self._lock = threading.Lock()

    def search(self, query: str) -> GeoPoint | None:
        with self._lock:
            self.queries.append(query)
        if query in self.failing:
            raise GeocodingError(query, "network error: connection refused")
        return self.answers.get(query)


def _report(rid: str, location: str, coordinates: GeoPoint | None = None) -> WasteReport:
    return WasteReport(id=rid, location_name=location, coordinates=coordinates, fill_level=60, waste_type="Plastic")


def _resolver(geocoder: FakeGeocoder, cache: GeocodeCache | None = None) -> LocationResolver:
    return LocationResolver(geocoder=geocoder, cache=cache if cache is not None else GeocodeCache(), region_suffix=SUFFIX, max_parallel_requests=4)


def test_normalize_location():
    assert normalize_location("  Chuka   Market ", SUFFIX) == "Chuka Market" + SUFFIX
    assert normalize_location("   ", SUFFIX) == ""


def test_reports_with_coordinates_skip_geocoder():
    geocoder = FakeGeocoder({})
    point = GeoPoint(-0.33, 37.64)
    resolution = _resolver(geocoder).resolve([_report("r1", "Chuka", point)])
    assert geocoder.queries == []
    assert [item.coordinates for item in resolution.resolved] == [point]
    assert resolution.resolved[0].geocoded is False
    assert resolution.dropped_ids == set()


def test_geocoded_and_unmatched_reports():
    geocoder = FakeGeocoder({"Ndagani" + SUFFIX: GeoPoint(-0.34, 37.65)})
    resolution = _resolver(geocoder).resolve([_report("found", "Ndagani"), _report("lost", "Atlantis")])
    assert [item.report_id for item in resolution.resolved] == ["found"]
    assert resolution.resolved[0].coordinates == GeoPoint(-0.34, 37.65)
    assert resolution.resolved[0].geocoded is True
    assert resolution.dropped_ids == {"lost"}


def test_network_failure_only_drops_its_report():
    geocoder = FakeGeocoder(
        {"Chuka" + SUFFIX: GeoPoint(-0.33, 37.64), "Kaanwa" + SUFFIX: GeoPoint(-0.30, 37.70)},
        failing={"Broken Road" + SUFFIX},
    )
    resolution = _resolver(geocoder).resolve(
        [_report("1", "Chuka"), _report("2", "Broken Road"), _report("3", "Kaanwa")]
    )
    assert [item.report_id for item in resolution.resolved] == ["1", "3"]
    assert resolution.dropped_ids == {"2"}


def test_unexpected_geocoder_error_only_drops_its_report():
    class ResettingGeocoder(FakeGeocoder):
        def search(self, query: str) -> GeoPoint | None:
            if query == "Broken Road" + SUFFIX:
                raise ConnectionResetError("connection reset by peer")
            return super().search(query)

    cache = GeocodeCache()
    geocoder = ResettingGeocoder({"Chuka" + SUFFIX: GeoPoint(-0.33, 37.64)})
    resolution = _resolver(geocoder, cache).resolve([_report("1", "Chuka"), _report("2", "Broken Road")])
    assert [item.report_id for item in resolution.resolved] == ["1"]
    assert resolution.dropped_ids == {"2"}
    # unexpected errors are not remembered
    assert "Broken Road" + SUFFIX not in cache


def test_blank_location_dropped_without_lookup():
    geocoder = FakeGeocoder({})
    resolution = _resolver(geocoder).resolve([_report("blank", "  ")])
    assert geocoder.queries == []
    assert resolution.dropped_ids == {"blank"}


def test_same_location_is_looked_up_once():
    geocoder = FakeGeocoder({"Chuka" + SUFFIX: GeoPoint(-0.33, 37.64)})
    resolver = _resolver(geocoder)
    first = resolver.resolve([_report("a", "Chuka"), _report("b", " Chuka ")])
    second = resolver.resolve([_report("c", "Chuka")])
    assert geocoder.queries == ["Chuka" + SUFFIX]
    assert {item.coordinates for item in first.resolved + second.resolved} == {GeoPoint(-0.33, 37.64)}


def test_failed_location_fails_identically_twice():
    geocoder = FakeGeocoder({})
    resolver = _resolver(geocoder)
    assert resolver.resolve([_report("a", "Atlantis")]).dropped_ids == {"a"}
    assert resolver.resolve([_report("b", "Atlantis")]).dropped_ids == {"b"}
    assert geocoder.queries == ["Atlantis" + SUFFIX]


def test_resolved_order_follows_input_order():
    answers = {f"Place {i}" + SUFFIX: GeoPoint(-0.3, 37.6 + i / 100) for i in range(10)}
    resolution = _resolver(FakeGeocoder(answers)).resolve([_report(str(i), f"Place {i}") for i in range(10)])
    assert [item.report_id for item in resolution.resolved] == [str(i) for i in range(10)]


def test_cache_is_shared_between_resolvers():
    cache = GeocodeCache()
    geocoder = FakeGeocoder({"Chuka" + SUFFIX: GeoPoint(-0.33, 37.64)})
    _resolver(geocoder, cache).resolve([_report("a", "Chuka")])
    _resolver(geocoder, cache).resolve([_report("b", "Chuka")])
    assert len(geocoder.queries) == 1
