import httpx
import pytest

from wasteroute.models.domain import GeoPoint
from wasteroute.services.geocoding.client import GeocodingError, NominatimClient


def _client(handler) -> NominatimClient:
    return NominatimClient(
        base_url="https://geocoder.test/",
        user_agent="wasteroute-tests",
        timeout=2.0,
        transport=httpx.MockTransport(handler),
    )


def test_search_returns_best_match():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["agent"] = request.headers["User-Agent"]
        return httpx.Response(200, json=[{"lat": "-0.34", "lon": "37.65", "display_name": "Ndagani"}])

    point = _client(handler).search("Ndagani, Tharaka Nithi County, Kenya")

    assert point == GeoPoint(-0.34, 37.65)
    assert seen["path"] == "/search"
    assert seen["params"] == {"format": "json", "q": "Ndagani, Tharaka Nithi County, Kenya", "limit": "1"}
    assert seen["agent"] == "wasteroute-tests"


def test_search_no_match_returns_none():
    assert _client(lambda request: httpx.Response(200, json=[])).search("Atlantis") is None


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="boom"),
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json={"error": "rate limited"}),
        httpx.Response(200, json=[{"lat": "north", "lon": "37.65"}]),
        httpx.Response(200, json=[{"lat": "95", "lon": "37.65"}]),
        httpx.Response(200, json=[{"lon": "37.65"}]),
    ],
)
def test_search_bad_responses_raise(response: httpx.Response):
    with pytest.raises(GeocodingError):
        _client(lambda request: response).search("Chuka")


def test_search_network_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(GeocodingError) as exc_info:
        _client(handler).search("Chuka")
    assert exc_info.value.query == "Chuka"
    assert "network error" in exc_info.value.detail
