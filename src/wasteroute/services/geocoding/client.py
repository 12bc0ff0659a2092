"""HTTP client for a Nominatim-compatible geocoding service."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from ...config import settings
from ...models.domain import GeoPoint

logger = logging.getLogger(__name__)


class GeocodingError(Exception):
    """A single location lookup failed (network, HTTP or malformed response)."""

    def __init__(self, query: str, detail: str):
        self.query = query
        self.detail = detail
        super().__init__(f"Geocoding failed for '{query}': {detail}")


class Geocoder(Protocol):
    def search(self, query: str) -> GeoPoint | None: ...


class NominatimClient:
    """Free-text query to best-match point lookup.

    Returns None when the service has no match. Transport failures and
    unusable payloads raise GeocodingError. No retries are attempted; a
    transient failure is reported the same way as a permanent one.
    """

    def __init__(
        self,
        base_url: str | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.geocoder_base_url).rstrip("/")
        if not self.base_url:
            raise ValueError("Geocoder base URL is not configured.")
        self.user_agent = user_agent or settings.geocoder_user_agent
        self.timeout = timeout if timeout is not None else settings.geocoder_timeout_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        # one client per call; lookups run on worker threads
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 10.0)),
            headers={"Accept": "application/json", "User-Agent": self.user_agent},
            transport=self._transport,
        )

    def search(self, query: str) -> GeoPoint | None:
        params = {"format": "json", "q": query, "limit": 1}
        url = f"{self.base_url}/search"

        client = self._get_client()
        try:
            response = client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise GeocodingError(query, f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise GeocodingError(query, f"network error: {exc}") from exc
        except ValueError as exc:
            raise GeocodingError(query, "response is not valid JSON") from exc
        finally:
            client.close()

        return _parse_search_response(query, data)


def _parse_search_response(query: str, data: object) -> GeoPoint | None:
    if not isinstance(data, list):
        raise GeocodingError(query, "expected a JSON array of matches")
    if not data:
        return None
    best = data[0]
    if not isinstance(best, dict):
        raise GeocodingError(query, "match is not an object")
    try:
        return GeoPoint(lat=float(best["lat"]), lng=float(best["lon"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise GeocodingError(query, f"match has unusable coordinates: {exc}") from exc


def check_health(base_url: str | None = None) -> bool:
    """Check geocoder reachability with the service's status endpoint."""
    base = (base_url or settings.geocoder_base_url).rstrip("/")
    if not base:
        return False
    try:
        response = httpx.get(
            f"{base}/status",
            params={"format": "json"},
            headers={"User-Agent": settings.geocoder_user_agent},
            timeout=5.0,
        )
        response.raise_for_status()
        return True
    except httpx.HTTPError as exc:
        logger.warning("Geocoder health check failed: %s", exc)
        return False
