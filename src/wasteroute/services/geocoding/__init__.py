"""Geocoding services."""

from .cache import GeocodeCache
from .client import GeocodingError, NominatimClient
from .resolver import LocationResolver, Resolution, normalize_location

__all__ = [
    "GeocodeCache",
    "GeocodingError",
    "LocationResolver",
    "NominatimClient",
    "Resolution",
    "normalize_location",
]
