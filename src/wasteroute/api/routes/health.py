"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...services.routing.service import get_resolver

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_geocoder_health_check():
    """Lazy import to avoid startup failures."""
    from ...services.geocoding.client import check_health as geocoder_health_check
    return geocoder_health_check


@router.get("/health/geocoder", status_code=status.HTTP_200_OK)
def health_geocoder() -> dict:
    """Check geocoding service reachability and report cache size."""
    geocoder_health_check = _get_geocoder_health_check()
    return {
        "service": "geocoder",
        "healthy": geocoder_health_check(),
        "cached_locations": len(get_resolver().cache),
    }
