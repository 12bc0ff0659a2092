"""Route planning orchestration service."""

from __future__ import annotations

import logging
import threading
from typing import Optional, Sequence

from ...config import settings
from ...data.reports_repository import ReportsClient
from ...models.domain import GeoPoint, WasteReport
from ...schemas.routing import RoutePlanRequest, RoutePlanResponse, WasteReportModel
from ..geocoding.cache import GeocodeCache
from ..geocoding.resolver import LocationResolver
from ..origin import StaticOriginProvider, default_origin_provider
from ..outputs.routing_formatter import route_result_to_geojson, route_result_to_json
from .optimizer import get_optimizer
from .session import RoutePlanningSession

logger = logging.getLogger(__name__)

_resolver: Optional[LocationResolver] = None
_resolver_lock = threading.Lock()


def get_resolver() -> LocationResolver:
    """Process-wide resolver; its cache is shared by every planning session."""
    global _resolver
    if _resolver is None:
        with _resolver_lock:
            if _resolver is None:
                cache = GeocodeCache(
                    max_entries=settings.geocode_cache_max_entries,
                    ttl_seconds=settings.geocode_cache_ttl_seconds,
                )
                _resolver = LocationResolver(cache=cache)
    return _resolver


def reset_resolver() -> None:
    """Forget the shared resolver so the next call builds a fresh one."""
    global _resolver
    with _resolver_lock:
        _resolver = None


def _to_domain(model: WasteReportModel) -> WasteReport:
    coordinates = None
    if model.coordinates is not None:
        coordinates = GeoPoint(lat=model.coordinates.lat, lng=model.coordinates.lng)
    return WasteReport(
        id=model.id,
        location_name=model.location_name,
        coordinates=coordinates,
        fill_level=model.fill_level,
        waste_type=model.waste_type,
        created_at=model.created_at,
    )


def _load_reports(payload: RoutePlanRequest) -> Sequence[WasteReport]:
    if payload.reports is not None:
        return [_to_domain(model) for model in payload.reports]
    logger.info("No reports in request; fetching approved reports from backend")
    return ReportsClient().get_approved()


def plan_collection_route(payload: RoutePlanRequest) -> RoutePlanResponse:
    """Run one planning session for *payload* and shape it for the presentation layer.

    Raises OriginUnavailable or InsufficientDestinations when the session
    fails; dropped reports are reported in the response instead.
    """
    reports = _load_reports(payload)
    optimizer = get_optimizer(payload.strategy)
    session = RoutePlanningSession(resolver=get_resolver(), optimizer=optimizer)

    if payload.origin is not None:
        provider = StaticOriginProvider(GeoPoint(lat=payload.origin.lat, lng=payload.origin.lng))
    else:
        provider = default_origin_provider()

    result = session.run(provider, reports)
    if result.is_partial:
        logger.info("Route is partial; excluded reports: %s", sorted(result.dropped_report_ids))

    body = route_result_to_json(result)
    return RoutePlanResponse(
        **body,
        map_overlay=route_result_to_geojson(result),
        strategy=optimizer.name,
    )
