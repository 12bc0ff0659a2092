"""Fill in missing report coordinates through the geocoder."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional, Sequence

from ...config import settings
from ...models.domain import GeoPoint, ResolvedReport, WasteReport
from .cache import GeocodeCache
from .client import Geocoder, NominatimClient

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Resolution:
    resolved: list[ResolvedReport] = field(default_factory=list)
    dropped_ids: set[str] = field(default_factory=set)


def normalize_location(location_name: str, region_suffix: str | None = None) -> str:
    """Build the cache key / query text for a location name.

    Whitespace is trimmed and collapsed, then the deployment's region suffix
    is appended so that short place names resolve inside the service area.
    Returns an empty string for a blank name.
    """
    suffix = settings.geocode_region_suffix if region_suffix is None else region_suffix
    name = " ".join(location_name.split())
    if not name:
        return ""
    return f"{name}{suffix}"


class LocationResolver:
    """Resolve a batch of reports to routable coordinates.

    Reports that already carry coordinates pass straight through. The rest
    are geocoded concurrently through the shared cache; each lookup that
    fails only drops its own report.
    """

    def __init__(
        self,
        geocoder: Geocoder | None = None,
        cache: GeocodeCache | None = None,
        region_suffix: str | None = None,
        max_parallel_requests: int | None = None,
    ) -> None:
        self.geocoder = geocoder or NominatimClient()
        self.cache = cache if cache is not None else GeocodeCache()
        self.region_suffix = settings.geocode_region_suffix if region_suffix is None else region_suffix
        self.max_parallel_requests = max_parallel_requests or settings.geocode_max_parallel_requests

    def lookup(self, location_name: str) -> Optional[GeoPoint]:
        key = normalize_location(location_name, self.region_suffix)
        if not key:
            return None
        try:
            return self.cache.get_or_fetch(key, lambda: self.geocoder.search(key))
        except Exception:
            # not cached, so the next session asks the geocoder again
            logger.exception("Unexpected error geocoding %r", key)
            return None

    def resolve(self, reports: Sequence[WasteReport]) -> Resolution:
        outcomes: list[Optional[GeoPoint]] = [None] * len(reports)
        pending: list[int] = []
        for index, report in enumerate(reports):
            if report.coordinates is not None:
                outcomes[index] = report.coordinates
            else:
                pending.append(index)

        if pending:
            workers = min(self.max_parallel_requests, len(pending))
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="geocode") as executor:
                futures = {
                    index: executor.submit(self.lookup, reports[index].location_name)
                    for index in pending
                }
                for index, future in futures.items():
                    outcomes[index] = future.result()

        resolution = Resolution()
        geocoded = set(pending)
        for index, report in enumerate(reports):
            point = outcomes[index]
            if point is None:
                logger.warning("Dropping report %s: could not geocode %r", report.id, report.location_name)
                resolution.dropped_ids.add(report.id)
                continue
            resolution.resolved.append(
                ResolvedReport(report=report, coordinates=point, geocoded=index in geocoded)
            )

        logger.info(
            "Resolved %d of %d reports (%d geocoded, %d dropped)",
            len(resolution.resolved),
            len(reports),
            len(pending) - len(resolution.dropped_ids),
            len(resolution.dropped_ids),
        )
        return resolution
