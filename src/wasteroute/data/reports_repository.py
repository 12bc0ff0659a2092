"""Read-only access to approved reports held by the reports backend."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

import httpx

from ..config import settings
from ..models.domain import GeoPoint, WasteReport

logger = logging.getLogger(__name__)


class ReportsBackendError(RuntimeError):
    """The reports backend answered with something that is not a report list."""


def _coerce_fill_level(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"Unable to parse fill level from value '{value}'")
    try:
        level = int(float(str(value).strip().rstrip("%")))
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"Unable to parse fill level from value '{value}'") from exc
    if not 0 <= level <= 100:
        raise ValueError(f"Fill level {level} is outside 0-100.")
    return level


def _coerce_coordinates(lat: Any, lng: Any) -> Optional[GeoPoint]:
    if lat is None or lng is None or lat == "" or lng == "":
        return None
    try:
        lat_value, lng_value = float(lat), float(lng)
    except (TypeError, ValueError):
        logger.warning("Ignoring unusable coordinates (%r, %r)", lat, lng)
        return None
    # the backend stores 0 for "unknown", so geocode instead
    if lat_value == 0 or lng_value == 0:
        return None
    try:
        return GeoPoint(lat=lat_value, lng=lng_value)
    except ValueError:
        logger.warning("Ignoring unusable coordinates (%r, %r)", lat, lng)
        return None


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.warning("Ignoring unparseable timestamp %r", value)
        return None


def parse_report(row: dict) -> WasteReport:
    """Convert one backend JSON record into a WasteReport."""
    report_id = str(row.get("id") or "").strip()
    if not report_id:
        raise ValueError("Report record is missing an id.")
    return WasteReport(
        id=report_id,
        location_name=str(row.get("location") or row.get("locationName") or "").strip(),
        coordinates=_coerce_coordinates(row.get("lat"), row.get("lng")),
        fill_level=_coerce_fill_level(row.get("fillLevel")),
        waste_type=(str(row.get("wasteType") or "").strip() or None),
        created_at=_parse_timestamp(row.get("createdAt")),
    )


class ReportsClient:
    """Fetches reports from the backend's ``/reports`` endpoint."""

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.reports_api_base_url
        if not self.base_url:
            raise ValueError("Reports API base URL is not configured.")
        self.base_url = self.base_url.rstrip("/")
        self.token = token if token is not None else settings.reports_api_token
        self.timeout = timeout if timeout is not None else settings.reports_api_timeout_seconds
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def list_reports(self, status: str = "approved") -> list[WasteReport]:
        with httpx.Client(timeout=self.timeout, headers=self._headers(), transport=self._transport) as client:
            response = client.get(f"{self.base_url}/reports", params={"status": status})
            if response.status_code == 401:
                raise PermissionError("Session expired")
            response.raise_for_status()
            try:
                rows = response.json() or []
            except ValueError as exc:
                raise ReportsBackendError("Reports API returned invalid JSON.") from exc

        if not isinstance(rows, list):
            raise ReportsBackendError("Reports API returned an unexpected payload.")
        reports: list[WasteReport] = []
        for row in rows:
            if not isinstance(row, dict):
                logger.warning("Skipping non-object report record %r", row)
                continue
            try:
                reports.append(parse_report(row))
            except ValueError as exc:
                logger.warning("Skipping report %r: %s", row.get("id"), exc)
        logger.info("Fetched %d %s reports (%d skipped)", len(reports), status, len(rows) - len(reports))
        return reports

    def get_approved(self) -> list[WasteReport]:
        return self.list_reports("approved")
