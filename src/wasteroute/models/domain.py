"""Domain models for waste reports and geographic points."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """A WGS84 latitude/longitude pair."""

    lat: float
    lng: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"Latitude {self.lat} is outside [-90, 90].")
        if not -180.0 <= self.lng <= 180.0:
            raise ValueError(f"Longitude {self.lng} is outside [-180, 180].")

    def as_tuple(self) -> tuple[float, float]:
        return (self.lat, self.lng)


@dataclass(frozen=True, slots=True)
class WasteReport:
    """An approved collection report as supplied by the reports backend."""

    id: str
    location_name: str
    coordinates: Optional[GeoPoint] = None
    fill_level: Optional[int] = None
    waste_type: Optional[str] = None
    created_at: Optional[datetime] = None

    def urgency(self, urgent_at: int = 80, warning_at: int = 50) -> str:
        level = self.fill_level or 0
        if level >= urgent_at:
            return "urgent"
        if level >= warning_at:
            return "warning"
        return "ok"


@dataclass(frozen=True, slots=True)
class ResolvedReport:
    """A report paired with the coordinates used for routing."""

    report: WasteReport
    coordinates: GeoPoint
    geocoded: bool = False

    @property
    def report_id(self) -> str:
        return self.report.id
