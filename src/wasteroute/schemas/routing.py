"""Route planning request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class GeoPointModel(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class WasteReportModel(BaseModel):
    id: str = Field(..., min_length=1)
    location_name: str = Field(default="", description="Free-text location used for geocoding.")
    coordinates: Optional[GeoPointModel] = None
    fill_level: Optional[int] = Field(default=None, ge=0, le=100)
    waste_type: Optional[str] = None
    created_at: Optional[datetime] = None


class RoutePlanRequest(BaseModel):
    origin: Optional[GeoPointModel] = Field(
        default=None,
        description="Collector position. When omitted the configured base location is used.",
    )
    reports: Optional[List[WasteReportModel]] = Field(
        default=None,
        description="Reports to route. When omitted, approved reports are fetched from the reports backend.",
    )
    strategy: Optional[Literal["nearest_neighbor", "exhaustive"]] = Field(
        default=None,
        description="Stop ordering strategy; defaults to the configured one.",
    )


class RouteStopModel(BaseModel):
    report_id: str
    sequence: int
    location_name: str
    coordinates: GeoPointModel
    geocoded: bool
    fill_level: Optional[int]
    waste_type: Optional[str]
    urgency: str
    distance_from_prev_km: float


class RouteLegModel(BaseModel):
    start: GeoPointModel
    end: GeoPointModel
    distance_km: float


class RoutePlanResponse(BaseModel):
    origin: GeoPointModel
    stops: List[RouteStopModel]
    legs: List[RouteLegModel]
    total_distance_km: float
    dropped_report_ids: List[str]
    partial: bool
    navigation_url: str
    map_overlay: dict
    strategy: str


class RoutePlanError(BaseModel):
    kind: str
    message: str
    reason: Optional[str] = None
    dropped_report_ids: List[str] = Field(default_factory=list)
