"""Serializers for route planning outputs."""

from __future__ import annotations

from ...config import settings
from ..routing.models import RouteResult


def _point(lat: float, lng: float) -> dict:
    return {"lat": lat, "lng": lng}


def route_result_to_json(result: RouteResult) -> dict:
    stops = []
    for sequence, (stop, leg) in enumerate(zip(result.ordered_stops, result.legs), start=1):
        report = stop.report
        stops.append(
            {
                "report_id": report.id,
                "sequence": sequence,
                "location_name": report.location_name,
                "coordinates": _point(stop.coordinates.lat, stop.coordinates.lng),
                "geocoded": stop.geocoded,
                "fill_level": report.fill_level,
                "waste_type": report.waste_type,
                "urgency": report.urgency(settings.urgent_fill_level, settings.warning_fill_level),
                "distance_from_prev_km": leg.distance_km,
            }
        )
    return {
        "origin": _point(result.origin.lat, result.origin.lng),
        "stops": stops,
        "legs": [
            {
                "start": _point(leg.start.lat, leg.start.lng),
                "end": _point(leg.end.lat, leg.end.lng),
                "distance_km": leg.distance_km,
            }
            for leg in result.legs
        ],
        "total_distance_km": result.total_distance_km,
        "dropped_report_ids": sorted(result.dropped_report_ids),
        "partial": result.is_partial,
        "navigation_url": result.navigation_url(settings.navigation_base_url),
    }


def route_result_to_geojson(result: RouteResult) -> dict:
    """FeatureCollection for the map layer: origin marker, stop markers, path line.

    GeoJSON positions are ``[lng, lat]``.
    """
    features: list[dict] = [
        {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [result.origin.lng, result.origin.lat]},
            "properties": {"role": "origin", "sequence": 0},
        }
    ]
    for sequence, stop in enumerate(result.ordered_stops, start=1):
        report = stop.report
        features.append(
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": [stop.coordinates.lng, stop.coordinates.lat]},
                "properties": {
                    "role": "stop",
                    "sequence": sequence,
                    "report_id": report.id,
                    "location_name": report.location_name,
                    "fill_level": report.fill_level,
                    "waste_type": report.waste_type,
                    "urgency": report.urgency(settings.urgent_fill_level, settings.warning_fill_level),
                },
            }
        )
    features.append(
        {
            "type": "Feature",
            "geometry": {
                "type": "LineString",
                "coordinates": [[point.lng, point.lat] for point in result.waypoints],
            },
            "properties": {
                "role": "route",
                "total_distance_km": round(result.total_distance_km, 3),
                "stop_count": result.stop_count,
            },
        }
    )
    return {"type": "FeatureCollection", "features": features}
