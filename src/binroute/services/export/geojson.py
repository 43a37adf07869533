"""GeoJSON export of planned collection tours."""

from __future__ import annotations

from typing import Any, Dict, List

from ...models.domain import Coordinate
from ..routing.models import Tour


def _position(coordinate: Coordinate) -> List[float]:
    # GeoJSON positions are [lon, lat]
    return [coordinate.longitude, coordinate.latitude]


def _point_feature(coordinate: Coordinate, properties: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": _position(coordinate)},
        "properties": properties,
    }


def tour_to_geojson(tour: Tour) -> Dict[str, Any]:
    """Convert a tour to a FeatureCollection for map rendering.

    Contains the road LineString (when the tour has one), a Point per stop
    carrying its visiting sequence, and the garage and disposal-site Points.
    """
    features: List[Dict[str, Any]] = []

    road = tour.road_geometry
    if len(road) >= 2:
        features.append(
            {
                "type": "Feature",
                "geometry": {"type": "LineString", "coordinates": [_position(point) for point in road]},
                "properties": {
                    "kind": "route",
                    "total_distance_km": round(tour.total_distance_km, 4),
                    "stop_count": len(tour.stops),
                },
            }
        )

    features.append(_point_feature(tour.garage, {"kind": "garage", "label": "Start at Garage"}))
    for sequence, stop in enumerate(tour.stops, start=1):
        features.append(
            _point_feature(
                stop.location,
                {"kind": "stop", "sequence": sequence, "stop_id": stop.stop_id, "label": f"Collect Dustbin #{stop.stop_id}"},
            )
        )
    features.append(_point_feature(tour.disposal_site, {"kind": "disposal_site", "label": "End at Disposal Site"}))

    return {
        "type": "FeatureCollection",
        "features": features,
        "properties": {"status": tour.status},
    }
