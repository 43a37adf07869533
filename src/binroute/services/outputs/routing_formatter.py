"""Serializers for planned collection tours."""

from __future__ import annotations

import csv
import io

from ..routing.models import Tour


def tour_to_json(tour: Tour) -> dict:
    return {
        "status": tour.status,
        "garage": [tour.garage.latitude, tour.garage.longitude],
        "disposal_site": [tour.disposal_site.latitude, tour.disposal_site.longitude],
        "total_distance_km": tour.total_distance_km,
        "stops": [
            {
                "sequence": sequence,
                "stop_id": stop.stop_id,
                "latitude": stop.location.latitude,
                "longitude": stop.location.longitude,
                "distance_from_prev_km": leg.length_km,
            }
            for sequence, (stop, leg) in enumerate(zip(tour.stops, tour.legs), start=1)
        ],
        "geometry": [[point.latitude, point.longitude] for point in tour.geometry],
    }


def tour_to_csv(tour: Tour) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "sequence",
        "stop_id",
        "latitude",
        "longitude",
        "distance_from_prev_km",
        "cumulative_distance_km",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    cumulative = 0.0
    for sequence, (stop, leg) in enumerate(zip(tour.stops, tour.legs), start=1):
        cumulative += leg.length_km
        writer.writerow(
            {
                "sequence": sequence,
                "stop_id": stop.stop_id,
                "latitude": stop.location.latitude,
                "longitude": stop.location.longitude,
                "distance_from_prev_km": round(leg.length_km, 4),
                "cumulative_distance_km": round(cumulative, 4),
            }
        )
    return buffer.getvalue()
