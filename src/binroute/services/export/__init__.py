"""Export services."""

from .geojson import tour_to_geojson

__all__ = ["tour_to_geojson"]
