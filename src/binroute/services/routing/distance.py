"""Road distance between two points, measured along the routed polyline."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

from ...models.domain import Coordinate
from ..geospatial import great_circle_km
from .osrm_client import RoadRouter


def polyline_length_km(polyline: Sequence[Coordinate]) -> float:
    """Sum of great-circle distances between consecutive points.

    Empty and single-point polylines have zero length; use
    ``RoadLeg.reachable`` to tell a failed lookup from a zero-length one.
    """
    return sum(great_circle_km(a, b) for a, b in zip(polyline, polyline[1:]))


@dataclass(frozen=True, slots=True)
class RoadLeg:
    start: Coordinate
    end: Coordinate
    polyline: tuple[Coordinate, ...]
    length_km: float = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "length_km", polyline_length_km(self.polyline))

    @property
    def reachable(self) -> bool:
        return bool(self.polyline)

    @property
    def distance_km(self) -> float:
        """Road distance, or +inf when the provider found no path."""
        return self.length_km if self.reachable else math.inf


def fetch_leg(router: RoadRouter, start: Coordinate, end: Coordinate) -> RoadLeg:
    return RoadLeg(start=start, end=end, polyline=tuple(router.route(start, end)))
