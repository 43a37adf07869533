"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional

from ...models.domain import Coordinate, Stop
from .distance import RoadLeg

TourStatus = Literal["planned", "no_eligible_stops"]


@dataclass(frozen=True, slots=True)
class PlanningContext:
    stops: tuple[Stop, ...]
    garage: Optional[Coordinate]
    disposal_site: Optional[Coordinate]


@dataclass(slots=True)
class Tour:
    status: TourStatus
    garage: Coordinate
    disposal_site: Coordinate
    stops: List[Stop] = field(default_factory=list)
    legs: List[RoadLeg] = field(default_factory=list)
    geometry: List[Coordinate] = field(default_factory=list)

    @property
    def total_distance_km(self) -> float:
        return sum(leg.length_km for leg in self.legs)

    @property
    def road_geometry(self) -> List[Coordinate]:
        """Every routed leg joined end to end, garage to disposal site."""
        points: List[Coordinate] = []
        for leg in self.legs:
            polyline = list(leg.polyline)
            if points and polyline and points[-1] == polyline[0]:
                polyline = polyline[1:]
            points.extend(polyline)
        return points
