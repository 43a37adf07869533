"""Domain models for collection points and coordinates."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A WGS84 position, always latitude first."""

    latitude: float
    longitude: float

    def as_lat_lon(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)

    def as_lon_lat(self) -> tuple[float, float]:
        return (self.longitude, self.latitude)


@dataclass(frozen=True, slots=True)
class Stop:
    """A dustbin that may be visited by the collection vehicle."""

    stop_id: str
    location: Coordinate
    due_for_collection: bool = True
