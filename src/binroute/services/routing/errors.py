"""Failure conditions raised while planning a collection route."""

from __future__ import annotations

from typing import Sequence

from ...models.domain import Coordinate


class RoutePlanningError(ValueError):
    """Base class for planning failures surfaced whole to the caller."""


class MissingEndpointError(RoutePlanningError):
    def __init__(self, missing: Sequence[str]) -> None:
        self.missing = tuple(missing)
        names = " and ".join(name.replace("_", " ") for name in self.missing)
        super().__init__(f"Please set the {names} location before calculating the route.")


class UnreachableStopError(RoutePlanningError):
    """Every remaining stop is unreachable by road from the current position."""

    def __init__(self, position: Coordinate, remaining_ids: Sequence[str]) -> None:
        self.position = position
        self.remaining_ids = tuple(remaining_ids)
        super().__init__(
            "Unable to calculate route to some dustbins "
            f"({', '.join(self.remaining_ids)}). Please check the locations and try again."
        )


class UnreachableDisposalError(RoutePlanningError):
    def __init__(self, position: Coordinate, disposal_site: Coordinate) -> None:
        self.position = position
        self.disposal_site = disposal_site
        super().__init__(
            "Unable to calculate route to disposal site. Please check the location and try again."
        )
