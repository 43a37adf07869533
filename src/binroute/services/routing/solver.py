"""Greedy nearest-neighbour ordering of collection stops by road distance.

Each step routes from the current position to every remaining stop, so a
plan with ``n`` stops costs ``n * (n + 1) / 2`` provider calls. That
quadratic growth is the scalability ceiling of this heuristic; with large
stop counts a precomputed pairwise matrix should replace the per-step
lookups, keeping the same tie-break order.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Optional, Sequence

from ...config import settings
from ...models.domain import Coordinate, Stop
from .distance import RoadLeg, fetch_leg
from .errors import MissingEndpointError, UnreachableStopError
from .models import PlanningContext
from .osrm_client import RoadRouter

logger = logging.getLogger(__name__)


def require_endpoints(context: PlanningContext) -> tuple[Coordinate, Coordinate]:
    missing = [
        name
        for name, value in (("garage", context.garage), ("disposal_site", context.disposal_site))
        if value is None
    ]
    if missing:
        raise MissingEndpointError(missing)
    return context.garage, context.disposal_site


def due_stops(context: PlanningContext) -> list[Stop]:
    """Stops flagged for collection, in input order; others never enter the tour."""
    return [stop for stop in context.stops if stop.due_for_collection]


def select_nearest(legs: Sequence[RoadLeg]) -> Optional[int]:
    """Index of the shortest reachable leg; earlier legs win ties.

    Returns None when no leg is reachable.
    """
    best_index: Optional[int] = None
    best_distance = 0.0
    for index, leg in enumerate(legs):
        if not leg.reachable or not math.isfinite(leg.length_km):
            continue
        if best_index is None or leg.length_km < best_distance:
            best_index = index
            best_distance = leg.length_km
    return best_index


def _candidate_legs(
    router: RoadRouter,
    current: Coordinate,
    candidates: Sequence[Stop],
    executor: Executor | None,
) -> list[RoadLeg]:
    if executor is None or len(candidates) < 2:
        return [fetch_leg(router, current, stop.location) for stop in candidates]
    # map() yields in submission order, so selection matches the sequential scan
    return list(executor.map(lambda stop: fetch_leg(router, current, stop.location), candidates))


def _visit_all(
    router: RoadRouter,
    garage: Coordinate,
    stops: Sequence[Stop],
    executor: Executor | None,
) -> tuple[list[Stop], list[RoadLeg]]:
    current = garage
    unvisited = list(stops)
    order: list[Stop] = []
    legs: list[RoadLeg] = []

    while unvisited:
        candidate_legs = _candidate_legs(router, current, unvisited, executor)
        nearest = select_nearest(candidate_legs)
        if nearest is None:
            remaining_ids = [stop.stop_id for stop in unvisited]
            logger.warning(
                f"No remaining stop is reachable from ({current.latitude}, {current.longitude}); "
                f"aborting after {len(order)} of {len(stops)} stops. Unreachable: {remaining_ids}"
            )
            raise UnreachableStopError(current, remaining_ids)

        chosen = unvisited.pop(nearest)
        leg = candidate_legs[nearest]
        logger.debug(f"Stop {len(order) + 1}: {chosen.stop_id} at {leg.length_km:.3f} km")
        order.append(chosen)
        legs.append(leg)
        current = chosen.location

    return order, legs


def build_visiting_order(
    context: PlanningContext,
    router: RoadRouter,
    *,
    max_parallel_requests: int | None = None,
) -> tuple[list[Stop], list[RoadLeg]]:
    """Order the stops greedily, always driving to the nearest unvisited one.

    Returns the visiting order and the routed leg used to reach each stop.
    Raises ``MissingEndpointError`` before any network call when the garage
    or disposal site is unset, and ``UnreachableStopError`` when every
    remaining stop is unreachable from the current position; no partial
    order is returned in that case.
    """
    garage, _ = require_endpoints(context)
    stops = due_stops(context)
    if not stops:
        return [], []

    workers = max_parallel_requests if max_parallel_requests is not None else settings.osrm_max_parallel_requests
    if workers <= 1:
        return _visit_all(router, garage, stops, None)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        return _visit_all(router, garage, stops, executor)
