"""Routing orchestration service."""

from __future__ import annotations

import json
import logging
from typing import Sequence

from ...config import settings
from ...models.domain import Coordinate, Stop
from ...schemas.routing import (
    CoordinateModel,
    DustbinModel,
    RoutePlanRequest,
    RoutePlanResponse,
    TourStopModel,
)
from ..outputs.routing_formatter import tour_to_csv, tour_to_json
from .distance import fetch_leg
from .errors import UnreachableDisposalError
from .models import PlanningContext, Tour
from .osrm_client import OSRMClient, RoadRouter
from .solver import build_visiting_order, due_stops, require_endpoints

logger = logging.getLogger(__name__)


def eligible_stops(dustbins: Sequence[DustbinModel], collection_status: str | None = None) -> list[Stop]:
    """Dustbins whose status marks them as due for collection, in input order."""
    wanted = collection_status or settings.collection_status
    return [
        Stop(
            stop_id=dustbin.id,
            location=Coordinate(latitude=dustbin.latitude, longitude=dustbin.longitude),
            due_for_collection=True,
        )
        for dustbin in dustbins
        if dustbin.status == wanted
    ]


def plan_route(
    context: PlanningContext,
    router: RoadRouter | None = None,
    *,
    max_parallel_requests: int | None = None,
) -> Tour:
    """Plan a single-vehicle tour from the garage through every stop to the disposal site."""
    garage, disposal_site = require_endpoints(context)
    stops = due_stops(context)
    if not stops:
        logger.info("No dustbins are due for collection; nothing to plan.")
        return Tour(status="no_eligible_stops", garage=garage, disposal_site=disposal_site)

    if router is None:
        router = OSRMClient()
    logger.info(f"Planning collection route through {len(stops)} stops")
    order, legs = build_visiting_order(context, router, max_parallel_requests=max_parallel_requests)

    last_position = order[-1].location
    final_leg = fetch_leg(router, last_position, disposal_site)
    if not final_leg.reachable:
        logger.warning(
            f"Disposal site ({disposal_site.latitude}, {disposal_site.longitude}) is unreachable "
            f"from ({last_position.latitude}, {last_position.longitude}); discarding tour."
        )
        raise UnreachableDisposalError(last_position, disposal_site)

    tour = Tour(
        status="planned",
        garage=garage,
        disposal_site=disposal_site,
        stops=order,
        legs=[*legs, final_leg],
        geometry=[stop.location for stop in order] + list(final_leg.polyline),
    )
    logger.info(f"Planned route with {len(order)} stops covering {tour.total_distance_km:.2f} km")
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Planned tour: {json.dumps(tour_to_json(tour))}")
    return tour


def _to_coordinate(model: CoordinateModel | None) -> Coordinate | None:
    if model is None:
        return None
    return Coordinate(latitude=model.latitude, longitude=model.longitude)


def _coordinate_model(coordinate: Coordinate) -> CoordinateModel:
    return CoordinateModel(latitude=coordinate.latitude, longitude=coordinate.longitude)


def build_context(payload: RoutePlanRequest) -> PlanningContext:
    return PlanningContext(
        stops=tuple(eligible_stops(payload.dustbins)),
        garage=_to_coordinate(payload.garage),
        disposal_site=_to_coordinate(payload.disposal_site),
    )


def tour_to_response(tour: Tour) -> RoutePlanResponse:
    stops = [
        TourStopModel(
            sequence=sequence,
            dustbin_id=stop.stop_id,
            latitude=stop.location.latitude,
            longitude=stop.location.longitude,
            distance_from_prev_km=leg.length_km,
        )
        for sequence, (stop, leg) in enumerate(zip(tour.stops, tour.legs), start=1)
    ]
    return RoutePlanResponse(
        status=tour.status,
        eligible_count=len(tour.stops),
        garage=_coordinate_model(tour.garage),
        disposal_site=_coordinate_model(tour.disposal_site),
        total_distance_km=tour.total_distance_km,
        stops=stops,
        geometry=[_coordinate_model(point) for point in tour.geometry],
        road_geometry=[_coordinate_model(point) for point in tour.road_geometry],
    )


def plan_collection_route(payload: RoutePlanRequest, router: RoadRouter | None = None) -> Tour:
    return plan_route(build_context(payload), router)


def optimize_collection_route(payload: RoutePlanRequest, router: RoadRouter | None = None) -> RoutePlanResponse:
    return tour_to_response(plan_collection_route(payload, router))


def export_collection_route_csv(payload: RoutePlanRequest, router: RoadRouter | None = None) -> str:
    return tour_to_csv(plan_collection_route(payload, router))
