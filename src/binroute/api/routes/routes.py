"""Routing endpoints."""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from fastapi import APIRouter, HTTPException, Response, status

from ...schemas.routing import RoutePlanRequest, RoutePlanResponse
from ...services.export.geojson import tour_to_geojson
from ...services.routing import service as routing_service
from ...services.routing.errors import MissingEndpointError, RoutePlanningError

router = APIRouter(prefix="/routes", tags=["routes"])

T = TypeVar("T")


def _run(operation: Callable[[RoutePlanRequest], T], payload: RoutePlanRequest) -> T:
    try:
        return operation(payload)
    except MissingEndpointError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except RoutePlanningError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error calculating collection route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while calculating the route. Please try again.",
        ) from exc


@router.post("/optimize", response_model=RoutePlanResponse, status_code=status.HTTP_200_OK)
def optimize(payload: RoutePlanRequest) -> RoutePlanResponse:
    return _run(routing_service.optimize_collection_route, payload)


@router.post("/optimize/geojson", status_code=status.HTTP_200_OK)
def optimize_geojson(payload: RoutePlanRequest) -> dict:
    """Plan the route and return it as a GeoJSON FeatureCollection."""
    return tour_to_geojson(_run(routing_service.plan_collection_route, payload))


@router.post("/optimize/csv", status_code=status.HTTP_200_OK)
def optimize_csv(payload: RoutePlanRequest) -> Response:
    """Plan the route and return one CSV row per stop."""
    content = _run(routing_service.export_collection_route_csv, payload)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="collection_route.csv"'},
    )
