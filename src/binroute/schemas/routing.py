"""Routing request/response schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class CoordinateModel(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class DustbinModel(BaseModel):
    id: str = Field(..., description="Dustbin identifier shown to the operator.")
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    status: str = Field(..., description="Fill status; only bins due for collection are routed.")


class RoutePlanRequest(BaseModel):
    dustbins: List[DustbinModel] = Field(default_factory=list)
    garage: Optional[CoordinateModel] = Field(default=None, description="Route start (vehicle garage).")
    disposal_site: Optional[CoordinateModel] = Field(default=None, description="Route end (disposal site).")


class TourStopModel(BaseModel):
    sequence: int
    dustbin_id: str
    latitude: float
    longitude: float
    distance_from_prev_km: float


class RoutePlanResponse(BaseModel):
    status: Literal["planned", "no_eligible_stops"]
    eligible_count: int
    garage: CoordinateModel
    disposal_site: CoordinateModel
    total_distance_km: float
    stops: List[TourStopModel]
    geometry: List[CoordinateModel] = Field(
        default_factory=list,
        description="Stop waypoints in visiting order followed by the routed leg to the disposal site.",
    )
    road_geometry: List[CoordinateModel] = Field(
        default_factory=list,
        description="Full road path from garage to disposal site.",
    )
