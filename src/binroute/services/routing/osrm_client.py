"""HTTP client for interacting with OSRM services."""

from __future__ import annotations

import logging
import math
from typing import Any, Protocol

import httpx

from ...config import settings
from ...models.domain import Coordinate

logger = logging.getLogger(__name__)


class RoadRouter(Protocol):
    def route(self, start: Coordinate, end: Coordinate) -> list[Coordinate]:
        ...


class OSRMClient:
    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.osrm_base_url).rstrip("/")
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.profile = profile or settings.osrm_profile
        self.timeout = timeout if timeout is not None else settings.osrm_timeout_seconds
        self.transport = transport

    def _get_client(self) -> httpx.Client:
        """Create a short-lived HTTP client; one per call keeps threads independent."""
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 10.0)),
            transport=self.transport,
        )

    def route(self, start: Coordinate, end: Coordinate) -> list[Coordinate]:
        """Get the road-following path from ``start`` to ``end``.

        OSRM speaks ``lon,lat``; the returned polyline is latitude first.
        Any failure (HTTP status, timeout, transport error, bad JSON, no
        routes, non-finite or out-of-range points) yields an empty list so
        the caller can treat the pair as unreachable. No retries are made
        here.

        ``timeout`` bounds each phase of the request (connect, write, each
        read) rather than the whole exchange, so a response that keeps
        trickling in can take longer than ``timeout`` in total.
        """
        coordinate_str = ";".join(f"{lon},{lat}" for lon, lat in (start.as_lon_lat(), end.as_lon_lat()))
        url = f"{self.base_url}/route/v1/{self.profile}/{coordinate_str}"
        params = {
            "overview": "full",
            "geometries": "geojson",
        }

        client = self._get_client()
        try:
            response = client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(f"OSRM route request returned HTTP {exc.response.status_code} for {coordinate_str}")
            return []
        except httpx.TimeoutException as exc:
            logger.warning(f"OSRM route request timed out after {self.timeout}s for {coordinate_str}: {exc}")
            return []
        except httpx.HTTPError as exc:
            logger.warning(f"Failed to reach OSRM service at {self.base_url}: {exc}")
            return []
        except ValueError as exc:
            logger.warning(f"OSRM returned malformed JSON for {coordinate_str}: {exc}")
            return []
        finally:
            client.close()

        return _parse_route_geometry(data, coordinate_str)


def _parse_route_geometry(data: Any, coordinate_str: str) -> list[Coordinate]:
    if not isinstance(data, dict):
        logger.warning(f"Unexpected OSRM payload type {type(data).__name__} for {coordinate_str}")
        return []
    if data.get("code", "Ok") != "Ok":
        logger.warning(f"OSRM route request failed for {coordinate_str}: {data.get('message', data.get('code'))}")
        return []

    routes = data.get("routes")
    if not routes:
        logger.warning(f"OSRM returned no routes for {coordinate_str}")
        return []

    try:
        raw_coordinates = routes[0]["geometry"]["coordinates"]
        # GeoJSON geometry is [lon, lat]
        polyline = [Coordinate(latitude=float(pair[1]), longitude=float(pair[0])) for pair in raw_coordinates]
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        logger.warning(f"OSRM route geometry malformed for {coordinate_str}: {exc}")
        return []

    # json accepts NaN/Infinity literals, so range-check every point
    for point in polyline:
        if not (
            math.isfinite(point.latitude)
            and math.isfinite(point.longitude)
            and -90.0 <= point.latitude <= 90.0
            and -180.0 <= point.longitude <= 180.0
        ):
            logger.warning(
                f"OSRM route geometry for {coordinate_str} has invalid point "
                f"({point.latitude}, {point.longitude})"
            )
            return []
    return polyline


def check_health(base_url: str | None = None, transport: httpx.BaseTransport | None = None) -> bool:
    """Check OSRM service health by making a simple route request.

    Public OSRM endpoints may not have a /health endpoint, so we test
    connectivity by routing between two nearby points.
    """
    base = (base_url or settings.osrm_base_url).rstrip("/")
    if not base:
        return False
    # Berlin area, present in the public OSRM extract
    test_coords = "13.388860,52.517037;13.385983,52.496891"
    url = f"{base}/route/v1/{settings.osrm_profile}/{test_coords}"
    try:
        with httpx.Client(timeout=5.0, transport=transport) as client:
            response = client.get(url, params={"overview": "false"})
            response.raise_for_status()
            data = response.json()
    except (httpx.HTTPError, ValueError):
        return False
    return isinstance(data, dict) and data.get("code") == "Ok" and bool(data.get("routes"))
