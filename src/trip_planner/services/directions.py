from __future__ import annotations

import hashlib
import logging
import time
from typing import Any

import httpx
from django.conf import settings
from django.core.cache import cache

from trip_planner.exceptions import ExternalServiceError, NoRouteFoundError
from trip_planner.services.types import Coordinate, DirectionsResult

logger = logging.getLogger(__name__)

METERS_PER_KM = 1000.0
SECONDS_PER_HOUR = 3600.0


class DirectionsClient:
    def __init__(self) -> None:
        self.base_url = settings.DIRECTIONS_BASE_URL.rstrip("/")
        self.timeout = settings.DIRECTIONS_TIMEOUT_SECONDS
        self.retry_count = settings.DIRECTIONS_RETRY_COUNT

    def route(self, origin: Coordinate, destination: Coordinate) -> DirectionsResult:
        cache_key = self._cache_key(origin, destination)
        cached = cache.get(cache_key)
        if cached:
            return DirectionsResult(
                total_distance_km=cached["total_distance_km"],
                total_duration_hours=cached["total_duration_hours"],
                polyline=tuple(
                    Coordinate(latitude=lat, longitude=lon) for lat, lon in cached["polyline"]
                ),
            )

        coordinates = ";".join(
            f"{point.longitude:.6f},{point.latitude:.6f}" for point in (origin, destination)
        )
        endpoint = f"{self.base_url}/route/v1/driving/{coordinates}"
        params = {
            "overview": "full",
            "geometries": "geojson",
            "steps": "false",
            "annotations": "false",
        }

        for attempt in range(self.retry_count + 1):
            try:
                response = httpx.get(endpoint, params=params, timeout=self.timeout)
                response.raise_for_status()
                directions = self._parse_response(response.json())
                cache.set(
                    cache_key,
                    {
                        "total_distance_km": directions.total_distance_km,
                        "total_duration_hours": directions.total_duration_hours,
                        "polyline": [
                            (point.latitude, point.longitude) for point in directions.polyline
                        ],
                    },
                    timeout=settings.ROUTE_CACHE_TTL_SECONDS,
                )
                return directions
            except NoRouteFoundError:
                raise
            except httpx.HTTPError as exc:
                if attempt >= self.retry_count:
                    raise ExternalServiceError("Directions request failed") from exc
                logger.warning("Directions request failed (attempt %d): %s", attempt + 1, exc)
                time.sleep(0.3 * (attempt + 1))

        raise ExternalServiceError("Directions request failed")

    @staticmethod
    def _cache_key(origin: Coordinate, destination: Coordinate) -> str:
        encoded = "|".join(
            f"{point.latitude:.5f}:{point.longitude:.5f}" for point in (origin, destination)
        ).encode()
        digest = hashlib.sha256(encoded).hexdigest()
        return f"directions:{digest}"

    @staticmethod
    def _parse_response(payload: Any) -> DirectionsResult:
        if not isinstance(payload, dict) or payload.get("code") != "Ok":
            raise NoRouteFoundError("Could not compute route")

        routes = payload.get("routes") or []
        if not routes:
            raise NoRouteFoundError("Could not compute route")

        first = routes[0]
        # GeoJSON positions are [longitude, latitude].
        polyline = tuple(
            Coordinate(latitude=float(coord[1]), longitude=float(coord[0]))
            for coord in first.get("geometry", {}).get("coordinates", [])
        )
        if len(polyline) < 2:
            raise NoRouteFoundError("Route geometry unavailable")

        return DirectionsResult(
            total_distance_km=float(first.get("distance", 0.0)) / METERS_PER_KM,
            total_duration_hours=float(first.get("duration", 0.0)) / SECONDS_PER_HOUR,
            polyline=polyline,
        )
