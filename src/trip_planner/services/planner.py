from __future__ import annotations

import logging
from urllib.parse import urlencode

from django.conf import settings

from trip_planner.exceptions import NoRouteFoundError, StaleRequestError
from trip_planner.schemas import (
    ChargingStopResponse,
    Coordinate,
    LocationInput,
    TripPlanRequest,
    TripPlanResponse,
    TripSummaryResponse,
)
from trip_planner.services import types
from trip_planner.services.budget import compute_budget
from trip_planner.services.catalog import StationCatalog
from trip_planner.services.charging_stops import plan_charging_stops
from trip_planner.services.directions import DirectionsClient
from trip_planner.services.generation import GenerationToken, RequestGeneration
from trip_planner.services.geo import haversine_km
from trip_planner.services.geocoding import GeocodingClient

logger = logging.getLogger(__name__)

GOOGLE_MAPS_DIRECTIONS_URL = "https://www.google.com/maps/dir/"


class TripPlannerService:
    def __init__(
        self,
        geocoding_client: GeocodingClient | None = None,
        directions_client: DirectionsClient | None = None,
        station_catalog: StationCatalog | None = None,
        generations: RequestGeneration | None = None,
    ) -> None:
        self.geocoding_client = geocoding_client or GeocodingClient()
        self.directions_client = directions_client or DirectionsClient()
        self.station_catalog = station_catalog or StationCatalog()
        self.generations = generations or RequestGeneration()

    def plan(self, request: TripPlanRequest, *, session_key: str | None = None) -> TripPlanResponse:
        token = self.generations.start(session_key) if session_key else None
        try:
            return self._build_plan(request, token)
        finally:
            if token is not None:
                self.generations.release(token)

    def _build_plan(
        self, request: TripPlanRequest, token: GenerationToken | None
    ) -> TripPlanResponse:
        vehicle_range_km = request.vehicle_range_km or float(settings.DEFAULT_VEHICLE_RANGE_KM)

        origin = self._resolve(request.origin)
        destination = self._resolve(request.destination)
        route, driving_hours, route_source = self._fetch_route(origin, destination)
        self._ensure_current(token)

        stations = self.station_catalog.load(request.compatible_charger_types)
        result = plan_charging_stops(route, stations, vehicle_range_km)
        budget = compute_budget(route.total_distance_km, vehicle_range_km)

        stops: list[ChargingStopResponse] = []
        previous = origin
        for station in result.stops:
            stops.append(
                ChargingStopResponse(
                    station_id=station.id,
                    name=station.name,
                    latitude=station.latitude,
                    longitude=station.longitude,
                    status=station.status.value,
                    charger_types=sorted(station.charger_types),
                    distance_from_previous_km=round(haversine_km(previous, station.position), 3),
                )
            )
            previous = station.position

        charge_minutes = len(result.stops) * float(settings.CHARGE_MINUTES_PER_STOP)
        summary = TripSummaryResponse(
            distance_km=round(route.total_distance_km, 3),
            driving_hours=round(driving_hours, 2),
            stops_needed=budget.stops_needed,
            estimated_charge_minutes=charge_minutes,
            total_trip_hours=round(driving_hours + charge_minutes / 60.0, 2),
        )

        logger.info(
            "Trip plan: %.1f km, %d stops, %d warnings (%s route)",
            route.total_distance_km,
            len(stops),
            len(result.warnings),
            route_source,
        )

        self._ensure_current(token)
        return TripPlanResponse(
            origin=_to_schema(origin),
            destination=_to_schema(destination),
            route_source=route_source,
            route_geojson={
                "type": "LineString",
                "coordinates": [
                    [point.longitude, point.latitude]
                    for point in (route.polyline or (origin, destination))
                ],
            },
            stops=stops,
            warnings=list(result.warnings),
            summary=summary,
            google_maps_url=build_google_maps_url(origin, destination, result.stops),
            assumptions={
                "vehicle_range_km": vehicle_range_km,
                "no_stop_threshold_km": budget.no_stop_threshold_km,
                "inter_stop_threshold_km": budget.inter_stop_threshold_km,
                "charge_minutes_per_stop": float(settings.CHARGE_MINUTES_PER_STOP),
            },
        )

    def _resolve(self, location: LocationInput) -> types.Coordinate:
        if location.coordinates is not None:
            return types.Coordinate(
                latitude=location.coordinates.latitude,
                longitude=location.coordinates.longitude,
            )
        return self.geocoding_client.geocode(location.query or "").point

    def _fetch_route(
        self, origin: types.Coordinate, destination: types.Coordinate
    ) -> tuple[types.RouteInput, float, str]:
        try:
            directions = self.directions_client.route(origin, destination)
        except NoRouteFoundError:
            logger.warning("No driving route found, falling back to straight-line distance")
            distance_km = haversine_km(origin, destination)
            route = types.RouteInput(
                origin=origin,
                destination=destination,
                total_distance_km=distance_km,
            )
            return route, distance_km / float(settings.AVERAGE_SPEED_KMH), "straight_line"

        route = types.RouteInput(
            origin=origin,
            destination=destination,
            total_distance_km=directions.total_distance_km,
            polyline=directions.polyline,
        )
        return route, directions.total_duration_hours, "directions"

    def _ensure_current(self, token: GenerationToken | None) -> None:
        if token is not None and not self.generations.is_current(token):
            raise StaleRequestError("A newer trip plan request superseded this one")


def build_google_maps_url(
    origin: types.Coordinate,
    destination: types.Coordinate,
    stops: tuple[types.Station, ...] | list[types.Station] = (),
) -> str:
    params = {
        "api": "1",
        "origin": f"{origin.latitude},{origin.longitude}",
        "destination": f"{destination.latitude},{destination.longitude}",
    }
    if stops:
        params["waypoints"] = "|".join(f"{stop.latitude},{stop.longitude}" for stop in stops)
    return f"{GOOGLE_MAPS_DIRECTIONS_URL}?{urlencode(params, safe=',|')}"


def _to_schema(point: types.Coordinate) -> Coordinate:
    return Coordinate(latitude=round(point.latitude, 6), longitude=round(point.longitude, 6))
