from __future__ import annotations

import json
from typing import Any

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST
from pydantic import ValidationError

from trip_planner.exceptions import (
    ExternalServiceError,
    InvalidLocationError,
    InvalidPlanInputError,
    StaleRequestError,
)
from trip_planner.models import ChargingStation
from trip_planner.schemas import (
    Coordinate,
    LocationResult,
    LocationSearchResponse,
    StationMarkerListResponse,
    StationMarkerResponse,
    TripPlanRequest,
)
from trip_planner.services.geocoding import GeocodingClient
from trip_planner.services.planner import TripPlannerService

SESSION_HEADER = "HTTP_X_PLANNER_SESSION"
MAX_LOCATION_RESULTS = 5

_planner_service: TripPlannerService | None = None


def get_trip_planner() -> TripPlannerService:
    global _planner_service
    if _planner_service is None:
        _planner_service = TripPlannerService()
    return _planner_service


def get_geocoding_client() -> GeocodingClient:
    return get_trip_planner().geocoding_client


@require_GET
def health_view(_: HttpRequest) -> HttpResponse:
    total_stations = ChargingStation.objects.count()
    available_stations = ChargingStation.objects.filter(
        status=ChargingStation.Status.AVAILABLE
    ).count()
    return JsonResponse(
        {
            "status": "ok",
            "stations": {
                "total": total_stations,
                "available": available_stations,
            },
        }
    )


@require_GET
def station_markers_view(_: HttpRequest) -> HttpResponse:
    response = StationMarkerListResponse(
        stations=[
            StationMarkerResponse(
                station_id=station.id,
                name=station.name,
                status=station.status.value,
                charger_types=sorted(station.charger_types),
                latitude=station.latitude,
                longitude=station.longitude,
                marker=Coordinate(latitude=marker.latitude, longitude=marker.longitude),
            )
            for station, marker in get_trip_planner().station_catalog.markers()
        ]
    )
    return JsonResponse(response.model_dump(mode="json"), status=200)


@csrf_exempt
@require_POST
def trip_plan_view(request: HttpRequest) -> HttpResponse:
    payload = _parse_json_payload(request)
    if isinstance(payload, JsonResponse):
        return payload

    try:
        plan_request = TripPlanRequest.model_validate(payload)
    except ValidationError as exc:
        return JsonResponse(
            {
                "error": {
                    "code": "validation_error",
                    "message": "Invalid request payload",
                    "details": exc.errors(include_url=False, include_context=False),
                }
            },
            status=400,
        )

    planner = get_trip_planner()
    try:
        response = planner.plan(plan_request, session_key=request.META.get(SESSION_HEADER))
    except InvalidLocationError as exc:
        return _error_response("invalid_location", str(exc), status=400)
    except InvalidPlanInputError as exc:
        return _error_response("invalid_plan_input", str(exc), status=422)
    except StaleRequestError as exc:
        return _error_response("stale_request", str(exc), status=409)
    except ExternalServiceError as exc:
        return _error_response("upstream_error", str(exc), status=502)

    return JsonResponse(response.model_dump(mode="json"), status=200)


@require_GET
def location_search_view(request: HttpRequest) -> HttpResponse:
    query = request.GET.get("q", "").strip()
    if len(query) < 2:
        return _error_response("invalid_query", "Query must have at least 2 characters", status=400)

    try:
        results = get_geocoding_client().search(query, limit=MAX_LOCATION_RESULTS)
    except InvalidLocationError as exc:
        return _error_response("invalid_location", str(exc), status=400)
    except ExternalServiceError as exc:
        return _error_response("upstream_error", str(exc), status=502)

    response = LocationSearchResponse(
        results=[
            LocationResult(
                name=result.name,
                coordinates=Coordinate(
                    latitude=result.point.latitude, longitude=result.point.longitude
                ),
            )
            for result in results
        ]
    )
    return JsonResponse(response.model_dump(mode="json"), status=200)


def _parse_json_payload(request: HttpRequest) -> dict[str, Any] | JsonResponse:
    if not request.body:
        return {}

    try:
        payload = json.loads(request.body)
    except json.JSONDecodeError:
        return _error_response("invalid_json", "Request body must be valid JSON", status=400)

    if not isinstance(payload, dict):
        return _error_response("invalid_json", "JSON body must be an object", status=400)

    return payload


def _error_response(code: str, message: str, status: int) -> JsonResponse:
    return JsonResponse({"error": {"code": code, "message": message}}, status=status)
