from __future__ import annotations

import json

import pytest

from trip_planner.exceptions import (
    ExternalServiceError,
    InvalidLocationError,
    InvalidPlanInputError,
    StaleRequestError,
)
from trip_planner.models import ChargingStation
from trip_planner.schemas import (
    Coordinate,
    TripPlanResponse,
    TripSummaryResponse,
)
from trip_planner.services.types import Coordinate as GeoCoordinate
from trip_planner.services.types import GeocodeResult

PLAN_PAYLOAD = {
    "origin": {"query": "Pune"},
    "destination": {"coordinates": {"latitude": 19.076, "longitude": 72.8777}},
    "vehicle_range_km": 250,
    "compatible_charger_types": ["CCS2"],
}


def _post_plan(api_client, payload, **extra):
    return api_client.post(
        "/api/v1/trip-plan",
        data=json.dumps(payload),
        content_type="application/json",
        **extra,
    )


@pytest.mark.django_db
def test_health_endpoint_returns_station_counts(api_client) -> None:
    ChargingStation.objects.create(
        station_id="st-1",
        name="Station",
        city="Pune",
        latitude=18.52,
        longitude=73.85,
        status=ChargingStation.Status.AVAILABLE,
    )
    ChargingStation.objects.create(
        station_id="st-2",
        name="Station 2",
        city="Mumbai",
        latitude=19.07,
        longitude=72.87,
        status=ChargingStation.Status.OCCUPIED,
    )

    response = api_client.get("/api/v1/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["stations"]["total"] == 2
    assert payload["stations"]["available"] == 1


def test_trip_plan_validation_error_returns_400(api_client) -> None:
    response = _post_plan(api_client, {"origin": {"query": "Pune"}})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "validation_error"


def test_trip_plan_location_needs_query_or_coordinates(api_client) -> None:
    response = _post_plan(api_client, {**PLAN_PAYLOAD, "origin": {}})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "validation_error"


def test_trip_plan_rejects_invalid_json(api_client) -> None:
    response = api_client.post(
        "/api/v1/trip-plan", data="{not json", content_type="application/json"
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "invalid_json"


def test_trip_plan_success_uses_planner_response(api_client, mocker) -> None:
    fake_response = TripPlanResponse(
        origin=Coordinate(latitude=18.5204, longitude=73.8567),
        destination=Coordinate(latitude=19.076, longitude=72.8777),
        route_source="directions",
        route_geojson={
            "type": "LineString",
            "coordinates": [[73.8567, 18.5204], [72.8777, 19.076]],
        },
        stops=[],
        warnings=[],
        summary=TripSummaryResponse(
            distance_km=148.0,
            driving_hours=3.1,
            stops_needed=0,
            estimated_charge_minutes=0.0,
            total_trip_hours=3.1,
        ),
        google_maps_url="https://www.google.com/maps/dir/?api=1",
        assumptions={"vehicle_range_km": 250.0},
    )

    planner = mocker.Mock()
    planner.plan.return_value = fake_response
    mocker.patch("trip_planner.views.get_trip_planner", return_value=planner)

    response = _post_plan(api_client, PLAN_PAYLOAD, HTTP_X_PLANNER_SESSION="driver-7")

    assert response.status_code == 200
    payload = response.json()
    assert payload["route_source"] == "directions"
    assert payload["summary"]["distance_km"] == 148.0
    planner.plan.assert_called_once()
    plan_request = planner.plan.call_args.args[0]
    assert plan_request.vehicle_range_km == 250.0
    assert plan_request.compatible_charger_types == ["CCS2"]
    assert planner.plan.call_args.kwargs["session_key"] == "driver-7"


@pytest.mark.parametrize(
    ("error", "status", "code"),
    [
        (StaleRequestError("superseded"), 409, "stale_request"),
        (ExternalServiceError("down"), 502, "upstream_error"),
        (InvalidPlanInputError("bad"), 422, "invalid_plan_input"),
        (InvalidLocationError("x"), 400, "invalid_location"),
    ],
)
def test_trip_plan_maps_planner_errors(api_client, mocker, error, status, code) -> None:
    planner = mocker.Mock()
    planner.plan.side_effect = error
    mocker.patch("trip_planner.views.get_trip_planner", return_value=planner)

    response = _post_plan(api_client, PLAN_PAYLOAD)

    assert response.status_code == status
    assert response.json()["error"]["code"] == code


def test_location_search_returns_results(api_client, mocker) -> None:
    geocoding_client = mocker.Mock()
    geocoding_client.search.return_value = [
        GeocodeResult(
            name="Pune, Maharashtra, India",
            point=GeoCoordinate(latitude=18.5204, longitude=73.8567),
        )
    ]
    mocker.patch("trip_planner.views.get_geocoding_client", return_value=geocoding_client)

    response = api_client.get("/api/v1/locations", {"q": "Pune"})

    assert response.status_code == 200
    results = response.json()["results"]
    assert results[0]["name"] == "Pune, Maharashtra, India"
    assert results[0]["coordinates"] == {"latitude": 18.5204, "longitude": 73.8567}
    geocoding_client.search.assert_called_once_with("Pune", limit=5)


def test_location_search_maps_upstream_failure(api_client, mocker) -> None:
    geocoding_client = mocker.Mock()
    geocoding_client.search.side_effect = ExternalServiceError("down")
    mocker.patch("trip_planner.views.get_geocoding_client", return_value=geocoding_client)

    response = api_client.get("/api/v1/locations", {"q": "Pune"})

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "upstream_error"


def test_location_search_requires_query(api_client) -> None:
    response = api_client.get("/api/v1/locations", {"q": " "})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "invalid_query"


@pytest.mark.django_db
def test_station_markers_offset_overlapping_stations(api_client) -> None:
    for station_id in ("a", "b"):
        ChargingStation.objects.create(
            station_id=station_id,
            name=f"Station {station_id}",
            latitude=18.52,
            longitude=73.85,
            status=ChargingStation.Status.AVAILABLE,
            charger_types=["CCS2"],
        )

    response = api_client.get("/api/v1/stations")

    assert response.status_code == 200
    first, second = response.json()["stations"]
    assert first["marker"] == {"latitude": 18.52, "longitude": 73.85}
    assert second["station_id"] == "b"
    assert second["marker"]["latitude"] == pytest.approx(18.52 + 3 * 0.00001)
    assert second["latitude"] == 18.52
