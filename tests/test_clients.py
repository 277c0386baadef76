from __future__ import annotations

import httpx
import pytest

from trip_planner.exceptions import ExternalServiceError, InvalidLocationError, NoRouteFoundError
from trip_planner.services.directions import DirectionsClient
from trip_planner.services.geocoding import GeocodingClient
from trip_planner.services.types import Coordinate

PUNE = Coordinate(latitude=18.5204, longitude=73.8567)
MUMBAI = Coordinate(latitude=19.0760, longitude=72.8777)


def _response(mocker, payload):
    response = mocker.Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = payload
    return response


def test_directions_parses_osrm_route(mocker) -> None:
    http_get = mocker.patch(
        "trip_planner.services.directions.httpx.get",
        return_value=_response(
            mocker,
            {
                "code": "Ok",
                "routes": [
                    {
                        "distance": 150_000.0,
                        "duration": 7_200.0,
                        "geometry": {
                            "coordinates": [[73.8567, 18.5204], [73.2, 18.8], [72.8777, 19.076]]
                        },
                    }
                ],
            },
        ),
    )

    result = DirectionsClient().route(PUNE, MUMBAI)

    assert result.total_distance_km == pytest.approx(150.0)
    assert result.total_duration_hours == pytest.approx(2.0)
    assert result.polyline[1] == Coordinate(latitude=18.8, longitude=73.2)
    assert len(result.polyline) == 3
    http_get.assert_called_once()


def test_directions_uses_cache_for_repeated_requests(mocker) -> None:
    http_get = mocker.patch(
        "trip_planner.services.directions.httpx.get",
        return_value=_response(
            mocker,
            {
                "code": "Ok",
                "routes": [
                    {
                        "distance": 1000.0,
                        "duration": 60.0,
                        "geometry": {"coordinates": [[73.85, 18.52], [72.87, 19.07]]},
                    }
                ],
            },
        ),
    )
    client = DirectionsClient()

    first = client.route(PUNE, MUMBAI)
    second = client.route(PUNE, MUMBAI)

    assert first == second
    http_get.assert_called_once()


def test_directions_without_route_raises(mocker) -> None:
    mocker.patch(
        "trip_planner.services.directions.httpx.get",
        return_value=_response(mocker, {"code": "NoRoute", "routes": []}),
    )

    with pytest.raises(NoRouteFoundError):
        DirectionsClient().route(PUNE, MUMBAI)


def test_directions_retries_then_fails(mocker, settings) -> None:
    settings.DIRECTIONS_RETRY_COUNT = 2
    mocker.patch("trip_planner.services.directions.time.sleep")
    http_get = mocker.patch(
        "trip_planner.services.directions.httpx.get",
        side_effect=httpx.ConnectError("connection refused"),
    )

    with pytest.raises(ExternalServiceError):
        DirectionsClient().route(PUNE, MUMBAI)

    assert http_get.call_count == 3


def test_geocoding_search_returns_named_results(mocker) -> None:
    mocker.patch(
        "trip_planner.services.geocoding.httpx.get",
        return_value=_response(
            mocker,
            [
                {"display_name": "Pune, Maharashtra, India", "lat": "18.5204", "lon": "73.8567"},
                {"display_name": "Broken", "lat": "not-a-number", "lon": "1"},
            ],
        ),
    )

    results = GeocodingClient().search("Pune")

    assert len(results) == 1
    assert results[0].name == "Pune, Maharashtra, India"
    assert results[0].point == PUNE


def test_geocoding_unknown_place_raises(mocker) -> None:
    mocker.patch(
        "trip_planner.services.geocoding.httpx.get",
        return_value=_response(mocker, []),
    )

    with pytest.raises(InvalidLocationError):
        GeocodingClient().geocode("Nowhere at all")


def test_geocoding_blank_query_skips_request(mocker) -> None:
    http_get = mocker.patch("trip_planner.services.geocoding.httpx.get")

    assert GeocodingClient().search("   ") == []
    http_get.assert_not_called()
