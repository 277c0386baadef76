from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Coordinate(BaseModel):
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class LocationInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    query: str | None = Field(default=None, min_length=2, max_length=300)
    coordinates: Coordinate | None = None

    @model_validator(mode="after")
    def _require_query_or_coordinates(self) -> LocationInput:
        if self.query is None and self.coordinates is None:
            raise ValueError("Either query or coordinates must be provided")
        return self


class TripPlanRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    origin: LocationInput
    destination: LocationInput
    vehicle_range_km: float | None = Field(default=None, gt=0.0, le=2000.0)
    compatible_charger_types: list[str] = Field(default_factory=list, max_length=20)


class ChargingStopResponse(BaseModel):
    station_id: str
    name: str
    latitude: float
    longitude: float
    status: str
    charger_types: list[str]
    distance_from_previous_km: float


class TripSummaryResponse(BaseModel):
    distance_km: float
    driving_hours: float
    stops_needed: int
    estimated_charge_minutes: float
    total_trip_hours: float


class TripPlanResponse(BaseModel):
    origin: Coordinate
    destination: Coordinate
    route_source: str
    route_geojson: dict
    stops: list[ChargingStopResponse]
    warnings: list[str]
    summary: TripSummaryResponse
    google_maps_url: str
    assumptions: dict[str, float]


class StationMarkerResponse(BaseModel):
    station_id: str
    name: str
    status: str
    charger_types: list[str]
    latitude: float
    longitude: float
    marker: Coordinate


class StationMarkerListResponse(BaseModel):
    stations: list[StationMarkerResponse]


class LocationResult(BaseModel):
    name: str
    coordinates: Coordinate


class LocationSearchResponse(BaseModel):
    results: list[LocationResult]
