from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(slots=True, frozen=True)
class Coordinate:
    latitude: float
    longitude: float


class StationStatus(str, Enum):
    AVAILABLE = "Available"
    OCCUPIED = "Occupied"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: object) -> StationStatus:
        if isinstance(value, cls):
            return value
        normalized = str(value or "").strip().lower()
        for status in cls:
            if status.value.lower() == normalized:
                return status
        return cls.UNKNOWN


@dataclass(slots=True, frozen=True)
class Station:
    id: str
    name: str
    latitude: float
    longitude: float
    status: StationStatus = StationStatus.UNKNOWN
    charger_types: frozenset[str] = field(default_factory=frozenset)

    @property
    def position(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)

    @property
    def is_available(self) -> bool:
        return self.status is StationStatus.AVAILABLE


@dataclass(slots=True, frozen=True)
class RouteInput:
    origin: Coordinate
    destination: Coordinate
    total_distance_km: float
    polyline: tuple[Coordinate, ...] = ()


@dataclass(slots=True, frozen=True)
class RangeBudget:
    stops_needed: int
    no_stop_threshold_km: float
    inter_stop_threshold_km: float


@dataclass(slots=True, frozen=True)
class WalkResult:
    coordinate: Coordinate
    reached_index: int
    accumulated_km: float


@dataclass(slots=True, frozen=True)
class PlanResult:
    stops: tuple[Station, ...] = ()
    warnings: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class GeocodeResult:
    name: str
    point: Coordinate


@dataclass(slots=True, frozen=True)
class DirectionsResult:
    total_distance_km: float
    total_duration_hours: float
    polyline: tuple[Coordinate, ...]
