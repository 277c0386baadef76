from __future__ import annotations

from django.db import models

from trip_planner.services.types import Station, StationStatus


class ChargingStation(models.Model):
    objects = models.Manager["ChargingStation"]()

    class Status(models.TextChoices):
        AVAILABLE = StationStatus.AVAILABLE.value
        OCCUPIED = StationStatus.OCCUPIED.value
        UNKNOWN = StationStatus.UNKNOWN.value

    station_id = models.CharField(max_length=100, unique=True)
    name = models.CharField(max_length=255)
    address = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=100, blank=True, default="")

    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.UNKNOWN)
    charger_types = models.JSONField(default=list, blank=True)
    power_kw = models.FloatField(null=True, blank=True)
    price_per_kwh = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("city", "name")
        indexes = (
            models.Index(fields=["status"], name="trip_planne_status_5f0c1e_idx"),
            models.Index(fields=["latitude", "longitude"], name="trip_planne_latitud_8a2d4b_idx"),
        )

    def to_station(self) -> Station:
        return Station(
            id=self.station_id,
            name=self.name,
            latitude=float(self.latitude),
            longitude=float(self.longitude),
            status=StationStatus.parse(self.status),
            charger_types=frozenset(self.charger_types or ()),
        )

    def __str__(self) -> str:
        return f"{self.name} ({self.city})" if self.city else self.name
