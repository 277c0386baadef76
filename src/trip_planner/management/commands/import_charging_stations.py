from __future__ import annotations

from pathlib import Path
from typing import Any

import polars as pl
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from trip_planner.models import ChargingStation
from trip_planner.services.types import StationStatus

UPDATE_FIELDS = [
    "name",
    "address",
    "city",
    "latitude",
    "longitude",
    "status",
    "charger_types",
    "power_kw",
    "price_per_kwh",
]


class Command(BaseCommand):
    help = "Import and normalize charging stations from a CSV using Polars."

    def add_arguments(self, parser: Any) -> None:
        parser.add_argument(
            "--csv-path",
            type=str,
            default=str(settings.PROJECT_ROOT / "charging-stations.csv"),
            help="Path to the source charging stations CSV",
        )
        parser.add_argument(
            "--replace",
            action="store_true",
            help="Delete existing stations before importing",
        )

    def handle(self, *_: Any, **options: Any) -> None:
        csv_path = Path(options["csv_path"])
        if not csv_path.exists():
            raise CommandError(f"CSV file does not exist: {csv_path}")

        frame = self._load_and_transform(csv_path)
        records = frame.to_dicts()

        if options["replace"]:
            ChargingStation.objects.all().delete()

        existing = {
            station.station_id: station
            for station in ChargingStation.objects.filter(
                station_id__in=[row["station_id"] for row in records]
            )
        }

        to_create: list[ChargingStation] = []
        to_update: list[ChargingStation] = []

        for row in records:
            values = {
                "name": row["name"],
                "address": row["address"],
                "city": row["city"],
                "latitude": row["latitude"],
                "longitude": row["longitude"],
                "status": StationStatus.parse(row["status"]).value,
                "charger_types": row["charger_types"],
                "power_kw": row["power_kw"],
                "price_per_kwh": row["price_per_kwh"],
            }

            station = existing.get(row["station_id"])
            if station is None:
                to_create.append(ChargingStation(station_id=row["station_id"], **values))
                continue

            for field_name, value in values.items():
                setattr(station, field_name, value)
            to_update.append(station)

        if to_create:
            ChargingStation.objects.bulk_create(to_create, batch_size=1000)
        if to_update:
            ChargingStation.objects.bulk_update(to_update, UPDATE_FIELDS, batch_size=1000)

        self.stdout.write(
            self.style.SUCCESS(
                "Imported charging stations: "
                + (
                    f"{len(records)} rows normalized, "
                    f"{len(to_create)} created, {len(to_update)} updated"
                )
            )
        )

    @staticmethod
    def _load_and_transform(csv_path: Path) -> pl.DataFrame:
        frame = pl.read_csv(csv_path, infer_schema_length=5000)
        required_columns = {"Station ID", "Name", "Latitude", "Longitude", "Status"}
        missing_columns = required_columns.difference(frame.columns)
        if missing_columns:
            raise CommandError(f"Missing expected columns: {sorted(missing_columns)}")

        optional_columns = ["Address", "City", "Charger Types", "Power kW", "Price per kWh"]
        frame = frame.with_columns(
            [
                pl.lit(None, dtype=pl.Utf8).alias(column)
                for column in optional_columns
                if column not in frame.columns
            ]
        )

        normalized = (
            frame.select(
                pl.col("Station ID")
                .cast(pl.Utf8, strict=False)
                .str.strip_chars()
                .alias("station_id"),
                pl.col("Name")
                .cast(pl.Utf8, strict=False)
                .str.strip_chars()
                .fill_null("")
                .alias("name"),
                pl.col("Address")
                .cast(pl.Utf8, strict=False)
                .str.strip_chars()
                .fill_null("")
                .alias("address"),
                pl.col("City")
                .cast(pl.Utf8, strict=False)
                .str.strip_chars()
                .fill_null("")
                .alias("city"),
                pl.col("Latitude").cast(pl.Float64, strict=False).alias("latitude"),
                pl.col("Longitude").cast(pl.Float64, strict=False).alias("longitude"),
                pl.col("Status").cast(pl.Utf8, strict=False).fill_null("").alias("status"),
                pl.col("Charger Types")
                .cast(pl.Utf8, strict=False)
                .fill_null("")
                .str.replace_all(",", "|", literal=True)
                .str.split("|")
                .list.eval(pl.element().str.strip_chars())
                .list.eval(pl.element().filter(pl.element().str.len_chars() > 0))
                .alias("charger_types"),
                pl.col("Power kW").cast(pl.Float64, strict=False).alias("power_kw"),
                pl.col("Price per kWh")
                .cast(pl.Float64, strict=False)
                .round(2)
                .alias("price_per_kwh"),
            )
            .filter(
                pl.col("station_id").is_not_null()
                & (pl.col("station_id").str.len_chars() > 0)
                & pl.col("latitude").is_not_null()
                & pl.col("longitude").is_not_null()
                & pl.col("latitude").is_between(-90.0, 90.0)
                & pl.col("longitude").is_between(-180.0, 180.0)
                & ~((pl.col("latitude") == 0) & (pl.col("longitude") == 0))
            )
            .unique(subset=["station_id"], keep="last", maintain_order=True)
        )

        return normalized
