from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ChargingStation",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("station_id", models.CharField(max_length=100, unique=True)),
                ("name", models.CharField(max_length=255)),
                ("address", models.CharField(blank=True, default="", max_length=255)),
                ("city", models.CharField(blank=True, default="", max_length=100)),
                ("latitude", models.FloatField(blank=True, null=True)),
                ("longitude", models.FloatField(blank=True, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("Available", "Available"),
                            ("Occupied", "Occupied"),
                            ("Unknown", "Unknown"),
                        ],
                        default="Unknown",
                        max_length=20,
                    ),
                ),
                ("charger_types", models.JSONField(blank=True, default=list)),
                ("power_kw", models.FloatField(blank=True, null=True)),
                (
                    "price_per_kwh",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ("city", "name"),
                "indexes": [
                    models.Index(fields=["status"], name="trip_planne_status_5f0c1e_idx"),
                    models.Index(
                        fields=["latitude", "longitude"], name="trip_planne_latitud_8a2d4b_idx"
                    ),
                ],
            },
        ),
    ]
