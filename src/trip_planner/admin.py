from django.contrib import admin

from trip_planner.models import ChargingStation


@admin.register(ChargingStation)
class ChargingStationAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "station_id",
        "city",
        "status",
        "power_kw",
        "price_per_kwh",
        "latitude",
        "longitude",
    )
    list_filter = ("status", "city")
    search_fields = ("name", "station_id", "address", "city")
    ordering = ("city", "name")
