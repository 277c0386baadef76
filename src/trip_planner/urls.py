from django.urls import path

from trip_planner import views

urlpatterns = [
    path("api/v1/health", views.health_view, name="health"),
    path("api/v1/stations", views.station_markers_view, name="station-markers"),
    path("api/v1/trip-plan", views.trip_plan_view, name="trip-plan"),
    path("api/v1/locations", views.location_search_view, name="location-search"),
]
