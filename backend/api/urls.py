"""API URL configuration."""
from __future__ import annotations

from django.urls import path

from backend.api.views import ForecastView, RecentSearchesView, SearchView, WeatherView

urlpatterns = [
    path("weather", WeatherView.as_view(), name="weather"),
    path("forecast", ForecastView.as_view(), name="forecast"),
    path("search", SearchView.as_view(), name="search"),
    path("recent", RecentSearchesView.as_view(), name="recent"),
]
