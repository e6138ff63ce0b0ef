"""REST API views for weather information."""
from __future__ import annotations

from functools import lru_cache
import logging
from typing import Any, Dict, Optional

from django.conf import settings
from django.core.cache import caches
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.core.abstractions import Location
from backend.core.errors import (
    CityNotFound,
    ConfigurationError,
    InvalidQueryError,
    MissingQueryError,
    UpstreamError,
)
from backend.core.geolocation import geolocation_message
from backend.core.presentation import normalize_unit, render_current, render_forecast
from backend.core.providers.base import RequestConfig
from backend.core.providers.openweather import OpenWeatherProvider
from backend.core.recent import RecentSearches
from backend.core.services.weather_service import WeatherService


logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "City not found. Check spelling and try again."
FAILED_MESSAGE = "Could not fetch weather data. Please try again."


@lru_cache(maxsize=4)
def _build_weather_service(api_key: str, base_url: str, timeout: float) -> WeatherService:
    provider = OpenWeatherProvider(
        api_key=api_key,
        base_url=base_url,
        request_config=RequestConfig(timeout=timeout),
    )
    return WeatherService(
        provider=provider,
        cache=caches[settings.WEATHER_CACHE_ALIAS],
        ttl=settings.WEATHER_CACHE_TIMEOUT,
    )


def get_weather_service() -> WeatherService:
    """Return the service for the configured credential.

    Raises :class:`ConfigurationError` when ``WEATHER_API_KEY`` is missing.
    """
    api_key = settings.WEATHER_API_KEY
    if not api_key:
        raise ConfigurationError("WEATHER_API_KEY is not set on the server")
    return _build_weather_service(api_key, settings.OPENWEATHER_BASE_URL, settings.WEATHER_HTTP_TIMEOUT)


def location_from_params(params) -> Location:
    return Location.from_query(params.get("city"), params.get("lat"), params.get("lon"))


def error_response(exc: Exception, subject: str) -> Response:
    """Map the weather error taxonomy onto an HTTP response."""
    if isinstance(exc, (MissingQueryError, InvalidQueryError)):
        return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
    if isinstance(exc, ConfigurationError):
        logger.error("Configuration error: %s", exc)
        return Response({"error": str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    if isinstance(exc, UpstreamError):
        not_found = isinstance(exc, CityNotFound)
        return Response(
            {
                "error": f"Failed to fetch {subject} from OpenWeatherMap",
                "details": exc.payload,
                "not_found": not_found,
                "message": NOT_FOUND_MESSAGE if not_found else FAILED_MESSAGE,
            },
            status=exc.status,
        )
    logger.error("Unexpected error fetching %s", subject, exc_info=exc)
    return Response(
        {"error": f"Unexpected error fetching {subject}"},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def _recent_for(request) -> RecentSearches:
    return RecentSearches.load(request.session, capacity=settings.RECENT_SEARCHES_LIMIT)


class WeatherView(APIView):
    """Current conditions for a city or coordinates."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):  # noqa: D401
        try:
            location = location_from_params(request.query_params)
            current = get_weather_service().get_current(location)
        except Exception as exc:  # noqa: BLE001 - mapped to a response
            return error_response(exc, "weather")
        return Response(current.as_dict(), status=status.HTTP_200_OK)


class ForecastView(APIView):
    """One representative forecast row per day for the next days."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):  # noqa: D401
        try:
            location = location_from_params(request.query_params)
            forecast = get_weather_service().get_forecast(location, days=settings.FORECAST_DAYS)
        except Exception as exc:  # noqa: BLE001 - mapped to a response
            return error_response(exc, "forecast")
        return Response([summary.as_dict() for summary in forecast], status=status.HTTP_200_OK)


class SearchView(APIView):
    """Combined lookup used by the search box: current weather, forecast and history."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):  # noqa: D401
        params = request.query_params
        seq = _parse_seq(params.get("seq"))
        geo_error = params.get("geo_error")
        if geo_error:
            return Response({"error": geolocation_message(geo_error), "seq": seq}, status=status.HTTP_400_BAD_REQUEST)

        try:
            unit = normalize_unit(params.get("unit"))
            location = location_from_params(params)
            result = get_weather_service().search(location, days=settings.FORECAST_DAYS)
            display = {
                "unit": unit,
                "current": render_current(result.current, unit),
                "forecast": render_forecast(result.forecast, unit),
            }
        except Exception as exc:  # noqa: BLE001 - mapped to a response
            response = error_response(exc, "weather")
            response.data["seq"] = seq
            return response

        recent = _recent_for(request)
        recent.add(location.city if location.is_city else (result.current.city or ""))
        recent.save(request.session)

        payload: Dict[str, Any] = {
            "seq": seq,
            "weather": result.current.as_dict(),
            "forecast": [summary.as_dict() for summary in result.forecast],
            "display": display,
            "recent": recent.as_list(),
        }
        if result.forecast_error:
            payload["forecast_error"] = result.forecast_error
        return Response(payload, status=status.HTTP_200_OK)


class RecentSearchesView(APIView):
    """Past search terms stored in the caller's session."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):  # noqa: D401
        return Response({"recent": _recent_for(request).as_list()}, status=status.HTTP_200_OK)

    def delete(self, request, *args, **kwargs):  # noqa: D401
        recent = _recent_for(request)
        recent.clear()
        recent.save(request.session)
        return Response(status=status.HTTP_204_NO_CONTENT)


def _parse_seq(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


__all__ = [
    "WeatherView",
    "ForecastView",
    "SearchView",
    "RecentSearchesView",
    "get_weather_service",
    "error_response",
]
