"""OpenWeather weather provider."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from requests import Response

from backend.core.abstractions import CurrentConditions, DailySummary, ForecastSample, Location
from backend.core.aggregation import DEFAULT_DAYS, aggregate_daily
from backend.core.errors import CityNotFound, ConfigurationError, UpstreamError
from backend.core.providers.base import HTTPWeatherProvider


DEFAULT_BASE_URL = "https://api.openweathermap.org/data/2.5"


def is_city_not_found(payload: Any) -> bool:
    """Whether an OpenWeather error body reports an unknown city."""
    if not isinstance(payload, dict):
        return False
    return str(payload.get("cod")) == "404" or payload.get("message") == "city not found"


class OpenWeatherProvider(HTTPWeatherProvider):
    """Integration with the OpenWeather current weather and 5 day/3 hour endpoints."""

    name = "openweather"

    def __init__(self, *, api_key: Optional[str], base_url: Optional[str] = None, **kwargs) -> None:
        if not api_key:
            raise ConfigurationError("WEATHER_API_KEY is not set on the server")
        super().__init__(**kwargs)
        self.api_key = api_key
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")

    # Public API ---------------------------------------------------------
    def current(self, location: Location) -> CurrentConditions:
        data = self._fetch("weather", location)
        return CurrentConditions.from_payload(data)

    def forecast_samples(self, location: Location) -> List[ForecastSample]:
        data = self._fetch("forecast", location)
        items = data.get("list") if isinstance(data, dict) else None
        if not isinstance(items, list):
            return []
        return [ForecastSample.from_payload(item) for item in items]

    def forecast(self, location: Location, days: int = DEFAULT_DAYS) -> List[DailySummary]:
        return aggregate_daily(self.forecast_samples(location), days=days)

    # Helpers ------------------------------------------------------------
    def _fetch(self, endpoint: str, location: Location) -> Any:
        params: Dict[str, Any] = {**location.to_params(), "appid": self.api_key, "units": "metric"}
        response = self._request("GET", f"{self.base_url}/{endpoint}", params=params)
        return self._json(response)

    def _upstream_error(self, response: Response) -> UpstreamError:
        payload = self._error_payload(response)
        if is_city_not_found(payload):
            return CityNotFound("city not found", status=response.status_code, payload=payload)
        return UpstreamError(f"HTTP {response.status_code}", status=response.status_code, payload=payload)


__all__ = ["OpenWeatherProvider", "is_city_not_found", "DEFAULT_BASE_URL"]
