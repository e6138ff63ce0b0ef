"""Core abstractions for the weather domain."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Protocol
from urllib.parse import quote

from backend.core.errors import InvalidQueryError, MissingQueryError


@dataclass(frozen=True)
class Location:
    """Lookup address: a city name or a latitude/longitude pair."""

    city: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @classmethod
    def from_query(
        cls,
        city: Optional[str] = None,
        latitude: Optional[object] = None,
        longitude: Optional[object] = None,
    ) -> Location:
        """Build a location from raw query values, preferring the city."""
        city = (city or "").strip()
        if city:
            return cls(city=city)
        if _blank(latitude) or _blank(longitude):
            raise MissingQueryError("City query parameter is required, e.g. ?city=Amman")
        try:
            lat = float(latitude)  # type: ignore[arg-type]
            lon = float(longitude)  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise InvalidQueryError("lat and lon must be valid floating point numbers") from exc
        if not -90.0 <= lat <= 90.0:
            raise InvalidQueryError("Latitude must be between -90 and 90")
        if not -180.0 <= lon <= 180.0:
            raise InvalidQueryError("Longitude must be between -180 and 180")
        return cls(latitude=lat, longitude=lon)

    @property
    def is_city(self) -> bool:
        return self.city is not None

    def to_params(self) -> Dict[str, Any]:
        if self.is_city:
            return {"q": self.city}
        return {"lat": self.latitude, "lon": self.longitude}

    def cache_key(self, kind: str) -> str:
        if self.is_city:
            return f"weather:{kind}:city:{quote(self.city.lower())}"
        return f"weather:{kind}:{self.latitude:.4f}:{self.longitude:.4f}"

    def describe(self) -> str:
        if self.is_city:
            return self.city
        return f"{self.latitude:.4f},{self.longitude:.4f}"


@dataclass(frozen=True)
class ForecastSample:
    """One 3-hourly data point from the forecast feed."""

    timestamp_text: Optional[str]
    temp_max: Optional[float] = None
    temp_min: Optional[float] = None
    condition_text: str = ""
    icon_code: Optional[str] = None

    @classmethod
    def from_payload(cls, item: Any) -> ForecastSample:
        if not isinstance(item, Mapping):
            return cls(timestamp_text=None)
        main = _mapping(item.get("main"))
        weather = _first_weather(item)
        timestamp = item.get("dt_txt")
        return cls(
            timestamp_text=timestamp if isinstance(timestamp, str) else None,
            temp_max=main.get("temp_max"),
            temp_min=main.get("temp_min"),
            condition_text=weather.get("description") or "",
            icon_code=weather.get("icon"),
        )


@dataclass(frozen=True)
class DailySummary:
    """The representative forecast row for one calendar date."""

    date: str
    day_name: str
    high: Optional[float]
    low: Optional[float]
    condition: str
    icon: str

    def as_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "dayName": self.day_name,
            "high": self.high,
            "low": self.low,
            "condition": self.condition,
            "icon": self.icon,
        }


@dataclass(frozen=True)
class CurrentConditions:
    """Normalized current weather for a single place."""

    city: Optional[str]
    country: str = ""
    temp: Optional[float] = None
    feels_like: Optional[float] = None
    humidity: Optional[float] = None
    wind_speed: Optional[float] = None
    description: str = ""
    icon: str = ""

    @classmethod
    def from_payload(cls, data: Any) -> CurrentConditions:
        data = _mapping(data)
        main = _mapping(data.get("main"))
        wind = _mapping(data.get("wind"))
        sys_block = _mapping(data.get("sys"))
        weather = _first_weather(data)
        return cls(
            city=data.get("name"),
            country=sys_block.get("country") or "",
            temp=main.get("temp"),
            feels_like=main.get("feels_like"),
            humidity=main.get("humidity"),
            wind_speed=wind.get("speed"),
            description=weather.get("description") or "",
            icon=weather.get("icon") or "",
        )

    @property
    def label(self) -> Optional[str]:
        if self.city and self.country:
            return f"{self.city}, {self.country}"
        return self.city

    def as_dict(self) -> Dict[str, Any]:
        return {
            "city": self.city,
            "country": self.country,
            "temp": self.temp,
            "feelsLike": self.feels_like,
            "humidity": self.humidity,
            "windSpeed": self.wind_speed,
            "description": self.description,
            "icon": self.icon,
        }


class WeatherProvider(Protocol):
    """A data source capable of returning current weather and forecasts."""

    name: str

    def current(self, location: Location) -> CurrentConditions:
        """Fetch current conditions for the location."""
        ...

    def forecast(self, location: Location, days: int = 5) -> List[DailySummary]:
        """Fetch the daily forecast for the location."""
        ...


def _blank(value: Optional[object]) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _first_weather(data: Mapping[str, Any]) -> Mapping[str, Any]:
    weather = data.get("weather")
    if isinstance(weather, list) and weather:
        return _mapping(weather[0])
    return {}
