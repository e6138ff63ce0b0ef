"""Weather service that sits between the API layer and the provider."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

import logging

from django.core.cache.backends.base import BaseCache

from backend.core.abstractions import CurrentConditions, DailySummary, Location, WeatherProvider
from backend.core.aggregation import DEFAULT_DAYS
from backend.core.errors import ProviderError


logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    """Outcome of one user search: current conditions plus the daily forecast."""

    current: CurrentConditions
    forecast: List[DailySummary] = field(default_factory=list)
    forecast_error: Optional[str] = None


class WeatherService:
    """Fetch current conditions and forecasts with short-lived caching."""

    def __init__(
        self,
        provider: WeatherProvider,
        cache: Optional[BaseCache] = None,
        ttl: int = 300,
    ) -> None:
        self._provider = provider
        self._cache = cache
        self._ttl = ttl

    @property
    def provider(self) -> WeatherProvider:
        return self._provider

    def get_current(self, location: Location) -> CurrentConditions:
        return self._cached(location.cache_key("current"), lambda: self._provider.current(location))

    def get_forecast(self, location: Location, days: int = DEFAULT_DAYS) -> List[DailySummary]:
        key = f"{location.cache_key('forecast')}:{days}"
        return self._cached(key, lambda: self._provider.forecast(location, days=days))

    def search(self, location: Location, days: int = DEFAULT_DAYS) -> SearchResult:
        """Current conditions first, then the forecast.

        A failing forecast never invalidates the current conditions; the
        result carries an empty forecast instead.
        """
        current = self.get_current(location)
        try:
            forecast = self.get_forecast(location, days=days)
        except ProviderError as exc:
            logger.warning("Forecast lookup for %s failed: %s", location.describe(), exc)
            return SearchResult(current=current, forecast=[], forecast_error=str(exc))
        return SearchResult(current=current, forecast=forecast)

    def _cached(self, key: str, fetch) -> Any:
        if self._cache is not None:
            cached = self._cache.get(key)
            if cached is not None:
                logger.debug("Cache hit for %s", key)
                return cached
        value = fetch()
        if self._cache is not None:
            self._cache.set(key, value, self._ttl)
        return value


__all__ = ["WeatherService", "SearchResult"]
