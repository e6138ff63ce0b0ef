"""Exception hierarchy shared by the providers, service and API layers."""
from __future__ import annotations

from typing import Any, Optional


class WeatherError(RuntimeError):
    """Base class for every error raised by the weather stack."""


class MissingQueryError(WeatherError):
    """Raised when neither a city nor coordinates were supplied."""


class InvalidQueryError(WeatherError):
    """Raised for malformed coordinates, units or other caller input."""


class ConfigurationError(WeatherError):
    """Raised when the server is missing required configuration."""


class ProviderError(WeatherError):
    """Base provider error."""


class UpstreamError(ProviderError):
    """The provider answered with a non-success status."""

    def __init__(self, message: str, *, status: int, payload: Optional[Any] = None) -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload


class CityNotFound(UpstreamError):
    """The provider does not know the requested city."""


class QuotaExceeded(UpstreamError):
    """Raised when a provider reports a quota/usage limit issue."""


class TransportError(ProviderError):
    """Timeouts, connection failures and undecodable bodies."""


__all__ = [
    "WeatherError",
    "MissingQueryError",
    "InvalidQueryError",
    "ConfigurationError",
    "ProviderError",
    "UpstreamError",
    "CityNotFound",
    "QuotaExceeded",
    "TransportError",
]
