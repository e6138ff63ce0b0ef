"""Messages for failures reported by the browser geolocation API."""
from __future__ import annotations

from enum import IntEnum
from typing import Optional, Union


class GeolocationFailure(IntEnum):
    PERMISSION_DENIED = 1
    POSITION_UNAVAILABLE = 2
    TIMEOUT = 3


MESSAGES = {
    GeolocationFailure.PERMISSION_DENIED: "Location access was denied. Allow location access or search for a city instead.",
    GeolocationFailure.POSITION_UNAVAILABLE: "Your location could not be determined. Try again or search for a city.",
    GeolocationFailure.TIMEOUT: "Timed out while getting your location. Please try again.",
}
UNKNOWN_MESSAGE = "Unable to get your location. Please search for a city."


def parse_failure(code: Union[int, str, None]) -> Optional[GeolocationFailure]:
    try:
        return GeolocationFailure(int(code))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def geolocation_message(code: Union[int, str, None]) -> str:
    failure = parse_failure(code)
    if failure is None:
        return UNKNOWN_MESSAGE
    return MESSAGES[failure]


__all__ = ["GeolocationFailure", "geolocation_message", "parse_failure"]
