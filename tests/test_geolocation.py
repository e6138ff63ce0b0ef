from __future__ import annotations

import pytest

from backend.core.geolocation import GeolocationFailure, geolocation_message, parse_failure


def test_each_failure_has_a_distinct_message() -> None:
    messages = {geolocation_message(failure) for failure in GeolocationFailure}

    assert len(messages) == len(GeolocationFailure)


@pytest.mark.parametrize(
    "code, fragment",
    [(1, "denied"), ("2", "could not be determined"), (3, "Timed out")],
)
def test_messages_by_code(code, fragment) -> None:
    assert fragment in geolocation_message(code)


@pytest.mark.parametrize("code", [None, "", "abc", 0, 7])
def test_unknown_codes_get_generic_message(code) -> None:
    assert parse_failure(code) is None
    assert geolocation_message(code) == "Unable to get your location. Please search for a city."
