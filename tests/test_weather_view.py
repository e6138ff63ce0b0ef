from __future__ import annotations

import re
from pathlib import Path

import responses
from django.apps import apps
from django.test import Client, override_settings

from backend.api import views

from payloads import FORECAST_URL, WEATHER_URL, current_payload, forecast_item, forecast_payload


def _week_payload():
    items = []
    for day in range(1, 8):
        items.append(forecast_item(f"2024-06-0{day} 09:00:00", temp_max=10.0 + day))
        items.append(forecast_item(f"2024-06-0{day} 12:00:00", temp_max=20.0 + day, description="clear sky", icon="01d"))
    return forecast_payload(items)


@responses.activate
def test_weather_endpoint_returns_payload() -> None:
    responses.add(responses.GET, WEATHER_URL, json=current_payload(), status=200)

    response = Client().get("/api/weather", {"city": "Amman"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["city"] == "Amman"
    assert payload["country"] == "JO"
    assert payload["feelsLike"] == 23.1
    assert payload["windSpeed"] == 3.6


@responses.activate
def test_weather_endpoint_accepts_coordinates() -> None:
    responses.add(responses.GET, WEATHER_URL, json=current_payload(), status=200)

    response = Client().get("/api/weather", {"lat": "31.95", "lon": "35.93"})

    assert response.status_code == 200
    assert "lat=31.95" in responses.calls[0].request.url


@responses.activate
def test_weather_endpoint_requires_city_or_coordinates() -> None:
    response = Client().get("/api/weather")

    assert response.status_code == 400
    assert response.json()["error"] == "City query parameter is required, e.g. ?city=Amman"
    assert len(responses.calls) == 0


@responses.activate
def test_weather_endpoint_validates_coordinates() -> None:
    response = Client().get("/api/weather", {"lat": "abc", "lon": "37.61"})

    assert response.status_code == 400
    assert "error" in response.json()
    assert len(responses.calls) == 0


@responses.activate
@override_settings(WEATHER_API_KEY=None)
def test_missing_api_key_is_configuration_error() -> None:
    response = Client().get("/api/weather", {"city": "Amman"})

    assert response.status_code == 500
    assert response.json()["error"] == "WEATHER_API_KEY is not set on the server"
    assert len(responses.calls) == 0


@responses.activate
def test_city_not_found_is_reported() -> None:
    responses.add(responses.GET, WEATHER_URL, json={"cod": "404", "message": "city not found"}, status=404)

    response = Client().get("/api/weather", {"city": "Atlantis"})

    assert response.status_code == 404
    payload = response.json()
    assert payload["error"] == "Failed to fetch weather from OpenWeatherMap"
    assert payload["details"] == {"cod": "404", "message": "city not found"}
    assert payload["not_found"] is True
    assert payload["message"] == "City not found. Check spelling and try again."


@responses.activate
def test_upstream_failure_forwards_status() -> None:
    responses.add(responses.GET, WEATHER_URL, json={"cod": 401, "message": "Invalid API key"}, status=401)

    response = Client().get("/api/weather", {"city": "Amman"})

    assert response.status_code == 401
    assert response.json()["not_found"] is False
    assert response.json()["message"] == "Could not fetch weather data. Please try again."


@responses.activate
def test_transport_failure_is_unexpected_error() -> None:
    responses.add(responses.GET, WEATHER_URL, body="not json", status=200)

    response = Client().get("/api/weather", {"city": "Amman"})

    assert response.status_code == 500
    assert response.json() == {"error": "Unexpected error fetching weather"}


@responses.activate
def test_forecast_endpoint_returns_five_days() -> None:
    responses.add(responses.GET, FORECAST_URL, json=_week_payload(), status=200)

    response = Client().get("/api/forecast", {"city": "Amman"})

    assert response.status_code == 200
    days = response.json()
    assert [day["date"] for day in days] == [f"2024-06-0{day}" for day in range(1, 6)]
    assert days[0] == {
        "date": "2024-06-01",
        "dayName": "Saturday",
        "high": 21.0,
        "low": 10.0,
        "condition": "clear sky",
        "icon": "01d",
    }


@responses.activate
def test_forecast_endpoint_error_message() -> None:
    responses.add(responses.GET, FORECAST_URL, json={"cod": "500"}, status=500)

    response = Client().get("/api/forecast", {"city": "Amman"})

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to fetch forecast from OpenWeatherMap"


@responses.activate
def test_search_combines_weather_forecast_and_display() -> None:
    responses.add(responses.GET, WEATHER_URL, json=current_payload(temp=24.5), status=200)
    responses.add(responses.GET, FORECAST_URL, json=_week_payload(), status=200)

    response = Client().get("/api/search", {"city": "Amman", "unit": "f", "seq": "7"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["seq"] == 7
    assert payload["weather"]["city"] == "Amman"
    assert len(payload["forecast"]) == 5
    assert payload["display"]["unit"] == "F"
    assert payload["display"]["current"]["temp"] == "76°F"
    assert payload["display"]["current"]["location"] == "Amman, JO"
    assert payload["display"]["forecast"][0]["highLow"] == "70°F / 50°F"
    assert payload["recent"] == ["Amman"]
    assert "forecast_error" not in payload
    assert [call.request.url.split("?")[0] for call in responses.calls] == [WEATHER_URL, FORECAST_URL]


@responses.activate
def test_search_keeps_weather_when_forecast_fails() -> None:
    responses.add(responses.GET, WEATHER_URL, json=current_payload(), status=200)
    responses.add(responses.GET, FORECAST_URL, body="gateway down", status=502)

    response = Client().get("/api/search", {"city": "Amman"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["weather"]["city"] == "Amman"
    assert payload["forecast"] == []
    assert payload["display"]["forecast"] == []
    assert payload["forecast_error"] == "HTTP 502"


@responses.activate
def test_search_not_found_skips_forecast_and_history() -> None:
    responses.add(responses.GET, WEATHER_URL, json={"cod": "404", "message": "city not found"}, status=404)
    client = Client()

    response = client.get("/api/search", {"city": "Atlantis", "seq": "3"})

    assert response.status_code == 404
    assert response.json()["seq"] == 3
    assert response.json()["not_found"] is True
    assert len(responses.calls) == 1
    assert client.get("/api/recent").json() == {"recent": []}


@responses.activate
def test_search_reports_geolocation_failure() -> None:
    response = Client().get("/api/search", {"geo_error": "1"})

    assert response.status_code == 400
    assert re.search("denied", response.json()["error"])
    assert len(responses.calls) == 0


@responses.activate
def test_search_rejects_unknown_unit() -> None:
    response = Client().get("/api/search", {"city": "Amman", "unit": "K"})

    assert response.status_code == 400
    assert len(responses.calls) == 0


@responses.activate
def test_recent_searches_persist_in_session() -> None:
    responses.add(responses.GET, WEATHER_URL, json=current_payload(), status=200)
    responses.add(responses.GET, FORECAST_URL, json=forecast_payload([]), status=200)
    client = Client()

    for city in ("Amman", "Paris", "AMMAN"):
        assert client.get("/api/search", {"city": city}).status_code == 200

    assert client.get("/api/recent").json() == {"recent": ["AMMAN", "Paris"]}

    assert client.delete("/api/recent").status_code == 204
    assert client.get("/api/recent").json() == {"recent": []}


@responses.activate
def test_coordinate_search_records_resolved_city() -> None:
    responses.add(responses.GET, WEATHER_URL, json=current_payload(name="Irbid"), status=200)
    responses.add(responses.GET, FORECAST_URL, json=forecast_payload([]), status=200)
    client = Client()

    response = client.get("/api/search", {"lat": "32.55", "lon": "35.85"})

    assert response.json()["recent"] == ["Irbid"]


@responses.activate
def test_search_displays_numeric_text_temperature() -> None:
    responses.add(responses.GET, WEATHER_URL, json=current_payload(temp="24.3"), status=200)
    responses.add(responses.GET, FORECAST_URL, json=forecast_payload([]), status=200)

    response = Client().get("/api/search", {"city": "Amman"})

    assert response.status_code == 200
    assert response.json()["display"]["current"]["temp"] == "24°C"


@responses.activate
def test_search_render_failure_is_json_error() -> None:
    body = current_payload()
    body["weather"] = [{"description": 7, "icon": "01d"}]
    responses.add(responses.GET, WEATHER_URL, json=body, status=200)
    responses.add(responses.GET, FORECAST_URL, json=forecast_payload([]), status=200)
    client = Client()

    response = client.get("/api/search", {"city": "Amman", "seq": "4"})

    assert response.status_code == 500
    assert response["Content-Type"].startswith("application/json")
    assert response.json() == {"error": "Unexpected error fetching weather", "seq": 4}
    assert client.get("/api/recent").json() == {"recent": []}


def test_api_app_config_points_at_package_directory() -> None:
    config = apps.get_app_config("weather_api")

    assert Path(config.path) == Path(views.__file__).resolve().parent
    assert config.verbose_name == "Weather API"
