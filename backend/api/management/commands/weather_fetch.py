"""Management command to look up weather using the same stack as the API."""
from __future__ import annotations

import json
from typing import Any

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from backend.api.views import get_weather_service
from backend.core.abstractions import Location
from backend.core.errors import CityNotFound, UpstreamError, WeatherError
from backend.core.presentation import normalize_unit, render_report


class Command(BaseCommand):
    help = "Fetch current conditions and the daily forecast for a city or coordinates"

    def add_arguments(self, parser) -> None:  # noqa: D401
        parser.add_argument("--city", type=str, help="City name, e.g. Amman")
        parser.add_argument("--lat", type=float, help="Latitude")
        parser.add_argument("--lon", type=float, help="Longitude")
        parser.add_argument("--unit", type=str, default="C", help="Display unit: C or F")
        parser.add_argument("--json", action="store_true", help="Print the raw payload instead of a report")

    def handle(self, *args: Any, **options: Any) -> None:  # noqa: D401
        try:
            unit = normalize_unit(options.get("unit"))
            location = Location.from_query(options.get("city"), options.get("lat"), options.get("lon"))
            result = get_weather_service().search(location, days=settings.FORECAST_DAYS)
        except CityNotFound as exc:
            raise CommandError("City not found. Check spelling and try again.") from exc
        except UpstreamError as exc:
            raise CommandError(f"Could not fetch weather data (HTTP {exc.status})") from exc
        except WeatherError as exc:
            raise CommandError(str(exc)) from exc

        if result.forecast_error:
            self.stderr.write(f"Forecast unavailable: {result.forecast_error}")

        if options.get("json"):
            payload = {
                "weather": result.current.as_dict(),
                "forecast": [summary.as_dict() for summary in result.forecast],
            }
            self.stdout.write(json.dumps(payload))
            return
        self.stdout.write(render_report(result.current, result.forecast, unit))
