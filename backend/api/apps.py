from __future__ import annotations

from pathlib import Path

from django.apps import AppConfig


class ApiConfig(AppConfig):
    name = "backend.api"
    label = "weather_api"
    verbose_name = "Weather API"
    # backend/ has no __init__.py, so Django cannot always derive a single path
    path = str(Path(__file__).resolve().parent)
