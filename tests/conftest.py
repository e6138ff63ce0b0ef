from __future__ import annotations

import pytest
from django.core.cache import cache

from backend.api import views


@pytest.fixture(autouse=True)
def _fresh_state():
    cache.clear()
    views._build_weather_service.cache_clear()
    yield
    cache.clear()
    views._build_weather_service.cache_clear()
