"""Display helpers: unit conversion, icons and the text report."""
from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from backend.core.abstractions import CurrentConditions, DailySummary
from backend.core.errors import InvalidQueryError

CELSIUS = "C"
FAHRENHEIT = "F"
PLACEHOLDER = "–"
EMPTY_FORECAST_MESSAGE = "Search for a city to see the 5-day forecast."
ICON_URL_TEMPLATE = "https://openweathermap.org/img/wn/{code}@2x.png"

# Checked in order; the first keyword found in the condition text wins.
KEYWORD_ICONS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("thunder",), "⛈️"),
    (("drizzle", "rain", "shower"), "🌧️"),
    (("snow", "sleet"), "❄️"),
    (("mist", "fog", "haze", "smoke", "dust", "sand"), "🌫️"),
    (("clear",), "☀️"),
    (("few clouds", "scattered clouds", "broken clouds"), "⛅️"),
    (("overcast", "cloud"), "☁️"),
)


@dataclass(frozen=True)
class Icon:
    kind: str  # "emoji" or "url"
    value: str


def normalize_unit(unit: Optional[str]) -> str:
    if unit is None or not unit.strip():
        return CELSIUS
    value = unit.strip().upper()
    if value not in (CELSIUS, FAHRENHEIT):
        raise InvalidQueryError("unit must be C or F")
    return value


def celsius_to_fahrenheit(value: float) -> float:
    return value * 9 / 5 + 32


def round_half_up(value: float) -> int:
    # same as Math.round: halves go towards positive infinity
    return math.floor(value + 0.5)


def _as_number(value: object) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def format_temperature(celsius: Optional[float], unit: str = CELSIUS) -> str:
    celsius = _as_number(celsius)
    if celsius is None:
        return PLACEHOLDER
    if unit == FAHRENHEIT:
        return f"{round_half_up(celsius_to_fahrenheit(celsius))}°F"
    return f"{round_half_up(celsius)}°C"


def format_high_low(high: Optional[float], low: Optional[float], unit: str = CELSIUS) -> str:
    if _as_number(high) is None or _as_number(low) is None:
        return PLACEHOLDER
    return f"{format_temperature(high, unit)} / {format_temperature(low, unit)}"


def format_humidity(value: Optional[float]) -> str:
    return PLACEHOLDER if value is None else f"{value}%"


def format_wind(value: Optional[float]) -> str:
    return PLACEHOLDER if value is None else f"{value} m/s"


def select_icon(condition: Optional[str], code: Optional[str]) -> Optional[Icon]:
    """Keyword match on the condition, then the provider icon, then nothing."""
    text = (condition or "").lower()
    if text:
        for keywords, emoji in KEYWORD_ICONS:
            if any(keyword in text for keyword in keywords):
                return Icon("emoji", emoji)
    if code:
        return Icon("url", ICON_URL_TEMPLATE.format(code=code))
    return None


def _icon_dict(icon: Optional[Icon]) -> Optional[Dict[str, str]]:
    if icon is None:
        return None
    return {"kind": icon.kind, "value": icon.value}


def render_current(conditions: CurrentConditions, unit: str = CELSIUS) -> Dict[str, object]:
    return {
        "location": conditions.label or "",
        "temp": format_temperature(conditions.temp, unit),
        "feelsLike": format_temperature(conditions.feels_like, unit),
        "humidity": format_humidity(conditions.humidity),
        "wind": format_wind(conditions.wind_speed),
        "description": conditions.description,
        "icon": _icon_dict(select_icon(conditions.description, conditions.icon)),
    }


def render_forecast(summaries: Iterable[DailySummary], unit: str = CELSIUS) -> List[Dict[str, object]]:
    return [
        {
            "date": summary.date,
            "dayName": summary.day_name,
            "highLow": format_high_low(summary.high, summary.low, unit),
            "condition": summary.condition or "—",
            "icon": _icon_dict(select_icon(summary.condition, summary.icon)),
        }
        for summary in summaries
    ]


def render_report(
    conditions: CurrentConditions,
    summaries: Sequence[DailySummary],
    unit: str = CELSIUS,
) -> str:
    """Plain-text rendering used by the ``weather_fetch`` command."""
    current = render_current(conditions, unit)
    lines = [
        str(current["location"]),
        f"{current['temp']}  {current['description']}".rstrip(),
        f"Humidity: {current['humidity']}  Wind: {current['wind']}  Feels like: {current['feelsLike']}",
        "",
        "5-Day Forecast",
    ]
    rows = render_forecast(summaries, unit)
    if not rows:
        lines.append(EMPTY_FORECAST_MESSAGE)
    for row in rows:
        icon = row["icon"]
        marker = icon["value"] if icon and icon["kind"] == "emoji" else ""
        lines.append(f"{row['dayName']:<10} {row['highLow']:<16} {row['condition']} {marker}".rstrip())
    return "\n".join(lines)


__all__ = [
    "Icon",
    "normalize_unit",
    "celsius_to_fahrenheit",
    "format_temperature",
    "format_high_low",
    "format_humidity",
    "format_wind",
    "select_icon",
    "render_current",
    "render_forecast",
    "render_report",
    "CELSIUS",
    "FAHRENHEIT",
]
