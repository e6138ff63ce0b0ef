"""Reduce 3-hourly forecast samples to one row per calendar day."""
from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, Iterable, List, Tuple

from backend.core.abstractions import DailySummary, ForecastSample

MIDDAY = "12:00:00"
DEFAULT_DAYS = 5

_DATE_PARTS = re.compile(r"(\d+)-(\d+)-(\d+)")

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def aggregate_daily(samples: Iterable[ForecastSample], days: int = DEFAULT_DAYS) -> List[DailySummary]:
    """Pick one representative sample per date, keeping first-seen date order.

    The first sample of a date is kept unless a later one is stamped exactly
    ``12:00:00`` while the kept one is not. Only the first ``days`` dates are
    returned. Samples without a date portion are skipped.
    """
    by_date: Dict[str, Tuple[ForecastSample, str]] = {}
    for sample in samples:
        date_str, time_str = _split_timestamp(sample.timestamp_text)
        if not date_str:
            continue
        existing = by_date.get(date_str)
        if existing is None:
            by_date[date_str] = (sample, time_str)
        elif time_str == MIDDAY and existing[1] != MIDDAY:
            by_date[date_str] = (sample, time_str)

    result: List[DailySummary] = []
    for date_str, (sample, _) in list(by_date.items())[: max(days, 0)]:
        result.append(
            DailySummary(
                date=date_str,
                day_name=weekday_name(date_str),
                high=sample.temp_max,
                low=sample.temp_min,
                condition=sample.condition_text or "",
                icon=sample.icon_code or "",
            )
        )
    return result


def weekday_name(date_str: str) -> str:
    """Weekday of ``YYYY-MM-DD`` at UTC midnight, or ``""`` if not date-shaped.

    Out-of-range months and days roll over into the following ones, so
    ``2024-02-30`` is read as 1 March 2024.
    """
    match = _DATE_PARTS.fullmatch(date_str or "")
    if match is None:
        return ""
    year, month, day = (int(part) for part in match.groups())
    year += (month - 1) // 12
    try:
        first = date(year, (month - 1) % 12 + 1, 1)
        resolved = first + timedelta(days=day - 1)
    except (ValueError, OverflowError):
        return ""
    midnight = datetime.combine(resolved, time.min, tzinfo=timezone.utc)
    return WEEKDAY_NAMES[midnight.weekday()]


def _split_timestamp(value: Any) -> Tuple[str, str]:
    if not isinstance(value, str) or not value:
        return "", ""
    date_str, _, rest = value.partition(" ")
    time_str = rest.split(" ", 1)[0]
    return date_str, time_str


__all__ = ["aggregate_daily", "weekday_name", "MIDDAY", "DEFAULT_DAYS"]
