"""Calendar helpers: holidays, moon phase, quarters and week windows."""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta

# (month, day) pairs celebrated on the same date every year
FIXED_HOLIDAYS: set[tuple[int, int]] = {
    (1, 1),  # New Year's Day
    (2, 14),  # Valentine's Day
    (7, 4),  # Independence Day
    (10, 31),  # Halloween
    (12, 24),  # Christmas Eve
    (12, 25),  # Christmas Day
    (12, 31),  # New Year's Eve
}

SYNODIC_MONTH = 29.530588853
# A new moon observed 2000-01-06 18:14 UTC
_REFERENCE_NEW_MOON = datetime(2000, 1, 6, 18, 14)
FULL_MOON_ILLUMINATION = 0.98


def parse_timestamp(ts: str) -> datetime:
    """Parse a stored local ISO-8601 timestamp."""
    return datetime.fromisoformat(ts)


def thanksgiving(year: int) -> date:
    """US Thanksgiving: the fourth Thursday of November."""
    first = date(year, 11, 1)
    offset = (3 - first.weekday()) % 7
    return first + timedelta(days=offset + 21)


def is_holiday(day: date) -> bool:
    if (day.month, day.day) in FIXED_HOLIDAYS:
        return True
    return day == thanksgiving(day.year)


def moon_illumination(day: date) -> float:
    """Approximate illuminated fraction of the moon at local noon (0..1)."""
    noon = datetime(day.year, day.month, day.day, 12)
    age = ((noon - _REFERENCE_NEW_MOON).total_seconds() / 86400) % SYNODIC_MONTH
    phase = age / SYNODIC_MONTH
    return (1 - math.cos(2 * math.pi * phase)) / 2


def is_full_moon(day: date) -> bool:
    return moon_illumination(day) >= FULL_MOON_ILLUMINATION


def quarter_key(day: date) -> str:
    """Year-quarter label such as ``2026-Q3``."""
    return f"{day.year}-Q{(day.month - 1) // 3 + 1}"


def week_bounds(today: date) -> tuple[date, date, date]:
    """Return (monday, sunday, next monday) of the week containing ``today``."""
    start = today - timedelta(days=today.weekday())
    return start, start + timedelta(days=6), start + timedelta(days=7)
