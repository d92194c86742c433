"""Daily streak calculation for bashstats."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta


@dataclass
class StreakInfo:
    current_streak: int
    longest_streak: int
    last_active_date: str | None  # YYYY-MM-DD
    is_active_today: bool


def _parse_date(d: str) -> date:
    """Parse a YYYY-MM-DD string to a date object."""
    return date.fromisoformat(d)


def get_streak_from_dates(sorted_dates: list[str], reference_date: str) -> int:
    """Given a sorted list of active dates and a reference date,
    count consecutive days backwards from reference_date."""
    if not sorted_dates:
        return 0

    ref = _parse_date(reference_date)
    date_set = {_parse_date(d) for d in sorted_dates}

    streak = 0
    current = ref
    while current in date_set:
        streak += 1
        current -= timedelta(days=1)

    return streak


def longest_run(sorted_dates: list[str]) -> int:
    """Length of the longest run of consecutive calendar dates."""
    if not sorted_dates:
        return 0
    longest = 1
    streak = 1
    for i in range(1, len(sorted_dates)):
        prev = _parse_date(sorted_dates[i - 1])
        curr = _parse_date(sorted_dates[i])
        if (curr - prev).days == 1:
            streak += 1
        else:
            streak = 1
        longest = max(longest, streak)
    return longest


def calculate_streak(active_dates: set[str], today: str | None = None) -> StreakInfo:
    """Calculate streaks from a set of active date strings (YYYY-MM-DD).

    Rules:
    - Current streak counts back from today
    - If today has no activity yet, it counts back from yesterday instead
    - Longest streak is the longest run anywhere in the history
    """
    if not active_dates:
        return StreakInfo(
            current_streak=0,
            longest_streak=0,
            last_active_date=None,
            is_active_today=False,
        )

    today_date = _parse_date(today) if today else date.today()
    sorted_dates = sorted(active_dates)

    is_active_today = today_date.isoformat() in active_dates
    if is_active_today:
        current_streak = get_streak_from_dates(sorted_dates, today_date.isoformat())
    else:
        yesterday = (today_date - timedelta(days=1)).isoformat()
        current_streak = get_streak_from_dates(sorted_dates, yesterday)

    return StreakInfo(
        current_streak=current_streak,
        longest_streak=longest_run(sorted_dates),
        last_active_date=sorted_dates[-1],
        is_active_today=is_active_today,
    )
