"""XP policy for bashstats.

Pure functions that turn activity counters and unlocked badge tiers into XP.
All calculations use integers (math.floor for rounding).
"""

from __future__ import annotations

import math

# Activity XP
XP_PER_PROMPT = 2
XP_PER_SESSION = 10
XP_PER_SESSION_HOUR = 25
XP_PER_STREAK_DAY = 15

# XP granted for each unlocked tier, indexed by tier (0 = locked)
TIER_XP: tuple[int, ...] = (0, 50, 100, 200, 500, 1000)


def activity_xp(
    prompts: int, sessions: int, duration_seconds: int, longest_streak: int
) -> int:
    """XP earned from raw activity counters."""
    hours = math.floor(duration_seconds / 3600)
    return (
        prompts * XP_PER_PROMPT
        + sessions * XP_PER_SESSION
        + hours * XP_PER_SESSION_HOUR
        + longest_streak * XP_PER_STREAK_DAY
    )


def badge_xp(tiers: list[int]) -> int:
    """XP earned from badges: each badge pays the bonus of its current tier."""
    return sum(TIER_XP[min(tier, 5)] for tier in tiers if tier > 0)
