"""Tests for the XP policy table."""

from bashstats.xp import (
    TIER_XP,
    XP_PER_PROMPT,
    XP_PER_SESSION,
    XP_PER_SESSION_HOUR,
    XP_PER_STREAK_DAY,
    activity_xp,
    badge_xp,
)


class TestActivityXp:
    def test_zero(self):
        assert activity_xp(0, 0, 0, 0) == 0

    def test_weights(self):
        assert activity_xp(3, 2, 7200, 4) == (
            3 * XP_PER_PROMPT + 2 * XP_PER_SESSION + 2 * XP_PER_SESSION_HOUR + 4 * XP_PER_STREAK_DAY
        )

    def test_partial_hours_floor(self):
        assert activity_xp(0, 0, 3599, 0) == 0


class TestBadgeXp:
    def test_locked_pays_nothing(self):
        assert badge_xp([0, 0, 0]) == 0

    def test_each_badge_pays_its_tier(self):
        assert badge_xp([1, 3, 5]) == TIER_XP[1] + TIER_XP[3] + TIER_XP[5]

    def test_tier_bonuses_ascending(self):
        assert TIER_XP[0] == 0
        assert list(TIER_XP[1:]) == sorted(set(TIER_XP[1:]))
