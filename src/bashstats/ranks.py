"""Rank curve and rank brackets. Pure functions, no side effects."""

import math

MAX_RANK = 500

# XP needed for rank r: floor(RANK_XP_SCALE * r ** RANK_XP_EXPONENT)
RANK_XP_SCALE = 10
RANK_XP_EXPONENT = 2.2

UNRANKED = "Unranked"

# Inclusive rank-number brackets. Rank 0 (below rank 1) sits in Bronze.
RANK_TIERS: list[dict] = [
    {"name": "Bronze", "ranks": (0, 100)},
    {"name": "Silver", "ranks": (101, 200)},
    {"name": "Gold", "ranks": (201, 300)},
    {"name": "Diamond", "ranks": (301, 400)},
    {"name": "Obsidian", "ranks": (401, 499)},
    {"name": "System Anomaly", "ranks": (500, 500)},
]


def xp_for_rank(rank: int) -> int:
    """Total XP needed to reach a rank. Formula: floor(10 * r^2.2)."""
    if rank <= 0:
        return 0
    return math.floor(RANK_XP_SCALE * (rank ** RANK_XP_EXPONENT))


def rank_from_xp(total_xp: int) -> int:
    """Largest rank whose XP requirement is met, or 0 below rank 1."""
    for rank in range(MAX_RANK, 0, -1):
        if total_xp >= xp_for_rank(rank):
            return rank
    return 0


def rank_tier(rank: int) -> str:
    """Bracket name for a rank number."""
    for tier in RANK_TIERS:
        low, high = tier["ranks"]
        if low <= rank <= high:
            return tier["name"]
    return UNRANKED


def rank_progress(total_xp: int, rank: int) -> tuple[float, int]:
    """Return (progress toward the next rank, XP needed for the next rank).

    Progress stays below 1 until the next rank is reached; rank 500 is 1.
    """
    if rank >= MAX_RANK:
        return 1.0, xp_for_rank(MAX_RANK)
    current = xp_for_rank(rank)
    nxt = xp_for_rank(rank + 1)
    if nxt <= current:
        return 0.0, nxt
    return min((total_xp - current) / (nxt - current), 0.99), nxt
