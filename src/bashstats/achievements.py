"""Badge evaluation, XP and rank on top of the stats engine."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any

from bashstats.badges import BADGES, MAX_TIER, TIER_NAMES, BadgeDef, evaluate_badge
from bashstats.db import Database
from bashstats.patterns import PATTERN_QUERIES, QueryScope
from bashstats.ranks import rank_from_xp, rank_progress, rank_tier
from bashstats.stats import AllStats, StatsEngine
from bashstats.xp import activity_xp, badge_xp

logger = logging.getLogger(__name__)

# Stats copied out of the aggregate views, in flattening order.
AGGREGATE_STATS: tuple[tuple[str, Callable[[AllStats], float]], ...] = (
    ("totalPrompts", lambda s: s.lifetime.total_prompts),
    ("totalToolCalls", lambda s: s.lifetime.total_tool_calls),
    ("totalSessions", lambda s: s.lifetime.total_sessions),
    ("totalCharsTyped", lambda s: s.lifetime.total_chars_typed),
    ("totalBashCommands", lambda s: s.lifetime.total_bash_commands),
    ("totalFilesRead", lambda s: s.lifetime.total_files_read),
    ("totalFilesEdited", lambda s: s.lifetime.total_files_edited),
    ("totalFilesCreated", lambda s: s.lifetime.total_files_created),
    ("totalSubagents", lambda s: s.lifetime.total_subagents),
    ("totalErrors", lambda s: s.lifetime.total_errors),
    ("totalRateLimits", lambda s: s.lifetime.total_rate_limits),
    ("totalWebFetches", lambda s: s.lifetime.total_web_fetches),
    ("totalWebSearches", lambda s: s.lifetime.total_web_searches),
    ("totalCompactions", lambda s: s.lifetime.total_compactions),
    ("totalInputTokens", lambda s: s.lifetime.total_input_tokens),
    ("totalOutputTokens", lambda s: s.lifetime.total_output_tokens),
    ("totalCacheCreationTokens", lambda s: s.lifetime.total_cache_creation_tokens),
    ("totalCacheReadTokens", lambda s: s.lifetime.total_cache_read_tokens),
    ("totalTokens", lambda s: s.lifetime.total_tokens),
    ("totalCommits", lambda s: s.lifetime.total_commits),
    ("totalLinesAdded", lambda s: s.lifetime.total_lines_added),
    ("totalLinesRemoved", lambda s: s.lifetime.total_lines_removed),
    ("totalLinesChanged", lambda s: s.lifetime.total_lines_added + s.lifetime.total_lines_removed),
    ("totalSessionHours", lambda s: math.floor(s.lifetime.total_duration_seconds / 3600)),
    ("firstEverSession", lambda s: int(s.lifetime.total_sessions > 0)),
    ("currentStreak", lambda s: s.time.current_streak),
    ("longestStreak", lambda s: s.time.longest_streak),
    ("nightOwlCount", lambda s: s.time.night_owl_count),
    ("earlyBirdCount", lambda s: s.time.early_bird_count),
    ("weekendSessions", lambda s: s.time.weekend_sessions),
    ("peakHourCount", lambda s: s.time.peak_hour_count),
    ("busiestDateCount", lambda s: s.time.busiest_date_count),
    ("mostToolsInSession", lambda s: s.sessions.most_tools_in_session),
    ("mostPromptsInSession", lambda s: s.sessions.most_prompts_in_session),
    ("mostTokensInSession", lambda s: s.sessions.most_tokens_in_session),
    ("longestSessionHours", lambda s: math.floor(s.sessions.longest_session_seconds / 3600)),
    ("uniqueProjects", lambda s: s.projects.unique_projects),
    ("mostVisitedProjectCount", lambda s: s.projects.most_visited_project_count),
)

# Depend on badge and XP results, so they read 0 while badges are evaluated.
PLACEHOLDER_STATS: tuple[str, ...] = (
    "totalXP",
    "allToolsObsidian",
    "allBadgesGold",
    "allNonSecretBadgesUnlocked",
)


@dataclass
class BadgeResult:
    id: str
    name: str
    icon: str
    description: str
    category: str
    stat: str
    tier: int
    tier_name: str
    value: float
    next_threshold: int
    progress: float
    maxed: bool
    secret: bool
    aspirational: bool
    trigger: str

    @property
    def unlocked(self) -> bool:
        return self.tier > 0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["unlocked"] = self.unlocked
        return data


@dataclass
class XPResult:
    total_xp: int
    rank_number: int
    rank_tier: str
    next_rank_xp: int
    progress: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _next_threshold(badge: BadgeDef, tier: int) -> int:
    if badge.aspirational or tier >= MAX_TIER:
        return badge.tiers[MAX_TIER - 1]
    return badge.tiers[tier]


def score_badge(badge: BadgeDef, value: float) -> BadgeResult:
    """Evaluate one badge against the current value of its stat."""
    tier, progress = evaluate_badge(badge, value)
    return BadgeResult(
        id=badge.id,
        name=badge.name,
        icon=badge.icon,
        description=badge.description,
        category=badge.category,
        stat=badge.stat,
        tier=tier,
        tier_name=TIER_NAMES[tier],
        value=value,
        next_threshold=_next_threshold(badge, tier),
        progress=progress,
        maxed=tier >= MAX_TIER,
        secret=badge.secret,
        aspirational=badge.aspirational,
        trigger=badge.trigger,
    )


class AchievementEngine:
    """Flattens stats, scores badges and totals XP.

    Evaluating badges records an unlock row for every tier reached; those
    writes are idempotent so repeated calls are safe.
    """

    def __init__(self, db: Database, today: date | None = None) -> None:
        self.db = db
        self.stats = StatsEngine(db, today)

    def flatten_stats(
        self, agent: str | None = None, all_stats: AllStats | None = None
    ) -> dict[str, float]:
        """Every named statistic a badge can watch, in one map."""
        all_stats = all_stats or self.stats.get_all_stats(agent)
        flat: dict[str, float] = {name: fn(all_stats) for name, fn in AGGREGATE_STATS}
        scope = QueryScope(agent=agent, today=self.stats.today)
        for name, query in PATTERN_QUERIES:
            flat[name] = query(self.db, scope)
        for name in PLACEHOLDER_STATS:
            flat[name] = 0
        return flat

    def compute_badges(
        self, agent: str | None = None, flat: dict[str, float] | None = None
    ) -> list[BadgeResult]:
        """Score every catalog badge, locked or not."""
        flat = flat if flat is not None else self.flatten_stats(agent)
        results = []
        for badge in BADGES:
            if badge.stat not in flat:
                logger.debug("badge %s watches unknown stat %s", badge.id, badge.stat)
            result = score_badge(badge, flat.get(badge.stat, 0))
            for tier in range(1, result.tier + 1):
                self.db.insert_unlock(badge.id, tier)
            results.append(result)
        return results

    def compute_xp(
        self,
        agent: str | None = None,
        all_stats: AllStats | None = None,
        badges: list[BadgeResult] | None = None,
    ) -> XPResult:
        """Total XP from activity plus badge tiers, mapped onto the rank curve."""
        all_stats = all_stats or self.stats.get_all_stats(agent)
        if badges is None:
            badges = self.compute_badges(agent, self.flatten_stats(agent, all_stats))
        total = activity_xp(
            all_stats.lifetime.total_prompts,
            all_stats.lifetime.total_sessions,
            all_stats.lifetime.total_duration_seconds,
            all_stats.time.longest_streak,
        ) + badge_xp([b.tier for b in badges])
        rank = rank_from_xp(total)
        progress, next_rank_xp = rank_progress(total, rank)
        return XPResult(
            total_xp=total,
            rank_number=rank,
            rank_tier=rank_tier(rank),
            next_rank_xp=next_rank_xp,
            progress=progress,
        )

    def get_achievements_payload(self, agent: str | None = None) -> dict[str, Any]:
        """Stats, badges and XP from a single read of the log."""
        all_stats = self.stats.get_all_stats(agent)
        badges = self.compute_badges(agent, self.flatten_stats(agent, all_stats))
        xp = self.compute_xp(agent, all_stats, badges)
        return {
            "stats": all_stats.to_dict(),
            "badges": [b.to_dict() for b in badges],
            "xp": xp.to_dict(),
        }
