"""Weekly challenges: a stable pick of three per week, scored on that week."""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from typing import Any

from bashstats.dates import week_bounds
from bashstats.db import Database
from bashstats.patterns import TEST_COMMANDS

CHALLENGES_PER_WEEK = 3

# Days active in the week -> XP multiplier
DAYS_ACTIVE_MULTIPLIER: dict[int, float] = {
    0: 1.0,
    1: 1.0,
    2: 1.1,
    3: 1.2,
    4: 1.35,
    5: 1.5,
    6: 1.75,
    7: 2.0,
}


@dataclass(frozen=True)
class WeeklyChallenge:
    id: str
    description: str
    stat: str
    threshold: int
    xp_reward: int


CHALLENGE_POOL: tuple[WeeklyChallenge, ...] = (
    WeeklyChallenge("prompt_sprint", "Send 100 prompts", "prompts", 100, 150),
    WeeklyChallenge("session_stack", "Start 15 sessions", "sessions", 15, 150),
    WeeklyChallenge("tool_frenzy", "Make 500 tool calls", "toolCalls", 500, 200),
    WeeklyChallenge("daily_driver", "Be active on 5 days", "daysActive", 5, 250),
    WeeklyChallenge("ship_it", "Make 5 commits", "commits", 5, 200),
    WeeklyChallenge("editor_in_chief", "Edit files 100 times", "filesEdited", 100, 150),
    WeeklyChallenge("terminal_velocity", "Run 100 bash commands", "bashCommands", 100, 150),
    WeeklyChallenge("test_pilot", "Run the test suite 10 times", "testRuns", 10, 200),
    WeeklyChallenge("detective", "Search the codebase 50 times", "searches", 50, 100),
    WeeklyChallenge("researcher", "Fetch or search the web 10 times", "webResearch", 10, 100),
    WeeklyChallenge("delegator", "Spawn 5 subagents", "subagents", 5, 150),
    WeeklyChallenge("globetrotter", "Work in 3 different projects", "projects", 3, 150),
    WeeklyChallenge("wordsmith", "Type 20,000 characters", "charsTyped", 20000, 100),
    WeeklyChallenge("weekend_shift", "Start 2 sessions on the weekend", "weekendSessions", 2, 100),
    WeeklyChallenge("pusher", "Push 3 times", "pushes", 3, 150),
)

# (db, week start, next week start) -> value
WeekQuery = Callable[[Database, str, str], int]


def _events(where: str, params: tuple = ()) -> WeekQuery:
    def query(db: Database, start: str, end: str) -> int:
        return int(db.scalar(
            f"SELECT COUNT(*) FROM events WHERE {where} AND timestamp >= ? AND timestamp < ?",
            params + (start, end),
        ))
    return query


def _sessions(select: str, where: str = "1 = 1") -> WeekQuery:
    def query(db: Database, start: str, end: str) -> int:
        return int(db.scalar(
            f"SELECT {select} FROM sessions WHERE {where} AND started_at >= ? AND started_at < ?",
            (start, end),
        ))
    return query


def _prompts(select: str) -> WeekQuery:
    def query(db: Database, start: str, end: str) -> int:
        return int(db.scalar(
            f"SELECT {select} FROM prompts WHERE timestamp >= ? AND timestamp < ?",
            (start, end),
        ))
    return query


def _bash(*fragments: str) -> WeekQuery:
    likes = " OR ".join("tool_input LIKE ?" for _ in fragments)
    return _events(
        f"hook_type = 'PostToolUse' AND tool_name = 'Bash' AND ({likes})",
        tuple(f"%{f}%" for f in fragments),
    )


def days_active(db: Database, start: str, end: str) -> int:
    """Dates in [start, end) with any recorded activity."""
    return int(db.scalar(
        "SELECT COUNT(*) FROM daily_activity WHERE date >= ? AND date < ? "
        "AND (sessions > 0 OR prompts > 0 OR tool_calls > 0)",
        (start, end),
    ))


WEEK_QUERIES: dict[str, WeekQuery] = {
    "prompts": _prompts("COUNT(*)"),
    "charsTyped": _prompts("SUM(char_count)"),
    "sessions": _sessions("COUNT(*)"),
    "projects": _sessions("COUNT(DISTINCT project)", "project IS NOT NULL"),
    "weekendSessions": _sessions("COUNT(*)", "strftime('%w', started_at) IN ('0', '6')"),
    "toolCalls": _events("hook_type IN ('PostToolUse', 'PostToolUseFailure')"),
    "filesEdited": _events("hook_type = 'PostToolUse' AND tool_name IN ('Edit', 'MultiEdit')"),
    "bashCommands": _events("hook_type = 'PostToolUse' AND tool_name = 'Bash'"),
    "searches": _events("hook_type = 'PostToolUse' AND tool_name IN ('Grep', 'Glob')"),
    "webResearch": _events("hook_type = 'PostToolUse' AND tool_name IN ('WebFetch', 'WebSearch')"),
    "subagents": _events("hook_type = 'SubagentStart'"),
    "commits": _bash("git commit"),
    "pushes": _bash("git push"),
    "testRuns": _bash(*TEST_COMMANDS),
    "daysActive": days_active,
}


def week_seed(week_start: str) -> int:
    """Stable 32-bit hash of a week-start string."""
    seed = 0
    for char in week_start:
        seed = (seed * 31 + ord(char)) & 0xFFFFFFFF
    return seed


def select_challenges(
    week_start: str,
    pool: tuple[WeeklyChallenge, ...] = CHALLENGE_POOL,
    count: int = CHALLENGES_PER_WEEK,
) -> list[WeeklyChallenge]:
    """Pick ``count`` distinct challenges, always the same ones for a week."""
    remaining = list(pool)
    seed = week_seed(week_start)
    picked = []
    while remaining and len(picked) < count:
        picked.append(remaining.pop(seed % len(remaining)))
        seed = (seed * 1103515245 + 12345) & 0x7FFFFFFF
    return picked


def multiplier_for(days: int) -> float:
    return DAYS_ACTIVE_MULTIPLIER[max(0, min(days, 7))]


def build_weekly_goals(db: Database, today: date | None = None) -> dict[str, Any]:
    """Score this week's challenges and store the week's XP breakdown."""
    monday, _, next_monday = week_bounds(today or date.today())
    start, end = monday.isoformat(), next_monday.isoformat()

    active = days_active(db, start, end)
    multiplier = multiplier_for(active)

    challenges = []
    base_xp = 0
    for challenge in select_challenges(start):
        db.insert_weekly_goal(start, challenge.id, challenge.xp_reward)
        current = WEEK_QUERIES[challenge.stat](db, start, end)
        completed = current >= challenge.threshold
        if completed:
            db.complete_weekly_goal(start, challenge.id)
            base_xp += challenge.xp_reward
        challenges.append({
            "id": challenge.id,
            "description": challenge.description,
            "xp_reward": challenge.xp_reward,
            "completed": completed,
            "progress": min(current / challenge.threshold, 1.0),
            "threshold": challenge.threshold,
            "current": current,
        })

    bonus_xp = math.floor(base_xp * multiplier) - base_xp
    db.upsert_weekly_xp(start, base_xp, multiplier, bonus_xp)
    return {
        "week_start": start,
        "days_active": active,
        "multiplier": multiplier,
        "base_xp": base_xp,
        "bonus_xp": bonus_xp,
        "challenges": challenges,
    }
