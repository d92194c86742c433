"""Aggregate statistics over the event log.

Every query takes an optional agent filter. Streaks and the busiest date come
from the daily rollup, which does not record agents, so they ignore it.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any

from bashstats.db import Database, agent_clause
from bashstats.streaks import calculate_streak

logger = logging.getLogger(__name__)

KNOWN_AGENTS: tuple[str, ...] = ("claude-code", "gemini-cli", "copilot-cli", "opencode", "unknown")

WEEKDAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

TOOL_OUTCOMES = "('PostToolUse', 'PostToolUseFailure')"

_FILES_CHANGED = re.compile(r"(\d+) files? changed")
_INSERTIONS = re.compile(r"(\d+) insertions?\(\+\)")
_DELETIONS = re.compile(r"(\d+) deletions?\(-\)")


def parse_payload(raw: str | None) -> dict[str, Any] | None:
    """Decode a stored JSON object, or None when absent or malformed."""
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.debug("skipping malformed payload: %.80s", raw)
        return None
    return data if isinstance(data, dict) else None


def parse_commit_output(output: str | None) -> tuple[int, int]:
    """Return (insertions, deletions) from a git commit summary.

    Output without a "N files changed" summary yields (0, 0).
    """
    if not output or not _FILES_CHANGED.search(output):
        return 0, 0
    added = _INSERTIONS.search(output)
    removed = _DELETIONS.search(output)
    return (int(added.group(1)) if added else 0, int(removed.group(1)) if removed else 0)


@dataclass
class LifetimeStats:
    total_sessions: int = 0
    total_prompts: int = 0
    total_chars_typed: int = 0
    total_tool_calls: int = 0
    total_duration_seconds: int = 0
    total_files_read: int = 0
    total_files_written: int = 0
    total_files_edited: int = 0
    total_files_created: int = 0
    total_bash_commands: int = 0
    total_web_fetches: int = 0
    total_web_searches: int = 0
    total_subagents: int = 0
    total_compactions: int = 0
    total_errors: int = 0
    total_rate_limits: int = 0
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    total_cache_creation_tokens: int = 0
    total_cache_read_tokens: int = 0
    total_tokens: int = 0
    total_commits: int = 0
    total_lines_added: int = 0
    total_lines_removed: int = 0


@dataclass
class TimeStats:
    current_streak: int = 0
    longest_streak: int = 0
    peak_hour: int = 0
    peak_hour_count: int = 0
    night_owl_count: int = 0
    early_bird_count: int = 0
    weekend_sessions: int = 0
    most_active_day: str = ""
    busiest_date: str = ""
    busiest_date_count: int = 0


@dataclass
class SessionRecords:
    longest_session_seconds: int = 0
    fastest_session_seconds: int = 0
    most_tools_in_session: int = 0
    most_prompts_in_session: int = 0
    avg_duration_seconds: int = 0
    avg_prompts_per_session: float = 0
    avg_tools_per_session: float = 0
    most_tokens_in_session: int = 0
    avg_tokens_per_session: int = 0


@dataclass
class ProjectStats:
    unique_projects: int = 0
    most_visited_project: str = ""
    most_visited_project_count: int = 0
    projects: dict[str, dict[str, int]] = field(default_factory=dict)


@dataclass
class AllStats:
    lifetime: LifetimeStats
    tools: dict[str, int]
    time: TimeStats
    sessions: SessionRecords
    projects: ProjectStats

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class StatsEngine:
    """Read-only aggregates over a Database."""

    def __init__(self, db: Database, today: date | None = None) -> None:
        self.db = db
        self._today = today

    @property
    def today(self) -> date:
        return self._today or date.today()

    # -- helpers --------------------------------------------------------------

    def _count_events(self, agent: str | None, where: str, params: tuple = ()) -> int:
        clause, agent_params = agent_clause(agent)
        return int(
            self.db.scalar(
                f"SELECT COUNT(*) FROM events WHERE {where}{clause}", params + agent_params
            )
        )

    def _tool_count(self, agent: str | None, *tools: str, failures: bool = False) -> int:
        hooks = TOOL_OUTCOMES if failures else "('PostToolUse')"
        marks = ", ".join("?" for _ in tools)
        return self._count_events(
            agent, f"hook_type IN {hooks} AND tool_name IN ({marks})", tools
        )

    def _notification_types(self, agent: str | None) -> list[str]:
        clause, params = agent_clause(agent)
        found = self.db.rows(
            f"SELECT tool_input FROM events WHERE hook_type = 'Notification'{clause}", params
        )
        types = []
        for row in found:
            payload = parse_payload(row["tool_input"])
            if payload and payload.get("notification_type"):
                types.append(payload["notification_type"])
        return types

    # -- views ----------------------------------------------------------------

    def get_lifetime_stats(self, agent: str | None = None) -> LifetimeStats:
        """Totals across the whole log."""
        s_clause, s_params = agent_clause(agent, "agent")
        p_clause, p_params = agent_clause(agent)

        sessions = self.db.rows(
            "SELECT COUNT(*) AS n, COALESCE(SUM(duration_seconds), 0) AS duration, "
            "COALESCE(SUM(input_tokens), 0) AS input, "
            "COALESCE(SUM(output_tokens), 0) AS output, "
            "COALESCE(SUM(cache_creation_input_tokens), 0) AS cache_creation, "
            "COALESCE(SUM(cache_read_input_tokens), 0) AS cache_read "
            f"FROM sessions WHERE 1 = 1{s_clause}",
            s_params,
        )[0]
        prompts = self.db.rows(
            "SELECT COUNT(*) AS n, COALESCE(SUM(char_count), 0) AS chars "
            f"FROM prompts WHERE 1 = 1{p_clause}",
            p_params,
        )[0]

        notifications = self._notification_types(agent)
        failures = self._count_events(agent, "hook_type = 'PostToolUseFailure'")
        commits, added, removed = self._commit_stats(agent)
        written = self._tool_count(agent, "Write", failures=True)

        stats = LifetimeStats(
            total_sessions=sessions["n"],
            total_prompts=prompts["n"],
            total_chars_typed=prompts["chars"],
            total_tool_calls=self._count_events(agent, f"hook_type IN {TOOL_OUTCOMES}"),
            total_duration_seconds=sessions["duration"],
            total_files_read=self._tool_count(agent, "Read"),
            total_files_written=written,
            total_files_edited=self._tool_count(agent, "Edit", failures=True),
            total_files_created=written,
            total_bash_commands=self._tool_count(agent, "Bash", failures=True),
            total_web_fetches=self._tool_count(agent, "WebFetch", failures=True),
            total_web_searches=self._tool_count(agent, "WebSearch", failures=True),
            total_subagents=self._count_events(agent, "hook_type = 'SubagentStart'"),
            total_compactions=self._count_events(agent, "hook_type = 'PreCompact'"),
            total_errors=failures + sum(1 for t in notifications if t in ("error", "rate_limit")),
            total_rate_limits=sum(1 for t in notifications if t == "rate_limit"),
            total_input_tokens=sessions["input"],
            total_output_tokens=sessions["output"],
            total_cache_creation_tokens=sessions["cache_creation"],
            total_cache_read_tokens=sessions["cache_read"],
            total_commits=commits,
            total_lines_added=added,
            total_lines_removed=removed,
        )
        stats.total_tokens = (
            stats.total_input_tokens
            + stats.total_output_tokens
            + stats.total_cache_creation_tokens
            + stats.total_cache_read_tokens
        )
        return stats

    def _commit_stats(self, agent: str | None) -> tuple[int, int, int]:
        clause, params = agent_clause(agent)
        found = self.db.rows(
            "SELECT tool_output FROM events WHERE hook_type = 'PostToolUse' "
            f"AND tool_name = 'Bash' AND tool_input LIKE '%git commit%'{clause}",
            params,
        )
        added = removed = 0
        for row in found:
            plus, minus = parse_commit_output(row["tool_output"])
            added += plus
            removed += minus
        return len(found), added, removed

    def get_tool_breakdown(self, agent: str | None = None) -> dict[str, int]:
        """Successful invocations per tool name, most used first."""
        clause, params = agent_clause(agent)
        found = self.db.rows(
            "SELECT tool_name, COUNT(*) AS n FROM events "
            f"WHERE hook_type = 'PostToolUse' AND tool_name IS NOT NULL{clause} "
            "GROUP BY tool_name ORDER BY n DESC, tool_name ASC",
            params,
        )
        return {row["tool_name"]: row["n"] for row in found}

    def get_time_stats(self, agent: str | None = None) -> TimeStats:
        """Streaks and when activity happens."""
        stats = TimeStats()

        active = self.db.rows(
            "SELECT date FROM daily_activity "
            "WHERE sessions > 0 OR prompts > 0 OR tool_calls > 0"
        )
        streak = calculate_streak({row["date"] for row in active}, self.today.isoformat())
        stats.current_streak = streak.current_streak
        stats.longest_streak = streak.longest_streak

        p_clause, p_params = agent_clause(agent)
        peak = self.db.rows(
            "SELECT CAST(strftime('%H', timestamp) AS INTEGER) AS hour, COUNT(*) AS n "
            f"FROM prompts WHERE 1 = 1{p_clause} "
            "GROUP BY hour ORDER BY n DESC, hour ASC LIMIT 1",
            p_params,
        )
        if peak:
            stats.peak_hour = peak[0]["hour"]
            stats.peak_hour_count = peak[0]["n"]

        stats.night_owl_count = int(self.db.scalar(
            "SELECT COUNT(*) FROM prompts "
            f"WHERE CAST(strftime('%H', timestamp) AS INTEGER) < 5{p_clause}",
            p_params,
        ))
        stats.early_bird_count = int(self.db.scalar(
            "SELECT COUNT(*) FROM prompts "
            "WHERE CAST(strftime('%H', timestamp) AS INTEGER) BETWEEN 5 AND 7"
            f"{p_clause}",
            p_params,
        ))

        s_clause, s_params = agent_clause(agent, "agent")
        stats.weekend_sessions = int(self.db.scalar(
            "SELECT COUNT(*) FROM sessions "
            f"WHERE strftime('%w', started_at) IN ('0', '6'){s_clause}",
            s_params,
        ))
        day = self.db.rows(
            "SELECT CAST(strftime('%w', started_at) AS INTEGER) AS dow, COUNT(*) AS n "
            f"FROM sessions WHERE 1 = 1{s_clause} "
            "GROUP BY dow ORDER BY n DESC, dow ASC LIMIT 1",
            s_params,
        )
        if day:
            stats.most_active_day = WEEKDAY_NAMES[day[0]["dow"]]

        busiest = self.db.rows(
            "SELECT date, sessions + prompts + tool_calls AS score FROM daily_activity "
            "ORDER BY score DESC, date ASC LIMIT 1"
        )
        if busiest and busiest[0]["score"] > 0:
            stats.busiest_date = busiest[0]["date"]
            stats.busiest_date_count = busiest[0]["score"]
        return stats

    def get_session_records(self, agent: str | None = None) -> SessionRecords:
        """Single-session extremes and averages."""
        clause, params = agent_clause(agent, "agent")
        tokens = (
            "(input_tokens + output_tokens + cache_creation_input_tokens "
            "+ cache_read_input_tokens)"
        )
        row = self.db.rows(
            "SELECT COALESCE(MAX(duration_seconds), 0) AS longest, "
            "COALESCE(MIN(CASE WHEN duration_seconds > 0 THEN duration_seconds END), 0) AS fastest, "
            "COALESCE(MAX(tool_count), 0) AS most_tools, "
            "COALESCE(MAX(prompt_count), 0) AS most_prompts, "
            "COALESCE(AVG(duration_seconds), 0) AS avg_duration, "
            "COALESCE(AVG(prompt_count), 0) AS avg_prompts, "
            "COALESCE(AVG(tool_count), 0) AS avg_tools, "
            f"COALESCE(MAX({tokens}), 0) AS most_tokens, "
            f"COALESCE(AVG({tokens}), 0) AS avg_tokens "
            f"FROM sessions WHERE 1 = 1{clause}",
            params,
        )[0]
        return SessionRecords(
            longest_session_seconds=row["longest"],
            fastest_session_seconds=row["fastest"],
            most_tools_in_session=row["most_tools"],
            most_prompts_in_session=row["most_prompts"],
            avg_duration_seconds=round(row["avg_duration"]),
            avg_prompts_per_session=round(row["avg_prompts"], 2),
            avg_tools_per_session=round(row["avg_tools"], 2),
            most_tokens_in_session=row["most_tokens"],
            avg_tokens_per_session=round(row["avg_tokens"]),
        )

    def get_project_stats(self, agent: str | None = None) -> ProjectStats:
        """Per-project session counts and totals."""
        clause, params = agent_clause(agent, "agent")
        found = self.db.rows(
            "SELECT project, COUNT(*) AS sessions, "
            "COALESCE(SUM(prompt_count), 0) AS prompts, "
            "COALESCE(SUM(tool_count), 0) AS tool_calls, "
            "COALESCE(SUM(duration_seconds), 0) AS duration_seconds "
            f"FROM sessions WHERE project IS NOT NULL AND project != ''{clause} "
            "GROUP BY project ORDER BY sessions DESC, project ASC",
            params,
        )
        stats = ProjectStats(
            projects={
                row["project"]: {
                    "sessions": row["sessions"],
                    "prompts": row["prompts"],
                    "tool_calls": row["tool_calls"],
                    "duration_seconds": row["duration_seconds"],
                }
                for row in found
            }
        )
        stats.unique_projects = len(found)
        if found:
            stats.most_visited_project = found[0]["project"]
            stats.most_visited_project_count = found[0]["sessions"]
        return stats

    def get_all_stats(self, agent: str | None = None) -> AllStats:
        return AllStats(
            lifetime=self.get_lifetime_stats(agent),
            tools=self.get_tool_breakdown(agent),
            time=self.get_time_stats(agent),
            sessions=self.get_session_records(agent),
            projects=self.get_project_stats(agent),
        )

    def get_agent_breakdown(self) -> dict[str, Any]:
        """Sessions and hours per agent, plus the favorite one."""
        found = self.db.rows(
            "SELECT agent, COUNT(*) AS n, COALESCE(SUM(duration_seconds), 0) AS duration "
            "FROM sessions GROUP BY agent ORDER BY n DESC, agent ASC"
        )
        return {
            "favorite_agent": found[0]["agent"] if found else "unknown",
            "sessions_per_agent": {row["agent"]: row["n"] for row in found},
            "hours_per_agent": {row["agent"]: round(row["duration"] / 3600, 1) for row in found},
            "distinct_agents": len(found),
        }

    def get_weekly_goals_payload(self) -> dict[str, Any]:
        """This week's challenges with progress; see bashstats.weekly."""
        from bashstats.weekly import build_weekly_goals

        return build_weekly_goals(self.db, self.today)
