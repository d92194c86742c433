"""Derived statistics computed by pattern queries over the raw event log.

Each query is a function ``(db, scope) -> int`` returning 0 on an empty log.
Boolean-style queries return 0 or 1. Sequence queries fetch one ordered
stream and fold over it.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from pathlib import PurePath

from bashstats.dates import is_full_moon, is_holiday, parse_timestamp, quarter_key
from bashstats.db import Database, agent_clause
from bashstats.stats import parse_payload


SEARCH_TOOLS = frozenset({"Grep", "Glob"})
EDIT_TOOLS = frozenset({"Edit", "MultiEdit"})
# Failures of these are usually a stale match string, not a real error
EDIT_TYPE_TOOLS = frozenset({"Edit", "MultiEdit", "Write", "NotebookEdit"})
WEB_TOOLS = frozenset({"WebFetch", "WebSearch"})
FILE_TOOLS = ("Read", "Write", "Edit", "MultiEdit")
FULL_SEND_TOOLS = ("Bash", "Read", "Write", "Edit", "Grep", "Glob", "WebFetch")

POLITE_PHRASES = ("please", "thank")
APOLOGY_PHRASES = ("sorry", "apologi", "my bad", "my mistake")
NEGOTIATION_PHRASES = (
    "how about",
    "what if",
    "would it be possible",
    "could we instead",
    "meet me halfway",
    "compromise",
)
EXISTENTIAL_PHRASES = (
    "are you sentient",
    "are you conscious",
    "are you alive",
    "do you dream",
    "do you have feelings",
    "meaning of life",
)
BUG_PHRASES = ("bug", "fix")
TEST_COMMANDS = (
    "pytest",
    "npm test",
    "npm run test",
    "yarn test",
    "pnpm test",
    "go test",
    "cargo test",
    "jest",
    "vitest",
    "rspec",
    "mvn test",
)

LONG_PROMPT_CHARS = 1000
HUGE_PROMPT_CHARS = 5000
SHORT_PROMPT_WORDS = 3
SHOUT_MIN_LENGTH = 10
MULTI_LINE_PROMPT_LINES = 10
NUMBERED_LIST_MIN_ITEMS = 3
RAPID_REPEAT_SECONDS = 60
QUICK_SESSION_SECONDS = 300
LONG_SESSION_SECONDS = 8 * 3600
SPEED_RUN_SECONDS = 20
BREAK_DAYS = 7
FINISHED_PROJECT_DAYS = 7
LEGACY_RETURN_DAYS = 30

EMOJI = re.compile("[\U0001F300-\U0001FAFF\U0001F1E6-\U0001F1FF\u2600-\u27BF]")
NUMBERED_LINE = re.compile(r"^\s*\d+\.\s")


@dataclass(frozen=True)
class QueryScope:
    """Agent filter and reference date passed to every pattern query."""

    agent: str | None = None
    today: date = field(default_factory=date.today)


PatternQuery = Callable[[Database, QueryScope], int]


# -- shared fetches -----------------------------------------------------------


def _count(db: Database, scope: QueryScope, where: str, params: tuple = ()) -> int:
    clause, agent_params = agent_clause(scope.agent)
    return int(db.scalar(f"SELECT COUNT(*) FROM events WHERE {where}{clause}", params + agent_params))


def _tool_count(db: Database, scope: QueryScope, *tools: str) -> int:
    marks = ", ".join("?" for _ in tools)
    return _count(db, scope, f"hook_type = 'PostToolUse' AND tool_name IN ({marks})", tools)


def _bash_count(db: Database, scope: QueryScope, *fragments: str) -> int:
    likes = " OR ".join("tool_input LIKE ?" for _ in fragments)
    return _count(
        db,
        scope,
        f"hook_type = 'PostToolUse' AND tool_name = 'Bash' AND ({likes})",
        tuple(f"%{f}%" for f in fragments),
    )


def _prompt_count(db: Database, scope: QueryScope, where: str, params: tuple = ()) -> int:
    clause, agent_params = agent_clause(scope.agent)
    return int(db.scalar(f"SELECT COUNT(*) FROM prompts WHERE {where}{clause}", params + agent_params))


def _phrase_count(db: Database, scope: QueryScope, phrases: tuple[str, ...]) -> int:
    # LIKE is case-insensitive for ASCII
    likes = " OR ".join("content LIKE ?" for _ in phrases)
    return _prompt_count(db, scope, f"({likes})", tuple(f"%{p}%" for p in phrases))


def _prompt_contents(db: Database, scope: QueryScope) -> list[str]:
    clause, params = agent_clause(scope.agent)
    found = db.rows(f"SELECT content FROM prompts WHERE 1 = 1{clause} ORDER BY timestamp, id", params)
    return [row["content"] for row in found]


def _session_scalar(db: Database, scope: QueryScope, select: str, where: str = "1 = 1") -> int:
    clause, params = agent_clause(scope.agent, "agent")
    return int(db.scalar(f"SELECT {select} FROM sessions WHERE {where}{clause}", params))


def _session_days(db: Database, scope: QueryScope) -> list[date]:
    """Distinct session start dates, ascending."""
    clause, params = agent_clause(scope.agent, "agent")
    found = db.rows(
        "SELECT DISTINCT substr(started_at, 1, 10) AS day FROM sessions "
        f"WHERE 1 = 1{clause} ORDER BY day",
        params,
    )
    return [date.fromisoformat(row["day"]) for row in found]


def _file_path(raw: str | None) -> str | None:
    payload = parse_payload(raw)
    if not payload:
        return None
    path = payload.get("file_path") or payload.get("notebook_path")
    return path if isinstance(path, str) else None


def _outcomes(db: Database, scope: QueryScope) -> list[tuple[str, bool]]:
    """(tool name, succeeded) for every tool outcome, oldest first."""
    clause, params = agent_clause(scope.agent)
    found = db.rows(
        "SELECT tool_name, hook_type FROM events "
        f"WHERE hook_type IN ('PostToolUse', 'PostToolUseFailure'){clause} "
        "ORDER BY timestamp, id",
        params,
    )
    return [(row["tool_name"], row["hook_type"] == "PostToolUse") for row in found]


def _session_pairs(db: Database, scope: QueryScope) -> Iterator[tuple[dict, dict]]:
    """Consecutive successful tool calls within the same session."""
    clause, params = agent_clause(scope.agent)
    found = db.rows(
        "SELECT session_id, tool_name, tool_input FROM events "
        f"WHERE hook_type = 'PostToolUse'{clause} ORDER BY session_id, timestamp, id",
        params,
    )
    prev = None
    for row in found:
        cur = dict(row)
        if prev is not None and prev["session_id"] == cur["session_id"]:
            yield prev, cur
        prev = cur


def _normalize(content: str) -> str:
    return " ".join(content.lower().split())


# -- tool mastery -------------------------------------------------------------


def total_searches(db: Database, scope: QueryScope) -> int:
    return _tool_count(db, scope, *sorted(SEARCH_TOOLS))


def total_greps(db: Database, scope: QueryScope) -> int:
    return _tool_count(db, scope, "Grep")


def total_globs(db: Database, scope: QueryScope) -> int:
    return _tool_count(db, scope, "Glob")


def total_multi_edits(db: Database, scope: QueryScope) -> int:
    return _tool_count(db, scope, "MultiEdit")


def todo_writes(db: Database, scope: QueryScope) -> int:
    return _tool_count(db, scope, "TodoWrite")


def plan_mode_uses(db: Database, scope: QueryScope) -> int:
    return _tool_count(db, scope, "ExitPlanMode")


def permission_requests(db: Database, scope: QueryScope) -> int:
    return _count(db, scope, "hook_type = 'PermissionRequest'")


def unique_tools_used(db: Database, scope: QueryScope) -> int:
    clause, params = agent_clause(scope.agent)
    return int(db.scalar(
        "SELECT COUNT(DISTINCT tool_name) FROM events "
        f"WHERE hook_type = 'PostToolUse' AND tool_name IS NOT NULL{clause}",
        params,
    ))


# -- prompts ------------------------------------------------------------------


def total_words(db: Database, scope: QueryScope) -> int:
    clause, params = agent_clause(scope.agent)
    return int(db.scalar(f"SELECT SUM(word_count) FROM prompts WHERE 1 = 1{clause}", params))


def most_repeated_prompt_count(db: Database, scope: QueryScope) -> int:
    counts = Counter(_normalize(c) for c in _prompt_contents(db, scope))
    counts.pop("", None)
    return max(counts.values(), default=0)


def repeated_prompt_count(db: Database, scope: QueryScope) -> int:
    """Prompts whose normalized text was sent more than once."""
    counts = Counter(_normalize(c) for c in _prompt_contents(db, scope))
    counts.pop("", None)
    return sum(n for n in counts.values() if n > 1)


def rapid_repeat_prompt_count(db: Database, scope: QueryScope) -> int:
    """Repeats of a prompt in the same session or within a minute of it."""
    clause, params = agent_clause(scope.agent)
    found = db.rows(
        f"SELECT session_id, content, timestamp FROM prompts WHERE 1 = 1{clause} "
        "ORDER BY timestamp, id",
        params,
    )
    last_seen: dict[str, tuple[str, datetime]] = {}
    repeats = 0
    for row in found:
        key = _normalize(row["content"])
        if not key:
            continue
        ts = parse_timestamp(row["timestamp"])
        seen = last_seen.get(key)
        if seen is not None:
            session_id, prev_ts = seen
            if session_id == row["session_id"] or (ts - prev_ts).total_seconds() <= RAPID_REPEAT_SECONDS:
                repeats += 1
        last_seen[key] = (row["session_id"], ts)
    return repeats


def long_prompt_count(db: Database, scope: QueryScope) -> int:
    return _prompt_count(db, scope, "char_count > ?", (LONG_PROMPT_CHARS,))


def huge_prompt_count(db: Database, scope: QueryScope) -> int:
    return _prompt_count(db, scope, "char_count > ?", (HUGE_PROMPT_CHARS,))


def short_prompt_count(db: Database, scope: QueryScope) -> int:
    return _prompt_count(db, scope, "word_count BETWEEN 1 AND ?", (SHORT_PROMPT_WORDS,))


def single_word_prompts(db: Database, scope: QueryScope) -> int:
    return _prompt_count(db, scope, "word_count = 1")


def polite_prompt_count(db: Database, scope: QueryScope) -> int:
    return _phrase_count(db, scope, POLITE_PHRASES)


def apology_prompt_count(db: Database, scope: QueryScope) -> int:
    return _phrase_count(db, scope, APOLOGY_PHRASES)


def negotiation_prompt_count(db: Database, scope: QueryScope) -> int:
    return _phrase_count(db, scope, NEGOTIATION_PHRASES)


def existential_prompt_count(db: Database, scope: QueryScope) -> int:
    return _phrase_count(db, scope, EXISTENTIAL_PHRASES)


def bug_fix_prompts(db: Database, scope: QueryScope) -> int:
    return _phrase_count(db, scope, BUG_PHRASES)


def refactor_prompts(db: Database, scope: QueryScope) -> int:
    return _phrase_count(db, scope, ("refactor",))


def code_block_prompts(db: Database, scope: QueryScope) -> int:
    return _phrase_count(db, scope, ("```",))


def url_prompts(db: Database, scope: QueryScope) -> int:
    return _phrase_count(db, scope, ("http://", "https://"))


def shouting_prompt_count(db: Database, scope: QueryScope) -> int:
    count = 0
    for content in _prompt_contents(db, scope):
        text = content.strip()
        if len(text) >= SHOUT_MIN_LENGTH and any(c.isalpha() for c in text) and text == text.upper():
            count += 1
    return count


def emoji_prompt_count(db: Database, scope: QueryScope) -> int:
    return sum(1 for content in _prompt_contents(db, scope) if EMOJI.search(content))


def multi_line_prompt_count(db: Database, scope: QueryScope) -> int:
    return sum(
        1
        for content in _prompt_contents(db, scope)
        if len(content.splitlines()) >= MULTI_LINE_PROMPT_LINES
    )


def numbered_list_prompt_count(db: Database, scope: QueryScope) -> int:
    count = 0
    for content in _prompt_contents(db, scope):
        items = sum(1 for line in content.splitlines() if NUMBERED_LINE.match(line))
        if items >= NUMBERED_LIST_MIN_ITEMS:
            count += 1
    return count


def question_prompt_count(db: Database, scope: QueryScope) -> int:
    return sum(1 for content in _prompt_contents(db, scope) if content.rstrip().endswith("?"))


# -- prompt timing ------------------------------------------------------------


def witching_hour_prompts(db: Database, scope: QueryScope) -> int:
    return _prompt_count(db, scope, "CAST(strftime('%H', timestamp) AS INTEGER) IN (2, 3)")


def three_am_prompt(db: Database, scope: QueryScope) -> int:
    return min(_prompt_count(db, scope, "strftime('%H', timestamp) = '03'"), 1)


def max_hours_in_day(db: Database, scope: QueryScope) -> int:
    clause, params = agent_clause(scope.agent)
    return int(db.scalar(
        "SELECT MAX(hours) FROM (SELECT COUNT(DISTINCT strftime('%H', timestamp)) AS hours "
        f"FROM events WHERE 1 = 1{clause} GROUP BY substr(timestamp, 1, 10))",
        params,
    ))


# -- sessions -----------------------------------------------------------------


def quick_session_count(db: Database, scope: QueryScope) -> int:
    return _session_scalar(
        db, scope, "COUNT(*)",
        f"duration_seconds IS NOT NULL AND duration_seconds < {QUICK_SESSION_SECONDS} AND tool_count > 0",
    )


def long_session_count(db: Database, scope: QueryScope) -> int:
    return _session_scalar(db, scope, "COUNT(*)", f"duration_seconds > {LONG_SESSION_SECONDS}")


def speed_run_session(db: Database, scope: QueryScope) -> int:
    found = _session_scalar(
        db, scope, "COUNT(*)",
        f"duration_seconds IS NOT NULL AND duration_seconds <= {SPEED_RUN_SECONDS} AND tool_count > 0",
    )
    return min(found, 1)


def midnight_span_session(db: Database, scope: QueryScope) -> int:
    found = _session_scalar(
        db, scope, "COUNT(*)",
        "ended_at IS NOT NULL AND substr(started_at, 1, 10) != substr(ended_at, 1, 10)",
    )
    return min(found, 1)


def max_errors_in_session(db: Database, scope: QueryScope) -> int:
    return _session_scalar(db, scope, "MAX(error_count)")


def lunch_sessions(db: Database, scope: QueryScope) -> int:
    return _session_scalar(db, scope, "COUNT(*)", "strftime('%H', started_at) = '12'")


def monday_sessions(db: Database, scope: QueryScope) -> int:
    return _session_scalar(db, scope, "COUNT(*)", "strftime('%w', started_at) = '1'")


def friday_sessions(db: Database, scope: QueryScope) -> int:
    return _session_scalar(db, scope, "COUNT(*)", "strftime('%w', started_at) = '5'")


def _max_per_day(db: Database, scope: QueryScope, expr: str, where: str = "1 = 1") -> int:
    clause, params = agent_clause(scope.agent, "agent")
    return int(db.scalar(
        f"SELECT MAX(n) FROM (SELECT {expr} AS n FROM sessions WHERE {where}{clause} "
        "GROUP BY substr(started_at, 1, 10))",
        params,
    ))


def max_sessions_in_day(db: Database, scope: QueryScope) -> int:
    return _max_per_day(db, scope, "COUNT(*)")


def max_projects_in_day(db: Database, scope: QueryScope) -> int:
    return _max_per_day(db, scope, "COUNT(DISTINCT project)", "project IS NOT NULL")


def max_agents_in_day(db: Database, scope: QueryScope) -> int:
    return _max_per_day(db, scope, "COUNT(DISTINCT agent)")


# -- calendar -----------------------------------------------------------------


def active_days(db: Database, scope: QueryScope) -> int:
    return len(_session_days(db, scope))


def unique_months(db: Database, scope: QueryScope) -> int:
    return len({(d.year, d.month) for d in _session_days(db, scope)})


def unique_quarters(db: Database, scope: QueryScope) -> int:
    return len({quarter_key(d) for d in _session_days(db, scope)})


def holiday_activity(db: Database, scope: QueryScope) -> int:
    return int(any(is_holiday(d) for d in _session_days(db, scope)))


def full_moon_session(db: Database, scope: QueryScope) -> int:
    return int(any(is_full_moon(d) for d in _session_days(db, scope)))


def friday_the_13th_session(db: Database, scope: QueryScope) -> int:
    return int(any(d.day == 13 and d.weekday() == 4 for d in _session_days(db, scope)))


def leap_day_session(db: Database, scope: QueryScope) -> int:
    return int(any(d.month == 2 and d.day == 29 for d in _session_days(db, scope)))


def anniversary_session(db: Database, scope: QueryScope) -> int:
    """A session on the month/day of the very first session, in a later year."""
    days = _session_days(db, scope)
    if not days:
        return 0
    first = days[0]
    return int(any(
        d.year != first.year and (d.month, d.day) == (first.month, first.day) for d in days[1:]
    ))


def return_after_break(db: Database, scope: QueryScope) -> int:
    days = _session_days(db, scope)
    return int(any((b - a).days >= BREAK_DAYS for a, b in zip(days, days[1:])))


# -- error streaks and recoveries ---------------------------------------------


def longest_error_free_streak(db: Database, scope: QueryScope) -> int:
    longest = current = 0
    for _, ok in _outcomes(db, scope):
        current = current + 1 if ok else 0
        longest = max(longest, current)
    return longest


def longest_failure_streak(db: Database, scope: QueryScope) -> int:
    longest = current = 0
    for _, ok in _outcomes(db, scope):
        current = 0 if ok else current + 1
        longest = max(longest, current)
    return longest


def _recoveries(outcomes: list[tuple[str, bool]], skip: frozenset[str] = frozenset()) -> int:
    count = 0
    for (prev_tool, prev_ok), (tool, ok) in zip(outcomes, outcomes[1:]):
        if not prev_ok and ok and tool == prev_tool and tool not in skip:
            count += 1
    return count


def tool_recoveries(db: Database, scope: QueryScope) -> int:
    """A failed tool call immediately followed by a success of the same tool."""
    return _recoveries(_outcomes(db, scope))


def recovery_count(db: Database, scope: QueryScope) -> int:
    """Same as tool_recoveries, ignoring edit-type tools."""
    return _recoveries(_outcomes(db, scope), EDIT_TYPE_TOOLS)


def persistence_wins(db: Database, scope: QueryScope) -> int:
    """Successes that end a run of 2+ failures of the same tool."""
    wins = 0
    failing_tool = None
    failures = 0
    for tool, ok in _outcomes(db, scope):
        if not ok:
            if tool == failing_tool:
                failures += 1
            else:
                failing_tool, failures = tool, 1
            continue
        if tool == failing_tool and failures >= 2:
            wins += 1
        failing_tool, failures = None, 0
    return wins


# -- adjacency ----------------------------------------------------------------


def read_edit_bash_combos(db: Database, scope: QueryScope) -> int:
    count = 0
    window: list[str] = []
    session = None
    clause, params = agent_clause(scope.agent)
    found = db.rows(
        "SELECT session_id, tool_name FROM events "
        f"WHERE hook_type = 'PostToolUse'{clause} ORDER BY session_id, timestamp, id",
        params,
    )
    for row in found:
        if row["session_id"] != session:
            session, window = row["session_id"], []
        window = (window + [row["tool_name"]])[-3:]
        if window == ["Read", "Edit", "Bash"]:
            count += 1
    return count


def search_then_edit_count(db: Database, scope: QueryScope) -> int:
    return sum(
        1
        for prev, cur in _session_pairs(db, scope)
        if prev["tool_name"] in SEARCH_TOOLS and cur["tool_name"] in EDIT_TOOLS
    )


def research_then_build(db: Database, scope: QueryScope) -> int:
    return sum(
        1
        for prev, cur in _session_pairs(db, scope)
        if prev["tool_name"] in WEB_TOOLS and cur["tool_name"] in EDIT_TOOLS | {"Write"}
    )


def write_then_read_count(db: Database, scope: QueryScope) -> int:
    count = 0
    for prev, cur in _session_pairs(db, scope):
        if prev["tool_name"] == "Write" and cur["tool_name"] == "Read":
            path = _file_path(prev["tool_input"])
            if path is not None and path == _file_path(cur["tool_input"]):
                count += 1
    return count


def back_to_back_edits(db: Database, scope: QueryScope) -> int:
    count = 0
    for prev, cur in _session_pairs(db, scope):
        if prev["tool_name"] in EDIT_TOOLS and cur["tool_name"] in EDIT_TOOLS:
            path = _file_path(prev["tool_input"])
            if path is not None and path == _file_path(cur["tool_input"]):
                count += 1
    return count


# -- grouped maxima -----------------------------------------------------------


def _edit_targets(db: Database, scope: QueryScope) -> list[tuple[str, str]]:
    clause, params = agent_clause(scope.agent)
    found = db.rows(
        "SELECT session_id, tool_input FROM events "
        f"WHERE hook_type = 'PostToolUse' AND tool_name IN ('Edit', 'MultiEdit'){clause}",
        params,
    )
    targets = []
    for row in found:
        path = _file_path(row["tool_input"])
        if path is not None:
            targets.append((row["session_id"], path))
    return targets


def max_same_file_edits(db: Database, scope: QueryScope) -> int:
    counts = Counter(path for _, path in _edit_targets(db, scope))
    return max(counts.values(), default=0)


def max_same_file_edits_in_session(db: Database, scope: QueryScope) -> int:
    counts = Counter(_edit_targets(db, scope))
    return max(counts.values(), default=0)


def _max_per_session(db: Database, scope: QueryScope, expr: str, where: str) -> int:
    clause, params = agent_clause(scope.agent)
    return int(db.scalar(
        f"SELECT MAX(n) FROM (SELECT {expr} AS n FROM events WHERE {where}{clause} "
        "GROUP BY session_id)",
        params,
    ))


def max_tool_types_in_session(db: Database, scope: QueryScope) -> int:
    return _max_per_session(
        db, scope, "COUNT(DISTINCT tool_name)", "hook_type = 'PostToolUse' AND tool_name IS NOT NULL"
    )


def max_files_created_in_session(db: Database, scope: QueryScope) -> int:
    return _max_per_session(db, scope, "COUNT(*)", "hook_type = 'PostToolUse' AND tool_name = 'Write'")


def max_files_read_in_session(db: Database, scope: QueryScope) -> int:
    return _max_per_session(db, scope, "COUNT(*)", "hook_type = 'PostToolUse' AND tool_name = 'Read'")


def all_tools_in_session(db: Database, scope: QueryScope) -> int:
    marks = ", ".join("?" for _ in FULL_SEND_TOOLS)
    clause, params = agent_clause(scope.agent)
    found = db.rows(
        "SELECT session_id FROM events "
        f"WHERE hook_type = 'PostToolUse' AND tool_name IN ({marks}){clause} "
        "GROUP BY session_id HAVING COUNT(DISTINCT tool_name) = ? LIMIT 1",
        FULL_SEND_TOOLS + params + (len(FULL_SEND_TOOLS),),
    )
    return int(bool(found))


# -- subagents ----------------------------------------------------------------


def concurrent_agent_uses(db: Database, scope: QueryScope) -> int:
    clause, params = agent_clause(scope.agent)
    return int(db.scalar(
        f"SELECT COUNT(DISTINCT session_id) FROM events WHERE hook_type = 'SubagentStart'{clause}",
        params,
    ))


def max_concurrent_subagents(db: Database, scope: QueryScope) -> int:
    clause, params = agent_clause(scope.agent)
    found = db.rows(
        "SELECT hook_type FROM events "
        f"WHERE hook_type IN ('SubagentStart', 'SubagentStop'){clause} ORDER BY timestamp, id",
        params,
    )
    running = peak = 0
    for row in found:
        if row["hook_type"] == "SubagentStart":
            running += 1
            peak = max(peak, running)
        else:
            running = max(running - 1, 0)
    return peak


def nested_subagent(db: Database, scope: QueryScope) -> int:
    return int(max_concurrent_subagents(db, scope) >= 2)


# -- agents -------------------------------------------------------------------


def distinct_agents(db: Database, scope: QueryScope) -> int:
    return _session_scalar(db, scope, "COUNT(DISTINCT agent)")


def _agent_sessions(db: Database, scope: QueryScope, agent: str) -> int:
    clause, params = agent_clause(scope.agent, "agent")
    return int(db.scalar(f"SELECT COUNT(*) FROM sessions WHERE agent = ?{clause}", (agent,) + params))


def claude_sessions(db: Database, scope: QueryScope) -> int:
    return _agent_sessions(db, scope, "claude-code")


def gemini_sessions(db: Database, scope: QueryScope) -> int:
    return _agent_sessions(db, scope, "gemini-cli")


def copilot_sessions(db: Database, scope: QueryScope) -> int:
    return _agent_sessions(db, scope, "copilot-cli")


def opencode_sessions(db: Database, scope: QueryScope) -> int:
    return _agent_sessions(db, scope, "opencode")


def double_agent_days(db: Database, scope: QueryScope) -> int:
    """Calendar dates with sessions from two or more agents."""
    clause, params = agent_clause(scope.agent, "agent")
    return int(db.scalar(
        "SELECT COUNT(*) FROM (SELECT substr(started_at, 1, 10) AS day FROM sessions "
        f"WHERE 1 = 1{clause} GROUP BY day HAVING COUNT(DISTINCT agent) >= 2)",
        params,
    ))


# -- shipping and projects ----------------------------------------------------


def total_prs(db: Database, scope: QueryScope) -> int:
    return _bash_count(db, scope, "gh pr create")


def total_pushes(db: Database, scope: QueryScope) -> int:
    return _bash_count(db, scope, "git push")


def branch_creations(db: Database, scope: QueryScope) -> int:
    return _bash_count(db, scope, "git checkout -b", "git switch -c")


def test_runs(db: Database, scope: QueryScope) -> int:
    return _bash_count(db, scope, *TEST_COMMANDS)


def dangerous_command_blocked(db: Database, scope: QueryScope) -> int:
    """rm -rf commands that were proposed but never ran."""
    clause, params = agent_clause(scope.agent, "pre.session_id")
    return int(db.scalar(
        "SELECT COUNT(*) FROM events AS pre WHERE pre.hook_type = 'PreToolUse' "
        "AND pre.tool_name = 'Bash' AND pre.tool_input LIKE '%rm -rf%' "
        "AND NOT EXISTS (SELECT 1 FROM events AS post "
        "WHERE post.session_id = pre.session_id "
        "AND post.hook_type IN ('PostToolUse', 'PostToolUseFailure') "
        f"AND post.tool_name = 'Bash' AND post.tool_input = pre.tool_input){clause}",
        params,
    ))


def unique_languages(db: Database, scope: QueryScope) -> int:
    """Distinct file extensions read or written."""
    marks = ", ".join("?" for _ in FILE_TOOLS)
    clause, params = agent_clause(scope.agent)
    found = db.rows(
        "SELECT tool_input FROM events "
        f"WHERE hook_type = 'PostToolUse' AND tool_name IN ({marks}){clause}",
        FILE_TOOLS + params,
    )
    extensions = set()
    for row in found:
        path = _file_path(row["tool_input"])
        if path:
            suffix = PurePath(path).suffix.lower()
            if suffix:
                extensions.add(suffix)
    return len(extensions)


def finished_projects(db: Database, scope: QueryScope) -> int:
    """Projects with a commit and no session in the last week."""
    clause, params = agent_clause(scope.agent)
    committed = {
        row["project"]
        for row in db.rows(
            "SELECT DISTINCT project FROM events WHERE hook_type = 'PostToolUse' "
            "AND tool_name = 'Bash' AND tool_input LIKE '%git commit%' "
            f"AND project IS NOT NULL{clause}",
            params,
        )
    }
    if not committed:
        return 0
    s_clause, s_params = agent_clause(scope.agent, "agent")
    last_seen = {
        row["project"]: date.fromisoformat(row["last"][:10])
        for row in db.rows(
            "SELECT project, MAX(started_at) AS last FROM sessions "
            f"WHERE project IS NOT NULL{s_clause} GROUP BY project",
            s_params,
        )
    }
    cutoff = scope.today - timedelta(days=FINISHED_PROJECT_DAYS)
    return sum(
        1 for project in committed if project not in last_seen or last_seen[project] <= cutoff
    )


def legacy_returns(db: Database, scope: QueryScope) -> int:
    """Consecutive sessions on one project that are 30+ days apart."""
    clause, params = agent_clause(scope.agent, "agent")
    found = db.rows(
        "SELECT project, started_at FROM sessions "
        f"WHERE project IS NOT NULL{clause} ORDER BY project, started_at",
        params,
    )
    returns = 0
    for prev, cur in zip(found, found[1:]):
        if prev["project"] != cur["project"]:
            continue
        gap = parse_timestamp(cur["started_at"]) - parse_timestamp(prev["started_at"])
        if gap.days >= LEGACY_RETURN_DAYS:
            returns += 1
    return returns


PATTERN_QUERIES: tuple[tuple[str, PatternQuery], ...] = (
    # tool mastery
    ("totalSearches", total_searches),
    ("totalGreps", total_greps),
    ("totalGlobs", total_globs),
    ("totalMultiEdits", total_multi_edits),
    ("todoWrites", todo_writes),
    ("planModeUses", plan_mode_uses),
    ("permissionRequests", permission_requests),
    ("uniqueToolsUsed", unique_tools_used),
    # prompts
    ("totalWords", total_words),
    ("mostRepeatedPromptCount", most_repeated_prompt_count),
    ("repeatedPromptCount", repeated_prompt_count),
    ("rapidRepeatPromptCount", rapid_repeat_prompt_count),
    ("longPromptCount", long_prompt_count),
    ("hugePromptCount", huge_prompt_count),
    ("shortPromptCount", short_prompt_count),
    ("singleWordPrompts", single_word_prompts),
    ("politePromptCount", polite_prompt_count),
    ("apologyPromptCount", apology_prompt_count),
    ("negotiationPromptCount", negotiation_prompt_count),
    ("existentialPromptCount", existential_prompt_count),
    ("bugFixPrompts", bug_fix_prompts),
    ("refactorPrompts", refactor_prompts),
    ("codeBlockPrompts", code_block_prompts),
    ("urlPrompts", url_prompts),
    ("shoutingPromptCount", shouting_prompt_count),
    ("emojiPromptCount", emoji_prompt_count),
    ("multiLinePromptCount", multi_line_prompt_count),
    ("numberedListPromptCount", numbered_list_prompt_count),
    ("questionPromptCount", question_prompt_count),
    ("witchingHourPrompts", witching_hour_prompts),
    ("threeAmPrompt", three_am_prompt),
    ("maxHoursInDay", max_hours_in_day),
    # sessions
    ("quickSessionCount", quick_session_count),
    ("longSessionCount", long_session_count),
    ("speedRunSession", speed_run_session),
    ("midnightSpanSession", midnight_span_session),
    ("maxErrorsInSession", max_errors_in_session),
    ("lunchSessions", lunch_sessions),
    ("mondaySessions", monday_sessions),
    ("fridaySessions", friday_sessions),
    ("maxSessionsInDay", max_sessions_in_day),
    ("maxProjectsInDay", max_projects_in_day),
    ("maxAgentsInDay", max_agents_in_day),
    # calendar
    ("activeDays", active_days),
    ("uniqueMonths", unique_months),
    ("uniqueQuarters", unique_quarters),
    ("holidayActivity", holiday_activity),
    ("fullMoonSession", full_moon_session),
    ("fridayThe13thSession", friday_the_13th_session),
    ("leapDaySession", leap_day_session),
    ("anniversarySession", anniversary_session),
    ("returnAfterBreak", return_after_break),
    # errors
    ("longestErrorFreeStreak", longest_error_free_streak),
    ("longestFailureStreak", longest_failure_streak),
    ("toolRecoveries", tool_recoveries),
    ("recoveryCount", recovery_count),
    ("persistenceWins", persistence_wins),
    # adjacency
    ("readEditBashCombos", read_edit_bash_combos),
    ("searchThenEditCount", search_then_edit_count),
    ("researchThenBuild", research_then_build),
    ("writeThenReadCount", write_then_read_count),
    ("backToBackEdits", back_to_back_edits),
    # grouped maxima
    ("maxSameFileEdits", max_same_file_edits),
    ("maxSameFileEditsInSession", max_same_file_edits_in_session),
    ("maxToolTypesInSession", max_tool_types_in_session),
    ("maxFilesCreatedInSession", max_files_created_in_session),
    ("maxFilesReadInSession", max_files_read_in_session),
    ("allToolsInSession", all_tools_in_session),
    # subagents
    ("concurrentAgentUses", concurrent_agent_uses),
    ("maxConcurrentSubagents", max_concurrent_subagents),
    ("nestedSubagent", nested_subagent),
    # agents
    ("distinctAgents", distinct_agents),
    ("claudeSessions", claude_sessions),
    ("geminiSessions", gemini_sessions),
    ("copilotSessions", copilot_sessions),
    ("opencodeSessions", opencode_sessions),
    ("doubleAgentDays", double_agent_days),
    ("agentSwitchDays", double_agent_days),
    # shipping and projects
    ("totalPRs", total_prs),
    ("totalPushes", total_pushes),
    ("branchCreations", branch_creations),
    ("testRuns", test_runs),
    ("dangerousCommandBlocked", dangerous_command_blocked),
    ("uniqueLanguages", unique_languages),
    ("finishedProjects", finished_projects),
    ("legacyReturns", legacy_returns),
)
