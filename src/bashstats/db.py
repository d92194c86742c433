"""SQLite event log store for bashstats."""

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any


DEFAULT_DB_PATH = Path.home() / ".bashstats" / "bashstats.db"


class StoreUnavailableError(Exception):
    """The event log could not be opened or read."""


def agent_clause(agent: str | None, column: str = "session_id") -> tuple[str, tuple]:
    """Build an ``AND ...`` predicate restricting rows to one agent.

    ``column`` is either ``agent`` (for the sessions table) or a column
    holding a session id (events, prompts).
    """
    if not agent:
        return "", ()
    if column == "agent":
        return " AND agent = ?", (agent,)
    return f" AND {column} IN (SELECT id FROM sessions WHERE agent = ?)", (agent,)


def local_now() -> str:
    """Local timestamp in ISO-8601 with millisecond precision."""
    return datetime.now().isoformat(timespec="milliseconds")


class Database:
    """SQLite database manager with WAL mode."""

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path or DEFAULT_DB_PATH
        self.conn: sqlite3.Connection | None = None
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self.conn = sqlite3.connect(str(self.db_path))
            self.conn.row_factory = sqlite3.Row
            self.conn.execute("PRAGMA journal_mode=WAL")
            self.conn.execute("PRAGMA busy_timeout=5000")
            self.init_db()
        except (sqlite3.Error, OSError) as exc:
            if self.conn is not None:
                self.conn.close()
            raise StoreUnavailableError(f"cannot open {self.db_path}: {exc}") from exc

    def init_db(self) -> None:
        """Create tables if they do not exist."""
        self.conn.executescript("""
            CREATE TABLE IF NOT EXISTS sessions (
                id TEXT PRIMARY KEY,
                agent TEXT NOT NULL DEFAULT 'claude-code',
                started_at TEXT NOT NULL,
                ended_at TEXT,
                stop_reason TEXT,
                prompt_count INTEGER DEFAULT 0,
                tool_count INTEGER DEFAULT 0,
                error_count INTEGER DEFAULT 0,
                project TEXT,
                duration_seconds INTEGER,
                input_tokens INTEGER DEFAULT 0,
                output_tokens INTEGER DEFAULT 0,
                cache_creation_input_tokens INTEGER DEFAULT 0,
                cache_read_input_tokens INTEGER DEFAULT 0
            );

            CREATE TABLE IF NOT EXISTS events (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                session_id TEXT NOT NULL,
                hook_type TEXT NOT NULL,
                tool_name TEXT,
                tool_input TEXT,
                tool_output TEXT,
                exit_code INTEGER,
                success INTEGER,
                cwd TEXT,
                project TEXT,
                timestamp TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS prompts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                session_id TEXT NOT NULL,
                content TEXT NOT NULL,
                char_count INTEGER NOT NULL,
                word_count INTEGER NOT NULL,
                timestamp TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS daily_activity (
                date TEXT PRIMARY KEY,
                sessions INTEGER DEFAULT 0,
                prompts INTEGER DEFAULT 0,
                tool_calls INTEGER DEFAULT 0,
                errors INTEGER DEFAULT 0,
                duration_seconds INTEGER DEFAULT 0,
                input_tokens INTEGER DEFAULT 0,
                output_tokens INTEGER DEFAULT 0,
                cache_creation_input_tokens INTEGER DEFAULT 0,
                cache_read_input_tokens INTEGER DEFAULT 0
            );

            CREATE TABLE IF NOT EXISTS achievement_unlocks (
                badge_id TEXT NOT NULL,
                tier INTEGER NOT NULL,
                unlocked_at TEXT NOT NULL,
                notified INTEGER DEFAULT 0,
                PRIMARY KEY (badge_id, tier)
            );

            CREATE TABLE IF NOT EXISTS metadata (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS weekly_goals (
                week_start TEXT NOT NULL,
                challenge_id TEXT NOT NULL,
                completed INTEGER DEFAULT 0,
                xp_reward INTEGER NOT NULL,
                PRIMARY KEY (week_start, challenge_id)
            );

            CREATE TABLE IF NOT EXISTS weekly_xp (
                week_start TEXT PRIMARY KEY,
                base_xp INTEGER DEFAULT 0,
                multiplier REAL DEFAULT 1.0,
                bonus_xp INTEGER DEFAULT 0
            );

            CREATE INDEX IF NOT EXISTS idx_events_session ON events(session_id);
            CREATE INDEX IF NOT EXISTS idx_events_hook_type ON events(hook_type);
            CREATE INDEX IF NOT EXISTS idx_events_tool_name ON events(tool_name);
            CREATE INDEX IF NOT EXISTS idx_events_timestamp ON events(timestamp);
            CREATE INDEX IF NOT EXISTS idx_prompts_session ON prompts(session_id);
            CREATE INDEX IF NOT EXISTS idx_prompts_timestamp ON prompts(timestamp);
        """)
        self.conn.commit()

    # -- generic queries ------------------------------------------------------

    def rows(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        """Run a read query and return every row."""
        try:
            return self.conn.execute(sql, params).fetchall()
        except sqlite3.DatabaseError as exc:
            raise StoreUnavailableError(str(exc)) from exc

    def scalar(self, sql: str, params: tuple = ()) -> int | float:
        """Run a read query and return the first column of the first row, or 0."""
        found = self.rows(sql, params)
        if not found or found[0][0] is None:
            return 0
        return found[0][0]

    def _write(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        try:
            cur = self.conn.execute(sql, params)
            self.conn.commit()
        except sqlite3.DatabaseError as exc:
            raise StoreUnavailableError(str(exc)) from exc
        return cur

    # -- sessions -------------------------------------------------------------

    def insert_session(
        self,
        session_id: str,
        started_at: str,
        project: str | None = None,
        agent: str = "claude-code",
    ) -> None:
        """Insert a session; a repeated id is ignored."""
        self._write(
            "INSERT OR IGNORE INTO sessions (id, agent, started_at, project) VALUES (?, ?, ?, ?)",
            (session_id, agent, started_at, project),
        )

    def get_session(self, session_id: str) -> dict[str, Any] | None:
        """Get a session by id."""
        found = self.rows("SELECT * FROM sessions WHERE id = ?", (session_id,))
        return dict(found[0]) if found else None

    def update_session(self, session_id: str, **fields: Any) -> None:
        """Set ended_at, stop_reason, duration_seconds or project on a session."""
        unknown = set(fields) - {"ended_at", "stop_reason", "duration_seconds", "project"}
        if unknown:
            raise ValueError(f"cannot update session columns: {sorted(unknown)}")
        if not fields:
            return
        assignments = ", ".join(f"{key} = ?" for key in fields)
        self._write(
            f"UPDATE sessions SET {assignments} WHERE id = ?",
            (*fields.values(), session_id),
        )

    def update_session_tokens(self, session_id: str, tokens: dict[str, int]) -> None:
        """Attach final token totals to a session."""
        self._write(
            "UPDATE sessions SET input_tokens = ?, output_tokens = ?, "
            "cache_creation_input_tokens = ?, cache_read_input_tokens = ? WHERE id = ?",
            (
                tokens.get("input_tokens", 0),
                tokens.get("output_tokens", 0),
                tokens.get("cache_creation_input_tokens", 0),
                tokens.get("cache_read_input_tokens", 0),
                session_id,
            ),
        )

    def increment_session_counters(
        self, session_id: str, prompts: int = 0, tools: int = 0, errors: int = 0
    ) -> None:
        """Add to a session's running prompt/tool/error counters."""
        self._write(
            "UPDATE sessions SET prompt_count = prompt_count + ?, "
            "tool_count = tool_count + ?, error_count = error_count + ? WHERE id = ?",
            (prompts, tools, errors, session_id),
        )

    # -- events ---------------------------------------------------------------

    def insert_event(
        self,
        session_id: str,
        hook_type: str,
        timestamp: str,
        tool_name: str | None = None,
        tool_input: str | None = None,
        tool_output: str | None = None,
        exit_code: int | None = None,
        success: bool | None = None,
        cwd: str | None = None,
        project: str | None = None,
    ) -> int:
        """Append an event and return its row id."""
        cur = self._write(
            "INSERT INTO events (session_id, hook_type, tool_name, tool_input, tool_output, "
            "exit_code, success, cwd, project, timestamp) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                session_id,
                hook_type,
                tool_name,
                tool_input,
                tool_output,
                exit_code,
                None if success is None else int(success),
                cwd,
                project,
                timestamp,
            ),
        )
        return cur.lastrowid

    def get_events(
        self,
        session_id: str | None = None,
        hook_type: str | None = None,
        tool_name: str | None = None,
    ) -> list[dict[str, Any]]:
        """Return events matching every given filter, oldest first."""
        sql = "SELECT * FROM events WHERE 1 = 1"
        params: list[Any] = []
        for column, value in (
            ("session_id", session_id),
            ("hook_type", hook_type),
            ("tool_name", tool_name),
        ):
            if value is not None:
                sql += f" AND {column} = ?"
                params.append(value)
        sql += " ORDER BY timestamp ASC, id ASC"
        return [dict(row) for row in self.rows(sql, tuple(params))]

    # -- prompts --------------------------------------------------------------

    def insert_prompt(self, session_id: str, content: str, timestamp: str) -> None:
        """Store a user prompt with its character and word counts."""
        self._write(
            "INSERT INTO prompts (session_id, content, char_count, word_count, timestamp) "
            "VALUES (?, ?, ?, ?, ?)",
            (session_id, content, len(content), len(content.split()), timestamp),
        )

    def get_prompts(self, session_id: str) -> list[dict[str, Any]]:
        """Return a session's prompts, oldest first."""
        found = self.rows(
            "SELECT * FROM prompts WHERE session_id = ? ORDER BY timestamp ASC, id ASC",
            (session_id,),
        )
        return [dict(row) for row in found]

    # -- daily activity -------------------------------------------------------

    DAILY_COLUMNS = (
        "sessions",
        "prompts",
        "tool_calls",
        "errors",
        "duration_seconds",
        "input_tokens",
        "output_tokens",
        "cache_creation_input_tokens",
        "cache_read_input_tokens",
    )

    def increment_daily_activity(self, date: str, **increments: int) -> None:
        """Add counters to a date's rollup, creating the row if needed."""
        unknown = set(increments) - set(self.DAILY_COLUMNS)
        if unknown:
            raise ValueError(f"unknown daily activity columns: {sorted(unknown)}")
        if not increments:
            return
        columns = list(increments)
        placeholders = ", ".join("?" for _ in columns)
        updates = ", ".join(f"{c} = {c} + excluded.{c}" for c in columns)
        self._write(
            f"INSERT INTO daily_activity (date, {', '.join(columns)}) "
            f"VALUES (?, {placeholders}) "
            f"ON CONFLICT(date) DO UPDATE SET {updates}",
            (date, *increments.values()),
        )

    def get_daily_activity(self, date: str) -> dict[str, Any] | None:
        """Get the rollup for one date."""
        found = self.rows("SELECT * FROM daily_activity WHERE date = ?", (date,))
        return dict(found[0]) if found else None

    def get_all_daily_activity(self, limit: int | None = None) -> list[dict[str, Any]]:
        """Return rollups newest first, optionally limited."""
        sql = "SELECT * FROM daily_activity ORDER BY date DESC"
        params: tuple = ()
        if limit is not None:
            sql += " LIMIT ?"
            params = (limit,)
        return [dict(row) for row in self.rows(sql, params)]

    # -- achievement unlocks --------------------------------------------------

    def insert_unlock(self, badge_id: str, tier: int) -> None:
        """Record that a badge tier was reached; existing rows are kept as-is."""
        self._write(
            "INSERT OR IGNORE INTO achievement_unlocks (badge_id, tier, unlocked_at) "
            "VALUES (?, ?, ?)",
            (badge_id, tier, local_now()),
        )

    def get_unlocks(self) -> list[dict[str, Any]]:
        """Return all unlock rows, oldest first."""
        found = self.rows(
            "SELECT * FROM achievement_unlocks ORDER BY unlocked_at ASC, badge_id, tier"
        )
        return [dict(row) for row in found]

    def get_unnotified_unlocks(self) -> list[dict[str, Any]]:
        """Return unlock rows not yet shown to the user."""
        found = self.rows(
            "SELECT * FROM achievement_unlocks WHERE notified = 0 "
            "ORDER BY unlocked_at ASC, badge_id, tier"
        )
        return [dict(row) for row in found]

    def mark_notified(self, badge_id: str, tier: int) -> None:
        """Flag an unlock as shown."""
        self._write(
            "UPDATE achievement_unlocks SET notified = 1 WHERE badge_id = ? AND tier = ?",
            (badge_id, tier),
        )

    # -- metadata -------------------------------------------------------------

    def set_metadata(self, key: str, value: str) -> None:
        """Set a metadata value (upsert)."""
        self._write(
            "INSERT INTO metadata (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
            (key, str(value)),
        )

    def get_metadata(self, key: str) -> str | None:
        """Get a metadata value by key."""
        found = self.rows("SELECT value FROM metadata WHERE key = ?", (key,))
        return found[0]["value"] if found else None

    # -- weekly goals ---------------------------------------------------------

    def insert_weekly_goal(self, week_start: str, challenge_id: str, xp_reward: int) -> None:
        """Remember that a challenge was selected for a week."""
        self._write(
            "INSERT OR IGNORE INTO weekly_goals (week_start, challenge_id, xp_reward) "
            "VALUES (?, ?, ?)",
            (week_start, challenge_id, xp_reward),
        )

    def complete_weekly_goal(self, week_start: str, challenge_id: str) -> None:
        """Mark a week's challenge as completed."""
        self._write(
            "UPDATE weekly_goals SET completed = 1 WHERE week_start = ? AND challenge_id = ?",
            (week_start, challenge_id),
        )

    def get_weekly_goals(self, week_start: str) -> list[dict[str, Any]]:
        """Return the challenges stored for a week."""
        found = self.rows(
            "SELECT * FROM weekly_goals WHERE week_start = ? ORDER BY challenge_id",
            (week_start,),
        )
        return [dict(row) for row in found]

    def upsert_weekly_xp(
        self, week_start: str, base_xp: int, multiplier: float, bonus_xp: int
    ) -> None:
        """Store the XP breakdown of a week."""
        self._write(
            "INSERT INTO weekly_xp (week_start, base_xp, multiplier, bonus_xp) "
            "VALUES (?, ?, ?, ?) "
            "ON CONFLICT(week_start) DO UPDATE SET base_xp = excluded.base_xp, "
            "multiplier = excluded.multiplier, bonus_xp = excluded.bonus_xp",
            (week_start, base_xp, multiplier, bonus_xp),
        )

    def get_weekly_xp(self, week_start: str) -> dict[str, Any] | None:
        """Get the stored XP breakdown of a week."""
        found = self.rows("SELECT * FROM weekly_xp WHERE week_start = ?", (week_start,))
        return dict(found[0]) if found else None

    RESET_TABLES = (
        "sessions",
        "events",
        "prompts",
        "daily_activity",
        "achievement_unlocks",
        "metadata",
        "weekly_goals",
        "weekly_xp",
    )

    def reset(self) -> None:
        """Delete every recorded row and mark a fresh start."""
        try:
            with self.conn:
                for table in self.RESET_TABLES:
                    self.conn.execute(f"DELETE FROM {table}")
        except sqlite3.DatabaseError as exc:
            raise StoreUnavailableError(str(exc)) from exc
        self.set_metadata("first_run", local_now())

    def close(self) -> None:
        """Close the database connection."""
        self.conn.close()
