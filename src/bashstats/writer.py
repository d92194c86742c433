"""Record hook events into the event log, keeping rollups in step."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import PurePath
from typing import Any

from bashstats.db import Database, local_now

TOKEN_KEYS = (
    "input_tokens",
    "output_tokens",
    "cache_creation_input_tokens",
    "cache_read_input_tokens",
)


def _serialize(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _project(cwd: str | None) -> str | None:
    if not cwd:
        return None
    return PurePath(cwd).name or None


class EventWriter:
    """Append-side of the event log.

    Each ``record_*`` method writes the raw event plus the session counters
    and the daily rollup it affects. ``timestamp`` defaults to now.
    """

    def __init__(self, db: Database) -> None:
        self.db = db

    def record_session_start(
        self,
        session_id: str,
        cwd: str | None = None,
        source: str = "startup",
        agent: str = "claude-code",
        timestamp: str | None = None,
    ) -> None:
        ts = timestamp or local_now()
        project = _project(cwd)
        self.db.insert_session(session_id, ts, project=project, agent=agent)
        self.db.insert_event(
            session_id,
            "SessionStart",
            ts,
            tool_input=json.dumps({"source": source}),
            cwd=cwd,
            project=project,
        )
        self.db.increment_daily_activity(ts[:10], sessions=1)

    def record_prompt(self, session_id: str, content: str, timestamp: str | None = None) -> None:
        ts = timestamp or local_now()
        self.db.insert_prompt(session_id, content, ts)
        self.db.insert_event(session_id, "UserPromptSubmit", ts)
        self.db.increment_session_counters(session_id, prompts=1)
        self.db.increment_daily_activity(ts[:10], prompts=1)

    def record_tool_use(
        self,
        session_id: str,
        hook_type: str,
        tool_name: str,
        tool_input: Any = None,
        tool_output: Any = None,
        exit_code: int | None = None,
        cwd: str | None = None,
        timestamp: str | None = None,
    ) -> None:
        """Record a PreToolUse, PostToolUse or PostToolUseFailure event.

        Only post-hooks count as tool calls; failures also count as errors.
        """
        ts = timestamp or local_now()
        if hook_type == "PostToolUseFailure":
            success: bool | None = False
        elif exit_code is not None:
            success = exit_code == 0
        elif hook_type == "PostToolUse":
            success = True
        else:
            success = None
        self.db.insert_event(
            session_id,
            hook_type,
            ts,
            tool_name=tool_name,
            tool_input=_serialize(tool_input),
            tool_output=_serialize(tool_output),
            exit_code=exit_code,
            success=success,
            cwd=cwd,
            project=_project(cwd),
        )
        if hook_type in ("PostToolUse", "PostToolUseFailure"):
            errors = 1 if hook_type == "PostToolUseFailure" else 0
            self.db.increment_session_counters(session_id, tools=1, errors=errors)
            if errors:
                self.db.increment_daily_activity(ts[:10], tool_calls=1, errors=1)
            else:
                self.db.increment_daily_activity(ts[:10], tool_calls=1)

    def record_session_end(
        self,
        session_id: str,
        stop_reason: str = "stop",
        tokens: dict[str, int] | None = None,
        timestamp: str | None = None,
    ) -> None:
        ts = timestamp or local_now()
        session = self.db.get_session(session_id)
        duration = 0
        if session is not None:
            started = datetime.fromisoformat(session["started_at"])
            duration = max(0, round((datetime.fromisoformat(ts) - started).total_seconds()))
            self.db.update_session(
                session_id, ended_at=ts, stop_reason=stop_reason, duration_seconds=duration
            )
        self.db.insert_event(
            session_id, "Stop", ts, tool_input=json.dumps({"stop_reason": stop_reason})
        )
        daily: dict[str, int] = {"duration_seconds": duration}
        if tokens:
            self.db.update_session_tokens(session_id, tokens)
            for key in TOKEN_KEYS:
                daily[key] = tokens.get(key, 0)
        self.db.increment_daily_activity(ts[:10], **daily)

    def record_notification(
        self,
        session_id: str,
        message: str,
        notification_type: str | None = None,
        timestamp: str | None = None,
    ) -> None:
        ts = timestamp or local_now()
        self.db.insert_event(
            session_id,
            "Notification",
            ts,
            tool_input=json.dumps({"message": message, "notification_type": notification_type}),
        )
        if notification_type in ("error", "rate_limit"):
            self.db.increment_session_counters(session_id, errors=1)
            self.db.increment_daily_activity(ts[:10], errors=1)

    def record_subagent(
        self,
        session_id: str,
        hook_type: str,
        agent_id: str | None = None,
        agent_type: str | None = None,
        timestamp: str | None = None,
    ) -> None:
        """Record a SubagentStart or SubagentStop event."""
        self.db.insert_event(
            session_id,
            hook_type,
            timestamp or local_now(),
            tool_input=json.dumps({"agent_id": agent_id, "agent_type": agent_type}),
        )

    def record_compaction(
        self, session_id: str, trigger: str = "auto", timestamp: str | None = None
    ) -> None:
        self.db.insert_event(
            session_id,
            "PreCompact",
            timestamp or local_now(),
            tool_input=json.dumps({"trigger": trigger}),
        )

    def record_permission_request(
        self,
        session_id: str,
        tool_name: str | None = None,
        tool_input: Any = None,
        timestamp: str | None = None,
    ) -> None:
        self.db.insert_event(
            session_id,
            "PermissionRequest",
            timestamp or local_now(),
            tool_name=tool_name,
            tool_input=_serialize(tool_input),
        )
