"""Dispatch decoded hook payloads to the event writer."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from bashstats.db import Database
from bashstats.transcript import sum_transcript_tokens
from bashstats.writer import EventWriter

HOOK_TYPES: tuple[str, ...] = (
    "SessionStart",
    "UserPromptSubmit",
    "PreToolUse",
    "PostToolUse",
    "PostToolUseFailure",
    "Stop",
    "Notification",
    "SubagentStart",
    "SubagentStop",
    "PreCompact",
    "PermissionRequest",
    "Setup",
)


def detect_agent(env: Mapping[str, str] | None = None) -> str:
    """Guess which coding agent fired the hook from its environment."""
    env = os.environ if env is None else env
    if env.get("GEMINI_CLI") or env.get("GEMINI_API_KEY"):
        return "gemini-cli"
    if env.get("GITHUB_COPILOT_CLI"):
        return "copilot-cli"
    if env.get("OPENCODE"):
        return "opencode"
    if env.get("CLAUDECODE") or env.get("CLAUDE_CODE_ENTRYPOINT"):
        return "claude-code"
    return "claude-code" if env.get("CLAUDE_PROJECT_DIR") else "unknown"


def parse_hook_input(raw: str) -> dict[str, Any] | None:
    """Decode hook stdin; None for empty or malformed input."""
    if not raw or not raw.strip():
        return None
    try:
        event = json.loads(raw)
    except json.JSONDecodeError:
        return None
    return event if isinstance(event, dict) else None


def _tokens_from(payload: dict[str, Any]) -> dict[str, int] | None:
    raw_path = payload.get("transcript_path") or ""
    if not isinstance(raw_path, str) or not raw_path.endswith(".jsonl"):
        return None
    return sum_transcript_tokens(Path(raw_path).expanduser().resolve())


def handle_hook_event(
    db: Database,
    hook_type: str,
    payload: dict[str, Any],
    env: Mapping[str, str] | None = None,
) -> bool:
    """Record one hook payload. Returns False for unknown or no-op hooks."""
    writer = EventWriter(db)
    session_id = payload.get("session_id") or ""
    cwd = payload.get("cwd") or None

    if hook_type == "SessionStart":
        writer.record_session_start(
            session_id, cwd, payload.get("source") or "startup", detect_agent(env)
        )
    elif hook_type == "UserPromptSubmit":
        writer.record_prompt(session_id, payload.get("prompt") or "")
    elif hook_type == "PreToolUse":
        writer.record_tool_use(
            session_id, hook_type, payload.get("tool_name") or "",
            payload.get("tool_input") or {}, cwd=cwd,
        )
    elif hook_type == "PostToolUse":
        writer.record_tool_use(
            session_id, hook_type, payload.get("tool_name") or "",
            payload.get("tool_input") or {}, payload.get("tool_response") or {},
            payload.get("exit_code"), cwd,
        )
    elif hook_type == "PostToolUseFailure":
        writer.record_tool_use(
            session_id, hook_type, payload.get("tool_name") or "",
            payload.get("tool_input") or {}, payload.get("tool_response") or {},
            1, cwd,
        )
    elif hook_type == "Stop":
        writer.record_session_end(session_id, "stopped", _tokens_from(payload))
    elif hook_type == "Notification":
        writer.record_notification(
            session_id, payload.get("message") or "", payload.get("notification_type")
        )
    elif hook_type in ("SubagentStart", "SubagentStop"):
        writer.record_subagent(
            session_id, hook_type, payload.get("agent_id"), payload.get("agent_type")
        )
    elif hook_type == "PreCompact":
        writer.record_compaction(session_id, payload.get("trigger") or "manual")
    elif hook_type == "PermissionRequest":
        writer.record_permission_request(
            session_id, payload.get("tool_name"), payload.get("tool_input") or {}
        )
    else:
        return False
    return True
