"""Tests for event ingestion."""

import json

import pytest

from bashstats.db import Database
from bashstats.writer import EventWriter


@pytest.fixture
def db(tmp_path):
    database = Database(db_path=tmp_path / "test.db")
    yield database
    database.close()


@pytest.fixture
def writer(db):
    return EventWriter(db)


class TestSessionLifecycle:
    def test_start_creates_session_and_rollup(self, db, writer):
        writer.record_session_start("s1", "/home/me/code/widget", timestamp="2026-02-03T09:00:00.000")
        session = db.get_session("s1")
        assert session["project"] == "widget"
        assert session["agent"] == "claude-code"
        assert db.get_daily_activity("2026-02-03")["sessions"] == 1
        event = db.get_events(session_id="s1")[0]
        assert event["hook_type"] == "SessionStart"
        assert json.loads(event["tool_input"]) == {"source": "startup"}

    def test_end_computes_duration_and_tokens(self, db, writer):
        writer.record_session_start("s1", "/tmp/p", timestamp="2026-02-03T09:00:00.000")
        writer.record_session_end(
            "s1",
            tokens={"input_tokens": 100, "output_tokens": 50},
            timestamp="2026-02-03T09:30:00.000",
        )
        session = db.get_session("s1")
        assert session["duration_seconds"] == 1800
        assert session["input_tokens"] == 100
        daily = db.get_daily_activity("2026-02-03")
        assert daily["duration_seconds"] == 1800
        assert daily["output_tokens"] == 50

    def test_duration_null_until_end(self, db, writer):
        writer.record_session_start("s1", timestamp="2026-02-03T09:00:00.000")
        assert db.get_session("s1")["duration_seconds"] is None

    def test_end_of_unknown_session_still_logs_event(self, db, writer):
        writer.record_session_end("ghost", timestamp="2026-02-03T09:30:00.000")
        assert db.get_events(session_id="ghost")[0]["hook_type"] == "Stop"


class TestPromptsAndTools:
    def test_prompt_increments_counters(self, db, writer):
        writer.record_session_start("s1", timestamp="2026-02-03T09:00:00.000")
        writer.record_prompt("s1", "hello there", timestamp="2026-02-03T09:01:00.000")
        assert db.get_session("s1")["prompt_count"] == 1
        assert db.get_daily_activity("2026-02-03")["prompts"] == 1
        assert db.get_prompts("s1")[0]["content"] == "hello there"

    def test_post_tool_use_counts_tool_call(self, db, writer):
        writer.record_session_start("s1", timestamp="2026-02-03T09:00:00.000")
        writer.record_tool_use(
            "s1", "PostToolUse", "Read", {"file_path": "/a.py"}, {"ok": True},
            timestamp="2026-02-03T09:01:00.000",
        )
        event = db.get_events(hook_type="PostToolUse")[0]
        assert event["success"] == 1
        assert json.loads(event["tool_input"]) == {"file_path": "/a.py"}
        assert db.get_session("s1")["tool_count"] == 1
        assert db.get_daily_activity("2026-02-03")["tool_calls"] == 1

    def test_failure_counts_error(self, db, writer):
        writer.record_session_start("s1", timestamp="2026-02-03T09:00:00.000")
        writer.record_tool_use("s1", "PostToolUseFailure", "Bash", timestamp="2026-02-03T09:01:00.000")
        assert db.get_events(hook_type="PostToolUseFailure")[0]["success"] == 0
        session = db.get_session("s1")
        assert (session["tool_count"], session["error_count"]) == (1, 1)
        assert db.get_daily_activity("2026-02-03")["errors"] == 1

    def test_nonzero_exit_code_is_not_success(self, db, writer):
        writer.record_tool_use("s1", "PostToolUse", "Bash", exit_code=2, timestamp="2026-02-03T09:01:00.000")
        assert db.get_events()[0]["success"] == 0

    def test_pre_tool_use_is_not_a_tool_call(self, db, writer):
        writer.record_session_start("s1", timestamp="2026-02-03T09:00:00.000")
        writer.record_tool_use("s1", "PreToolUse", "Bash", timestamp="2026-02-03T09:01:00.000")
        assert db.get_session("s1")["tool_count"] == 0
        assert db.get_events(hook_type="PreToolUse")[0]["success"] is None


class TestOtherEvents:
    def test_rate_limit_notification_is_error(self, db, writer):
        writer.record_session_start("s1", timestamp="2026-02-03T09:00:00.000")
        writer.record_notification("s1", "slow down", "rate_limit", timestamp="2026-02-03T09:01:00.000")
        writer.record_notification("s1", "waiting", "idle", timestamp="2026-02-03T09:02:00.000")
        assert db.get_session("s1")["error_count"] == 1

    def test_subagent_compaction_permission(self, db, writer):
        writer.record_subagent("s1", "SubagentStart", "a1", "explorer", timestamp="2026-02-03T09:01:00.000")
        writer.record_compaction("s1", timestamp="2026-02-03T09:02:00.000")
        writer.record_permission_request("s1", "Bash", {"command": "ls"}, timestamp="2026-02-03T09:03:00.000")
        hooks = [e["hook_type"] for e in db.get_events(session_id="s1")]
        assert hooks == ["SubagentStart", "PreCompact", "PermissionRequest"]
