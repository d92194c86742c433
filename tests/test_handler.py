"""Tests for hook payload dispatch."""

import json

import pytest

from bashstats.db import Database
from bashstats.handler import detect_agent, handle_hook_event, parse_hook_input


@pytest.fixture
def db(tmp_path):
    database = Database(db_path=tmp_path / "test.db")
    yield database
    database.close()


class TestDetectAgent:
    def test_gemini(self):
        assert detect_agent({"GEMINI_CLI": "1"}) == "gemini-cli"

    def test_copilot(self):
        assert detect_agent({"GITHUB_COPILOT_CLI": "1"}) == "copilot-cli"

    def test_opencode(self):
        assert detect_agent({"OPENCODE": "1"}) == "opencode"

    def test_claude(self):
        assert detect_agent({"CLAUDECODE": "1"}) == "claude-code"

    def test_unknown(self):
        assert detect_agent({}) == "unknown"


class TestParseHookInput:
    def test_valid(self):
        assert parse_hook_input('{"session_id": "s1"}') == {"session_id": "s1"}

    def test_empty(self):
        assert parse_hook_input("") is None
        assert parse_hook_input("   ") is None

    def test_malformed(self):
        assert parse_hook_input("{oops") is None

    def test_non_object(self):
        assert parse_hook_input("[1, 2]") is None


class TestHandleHookEvent:
    def test_session_start_uses_detected_agent(self, db):
        handle_hook_event(
            db, "SessionStart", {"session_id": "s1", "cwd": "/work/app"}, env={"GEMINI_CLI": "1"}
        )
        session = db.get_session("s1")
        assert session["agent"] == "gemini-cli"
        assert session["project"] == "app"

    def test_prompt(self, db):
        handle_hook_event(db, "SessionStart", {"session_id": "s1"}, env={})
        handle_hook_event(db, "UserPromptSubmit", {"session_id": "s1", "prompt": "hello"})
        assert db.get_prompts("s1")[0]["content"] == "hello"
        assert db.get_session("s1")["prompt_count"] == 1

    def test_post_tool_use(self, db):
        handle_hook_event(db, "PostToolUse", {
            "session_id": "s1",
            "cwd": "/work/app",
            "tool_name": "Bash",
            "tool_input": {"command": "git commit -m x"},
            "tool_response": {"stdout": "1 file changed"},
        })
        event = db.get_events(hook_type="PostToolUse")[0]
        assert event["tool_name"] == "Bash"
        assert event["success"] == 1
        assert event["project"] == "app"
        assert json.loads(event["tool_output"]) == {"stdout": "1 file changed"}

    def test_failure(self, db):
        handle_hook_event(db, "PostToolUseFailure", {"session_id": "s1", "tool_name": "Edit"})
        assert db.get_events()[0]["success"] == 0

    def test_stop_reads_transcript(self, db, tmp_path):
        transcript = tmp_path / "t.jsonl"
        transcript.write_text(
            json.dumps({"message": {"id": "m", "usage": {"input_tokens": 7, "output_tokens": 3}}}) + "\n",
            encoding="utf-8",
        )
        handle_hook_event(db, "SessionStart", {"session_id": "s1"}, env={})
        handle_hook_event(db, "Stop", {"session_id": "s1", "transcript_path": str(transcript)})
        session = db.get_session("s1")
        assert session["input_tokens"] == 7
        assert session["stop_reason"] == "stopped"
        assert session["duration_seconds"] is not None

    def test_stop_ignores_non_jsonl_transcript(self, db, tmp_path):
        handle_hook_event(db, "SessionStart", {"session_id": "s1"}, env={})
        handle_hook_event(db, "Stop", {"session_id": "s1", "transcript_path": str(tmp_path / "x.txt")})
        assert db.get_session("s1")["input_tokens"] == 0

    def test_subagents_and_misc(self, db):
        for hook in ("SubagentStart", "SubagentStop", "PreCompact", "Notification", "PermissionRequest"):
            assert handle_hook_event(db, hook, {"session_id": "s1"}) is True
        assert len(db.get_events(session_id="s1")) == 5

    def test_setup_is_noop(self, db):
        assert handle_hook_event(db, "Setup", {"session_id": "s1"}) is False
        assert db.get_events() == []
