"""Tests for CLI commands and display helpers."""

from __future__ import annotations

import io
import json
from datetime import date
from unittest.mock import patch

import pytest

from bashstats.cli import (
    build_parser,
    do_achievements,
    do_export,
    do_goals,
    do_hook,
    do_reset,
    do_stats,
    do_streak,
    main,
)
from bashstats.db import Database, StoreUnavailableError
from bashstats.display import format_duration, format_number
from bashstats.writer import EventWriter


@pytest.fixture
def db(tmp_path):
    """Create a temporary database for testing."""
    db_path = tmp_path / "test.db"
    database = Database(db_path=db_path)
    yield database
    database.close()


@pytest.fixture
def populated(db):
    writer = EventWriter(db)
    writer.record_session_start("s1", "/w/app", timestamp="2026-01-08T10:00:00.000")
    writer.record_prompt("s1", "hello", timestamp="2026-01-08T10:00:05.000")
    writer.record_tool_use(
        "s1", "PostToolUse", "Bash", {"command": "ls"}, {"stdout": ""}, 0,
        timestamp="2026-01-08T10:00:10.000",
    )
    writer.record_session_end("s1", timestamp="2026-01-08T10:30:00.000")
    return db


# ── Argument Parsing ──────────────────────────────────────────────────────────


class TestArgumentParsing:
    def test_no_args_defaults_to_none_command(self):
        args = build_parser().parse_args([])
        assert args.command is None
        assert args.agent is None

    @pytest.mark.parametrize("command", ["stats", "achievements", "streak", "goals", "export", "reset"])
    def test_commands(self, command):
        assert build_parser().parse_args([command]).command == command

    def test_agent_flag(self):
        args = build_parser().parse_args(["--agent", "gemini-cli", "stats"])
        assert args.agent == "gemini-cli"

    def test_export_output(self):
        args = build_parser().parse_args(["export", "-o", "out.json"])
        assert args.output == "out.json"

    def test_reset_needs_flag_for_yes(self):
        assert build_parser().parse_args(["reset"]).yes is False
        assert build_parser().parse_args(["reset", "--yes"]).yes is True

    def test_hook_type(self):
        args = build_parser().parse_args(["hook", "PostToolUse"])
        assert args.hook_type == "PostToolUse"

    def test_invalid_hook_type_raises(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["hook", "Nope"])

    def test_invalid_command_raises(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["nonexistent"])


# ── Number Formatting ────────────────────────────────────────────────────────


class TestFormatNumber:
    def test_small_number(self):
        assert format_number(42) == "42"

    def test_number_with_commas(self):
        assert format_number(1200) == "1,200"

    def test_ten_thousand(self):
        assert format_number(10000) == "10.0K"

    def test_large_k(self):
        assert format_number(421543) == "421.5K"

    def test_million(self):
        assert format_number(1234567) == "1.2M"

    def test_zero(self):
        assert format_number(0) == "0"


class TestFormatDuration:
    def test_hours(self):
        assert format_duration(7500) == "2h 05m"

    def test_minutes(self):
        assert format_duration(720) == "12m"

    def test_seconds(self):
        assert format_duration(45) == "45s"


# ── Commands ──────────────────────────────────────────────────────────────────


class TestDoStats:
    def test_empty_db(self, db):
        stats = do_stats(db)
        assert stats["lifetime"]["total_sessions"] == 0

    def test_populated(self, populated):
        stats = do_stats(populated)
        assert stats["lifetime"]["total_sessions"] == 1
        assert stats["lifetime"]["total_prompts"] == 1
        assert stats["tools"] == {"Bash": 1}

    def test_agent_filter(self, populated):
        stats = do_stats(populated, agent="gemini-cli")
        assert stats["lifetime"]["total_sessions"] == 0


class TestDoAchievements:
    def test_empty_db(self, db):
        payload = do_achievements(db)
        assert payload["xp"]["total_xp"] == 0
        assert not any(b["unlocked"] for b in payload["badges"])

    def test_with_some_unlocked(self, populated):
        payload = do_achievements(populated)
        unlocked = {b["id"] for b in payload["badges"] if b["unlocked"]}
        assert "first_prompt" in unlocked
        assert payload["xp"]["total_xp"] > 0


class TestDoStreak:
    def test_current_streak(self, populated):
        data = do_streak(populated, today=date(2026, 1, 8))
        assert data["current_streak"] == 1
        assert data["recent_dates"] == ["2026-01-08"]

    def test_broken_streak(self, populated):
        data = do_streak(populated, today=date(2026, 1, 20))
        assert data["current_streak"] == 0
        assert data["longest_streak"] == 1


class TestDoGoals:
    def test_returns_weekly_payload(self, populated):
        payload = do_goals(populated, today=date(2026, 1, 8))
        assert payload["week_start"] == "2026-01-05"
        assert payload["days_active"] == 1
        assert len(payload["challenges"]) == 3


class TestDoExport:
    def test_export_writes_json(self, populated, tmp_path):
        out = tmp_path / "nested" / "export.json"
        do_export(populated, output=str(out))
        data = json.loads(out.read_text(encoding="utf-8"))
        assert set(data) == {"exported_at", "agent", "achievements", "agents", "daily_activity"}
        assert data["achievements"]["stats"]["lifetime"]["total_sessions"] == 1
        assert data["daily_activity"][0]["date"] == "2026-01-08"

    def test_export_to_stdout(self, populated, capsys):
        do_export(populated)
        data = json.loads(capsys.readouterr().out)
        assert data["agent"] is None


class TestDoReset:
    def test_requires_confirmation(self, populated):
        result = do_reset(populated)
        assert result == {"ok": False, "reason": "not_confirmed"}
        assert populated.get_session("s1") is not None

    def test_confirmed_deletes_everything(self, populated):
        assert do_reset(populated, confirmed=True) == {"ok": True}
        assert populated.get_session("s1") is None
        assert populated.get_all_daily_activity() == []
        assert populated.get_metadata("first_run") is not None


class TestDoHook:
    def test_records_session_start(self, db):
        raw = json.dumps({"session_id": "h1", "cwd": "/w/app", "source": "startup"})
        assert do_hook(db, "SessionStart", raw) is True
        assert db.get_session("h1")["project"] == "app"

    def test_malformed_input_ignored(self, db):
        assert do_hook(db, "SessionStart", "{not json") is False

    def test_setup_hook_ignored(self, db):
        assert do_hook(db, "Setup", json.dumps({"session_id": "h1"})) is False
        assert db.get_session("h1") is None


# ── Entry Point ───────────────────────────────────────────────────────────────


class TestMain:
    def test_defaults_to_stats(self, tmp_path):
        with patch("bashstats.cli.get_db_path", return_value=tmp_path / "main.db"), \
             patch("bashstats.cli.do_stats") as mock_stats:
            main([])
        mock_stats.assert_called_once()

    def test_runs_achievements_with_agent(self, tmp_path):
        with patch("bashstats.cli.get_db_path", return_value=tmp_path / "main.db"), \
             patch("bashstats.cli.do_achievements") as mock_achievements:
            main(["--agent", "opencode", "achievements"])
        assert mock_achievements.call_args.kwargs["agent"] == "opencode"

    def test_hook_reads_stdin(self, tmp_path, monkeypatch):
        db_path = tmp_path / "main.db"
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps({"session_id": "m1"})))
        with patch("bashstats.cli.get_db_path", return_value=db_path):
            main(["hook", "SessionStart"])
        database = Database(db_path=db_path)
        try:
            assert database.get_session("m1") is not None
        finally:
            database.close()

    def test_unavailable_store_exits(self, tmp_path):
        with patch("bashstats.cli.Database", side_effect=StoreUnavailableError("locked")):
            with pytest.raises(SystemExit) as exc_info:
                main(["stats"])
        assert exc_info.value.code == 1

    def test_unavailable_store_is_silent_for_hooks(self):
        with patch("bashstats.cli.Database", side_effect=StoreUnavailableError("locked")):
            main(["hook", "Stop"])
