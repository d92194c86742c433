"""Tests for the MCP server tool functions."""
from datetime import date
from unittest.mock import MagicMock, patch

import pytest

from bashstats.db import Database, StoreUnavailableError
from bashstats.mcp_server import bashstats_achievements, bashstats_goals, bashstats_overview
from bashstats.writer import EventWriter


@pytest.fixture
def db(tmp_path):
    database = Database(db_path=tmp_path / "test.db")
    yield database
    database.close()


@pytest.fixture
def populated(db):
    writer = EventWriter(db)
    writer.record_session_start("s1", "/w/app", agent="claude-code", timestamp="2026-01-08T10:00:00.000")
    writer.record_prompt("s1", "hello", timestamp="2026-01-08T10:00:05.000")
    writer.record_session_start("g1", "/w/app", agent="gemini-cli", timestamp="2026-01-08T11:00:00.000")
    return db


def _keep_open(database):
    """Wrap a real database so the tool's close() leaves it usable."""
    proxy = MagicMock(wraps=database)
    proxy.close = MagicMock()
    return proxy


class TestOverview:
    @patch("bashstats.mcp_server._get_db")
    def test_returns_stats_and_agents(self, mock_get_db, populated):
        mock_get_db.return_value = populated
        result = bashstats_overview()
        assert result["lifetime"]["total_sessions"] == 2
        assert result["agents"]["distinct_agents"] == 2

    @patch("bashstats.mcp_server._get_db")
    def test_agent_filter(self, mock_get_db, populated):
        mock_get_db.return_value = populated
        result = bashstats_overview(agent="gemini-cli")
        assert result["lifetime"]["total_sessions"] == 1

    @patch("bashstats.mcp_server._get_db")
    def test_no_data_returns_error(self, mock_get_db, db):
        mock_get_db.return_value = db
        assert "error" in bashstats_overview()

    @patch("bashstats.mcp_server._get_db")
    def test_unavailable_store_returns_error(self, mock_get_db):
        mock_get_db.side_effect = StoreUnavailableError("disk I/O error")
        result = bashstats_overview()
        assert "disk I/O error" in result["error"]

    @patch("bashstats.mcp_server._get_db")
    def test_closes_db(self, mock_get_db):
        mock_db = MagicMock()
        mock_get_db.return_value = mock_db
        with patch("bashstats.stats.StatsEngine") as mock_engine:
            mock_engine.return_value.get_all_stats.return_value.to_dict.return_value = {
                "lifetime": {"total_sessions": 0}
            }
            bashstats_overview()
        mock_db.close.assert_called_once()


class TestAchievements:
    @patch("bashstats.mcp_server._get_db")
    def test_structure(self, mock_get_db, populated):
        mock_get_db.return_value = populated
        result = bashstats_achievements()
        assert set(result) == {"xp", "unlocked", "unlocked_count", "total_count", "closest"}
        assert result["unlocked_count"] == len(result["unlocked"])
        assert result["total_count"] > result["unlocked_count"]
        assert len(result["closest"]) <= 5

    @patch("bashstats.mcp_server._get_db")
    def test_first_prompt_unlocked(self, mock_get_db, populated):
        mock_get_db.return_value = populated
        ids = {b["id"] for b in bashstats_achievements()["unlocked"]}
        assert "first_prompt" in ids

    @patch("bashstats.mcp_server._get_db")
    def test_closest_excludes_secrets(self, mock_get_db, populated):
        mock_get_db.return_value = populated
        result = bashstats_achievements()
        from bashstats.badges import get_badge
        assert not any(get_badge(b["id"]).secret for b in result["closest"])


class TestGoals:
    @patch("bashstats.mcp_server._get_db")
    def test_returns_three_challenges(self, mock_get_db, db):
        mock_get_db.return_value = _keep_open(db)
        with patch("bashstats.weekly.date") as mock_date:
            mock_date.today.return_value = date(2026, 1, 8)
            result = bashstats_goals()
        assert result["week_start"] == "2026-01-05"
        assert len(result["challenges"]) == 3
        assert db.get_weekly_xp("2026-01-05") is not None

    @patch("bashstats.mcp_server._get_db")
    def test_unavailable_store_returns_error(self, mock_get_db):
        mock_get_db.side_effect = StoreUnavailableError("locked")
        assert "error" in bashstats_goals()
