"""Tests for the aggregate stats engine."""

from datetime import date

import pytest

from bashstats.db import Database
from bashstats.stats import StatsEngine, parse_commit_output, parse_payload
from bashstats.writer import EventWriter

TODAY = date(2026, 1, 10)


@pytest.fixture
def db(tmp_path):
    database = Database(db_path=tmp_path / "test.db")
    yield database
    database.close()


@pytest.fixture
def writer(db):
    return EventWriter(db)


@pytest.fixture
def engine(db):
    return StatsEngine(db, today=TODAY)


def _tool(writer, sid, tool, ts, ok=True, tool_input=None, tool_output=None):
    hook = "PostToolUse" if ok else "PostToolUseFailure"
    writer.record_tool_use(sid, hook, tool, tool_input, tool_output, timestamp=ts)


class TestHelpers:
    def test_parse_commit_output_full(self):
        out = "[main 1a2b3c] msg\n 3 files changed, 12 insertions(+), 4 deletions(-)"
        assert parse_commit_output(out) == (12, 4)

    def test_parse_commit_output_insertions_only(self):
        assert parse_commit_output("1 file changed, 1 insertion(+)") == (1, 0)

    def test_parse_commit_output_deletions_only(self):
        assert parse_commit_output("2 files changed, 5 deletions(-)") == (0, 5)

    def test_parse_commit_output_unparseable(self):
        assert parse_commit_output("nothing to commit, working tree clean") == (0, 0)
        assert parse_commit_output(None) == (0, 0)

    def test_parse_payload(self):
        assert parse_payload('{"a": 1}') == {"a": 1}
        assert parse_payload("not json") is None
        assert parse_payload("[1]") is None
        assert parse_payload(None) is None


class TestEmptyStore:
    def test_all_zero(self, engine):
        stats = engine.get_all_stats().to_dict()
        for value in stats["lifetime"].values():
            assert value == 0
        assert stats["tools"] == {}
        assert stats["time"]["current_streak"] == 0
        assert stats["time"]["longest_streak"] == 0
        assert stats["time"]["busiest_date"] == ""
        assert all(v == 0 for v in stats["sessions"].values())
        assert stats["projects"]["unique_projects"] == 0
        assert stats["projects"]["projects"] == {}

    def test_agent_breakdown_empty(self, engine):
        breakdown = engine.get_agent_breakdown()
        assert breakdown["distinct_agents"] == 0
        assert breakdown["sessions_per_agent"] == {}


class TestLifetimeStats:
    def test_counts(self, writer, engine):
        writer.record_session_start("s1", "/w/app", timestamp="2026-01-09T10:00:00.000")
        writer.record_prompt("s1", "hello world", timestamp="2026-01-09T10:00:05.000")
        _tool(writer, "s1", "Read", "2026-01-09T10:00:10.000")
        _tool(writer, "s1", "Write", "2026-01-09T10:00:11.000")
        _tool(writer, "s1", "Edit", "2026-01-09T10:00:12.000")
        _tool(writer, "s1", "Edit", "2026-01-09T10:00:13.000", ok=False)
        _tool(writer, "s1", "Bash", "2026-01-09T10:00:14.000")
        _tool(writer, "s1", "WebFetch", "2026-01-09T10:00:15.000")
        _tool(writer, "s1", "WebSearch", "2026-01-09T10:00:16.000")
        writer.record_subagent("s1", "SubagentStart", timestamp="2026-01-09T10:00:17.000")
        writer.record_compaction("s1", timestamp="2026-01-09T10:00:18.000")
        writer.record_notification("s1", "boom", "error", timestamp="2026-01-09T10:00:19.000")
        writer.record_notification("s1", "slow", "rate_limit", timestamp="2026-01-09T10:00:20.000")
        writer.record_session_end(
            "s1",
            tokens={"input_tokens": 1, "output_tokens": 2,
                    "cache_creation_input_tokens": 3, "cache_read_input_tokens": 4},
            timestamp="2026-01-09T11:00:00.000",
        )

        stats = engine.get_lifetime_stats()
        assert stats.total_sessions == 1
        assert stats.total_prompts == 1
        assert stats.total_chars_typed == 11
        assert stats.total_tool_calls == 7
        assert stats.total_duration_seconds == 3600
        assert stats.total_files_read == 1
        assert stats.total_files_written == 1
        assert stats.total_files_edited == 2
        assert stats.total_bash_commands == 1
        assert stats.total_web_fetches == 1
        assert stats.total_web_searches == 1
        assert stats.total_subagents == 1
        assert stats.total_compactions == 1
        assert stats.total_errors == 3
        assert stats.total_rate_limits == 1
        assert stats.total_tokens == 10

    def test_failed_shell_and_web_calls_count(self, writer, engine):
        writer.record_session_start("s1", timestamp="2026-01-09T10:00:00.000")
        _tool(writer, "s1", "Bash", "2026-01-09T10:00:01.000")
        _tool(writer, "s1", "Bash", "2026-01-09T10:00:02.000", ok=False)
        _tool(writer, "s1", "WebFetch", "2026-01-09T10:00:03.000", ok=False)
        _tool(writer, "s1", "WebSearch", "2026-01-09T10:00:04.000", ok=False)
        _tool(writer, "s1", "Read", "2026-01-09T10:00:05.000", ok=False)
        stats = engine.get_lifetime_stats()
        assert stats.total_bash_commands == 2
        assert stats.total_web_fetches == 1
        assert stats.total_web_searches == 1
        assert stats.total_files_read == 0
        assert engine.get_tool_breakdown() == {"Bash": 1}

    def test_commits_and_lines(self, writer, engine):
        writer.record_session_start("s1", "/w/app", timestamp="2026-01-09T10:00:00.000")
        _tool(writer, "s1", "Bash", "2026-01-09T10:01:00.000",
              tool_input={"command": "git commit -m 'a'"},
              tool_output={"stdout": "[main 1] a\n 2 files changed, 10 insertions(+), 3 deletions(-)"})
        _tool(writer, "s1", "Bash", "2026-01-09T10:02:00.000",
              tool_input={"command": "git commit -m 'b'"},
              tool_output={"stdout": "1 file changed, 5 insertions(+)"})
        _tool(writer, "s1", "Bash", "2026-01-09T10:03:00.000",
              tool_input={"command": "git commit --amend"},
              tool_output={"stdout": "garbled"})
        _tool(writer, "s1", "Bash", "2026-01-09T10:04:00.000",
              tool_input={"command": "git status"},
              tool_output={"stdout": "1 file changed, 99 insertions(+)"})

        stats = engine.get_lifetime_stats()
        assert stats.total_commits == 3
        assert stats.total_lines_added == 15
        assert stats.total_lines_removed == 3

    def test_agent_filter(self, writer, engine):
        writer.record_session_start("c1", agent="claude-code", timestamp="2026-01-09T10:00:00.000")
        writer.record_session_start("g1", agent="gemini-cli", timestamp="2026-01-09T10:00:00.000")
        writer.record_prompt("c1", "one", timestamp="2026-01-09T10:01:00.000")
        writer.record_prompt("g1", "two", timestamp="2026-01-09T10:01:00.000")
        writer.record_prompt("g1", "three", timestamp="2026-01-09T10:02:00.000")
        _tool(writer, "g1", "Read", "2026-01-09T10:03:00.000")

        assert engine.get_lifetime_stats().total_prompts == 3
        gemini = engine.get_lifetime_stats("gemini-cli")
        assert gemini.total_sessions == 1
        assert gemini.total_prompts == 2
        assert gemini.total_tool_calls == 1
        assert engine.get_lifetime_stats("claude-code").total_tool_calls == 0
        assert engine.get_tool_breakdown("claude-code") == {}


class TestToolBreakdown:
    def test_successes_only_most_used_first(self, writer, engine):
        for i in range(3):
            _tool(writer, "s1", "Read", f"2026-01-09T10:00:0{i}.000")
        _tool(writer, "s1", "Bash", "2026-01-09T10:00:05.000")
        _tool(writer, "s1", "Bash", "2026-01-09T10:00:06.000", ok=False)
        assert engine.get_tool_breakdown() == {"Read": 3, "Bash": 1}
        assert list(engine.get_tool_breakdown()) == ["Read", "Bash"]


class TestTimeStats:
    def test_streaks_from_daily_activity(self, writer, engine):
        for day in ("2026-01-01", "2026-01-02", "2026-01-03", "2026-01-08", "2026-01-09"):
            writer.record_session_start(f"s-{day}", timestamp=f"{day}T10:00:00.000")
        time = engine.get_time_stats()
        assert time.longest_streak == 3
        # today (01-10) idle, so the streak counts back from yesterday
        assert time.current_streak == 2

    def test_hour_buckets(self, writer, engine):
        writer.record_session_start("s1", timestamp="2026-01-09T01:00:00.000")
        writer.record_prompt("s1", "a", timestamp="2026-01-09T01:30:00.000")
        writer.record_prompt("s1", "b", timestamp="2026-01-09T04:59:00.000")
        writer.record_prompt("s1", "c", timestamp="2026-01-09T06:00:00.000")
        writer.record_prompt("s1", "d", timestamp="2026-01-09T14:00:00.000")
        writer.record_prompt("s1", "e", timestamp="2026-01-09T14:30:00.000")
        time = engine.get_time_stats()
        assert time.night_owl_count == 2
        assert time.early_bird_count == 1
        assert time.peak_hour == 14
        assert time.peak_hour_count == 2

    def test_weekend_and_most_active_day(self, writer, engine):
        # 2026-01-03 Saturday, 2026-01-04 Sunday, 2026-01-05 Monday
        writer.record_session_start("a", timestamp="2026-01-03T10:00:00.000")
        writer.record_session_start("b", timestamp="2026-01-04T10:00:00.000")
        writer.record_session_start("c", timestamp="2026-01-05T10:00:00.000")
        writer.record_session_start("d", timestamp="2026-01-05T12:00:00.000")
        time = engine.get_time_stats()
        assert time.weekend_sessions == 2
        assert time.most_active_day == "Monday"

    def test_busiest_date(self, writer, engine):
        writer.record_session_start("s1", timestamp="2026-01-05T10:00:00.000")
        writer.record_prompt("s1", "x", timestamp="2026-01-05T10:01:00.000")
        writer.record_session_start("s2", timestamp="2026-01-06T10:00:00.000")
        writer.record_prompt("s2", "x", timestamp="2026-01-06T10:01:00.000")
        _tool(writer, "s2", "Read", "2026-01-06T10:02:00.000")
        time = engine.get_time_stats()
        assert time.busiest_date == "2026-01-06"
        assert time.busiest_date_count == 3

    def test_busiest_date_counts_sessions(self, writer, engine):
        for i in range(5):
            writer.record_session_start(f"q{i}", timestamp=f"2026-01-07T1{i}:00:00.000")
        writer.record_session_start("p1", timestamp="2026-01-08T10:00:00.000")
        writer.record_prompt("p1", "x", timestamp="2026-01-08T10:01:00.000")
        writer.record_prompt("p1", "y", timestamp="2026-01-08T10:02:00.000")
        time = engine.get_time_stats()
        assert time.busiest_date == "2026-01-07"
        assert time.busiest_date_count == 5



class TestSessionRecords:
    def test_extremes_and_averages(self, writer, engine):
        writer.record_session_start("s1", timestamp="2026-01-09T10:00:00.000")
        writer.record_prompt("s1", "x", timestamp="2026-01-09T10:00:10.000")
        writer.record_prompt("s1", "y", timestamp="2026-01-09T10:00:20.000")
        writer.record_session_end("s1", tokens={"input_tokens": 500}, timestamp="2026-01-09T11:00:00.000")
        writer.record_session_start("s2", timestamp="2026-01-09T12:00:00.000")
        _tool(writer, "s2", "Read", "2026-01-09T12:00:01.000")
        writer.record_session_end("s2", tokens={"input_tokens": 100}, timestamp="2026-01-09T12:01:00.000")

        records = engine.get_session_records()
        assert records.longest_session_seconds == 3600
        assert records.fastest_session_seconds == 60
        assert records.most_prompts_in_session == 2
        assert records.most_tools_in_session == 1
        assert records.avg_duration_seconds == 1830
        assert records.avg_prompts_per_session == 1.0
        assert records.most_tokens_in_session == 500
        assert records.avg_tokens_per_session == 300


class TestProjectStats:
    def test_breakdown(self, writer, engine):
        writer.record_session_start("a", "/w/alpha", timestamp="2026-01-09T10:00:00.000")
        writer.record_session_start("b", "/w/alpha", timestamp="2026-01-09T11:00:00.000")
        writer.record_session_start("c", "/w/beta", timestamp="2026-01-09T12:00:00.000")
        writer.record_session_start("d", timestamp="2026-01-09T13:00:00.000")
        projects = engine.get_project_stats()
        assert projects.unique_projects == 2
        assert projects.most_visited_project == "alpha"
        assert projects.most_visited_project_count == 2
        assert projects.projects["beta"]["sessions"] == 1


class TestAgentBreakdown:
    def test_favorite_and_hours(self, writer, engine):
        writer.record_session_start("g1", agent="gemini-cli", timestamp="2026-01-09T10:00:00.000")
        writer.record_session_end("g1", timestamp="2026-01-09T12:00:00.000")
        writer.record_session_start("g2", agent="gemini-cli", timestamp="2026-01-09T13:00:00.000")
        writer.record_session_start("c1", agent="claude-code", timestamp="2026-01-09T14:00:00.000")
        breakdown = engine.get_agent_breakdown()
        assert breakdown["favorite_agent"] == "gemini-cli"
        assert breakdown["sessions_per_agent"] == {"gemini-cli": 2, "claude-code": 1}
        assert breakdown["hours_per_agent"]["gemini-cli"] == 2.0
        assert breakdown["distinct_agents"] == 2


class TestWeeklyGoalsPayload:
    def test_uses_engine_today(self, writer, engine):
        writer.record_session_start("s1", timestamp="2026-01-06T10:00:00.000")
        payload = engine.get_weekly_goals_payload()
        assert payload["week_start"] == "2026-01-05"
        assert payload["days_active"] == 1
        assert len(payload["challenges"]) == 3
