"""CLI commands for bashstats."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date, datetime
from pathlib import Path

from bashstats.achievements import AchievementEngine
from bashstats.config import get_db_path
from bashstats.db import Database, StoreUnavailableError
from bashstats.display import (
    console,
    print_achievements,
    print_no_data_message,
    print_stats,
    print_streak,
    print_weekly_goals,
)
from bashstats.handler import HOOK_TYPES, handle_hook_event, parse_hook_input
from bashstats.stats import StatsEngine
from bashstats.weekly import build_weekly_goals

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="bashstats",
        description="Stats, badges and ranks for your coding-agent sessions",
    )
    parser.add_argument("--agent", default=None, help="Only count sessions from this agent")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("stats", help="Lifetime, time, session and project stats")
    subparsers.add_parser("achievements", help="Badges, XP and rank")
    subparsers.add_parser("streak", help="Current and longest daily streak")
    subparsers.add_parser("goals", help="This week's challenges")
    export_parser = subparsers.add_parser("export", help="Dump all stats as JSON")
    export_parser.add_argument("--output", "-o", default=None, help="Write to a file instead of stdout")
    reset_parser = subparsers.add_parser("reset", help="Delete all recorded data")
    reset_parser.add_argument("--yes", action="store_true", help="Confirm the reset")
    hook_parser = subparsers.add_parser("hook", help="Record a hook event read from stdin")
    hook_parser.add_argument("hook_type", choices=HOOK_TYPES)
    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    command = args.command or "stats"
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        db = Database(db_path=get_db_path())
    except StoreUnavailableError as exc:
        if command == "hook":
            # A broken store must never block the agent
            logger.debug("hook skipped: %s", exc)
            return
        print_no_data_message(str(exc))
        sys.exit(1)

    try:
        if command == "stats":
            do_stats(db, agent=args.agent)
        elif command == "achievements":
            do_achievements(db, agent=args.agent)
        elif command == "streak":
            do_streak(db)
        elif command == "goals":
            do_goals(db)
        elif command == "export":
            do_export(db, agent=args.agent, output=args.output)
        elif command == "reset":
            do_reset(db, confirmed=args.yes)
        elif command == "hook":
            raw = sys.stdin.read()
            do_hook(db, args.hook_type, raw)
    except StoreUnavailableError as exc:
        if command != "hook":
            print_no_data_message(str(exc))
            sys.exit(1)
        logger.debug("hook skipped: %s", exc)
    finally:
        db.close()


def do_stats(db: Database, agent: str | None = None) -> dict:
    """Show the aggregate stats views."""
    engine = AchievementEngine(db)
    payload = engine.get_achievements_payload(agent)
    print_stats(payload["stats"], payload["xp"])
    return payload["stats"]


def do_achievements(db: Database, agent: str | None = None) -> dict:
    """Show every badge plus XP and rank."""
    payload = AchievementEngine(db).get_achievements_payload(agent)
    print_achievements(payload)
    return payload


def do_streak(db: Database, today: date | None = None) -> dict:
    """Show streaks and the last 30 days of activity."""
    today = today or date.today()
    time = StatsEngine(db, today).get_time_stats()
    recent = {
        row["date"]
        for row in db.get_all_daily_activity(limit=30)
        if row["sessions"] or row["prompts"] or row["tool_calls"]
    }
    data = {
        "current_streak": time.current_streak,
        "longest_streak": time.longest_streak,
        "recent_dates": sorted(recent),
    }
    print_streak(data, recent, today)
    return data


def do_goals(db: Database, today: date | None = None) -> dict:
    """Show this week's challenges."""
    payload = build_weekly_goals(db, today)
    print_weekly_goals(payload)
    return payload


def do_export(db: Database, agent: str | None = None, output: str | None = None) -> dict:
    """Write stats, achievements and daily rollups as JSON."""
    engine = AchievementEngine(db)
    payload = {
        "exported_at": datetime.now().isoformat(timespec="seconds"),
        "agent": agent,
        "achievements": engine.get_achievements_payload(agent),
        "agents": engine.stats.get_agent_breakdown(),
        "daily_activity": db.get_all_daily_activity(),
    }
    text = json.dumps(payload, indent=2)
    if output:
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n", encoding="utf-8")
        console.print(f"[green]Exported to {path}[/]")
    else:
        print(text)
    return payload


def do_reset(db: Database, confirmed: bool = False) -> dict:
    """Delete all recorded data once confirmed."""
    if not confirmed:
        console.print("[red]This deletes all recorded data. Re-run with --yes to confirm.[/]")
        return {"ok": False, "reason": "not_confirmed"}
    db.reset()
    console.print("All data has been reset. Starting fresh.")
    return {"ok": True}


def do_hook(db: Database, hook_type: str, raw: str) -> bool:
    """Record one hook event; malformed input is ignored."""
    payload = parse_hook_input(raw)
    if payload is None:
        logger.debug("ignoring %s hook with unreadable input", hook_type)
        return False
    return handle_hook_event(db, hook_type, payload)


if __name__ == "__main__":
    main()
