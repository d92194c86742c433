"""MCP server for bashstats.

Exposes stats, achievements and weekly goals as MCP tools so an agent can query
them mid-conversation.
Run via: python3 -m bashstats.mcp_server
"""
from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP

from bashstats.db import StoreUnavailableError

mcp = FastMCP(name="bashstats")

NO_DATA = "No data yet. Register the bashstats hooks with your agent first."


def _get_db():
    from bashstats.config import get_db_path
    from bashstats.db import Database
    return Database(db_path=get_db_path())


@mcp.tool()
def bashstats_overview(agent: str = "") -> dict[str, Any]:
    """Get lifetime totals, streaks, session records, projects and agents."""
    try:
        db = _get_db()
    except StoreUnavailableError as exc:
        return {"error": f"{NO_DATA} ({exc})"}
    try:
        from bashstats.stats import StatsEngine
        engine = StatsEngine(db)
        stats = engine.get_all_stats(agent or None).to_dict()
        if not stats["lifetime"]["total_sessions"]:
            return {"error": NO_DATA}
        stats["agents"] = engine.get_agent_breakdown()
        return stats
    finally:
        db.close()


@mcp.tool()
def bashstats_achievements(agent: str = "") -> dict[str, Any]:
    """Get XP, rank and every unlocked badge (locked secrets stay hidden)."""
    try:
        db = _get_db()
    except StoreUnavailableError as exc:
        return {"error": f"{NO_DATA} ({exc})"}
    try:
        from bashstats.achievements import AchievementEngine
        payload = AchievementEngine(db).get_achievements_payload(agent or None)
        badges = payload["badges"]
        unlocked = [
            {"id": b["id"], "name": b["name"], "tier": b["tier"], "tier_name": b["tier_name"]}
            for b in badges
            if b["unlocked"]
        ]
        closest = sorted(
            (b for b in badges if not b["unlocked"] and not b["secret"]),
            key=lambda b: b["progress"],
            reverse=True,
        )[:5]
        return {
            "xp": payload["xp"],
            "unlocked": unlocked,
            "unlocked_count": len(unlocked),
            "total_count": len(badges),
            "closest": [
                {"id": b["id"], "name": b["name"], "progress": b["progress"],
                 "value": b["value"], "next_threshold": b["next_threshold"]}
                for b in closest
            ],
        }
    finally:
        db.close()


@mcp.tool()
def bashstats_goals() -> dict[str, Any]:
    """Get this week's challenges: days active, multiplier and each challenge's progress."""
    try:
        db = _get_db()
    except StoreUnavailableError as exc:
        return {"error": f"{NO_DATA} ({exc})"}
    try:
        from bashstats.weekly import build_weekly_goals
        return build_weekly_goals(db)
    finally:
        db.close()


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()
