"""Rich terminal display for bashstats."""

from __future__ import annotations

from datetime import date, timedelta

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()

# Rank bracket colors mapped to valid Rich color names
_COLOR_MAP: dict[str, str] = {
    "Bronze": "dark_orange3",
    "Silver": "grey70",
    "Gold": "gold1",
    "Diamond": "cyan",
    "Obsidian": "dark_violet",
    "System Anomaly": "orange_red1",
}

_TIER_STYLE: dict[str, str] = {
    "Locked": "grey50",
    "Bronze": "dark_orange3",
    "Silver": "grey70",
    "Gold": "gold1",
    "Diamond": "cyan",
    "Singularity": "magenta",
}


def _safe_color(rank_tier: str) -> str:
    return _COLOR_MAP.get(rank_tier, "white")


def format_number(n: float) -> str:
    """Format large numbers: 421543 -> '421.5K', 1200 -> '1,200', 1234567 -> '1.2M'."""
    n = int(n)
    if n >= 1_000_000:
        value = n / 1_000_000
        if value >= 100:
            return f"{value:.0f}M"
        return f"{value:.1f}M"
    if n >= 10_000:
        value = n / 1_000
        if value >= 1000:
            return f"{value:.0f}K"
        return f"{value:.1f}K"
    return f"{n:,}"


def format_duration(seconds: int) -> str:
    """Format seconds as '2h 05m', '12m' or '45s'."""
    if seconds >= 3600:
        return f"{seconds // 3600}h {(seconds % 3600) // 60:02d}m"
    if seconds >= 60:
        return f"{seconds // 60}m"
    return f"{seconds}s"


def _bar(ratio: float, width: int = 20) -> str:
    """Render a progress bar as text: [████████░░░░░░░░░░░░]."""
    ratio = max(0.0, min(ratio, 1.0))
    filled = int(ratio * width)
    return "[" + "█" * filled + "░" * (width - filled) + "]"


def print_stats(stats: dict, xp: dict | None = None) -> None:
    """Print the lifetime, time, session and project views as one table."""
    lifetime = stats["lifetime"]
    time = stats["time"]
    sessions = stats["sessions"]
    projects = stats["projects"]
    border = _safe_color(xp["rank_tier"]) if xp else "white"

    table = Table(
        title="bashstats",
        box=box.ROUNDED,
        border_style=border,
        show_header=True,
        header_style="bold",
    )
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Sessions", format_number(lifetime["total_sessions"]))
    table.add_row("Prompts", format_number(lifetime["total_prompts"]))
    table.add_row("Characters Typed", format_number(lifetime["total_chars_typed"]))
    table.add_row("Tool Calls", format_number(lifetime["total_tool_calls"]))
    table.add_row("Time Spent", format_duration(lifetime["total_duration_seconds"]))
    table.add_row("Errors", format_number(lifetime["total_errors"]))
    table.add_row("Tokens", format_number(lifetime["total_tokens"]))
    table.add_row(
        "Commits",
        f"{format_number(lifetime['total_commits'])} "
        f"(+{format_number(lifetime['total_lines_added'])} "
        f"-{format_number(lifetime['total_lines_removed'])})",
    )

    table.add_section()
    table.add_row("Current Streak", f"{time['current_streak']} days")
    table.add_row("Longest Streak", f"{time['longest_streak']} days")
    if time["peak_hour_count"]:
        table.add_row("Peak Hour", f"{time['peak_hour']:02d}:00")
    if time["most_active_day"]:
        table.add_row("Most Active Day", time["most_active_day"])
    if time["busiest_date"]:
        table.add_row("Busiest Date", f"{time['busiest_date']} ({time['busiest_date_count']})")

    table.add_section()
    table.add_row("Longest Session", format_duration(sessions["longest_session_seconds"]))
    table.add_row("Most Tools in a Session", format_number(sessions["most_tools_in_session"]))
    table.add_row("Avg Prompts per Session", f"{sessions['avg_prompts_per_session']:.1f}")

    if projects["unique_projects"]:
        table.add_section()
        table.add_row("Projects", str(projects["unique_projects"]))
        table.add_row(
            "Favorite Project",
            f"{projects['most_visited_project']} ({projects['most_visited_project_count']})",
        )

    tools = stats.get("tools", {})
    if tools:
        table.add_section()
        table.add_row("[bold]Top Tools[/]", "")
        for tool, count in list(tools.items())[:10]:
            table.add_row(f"  {tool}", format_number(count))

    if xp:
        table.add_section()
        table.add_row("Rank", f"{xp['rank_number']} - {xp['rank_tier']}")
        table.add_row("Total XP", format_number(xp["total_xp"]))

    console.print(table)


def print_achievements(payload: dict) -> None:
    """Print every visible badge with its tier and progress.

    Locked secret badges are shown as a count only.
    """
    xp = payload["xp"]
    badges = payload["badges"]
    hidden = sum(1 for b in badges if b["secret"] and not b["unlocked"])
    shown = [b for b in badges if not (b["secret"] and not b["unlocked"])]
    shown.sort(key=lambda b: (-b["tier"], -b["progress"], b["category"], b["name"]))

    table = Table(
        title=f"Rank {xp['rank_number']} - {xp['rank_tier']}  ({format_number(xp['total_xp'])} XP)",
        box=box.ROUNDED,
        border_style=_safe_color(xp["rank_tier"]),
        show_header=True,
        header_style="bold",
    )
    table.add_column("", width=2)
    table.add_column("Badge", min_width=20)
    table.add_column("Tier", width=12)
    table.add_column("Progress", min_width=18)

    for badge in shown:
        style = _TIER_STYLE.get(badge["tier_name"], "white")
        name_text = f"[bold]{badge['name']}[/]\n{badge['trigger']}"
        tier_text = f"[{style}]{badge['tier_name']}[/{style}]"
        if badge["maxed"]:
            progress_text = f"{_bar(1.0, 10)} MAX"
        else:
            progress_text = (
                f"{_bar(badge['progress'], 10)} "
                f"{format_number(badge['value'])}/{format_number(badge['next_threshold'])}"
            )
        table.add_row(badge["icon"], name_text, tier_text, progress_text)

    console.print(table)
    unlocked = sum(1 for b in badges if b["unlocked"])
    console.print(f"  {unlocked}/{len(badges)} badges unlocked, {hidden} secrets still hidden")


def print_streak(time: dict, active_dates: set[str], today: date) -> None:
    """Print current and longest streak plus a 30-day activity strip."""
    strip = "".join(
        "█" if (today - timedelta(days=i)).isoformat() in active_dates else "·"
        for i in range(29, -1, -1)
    )
    lines = [
        "",
        f"  \U0001f525 Current streak:  [bold]{time['current_streak']}[/] days",
        f"  \U0001f3c6 Longest streak:  [bold]{time['longest_streak']}[/] days",
        "",
        "  Last 30 days:",
        f"  {strip}",
        "",
    ]
    console.print(Panel("\n".join(lines), title="[bold]Streak[/]", box=box.ROUNDED, width=50))


def print_weekly_goals(payload: dict) -> None:
    """Print this week's challenges."""
    lines = [
        "",
        f"  Week of {payload['week_start']}  |  "
        f"{payload['days_active']}/7 days active  |  {payload['multiplier']}x",
        "",
    ]
    for challenge in payload["challenges"]:
        mark = "✅" if challenge["completed"] else "⏳"
        lines.append(
            f"  {mark} {challenge['description']}: "
            f"{format_number(challenge['current'])}/{format_number(challenge['threshold'])} "
            f"(+{challenge['xp_reward']} XP)"
        )
    lines.append("")
    console.print(Panel("\n".join(lines), title="[bold]Weekly Goals[/]", box=box.ROUNDED, width=60))


def print_no_data_message(reason: str) -> None:
    """Print message when the event log cannot be read."""
    panel = Panel(
        f"\n  No data available ({reason}).\n"
        "  Register the bashstats hooks with your agent to start tracking.\n",
        title="[bold]bashstats[/]",
        box=box.ROUNDED,
        border_style="grey50",
        width=70,
    )
    console.print(panel)
