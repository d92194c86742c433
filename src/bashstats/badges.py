"""Badge catalog and tier scoring for bashstats."""

from __future__ import annotations

from dataclasses import dataclass

TIER_NAMES: tuple[str, ...] = ("Locked", "Bronze", "Silver", "Gold", "Diamond", "Singularity")
MAX_TIER = 5

VOLUME = "volume"
TOOL_MASTERY = "tool_mastery"
TIME = "time"
BEHAVIORAL = "behavioral"
RESILIENCE = "resilience"
ERROR_RECOVERY = "error_recovery"
SHIPPING = "shipping"
MULTI_AGENT = "multi_agent"
WILD_CARD = "wild_card"
SESSION_BEHAVIOR = "session_behavior"
PROMPT_PATTERNS = "prompt_patterns"
TOOL_COMBOS = "tool_combos"
PROJECT_DEDICATION = "project_dedication"
TOKEN_USAGE = "token_usage"
ASPIRATIONAL = "aspirational"
SECRET = "secret"

CATEGORIES: tuple[str, ...] = (
    VOLUME,
    TOOL_MASTERY,
    TIME,
    BEHAVIORAL,
    RESILIENCE,
    ERROR_RECOVERY,
    SHIPPING,
    MULTI_AGENT,
    WILD_CARD,
    SESSION_BEHAVIOR,
    PROMPT_PATTERNS,
    TOOL_COMBOS,
    PROJECT_DEDICATION,
    TOKEN_USAGE,
    ASPIRATIONAL,
    SECRET,
)


@dataclass(frozen=True)
class BadgeDef:
    id: str
    name: str
    icon: str
    description: str
    category: str
    stat: str
    tiers: tuple[int, int, int, int, int]
    trigger: str
    secret: bool = False
    aspirational: bool = False


def _secret(id: str, name: str, icon: str, description: str, stat: str, trigger: str) -> BadgeDef:
    return BadgeDef(
        id=id, name=name, icon=icon, description=description, category=SECRET,
        stat=stat, tiers=(1, 1, 1, 1, 1), trigger=trigger, secret=True,
    )


def _aspirational(
    id: str, name: str, icon: str, description: str, stat: str, target: int, trigger: str
) -> BadgeDef:
    return BadgeDef(
        id=id, name=name, icon=icon, description=description, category=ASPIRATIONAL,
        stat=stat, tiers=(target, target, target, target, target), trigger=trigger,
        aspirational=True,
    )


BADGES: tuple[BadgeDef, ...] = (
    # -- volume ---------------------------------------------------------------
    BadgeDef(id="first_prompt", name="First Prompt", icon="💬", category=VOLUME,
             stat="totalPrompts", tiers=(1, 100, 1000, 5000, 25000),
             description="Say something to your agent", trigger="Prompts submitted"),
    BadgeDef(id="tool_time", name="Tool Time", icon="🔧", category=VOLUME,
             stat="totalToolCalls", tiers=(10, 500, 5000, 25000, 75000),
             description="Put the agent's tools to work", trigger="Tool calls completed"),
    BadgeDef(id="marathon", name="Marathon", icon="🏃", category=VOLUME,
             stat="totalSessionHours", tiers=(1, 10, 100, 500, 2000),
             description="Log serious hours with your agent", trigger="Hours spent in sessions"),
    BadgeDef(id="wordsmith", name="Wordsmith", icon="✍️", category=VOLUME,
             stat="totalCharsTyped", tiers=(1000, 50000, 500000, 2000000, 5000000),
             description="Type your thoughts out", trigger="Characters typed in prompts"),
    BadgeDef(id="session_vet", name="Session Vet", icon="🎖️", category=VOLUME,
             stat="totalSessions", tiers=(1, 50, 500, 2000, 5000),
             description="Keep coming back", trigger="Sessions started"),
    BadgeDef(id="chatterbox", name="Chatterbox", icon="🗣️", category=VOLUME,
             stat="totalWords", tiers=(500, 10000, 100000, 500000, 2000000),
             description="Words, words, words", trigger="Words typed in prompts"),
    BadgeDef(id="busy_bee", name="Busy Bee", icon="🐝", category=VOLUME,
             stat="busiestDateCount", tiers=(50, 200, 500, 1000, 2500),
             description="Have one really busy day", trigger="Prompts and tool calls on your busiest day"),
    BadgeDef(id="power_hour", name="Power Hour", icon="⚡", category=VOLUME,
             stat="peakHourCount", tiers=(25, 100, 500, 2000, 10000),
             description="Own your favorite hour", trigger="Prompts sent in your peak hour of the day"),
    BadgeDef(id="long_haul", name="Long Haul", icon="🚛", category=VOLUME,
             stat="longestSessionHours", tiers=(1, 2, 4, 8, 12),
             description="Stay in one session for hours", trigger="Hours in your longest session"),
    BadgeDef(id="tool_binge", name="Tool Binge", icon="🧰", category=VOLUME,
             stat="mostToolsInSession", tiers=(25, 100, 250, 500, 1000),
             description="Let the agent run wild in one session", trigger="Tool calls in a single session"),
    BadgeDef(id="prompt_binge", name="Prompt Binge", icon="📨", category=VOLUME,
             stat="mostPromptsInSession", tiers=(10, 25, 50, 100, 250),
             description="Keep the conversation going", trigger="Prompts in a single session"),
    BadgeDef(id="daily_grind", name="Daily Grind", icon="📅", category=VOLUME,
             stat="activeDays", tiers=(5, 30, 100, 250, 500),
             description="Show up day after day", trigger="Distinct days with a session"),

    # -- tool mastery ---------------------------------------------------------
    BadgeDef(id="shell_lord", name="Shell Lord", icon="🐚", category=TOOL_MASTERY,
             stat="totalBashCommands", tiers=(10, 100, 500, 2000, 10000),
             description="Command the terminal", trigger="Bash commands run"),
    BadgeDef(id="bookworm", name="Bookworm", icon="📚", category=TOOL_MASTERY,
             stat="totalFilesRead", tiers=(25, 250, 1000, 5000, 25000),
             description="Read before you write", trigger="Files read"),
    BadgeDef(id="editor_in_chief", name="Editor in Chief", icon="📝", category=TOOL_MASTERY,
             stat="totalFilesEdited", tiers=(10, 100, 500, 2000, 10000),
             description="Shape the code", trigger="File edits"),
    BadgeDef(id="architect", name="Architect", icon="🏗️", category=TOOL_MASTERY,
             stat="totalFilesCreated", tiers=(10, 50, 200, 1000, 5000),
             description="Build from nothing", trigger="Files written"),
    BadgeDef(id="detective", name="Detective", icon="🔍", category=TOOL_MASTERY,
             stat="totalSearches", tiers=(25, 250, 1000, 5000, 25000),
             description="Find what you need", trigger="Grep and Glob searches"),
    BadgeDef(id="needle_in_haystack", name="Needle in a Haystack", icon="🪡", category=TOOL_MASTERY,
             stat="totalGreps", tiers=(10, 100, 500, 2500, 10000),
             description="Search inside files", trigger="Grep searches"),
    BadgeDef(id="glob_trotter", name="Glob Trotter", icon="🌍", category=TOOL_MASTERY,
             stat="totalGlobs", tiers=(10, 100, 500, 2500, 10000),
             description="Match file patterns everywhere", trigger="Glob searches"),
    BadgeDef(id="web_crawler", name="Web Crawler", icon="🕸️", category=TOOL_MASTERY,
             stat="totalWebFetches", tiers=(5, 50, 200, 1000, 5000),
             description="Pull pages from the web", trigger="Web fetches"),
    BadgeDef(id="researcher", name="Researcher", icon="🔬", category=TOOL_MASTERY,
             stat="totalWebSearches", tiers=(5, 50, 200, 1000, 5000),
             description="Look things up", trigger="Web searches"),
    BadgeDef(id="delegator", name="Delegator", icon="👔", category=TOOL_MASTERY,
             stat="totalSubagents", tiers=(5, 50, 200, 1000, 5000),
             description="Hand work to a subagent", trigger="Subagents spawned"),
    BadgeDef(id="multi_editor", name="Multi-Editor", icon="✂️", category=TOOL_MASTERY,
             stat="totalMultiEdits", tiers=(5, 50, 200, 1000, 5000),
             description="Change many places at once", trigger="MultiEdit calls"),
    BadgeDef(id="todo_lister", name="Todo Lister", icon="☑️", category=TOOL_MASTERY,
             stat="todoWrites", tiers=(5, 50, 200, 1000, 5000),
             description="Keep a plan on paper", trigger="TodoWrite calls"),
    BadgeDef(id="gatekeeper", name="Gatekeeper", icon="🚪", category=TOOL_MASTERY,
             stat="permissionRequests", tiers=(5, 50, 200, 1000, 5000),
             description="Approve what the agent may do", trigger="Permission requests"),

    # -- time -----------------------------------------------------------------
    BadgeDef(id="iron_streak", name="Iron Streak", icon="🔥", category=TIME,
             stat="longestStreak", tiers=(3, 7, 30, 100, 365),
             description="Code on consecutive days", trigger="Longest daily streak"),
    BadgeDef(id="on_fire", name="On Fire", icon="☄️", category=TIME,
             stat="currentStreak", tiers=(3, 7, 14, 30, 60),
             description="Keep the current streak alive", trigger="Current daily streak"),
    BadgeDef(id="night_owl", name="Night Owl", icon="🦉", category=TIME,
             stat="nightOwlCount", tiers=(10, 50, 200, 1000, 5000),
             description="Code after midnight", trigger="Prompts between midnight and 5 AM"),
    BadgeDef(id="early_bird", name="Early Bird", icon="🐦", category=TIME,
             stat="earlyBirdCount", tiers=(10, 50, 200, 1000, 5000),
             description="Code with the sunrise", trigger="Prompts between 5 AM and 8 AM"),
    BadgeDef(id="weekend_warrior", name="Weekend Warrior", icon="⚔️", category=TIME,
             stat="weekendSessions", tiers=(5, 25, 100, 500, 2000),
             description="Who needs weekends", trigger="Sessions on Saturday or Sunday"),
    BadgeDef(id="witching_hour", name="Witching Hour", icon="🧙", category=TIME,
             stat="witchingHourPrompts", tiers=(5, 25, 100, 500, 2000),
             description="Code while the spirits roam", trigger="Prompts between 2 AM and 4 AM"),
    BadgeDef(id="lunch_break", name="Lunch Break", icon="🥪", category=TIME,
             stat="lunchSessions", tiers=(5, 25, 100, 500, 2000),
             description="Eat at your desk", trigger="Sessions started during the noon hour"),
    BadgeDef(id="case_of_the_mondays", name="Case of the Mondays", icon="☕", category=TIME,
             stat="mondaySessions", tiers=(5, 25, 100, 250, 500),
             description="Start the week strong", trigger="Sessions started on Mondays"),
    BadgeDef(id="tgif", name="TGIF", icon="🎉", category=TIME,
             stat="fridaySessions", tiers=(5, 25, 100, 250, 500),
             description="Ship it before the weekend", trigger="Sessions started on Fridays"),
    BadgeDef(id="around_the_clock", name="Around the Clock", icon="🕐", category=TIME,
             stat="maxHoursInDay", tiers=(6, 10, 14, 18, 24),
             description="Be active through most of a day", trigger="Distinct hours active in one day"),
    BadgeDef(id="seasoned", name="Seasoned", icon="🍂", category=TIME,
             stat="uniqueQuarters", tiers=(2, 4, 6, 8, 12),
             description="Stick around through the seasons", trigger="Distinct year-quarters with a session"),
    BadgeDef(id="monthly_regular", name="Monthly Regular", icon="🗓️", category=TIME,
             stat="uniqueMonths", tiers=(2, 6, 12, 24, 48),
             description="Come back month after month", trigger="Distinct months with a session"),

    # -- behavioral -----------------------------------------------------------
    BadgeDef(id="creature_of_habit", name="Creature of Habit", icon="🔁", category=BEHAVIORAL,
             stat="mostRepeatedPromptCount", tiers=(25, 100, 500, 2000, 10000),
             description="You know what you like", trigger="Times your most repeated prompt was sent"),
    BadgeDef(id="explorer", name="Explorer", icon="🧭", category=BEHAVIORAL,
             stat="uniqueToolsUsed", tiers=(3, 5, 8, 11, 14),
             description="Try every tool in the box", trigger="Distinct tools used"),
    BadgeDef(id="planner", name="Planner", icon="🗺️", category=BEHAVIORAL,
             stat="planModeUses", tiers=(5, 25, 100, 500, 2000),
             description="Plan before you build", trigger="Plans approved in plan mode"),
    BadgeDef(id="novelist", name="Novelist", icon="📖", category=BEHAVIORAL,
             stat="longPromptCount", tiers=(5, 25, 100, 500, 2000),
             description="Write long prompts", trigger="Prompts over 1,000 characters"),
    BadgeDef(id="speed_demon", name="Speed Demon", icon="💨", category=BEHAVIORAL,
             stat="quickSessionCount", tiers=(5, 25, 100, 500, 2000),
             description="Get in, get out", trigger="Sessions under 5 minutes with tool use"),
    BadgeDef(id="compactor", name="Compactor", icon="🗜️", category=BEHAVIORAL,
             stat="totalCompactions", tiers=(1, 10, 50, 200, 1000),
             description="Fill the context window", trigger="Context compactions"),

    # -- resilience -----------------------------------------------------------
    BadgeDef(id="clean_hands", name="Clean Hands", icon="🧼", category=RESILIENCE,
             stat="longestErrorFreeStreak", tiers=(50, 200, 500, 2000, 10000),
             description="Go a long time without a failure", trigger="Longest run of successful tool calls"),
    BadgeDef(id="resilient", name="Resilient", icon="🛡️", category=RESILIENCE,
             stat="totalErrors", tiers=(10, 50, 200, 1000, 5000),
             description="Errors happen, you keep going", trigger="Errors survived"),
    BadgeDef(id="rate_limited", name="Rate Limited", icon="🚦", category=RESILIENCE,
             stat="totalRateLimits", tiers=(3, 10, 25, 50, 100),
             description="Push the limits", trigger="Rate-limit notifications"),
    BadgeDef(id="stubborn", name="Stubborn", icon="🐂", category=RESILIENCE,
             stat="longestFailureStreak", tiers=(3, 5, 10, 20, 50),
             description="Refuse to take no for an answer", trigger="Longest run of failed tool calls"),

    # -- error recovery -------------------------------------------------------
    BadgeDef(id="comeback_kid", name="Comeback Kid", icon="🔄", category=ERROR_RECOVERY,
             stat="recoveryCount", tiers=(5, 25, 100, 500, 2000),
             description="Fix it on the next try", trigger="Non-edit tool failures followed by a success of the same tool"),
    BadgeDef(id="second_try", name="Second Try", icon="✌️", category=ERROR_RECOVERY,
             stat="toolRecoveries", tiers=(10, 50, 200, 1000, 5000),
             description="Try, fail, succeed", trigger="Tool failures followed by a success of the same tool"),
    BadgeDef(id="never_give_up", name="Never Give Up", icon="💪", category=ERROR_RECOVERY,
             stat="persistenceWins", tiers=(1, 10, 50, 200, 1000),
             description="Succeed after failing again and again", trigger="Successes after 2+ failures of the same tool"),

    # -- shipping -------------------------------------------------------------
    BadgeDef(id="shipper", name="Shipper", icon="🚢", category=SHIPPING,
             stat="totalCommits", tiers=(5, 50, 200, 1000, 5000),
             description="Commit your work", trigger="Git commits"),
    BadgeDef(id="pr_machine", name="PR Machine", icon="🔀", category=SHIPPING,
             stat="totalPRs", tiers=(3, 25, 100, 500, 2000),
             description="Open pull requests", trigger="Pull requests created with gh"),
    BadgeDef(id="pusher", name="Pusher", icon="⬆️", category=SHIPPING,
             stat="totalPushes", tiers=(5, 50, 200, 1000, 5000),
             description="Send it upstream", trigger="Git pushes"),
    BadgeDef(id="branch_manager", name="Branch Manager", icon="🌿", category=SHIPPING,
             stat="branchCreations", tiers=(3, 25, 100, 500, 2000),
             description="Work on branches", trigger="Branches created"),
    BadgeDef(id="test_pilot", name="Test Pilot", icon="🧪", category=SHIPPING,
             stat="testRuns", tiers=(10, 100, 500, 2000, 10000),
             description="Run the test suite", trigger="Test commands run"),
    BadgeDef(id="polyglot", name="Polyglot", icon="🌐", category=SHIPPING,
             stat="uniqueLanguages", tiers=(2, 3, 5, 8, 12),
             description="Speak many languages", trigger="Distinct file extensions touched"),
    BadgeDef(id="line_cook", name="Line Cook", icon="👨‍🍳", category=SHIPPING,
             stat="totalLinesAdded", tiers=(100, 1000, 10000, 100000, 1000000),
             description="Add lines of code", trigger="Lines inserted by commits"),
    BadgeDef(id="demolition", name="Demolition Crew", icon="🧨", category=SHIPPING,
             stat="totalLinesRemoved", tiers=(100, 1000, 10000, 100000, 500000),
             description="Delete code with confidence", trigger="Lines deleted by commits"),
    BadgeDef(id="churn", name="Churn", icon="🌪️", category=SHIPPING,
             stat="totalLinesChanged", tiers=(500, 5000, 50000, 250000, 1000000),
             description="Keep the codebase moving", trigger="Lines inserted plus deleted by commits"),

    # -- multi agent ----------------------------------------------------------
    BadgeDef(id="buddy_system", name="Buddy System", icon="🤝", category=MULTI_AGENT,
             stat="concurrentAgentUses", tiers=(1, 5, 25, 100, 500),
             description="Bring in a helper", trigger="Sessions that spawned subagents"),
    BadgeDef(id="hive_mind", name="Hive Mind", icon="🐜", category=MULTI_AGENT,
             stat="totalSubagents", tiers=(10, 100, 500, 2000, 10000),
             description="Think with many minds", trigger="Subagents spawned"),
    BadgeDef(id="swarm", name="Swarm", icon="🐝", category=MULTI_AGENT,
             stat="maxConcurrentSubagents", tiers=(2, 3, 5, 8, 12),
             description="Run subagents side by side", trigger="Most subagents running at once"),
    BadgeDef(id="claude_loyalist", name="Claude Loyalist", icon="🟠", category=MULTI_AGENT,
             stat="claudeSessions", tiers=(10, 50, 200, 1000, 5000),
             description="Stick with Claude Code", trigger="Claude Code sessions"),
    BadgeDef(id="gemini_whisperer", name="Gemini Whisperer", icon="♊", category=MULTI_AGENT,
             stat="geminiSessions", tiers=(10, 50, 200, 1000, 5000),
             description="Speak fluent Gemini", trigger="Gemini CLI sessions"),
    BadgeDef(id="copilot_pilot", name="Copilot Pilot", icon="✈️", category=MULTI_AGENT,
             stat="copilotSessions", tiers=(10, 50, 200, 1000, 5000),
             description="Fly with Copilot", trigger="Copilot CLI sessions"),
    BadgeDef(id="open_sourcerer", name="Open Sourcerer", icon="🪄", category=MULTI_AGENT,
             stat="opencodeSessions", tiers=(10, 50, 200, 1000, 5000),
             description="Cast spells with OpenCode", trigger="OpenCode sessions"),
    BadgeDef(id="polyagent", name="Polyagent", icon="🎭", category=MULTI_AGENT,
             stat="distinctAgents", tiers=(1, 2, 3, 4, 5),
             description="Try different coding agents", trigger="Distinct agents used"),
    BadgeDef(id="agent_hopper", name="Agent Hopper", icon="🐇", category=MULTI_AGENT,
             stat="agentSwitchDays", tiers=(2, 4, 6, 8, 10),
             description="Switch agents within a day", trigger="Days with sessions from 2+ agents"),
    BadgeDef(id="double_agent", name="Double Agent", icon="🕵️", category=MULTI_AGENT,
             stat="doubleAgentDays", tiers=(1, 5, 25, 100, 365),
             description="Lead a double life", trigger="Days with sessions from 2+ agents"),
    BadgeDef(id="agent_of_chaos", name="Agent of Chaos", icon="🌀", category=MULTI_AGENT,
             stat="maxAgentsInDay", tiers=(2, 3, 4, 5, 6),
             description="Use every agent in one day", trigger="Most distinct agents in a single day"),

    # -- wild card ------------------------------------------------------------
    BadgeDef(id="please_thank_you", name="Please and Thank You", icon="🙏", category=WILD_CARD,
             stat="politePromptCount", tiers=(10, 50, 200, 1000, 5000),
             description="Manners cost nothing", trigger="Prompts saying please or thanks"),
    BadgeDef(id="wall_of_text", name="Wall of Text", icon="🧱", category=WILD_CARD,
             stat="hugePromptCount", tiers=(1, 10, 50, 200, 1000),
             description="Paste the whole thing", trigger="Prompts over 5,000 characters"),
    BadgeDef(id="the_fixer", name="The Fixer", icon="🔨", category=WILD_CARD,
             stat="maxSameFileEdits", tiers=(10, 20, 50, 100, 200),
             description="That one file, again", trigger="Most edits to a single file"),
    BadgeDef(id="what_day_is_it", name="What Day Is It?", icon="😵", category=WILD_CARD,
             stat="longSessionCount", tiers=(1, 5, 25, 100, 500),
             description="Lose track of time", trigger="Sessions over 8 hours"),
    BadgeDef(id="copy_pasta", name="Copy Pasta", icon="🍝", category=WILD_CARD,
             stat="repeatedPromptCount", tiers=(3, 10, 50, 200, 1000),
             description="Say it again", trigger="Prompts you have sent more than once"),
    BadgeDef(id="error_magnet", name="Error Magnet", icon="🧲", category=WILD_CARD,
             stat="maxErrorsInSession", tiers=(10, 25, 50, 100, 200),
             description="Attract every error in one session", trigger="Most errors in a single session"),
    BadgeDef(id="all_caps", name="ALL CAPS", icon="📢", category=WILD_CARD,
             stat="shoutingPromptCount", tiers=(1, 10, 50, 200, 1000),
             description="WHY ARE WE SHOUTING", trigger="Fully uppercase prompts"),
    BadgeDef(id="sorry_not_sorry", name="Sorry Not Sorry", icon="😅", category=WILD_CARD,
             stat="apologyPromptCount", tiers=(5, 25, 100, 500, 2000),
             description="Apologize to a program", trigger="Prompts with an apology"),
    BadgeDef(id="the_negotiator", name="The Negotiator", icon="🤝", category=WILD_CARD,
             stat="negotiationPromptCount", tiers=(5, 25, 100, 500, 2000),
             description="Bargain with the agent", trigger="Prompts that negotiate"),
    BadgeDef(id="emoji_enthusiast", name="Emoji Enthusiast", icon="😎", category=WILD_CARD,
             stat="emojiPromptCount", tiers=(5, 25, 100, 500, 2000),
             description="Say it with pictures", trigger="Prompts containing emoji"),
    BadgeDef(id="broken_record", name="Broken Record", icon="📀", category=WILD_CARD,
             stat="rapidRepeatPromptCount", tiers=(3, 10, 50, 200, 1000),
             description="Repeat yourself right away", trigger="Duplicate prompts in one session or within a minute"),
    BadgeDef(id="philosopher", name="Philosopher", icon="🤔", category=WILD_CARD,
             stat="existentialPromptCount", tiers=(1, 5, 25, 100, 500),
             description="Ask the big questions", trigger="Existential prompts"),

    # -- session behavior -----------------------------------------------------
    BadgeDef(id="obsessed", name="Obsessed", icon="👀", category=SESSION_BEHAVIOR,
             stat="maxSameFileEditsInSession", tiers=(5, 10, 25, 50, 100),
             description="Edit the same file over and over", trigger="Most edits to one file in a session"),
    BadgeDef(id="file_factory", name="File Factory", icon="🏭", category=SESSION_BEHAVIOR,
             stat="maxFilesCreatedInSession", tiers=(5, 10, 25, 50, 100),
             description="Mass-produce files", trigger="Most files written in a session"),
    BadgeDef(id="deep_diver", name="Deep Diver", icon="🤿", category=SESSION_BEHAVIOR,
             stat="maxFilesReadInSession", tiers=(10, 25, 50, 100, 250),
             description="Read the whole codebase", trigger="Most files read in a session"),
    BadgeDef(id="swiss_army", name="Swiss Army Knife", icon="🔪", category=SESSION_BEHAVIOR,
             stat="maxToolTypesInSession", tiers=(3, 5, 7, 9, 12),
             description="Use many tools in one go", trigger="Most distinct tools in a session"),
    BadgeDef(id="session_hopper", name="Session Hopper", icon="🦘", category=SESSION_BEHAVIOR,
             stat="maxSessionsInDay", tiers=(5, 10, 20, 40, 80),
             description="Start fresh again and again", trigger="Most sessions started in one day"),

    # -- prompt patterns ------------------------------------------------------
    BadgeDef(id="twenty_questions", name="Twenty Questions", icon="❓", category=PROMPT_PATTERNS,
             stat="questionPromptCount", tiers=(20, 100, 500, 2000, 10000),
             description="Ask, don't tell", trigger="Prompts ending with a question mark"),
    BadgeDef(id="list_maker", name="List Maker", icon="📋", category=PROMPT_PATTERNS,
             stat="numberedListPromptCount", tiers=(5, 25, 100, 500, 2000),
             description="Number your requests", trigger="Prompts with a numbered list"),
    BadgeDef(id="essayist", name="Essayist", icon="📜", category=PROMPT_PATTERNS,
             stat="multiLinePromptCount", tiers=(5, 25, 100, 500, 2000),
             description="Structure your thoughts", trigger="Prompts with 10+ lines"),
    BadgeDef(id="terse", name="Terse", icon="🤐", category=PROMPT_PATTERNS,
             stat="shortPromptCount", tiers=(10, 50, 200, 1000, 5000),
             description="Brevity is the soul of wit", trigger="Prompts of three words or fewer"),
    BadgeDef(id="one_word", name="One Word", icon="☝️", category=PROMPT_PATTERNS,
             stat="singleWordPrompts", tiers=(5, 25, 100, 500, 2000),
             description="Continue.", trigger="Single-word prompts"),
    BadgeDef(id="code_dumper", name="Code Dumper", icon="🗑️", category=PROMPT_PATTERNS,
             stat="codeBlockPrompts", tiers=(5, 25, 100, 500, 2000),
             description="Show, don't tell", trigger="Prompts with a fenced code block"),
    BadgeDef(id="link_sharer", name="Link Sharer", icon="🔗", category=PROMPT_PATTERNS,
             stat="urlPrompts", tiers=(5, 25, 100, 500, 2000),
             description="Point at the docs", trigger="Prompts containing a URL"),
    BadgeDef(id="bug_hunter", name="Bug Hunter", icon="🐛", category=PROMPT_PATTERNS,
             stat="bugFixPrompts", tiers=(10, 50, 200, 1000, 5000),
             description="Squash bugs", trigger="Prompts about bugs or fixes"),
    BadgeDef(id="refactorer", name="Refactorer", icon="♻️", category=PROMPT_PATTERNS,
             stat="refactorPrompts", tiers=(5, 25, 100, 500, 2000),
             description="Leave it cleaner", trigger="Prompts asking for a refactor"),

    # -- tool combos ----------------------------------------------------------
    BadgeDef(id="full_cycle", name="Full Cycle", icon="🔃", category=TOOL_COMBOS,
             stat="readEditBashCombos", tiers=(5, 25, 100, 500, 2000),
             description="Read, edit, run", trigger="Read then Edit then Bash in a row"),
    BadgeDef(id="seek_and_destroy", name="Seek and Destroy", icon="🎯", category=TOOL_COMBOS,
             stat="searchThenEditCount", tiers=(10, 50, 200, 1000, 5000),
             description="Find it, change it", trigger="Searches immediately followed by an edit"),
    BadgeDef(id="trust_but_verify", name="Trust but Verify", icon="🧐", category=TOOL_COMBOS,
             stat="writeThenReadCount", tiers=(5, 25, 100, 500, 2000),
             description="Check what you just wrote", trigger="Writes immediately followed by a read of the same file"),
    BadgeDef(id="hammer_time", name="Hammer Time", icon="🔨", category=TOOL_COMBOS,
             stat="backToBackEdits", tiers=(10, 50, 200, 1000, 5000),
             description="Edit, edit, edit", trigger="Back-to-back edits of the same file"),
    BadgeDef(id="research_then_build", name="Research then Build", icon="🏛️", category=TOOL_COMBOS,
             stat="researchThenBuild", tiers=(5, 25, 100, 500, 2000),
             description="Read the docs, then write the code", trigger="Web lookups immediately followed by a write or edit"),

    # -- project dedication ---------------------------------------------------
    BadgeDef(id="empire", name="Empire", icon="🏰", category=PROJECT_DEDICATION,
             stat="uniqueProjects", tiers=(2, 5, 10, 25, 50),
             description="Expand your territory", trigger="Distinct projects"),
    BadgeDef(id="regular", name="Regular", icon="🏠", category=PROJECT_DEDICATION,
             stat="mostVisitedProjectCount", tiers=(10, 50, 200, 1000, 5000),
             description="Keep coming back to one project", trigger="Sessions in your favorite project"),
    BadgeDef(id="finisher", name="Finisher", icon="🏁", category=PROJECT_DEDICATION,
             stat="finishedProjects", tiers=(1, 3, 10, 25, 50),
             description="Ship and move on", trigger="Projects with commits and no session for 7+ days"),
    BadgeDef(id="legacy_keeper", name="Legacy Keeper", icon="🏺", category=PROJECT_DEDICATION,
             stat="legacyReturns", tiers=(1, 3, 10, 25, 50),
             description="Return to an old project", trigger="Returns to a project after 30+ days away"),
    BadgeDef(id="project_hopper", name="Project Hopper", icon="🦗", category=PROJECT_DEDICATION,
             stat="maxProjectsInDay", tiers=(2, 3, 5, 8, 12),
             description="Juggle projects", trigger="Most distinct projects in one day"),

    # -- token usage ----------------------------------------------------------
    BadgeDef(id="token_burner", name="Token Burner", icon="🔥", category=TOKEN_USAGE,
             stat="totalTokens", tiers=(100000, 1000000, 10000000, 100000000, 500000000),
             description="Burn through tokens", trigger="Total tokens used"),
    BadgeDef(id="verbose_machine", name="Verbose Machine", icon="📠", category=TOKEN_USAGE,
             stat="totalOutputTokens", tiers=(10000, 100000, 1000000, 10000000, 100000000),
             description="Let the agent talk", trigger="Output tokens generated"),
    BadgeDef(id="input_junkie", name="Input Junkie", icon="📥", category=TOKEN_USAGE,
             stat="totalInputTokens", tiers=(10000, 100000, 1000000, 10000000, 100000000),
             description="Feed the model", trigger="Input tokens sent"),
    BadgeDef(id="cache_money", name="Cache Money", icon="💰", category=TOKEN_USAGE,
             stat="totalCacheReadTokens", tiers=(100000, 1000000, 10000000, 100000000, 1000000000),
             description="Hit the prompt cache", trigger="Cache read tokens"),
    BadgeDef(id="context_builder", name="Context Builder", icon="🧱", category=TOKEN_USAGE,
             stat="totalCacheCreationTokens", tiers=(100000, 1000000, 10000000, 100000000, 1000000000),
             description="Build big contexts", trigger="Cache creation tokens"),
    BadgeDef(id="whale_session", name="Whale Session", icon="🐋", category=TOKEN_USAGE,
             stat="mostTokensInSession", tiers=(100000, 500000, 1000000, 5000000, 10000000),
             description="One enormous session", trigger="Most tokens in a single session"),

    # -- aspirational ---------------------------------------------------------
    _aspirational("the_machine", "The Machine", "🤖", "Become one with the tools",
                  "totalToolCalls", 100000, "100,000 tool calls"),
    _aspirational("year_of_code", "Year of Code", "📆", "Code every day for a year",
                  "longestStreak", 365, "A 365-day streak"),
    _aspirational("million_words", "Million Words", "📚", "Type a library's worth",
                  "totalCharsTyped", 10000000, "10 million characters typed"),
    _aspirational("lifer", "Lifer", "⏳", "This is your life now",
                  "totalSessions", 10000, "10,000 sessions"),
    _aspirational("transcendent", "Transcendent", "🌌", "Beyond ranking",
                  "totalXP", 100000, "100,000 XP"),
    _aspirational("omniscient", "Omniscient", "👁️", "Master every tool badge",
                  "allToolsObsidian", 1, "Every tool mastery badge at the top tier"),
    _aspirational("billionaire", "Billionaire", "💎", "A billion tokens",
                  "totalTokens", 1000000000, "1 billion tokens used"),
    _aspirational("prolific", "Prolific", "🏭", "Ten thousand commits",
                  "totalCommits", 10000, "10,000 commits"),
    _aspirational("gotta_catch_em_all", "Gotta Catch 'Em All", "🏆", "Unlock everything visible",
                  "allNonSecretBadgesUnlocked", 1, "Every non-secret badge unlocked"),

    # -- secret ---------------------------------------------------------------
    _secret("rm_rf_survivor", "rm -rf Survivor", "💀", "Live dangerously",
            "dangerousCommandBlocked", "An rm -rf that never ran"),
    _secret("touch_grass", "Touch Grass", "🌱", "Welcome back",
            "returnAfterBreak", "Return after 7+ days away"),
    _secret("three_am_coder", "3 AM Coder", "🌙", "Nothing good happens at 3 AM",
            "threeAmPrompt", "A prompt during the 3 AM hour"),
    _secret("night_shift", "Night Shift", "🌃", "Cross midnight in one session",
            "midnightSpanSession", "A session spanning midnight"),
    _secret("inception", "Inception", "🌀", "We need to go deeper",
            "nestedSubagent", "Two subagents running at once"),
    _secret("holiday_hacker", "Holiday Hacker", "🎄", "Code on a holiday",
            "holidayActivity", "A session on a holiday"),
    _secret("speed_run", "Speed Run", "⏱️", "Done before you sat down",
            "speedRunSession", "A session of 20 seconds or less with tool use"),
    _secret("full_send", "Full Send", "🚀", "Everything, everywhere, all at once",
            "allToolsInSession", "Bash, Read, Write, Edit, Grep, Glob and WebFetch in one session"),
    _secret("launch_day", "Launch Day", "🎬", "Where it all began",
            "firstEverSession", "Your first session"),
    _secret("the_completionist", "The Completionist", "🥇", "Gold everywhere",
            "allBadgesGold", "Every badge at Gold or better"),
    _secret("lunatic", "Lunatic", "🌕", "Code under a full moon",
            "fullMoonSession", "A session on a full moon"),
    _secret("anniversary", "Anniversary", "🎂", "Many happy returns",
            "anniversarySession", "A session on the anniversary of your first one"),
    _secret("friday_13th", "Friday the 13th", "🔪", "Tempt fate",
            "fridayThe13thSession", "A session on Friday the 13th"),
    _secret("leap_of_faith", "Leap of Faith", "🐸", "A day that barely exists",
            "leapDaySession", "A session on February 29"),
)

SECRET_BADGE_COUNT = 14

_BY_ID: dict[str, BadgeDef] = {badge.id: badge for badge in BADGES}


def get_badge(badge_id: str) -> BadgeDef | None:
    """Look up a badge definition by id."""
    return _BY_ID.get(badge_id)


def evaluate_badge(badge: BadgeDef, value: float) -> tuple[int, float]:
    """Return (tier, progress toward the next tier) for a watched value.

    Normal badges credit the ascending prefix of thresholds met. Secret
    badges only ever reach tier 1 and aspirational badges only tier 5.
    Progress is capped at 0.99 until the next tier is actually reached.
    """
    tiers = badge.tiers
    if badge.aspirational:
        if value >= tiers[4]:
            return MAX_TIER, 1.0
        return 0, min(max(value / tiers[4], 0.0), 0.99) if tiers[4] > 0 else 0.0

    if badge.secret:
        if value >= tiers[0]:
            return 1, 1.0
        return 0, 0.0

    tier = 0
    for threshold in tiers:
        if value >= threshold:
            tier += 1
        else:
            break

    if tier >= MAX_TIER:
        return MAX_TIER, 1.0

    prev = tiers[tier - 1] if tier > 0 else 0
    nxt = tiers[tier]
    if nxt - prev == 0:
        return tier, 0.0
    progress = (value - prev) / (nxt - prev)
    return tier, min(max(progress, 0.0), 0.99)
