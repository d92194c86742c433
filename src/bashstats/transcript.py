"""Token usage extraction from agent transcripts."""

from __future__ import annotations

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

TOKEN_FIELDS = (
    "input_tokens",
    "output_tokens",
    "cache_creation_input_tokens",
    "cache_read_input_tokens",
)


def _usage_of(entry: dict) -> dict | None:
    for holder in (entry, entry.get("response"), entry.get("message")):
        if isinstance(holder, dict):
            usage = holder.get("usage")
            if isinstance(usage, dict) and "input_tokens" in usage:
                return usage
    return None


def sum_transcript_tokens(path: Path) -> dict[str, int] | None:
    """Sum token usage across a JSONL transcript.

    The agent writes one line per streamed content block, each repeating the
    usage of its API call, so usage is keyed by message id and the last line
    for an id wins. Returns None when the file is missing or has no usage.
    Malformed lines are skipped.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        return None

    per_message: dict[str, dict[str, int]] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            entry = json.loads(line)
        except json.JSONDecodeError:
            logger.debug("skipping malformed transcript line in %s", path)
            continue
        if not isinstance(entry, dict):
            continue
        usage = _usage_of(entry)
        if usage is None:
            continue
        message = entry.get("message")
        msg_id = (message.get("id") if isinstance(message, dict) else None) or entry.get("id")
        key = msg_id or f"_line_{len(per_message)}"
        per_message[key] = {name: int(usage.get(name) or 0) for name in TOKEN_FIELDS}

    if not per_message:
        return None
    return {name: sum(u[name] for u in per_message.values()) for name in TOKEN_FIELDS}
