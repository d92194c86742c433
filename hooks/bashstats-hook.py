#!/usr/bin/env python3
"""Agent hook entry point: bashstats-hook.py <HookType> < payload.json"""
from __future__ import annotations

import sys
from pathlib import Path

_PLUGIN_ROOT = Path(__file__).parent.parent
_SRC = _PLUGIN_ROOT / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))


def main() -> None:
    if len(sys.argv) < 2:
        sys.exit(0)
    hook_type = sys.argv[1]
    try:
        raw = sys.stdin.read()
        from bashstats.cli import do_hook
        from bashstats.config import get_db_path
        from bashstats.db import Database, StoreUnavailableError

        try:
            db = Database(db_path=get_db_path())
        except StoreUnavailableError:
            sys.exit(0)
        try:
            do_hook(db, hook_type, raw)
        finally:
            db.close()
    except Exception:
        # Recording stats must never interrupt the agent
        pass
    sys.exit(0)


if __name__ == "__main__":
    main()
