#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from .config import (
    CONFIG_PATH,
    VAULT_PATH,
    load_settings,
    masked_settings,
    save_settings,
    setup_logging,
)
from .errors import ConfigurationError
from .sync import SyncEngine
from .vault import FileSystemNoteStore

logger = logging.getLogger("wallabag_notes")

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


def parse_assignments(pairs: List[str]) -> Dict[str, Any]:
    """Turn `key=value` arguments into keyword arguments for the engine."""
    changes: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip().replace("-", "_")
        if not sep or not key:
            raise ConfigurationError(f"Expected KEY=VALUE, got '{pair}'")
        if key == "only_starred":
            lowered = value.strip().lower()
            if lowered not in TRUE_VALUES | FALSE_VALUES:
                raise ConfigurationError(f"only_starred must be true or false, got '{value}'")
            changes[key] = lowered in TRUE_VALUES
        else:
            changes[key] = value
    return changes


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wallabag-notes",
        description="Mirror wallabag articles into a folder of Markdown notes",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--config", default=CONFIG_PATH, help="Settings file (default: %(default)s)")
    parser.add_argument("--vault", default=VAULT_PATH, help="Vault directory (default: %(default)s)")

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("sync", help="Fetch new articles and write notes")
    sub.add_parser("reset", help="Forget the last sync time and resync everything next time")
    sub.add_parser("show-config", help="Print the settings with secrets masked")
    set_parser = sub.add_parser("set", help="Change settings, e.g. username=alice only_starred=false")
    set_parser.add_argument("assignments", nargs="+", metavar="KEY=VALUE")
    sub.add_parser("tui", help="Open the interactive interface")
    return parser


def _print_status(text: str) -> None:
    print(text, file=sys.stderr)


# --- Entrypoint ---
def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    debug_path = setup_logging(args.debug)
    if debug_path:
        print(f"Debug logging enabled: {debug_path}", file=sys.stderr)

    settings = load_settings(args.config)
    engine = SyncEngine(
        settings,
        save=lambda s: save_settings(s, args.config),
        store=FileSystemNoteStore(args.vault),
        notify=_print_status,
    )

    command = args.command or "sync"
    if command == "sync":
        result = engine.sync()
        return 0 if result.ok else 1
    if command == "reset":
        engine.reset_sync_memory()
        return 0
    if command == "show-config":
        print(json.dumps(masked_settings(settings), indent=2))
        return 0
    if command == "set":
        try:
            engine.update_settings(**parse_assignments(args.assignments))
        except ConfigurationError as e:
            print(f"error: {e}", file=sys.stderr)
            return 1
        print("Settings saved.", file=sys.stderr)
        return 0

    from .app import WallabagNotesApp

    try:
        WallabagNotesApp(engine).run()
    except Exception as e:
        logger.exception("Application crashed: %s", e)
        print(f"Application crashed: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
