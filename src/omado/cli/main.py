# src/omado/cli/main.py

"""
CLI entrypoint.

- `omado add <text...>` appends one task and exits.
- `omado help` prints usage.
- bare `omado` starts the interactive console with the theme watcher running
  in a background thread.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..tasks.task_models import TaskError
from ..theme.theme_watcher import ThemeWatcher
from .bootstrap import create_initial_state, create_task_store

logger = logging.getLogger(__name__)

USAGE = """\
omado - Simple todo management

USAGE:
    omado                    Launch the interactive list
    omado add "<task>"       Add a new task
    omado help               Show this help

EXAMPLES:
    omado add "Buy groceries"
    omado add "work: Fix parser bug"
    omado add "personal: Call mom"
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="omado", add_help=False)
    parser.add_argument("-h", "--help", action="store_true", dest="show_help")
    parser.add_argument("command", nargs="?")
    parser.add_argument("args", nargs=argparse.REMAINDER)
    return parser


def cmd_add(settings, words: Sequence[str]) -> int:
    text = " ".join(words)
    if not text.strip():
        print('Usage: omado add "<task>"', file=sys.stderr)
        return 1

    try:
        store = create_task_store(settings)
        task = store.add(text)
    except TaskError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Cannot read task file: %s", exc)
        print(f"Error: cannot read task file: {exc}", file=sys.stderr)
        return 1

    if task.project is not None:
        print(f"✓ Added task to project '{task.project}': {task.shown}")
    else:
        print(f"✓ Added task: {task.text}")
    return 0


def run_interactive(settings) -> int:
    try:
        state = create_initial_state(settings=settings)
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Cannot read task file: %s", exc)
        print(f"Error: cannot read task file: {exc}", file=sys.stderr)
        return 1

    watcher = state.palette_source
    if isinstance(watcher, ThemeWatcher):
        # Blocks until the first palette is resolved, then keeps watching.
        watcher.start()

    try:
        run_console_loop(state)
    finally:
        if isinstance(watcher, ThemeWatcher):
            watcher.stop()
        logger.info("Bye.")
    return 0


def main(argv: Sequence[str] | None = None, *, settings=None) -> int:
    if settings is None:
        settings = get_settings()

    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    console_level = getattr(logging, level_name, logging.WARNING)
    setup_logging(log_dir=getattr(settings, "log_dir", None), console_level=console_level)

    parser = build_parser()
    args = parser.parse_args(list(sys.argv[1:] if argv is None else argv))

    if args.show_help or args.command in ("help", "--help"):
        print(USAGE, end="")
        return 0

    if args.command is None:
        return run_interactive(settings)

    if args.command == "add":
        return cmd_add(settings, args.args)

    print(f"Unknown command: {args.command}", file=sys.stderr)
    print("Run 'omado help' for usage information.", file=sys.stderr)
    return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
