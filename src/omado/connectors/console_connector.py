# src/omado/connectors/console_connector.py

"""
Interactive console front end.

Redraws the filtered task list every turn using the colors of the current
palette (read from the theme watcher without waiting on it) and routes input
through the slash-command registry. Plain text adds a task.

Color output:
- truecolor escapes, disabled when stdout is not a TTY unless FORCE_COLOR=1
- NO_COLOR disables color completely
"""

from __future__ import annotations

import logging
import os
import sys

from ..cli.commands import add_task
from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..projects.project_filters import StatusFilter
from ..projects.project_index import NO_PROJECT
from ..tasks.task_models import TaskError
from ..theme.theme_models import Rgba, ThemeDocument, project_color

logger = logging.getLogger(__name__)

RESET = "\033[0m"
BOLD = "\033[1m"
STRIKE = "\033[9m"


def color_enabled(stream=None) -> bool:
    stream = stream or sys.stdout
    if os.environ.get("NO_COLOR") is not None:
        return False
    if os.environ.get("FORCE_COLOR", "").lower() in {"1", "true", "yes", "on"}:
        return True
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


def _fg(c: Rgba) -> str:
    return f"\033[38;2;{c.r};{c.g};{c.b}m"


def paint(text: str, *styles: str, enabled: bool = True) -> str:
    if not enabled or not styles:
        return text
    return "".join(styles) + text + RESET


def _filter_summary(state: AppState) -> str:
    f = state.filters
    if f.project is None:
        project = "All"
    elif f.project is NO_PROJECT:
        project = "No project"
    else:
        project = str(f.project)
    parts = [f"status: {f.status.value}", f"project: {project}"]
    if f.search:
        parts.append(f"search: {f.search!r}")
    return " | ".join(parts)


def render_view(state: AppState, *, colors: bool = False, palette: ThemeDocument | None = None) -> str:
    """Text for one redraw of the task list."""
    doc = palette or state.palette()
    visible = state.visible()
    lines = [
        paint(getattr(state.settings, "app_name", "omado"), BOLD, _fg(doc.accent), enabled=colors),
        paint(_filter_summary(state), _fg(doc.border), enabled=colors),
        "",
    ]

    if not visible:
        if state.filters.search:
            empty = "No matching todos found."
        elif state.filters.status is StatusFilter.ACTIVE:
            empty = "No active todos."
        elif state.filters.status is StatusFilter.DONE:
            empty = "No completed todos."
        else:
            empty = "No todos yet. Type a task (or /add <text>) to add one!"
        lines.append(paint(empty, _fg(doc.done), enabled=colors))
        return "\n".join(lines)

    width = len(str(len(visible)))
    for row, (_, task) in enumerate(visible, start=1):
        box = "[x]" if task.done else "[ ]"
        box_s = paint(box, _fg(doc.accent if task.done else doc.border), enabled=colors)
        num = f"{row:>{width}}."
        project, shown = task.project, task.shown
        label = ""
        if project is not None:
            label = paint(project, BOLD, _fg(project_color(doc, project)), enabled=colors) + " "
        if task.done:
            text = paint(shown, STRIKE, _fg(doc.done), enabled=colors)
        else:
            text = paint(shown, _fg(doc.foreground), enabled=colors)
        lines.append(f"{num} {box_s} {label}{text}")

    index = state.project_index()
    total = len(state.task_store.tasks)
    done = sum(c.done for c in index.counts.values())
    lines.append("")
    lines.append(paint(f"{total - done} open, {done} done", _fg(doc.done), enabled=colors))
    return "\n".join(lines)


def run_console_loop(state: AppState) -> None:
    logger.info("Console front end started (tasks=%d).", len(state.task_store.tasks))
    colors = color_enabled()
    print("Type a task to add it. Use /help for commands. Use /exit to quit.\n")

    message: str | None = None
    while True:
        print(render_view(state, colors=colors))
        if message:
            print(f"\n{message}")
        try:
            user_input = input("\n> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        message = None
        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit", "/q"):
            logger.info("Console exit command received.")
            break

        try:
            reply = command_registry.handle(state, user_input)
            if reply is None:
                task = add_task(state, user_input)
                reply = f"Added: {task.text}"
        except TaskError as exc:
            reply = f"Error: {exc}"
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."
        message = reply
        print()

    logger.info("Console front end finished.")
