# src/omado/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.state import AppState
from ..projects.project_filters import new_task_prefill, palette_options
from ..tasks.task_models import Task, TaskError, derive_project
from ..theme.theme_watcher import ThemeWatcher

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console front end (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(state, args)
        except TaskError as exc:
            logger.info("Command /%s failed: %s", name, exc)
            return f"Error: {exc}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _row_to_index(state: AppState, raw: str) -> int | None:
    """Map a 1-based row number of the visible list to a store index."""
    if not raw.isdigit():
        return None
    row = int(raw)
    visible = state.visible()
    if row < 1 or row > len(visible):
        return None
    return visible[row - 1][0]


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def add_task(state: AppState, text: str) -> Task:
    """Add a task, prefixing the active project filter when the text names no project."""
    if derive_project(text.strip()).project is None:
        text = new_task_prefill(state.filters) + text.strip()
    return state.task_store.add(text)


def cmd_add(state: AppState, args: list[str]) -> str:
    text = " ".join(args).strip()
    if not text:
        return "Usage: /add <text>  (e.g. /add work: fix parser bug)"
    task = add_task(state, text)
    return f"Added: {task.text}"


def cmd_toggle(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /x <row>"
    index = _row_to_index(state, args[0])
    if index is None:
        return f"No such row: {args[0]}"
    task = state.task_store.toggle_done(index)
    return f"{'Done' if task.done else 'Reopened'}: {task.text}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /del <row>"
    index = _row_to_index(state, args[0])
    if index is None:
        return f"No such row: {args[0]}"
    task = state.task_store.delete(index)
    return f"Deleted: {task.text}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /edit <row> <new text>"
    index = _row_to_index(state, args[0])
    if index is None:
        return f"No such row: {args[0]}"
    task = state.task_store.edit(index, " ".join(args[1:]))
    return f"Edited: {task.text}"


def cmd_filter(state: AppState, args: list[str]) -> str:
    state.filters = state.filters.cycle_status()
    return f"Status filter: {state.filters.status.value}"


def cmd_project(state: AppState, args: list[str]) -> str:
    direction = -1 if args and args[0].lower() in ("prev", "back", "-") else 1
    state.filters = state.filters.cycle_project(state.project_index(), direction)
    project = state.filters.project
    return f"Project filter: {'All' if project is None else project}"


def cmd_projects(state: AppState, args: list[str]) -> str:
    """List projects with counts; `/projects <n>` selects the n-th entry."""
    if len(args) == 1 and args[0].isdigit():
        options = palette_options(state.task_store.tasks, state.project_index())
        pick = int(args[0])
        if pick < 1 or pick > len(options):
            return f"No such project entry: {pick}"
        chosen = options[pick - 1]
        state.filters = state.filters.with_project(chosen.value)
        return f"Project filter: {chosen.label}"

    options = palette_options(state.task_store.tasks, state.project_index(), " ".join(args))
    if not options:
        return "No matching projects."
    lines = ["Projects:"]
    for i, opt in enumerate(options, start=1):
        marker = ">" if opt.value == state.filters.project else " "
        lines.append(f"{marker} {i}. {opt.label} ({opt.counts.open} open / {opt.counts.total})")
    return "\n".join(lines)


def cmd_search(state: AppState, args: list[str]) -> str:
    text = " ".join(args)
    state.filters = state.filters.with_search(text)
    return f"Search: {text!r}" if text else "Search cleared."


def cmd_clear(state: AppState, args: list[str]) -> str:
    state.filters = state.filters.cleared()
    return "Filters cleared."


def cmd_reload(state: AppState, args: list[str]) -> str:
    result = state.task_store.reload()
    msg = f"Reloaded {len(result.tasks)} task(s)."
    if result.skipped:
        msg += f" Skipped {result.skipped_count} malformed line(s)."
    return msg


def cmd_theme(state: AppState, args: list[str]) -> str:
    source = state.palette_source
    if not isinstance(source, ThemeWatcher):
        return "Theme: built-in palette (watcher disabled)."
    doc = source.current()
    lines = [
        f"Theme: {source.root} (state={source.state.value}, version={source.palette.version})",
        f"  background={doc.background} foreground={doc.foreground} accent={doc.accent}",
        f"  watching {len(source.watched)} file(s)",
    ]
    if source.degraded:
        lines.append("  watcher degraded; colors no longer update")
    if source.last_error is not None:
        lines.append(f"  last error: {source.last_error}")
    for issue in source.last_issues:
        lines.append(f"  issue: {issue}")
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a task: /add [project:] text.", aliases=["a"])
registry.register("x", cmd_toggle, help_text="Toggle done: /x <row>.", aliases=["toggle"])
registry.register("del", cmd_delete, help_text="Delete a task: /del <row>.", aliases=["rm"])
registry.register("edit", cmd_edit, help_text="Replace a task's text: /edit <row> <text>.", aliases=["e"])
registry.register("filter", cmd_filter, help_text="Cycle status filter (All/Active/Done).", aliases=["f"])
registry.register("project", cmd_project, help_text="Cycle project filter: /project [prev].", aliases=["p"])
registry.register(
    "projects", cmd_projects, help_text="List projects: /projects [query] | /projects <n> to select."
)
registry.register("search", cmd_search, help_text="Search text: /search <text> (no text clears).", aliases=["s"])
registry.register("clear", cmd_clear, help_text="Clear all filters.", aliases=["c"])
registry.register("reload", cmd_reload, help_text="Re-read the task file from disk.")
registry.register("theme", cmd_theme, help_text="Show theme watcher status.")
