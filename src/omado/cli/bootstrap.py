# src/omado/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- resolves the task file location and makes sure its directory exists,
- loads the task list once,
- wires the theme watcher (not started here) into AppState.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..config import TODO_FILE_NAME, get_settings
from ..core.state import AppState
from ..tasks.task_store import TaskStore
from ..theme.theme_watcher import ThemeWatcher

logger = logging.getLogger(__name__)


def resolve_todo_path(settings) -> Path:
    """
    Absolute task file path with its parent directory created.

    Falls back to ./todo.txt when the configured directory cannot be created.
    """
    path = Path(settings.todo_path).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        fallback = Path.cwd() / TODO_FILE_NAME
        logger.warning("Cannot create %s (%s); using %s", path.parent, exc, fallback)
        return fallback
    return path.resolve()


def create_task_store(settings) -> TaskStore:
    store = TaskStore(resolve_todo_path(settings))
    store.load()
    return store


def create_theme_watcher(settings) -> ThemeWatcher | None:
    if not getattr(settings, "theme_enabled", True):
        logger.info("Theme watcher disabled via settings.")
        return None
    return ThemeWatcher(
        settings.theme_path,
        poll_interval=settings.theme_poll_interval,
        debounce=settings.theme_debounce,
    )


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    return AppState(
        settings=settings,
        task_store=create_task_store(settings),
        palette_source=create_theme_watcher(settings),
    )
