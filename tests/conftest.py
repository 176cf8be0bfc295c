# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from omado.core.state import AppState
from omado.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the user's environment.
    """
    return SimpleNamespace(
        app_name="omado",
        log_level="WARNING",
        data_dir=tmp_path / "data",
        todo_path=tmp_path / "data" / "todo.txt",
        log_dir=None,
        theme_path=tmp_path / "alacritty.toml",
        theme_enabled=False,
        theme_poll_interval=0.01,
        theme_debounce=0.0,
    )


@pytest.fixture()
def store(tmp_path: Path) -> TaskStore:
    s = TaskStore(tmp_path / "todo.txt")
    s.load()
    return s


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    """AppState with a real file-backed store and the built-in palette."""
    return AppState(settings=settings, task_store=store)
