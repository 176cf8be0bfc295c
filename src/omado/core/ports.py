# src/omado/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the front ends.

The console front end and the CLI depend on these Protocols instead of the
concrete TaskStore / ThemeWatcher, which keeps tests free to pass fakes.
"""

from pathlib import Path
from typing import Protocol

from ..tasks.task_format import ParseResult
from ..tasks.task_models import Task
from ..theme.theme_models import ThemeDocument


class TaskRepo(Protocol):
    @property
    def path(self) -> Path: ...
    @property
    def tasks(self) -> tuple[Task, ...]: ...

    def load(self) -> ParseResult: ...
    def reload(self) -> ParseResult: ...
    def get(self, index: int) -> Task: ...

    # Each mutation persists before returning (or raises PersistFailed).
    def add(self, text: str) -> Task: ...
    def toggle_done(self, index: int) -> Task: ...
    def delete(self, index: int) -> Task: ...
    def edit(self, index: int, text: str) -> Task: ...


class PaletteSource(Protocol):
    """Anything that can hand out the current ThemeDocument without blocking."""

    def current(self) -> ThemeDocument: ...
