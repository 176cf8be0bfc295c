# src/omado/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import os
from collections.abc import Callable, Iterator
from pathlib import Path

from .task_format import ParseResult, parse_tasks, serialize_tasks
from .task_models import (
    IndexOutOfRange,
    PersistFailed,
    Task,
    derive_project,
    validate_description,
)

logger = logging.getLogger(__name__)


class TaskStore:
    """
    Ordered task list backed by a single plain-text file.

    Persistence model:
    - the file is read once by load() (and again on reload())
    - every mutation rewrites the whole file before returning
    - on a failed write the in-memory list is restored to its pre-mutation value
      and PersistFailed is raised

    There is no multi-writer protocol: if two processes write the file, the last
    write wins.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._tasks: list[Task] = []
        self.last_parse: ParseResult | None = None

    @property
    def path(self) -> Path:
        return self._path

    # ---- loading ----

    def load(self) -> ParseResult:
        """Read the task file, replacing the in-memory list. Missing file -> empty list."""
        if not self._path.exists():
            result = ParseResult()
        else:
            result = parse_tasks(self._path.read_text("utf-8"))

        self._tasks = list(result.tasks)
        self.last_parse = result

        if result.skipped:
            logger.warning(
                "Skipped %d malformed line(s) in %s: %s",
                result.skipped_count,
                self._path,
                ", ".join(str(n) for n in result.skipped),
            )
        logger.info("TaskStore loaded path=%s total=%d", self._path, len(self._tasks))
        return result

    def reload(self) -> ParseResult:
        return self.load()

    # ---- queries ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(tuple(self._tasks))

    def get(self, index: int) -> Task:
        self._check_index(index)
        return self._tasks[index]

    # ---- mutations ----

    def add(self, text: str) -> Task:
        task = Task(text=validate_description(text))
        self._mutate(lambda tasks: tasks.append(task))
        project, shown = derive_project(task.text)
        logger.debug("Task added index=%d project=%s text=%r", len(self._tasks) - 1, project, shown)
        return task

    def toggle_done(self, index: int) -> Task:
        self._check_index(index)
        task = self._tasks[index].toggled()

        def apply(tasks: list[Task]) -> None:
            tasks[index] = task

        self._mutate(apply)
        logger.debug("Task toggled index=%d done=%s", index, task.done)
        return task

    def delete(self, index: int) -> Task:
        self._check_index(index)
        removed = self._tasks[index]
        self._mutate(lambda tasks: tasks.pop(index))
        logger.debug("Task deleted index=%d text=%r", index, removed.text)
        return removed

    def edit(self, index: int, text: str) -> Task:
        self._check_index(index)
        cleaned = validate_description(text)
        task = Task(text=cleaned, done=self._tasks[index].done)

        def apply(tasks: list[Task]) -> None:
            tasks[index] = task

        self._mutate(apply)
        logger.debug("Task edited index=%d project=%s", index, task.project)
        return task

    def save(self) -> None:
        """Write the current list to disk; raises PersistFailed."""
        try:
            self._write_atomic(serialize_tasks(self._tasks))
        except (OSError, UnicodeError) as exc:
            logger.error("Failed to write task file %s: %s", self._path, exc)
            raise PersistFailed(f"could not write {self._path}: {exc}") from exc

    # ---- helpers ----

    def _check_index(self, index: int) -> None:
        if not isinstance(index, int) or isinstance(index, bool):
            raise TypeError(f"task index must be an int, got {type(index).__name__}")
        if index < 0 or index >= len(self._tasks):
            raise IndexOutOfRange(index, len(self._tasks))

    def _mutate(self, apply: Callable[[list[Task]], object]) -> None:
        snapshot = list(self._tasks)
        apply(self._tasks)
        try:
            self.save()
        except PersistFailed:
            self._tasks = snapshot
            raise

    def _write_atomic(self, content: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            tmp.write_text(content, "utf-8")
            os.replace(tmp, self._path)
        except (OSError, UnicodeError):
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise
