# src/omado/tasks/task_format.py

"""
Plain-text task file format.

One task per line:

    [ ] buy milk
    [x] work: fix parser bug

The marker is a space (open) or x/X (done). Blank lines are ignored and not
preserved. Lines that do not match are skipped and reported by line number;
they never affect recognition of the lines around them.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from .task_models import Task

logger = logging.getLogger(__name__)

_LINE_RE = re.compile(r"^\[([ xX])\]\s*(\S.*)$")


@dataclass(slots=True)
class ParseResult:
    tasks: list[Task] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)  # 1-based line numbers

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)


def parse_line(line: str) -> Task | None:
    """Parse one line; None for anything that is not a task line."""
    m = _LINE_RE.match(line.strip())
    if not m:
        return None
    marker, text = m.groups()
    return Task(text=text.strip(), done=marker != " ")


def parse_tasks(raw: str) -> ParseResult:
    result = ParseResult()
    for lineno, line in enumerate(raw.splitlines(), start=1):
        if not line.strip():
            continue
        task = parse_line(line)
        if task is None:
            logger.debug("Skipping malformed task line %d: %r", lineno, line)
            result.skipped.append(lineno)
            continue
        result.tasks.append(task)
    return result


def format_task(task: Task) -> str:
    return f"[{'x' if task.done else ' '}] {task.text}"


def serialize_tasks(tasks: Iterable[Task]) -> str:
    return "".join(format_task(t) + "\n" for t in tasks)
