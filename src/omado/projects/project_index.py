# src/omado/projects/project_index.py

"""
Project grouping derived from the task list.

The index is never stored: recompute() is a pure O(n) pass and is cheap enough
to run on every render. Project names are compared exactly ("Work" and "work"
are two projects).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from ..tasks.task_models import Task


class _Sentinel(Enum):
    NO_PROJECT = "no project"

    def __repr__(self) -> str:
        return self.name


NO_PROJECT = _Sentinel.NO_PROJECT

ProjectKey = str | _Sentinel
# None = no project filter (show everything).
ProjectFilter = str | _Sentinel | None


@dataclass(frozen=True, slots=True)
class ProjectCounts:
    total: int = 0
    done: int = 0

    @property
    def open(self) -> int:
        return self.total - self.done


@dataclass(frozen=True, slots=True)
class ProjectIndex:
    counts: Mapping[ProjectKey, ProjectCounts]
    names: tuple[str, ...]  # distinct project names, first-seen order

    def count_for(self, key: ProjectKey) -> ProjectCounts:
        return self.counts.get(key, ProjectCounts())

    def __contains__(self, key: object) -> bool:
        return key in self.counts


def recompute(tasks: Iterable[Task]) -> ProjectIndex:
    totals: dict[ProjectKey, list[int]] = {}
    names: list[str] = []
    for task in tasks:
        project = task.project
        key: ProjectKey = NO_PROJECT if project is None else project
        bucket = totals.get(key)
        if bucket is None:
            bucket = totals[key] = [0, 0]
            if project is not None:
                names.append(project)
        bucket[0] += 1
        if task.done:
            bucket[1] += 1

    counts = {k: ProjectCounts(total=v[0], done=v[1]) for k, v in totals.items()}
    return ProjectIndex(counts=MappingProxyType(counts), names=tuple(names))


def cycle_project_filter(index: ProjectIndex, current: ProjectFilter, direction: int = 1) -> ProjectFilter:
    """
    Step through [None, *index.names] circularly.

    A value that is not part of the cycle (NO_PROJECT, or a project that no
    longer has tasks) goes back to None.
    """
    if direction not in (1, -1):
        raise ValueError(f"direction must be 1 or -1, got {direction!r}")

    options: list[ProjectFilter] = [None, *index.names]
    try:
        pos = options.index(current)
    except ValueError:
        return None
    return options[(pos + direction) % len(options)]
