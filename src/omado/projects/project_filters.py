# src/omado/projects/project_filters.py

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from enum import StrEnum

from ..tasks.task_models import Task
from .project_index import (
    NO_PROJECT,
    ProjectCounts,
    ProjectFilter,
    ProjectIndex,
    cycle_project_filter,
)


class StatusFilter(StrEnum):
    ALL = "All"
    ACTIVE = "Active"
    DONE = "Done"

    def next(self) -> StatusFilter:
        order = list(StatusFilter)
        return order[(order.index(self) + 1) % len(order)]

    def matches(self, task: Task) -> bool:
        if self is StatusFilter.ACTIVE:
            return not task.done
        if self is StatusFilter.DONE:
            return task.done
        return True


@dataclass(frozen=True, slots=True)
class FilterState:
    """Transient view state; applying it never touches the task list."""

    status: StatusFilter = StatusFilter.ALL
    project: ProjectFilter = None
    search: str = ""

    def cycle_status(self) -> FilterState:
        return replace(self, status=self.status.next())

    def cycle_project(self, index: ProjectIndex, direction: int = 1) -> FilterState:
        return replace(self, project=cycle_project_filter(index, self.project, direction))

    def with_project(self, project: ProjectFilter) -> FilterState:
        return replace(self, project=project)

    def with_search(self, text: str) -> FilterState:
        return replace(self, search=text)

    def cleared(self) -> FilterState:
        return FilterState()

    @property
    def is_default(self) -> bool:
        return self == FilterState()

    def matches(self, task: Task) -> bool:
        if not self.status.matches(task):
            return False

        if self.project is NO_PROJECT:
            if task.project is not None:
                return False
        elif self.project is not None and task.project != self.project:
            return False

        if self.search:
            return self.search.casefold() in task.text.casefold()
        return True


def apply_filters(tasks: Iterable[Task], state: FilterState) -> list[tuple[int, Task]]:
    """Visible subsequence as (store index, task) pairs, in list order."""
    return [(i, t) for i, t in enumerate(tasks) if state.matches(t)]


def new_task_prefill(state: FilterState) -> str:
    """Text to start a new task with while a named project filter is active."""
    if isinstance(state.project, str):
        return f"{state.project}: "
    return ""


@dataclass(frozen=True, slots=True)
class PaletteOption:
    label: str
    value: ProjectFilter
    counts: ProjectCounts


def palette_options(tasks: Sequence[Task], index: ProjectIndex, query: str = "") -> list[PaletteOption]:
    """
    Choices for a project picker: All, No project, then each project.

    The query narrows the list by case-insensitive substring on the label.
    """
    done_total = sum(1 for t in tasks if t.done)
    options = [
        PaletteOption("All", None, ProjectCounts(total=len(tasks), done=done_total)),
        PaletteOption("No project", NO_PROJECT, index.count_for(NO_PROJECT)),
    ]
    options.extend(PaletteOption(name, name, index.count_for(name)) for name in index.names)

    needle = query.strip().casefold()
    if not needle:
        return options
    return [o for o in options if needle in o.label.casefold()]
