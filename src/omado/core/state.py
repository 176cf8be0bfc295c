# src/omado/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field

from ..projects.project_filters import FilterState, apply_filters
from ..projects.project_index import ProjectIndex, recompute
from ..tasks.task_models import Task
from ..theme.theme_models import DEFAULT_THEME, ThemeDocument
from .ports import PaletteSource, TaskRepo


@dataclass
class AppState:
    # Settings object (real Settings or a test SimpleNamespace).
    settings: object

    task_store: TaskRepo
    palette_source: PaletteSource | None = None
    filters: FilterState = field(default_factory=FilterState)

    def palette(self) -> ThemeDocument:
        if self.palette_source is None:
            return DEFAULT_THEME
        return self.palette_source.current()

    def project_index(self) -> ProjectIndex:
        return recompute(self.task_store.tasks)

    def visible(self) -> list[tuple[int, Task]]:
        return apply_filters(self.task_store.tasks, self.filters)
