# tests/fakes.py

from __future__ import annotations

from pathlib import Path

from omado.theme.theme_models import DEFAULT_THEME, ThemeDocument, ThemeResolution, ThemeSyntaxError


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingResolver:
    """
    Resolver stand-in for watcher tests.

    - Counts calls
    - Returns DEFAULT_THEME (or `document`) with the given sources
    - Raises ThemeSyntaxError while `fail` is set
    """

    def __init__(self, document: ThemeDocument = DEFAULT_THEME, sources: tuple[Path, ...] = ()) -> None:
        self.document = document
        self.sources = sources
        self.fail = False
        self.calls: list[Path] = []

    def __call__(self, root: Path) -> ThemeResolution:
        self.calls.append(root)
        if self.fail:
            raise ThemeSyntaxError(f"broken: {root}")
        return ThemeResolution(document=self.document, sources=self.sources or (root,))


def write_lines(path: Path, *lines: str) -> None:
    path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
