# src/omado/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

# Every character str.splitlines() treats as a line boundary.
_LINE_BREAKS = frozenset("\n\r\x0b\x0c\x1c\x1d\x1e\x85\u2028\u2029")


class TaskError(Exception):
    """Base class for task list failures surfaced to the shells."""


class IndexOutOfRange(TaskError, IndexError):
    def __init__(self, index: int, size: int) -> None:
        if size:
            msg = f"task index {index} out of range (0..{size - 1})"
        else:
            msg = f"task index {index} out of range (list is empty)"
        super().__init__(msg)
        self.index = index
        self.size = size


class InvalidDescription(TaskError, ValueError):
    pass


class PersistFailed(TaskError):
    pass


class ProjectSplit(NamedTuple):
    project: str | None
    shown: str


def derive_project(text: str) -> ProjectSplit:
    """
    Split a task text into (project, shown description).

    The project is the text before the first ':' when that prefix is non-empty
    and contains no whitespace. Used by the loader and by every mutation.
    """
    pos = text.find(":")
    if pos > 0:
        prefix = text[:pos]
        if not any(ch.isspace() for ch in prefix):
            return ProjectSplit(prefix, text[pos + 1 :].strip())
    return ProjectSplit(None, text)


def validate_description(text: str) -> str:
    """Return the trimmed text or raise InvalidDescription."""
    if not isinstance(text, str):
        raise InvalidDescription(f"description must be a string, got {type(text).__name__}")
    if any(ch in _LINE_BREAKS for ch in text):
        raise InvalidDescription("description must not contain line breaks")
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        raise InvalidDescription("description is not valid UTF-8 text") from None
    cleaned = text.strip()
    if not cleaned:
        raise InvalidDescription("description is empty")
    return cleaned


@dataclass(frozen=True, slots=True)
class Task:
    text: str
    done: bool = False

    @property
    def project(self) -> str | None:
        return derive_project(self.text).project

    @property
    def shown(self) -> str:
        return derive_project(self.text).shown

    def toggled(self) -> Task:
        return Task(text=self.text, done=not self.done)
