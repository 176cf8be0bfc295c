# tests/test_task_format.py

from __future__ import annotations

import pytest

from omado.tasks.task_format import format_task, parse_line, parse_tasks, serialize_tasks
from omado.tasks.task_models import InvalidDescription, Task, derive_project, validate_description


@pytest.mark.parametrize(
    ("text", "project", "shown"),
    [
        ("work: fix bug", "work", "fix bug"),
        ("work:fix bug", "work", "fix bug"),
        ("home:", "home", ""),
        ("buy milk", None, "buy milk"),
        (":leading colon", None, ":leading colon"),
        ("two words: here", None, "two words: here"),
        ("a:b:c", "a", "b:c"),
    ],
)
def test_derive_project(text: str, project: str | None, shown: str) -> None:
    split = derive_project(text)
    assert split.project == project
    assert split.shown == shown


def test_task_properties_follow_text() -> None:
    t = Task("Work: ship it", done=True)
    assert t.project == "Work"
    assert t.shown == "ship it"
    assert t.toggled() == Task("Work: ship it", done=False)


def test_validate_description_trims_and_rejects() -> None:
    assert validate_description("  hello  ") == "hello"
    for bad in ("", "   ", "a\nb", "a\rb", "a\u2028b"):
        with pytest.raises(InvalidDescription):
            validate_description(bad)


def test_parse_line_markers() -> None:
    assert parse_line("[ ] open") == Task("open")
    assert parse_line("[x] done") == Task("done", done=True)
    assert parse_line("[X] shouted") == Task("shouted", done=True)
    assert parse_line("[]") is None
    assert parse_line("- [ ] markdown") is None
    assert parse_line("[ ]   ") is None


def test_serialize_then_parse_keeps_order_and_flags() -> None:
    tasks = [Task("work: a"), Task("b", done=True), Task("c: d e")]
    raw = serialize_tasks(tasks)

    assert raw == "[ ] work: a\n[x] b\n[ ] c: d e\n"
    assert parse_tasks(raw).tasks == tasks


def test_malformed_line_is_skipped_without_affecting_neighbours() -> None:
    raw = "[ ] one\n\nnot a task\n[x] two\n[?] three\n[ ] four\n"
    result = parse_tasks(raw)

    assert [t.text for t in result.tasks] == ["one", "two", "four"]
    assert result.skipped == [3, 5]
    assert result.skipped_count == 2


def test_format_task() -> None:
    assert format_task(Task("x")) == "[ ] x"
    assert format_task(Task("x", done=True)) == "[x] x"


def test_validate_description_rejects_lone_surrogates() -> None:
    with pytest.raises(InvalidDescription):
        validate_description("bad \udcff")
