# tests/test_task_store.py

from __future__ import annotations

from pathlib import Path

import pytest

from omado.tasks.task_models import IndexOutOfRange, InvalidDescription, PersistFailed, Task
from omado.tasks.task_store import TaskStore

from .fakes import write_lines


def test_missing_file_loads_empty(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "nope" / "todo.txt")
    result = store.load()

    assert store.tasks == ()
    assert result.skipped == []


def test_load_skips_malformed_lines(tmp_path: Path) -> None:
    path = tmp_path / "todo.txt"
    write_lines(path, "[ ] a", "garbage", "[x] work: b")

    store = TaskStore(path)
    result = store.load()

    assert store.tasks == (Task("a"), Task("work: b", done=True))
    assert result.skipped == [2]
    assert store.last_parse is result


def test_mutations_write_through(store: TaskStore) -> None:
    store.add("  work: first  ")
    store.add("second")
    store.toggle_done(1)
    store.edit(0, "home: renamed")

    assert store.path.read_text("utf-8") == "[ ] home: renamed\n[x] second\n"

    removed = store.delete(0)
    assert removed == Task("home: renamed")
    assert store.path.read_text("utf-8") == "[x] second\n"

    fresh = TaskStore(store.path)
    fresh.load()
    assert fresh.tasks == store.tasks


def test_edit_keeps_done_flag(store: TaskStore) -> None:
    store.add("a")
    store.toggle_done(0)
    assert store.edit(0, "b") == Task("b", done=True)


def test_index_errors_leave_list_unchanged(store: TaskStore) -> None:
    store.add("only")

    for op in (store.toggle_done, store.delete):
        with pytest.raises(IndexOutOfRange):
            op(1)
        with pytest.raises(IndexOutOfRange):
            op(-1)
    with pytest.raises(IndexOutOfRange):
        store.edit(5, "x")

    assert store.tasks == (Task("only"),)


def test_invalid_description_rejected(store: TaskStore) -> None:
    with pytest.raises(InvalidDescription):
        store.add("   ")
    store.add("keep")
    with pytest.raises(InvalidDescription):
        store.edit(0, "two\nlines")

    assert store.tasks == (Task("keep"),)
    assert not store.path.with_name("todo.txt.tmp").exists()


def test_failed_write_rolls_back(store: TaskStore, monkeypatch: pytest.MonkeyPatch) -> None:
    store.add("a")
    store.add("b")

    def boom(content: str) -> None:
        raise OSError("disk full")

    monkeypatch.setattr(store, "_write_atomic", boom)

    with pytest.raises(PersistFailed):
        store.add("c")
    with pytest.raises(PersistFailed):
        store.toggle_done(0)
    with pytest.raises(PersistFailed):
        store.delete(1)
    with pytest.raises(PersistFailed):
        store.edit(0, "z")

    assert store.tasks == (Task("a"), Task("b"))


def test_reload_picks_up_external_edits(store: TaskStore) -> None:
    store.add("mine")
    write_lines(store.path, "[ ] theirs", "[x] also theirs")

    store.reload()

    assert [t.text for t in store] == ["theirs", "also theirs"]
    assert len(store) == 2


def test_unencodable_text_is_rejected_before_writing(store: TaskStore) -> None:
    # non-UTF-8 argv bytes arrive as lone surrogates
    store.add("a")

    with pytest.raises(InvalidDescription):
        store.add("bad \udcff")
    with pytest.raises(InvalidDescription):
        store.edit(0, "bad \udcff")

    assert store.tasks == (Task("a"),)
    assert store.path.read_text("utf-8") == "[ ] a\n"
    assert not store.path.with_name("todo.txt.tmp").exists()


def test_encode_failure_during_write_rolls_back(store: TaskStore, monkeypatch: pytest.MonkeyPatch) -> None:
    store.add("a")

    def bad_encoding(content: str) -> None:
        raise UnicodeEncodeError("utf-8", content, 0, 1, "surrogates not allowed")

    monkeypatch.setattr(store, "_write_atomic", bad_encoding)

    with pytest.raises(PersistFailed):
        store.add("b")
    assert store.tasks == (Task("a"),)
