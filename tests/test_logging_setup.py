# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from omado.logging_setup import LOG_FILE_NAME, _ConsoleNoiseFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter() -> None:
    f = _ConsoleNoiseFilter()
    assert f.filter(_record("omado.tasks.task_store", logging.INFO))
    assert not f.filter(_record("omado.theme.theme_watcher", logging.INFO))
    assert f.filter(_record("omado.theme.theme_watcher", logging.WARNING))
    assert not f.filter(_record("asyncio", logging.WARNING))
    assert f.filter(_record("asyncio", logging.ERROR))


@pytest.fixture()
def _restore_root_handlers():
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in saved[0]:
        root.addHandler(h)
    root.setLevel(saved[1])
    logging.captureWarnings(False)


@pytest.mark.usefixtures("_restore_root_handlers")
def test_setup_logging_writes_file(tmp_path: Path) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs")

    assert log_file == tmp_path / "logs" / LOG_FILE_NAME
    logging.getLogger("omado.test").debug("hello file")
    for h in logging.getLogger().handlers:
        h.flush()
    assert "hello file" in log_file.read_text("utf-8")


@pytest.mark.usefixtures("_restore_root_handlers")
def test_setup_logging_without_dir() -> None:
    assert setup_logging() is None
    assert len(logging.getLogger().handlers) == 1
