# tests/test_cli_main.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from omado.cli import main as cli_main


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    # Keep pytest's own log capture handlers in place.
    monkeypatch.setattr(cli_main, "setup_logging", lambda **kwargs: None)


def test_add_with_project(settings: SimpleNamespace, capsys) -> None:
    code = cli_main.main(["add", "work:", "Fix", "bug"], settings=settings)

    assert code == 0
    assert capsys.readouterr().out.strip() == "✓ Added task to project 'work': Fix bug"
    assert settings.todo_path.read_text("utf-8") == "[ ] work: Fix bug\n"


def test_add_without_project_appends(settings: SimpleNamespace, capsys) -> None:
    cli_main.main(["add", "first"], settings=settings)
    code = cli_main.main(["add", "Buy groceries"], settings=settings)

    assert code == 0
    assert capsys.readouterr().out.splitlines()[-1] == "✓ Added task: Buy groceries"
    assert settings.todo_path.read_text("utf-8") == "[ ] first\n[ ] Buy groceries\n"


def test_add_without_text_fails(settings: SimpleNamespace, capsys) -> None:
    assert cli_main.main(["add"], settings=settings) == 1
    assert "Usage" in capsys.readouterr().err
    assert not settings.todo_path.exists()


@pytest.mark.parametrize("argv", [["help"], ["--help"], ["-h"]])
def test_help(settings: SimpleNamespace, capsys, argv: list[str]) -> None:
    assert cli_main.main(argv, settings=settings) == 0
    assert "omado add" in capsys.readouterr().out


def test_unknown_command(settings: SimpleNamespace, capsys) -> None:
    assert cli_main.main(["frobnicate"], settings=settings) == 1
    err = capsys.readouterr().err
    assert "Unknown command: frobnicate" in err


def test_interactive_runs_console(settings: SimpleNamespace, monkeypatch: pytest.MonkeyPatch) -> None:
    seen = []
    monkeypatch.setattr(cli_main, "run_console_loop", lambda state: seen.append(state))

    assert cli_main.main([], settings=settings) == 0
    assert len(seen) == 1
    assert seen[0].palette_source is None


def test_interactive_starts_and_stops_watcher(
    settings: SimpleNamespace, monkeypatch: pytest.MonkeyPatch
) -> None:
    settings.theme_enabled = True
    settings.theme_path.write_text('[colors.primary]\nbackground = "#050505"\n', encoding="utf-8")
    seen = []

    def fake_console(state):
        seen.append(state.palette().background.rgb)

    monkeypatch.setattr(cli_main, "run_console_loop", fake_console)

    assert cli_main.main([], settings=settings) == 0
    assert seen == [(5, 5, 5)]
