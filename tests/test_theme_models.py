# tests/test_theme_models.py

from __future__ import annotations

import pytest

from omado.theme.theme_models import DEFAULT_THEME, SLOT_NAMES, Rgba, ThemeDocument, parse_color, project_color


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("#1e1e2e", Rgba(0x1E, 0x1E, 0x2E)),
        ("#1E1E2E80", Rgba(0x1E, 0x1E, 0x2E, 0x80)),
        ("0x89b4fa", Rgba(0x89, 0xB4, 0xFA)),
        ("#abc", Rgba(0xAA, 0xBB, 0xCC)),
        ("#abcd", Rgba(0xAA, 0xBB, 0xCC, 0xDD)),
        ("rgb(1, 2, 3)", Rgba(1, 2, 3)),
        ("rgba(1,2,3,0.5)", Rgba(1, 2, 3, 128)),
        ("rgba(1, 2, 3, 64)", Rgba(1, 2, 3, 64)),
        ("  #ffffff  ", Rgba(255, 255, 255)),
    ],
)
def test_parse_color_forms(raw: str, expected: Rgba) -> None:
    assert parse_color(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["", "blue", "#12345", "0xabc", "rgb(1,2)", "rgb(256,0,0)", "rgba(1,2,3,1.5)", "rgb(a,b,c)", 42],
)
def test_parse_color_rejects(raw: object) -> None:
    with pytest.raises(ValueError):
        parse_color(raw)  # type: ignore[arg-type]


def test_rgba_helpers() -> None:
    c = Rgba(100, 200, 250)
    assert c.hex == "#64c8fa"
    assert str(Rgba(1, 2, 3, 4)) == "#01020304"
    assert c.scaled(120) == Rgba(120, 240, 255)
    with pytest.raises(ValueError):
        Rgba(-1, 0, 0)


def test_default_theme_has_every_slot() -> None:
    assert set(SLOT_NAMES) <= set(DEFAULT_THEME.colors)


def test_document_is_read_only() -> None:
    colors = dict(DEFAULT_THEME.colors)
    doc = ThemeDocument(colors=colors)
    colors["accent"] = Rgba(0, 0, 0)

    assert doc.accent == DEFAULT_THEME.accent
    with pytest.raises(TypeError):
        doc.colors["accent"] = Rgba(0, 0, 0)  # type: ignore[index]


def test_project_color_is_stable_and_from_palette() -> None:
    a = project_color(DEFAULT_THEME, "work")
    assert a == project_color(DEFAULT_THEME, "work")
    assert a in DEFAULT_THEME.colors.values()


def test_project_color_pads_small_palettes() -> None:
    gray = Rgba(50, 50, 50)
    doc = ThemeDocument(colors={"accent": Rgba(100, 100, 100), "border": gray, "done": gray})
    picks = {project_color(doc, name) for name in ("a", "b", "c", "d", "e", "f")}
    assert picks <= {Rgba(100, 100, 100), Rgba(120, 120, 120), Rgba(70, 70, 70)}
