# src/omado/theme/theme_parser.py

"""
Resolve an Alacritty-style TOML configuration into a ThemeDocument.

Resolution order:
- imports are walked depth-first (an import's own imports come before it)
- every file's direct entries are applied after all of its imports
- the root file is applied last, so its own entries always win

The walk is an explicit stack with a visited set: an import cycle or a file
imported twice is visited once.
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .theme_models import (
    ANSI_NAMES,
    DEFAULT_THEME,
    IssueKind,
    Rgba,
    SourceUnavailable,
    ThemeDocument,
    ThemeIssue,
    ThemeResolution,
    ThemeSyntaxError,
    parse_color,
)

logger = logging.getLogger(__name__)

# TOML table -> {key: slots it sets}
_COLOR_TABLES: dict[tuple[str, ...], dict[str, tuple[str, ...]]] = {
    ("colors", "primary"): {
        "background": ("background",),
        "foreground": ("foreground",),
    },
    ("colors", "cursor"): {
        "cursor": ("cursor",),
        "text": ("cursor_text",),
    },
    ("colors", "normal"): {name: (f"normal.{name}",) for name in ANSI_NAMES}
    | {
        "blue": ("normal.blue", "accent"),
        "white": ("normal.white", "border"),
        "cyan": ("normal.cyan", "done"),
    },
    ("colors", "bright"): {name: (f"bright.{name}",) for name in ANSI_NAMES},
}


@dataclass(slots=True)
class _Frame:
    path: Path
    data: dict[str, Any]
    pending: Iterator[Path]


@dataclass(slots=True)
class _Accumulator:
    colors: dict[str, Rgba] = field(default_factory=lambda: dict(DEFAULT_THEME.colors))
    font_family: str | None = DEFAULT_THEME.font_family
    font_size: float | None = DEFAULT_THEME.font_size
    issues: list[ThemeIssue] = field(default_factory=list)


def _path_key(path: Path) -> str:
    return os.path.normcase(os.path.realpath(path))


def _read_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as f:
        return tomllib.load(f)


def _table(data: dict[str, Any], keys: tuple[str, ...]) -> dict[str, Any] | None:
    node: Any = data
    for key in keys:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node if isinstance(node, dict) else None


def _import_paths(data: dict[str, Any], source: Path, acc: _Accumulator) -> list[Path]:
    general = data.get("general")
    raw: Any = None
    if isinstance(general, dict) and "import" in general:
        raw = general["import"]
    elif "import" in data:
        raw = data["import"]  # pre-0.14 location
    if raw is None:
        return []
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        acc.issues.append(
            ThemeIssue(IssueKind.INVALID_IMPORT_ENTRY, source, f"import must be a list, got {type(raw).__name__}")
        )
        return []

    out: list[Path] = []
    for entry in raw:
        if not isinstance(entry, str) or not entry.strip():
            acc.issues.append(ThemeIssue(IssueKind.INVALID_IMPORT_ENTRY, source, f"bad import entry {entry!r}"))
            continue
        try:
            p = Path(entry.strip()).expanduser()
        except RuntimeError as exc:
            # "~user" form naming an unknown user
            acc.issues.append(
                ThemeIssue(IssueKind.INVALID_IMPORT_ENTRY, source, f"bad import entry {entry!r}: {exc}")
            )
            continue
        if not p.is_absolute():
            p = source.parent / p
        out.append(p)
    return out


def _load_import(path: Path, acc: _Accumulator) -> dict[str, Any] | None:
    try:
        found = path.is_file()
    except OSError as exc:
        acc.issues.append(ThemeIssue(IssueKind.UNREADABLE_IMPORT, path, str(exc)))
        return None
    if not found:
        acc.issues.append(ThemeIssue(IssueKind.MISSING_IMPORT, path, "imported file not found"))
        return None
    try:
        return _read_toml(path)
    except tomllib.TOMLDecodeError as exc:
        acc.issues.append(ThemeIssue(IssueKind.MALFORMED_IMPORT, path, f"invalid TOML: {exc}"))
    except (OSError, UnicodeDecodeError) as exc:
        acc.issues.append(ThemeIssue(IssueKind.UNREADABLE_IMPORT, path, str(exc)))
    return None


def _apply_entries(data: dict[str, Any], source: Path, acc: _Accumulator) -> None:
    for table_keys, mapping in _COLOR_TABLES.items():
        table = _table(data, table_keys)
        if not table:
            continue
        parsed = {}
        for key, slots in mapping.items():
            if key not in table:
                continue
            try:
                color = parse_color(table[key])
            except ValueError as exc:
                slot = ".".join((*table_keys, key))
                acc.issues.append(ThemeIssue(IssueKind.INVALID_COLOR, source, str(exc), slot=slot))
                continue
            parsed[key] = color
            for slot in slots:
                acc.colors[slot] = color

        # A file that sets no cyan uses its black for done items.
        if table_keys == ("colors", "normal") and "cyan" not in table and "black" in parsed:
            acc.colors["done"] = parsed["black"]

    font = _table(data, ("font",))
    if font:
        if "size" in font:
            size = font["size"]
            if isinstance(size, (int, float)) and not isinstance(size, bool) and size > 0:
                acc.font_size = float(size)
            else:
                acc.issues.append(
                    ThemeIssue(IssueKind.INVALID_FONT, source, f"bad font size {size!r}", slot="font.size")
                )
        normal_font = _table(font, ("normal",))
        if normal_font and "family" in normal_font:
            family = normal_font["family"]
            if isinstance(family, str) and family.strip():
                acc.font_family = family.strip()
            else:
                acc.issues.append(
                    ThemeIssue(IssueKind.INVALID_FONT, source, f"bad font family {family!r}", slot="font.normal.family")
                )


def resolve_theme(root: str | Path) -> ThemeResolution:
    """
    Resolve the theme rooted at `root`.

    Raises SourceUnavailable when the root file is missing or unreadable and
    ThemeSyntaxError when it is not valid TOML. Problems in imports or single
    entries are collected in ThemeResolution.issues instead.
    """
    root_path = Path(root).expanduser()
    try:
        found = root_path.is_file()
    except OSError as exc:
        raise SourceUnavailable(f"cannot access theme file {root_path}: {exc}") from exc
    if not found:
        raise SourceUnavailable(f"theme file not found: {root_path}")
    try:
        root_data = _read_toml(root_path)
    except tomllib.TOMLDecodeError as exc:
        raise ThemeSyntaxError(f"invalid TOML in {root_path}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceUnavailable(f"cannot read theme file {root_path}: {exc}") from exc

    acc = _Accumulator()
    sources: list[Path] = [root_path]
    visited = {_path_key(root_path)}
    apply_order: list[_Frame] = []
    stack = [_Frame(root_path, root_data, iter(_import_paths(root_data, root_path, acc)))]

    while stack:
        frame = stack[-1]
        nxt = next(frame.pending, None)
        if nxt is None:
            stack.pop()
            apply_order.append(frame)
            continue

        key = _path_key(nxt)
        if key in visited:
            logger.debug("Theme import already visited: %s", nxt)
            continue
        visited.add(key)
        sources.append(nxt)

        data = _load_import(nxt, acc)
        if data is None:
            continue
        stack.append(_Frame(nxt, data, iter(_import_paths(data, nxt, acc))))

    for frame in apply_order:
        _apply_entries(frame.data, frame.path, acc)

    for issue in acc.issues:
        logger.warning("Theme partial resolution: %s", issue)

    document = ThemeDocument(colors=acc.colors, font_family=acc.font_family, font_size=acc.font_size)
    logger.debug(
        "Theme resolved root=%s files=%d issues=%d", root_path, len(apply_order), len(acc.issues)
    )
    return ThemeResolution(document=document, issues=tuple(acc.issues), sources=tuple(sources))
