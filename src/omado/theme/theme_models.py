# src/omado/theme/theme_models.py

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from types import MappingProxyType


class ThemeError(Exception):
    """A resolution attempt failed as a whole; the caller keeps its current palette."""


class SourceUnavailable(ThemeError):
    pass


class ThemeSyntaxError(ThemeError):
    pass


ANSI_NAMES: tuple[str, ...] = ("black", "red", "green", "yellow", "blue", "magenta", "cyan", "white")

SLOT_NAMES: tuple[str, ...] = (
    "background",
    "foreground",
    "cursor",
    "cursor_text",
    *(f"normal.{n}" for n in ANSI_NAMES),
    *(f"bright.{n}" for n in ANSI_NAMES),
    "accent",
    "border",
    "done",
)


@dataclass(frozen=True, slots=True)
class Rgba:
    r: int
    g: int
    b: int
    a: int = 255

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool) or not 0 <= v <= 255:
                raise ValueError(f"channel {name} out of range: {v!r}")

    @property
    def hex(self) -> str:
        base = f"#{self.r:02x}{self.g:02x}{self.b:02x}"
        return base if self.a == 255 else f"{base}{self.a:02x}"

    @property
    def rgb(self) -> tuple[int, int, int]:
        return self.r, self.g, self.b

    def scaled(self, percent: int) -> Rgba:
        """Multiply r/g/b by percent/100, clamped to 255."""
        return Rgba(
            min(255, self.r * percent // 100),
            min(255, self.g * percent // 100),
            min(255, self.b * percent // 100),
            self.a,
        )

    def __str__(self) -> str:
        return self.hex


_HEX_RE = re.compile(r"^(?:#|0[xX])([0-9a-fA-F]+)$")
_FUNC_RE = re.compile(r"^(rgba?)\(\s*([^)]*)\)$", re.IGNORECASE)


def parse_color(raw: str) -> Rgba:
    """
    Parse a textual color into Rgba.

    Accepted: #rgb, #rgba, #rrggbb, #rrggbbaa, 0xrrggbb, 0xrrggbbaa,
    rgb(r, g, b), rgba(r, g, b, a). Raises ValueError otherwise.
    """
    if not isinstance(raw, str):
        raise ValueError(f"color must be a string, got {type(raw).__name__}")
    s = raw.strip()

    m = _HEX_RE.match(s)
    if m:
        digits = m.group(1)
        if s[0] == "#" and len(digits) in (3, 4):
            digits = "".join(ch * 2 for ch in digits)
        if len(digits) == 6:
            digits += "ff"
        if len(digits) != 8:
            raise ValueError(f"invalid hex color length: {raw!r}")
        return Rgba(*(int(digits[i : i + 2], 16) for i in range(0, 8, 2)))

    m = _FUNC_RE.match(s)
    if m:
        func = m.group(1).lower()
        parts = [p.strip() for p in m.group(2).split(",")]
        if len(parts) != (4 if func == "rgba" else 3):
            raise ValueError(f"wrong number of channels: {raw!r}")
        try:
            channels = [int(p) for p in parts[:3]]
        except ValueError:
            raise ValueError(f"non-integer channel: {raw!r}") from None
        alpha = 255
        if func == "rgba":
            alpha = _parse_alpha(parts[3], raw)
        return Rgba(*channels, alpha)

    raise ValueError(f"unrecognized color: {raw!r}")


def _parse_alpha(part: str, raw: str) -> int:
    try:
        if "." in part:
            value = float(part)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"alpha out of range: {raw!r}")
            return round(value * 255)
        return int(part)
    except ValueError as exc:
        raise ValueError(f"invalid alpha: {raw!r}") from exc


@dataclass(frozen=True, slots=True)
class ThemeDocument:
    """Resolved slot -> color mapping. Never mutated; re-resolution builds a new one."""

    colors: Mapping[str, Rgba]
    font_family: str | None = None
    font_size: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "colors", MappingProxyType(dict(self.colors)))

    def __getitem__(self, slot: str) -> Rgba:
        return self.colors[slot]

    def get(self, slot: str, default: Rgba | None = None) -> Rgba | None:
        return self.colors.get(slot, default)

    @property
    def background(self) -> Rgba:
        return self.colors["background"]

    @property
    def foreground(self) -> Rgba:
        return self.colors["foreground"]

    @property
    def accent(self) -> Rgba:
        return self.colors["accent"]

    @property
    def border(self) -> Rgba:
        return self.colors["border"]

    @property
    def done(self) -> Rgba:
        return self.colors["done"]


def _c(r: int, g: int, b: int) -> Rgba:
    return Rgba(r, g, b)


# Built-in palette (Catppuccin-like); used until a theme file resolves.
DEFAULT_THEME = ThemeDocument(
    colors={
        "background": _c(26, 27, 38),
        "foreground": _c(205, 214, 244),
        "cursor": _c(245, 224, 220),
        "cursor_text": _c(26, 27, 38),
        "normal.black": _c(69, 71, 90),
        "normal.red": _c(243, 139, 168),
        "normal.green": _c(166, 227, 161),
        "normal.yellow": _c(249, 226, 175),
        "normal.blue": _c(137, 180, 250),
        "normal.magenta": _c(203, 166, 247),
        "normal.cyan": _c(148, 226, 213),
        "normal.white": _c(205, 214, 244),
        "bright.black": _c(88, 91, 112),
        "bright.red": _c(243, 139, 168),
        "bright.green": _c(166, 227, 161),
        "bright.yellow": _c(249, 226, 175),
        "bright.blue": _c(137, 180, 250),
        "bright.magenta": _c(203, 166, 247),
        "bright.cyan": _c(148, 226, 213),
        "bright.white": _c(166, 173, 200),
        "accent": _c(116, 199, 236),
        "border": _c(88, 91, 112),
        "done": _c(166, 173, 200),
    }
)


class IssueKind(StrEnum):
    MISSING_IMPORT = "missing_import"
    UNREADABLE_IMPORT = "unreadable_import"
    MALFORMED_IMPORT = "malformed_import"
    INVALID_IMPORT_ENTRY = "invalid_import_entry"
    INVALID_COLOR = "invalid_color"
    INVALID_FONT = "invalid_font"


@dataclass(frozen=True, slots=True)
class ThemeIssue:
    """A non-fatal problem found while resolving (partial resolution)."""

    kind: IssueKind
    path: Path
    detail: str
    slot: str | None = None

    def __str__(self) -> str:
        where = f"{self.path}" + (f" [{self.slot}]" if self.slot else "")
        return f"{self.kind.value}: {where}: {self.detail}"


@dataclass(frozen=True, slots=True)
class ThemeResolution:
    document: ThemeDocument
    issues: tuple[ThemeIssue, ...] = ()
    sources: tuple[Path, ...] = field(default=())  # root first, then every import reached

    @property
    def partial(self) -> bool:
        return bool(self.issues)


def project_color(document: ThemeDocument, project: str) -> Rgba:
    """
    Stable color for a project name, picked from the palette.

    Candidates are the accent plus the ANSI colors that stand out against the
    list text; the name is hashed (x31 over UTF-8 bytes, 32-bit) into that list.
    """
    colors = document.colors
    accent = colors["accent"]
    candidates: list[Rgba] = [accent]
    for name in ("red", "green", "yellow"):
        c = colors.get(f"normal.{name}")
        if c is not None:
            candidates.append(c)
    blue = colors.get("normal.blue")
    if blue is not None and blue != accent:
        candidates.append(blue)
    magenta = colors.get("normal.magenta")
    if magenta is not None:
        candidates.append(magenta)
    cyan = colors.get("normal.cyan")
    if cyan is not None and cyan != colors["done"]:
        candidates.append(cyan)

    if len(candidates) < 4:
        candidates.append(accent.scaled(120))
        candidates.append(colors["border"].scaled(140))

    h = 0
    for byte in project.encode("utf-8"):
        h = (h * 31 + byte) & 0xFFFFFFFF
    return candidates[h % len(candidates)]
