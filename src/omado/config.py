# src/omado/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Paths follow the XDG base-directory conventions unless overridden.
- Nothing is created on disk here; the composition root does that.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "OMADO"

APP_DIR_NAME = "omado"
TODO_FILE_NAME = "todo.txt"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value >= 0 else default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _xdg_dir(var: str, fallback: str) -> Path:
    raw = os.getenv(var)
    if raw and raw.strip():
        return Path(raw).expanduser()
    return Path.home() / fallback


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths ----
    data_dir: Path
    todo_path: Path
    log_dir: Path

    # ---- Theme ----
    theme_path: Path
    theme_enabled: bool
    theme_poll_interval: float
    theme_debounce: float

    @staticmethod
    def from_env() -> Settings:
        app_name = _env(_k("APP_NAME"), "omado") or "omado"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        data_dir = _env_path(_k("DATA_DIR"), _xdg_dir("XDG_DATA_HOME", ".local/share") / APP_DIR_NAME)
        todo_path = _env_path(_k("TODO_PATH"), data_dir / TODO_FILE_NAME)
        log_dir = _env_path(_k("LOG_DIR"), data_dir)

        default_theme = _xdg_dir("XDG_CONFIG_HOME", ".config") / "alacritty" / "alacritty.toml"
        theme_path = _env_path(_k("THEME_PATH"), default_theme)
        theme_enabled = _env_bool(_k("THEME_ENABLED"), True)
        theme_poll_interval = _env_float(_k("THEME_POLL_INTERVAL"), 0.5)
        theme_debounce = _env_float(_k("THEME_DEBOUNCE"), 0.25)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            todo_path=todo_path,
            log_dir=log_dir,
            theme_path=theme_path,
            theme_enabled=theme_enabled,
            theme_poll_interval=theme_poll_interval,
            theme_debounce=theme_debounce,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Process-wide settings, read from the environment on first use."""
    global _SETTINGS
    if _SETTINGS is None:
        load_dotenv(override=False)
        _SETTINGS = Settings.from_env()
    return _SETTINGS
