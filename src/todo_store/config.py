# src/todo_store/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Variables (all optional):
- TODO_ROOT_DIR: root of the list hierarchy (default: ~/todo)
- TODO_LOG_LEVEL: console log level (default: INFO)
- TODO_LOG_DIR: directory for todo.log (default: ~/.local/state/todo)
- TODO_CREATE_ATTEMPTS: candidate IDs tried by auto-allocating create (default: 3)
- TODO_SNOOZE_DAYS: default snooze length in days (default: 1)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TODO"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- Storage ----
    root_dir: Path
    create_attempts: int

    # ---- Logging ----
    log_level: str
    log_dir: Path

    # ---- Task helpers ----
    snooze_days: int

    @staticmethod
    def from_env() -> "Settings":
        root_dir = _env_path(_k("ROOT_DIR"), Path.home() / "todo")
        create_attempts = max(1, _env_int(_k("CREATE_ATTEMPTS"), 3))

        log_level = _env(_k("LOG_LEVEL"), "INFO")
        log_dir = _env_path(_k("LOG_DIR"), Path.home() / ".local" / "state" / "todo")

        snooze_days = _env_int(_k("SNOOZE_DAYS"), 1)

        return Settings(
            root_dir=root_dir,
            create_attempts=create_attempts,
            log_level=log_level,
            log_dir=log_dir,
            snooze_days=snooze_days,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
