# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_store.tasks.registry import ListRegistry
from todo_store.tasks.task_list import TaskList

from .fakes import FakeClock

START = datetime(2024, 3, 1, 9, 30, 0)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the store.

    A SimpleNamespace rather than the real config keeps tests away from the
    environment and the user's ~/todo.
    """
    return SimpleNamespace(
        root_dir=tmp_path / "todo",
        log_dir=tmp_path / "logs",
        log_level="INFO",
        create_attempts=3,
        snooze_days=1,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(START)


@pytest.fixture()
def registry(settings: SimpleNamespace, clock: FakeClock) -> ListRegistry:
    settings.root_dir.mkdir(parents=True)
    return ListRegistry(settings.root_dir, create_attempts=settings.create_attempts, clock=clock)


@pytest.fixture()
def task_list(registry: ListRegistry) -> TaskList:
    tl = registry.get("home")
    tl.directory.mkdir(parents=True, exist_ok=True)
    return tl
