# tests/test_bootstrap.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from todo_store.bootstrap import configure_logging, create_initial_state
from todo_store.config import Settings
from todo_store.logging_setup import _ConsoleNoiseFilter
from todo_store.tasks.registry import Location


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


def test_create_initial_state_builds_registry_and_resolver(settings) -> None:
    found: list[Location] = []

    state = create_initial_state(settings=settings, on_found=found.append)
    state.registry.get("home").create("1", {"title": "x"})

    assert settings.root_dir.is_dir()
    assert state.registry.root == settings.root_dir
    assert state.resolver.resolve("/todo/home/1")
    assert found == [Location("home", "1")]


def test_configure_logging_writes_log_file(settings, restore_root_logging) -> None:
    configure_logging(settings)
    logging.getLogger("todo_store.test").info("hello log")

    for h in logging.getLogger().handlers:
        h.flush()
    assert "hello log" in (settings.log_dir / "todo.log").read_text(encoding="utf-8")


def test_console_filter_keeps_own_logs() -> None:
    f = _ConsoleNoiseFilter()

    def rec(name: str, level: int) -> logging.LogRecord:
        return logging.LogRecord(name, level, __file__, 1, "m", None, None)

    assert f.filter(rec("todo_store.tasks", logging.DEBUG))
    assert not f.filter(rec("urllib3", logging.WARNING))
    assert f.filter(rec("urllib3", logging.ERROR))
    assert not f.filter(rec("py.warnings", logging.WARNING))


def test_settings_from_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TODO_ROOT_DIR", str(tmp_path / "lists"))
    monkeypatch.setenv("TODO_CREATE_ATTEMPTS", "0")
    monkeypatch.setenv("TODO_SNOOZE_DAYS", "not a number")
    monkeypatch.setenv("TODO_LOG_LEVEL", "DEBUG")

    s = Settings.from_env()

    assert s.root_dir == tmp_path / "lists"
    assert s.create_attempts == 1
    assert s.snooze_days == 1
    assert s.log_level == "DEBUG"
