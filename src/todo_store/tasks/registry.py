# src/todo_store/tasks/registry.py

from __future__ import annotations

import logging
import posixpath
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from ..core.ports import LookupListener
from .record import is_marker
from .task_list import TaskList

logger = logging.getLogger(__name__)

ROOT_PREFIX = "/todo/"
ROOT_LIST = "."
ALL_VIEW = "all"


def normalize_list_name(name: str) -> str:
    """Canonical list name: "." for the root, slash-separated and cleaned otherwise."""
    name = (name or "").strip().replace("\\", "/").strip("/")
    return posixpath.normpath(name) if name else ROOT_LIST


class ListRegistry:
    """
    Get-or-create registry of TaskList objects under one root directory.

    Callers build exactly one registry and share it, so every part of the
    process sees the same list cache for a given directory.
    """

    def __init__(
        self,
        root_dir: str | Path,
        *,
        create_attempts: int = 3,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._root = Path(root_dir).expanduser()
        self._create_attempts = create_attempts
        self._clock = clock
        self._lock = threading.Lock()
        self._lists: dict[str, TaskList] = {}

    @property
    def root(self) -> Path:
        return self._root

    def directory(self, name: str) -> Path:
        name = normalize_list_name(name)
        return self._root if name == ROOT_LIST else self._root / name

    def is_list(self, name: str) -> bool:
        name = normalize_list_name(name)
        if name == ".." or name.startswith("../"):
            return False
        return self.directory(name).is_dir()

    def get(self, name: str = ROOT_LIST) -> TaskList:
        name = normalize_list_name(name)
        if name == ".." or name.startswith("../"):
            raise ValueError(f"list {name!r} is outside the todo root")
        with self._lock:
            task_list = self._lists.get(name)
            if task_list is None:
                task_list = TaskList(
                    name,
                    self.directory(name),
                    create_attempts=self._create_attempts,
                    clock=self._clock,
                )
                self._lists[name] = task_list
                logger.debug("Opened list %s at %s", name, task_list.directory)
            return task_list


@dataclass(frozen=True, slots=True)
class Location:
    """A resolved lookup: a list and either a task ID or the list's "all" view."""

    list_name: str
    task_id: str

    @property
    def is_list_view(self) -> bool:
        return self.task_id == ALL_VIEW

    @property
    def path(self) -> str:
        base = ROOT_PREFIX if self.list_name == ROOT_LIST else f"{ROOT_PREFIX}{self.list_name}/"
        return base + self.task_id


def read_ids(task_list: TaskList, text: str) -> list[str]:
    """
    IDs of existing tasks named by the first word of each line, in order,
    without duplicates. Reading stops at the next block marker line.
    """
    ids: list[str] = []
    for line in text.split("\n"):
        if is_marker(line.encode()):
            break
        word = line.split("\t", 1)[0].split(" ", 1)[0]
        if word and word not in ids and task_list.exists(word):
            ids.append(word)
    return ids


class PathResolver:
    """
    Entry point for "open this item" notifications.

    resolve() accepts paths like /todo/home/12, /todo/home (the list) or
    /todo/12, and reports what it found to on_found.
    """

    def __init__(
        self,
        registry: ListRegistry,
        on_found: LookupListener | None = None,
    ) -> None:
        self._registry = registry
        self._on_found = on_found

    def _found(self, location: Location) -> None:
        logger.debug("Resolved %s", location.path)
        if self._on_found is not None:
            self._on_found(location)

    def locate(self, text: str, base: str = ROOT_LIST) -> Location | None:
        """Resolve text relative to list `base` without notifying anyone."""
        if text.startswith(ROOT_PREFIX):
            base, text = ROOT_LIST, text[len(ROOT_PREFIX) :]
        elif text.startswith("/"):
            return None

        full = posixpath.normpath(posixpath.join(normalize_list_name(base), text))
        if full == ".." or full.startswith("../"):
            return None

        if self._registry.is_list(full):
            list_name, task_id = normalize_list_name(full), ALL_VIEW
        else:
            list_name, task_id = posixpath.split(full)
            list_name = normalize_list_name(list_name)
        if not self._registry.is_list(list_name):
            return None

        if task_id == ALL_VIEW:
            return Location(list_name, ALL_VIEW)
        if self._registry.get(list_name).exists(task_id):
            return Location(list_name, task_id)
        return None

    def look(self, text: str, base: str = ROOT_LIST) -> bool:
        """
        Open what text names: every existing task ID when text has several
        lines, otherwise a single task or list relative to `base`.
        """
        if "\n" in text:
            task_list = self._registry.get(base)
            for task_id in read_ids(task_list, text):
                self._found(Location(task_list.name, task_id))
            return True

        location = self.locate(text.strip(), base)
        if location is None:
            return False
        self._found(location)
        return True

    def resolve(self, path: str) -> bool:
        if not path.startswith(ROOT_PREFIX) or "\n" in path:
            logger.warning("Cannot resolve %r: not a single %s path", path, ROOT_PREFIX)
            return False
        if not self.look(path):
            logger.warning("Cannot resolve %s", path)
            return False
        return True
