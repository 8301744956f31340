# src/todo_store/tasks/task_list.py

from __future__ import annotations

import logging
import os
import re
import threading
from collections.abc import Callable, Mapping
from datetime import date, datetime
from pathlib import Path

from ..core.errors import (
    InvalidTaskIDError,
    MalformedRecordError,
    StorageError,
    TaskExistsError,
    TaskNotFoundError,
)
from .query import compile_query
from .record import format_timestamp, parse_record, render_block, starts_with_marker
from .task_models import RESERVED_KEYS, Task, TaskStatus

logger = logging.getLogger(__name__)

ACTIVE_SUFFIX = ".todo"
DONE_SUFFIX = ".done"

TASK_ID_RE = re.compile(r"[0-9a-z_\-]+")
_NUMERIC_ID_RE = re.compile(r"[0-9]+")


class TaskList:
    """
    Directory-backed task list.

    Each task is one append-only file, <id>.todo while active and <id>.done
    once done or muted. Loaded tasks are cached for the lifetime of the
    TaskList and the cache is never invalidated: edits made to the files
    by other processes are not noticed.

    Thread-safety:
    - one lock per list, held for the whole of every operation
    """

    def __init__(
        self,
        name: str,
        directory: str | Path,
        *,
        create_attempts: int = 3,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._name = name
        self._dir = Path(directory)
        self._create_attempts = max(1, int(create_attempts))
        self._clock = clock
        self._lock = threading.Lock()
        self._cache: dict[str, Task] = {}
        self._have_all = False
        self._have_done = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def directory(self) -> Path:
        return self._dir

    def __repr__(self) -> str:
        return f"TaskList(name={self._name!r}, directory={str(self._dir)!r})"

    # ---- low-level helpers ----

    def _path(self, task_id: str, suffix: str) -> Path:
        return self._dir / f"{task_id}{suffix}"

    @staticmethod
    def _valid_id(task_id: str) -> bool:
        return bool(task_id) and TASK_ID_RE.fullmatch(task_id) is not None

    def _exists_on_disk(self, task_id: str) -> bool:
        return self._path(task_id, ACTIVE_SUFFIX).exists() or self._path(task_id, DONE_SUFFIX).exists()

    def _read(self, task_id: str) -> Task:
        # lock held
        cached = self._cache.get(task_id)
        if cached is not None:
            return cached
        if not self._valid_id(task_id):
            raise TaskNotFoundError(task_id)

        path = self._path(task_id, ACTIVE_SUFFIX)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            path = self._path(task_id, DONE_SUFFIX)
            try:
                data = path.read_bytes()
            except FileNotFoundError:
                raise TaskNotFoundError(task_id) from None

        if not starts_with_marker(data):
            raise MalformedRecordError(path)

        rec = parse_record(data, reserved=RESERVED_KEYS)
        task = Task(
            id=task_id,
            path=path,
            header=rec.header,
            body=data,
            ctime=rec.ctime,
            mtime=rec.mtime,
            alternate_ids=rec.alternate_ids,
        )
        self._cache[task_id] = task
        logger.debug("Loaded task list=%s id=%s status=%s", self._name, task_id, task.status.value)
        return task

    def _scan(self, pattern: str) -> None:
        # lock held
        for path in sorted(self._dir.glob(pattern)):
            try:
                self._read(path.stem)
            except (TaskNotFoundError, MalformedRecordError, OSError) as exc:
                logger.warning("Skipping unreadable task file %s: %s", path, exc)

    def _write(
        self,
        task: Task,
        now: datetime,
        header: Mapping[str, str],
        comment: str,
    ) -> None:
        # lock held
        if task.path is None:
            raise StorageError(f"task {task.id!r} has no backing file")

        changes: dict[str, str] = {}
        for key, value in header.items():
            key = key.strip().lower()
            if key in RESERVED_KEYS:
                logger.debug("Ignoring reserved header %r for task %s", key, task.id)
                continue
            changes[key] = value.strip()

        # Any edit reopens a done task, unless it sets "todo" itself or the task is muted.
        if task.status is TaskStatus.DONE and "todo" not in changes:
            changes["todo"] = ""

        block = render_block(now, changes, comment)
        try:
            fd = os.open(task.path, os.O_WRONLY | os.O_APPEND)
            with os.fdopen(fd, "ab") as f:
                f.write(block)
        except OSError as exc:
            raise StorageError(f"appending to {task.path}: {exc}") from exc

        for key, value in changes.items():
            if value:
                task.header[key] = value
            else:
                task.header.pop(key, None)
        task.body += block
        task.mtime = format_timestamp(now)
        if not task.ctime:
            task.ctime = task.mtime
        logger.debug("Appended block list=%s id=%s keys=%s", self._name, task.id, sorted(changes))

        want = DONE_SUFFIX if task.is_done else ACTIVE_SUFFIX
        if task.path.suffix != want:
            target = task.path.with_suffix(want)
            try:
                os.rename(task.path, target)
            except OSError as exc:
                raise StorageError(f"renaming {task.path} to {target.name}: {exc}") from exc
            logger.debug("Renamed %s -> %s", task.path.name, target.name)
            task.path = target

    def _max_numeric_id(self) -> int:
        highest = 0
        for suffix in (ACTIVE_SUFFIX, DONE_SUFFIX):
            for path in self._dir.glob(f"*{suffix}"):
                if _NUMERIC_ID_RE.fullmatch(path.stem):
                    highest = max(highest, int(path.stem))
        return highest

    def _open_exclusive(self, path: Path) -> None:
        with open(path, "xb"):
            pass

    def _allocate(self) -> tuple[str, Path]:
        # lock held
        highest = self._max_numeric_id()
        last_exc: OSError | None = None
        for attempt in range(self._create_attempts):
            task_id = str(highest + attempt + 1)
            path = self._path(task_id, ACTIVE_SUFFIX)
            if task_id in self._cache:
                continue
            try:
                self._open_exclusive(path)
            except FileExistsError as exc:
                logger.debug("ID %s taken, trying next", task_id)
                last_exc = exc
                continue
            return task_id, path
        raise StorageError(
            f"could not allocate a task ID in {self._dir} after {self._create_attempts} attempts"
        ) from last_exc

    def _sorted(self, done: bool) -> list[Task]:
        tasks = [t for t in self._cache.values() if t.is_done == done]
        tasks.sort(key=lambda t: t.id)
        return tasks

    # ---- public API ----

    def sublists(self) -> list[str]:
        """Names of child lists (directories not starting with "_" or ".")."""
        try:
            entries = list(self._dir.iterdir())
        except FileNotFoundError:
            return []
        return sorted(
            p.name for p in entries if p.is_dir() and not p.name.startswith(("_", "."))
        )

    def exists(self, task_id: str) -> bool:
        """Cheap existence probe; never loads the task."""
        with self._lock:
            if task_id in self._cache:
                return True
            return self._valid_id(task_id) and self._exists_on_disk(task_id)

    def read(self, task_id: str) -> Task:
        with self._lock:
            return self._read(task_id)

    def write(
        self,
        task: Task,
        header: Mapping[str, str],
        comment: str = "",
        *,
        now: datetime | None = None,
    ) -> None:
        """
        Append one block recording the header changes and comment.

        An empty value deletes the key from the current header (the empty line
        is still recorded). The file moves between .todo and .done when the
        task's status calls for it. On failure the in-memory task is unchanged
        unless the rename step failed.
        """
        with self._lock:
            self._write(task, now or self._clock(), header, comment)

    def create(
        self,
        task_id: str | None = None,
        header: Mapping[str, str] | None = None,
        comment: str = "",
        *,
        now: datetime | None = None,
    ) -> Task:
        """
        Create a task with an explicit ID, or with the next free numeric ID
        when task_id is empty.
        """
        with self._lock:
            self._dir.mkdir(parents=True, exist_ok=True)
            if task_id:
                if not self._valid_id(task_id):
                    raise InvalidTaskIDError(task_id)
                if task_id in self._cache or self._exists_on_disk(task_id):
                    raise TaskExistsError(task_id)
                path = self._path(task_id, ACTIVE_SUFFIX)
                try:
                    self._open_exclusive(path)
                except FileExistsError:
                    raise TaskExistsError(task_id) from None
            else:
                task_id, path = self._allocate()

            task = Task(id=task_id, path=path)
            try:
                self._write(task, now or self._clock(), header or {}, comment)
            except Exception:
                try:
                    path.unlink()
                except OSError:
                    logger.exception("Failed to remove %s after failed create", path)
                raise

            self._cache[task_id] = task
            logger.info("Task created list=%s id=%s", self._name, task_id)
            return task

    def all(self) -> list[Task]:
        """Active (including snoozed) tasks, sorted by ID."""
        with self._lock:
            if not self._have_all:
                self._scan(f"*{ACTIVE_SUFFIX}")
                self._have_all = True
            return self._sorted(done=False)

    def done(self) -> list[Task]:
        """
        Done and muted tasks, sorted by ID.

        A done record still stored in a .todo file (its rename failed) is only
        listed here once all() has scanned the .todo files.
        """
        with self._lock:
            if not self._have_done:
                self._scan(f"*{DONE_SUFFIX}")
                self._have_done = True
            return self._sorted(done=True)

    def search(self, query: str, *, today: date | str | None = None) -> list[Task]:
        """Active matches first, then done matches when the query can reach them."""
        q = compile_query(query, today=today)
        tasks = [t for t in self.all() if q.matches(t)]
        if q.needs_done:
            tasks.extend(t for t in self.done() if q.matches(t))
        return tasks
