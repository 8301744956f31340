# src/todo_store/tasks/task_models.py

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from .record import render_display


class TaskStatus(StrEnum):
    """
    Derived task state. Never stored; computed from the "todo" header:
    - "done" / "mute" -> DONE / MUTED (hidden, kept in the .done file)
    - "snooze YYYY-MM-DD" -> SNOOZED
    - anything else -> ACTIVE
    """

    ACTIVE = "active"
    DONE = "done"
    MUTED = "mute"
    SNOOZED = "snooze"

    @classmethod
    def from_header(cls, todo: str | None) -> TaskStatus:
        value = (todo or "").strip()
        if value == "done":
            return cls.DONE
        if value == "mute":
            return cls.MUTED
        if value.startswith("snooze "):
            return cls.SNOOZED
        return cls.ACTIVE


class SystemField(StrEnum):
    """Computed task fields; never part of the user header mapping."""

    ID = "id"
    CTIME = "ctime"
    MTIME = "mtime"


RESERVED_KEYS = frozenset(f.value for f in SystemField)


@dataclass(slots=True, eq=False)
class Task:
    id: str
    path: Path | None
    header: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    ctime: str = ""
    mtime: str = ""
    alternate_ids: list[str] = field(default_factory=list)

    @property
    def title(self) -> str:
        return self.header.get("title", "")

    @property
    def status(self) -> TaskStatus:
        return TaskStatus.from_header(self.header.get("todo"))

    @property
    def is_done(self) -> bool:
        return self.status in (TaskStatus.DONE, TaskStatus.MUTED)

    @property
    def snoozed_until(self) -> str | None:
        if self.status is not TaskStatus.SNOOZED:
            return None
        return self.header["todo"].strip()[len("snooze ") :].strip()

    def system(self, name: SystemField) -> str:
        if name is SystemField.ID:
            return self.id
        if name is SystemField.CTIME:
            return self.ctime
        return self.mtime

    def value(self, key: str) -> str:
        """Value of a system field or user header, "" when unset."""
        key = key.strip().lower()
        if key in RESERVED_KEYS:
            return self.system(SystemField(key))
        return self.header.get(key, "")

    def render(self) -> str:
        return render_display(self.header, self.body)


def common_task(tasks: Iterable[Task]) -> Task:
    """
    Pseudo-task whose header holds only the entries (key and value) shared by
    every given task. Used as the baseline of a bulk edit.
    """
    header: dict[str, str] | None = None
    for t in tasks:
        if header is None:
            header = dict(t.header)
            continue
        for k, v in list(header.items()):
            if t.header.get(k) != v:
                del header[k]
    return Task(id="", path=None, header=header or {})
