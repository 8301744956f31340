# src/todo_store/tasks/sorting.py

from __future__ import annotations

from collections.abc import Iterable

from .task_models import Task

# Non-numeric IDs sort after every numeric one.
_NON_NUMERIC = 999_999_999


def id_number(task_id: str) -> int:
    return int(task_id) if task_id.isascii() and task_id.isdigit() else _NON_NUMERIC


def _sort_key(task: Task, by: str) -> tuple[object, str]:
    if by == "id":
        return (id_number(task.id), task.id)
    if by == "title":
        return (task.title, task.id)
    return (task.value(by), task.id)


def sort_tasks(tasks: Iterable[Task], by: str = "title") -> list[Task]:
    """
    Sort tasks by "title" (the default), "id" (numeric IDs in numeric order
    first) or any header / system field name. Ties break on ID. A leading
    "-" reverses the order.
    """
    reverse = by.startswith("-")
    if reverse:
        by = by[1:]
    by = by.strip().lower() or "title"

    return sorted(tasks, key=lambda t: _sort_key(t, by), reverse=reverse)
