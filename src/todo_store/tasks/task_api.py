# src/todo_store/tasks/task_api.py

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta

from ..core.errors import TaskNotFoundError, TodoStoreError
from .sorting import sort_tasks
from .task_list import TaskList
from .task_models import Task

logger = logging.getLogger(__name__)


def snooze_value(days: int = 1, *, today: date | None = None) -> str:
    """Header value for a task snoozed `days` days from today."""
    wakeup = (today or date.today()) + timedelta(days=int(days))
    return f"snooze {wakeup.isoformat()}"


def show_query(
    task_list: TaskList,
    query: str,
    *,
    sort_by: str = "title",
    today: date | str | None = None,
) -> str:
    """One "id<TAB>title" line per matching task."""
    tasks = sort_tasks(task_list.search(query, today=today), sort_by)
    return "".join(f"{t.id}\t{t.title}\n" for t in tasks)


def mark_done(
    task_list: TaskList,
    query: str,
    *,
    now: datetime | None = None,
    today: date | str | None = None,
) -> list[Task]:
    """
    Mark the task with ID `query` done, or every task the query matches.

    Tasks already done are left alone. A failing write is logged and the
    remaining tasks are still processed.
    """
    try:
        tasks = [task_list.read(query)]
    except TaskNotFoundError:
        tasks = task_list.search(query, today=today)

    updated: list[Task] = []
    for task in tasks:
        if task.header.get("todo") == "done":
            continue
        try:
            task_list.write(task, {"todo": "done"}, now=now)
        except (TodoStoreError, OSError):
            logger.exception("marking %s done failed", task.id)
            continue
        updated.append(task)
    return updated


def mute(task_list: TaskList, task: Task, *, now: datetime | None = None) -> None:
    task_list.write(task, {"todo": "mute"}, now=now)


def snooze(
    task_list: TaskList,
    task: Task,
    days: int = 1,
    *,
    now: datetime | None = None,
    today: date | None = None,
) -> None:
    task_list.write(task, {"todo": snooze_value(days, today=today)}, now=now)
