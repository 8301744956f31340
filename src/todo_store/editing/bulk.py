# src/todo_store/editing/bulk.py

"""
Bulk editing.

Several tasks are edited as one document: the header entries they all share,
followed by a manifest listing the tasks. The returned document is checked
for format problems first; after that every listed task is written on its
own, and one task failing does not stop or undo the others.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from ..core.errors import (
    DocumentFormatError,
    ManifestError,
    PartialBulkFailure,
    TaskNotFoundError,
    TodoStoreError,
)
from ..tasks.registry import read_ids
from ..tasks.task_list import TaskList
from ..tasks.task_models import Task, common_task
from .documents import parse_document

logger = logging.getLogger(__name__)

BULK_HEADER = "\n— Bulk editing these tasks:"

StatusReporter = Callable[[str], None]


def plural(n: int) -> str:
    return "" if n == 1 else "s"


@dataclass(slots=True)
class BulkEditSession:
    baseline: Task
    document: str
    task_ids: list[str] = field(default_factory=list)


def start_bulk_edit(tasks: Sequence[Task]) -> BulkEditSession:
    base = common_task(tasks)
    parts = [base.render(), "\n", BULK_HEADER, "\n\n"]
    for t in tasks:
        parts.append(f"{t.id}\t{t.title}\n")
    return BulkEditSession(baseline=base, document="".join(parts), task_ids=[t.id for t in tasks])


def start_bulk_edit_from_text(task_list: TaskList, text: str) -> BulkEditSession:
    """Start a bulk edit for every existing task named at the start of a line of text."""
    ids = read_ids(task_list, text)
    if not ids:
        raise ManifestError("found no todos in selection")

    tasks: list[Task] = []
    last_exc: Exception | None = None
    for task_id in ids:
        try:
            tasks.append(task_list.read(task_id))
        except TodoStoreError as exc:
            logger.warning("Skipping %s in bulk edit: %s", task_id, exc)
            last_exc = exc
    if not tasks:
        raise last_exc or TaskNotFoundError(ids[0])
    return start_bulk_edit(tasks)


def _report(report: StatusReporter | None, message: str) -> None:
    if report is not None:
        report(message)


def apply_bulk_edit(
    task_list: TaskList,
    session: BulkEditSession,
    updated: str,
    *,
    now: datetime | None = None,
    report: StatusReporter | None = None,
) -> list[str]:
    """
    Apply an edited bulk document; returns the IDs written.

    An unchanged document writes nothing. Format problems abort the whole
    batch before any write. Per-task failures are collected and raised
    together as PartialBulkFailure once every task has been tried.
    """
    if updated == session.document:
        logger.info("no changes made")
        return []

    i = updated.find(BULK_HEADER)
    if i < 0:
        raise ManifestError("cannot find bulk edit task list")
    ids = read_ids(task_list, updated[i + len(BULK_HEADER) :])
    if not ids:
        raise ManifestError("found no todos in bulk edit task list")

    check = parse_document(updated)
    if check.problems:
        raise DocumentFormatError(check.problems)

    _report(report, f"updating {len(ids)} task{plural(len(ids))}")

    failures: dict[str, Exception] = {}
    for task_id in ids:
        try:
            task = task_list.read(task_id)
            doc = parse_document(updated, task)
            task_list.write(task, doc.header, doc.comment, now=now)
        except (TodoStoreError, OSError) as exc:
            failures[task_id] = exc
            logger.warning("Bulk edit failed for task %s: %s", task_id, exc)
            _report(report, f"writing {task_id}: {exc}")

    if failures:
        raise PartialBulkFailure(ids, failures)

    logger.info("updated %d task%s", len(ids), plural(len(ids)))
    return ids


def bulk_put_header(
    task_list: TaskList,
    text: str,
    header_line: str,
    *,
    now: datetime | None = None,
    report: StatusReporter | None = None,
) -> list[str]:
    """Apply one "key: value" line to every task named in text."""
    session = start_bulk_edit_from_text(task_list, text)
    line = header_line.rstrip("\n") + "\n"
    return apply_bulk_edit(task_list, session, line + session.document, now=now, report=report)
