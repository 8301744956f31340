# src/todo_store/editing/session.py

"""
Edit flows built on the collaborator ports.

- edit_task / create_task / bulk_edit_tasks hand a document to a TextEditor
  and apply whatever comes back (unchanged bytes mean no write).
- DocumentSession keeps one DocumentHost (an editor window) in sync with a
  task, a query result, a new-task template or a bulk edit.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, datetime
from enum import StrEnum

from ..core.errors import TodoStoreError
from ..core.ports import DocumentHost, TextEditor
from ..tasks.registry import ROOT_LIST, ListRegistry
from ..tasks.task_api import show_query, snooze_value
from ..tasks.task_list import TaskList
from ..tasks.task_models import Task
from .bulk import (
    BulkEditSession,
    apply_bulk_edit,
    bulk_put_header,
    plural,
    start_bulk_edit,
    start_bulk_edit_from_text,
)
from .documents import CREATE_TEMPLATE, write_document

logger = logging.getLogger(__name__)


def _edit(editor: TextEditor, text: str) -> str | None:
    original = text.encode("utf-8")
    updated = editor.edit(original)
    if updated == original:
        logger.info("no changes made")
        return None
    return updated.decode("utf-8")


def edit_task(
    task_list: TaskList,
    task: Task,
    editor: TextEditor,
    *,
    now: datetime | None = None,
) -> Task:
    updated = _edit(editor, task.render())
    if updated is None:
        return task
    return write_document(task_list, task, updated, now=now)


def create_task(
    task_list: TaskList,
    editor: TextEditor,
    *,
    now: datetime | None = None,
) -> Task | None:
    updated = _edit(editor, CREATE_TEMPLATE)
    if updated is None:
        return None
    return write_document(task_list, None, updated, now=now)


def bulk_edit_tasks(
    task_list: TaskList,
    tasks: Sequence[Task],
    editor: TextEditor,
    *,
    now: datetime | None = None,
) -> list[str]:
    session = start_bulk_edit(tasks)
    updated = _edit(editor, session.document)
    if updated is None:
        return []
    return apply_bulk_edit(task_list, session, updated, now=now, report=logger.info)


class SessionMode(StrEnum):
    SINGLE = "single"
    LIST = "list"
    CREATE = "create"
    BULK = "bulk"


class DocumentSession:
    """
    One document host bound to a list and a mode:

    - SINGLE: one task; save() applies header changes and the comment
    - LIST: query results ("id<TAB>title" lines); save() is refused
    - CREATE: new-task template; save() creates the task and switches to SINGLE
    - BULK: bulk edit document; save() applies it to every listed task
    """

    def __init__(
        self,
        host: DocumentHost,
        registry: ListRegistry,
        list_name: str = ROOT_LIST,
        *,
        mode: SessionMode = SessionMode.LIST,
        task_id: str = "",
        query: str = "all",
        sort_by: str = "title",
        today: date | None = None,
        snooze_days: int = 1,
    ) -> None:
        self.host = host
        self.registry = registry
        self.list_name = list_name
        self.mode = mode
        self.task_id = task_id
        self.query = query
        self.sort_by = sort_by
        self.today = today
        self.snooze_days = snooze_days
        self.task: Task | None = None
        self.bulk: BulkEditSession | None = None

    @property
    def task_list(self) -> TaskList:
        return self.registry.get(self.list_name)

    def _list_text(self) -> str:
        results = show_query(self.task_list, self.query, sort_by=self.sort_by, today=self.today)
        if self.query != "all":
            return f"Search {self.query}\n\n{results}"
        subs = "".join(f"{name}/\n" for name in self.task_list.sublists())
        return f"{subs}\n{results}" if subs else results

    def load(self) -> bool:
        """Fill the host document for the current mode; errors go to the host."""
        try:
            if self.mode is SessionMode.CREATE:
                self.host.replace_text(CREATE_TEMPLATE)
            elif self.mode is SessionMode.SINGLE:
                self.task = self.task_list.read(self.task_id)
                self.host.replace_text(self.task.render())
            elif self.mode is SessionMode.LIST:
                self.host.replace_text(self._list_text())
            else:
                self.bulk = start_bulk_edit_from_text(self.task_list, self.host.read_text())
                self.host.replace_text(self.bulk.document)
        except (TodoStoreError, OSError) as exc:
            self.host.report_error(str(exc))
            return False
        return True

    def save(self) -> bool:
        """Apply the host document; reports the outcome to the host."""
        if self.mode is SessionMode.LIST:
            self.host.report_error("cannot Put task list")
            return False
        if self.mode is SessionMode.BULK:
            return self._save_bulk()

        try:
            if self.mode is SessionMode.SINGLE and self.task is None:
                self.task = self.task_list.read(self.task_id)
            task = write_document(self.task_list, self.task, self.host.read_text())
        except (TodoStoreError, OSError) as exc:
            self.host.report_error(str(exc))
            return False
        if self.mode is SessionMode.CREATE:
            self.mode = SessionMode.SINGLE
            self.task_id = task.id
        self.task = task
        return self.load()

    def _save_bulk(self) -> bool:
        if self.bulk is None:
            self.host.report_error("bulk edit was not loaded")
            return False
        try:
            ids = apply_bulk_edit(
                self.task_list,
                self.bulk,
                self.host.read_text(),
                report=lambda s: self.host.report_error(f"Put: {s}"),
            )
        except (TodoStoreError, OSError) as exc:
            self.host.report_error(str(exc))
            return False
        if not ids:
            self.host.report_error("no changes made")
            return True
        self.host.report_error(f"updated {len(ids)} task{plural(len(ids))}")
        return True

    def start_bulk(self, target: DocumentHost) -> DocumentSession | None:
        """
        Open a bulk edit in `target` for the tasks in the current selection,
        or in the whole list when nothing is selected.
        """
        if self.mode is not SessionMode.LIST:
            self.host.report_error("can only start bulk edit in task list windows")
            return None
        text = self.host.selection() or self.host.read_text()
        try:
            bulk = start_bulk_edit_from_text(self.task_list, text)
        except (TodoStoreError, OSError) as exc:
            self.host.report_error(str(exc))
            return None

        session = DocumentSession(
            target,
            self.registry,
            self.list_name,
            mode=SessionMode.BULK,
            sort_by=self.sort_by,
            today=self.today,
            snooze_days=self.snooze_days,
        )
        session.bulk = bulk
        target.replace_text(bulk.document)
        return session

    def put_header(self, line: str) -> bool:
        """
        Set one header on the task being edited, or on the selected tasks of
        a list document.
        """
        if self.mode in (SessionMode.SINGLE, SessionMode.BULK):
            self.host.replace_text(line.rstrip("\n") + "\n" + self.host.read_text())
            return self.save()
        if self.mode is SessionMode.LIST:
            text = self.host.selection()
            if not text:
                return False
            try:
                bulk_put_header(
                    self.task_list,
                    text,
                    line,
                    report=lambda s: self.host.report_error(f"Put: {s}"),
                )
            except (TodoStoreError, OSError) as exc:
                self.host.report_error(str(exc))
            self.load()
            return True
        return False

    def mark_done(self) -> bool:
        return self.put_header("todo: done")

    def mute(self) -> bool:
        return self.put_header("todo: mute")

    def snooze(self, days: int | None = None) -> bool:
        if days is None:
            days = self.snooze_days
        return self.put_header(f"todo: {snooze_value(days, today=self.today)}")
