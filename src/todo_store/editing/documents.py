# src/todo_store/editing/documents.py

"""
Editable task documents.

A document is the header block ("key: value" lines), a blank line, then
free text. Editing a task renders it with Task.render(); what comes back is
parsed here into the header entries that changed plus the new comment.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from ..core.errors import DocumentFormatError
from ..tasks.task_list import TaskList
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)

COMMENT_PLACEHOLDER = "<optional comment here>"
DESCRIBE_PLACEHOLDER = "<describe task here>"
CREATE_TEMPLATE = f"title: \n\n{DESCRIBE_PLACEHOLDER}\n\n"

_PLACEHOLDERS = frozenset({COMMENT_PLACEHOLDER, DESCRIBE_PLACEHOLDER})
_BLOCK_START = "— "


@dataclass(slots=True)
class EditedDocument:
    header: dict[str, str] = field(default_factory=dict)
    comment: str = ""
    problems: list[str] = field(default_factory=list)


def parse_document(text: str, baseline: Task | None = None) -> EditedDocument:
    """
    Parse an edited document.

    With a baseline, only header entries whose value differs from the
    baseline are returned; without one, every header entry is. Lines without
    a colon are collected in `problems` instead of failing on the first one.
    The comment runs from the blank line to the next block marker.
    """
    doc = EditedDocument()
    lines = text.split("\n")
    pos = 0
    while pos < len(lines):
        line = lines[pos].strip()
        pos += 1
        if not line:
            break
        key, sep, value = line.partition(":")
        if not sep:
            doc.problems.append(f"unknown summary line: {line}")
            continue
        key = key.strip().lower()
        value = value.strip()
        if baseline is None or baseline.value(key) != value:
            doc.header[key] = value

    comment: list[str] = []
    for line in lines[pos:]:
        if line.startswith(_BLOCK_START):
            break
        comment.append(line)
    doc.comment = "\n".join(comment).strip()
    if doc.comment in _PLACEHOLDERS:
        doc.comment = ""
    return doc


def write_document(
    task_list: TaskList,
    baseline: Task | None,
    text: str,
    *,
    now: datetime | None = None,
) -> Task:
    """
    Apply an edited document to one task, or create a task when there is no
    baseline (an "id:" header picks the ID, otherwise one is allocated).
    Nothing is written if the document has format problems.
    """
    doc = parse_document(text, baseline)
    if doc.problems:
        raise DocumentFormatError(doc.problems)

    if baseline is None:
        task_id = doc.header.pop("id", "")
        return task_list.create(task_id or None, doc.header, doc.comment, now=now)

    task_list.write(baseline, doc.header, doc.comment, now=now)
    logger.debug("Applied document to task %s keys=%s", baseline.id, sorted(doc.header))
    return baseline
