# src/todo_store/core/errors.py

"""
Error taxonomy for the task store.

Everything raised on purpose by the store derives from TodoStoreError, so
callers can catch the whole family in one place. Filesystem failures are
wrapped in StorageError (an OSError) with the original error as __cause__.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping


class TodoStoreError(Exception):
    """Base class for task store errors."""


class TaskNotFoundError(TodoStoreError, LookupError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"task {task_id!r} not found")
        self.task_id = task_id


class MalformedRecordError(TodoStoreError, ValueError):
    def __init__(self, path: object) -> None:
        super().__init__(f"malformed task file {path}")
        self.path = path


class InvalidTaskIDError(TodoStoreError, ValueError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"invalid task name {task_id!r} - must be /[0-9a-z_\\-]+/")
        self.task_id = task_id


class TaskExistsError(TodoStoreError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"task {task_id!r} already exists")
        self.task_id = task_id


class DocumentFormatError(TodoStoreError, ValueError):
    """All problems found in one edited document, reported together."""

    def __init__(self, problems: Iterable[str]) -> None:
        self.problems = list(problems)
        super().__init__("\n".join(self.problems))


class ManifestError(DocumentFormatError):
    """The bulk edit task list is missing or names no existing tasks."""

    def __init__(self, message: str) -> None:
        super().__init__([message])


class StorageError(TodoStoreError, OSError):
    """Append, rename or ID allocation failed on disk."""


class PartialBulkFailure(TodoStoreError):
    """
    Some bulk edit targets could not be written.

    The writes that succeeded are kept; nothing is rolled back.
    """

    def __init__(
        self,
        attempted: Iterable[str],
        failures: Mapping[str, BaseException],
    ) -> None:
        self.attempted = list(attempted)
        self.failures = dict(failures)
        self.succeeded = [i for i in self.attempted if i not in self.failures]
        lines = [f"writing {task_id}: {exc}" for task_id, exc in self.failures.items()]
        super().__init__(
            f"updated {len(self.succeeded)} of {len(self.attempted)} tasks:\n" + "\n".join(lines)
        )
