# src/todo_store/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) for collaborators that live outside the store.

The store only ever talks to an editor, a document host or a lookup
listener through these Protocols, so tests can swap in fakes.
"""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.registry import Location


class TextEditor(Protocol):
    """External editor: given the original document bytes, returns the edited bytes."""
    def edit(self, original: bytes) -> bytes: ...


class DocumentHost(Protocol):
    """
    Interactive document (an editor window or buffer).

    This is all the store needs from a host:
    - read the current text
    - replace the text
    - show an error string to the user
    - get the current selection ("" when nothing is selected)
    """

    def read_text(self) -> str: ...
    def replace_text(self, text: str) -> None: ...
    def report_error(self, message: str) -> None: ...
    def selection(self) -> str: ...


class LookupListener(Protocol):
    """Called by PathResolver when a resolved path names an existing list or task."""
    def __call__(self, location: Location) -> None: ...
