# tests/fakes.py

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path

MARK = "—"


class FakeClock:
    """Returns start, start+1min, start+2min, ... on successive calls."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + timedelta(minutes=1)
        return now


class FakeEditor:
    """
    TextEditor that applies a text transform to the document.

    Captures every original document for assertions.
    """

    def __init__(self, transform: Callable[[str], str] | None = None) -> None:
        self.transform = transform or (lambda text: text)
        self.seen: list[str] = []

    def edit(self, original: bytes) -> bytes:
        text = original.decode("utf-8")
        self.seen.append(text)
        return self.transform(text).encode("utf-8")


@dataclass(slots=True)
class FakeDocumentHost:
    """In-memory DocumentHost used by session tests."""

    text: str = ""
    selected: str = ""
    errors: list[str] = field(default_factory=list)

    def read_text(self) -> str:
        return self.text

    def replace_text(self, text: str) -> None:
        self.text = text

    def report_error(self, message: str) -> None:
        self.errors.append(message)

    def selection(self) -> str:
        return self.selected


def write_record(path: Path, *blocks: str) -> None:
    """Write a task file by hand, as another process or a person would."""
    path.write_text("".join(blocks), encoding="utf-8")


def block(stamp: str, header: str = "", comment: str = "") -> str:
    out = f"{MARK} {stamp} {MARK}\n{header}\n"
    if comment:
        out += comment + "\n\n"
    return out
