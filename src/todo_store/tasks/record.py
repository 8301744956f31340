# src/todo_store/tasks/record.py

"""
On-disk record format.

A task file is a sequence of blocks, oldest first:

    — 2019-05-01 10:00:00 —
    title: buy milk
    todo: done

    free-form comment text

Each block starts with a marker line carrying a local timestamp, followed by
"key: value" header lines, one blank line and the comment. Files are only
ever appended to, so the bytes of earlier blocks never change.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

MARKER_OPEN = "— ".encode()
MARKER_CLOSE = " —".encode()
_NL = b"\n"
_NL_MARKER = _NL + MARKER_OPEN

ALT_ID_KEY = "#id"


def is_marker(line: bytes) -> bool:
    return (
        line.startswith(MARKER_OPEN)
        and line.endswith(MARKER_CLOSE)
        and len(line) >= 2 * len(MARKER_OPEN)
    )


def format_timestamp(now: datetime) -> str:
    # Naive datetimes are taken as local time.
    return now.astimezone().strftime(TIMESTAMP_FORMAT)


@dataclass(slots=True)
class ParsedRecord:
    header: dict[str, str] = field(default_factory=dict)
    alternate_ids: list[str] = field(default_factory=list)
    ctime: str = ""
    mtime: str = ""


def starts_with_marker(data: bytes) -> bool:
    first, _, _ = data.partition(_NL)
    return is_marker(first.rstrip(b"\r"))


def parse_record(data: bytes, *, reserved: Iterable[str] = ()) -> ParsedRecord:
    """
    Replay every block of a record file into the current header state.

    Later blocks override earlier ones; an empty value deletes the key.
    The caller checks starts_with_marker() first.
    """
    skip = frozenset(reserved)
    rec = ParsedRecord()
    in_header = False
    for line in data.split(_NL):
        if is_marker(line):
            ts = line[len(MARKER_OPEN) : len(line) - len(MARKER_CLOSE)].decode("utf-8", "replace").strip()
            if not rec.ctime:
                rec.ctime = ts
            rec.mtime = ts
            in_header = True
            continue
        if not line.strip():
            in_header = False
            continue
        if not in_header:
            continue

        i = line.find(b":")
        if i < 0:
            in_header = False
            continue
        key = line[:i].strip().lower().decode("utf-8", "replace")
        value = line[i + 1 :].strip().decode("utf-8", "replace")
        if key == ALT_ID_KEY:
            rec.alternate_ids.append(value)
            continue
        if key.startswith("#") or key in skip:
            continue
        if value == "":
            rec.header.pop(key, None)
        else:
            rec.header[key] = value
    return rec


def render_block(now: datetime, header: Mapping[str, str], comment: str = "") -> bytes:
    """Render one block; header lines come out sorted by key."""
    parts = [f"— {format_timestamp(now)} —\n"]
    for key in sorted(header):
        parts.append(f"{key}: {header[key]}\n")
    parts.append("\n")
    if comment:
        parts.append(comment)
        if not comment.endswith("\n"):
            parts.append("\n")
        parts.append("\n")
    return "".join(parts).encode("utf-8")


def split_blocks(body: bytes) -> list[bytes]:
    """Split a record body at marker boundaries, keeping every byte."""
    blocks: list[bytes] = []
    start = 0
    while True:
        i = body.find(_NL_MARKER, start)
        if i < 0:
            break
        blocks.append(body[start : i + 1])
        start = i + 1
    blocks.append(body[start:])
    return blocks


def render_display(header: Mapping[str, str], body: bytes) -> str:
    """
    Render a task for reading and editing: the current header (title first),
    a blank line, then the history blocks newest first.
    """
    out: list[str] = []
    if "title" in header:
        out.append(f"title: {header['title']}\n")
    for key in sorted(k for k in header if k != "title"):
        out.append(f"{key}: {header[key]}\n")
    out.append("\n")
    for block in reversed(split_blocks(body)):
        out.append(block.decode("utf-8", "replace"))
    return "".join(out)
