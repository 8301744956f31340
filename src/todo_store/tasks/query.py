# src/todo_store/tasks/query.py

"""
Query compiler.

A query is a whitespace-separated list of terms, all of which must match:

    all              match every task, including done/muted/snoozed ones
    key:value        header "key" contains "value"
    key:<value       header "key" is set and sorts before "value"
    key:>value       header "key" is set and sorts after "value"
    key:=value       header "key" equals "value" exactly
    word             the raw task history contains "word"
    -term            negation of any term

Unless the query says "all" or asks about snoozing (todo:snooze...), tasks
snoozed until today or later are left out.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Union

from .task_models import Task

_COMPARE_OPS = ("<", ">", "=")


@dataclass(frozen=True, slots=True)
class MatchAll:
    def matches(self, task: Task) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Negated:
    term: Term

    def matches(self, task: Task) -> bool:
        return not self.term.matches(task)


@dataclass(frozen=True, slots=True)
class Compare:
    key: str
    op: str
    value: str

    def matches(self, task: Task) -> bool:
        have = task.header.get(self.key, "")
        if self.op == "=":
            return have == self.value
        if not have:
            return False
        if self.op == "<":
            return have < self.value
        return have > self.value


@dataclass(frozen=True, slots=True)
class Substring:
    """Substring of one header value, or of the raw history when key is None."""

    key: str | None
    value: str

    def matches(self, task: Task) -> bool:
        if self.key is None:
            return self.value.encode("utf-8") in task.body
        return self.value in task.header.get(self.key, "")


@dataclass(frozen=True, slots=True)
class NotSnoozed:
    """Drops tasks snoozed until `today` or later (dates compare as text)."""

    today: str

    def matches(self, task: Task) -> bool:
        until = task.snoozed_until
        return until is None or until < self.today


Term = Union[MatchAll, Negated, Compare, Substring, NotSnoozed]


@dataclass(frozen=True, slots=True)
class Query:
    terms: tuple[Term, ...] = field(default_factory=tuple)
    needs_done: bool = False

    def matches(self, task: Task) -> bool:
        return all(t.matches(task) for t in self.terms)

    __call__ = matches


def parse_term(word: str) -> Term:
    """Turn one query word into a term (no status side effects)."""
    if word.startswith("-"):
        return Negated(parse_term(word[1:]))
    if word == "all":
        return MatchAll()
    key, sep, value = word.partition(":")
    if not sep:
        return Substring(None, word)
    key = key.lower()
    if value[:1] in _COMPARE_OPS:
        return Compare(key, value[0], value[1:])
    return Substring(key, value)


def tokenize(query: str) -> list[Term]:
    return [parse_term(w) for w in query.split()]


def _base(term: Term) -> Term:
    while isinstance(term, Negated):
        term = term.term
    return term


def compile_query(query: str, *, today: date | str | None = None) -> Query:
    """
    Compile a query string.

    needs_done is set when the query can match done or muted tasks ("all",
    or a todo:... term mentioning done/mute), so callers know to scan them.
    """
    if today is None:
        today = date.today()
    if isinstance(today, datetime):
        today = today.date()
    if isinstance(today, date):
        today = today.isoformat()

    terms = tokenize(query)
    needs_done = False
    apply_snooze = True
    for term in terms:
        base = _base(term)
        if isinstance(base, MatchAll):
            needs_done = True
            apply_snooze = False
        elif isinstance(base, (Compare, Substring)) and base.key == "todo":
            if "done" in base.value or "mute" in base.value:
                needs_done = True
            if "snooze" in base.value:
                apply_snooze = False

    if apply_snooze:
        terms.append(NotSnoozed(today))
    return Query(terms=tuple(terms), needs_done=needs_done)

