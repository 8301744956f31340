# tests/test_query.py

from __future__ import annotations

from datetime import date, datetime

import pytest

from todo_store.tasks.query import (
    Compare,
    MatchAll,
    Negated,
    NotSnoozed,
    Substring,
    compile_query,
    parse_term,
)
from todo_store.tasks.task_list import TaskList
from todo_store.tasks.task_models import Task

TODAY = date(2024, 3, 1)


def _task(header: dict[str, str], body: bytes = b"") -> Task:
    return Task(id="1", path=None, header=header, body=body)


@pytest.mark.parametrize(
    ("word", "term"),
    [
        ("all", MatchAll()),
        ("milk", Substring(None, "milk")),
        ("Title:milk", Substring("title", "milk")),
        ("due:<2024-04", Compare("due", "<", "2024-04")),
        ("due:>2024-04", Compare("due", ">", "2024-04")),
        ("todo:=done", Compare("todo", "=", "done")),
        ("-title:milk", Negated(Substring("title", "milk"))),
        ("--x", Negated(Negated(Substring(None, "x")))),
    ],
)
def test_parse_term(word: str, term) -> None:
    assert parse_term(word) == term


def test_default_query_hides_snoozed_and_done() -> None:
    q = compile_query("milk", today=TODAY)

    assert not q.needs_done
    assert q.terms == (Substring(None, "milk"), NotSnoozed("2024-03-01"))


def test_all_reaches_everything() -> None:
    q = compile_query("all", today=TODAY)

    assert q.needs_done
    assert q.terms == (MatchAll(),)


@pytest.mark.parametrize("query", ["todo:done", "todo:mute", "-todo:done", "todo:=done"])
def test_todo_terms_about_done_scan_done_tasks(query: str) -> None:
    assert compile_query(query, today=TODAY).needs_done


def test_todo_snooze_term_disables_snooze_filter() -> None:
    q = compile_query("todo:snooze", today=TODAY)

    assert not any(isinstance(t, NotSnoozed) for t in q.terms)
    assert q(_task({"todo": "snooze 2099-01-01"}))


def test_snooze_filter_boundaries() -> None:
    q = compile_query("", today=TODAY)

    assert q(_task({}))
    assert q(_task({"todo": "snooze 2024-02-29"}))
    assert not q(_task({"todo": "snooze 2024-03-01"}))
    assert not q(_task({"todo": "snooze 2024-03-02"}))


def test_compare_needs_the_key() -> None:
    before = Compare("due", "<", "2024-04")
    after = Compare("due", ">", "2024-04")

    assert before.matches(_task({"due": "2024-03-15"}))
    assert not before.matches(_task({}))
    assert after.matches(_task({"due": "2024-05-01"}))
    assert not after.matches(_task({}))
    assert Compare("due", "=", "").matches(_task({}))


def test_bare_word_searches_history_case_sensitively() -> None:
    task = _task({"title": "x"}, "— 2024-03-01 09:30:00 —\ntitle: x\n\nask Robin\n\n".encode())

    assert Substring(None, "Robin").matches(task)
    assert not Substring(None, "robin").matches(task)


def test_today_accepts_a_string() -> None:
    assert compile_query("x", today="2024-03-01").terms[-1] == NotSnoozed("2024-03-01")


def test_search_over_a_list(task_list: TaskList) -> None:
    a = task_list.create("a", {"title": "milk", "due": "2024-03-10"})
    b = task_list.create("b", {"title": "bread", "todo": "done"})
    c = task_list.create("c", {"title": "milk later", "todo": "snooze 2099-01-01"})
    d = task_list.create("d", {"title": "eggs", "due": "2024-05-01"})

    assert task_list.search("title:milk", today=TODAY) == [a]
    assert task_list.search("all title:milk", today=TODAY) == [a, c]
    assert task_list.search("due:<2024-04", today=TODAY) == [a]
    assert task_list.search("-title:milk", today=TODAY) == [d]
    assert task_list.search("todo:done", today=TODAY) == [b]
    assert task_list.search("all", today=TODAY) == [a, c, d, b]
    assert task_list.search("all", today=TODAY) == task_list.all() + task_list.done()


def test_today_accepts_a_datetime() -> None:
    q = compile_query("", today=datetime(2024, 3, 1, 9, 0, 0))

    assert q.terms == (NotSnoozed("2024-03-01"),)
    assert not q(_task({"todo": "snooze 2024-03-01"}))
