# tests/test_task_api.py

from __future__ import annotations

from datetime import date, datetime

from todo_store.tasks.sorting import id_number, sort_tasks
from todo_store.tasks.task_api import mark_done, mute, show_query, snooze, snooze_value
from todo_store.tasks.task_list import TaskList
from todo_store.tasks.task_models import Task, TaskStatus

NOW = datetime(2024, 3, 1, 9, 30, 0)
TODAY = date(2024, 3, 1)


def _t(task_id: str, **header: str) -> Task:
    return Task(id=task_id, path=None, header=dict(header))


def test_snooze_value() -> None:
    assert snooze_value(today=TODAY) == "snooze 2024-03-02"
    assert snooze_value(7, today=TODAY) == "snooze 2024-03-08"


def test_id_number() -> None:
    assert id_number("42") == 42
    assert id_number("milk") > 10**6


def test_sort_by_id_puts_numbers_first_in_numeric_order() -> None:
    tasks = [_t("10"), _t("milk"), _t("9"), _t("apple")]

    assert [t.id for t in sort_tasks(tasks, "id")] == ["9", "10", "apple", "milk"]


def test_sort_by_title_and_field() -> None:
    tasks = [_t("1", title="b", due="2024-05"), _t("2", title="a"), _t("3", title="b", due="2024-04")]

    assert [t.id for t in sort_tasks(tasks)] == ["2", "1", "3"]
    assert [t.id for t in sort_tasks(tasks, "-title")] == ["3", "1", "2"]
    assert [t.id for t in sort_tasks(tasks, "due")] == ["2", "3", "1"]


def test_show_query_lists_id_and_title(task_list: TaskList) -> None:
    task_list.create("1", {"title": "walk dog"})
    task_list.create("2", {"title": "buy milk"})
    task_list.create("3", {"title": "done already", "todo": "done"})

    assert show_query(task_list, "", today=TODAY) == "2\tbuy milk\n1\twalk dog\n"
    assert show_query(task_list, "all", sort_by="id", today=TODAY) == (
        "1\twalk dog\n2\tbuy milk\n3\tdone already\n"
    )


def test_mark_done_by_id_or_query(task_list: TaskList) -> None:
    a = task_list.create("1", {"title": "milk"})
    b = task_list.create("2", {"title": "milk again"})
    c = task_list.create("3", {"title": "bread"})

    assert mark_done(task_list, "1", now=NOW, today=TODAY) == [a]
    assert mark_done(task_list, "title:milk all", now=NOW, today=TODAY) == [b]
    assert a.status is TaskStatus.DONE
    assert b.status is TaskStatus.DONE
    assert c.status is TaskStatus.ACTIVE


def test_mark_done_skips_failing_writes(task_list: TaskList) -> None:
    a = task_list.create("1", {"title": "milk"})
    b = task_list.create("2", {"title": "milk"})
    a.path.unlink()

    assert mark_done(task_list, "title:milk", now=NOW, today=TODAY) == [b]


def test_mute_and_snooze(task_list: TaskList) -> None:
    a = task_list.create("1", {"title": "a"})
    b = task_list.create("2", {"title": "b"})

    mute(task_list, a, now=NOW)
    snooze(task_list, b, 3, now=NOW, today=TODAY)

    assert a.status is TaskStatus.MUTED
    assert a.path.suffix == ".done"
    assert b.header["todo"] == "snooze 2024-03-04"
    assert task_list.search("", today=TODAY) == []
    assert task_list.search("", today=date(2024, 3, 5)) == [b]
