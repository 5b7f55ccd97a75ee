# tests/test_task_codec.py

from __future__ import annotations

import json

import pytest

from todo_app.core.errors import MalformedPersistedData
from todo_app.tasks.task_codec import dump_tasks, load_tasks
from todo_app.tasks.task_models import Priority, Task

from .fakes import counter_ids


def test_round_trip_preserves_fields_and_order() -> None:
    tasks = [
        Task(id="a", text="Buy milk"),
        Task(id="b", text="Позвонить маме", priority=Priority.HIGH, completed=True),
        Task(id="c", text="  spaced  ", priority=Priority.LOW),
    ]

    restored = load_tasks(dump_tasks(tasks))

    assert restored == tasks
    assert [type(t.completed) for t in restored] == [bool, bool, bool]
    assert all(isinstance(t.priority, Priority) for t in restored)


def test_dump_uses_flat_records_by_field_name() -> None:
    data = json.loads(dump_tasks([Task(id="a", text="x", priority=Priority.LOW)]))
    assert data == [{"id": "a", "text": "x", "priority": "low", "completed": False}]


def test_empty_collection_round_trips() -> None:
    assert dump_tasks([]) == "[]"
    assert load_tasks("[]") == []


def test_legacy_value_field_is_read_as_text() -> None:
    raw = '[{"id": "0.4711", "value": "Buy milk", "priority": "high", "completed": true}]'
    (task,) = load_tasks(raw)
    assert task == Task(id="0.4711", text="Buy milk", priority=Priority.HIGH, completed=True)


def test_absent_fields_take_creation_defaults() -> None:
    (task,) = load_tasks('[{"text": "only text"}]', id_factory=counter_ids("new"))
    assert task == Task(id="new1", text="only text", priority=Priority.MEDIUM, completed=False)


def test_unknown_priority_and_non_bool_completed_are_defaulted() -> None:
    raw = '[{"id": "a", "text": "x", "priority": "urgent", "completed": "yes"}]'
    (task,) = load_tasks(raw)
    assert task.priority == Priority.MEDIUM
    assert task.completed is False


def test_numeric_id_becomes_string() -> None:
    (task,) = load_tasks('[{"id": 42, "text": "x"}]')
    assert task.id == "42"


def test_duplicate_ids_are_reassigned() -> None:
    raw = '[{"id": "a", "text": "first"}, {"id": "a", "text": "second"}]'
    tasks = load_tasks(raw, id_factory=counter_ids("fresh"))
    assert [t.id for t in tasks] == ["a", "fresh1"]
    assert [t.text for t in tasks] == ["first", "second"]


def test_records_without_text_are_skipped() -> None:
    raw = '[{"id": "a"}, {"id": "b", "text": "kept"}]'
    assert [t.id for t in load_tasks(raw)] == ["b"]


def test_non_string_text_is_skipped() -> None:
    raw = (
        '[{"id": "a", "text": 5}, {"id": "b", "value": {"nested": true}},'
        ' {"id": "c", "text": null, "value": "legacy"}, {"id": "d", "text": "ok"}]'
    )
    assert [(t.id, t.text) for t in load_tasks(raw)] == [("c", "legacy"), ("d", "ok")]


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "{\"id\": \"a\"}",
        "[1, 2]",
        "[{\"id\": \"a\", \"text\": \"x\"}, \"oops\"]",
    ],
)
def test_malformed_blobs_raise(raw: str) -> None:
    with pytest.raises(MalformedPersistedData):
        load_tasks(raw)
