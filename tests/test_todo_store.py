"""Tests for todo records and the TodoStore."""

from datetime import UTC, date, datetime, timedelta

import pytest
from pydantic import ValidationError

from docket.todos import (
    Category,
    EditBuffer,
    HistoryAction,
    Todo,
    TodoFields,
    TodoStatus,
    TodoStore,
)
from tests.conftest import make_todo

T0 = datetime(2025, 3, 1, 9, 0, tzinfo=UTC)


class TestCreate:
    def test_assigns_sequential_ids(self, store):
        first = make_todo(store, "Buy milk")
        second = make_todo(store, "Walk dog")

        assert (first.id, second.id) == (1, 2)
        assert store.next_id == 3
        assert len(store) == 2

    def test_trims_and_seeds_history(self, store):
        todo = store.create(
            "  Buy milk  ", "  2 litres ", Category.SHOPPING, date(2025, 3, 2), now=T0
        )

        assert todo is not None
        assert todo.title == "Buy milk"
        assert todo.description == "2 litres"
        assert todo.status == TodoStatus.INCOMPLETE
        assert todo.created_at == T0
        assert len(todo.history) == 1
        entry = todo.history[0]
        assert entry.action == HistoryAction.CREATED
        assert entry.timestamp == T0
        assert entry.data == todo.fields

    @pytest.mark.parametrize("title", ["", "   ", "\t\n"])
    def test_blank_title_is_noop(self, store, title):
        assert store.create(title) is None
        assert len(store) == 0
        assert store.next_id == 1

    def test_accepts_category_value_and_blank_due_date(self, store):
        todo = store.create("Mop floors", category="house work", due_date="")

        assert todo is not None
        assert todo.category == Category.HOUSE_WORK
        assert todo.due_date is None

    def test_rejects_unknown_category(self, store):
        with pytest.raises(ValidationError):
            store.create("Thing", category="hobbies")


class TestUpdate:
    def test_appends_full_snapshot_entry(self, store):
        todo = store.create("Buy milk", category=Category.SHOPPING, now=T0)
        assert todo is not None

        updated = store.update(
            todo.id, {"due_date": date(2025, 3, 5)}, now=T0 + timedelta(minutes=1)
        )

        assert updated is not None
        assert updated.due_date == date(2025, 3, 5)
        assert len(updated.history) == 2
        entry = updated.history[-1]
        assert entry.action == HistoryAction.UPDATED
        assert entry.data.title == "Buy milk"
        assert entry.data.category == Category.SHOPPING
        assert entry.data.due_date == date(2025, 3, 5)
        assert store.get(todo.id) == updated

    def test_unknown_id_returns_none(self, store):
        make_todo(store, "Buy milk")

        assert store.update(99, {"title": "x"}) is None
        assert store.get(1).title == "Buy milk"

    def test_blank_title_rejected(self, store):
        todo = make_todo(store, "Buy milk")

        assert store.update(todo.id, {"title": "   "}) is None
        assert len(store.get(todo.id).history) == 1

    def test_missing_title_rejected(self, store):
        todo = make_todo(store, "Buy milk")

        assert store.update(todo.id, {"title": None}) is None
        assert store.get(todo.id).title == "Buy milk"

    def test_unknown_field_raises(self, store):
        todo = make_todo(store, "Buy milk")

        with pytest.raises(ValueError, match="unknown todo fields"):
            store.update(todo.id, {"priority": "high"})

    def test_timestamp_never_precedes_previous_entry(self, store):
        todo = store.create("Buy milk", now=T0)
        assert todo is not None

        earlier = T0 - timedelta(hours=1)
        updated = store.update(todo.id, {"title": "Buy oat milk"}, now=earlier)

        assert updated is not None
        assert updated.history[-1].timestamp == T0

    def test_old_record_is_not_mutated(self, store):
        original = make_todo(store, "Buy milk")

        store.update(original.id, {"title": "Buy bread"})

        assert original.title == "Buy milk"
        assert len(original.history) == 1
        with pytest.raises(ValidationError):
            original.title = "changed"  # type: ignore[misc]


class TestToggleAndDelete:
    def test_toggle_round_trip(self, store):
        todo = make_todo(store, "Buy milk")

        done = store.toggle_status(todo.id)
        reopened = store.toggle_status(todo.id)

        assert done is not None and done.status == TodoStatus.COMPLETE
        assert reopened is not None and reopened.status == TodoStatus.INCOMPLETE
        assert [e.data.status for e in reopened.history] == [
            TodoStatus.INCOMPLETE,
            TodoStatus.COMPLETE,
            TodoStatus.INCOMPLETE,
        ]

    def test_hook_runs_only_when_completing(self, store):
        todo = make_todo(store, "Buy milk")
        seen: list[TodoStatus] = []

        store.toggle_status(todo.id, on_complete=lambda t: seen.append(t.status))
        store.toggle_status(todo.id, on_complete=lambda t: seen.append(t.status))

        # Hook observes the record before the update is applied.
        assert seen == [TodoStatus.INCOMPLETE]

    def test_hook_failure_does_not_block(self, store, caplog):
        todo = make_todo(store, "Buy milk")

        def boom(_todo: Todo) -> None:
            raise RuntimeError("speaker unplugged")

        result = store.toggle_status(todo.id, on_complete=boom)

        assert result is not None and result.is_complete
        assert "completion_effect_failed" in caplog.text

    def test_toggle_unknown_id(self, store):
        assert store.toggle_status(42) is None

    def test_delete_removes_record(self, store):
        todo = make_todo(store, "Buy milk")

        removed = store.delete(todo.id)

        assert removed == todo
        assert store.get(todo.id) is None
        assert store.delete(todo.id) is None

    def test_ids_never_reused(self, store):
        make_todo(store, "one")
        second = make_todo(store, "two")
        store.delete(second.id)

        third = make_todo(store, "three")

        assert third.id == 3

    def test_completed_count(self, store):
        first = make_todo(store, "one")
        make_todo(store, "two")
        store.toggle_status(first.id)

        assert store.completed_count == 1


class TestReseed:
    def test_reseed_from_max_id(self, store):
        for title in ("a", "b", "c"):
            make_todo(store, title)
        store.delete(3)
        store.next_id = 1

        store.reseed_counter()

        assert store.next_id == 3

    def test_reseed_empty(self):
        store = TodoStore(next_id=17)
        store.reseed_counter()
        assert store.next_id == 1

    def test_duplicate_ids_rejected(self, store):
        todo = make_todo(store, "a")

        with pytest.raises(ValidationError, match="duplicate"):
            TodoStore(todos=[todo, todo])


class TestTodoInvariants:
    def test_history_must_match_fields(self):
        fields = TodoFields(title="a", category=Category.WORK)
        todo = Todo.new(1, fields, now=T0)
        data = todo.model_dump()
        data["title"] = "b"

        with pytest.raises(ValidationError, match="does not match"):
            Todo.model_validate(data)

    def test_history_must_not_be_empty(self):
        with pytest.raises(ValidationError):
            Todo(
                id=1,
                title="a",
                category=Category.WORK,
                created_at=T0,
                history=(),
            )

    def test_overdue(self):
        todo = Todo.new(
            1,
            TodoFields(title="a", category=Category.WORK, due_date=date(2025, 3, 1)),
            now=T0,
        )

        assert todo.is_overdue(date(2025, 3, 2))
        assert not todo.is_overdue(date(2025, 3, 1))
        done = todo.with_changes({"status": TodoStatus.COMPLETE}, now=T0)
        assert not done.is_overdue(date(2025, 3, 2))


class TestEditBuffer:
    def test_from_todo_copies_editable_fields(self, store):
        todo = store.create("Essay", "draft", Category.SCHOOL, date(2025, 4, 1))
        assert todo is not None

        buffer = EditBuffer.from_todo(todo)

        assert buffer.changes() == {
            "title": "Essay",
            "description": "draft",
            "category": Category.SCHOOL,
            "due_date": date(2025, 4, 1),
        }

    def test_blank_due_date_clears(self):
        assert EditBuffer(due_date="  ").due_date is None
