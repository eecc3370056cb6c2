"""Authoritative todo collection and id allocation."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, date, datetime
from typing import Any

from pydantic import BaseModel, Field, model_validator

from docket.todos.types import Category, Todo, TodoFields, TodoStatus

logger = logging.getLogger(__name__)

CompletionHook = Callable[[Todo], None]


class TodoStore(BaseModel):
    """Owns todo records and the id counter.

    Records are replaced wholesale on every change; ids come from a single
    counter and are never handed out twice.
    """

    todos: list[Todo] = Field(default_factory=list)
    next_id: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def _check_unique_ids(self) -> TodoStore:
        ids = [todo.id for todo in self.todos]
        if len(ids) != len(set(ids)):
            raise ValueError("duplicate todo ids")
        return self

    def __len__(self) -> int:
        return len(self.todos)

    def get(self, todo_id: int) -> Todo | None:
        return next((t for t in self.todos if t.id == todo_id), None)

    @property
    def completed_count(self) -> int:
        return sum(1 for t in self.todos if t.is_complete)

    def reseed_counter(self) -> None:
        """Reset the counter after hydration: max id + 1, or 1 when empty."""
        self.next_id = max((t.id for t in self.todos), default=0) + 1

    def create(
        self,
        title: str,
        description: str = "",
        category: Category | str = Category.PERSONAL,
        due_date: date | str | None = None,
        *,
        now: datetime | None = None,
    ) -> Todo | None:
        """Create a todo. Returns None (and changes nothing) for a blank title."""
        if not title.strip():
            logger.debug("todo_create_rejected", extra={"reason": "blank_title"})
            return None

        fields = TodoFields(
            title=title,
            description=description or "",
            category=category,
            due_date=due_date,
            status=TodoStatus.INCOMPLETE,
        )
        todo = Todo.new(self._allocate_id(), fields, now=now or datetime.now(UTC))
        self.todos.append(todo)
        logger.info("todo_created", extra={"todo.id": todo.id})
        return todo

    def update(
        self,
        todo_id: int,
        changes: dict[str, Any],
        *,
        now: datetime | None = None,
    ) -> Todo | None:
        """Merge ``changes`` onto a todo and append one ``updated`` entry.

        Returns the new record, or None when the id is unknown or the change
        would blank the title.
        """
        index = self._index(todo_id)
        if index is None:
            return None
        if "title" in changes and not str(changes["title"] or "").strip():
            logger.debug("todo_update_rejected", extra={"todo.id": todo_id})
            return None

        updated = self.todos[index].with_changes(
            changes, now=now or datetime.now(UTC)
        )
        self.todos[index] = updated
        logger.info(
            "todo_updated",
            extra={"todo.id": todo_id, "todo.fields": sorted(changes)},
        )
        return updated

    def delete(self, todo_id: int) -> Todo | None:
        index = self._index(todo_id)
        if index is None:
            return None
        removed = self.todos.pop(index)
        logger.info("todo_deleted", extra={"todo.id": todo_id})
        return removed

    def toggle_status(
        self,
        todo_id: int,
        *,
        on_complete: CompletionHook | None = None,
        now: datetime | None = None,
    ) -> Todo | None:
        """Flip complete/incomplete.

        ``on_complete`` runs before the update when the todo is becoming
        complete. Its failures are logged and never block the change.
        """
        todo = self.get(todo_id)
        if todo is None:
            return None
        new_status = todo.status.flipped()
        if new_status == TodoStatus.COMPLETE and on_complete is not None:
            try:
                on_complete(todo)
            except Exception:
                logger.warning(
                    "completion_effect_failed",
                    extra={"todo.id": todo_id},
                    exc_info=True,
                )
        return self.update(todo_id, {"status": new_status}, now=now)

    def _allocate_id(self) -> int:
        todo_id = self.next_id
        self.next_id += 1
        return todo_id

    def _index(self, todo_id: int) -> int | None:
        for i, todo in enumerate(self.todos):
            if todo.id == todo_id:
                return i
        return None
