"""Todo subsystem public types.

Records are immutable values: every change produces a new ``Todo`` whose
history tuple is the old one plus one entry.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum
from typing import Any

from pydantic import (
    AwareDatetime,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


class Category(StrEnum):
    """Fixed set of todo categories."""

    SHOPPING = "shopping"
    SCHOOL = "school"
    HOUSE_WORK = "house work"
    PERSONAL = "personal"
    WORK = "work"
    HEALTH = "health"
    OTHER = "other"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class TodoStatus(StrEnum):
    """Allowed todo statuses."""

    INCOMPLETE = "incomplete"
    COMPLETE = "complete"

    def flipped(self) -> TodoStatus:
        if self is TodoStatus.COMPLETE:
            return TodoStatus.INCOMPLETE
        return TodoStatus.COMPLETE


class HistoryAction(StrEnum):
    """Kind of mutation a history entry records."""

    CREATED = "created"
    UPDATED = "updated"


# Fields a caller may change on an existing todo.
EDITABLE_FIELDS = ("title", "description", "category", "due_date", "status")


def _blank_to_none(value: Any) -> Any:
    # Date inputs submit "" when left empty.
    if isinstance(value, str) and not value.strip():
        return None
    return value


class TodoFields(BaseModel):
    """The user-visible fields of a todo, frozen at one instant."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str = ""
    category: Category
    due_date: date | None = None
    status: TodoStatus = TodoStatus.INCOMPLETE

    @field_validator("title", "description", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("title")
    @classmethod
    def _require_title(cls, value: str) -> str:
        if not value:
            raise ValueError("title cannot be empty")
        return value

    @field_validator("due_date", mode="before")
    @classmethod
    def _blank_due_date(cls, value: Any) -> Any:
        return _blank_to_none(value)


class HistoryEntry(BaseModel):
    """Append-only snapshot of a todo taken at one mutation."""

    model_config = ConfigDict(frozen=True)

    timestamp: AwareDatetime
    action: HistoryAction
    data: TodoFields


class Todo(TodoFields):
    """A single trackable task and its revision history."""

    id: int = Field(ge=1)
    created_at: AwareDatetime
    history: tuple[HistoryEntry, ...]

    @model_validator(mode="after")
    def _check_history(self) -> Todo:
        if not self.history:
            raise ValueError(f"todo {self.id} has no history")
        if self.history[0].action != HistoryAction.CREATED:
            raise ValueError(f"todo {self.id} history must start with 'created'")
        for prev, entry in zip(self.history, self.history[1:], strict=False):
            if entry.timestamp < prev.timestamp:
                raise ValueError(f"todo {self.id} history is out of order")
        if self.history[-1].data != self.fields:
            raise ValueError(f"todo {self.id} history does not match its fields")
        return self

    @property
    def fields(self) -> TodoFields:
        return TodoFields(
            title=self.title,
            description=self.description,
            category=self.category,
            due_date=self.due_date,
            status=self.status,
        )

    @property
    def is_complete(self) -> bool:
        return self.status == TodoStatus.COMPLETE

    def is_overdue(self, today: date) -> bool:
        """True when the due date has passed and the todo is still open."""
        if self.due_date is None or self.is_complete:
            return False
        return self.due_date < today

    @classmethod
    def new(cls, todo_id: int, fields: TodoFields, *, now: datetime) -> Todo:
        """Build a freshly created todo with its seed history entry."""
        entry = HistoryEntry(timestamp=now, action=HistoryAction.CREATED, data=fields)
        return cls(
            id=todo_id,
            created_at=now,
            history=(entry,),
            **fields.model_dump(),
        )

    def with_changes(self, changes: dict[str, Any], *, now: datetime) -> Todo:
        """Return a copy with ``changes`` merged and one ``updated`` entry added.

        The entry holds every visible field, not only the changed ones. Its
        timestamp never precedes the previous entry's.

        Raises:
            ValueError: If a change names an unknown field or fails validation.
        """
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"unknown todo fields: {sorted(unknown)}")
        merged = TodoFields.model_validate({**self.fields.model_dump(), **changes})
        timestamp = max(now, self.history[-1].timestamp)
        entry = HistoryEntry(
            timestamp=timestamp, action=HistoryAction.UPDATED, data=merged
        )
        return self.model_copy(
            update={**merged.model_dump(), "history": (*self.history, entry)}
        )


class EditBuffer(BaseModel):
    """Uncommitted copy of a todo's fields while it is being edited."""

    title: str = ""
    description: str = ""
    category: Category = Category.PERSONAL
    due_date: date | None = None

    @field_validator("due_date", mode="before")
    @classmethod
    def _blank_due_date(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @classmethod
    def from_todo(cls, todo: Todo) -> EditBuffer:
        return cls(
            title=todo.title,
            description=todo.description,
            category=todo.category,
            due_date=todo.due_date,
        )

    def changes(self) -> dict[str, Any]:
        return self.model_dump()
