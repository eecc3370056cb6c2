"""Filtered, sorted views over todo records.

Everything here is a pure function of its arguments: inputs are never
mutated and repeated calls with equal inputs return equal results.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict

from docket.todos.types import Category, Todo, TodoStatus

StatusFilter = Literal["all", "incomplete", "complete"]
CategoryFilter = Literal["all"] | Category
SortKey = Literal["due_date", "title"]
SortDirection = Literal["asc", "desc"]

FILTER_FIELDS = ("text", "status", "category")
SORT_FIELDS: tuple[SortKey, ...] = ("due_date", "title")


class FilterCriteria(BaseModel):
    """Conjunctive filter over text, status and category."""

    model_config = ConfigDict(frozen=True)

    text: str = ""
    status: StatusFilter = "all"
    category: CategoryFilter = "all"

    def replace(self, field: str, value: str) -> FilterCriteria:
        """Return a copy with one field changed, validating the new value."""
        if field not in FILTER_FIELDS:
            raise ValueError(
                f"unknown filter field {field!r}; expected one of {FILTER_FIELDS}"
            )
        return FilterCriteria.model_validate({**self.model_dump(), field: value})

    def matches(self, todo: Todo) -> bool:
        if self.text:
            needle = self.text.lower()
            if needle not in todo.title.lower() and needle not in todo.description.lower():
                return False
        if self.status != "all" and todo.status != TodoStatus(self.status):
            return False
        if self.category != "all" and todo.category != self.category:
            return False
        return True


class SortCriteria(BaseModel):
    """Sort key and direction."""

    model_config = ConfigDict(frozen=True)

    by: SortKey = "due_date"
    direction: SortDirection = "asc"

    def toggled(self, field: str) -> SortCriteria:
        """Select ``field``; re-selecting the active field flips direction."""
        if field not in SORT_FIELDS:
            raise ValueError(
                f"unknown sort field {field!r}; expected one of {SORT_FIELDS}"
            )
        if field == self.by:
            direction = "desc" if self.direction == "asc" else "asc"
            return SortCriteria(by=self.by, direction=direction)
        return SortCriteria(by=field, direction="asc")


def _due_date_key(todo: Todo) -> tuple[int, date]:
    # Undated todos behave as "far future": after every dated one ascending.
    if todo.due_date is None:
        return (1, date.max)
    return (0, todo.due_date)


def _title_key(todo: Todo) -> str:
    return todo.title.lower()


def view(
    records: Iterable[Todo],
    filters: FilterCriteria,
    sort: SortCriteria,
) -> list[Todo]:
    """Return the records that pass ``filters``, ordered by ``sort``.

    The sort is stable in both directions: todos comparing equal keep their
    input order.
    """
    matched = [todo for todo in records if filters.matches(todo)]
    key = _due_date_key if sort.by == "due_date" else _title_key
    return sorted(matched, key=key, reverse=sort.direction == "desc")


@dataclass(frozen=True)
class TodoStats:
    """Counts shown in the list footer."""

    total: int
    completed: int
    shown: int

    def __str__(self) -> str:
        return f"{self.completed}/{self.total} completed • {self.shown} shown"


def stats(records: Sequence[Todo], visible: Sequence[Todo]) -> TodoStats:
    return TodoStats(
        total=len(records),
        completed=sum(1 for todo in records if todo.is_complete),
        shown=len(visible),
    )
