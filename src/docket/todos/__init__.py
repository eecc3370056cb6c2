"""Todo subsystem public API.

Public API:
- TodoStore: record collection and id allocation
- HistoryNavigator: per-todo history cursor
- view / stats: filtered, sorted projections

Types:
- Todo, TodoFields, HistoryEntry, EditBuffer, Category, TodoStatus
"""

from docket.todos.history import HistoryNavigator
from docket.todos.query import FilterCriteria, SortCriteria, TodoStats, stats, view
from docket.todos.store import TodoStore
from docket.todos.types import (
    Category,
    EditBuffer,
    HistoryAction,
    HistoryEntry,
    Todo,
    TodoFields,
    TodoStatus,
)

__all__ = [
    "Category",
    "EditBuffer",
    "FilterCriteria",
    "HistoryAction",
    "HistoryEntry",
    "HistoryNavigator",
    "SortCriteria",
    "Todo",
    "TodoFields",
    "TodoStats",
    "TodoStatus",
    "TodoStore",
    "stats",
    "view",
]
