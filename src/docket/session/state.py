"""The single persisted unit: todo records plus transient UI state."""

from __future__ import annotations

from pydantic import BaseModel, Field

from docket.todos.history import HistoryNavigator
from docket.todos.query import FilterCriteria, SortCriteria
from docket.todos.store import TodoStore
from docket.todos.types import EditBuffer

SNAPSHOT_VERSION = 1


class SessionState(BaseModel):
    """Everything a session needs to resume, stored as one snapshot."""

    version: int = SNAPSHOT_VERSION
    store: TodoStore = Field(default_factory=TodoStore)
    filters: FilterCriteria = Field(default_factory=FilterCriteria)
    sort: SortCriteria = Field(default_factory=SortCriteria)
    editing_id: int | None = None
    edit_buffer: EditBuffer | None = None
    history: HistoryNavigator = Field(default_factory=HistoryNavigator)

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    def clear_edit(self) -> None:
        self.editing_id = None
        self.edit_buffer = None

    def drop_dangling_references(self) -> None:
        """Clear UI pointers to missing todos and clamp history cursors."""
        if self.editing_id is not None and self.store.get(self.editing_id) is None:
            self.clear_edit()
        if self.editing_id is None:
            self.edit_buffer = None
        for todo_id in list(self.history.positions):
            todo = self.store.get(todo_id)
            if todo is None:
                self.history.forget(todo_id)
            else:
                self.history.positions[todo_id] = self.history.index_for(todo)
        active = self.history.active_id
        if active is not None and self.store.get(active) is None:
            self.history.close()
