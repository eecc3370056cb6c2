"""Per-todo cursor for browsing revision history."""

from __future__ import annotations

from pydantic import BaseModel, Field, NonNegativeInt

from docket.todos.types import HistoryEntry, Todo


class HistoryNavigator(BaseModel):
    """Tracks which todo's history panel is open and where each cursor sits.

    Cursors survive ``close()`` so a reopened panel could resume, but
    ``open()`` always jumps to the newest entry. Appending history never
    moves a cursor.
    """

    active_id: int | None = None
    positions: dict[int, NonNegativeInt] = Field(default_factory=dict)

    def open(self, todo: Todo) -> None:
        self.active_id = todo.id
        self.positions[todo.id] = len(todo.history) - 1

    def step(self, todo: Todo | None, delta: int) -> bool:
        """Move the cursor by ``delta``, clamped to the history bounds.

        Returns False when there is nothing to navigate.
        """
        if todo is None or not todo.history:
            return False
        current = self.positions.get(todo.id, 0)
        last = len(todo.history) - 1
        self.positions[todo.id] = min(max(current + delta, 0), last)
        return True

    def close(self) -> None:
        self.active_id = None

    def forget(self, todo_id: int) -> None:
        """Drop all navigation state for a deleted todo."""
        self.positions.pop(todo_id, None)
        if self.active_id == todo_id:
            self.active_id = None

    def position(self, todo_id: int) -> int:
        return self.positions.get(todo_id, 0)

    def index_for(self, todo: Todo) -> int:
        """The cursor for ``todo``, clamped to its history bounds."""
        return min(max(self.position(todo.id), 0), len(todo.history) - 1)

    def current_entry(self, todo: Todo) -> HistoryEntry:
        return todo.history[self.index_for(todo)]
