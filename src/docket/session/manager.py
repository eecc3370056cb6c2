"""Session orchestration.

SessionManager is the only writer of SessionState. Every command applies its
change, persists the snapshot when anything changed, and returns an Outcome
whose ``change`` tells the caller whether the view needs re-deriving.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Any

from docket.config.models import DEFAULT_STORAGE_KEY
from docket.persistence.base import PersistenceAdapter
from docket.session.effects import CompletionEffects, NullEffects
from docket.session.snapshot import SnapshotError, dump_snapshot, load_snapshot
from docket.session.state import SessionState
from docket.todos.query import FilterCriteria, TodoStats, stats, view
from docket.todos.types import Category, EditBuffer, Todo

logger = logging.getLogger(__name__)

ConfirmFn = Callable[[str], bool]
Clock = Callable[[], datetime]

DELETE_PROMPT = "Are you sure you want to delete this todo?"


class Change(StrEnum):
    """What a command changed."""

    NONE = "none"  # no-op; nothing persisted
    VIEW = "view"  # transient UI state only
    DATA = "data"  # todo records

    def __bool__(self) -> bool:
        return self is not Change.NONE


@dataclass(frozen=True)
class Outcome:
    """Result of a command: the change signal and the todo it touched."""

    change: Change
    todo: Todo | None = None


_NOOP = Outcome(Change.NONE)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def load_state(adapter: PersistenceAdapter, key: str) -> tuple[SessionState, bool]:
    """Hydrate state from ``adapter``.

    Returns (state, recovered) where ``recovered`` is True when a corrupt
    snapshot was discarded in favour of defaults.
    """
    try:
        blob = adapter.load(key)
        if blob is None:
            logger.info("snapshot_missing", extra={"storage.key": key})
            return SessionState(), False
        state = load_snapshot(blob)
    except (SnapshotError, UnicodeDecodeError) as e:
        logger.error(
            "snapshot_corrupt",
            extra={"storage.key": key, "error.message": str(e)},
        )
        return SessionState(), True
    logger.debug(
        "snapshot_loaded",
        extra={"storage.key": key, "todo.count": len(state.store)},
    )
    return state, False


class SessionManager:
    """Routes commands to the todo store, query engine and history navigator."""

    def __init__(
        self,
        state: SessionState,
        adapter: PersistenceAdapter,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        effects: CompletionEffects | None = None,
        confirm: ConfirmFn | None = None,
        clock: Clock = _utcnow,
        default_category: Category = Category.PERSONAL,
    ) -> None:
        self._state = state
        self._adapter = adapter
        self._key = key
        self._effects = effects or NullEffects()
        self._confirm = confirm
        self._clock = clock
        self._default_category = default_category
        self.recovered = False

    @classmethod
    def load(
        cls,
        adapter: PersistenceAdapter,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        **kwargs: Any,
    ) -> SessionManager:
        """Create a manager from the snapshot stored under ``key``.

        A missing snapshot yields an empty session; a corrupt one is logged
        and replaced by an empty session with ``recovered`` set.
        """
        state, recovered = load_state(adapter, key)
        manager = cls(state, adapter, key=key, **kwargs)
        manager.recovered = recovered
        return manager

    @property
    def state(self) -> SessionState:
        return self._state

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, todo_id: int) -> Todo | None:
        return self._state.store.get(todo_id)

    def view(self) -> list[Todo]:
        return view(self._state.store.todos, self._state.filters, self._state.sort)

    def stats(self) -> TodoStats:
        return stats(self._state.store.todos, self.view())

    # ------------------------------------------------------------------
    # Todo commands
    # ------------------------------------------------------------------

    def add(
        self,
        title: str,
        description: str = "",
        category: Category | str | None = None,
        due_date: date | str | None = None,
    ) -> Outcome:
        todo = self._state.store.create(
            title,
            description,
            category or self._default_category,
            due_date,
            now=self._clock(),
        )
        if todo is None:
            return _NOOP
        return self._commit(Change.DATA, todo)

    def update(self, todo_id: int, **changes: Any) -> Outcome:
        """Merge ``changes`` onto a todo; also ends any edit in progress."""
        todo = self._state.store.update(todo_id, changes, now=self._clock())
        if todo is None:
            return _NOOP
        self._state.clear_edit()
        return self._commit(Change.DATA, todo)

    def toggle_status(self, todo_id: int) -> Outcome:
        todo = self._state.store.toggle_status(
            todo_id,
            on_complete=self._fire_completion_effects,
            now=self._clock(),
        )
        if todo is None:
            return _NOOP
        self._state.clear_edit()
        return self._commit(Change.DATA, todo)

    def delete(self, todo_id: int, *, confirmed: bool) -> Outcome:
        """Remove a todo. Does nothing unless ``confirmed`` is True."""
        if not confirmed:
            logger.debug("todo_delete_declined", extra={"todo.id": todo_id})
            return _NOOP
        removed = self._state.store.delete(todo_id)
        if removed is None:
            return _NOOP
        self._state.history.forget(todo_id)
        if self._state.editing_id == todo_id:
            self._state.clear_edit()
        return self._commit(Change.DATA, removed)

    def request_delete(self, todo_id: int) -> Outcome:
        """Ask the confirm collaborator, then delete.

        Declines when no collaborator was provided or the todo is unknown.
        """
        if self.get(todo_id) is None or self._confirm is None:
            return _NOOP
        return self.delete(todo_id, confirmed=self._confirm(DELETE_PROMPT))

    # ------------------------------------------------------------------
    # View commands
    # ------------------------------------------------------------------

    def set_filter(self, field: str, value: str) -> Outcome:
        """Change one filter field.

        Raises:
            ValueError: If the field or value is not valid.
        """
        filters = self._state.filters.replace(field, value)
        if filters == self._state.filters:
            return _NOOP
        self._state.filters = filters
        return self._commit(Change.VIEW)

    def reset_filters(self) -> Outcome:
        if self._state.filters == FilterCriteria():
            return _NOOP
        self._state.filters = FilterCriteria()
        return self._commit(Change.VIEW)

    def set_sort(self, field: str) -> Outcome:
        """Sort by ``field``; selecting the active field flips direction.

        Raises:
            ValueError: If the field is not sortable.
        """
        self._state.sort = self._state.sort.toggled(field)
        return self._commit(Change.VIEW)

    # ------------------------------------------------------------------
    # Edit buffer
    # ------------------------------------------------------------------

    def start_edit(self, todo_id: int) -> Outcome:
        todo = self.get(todo_id)
        if todo is None:
            return _NOOP
        self._state.editing_id = todo_id
        self._state.edit_buffer = EditBuffer.from_todo(todo)
        return self._commit(Change.VIEW, todo)

    def edit_field(self, field: str, value: Any) -> Outcome:
        """Change one field of the edit buffer without touching the record.

        Raises:
            ValueError: If the field is not editable or the value is invalid.
        """
        buffer = self._state.edit_buffer
        if self._state.editing_id is None or buffer is None:
            return _NOOP
        if field not in EditBuffer.model_fields:
            raise ValueError(f"field {field!r} cannot be edited")
        self._state.edit_buffer = EditBuffer.model_validate(
            {**buffer.model_dump(), field: value}
        )
        return self._commit(Change.VIEW)

    def submit_edit(self) -> Outcome:
        """Apply the edit buffer to its todo via ``update``."""
        buffer = self._state.edit_buffer
        todo_id = self._state.editing_id
        if todo_id is None or buffer is None:
            return _NOOP
        return self.update(todo_id, **buffer.changes())

    def cancel_edit(self) -> Outcome:
        if self._state.editing_id is None and self._state.edit_buffer is None:
            return _NOOP
        self._state.clear_edit()
        return self._commit(Change.VIEW)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def open_history(self, todo_id: int) -> Outcome:
        todo = self.get(todo_id)
        if todo is None:
            return _NOOP
        self._state.history.open(todo)
        return self._commit(Change.VIEW, todo)

    def navigate_history(self, todo_id: int, delta: int) -> Outcome:
        todo = self.get(todo_id)
        if not self._state.history.step(todo, delta):
            return _NOOP
        return self._commit(Change.VIEW, todo)

    def close_history(self) -> Outcome:
        if self._state.history.active_id is None:
            return _NOOP
        self._state.history.close()
        return self._commit(Change.VIEW)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> None:
        """Write the full snapshot now.

        Serialization happens before any I/O so the blob reflects one
        consistent state.
        """
        blob = dump_snapshot(self._state)
        self._adapter.save(self._key, blob)

    def _commit(self, change: Change, todo: Todo | None = None) -> Outcome:
        self.save()
        return Outcome(change, todo)

    def _fire_completion_effects(self, todo: Todo) -> None:
        for name, effect in (
            ("chime", self._effects.chime),
            ("cue", lambda: self._effects.cue(todo.id)),
        ):
            try:
                effect()
            except Exception:
                logger.warning(
                    "completion_effect_failed",
                    extra={"effect": name, "todo.id": todo.id},
                    exc_info=True,
                )
