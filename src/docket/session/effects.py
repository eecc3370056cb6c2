"""Feedback hooks fired when a todo is completed."""

from __future__ import annotations

from typing import Protocol


class CompletionEffects(Protocol):
    """Best-effort, non-blocking feedback for a completed todo.

    Implementations may raise; the session logs and ignores failures.
    """

    def chime(self) -> None: ...

    def cue(self, todo_id: int) -> None: ...


class NullEffects:
    """Effects that do nothing."""

    def chime(self) -> None:
        pass

    def cue(self, todo_id: int) -> None:
        pass
