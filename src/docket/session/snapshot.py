"""Snapshot codec for SessionState.

A snapshot is the JSON form of SessionState. Loading validates the whole
document up front; any failure raises SnapshotError and nothing is restored.
"""

from __future__ import annotations

from pydantic import ValidationError

from docket.session.state import SNAPSHOT_VERSION, SessionState


class SnapshotError(ValueError):
    """A persisted snapshot could not be restored."""


def dump_snapshot(state: SessionState) -> str:
    return state.model_dump_json(indent=2)


def load_snapshot(blob: str) -> SessionState:
    """Parse and validate a snapshot blob.

    Resets the id counter to one past the highest stored id and clears UI
    pointers to missing todos.

    Raises:
        SnapshotError: If the blob is not a valid snapshot.
    """
    try:
        state = SessionState.model_validate_json(blob)
    except ValidationError as e:
        raise SnapshotError(
            f"invalid snapshot ({e.error_count()} error(s)): {e.errors()[0]['msg']}"
        ) from e
    if state.version != SNAPSHOT_VERSION:
        raise SnapshotError(
            f"unsupported snapshot version {state.version}; "
            f"expected {SNAPSHOT_VERSION}"
        )
    state.store.reseed_counter()
    state.drop_dangling_references()
    return state
