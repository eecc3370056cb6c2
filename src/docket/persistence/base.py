"""Protocol for snapshot persistence backends."""

from __future__ import annotations

from typing import Protocol


class PersistenceAdapter(Protocol):
    """Key-value blob store for session snapshots.

    Implementations must make ``save`` atomic: a reader sees either the
    previous blob or the new one, never a partial write.
    """

    def load(self, key: str) -> str | None:
        """Return the blob stored under ``key``, or None if absent.

        Raises:
            OSError: If the backing storage exists but cannot be read.
        """
        ...

    def save(self, key: str, blob: str) -> None:
        """Replace the blob stored under ``key``.

        Raises:
            OSError: If the blob cannot be written.
        """
        ...
