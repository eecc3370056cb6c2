"""Snapshot persistence backends.

Supported backends:
    - "file" (default): one JSON file per storage key
    - "memory": in-process dict, for tests and throwaway sessions

Example:
    from docket.persistence import get_persistence_adapter

    adapter = get_persistence_adapter(config.storage)
    blob = adapter.load(config.storage.key)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from docket.persistence.base import PersistenceAdapter
from docket.persistence.file import FileStore
from docket.persistence.memory import MemoryStore

if TYPE_CHECKING:
    from docket.config.models import StorageConfig

__all__ = [
    "FileStore",
    "MemoryStore",
    "PersistenceAdapter",
    "get_persistence_adapter",
]


def get_persistence_adapter(storage: StorageConfig) -> PersistenceAdapter:
    """Build the adapter named by ``storage.backend``.

    Raises:
        ValueError: If the backend is unknown.
    """
    if storage.backend == "file":
        return FileStore(storage.path.expanduser())
    if storage.backend == "memory":
        return MemoryStore()
    raise ValueError(
        f"Unknown storage backend: {storage.backend!r}. Expected 'file' or 'memory'."
    )
