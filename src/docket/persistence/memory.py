"""In-process snapshot store."""

from __future__ import annotations


class MemoryStore:
    """Dict-backed store. Snapshots vanish with the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._blobs: dict[str, str] = dict(initial or {})
        self.save_count = 0

    def load(self, key: str) -> str | None:
        return self._blobs.get(key)

    def save(self, key: str, blob: str) -> None:
        self._blobs[key] = blob
        self.save_count += 1
