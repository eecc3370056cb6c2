"""Autosave watcher: periodically writes the full session snapshot.

The loop runs on the caller's event loop. ``SessionManager.save()`` has no
await points, so a save can never interleave with a command running on the
same loop.
"""

import asyncio
import logging

from docket.session.manager import SessionManager

logger = logging.getLogger(__name__)


class AutosaveWatcher:
    """Saves a session every ``interval`` seconds until stopped.

    Example:
        watcher = AutosaveWatcher(manager, interval=30.0)
        await watcher.start()
        ...
        await watcher.stop()  # performs one final save
    """

    def __init__(self, manager: SessionManager, interval: float = 30.0):
        if interval <= 0:
            raise ValueError("autosave interval must be positive")
        self._manager = manager
        self._interval = interval
        self._running = False
        self._task: asyncio.Task | None = None
        self._save_count = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def save_count(self) -> int:
        return self._save_count

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        logger.info("autosave_started", extra={"autosave.interval": self._interval})
        self._task = asyncio.create_task(self._save_loop())

    async def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        self._save()
        logger.info("autosave_stopped", extra={"autosave.saves": self._save_count})

    async def _save_loop(self) -> None:
        while self._running:
            await asyncio.sleep(self._interval)
            self._save()

    def _save(self) -> None:
        try:
            self._manager.save()
            self._save_count += 1
        except Exception as e:
            logger.error("autosave_failed", extra={"error.message": str(e)})
