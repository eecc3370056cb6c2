"""Shared test fixtures and factories."""

import logging
from collections.abc import Iterator
from datetime import UTC, date, datetime, timedelta
from pathlib import Path

import pytest

from docket.config.paths import ENV_VAR, get_docket_home
from docket.persistence import MemoryStore
from docket.session import SessionManager
from docket.todos import Category, Todo, TodoStore

# =============================================================================
# Clock and Effects
# =============================================================================


class FakeClock:
    """Deterministic clock that advances one second per reading."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2025, 3, 1, 9, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


class RecordingEffects:
    """Completion effects that record what fired."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, int | None]] = []

    def chime(self) -> None:
        self.calls.append(("chime", None))

    def cue(self, todo_id: int) -> None:
        self.calls.append(("cue", todo_id))


class ExplodingEffects:
    """Completion effects whose every hook raises."""

    def chime(self) -> None:
        raise RuntimeError("no audio device")

    def cue(self, todo_id: int) -> None:
        raise RuntimeError("no display")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def effects() -> RecordingEffects:
    return RecordingEffects()


# =============================================================================
# Store and Session Fixtures
# =============================================================================


@pytest.fixture
def store() -> TodoStore:
    return TodoStore()


@pytest.fixture
def adapter() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def manager(adapter: MemoryStore, clock: FakeClock, effects: RecordingEffects):
    """Fresh SessionManager over an in-memory adapter."""
    return SessionManager.load(adapter, clock=clock, effects=effects)


def make_todo(
    store: TodoStore,
    title: str,
    *,
    due_date: date | None = None,
    category: Category = Category.PERSONAL,
    description: str = "",
) -> Todo:
    """Factory: create a todo and assert it was accepted."""
    todo = store.create(title, description, category, due_date)
    assert todo is not None
    return todo


# =============================================================================
# Path Isolation
# =============================================================================


@pytest.fixture
def docket_home(monkeypatch, tmp_path: Path) -> Iterator[Path]:
    """Point DOCKET_HOME at a temp dir and run from an empty cwd."""
    home = tmp_path / "docket-home"
    monkeypatch.setenv(ENV_VAR, str(home))
    for var in (
        "DOCKET_STATE_PATH",
        "DOCKET_STORAGE_BACKEND",
        "DOCKET_AUTOSAVE_INTERVAL",
        "DOCKET_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    get_docket_home.cache_clear()
    yield home
    get_docket_home.cache_clear()


# =============================================================================
# CLI Test Helpers
# =============================================================================


@pytest.fixture
def restore_root_logger() -> Iterator[None]:
    """Undo handler changes made by configure_logging()."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner with colors disabled."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1"})
