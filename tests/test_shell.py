"""Tests for the interactive shell."""

from datetime import date

import pytest

from docket.cli.commands.shell import Shell, run_shell
from docket.cli.console import console
from docket.cli.runtime import Runtime
from docket.config import AutosaveConfig, DocketConfig, EffectsConfig
from docket.todos import Category, TodoStatus


@pytest.fixture
def runtime(manager) -> Runtime:
    config = DocketConfig(
        timezone="UTC",
        autosave=AutosaveConfig(interval=0.01),
        effects=EffectsConfig(chime=False),
    )
    return Runtime(config=config, manager=manager)


@pytest.fixture
def answers() -> list[bool]:
    return []


@pytest.fixture
def shell(runtime, answers) -> Shell:
    return Shell(runtime, confirm=lambda prompt: answers.pop(0))


class TestShellCommands:
    @pytest.mark.asyncio
    async def test_add_with_fields(self, shell, manager):
        await shell.handle('add "Buy milk" category=shopping due=2025-03-05')

        todo = manager.get(1)
        assert todo.title == "Buy milk"
        assert todo.category == Category.SHOPPING
        assert todo.due_date == date(2025, 3, 5)

    @pytest.mark.asyncio
    async def test_errors_do_not_stop_the_shell(self, shell, manager, capsys):
        assert await shell.handle("add")
        assert await shell.handle("toggle abc")
        assert await shell.handle("frobnicate")
        assert await shell.handle('add "unterminated')
        assert await shell.handle("add Thing priority=high")

        output = capsys.readouterr().out
        assert "Usage: add" in output
        assert "Expected a todo ID" in output
        assert "Unknown command" in output
        assert "Unknown field" in output
        assert len(manager.state.store) == 0

    @pytest.mark.asyncio
    async def test_quit(self, shell):
        assert await shell.handle("") is True
        assert await shell.handle("quit") is False
        assert await shell.handle("EXIT") is False

    @pytest.mark.asyncio
    async def test_toggle_and_history(self, shell, manager, effects, capsys):
        await shell.handle("add Draft")
        await shell.handle("toggle 1")
        await shell.handle("history 1")
        await shell.handle("prev")
        await shell.handle("prev")

        assert manager.get(1).status == TodoStatus.COMPLETE
        assert manager.state.history.position(1) == 0
        output = capsys.readouterr().out
        assert ("cue", 1) in effects.calls
        assert "1 of 2" in output

        await shell.handle("close")
        assert manager.state.history.active_id is None
        await shell.handle("next")
        assert "No history panel is open" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_edit_buffer_flow(self, shell, manager):
        await shell.handle("add Essay")
        await shell.handle("edit 1")

        assert manager.state.editing_id == 1

        await shell.handle("set title Essay draft")
        await shell.handle("set due 2025-04-01")
        assert manager.get(1).title == "Essay"

        await shell.handle("submit")

        todo = manager.get(1)
        assert todo.title == "Essay draft"
        assert todo.due_date == date(2025, 4, 1)
        assert manager.state.editing_id is None

    @pytest.mark.asyncio
    async def test_inline_edit_and_cancel(self, shell, manager):
        await shell.handle("add Essay")
        await shell.handle("edit 1 category=school description='five pages'")

        todo = manager.get(1)
        assert todo.category == Category.SCHOOL
        assert todo.description == "five pages"

        await shell.handle("edit 1")
        await shell.handle("set title Something else")
        await shell.handle("cancel")
        assert manager.get(1).title == "Essay"
        assert manager.state.edit_buffer is None

    @pytest.mark.asyncio
    async def test_inline_edit_failure_cancels(self, shell, manager):
        await shell.handle("add Essay")
        await shell.handle("edit 1 category=hobbies")

        assert manager.state.editing_id is None
        assert manager.get(1).category == Category.PERSONAL

    @pytest.mark.asyncio
    async def test_delete_asks_for_confirmation(self, shell, manager, answers):
        await shell.handle("add Essay")

        answers.append(False)
        await shell.handle("delete 1")
        assert manager.get(1) is not None

        answers.append(True)
        await shell.handle("delete 1")
        assert manager.get(1) is None

    @pytest.mark.asyncio
    async def test_filter_and_sort(self, shell, manager):
        for title in ("cherry", "banana", "Apple"):
            await shell.handle(f"add {title}")

        await shell.handle("sort title")
        await shell.handle("filter text an")
        assert [t.title for t in manager.view()] == ["banana"]

        await shell.handle("filter reset")
        await shell.handle("sort title")
        assert [t.title for t in manager.view()] == ["cherry", "banana", "Apple"]

        await shell.handle("filter category house_work")
        assert manager.state.filters.category == Category.HOUSE_WORK


class TestRunShell:
    @pytest.mark.asyncio
    async def test_reads_until_eof_and_saves_on_exit(
        self, runtime, adapter, monkeypatch
    ):
        lines = iter(["add 'Buy milk'", "list"])

        def fake_input(prompt: str = "") -> str:
            try:
                return next(lines)
            except StopIteration:
                raise EOFError from None

        monkeypatch.setattr(console, "input", fake_input)
        saves_before = adapter.save_count

        await run_shell(runtime)

        assert runtime.manager.get(1).title == "Buy milk"
        # One save for the add, plus the autosave watcher's final save.
        assert adapter.save_count >= saves_before + 2

    @pytest.mark.asyncio
    async def test_quit_command_ends_loop(self, runtime, monkeypatch):
        lines = iter(["quit", "add 'never'"])
        monkeypatch.setattr(console, "input", lambda prompt="": next(lines))

        await run_shell(runtime)

        assert len(runtime.manager.state.store) == 0
