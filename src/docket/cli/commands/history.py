"""Revision history command."""

from __future__ import annotations

from typing import Annotated

import typer

from docket.cli.commands.todo import require_todo
from docket.cli.console import console, dim, error
from docket.cli.render import history_panel
from docket.cli.runtime import ConfigOption, open_runtime


def register(app: typer.Typer) -> None:
    """Register the history command."""

    @app.command("history")
    def history(
        todo_id: Annotated[
            int | None, typer.Argument(help="Todo ID")
        ] = None,
        step: Annotated[
            int | None,
            typer.Option(
                "--step",
                "-s",
                help="Move the cursor by N entries (negative is older)",
            ),
        ] = None,
        close: Annotated[
            bool, typer.Option("--close", help="Close the history panel")
        ] = False,
        config: ConfigOption = None,
    ) -> None:
        """Browse a todo's revision history.

        Opening a todo's history starts at its newest entry. With --step the
        cursor moves from where it was left, so repeated calls walk the
        timeline.
        """
        runtime = open_runtime(config)
        manager = runtime.manager

        if close:
            if manager.close_history().change:
                dim("History closed")
            return

        if todo_id is None:
            todo_id = manager.state.history.active_id
            if todo_id is None:
                error("No history panel is open; pass a todo ID")
                raise typer.Exit(1)

        todo = require_todo(runtime, todo_id)
        if step is None or manager.state.history.active_id != todo_id:
            manager.open_history(todo_id)
        if step:
            manager.navigate_history(todo_id, step)

        console.print(history_panel(todo, manager.state.history))
