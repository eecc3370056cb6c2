"""Filter and sort commands.

Both persist their settings with the session, so a later ``docket list``
shows the same view.
"""

from __future__ import annotations

from typing import Annotated

import click
import typer
from rich.markup import escape

from docket.cli.commands.todo import parse_category, show_todos
from docket.cli.console import console, dim, error
from docket.cli.runtime import ConfigOption, open_runtime
from docket.todos.query import FILTER_FIELDS, SORT_FIELDS


def register(app: typer.Typer) -> None:
    """Register the filter and sort commands."""

    @app.command("filter")
    def filter_cmd(
        field: Annotated[
            str | None,
            typer.Argument(help=f"Field: {', '.join(FILTER_FIELDS)}"),
        ] = None,
        value: Annotated[
            str | None,
            typer.Argument(help="Value; 'all' clears status and category"),
        ] = None,
        reset: Annotated[
            bool, typer.Option("--reset", help="Clear every filter")
        ] = False,
        config: ConfigOption = None,
    ) -> None:
        """Narrow the todo list by text, status or category."""
        runtime = open_runtime(config)
        manager = runtime.manager

        if reset:
            manager.reset_filters()
        elif field is None:
            filters = manager.state.filters
            console.print(f"[bold]text:[/bold] {filters.text or '[dim]-[/dim]'}")
            console.print(f"[bold]status:[/bold] {filters.status}")
            console.print(f"[bold]category:[/bold] {filters.category}")
            return
        else:
            if value is None:
                if field != "text":
                    error(f"A value is required for {field!r}")
                    raise typer.Exit(1)
                value = ""
            if field == "category" and value != "all":
                try:
                    value = parse_category(value)
                except ValueError as e:
                    error(escape(str(e)))
                    raise typer.Exit(1) from None
            try:
                outcome = manager.set_filter(field, value)
            except ValueError as e:
                error(escape(str(e)))
                raise typer.Exit(1) from None
            if not outcome.change:
                dim("Filter unchanged")

        show_todos(runtime)

    @app.command("sort")
    def sort_cmd(
        field: Annotated[
            str | None,
            typer.Argument(help=f"Field: {', '.join(SORT_FIELDS)}"),
        ] = None,
        config: ConfigOption = None,
    ) -> None:
        """Sort by a field; sorting by the active field flips direction."""
        if field is None:
            ctx = click.get_current_context()
            click.echo(ctx.get_help())
            raise typer.Exit(0)

        runtime = open_runtime(config)
        try:
            runtime.manager.set_sort(field)
        except ValueError as e:
            error(escape(str(e)))
            raise typer.Exit(1) from None

        sort = runtime.manager.state.sort
        dim(f"Sorted by {sort.by} ({sort.direction})")
        show_todos(runtime)
