"""Todo management commands."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.markup import escape

from docket.cli.console import confirm_or_cancel, console, dim, error, success, warning
from docket.cli.runtime import ConfigOption, Runtime, open_runtime
from docket.cli.render import stats_line, todo_detail, todo_table
from docket.todos import Category, Todo


def _fail(msg: str) -> typer.Exit:
    error(msg)
    return typer.Exit(1)


def parse_category(value: str) -> Category:
    """Accept a category by value ("house work") or name ("house_work")."""
    normalized = value.strip().lower().replace("_", " ")
    try:
        return Category(normalized)
    except ValueError:
        valid = ", ".join(c.value for c in Category)
        raise ValueError(f"Unknown category {value!r}. Valid: {valid}") from None


def require_todo(runtime: Runtime, todo_id: int) -> Todo:
    todo = runtime.manager.get(todo_id)
    if todo is None:
        raise _fail(f"Todo {todo_id} not found")
    return todo


def show_todos(runtime: Runtime) -> None:
    """Print the current view and the stats footer."""
    manager = runtime.manager
    todos = manager.view()
    if todos:
        console.print(
            todo_table(
                todos,
                today=runtime.today(),
                editing_id=manager.state.editing_id,
            )
        )
    else:
        warning("No todos found")
    console.print(stats_line(manager.stats()))


def register(app: typer.Typer) -> None:
    """Register the todo commands."""

    @app.command("add")
    def add(
        title: Annotated[str, typer.Argument(help="Todo title")],
        description: Annotated[
            str, typer.Option("--description", "-d", help="Longer description")
        ] = "",
        category: Annotated[
            str | None,
            typer.Option("--category", help="Category (default from config)"),
        ] = None,
        due: Annotated[
            str | None,
            typer.Option("--due", help="Due date (ISO 8601 or natural language)"),
        ] = None,
        config: ConfigOption = None,
    ) -> None:
        """Add a new todo."""
        from docket.cli.dates import parse_due

        runtime = open_runtime(config)
        try:
            parsed_category = parse_category(category) if category else None
        except ValueError as e:
            raise _fail(escape(str(e))) from None

        due_date = None
        if due:
            due_date = parse_due(due, runtime.config.timezone)
            if due_date is None:
                raise _fail(f"Could not parse due date: {due}")

        outcome = runtime.manager.add(title, description, parsed_category, due_date)
        if outcome.todo is None:
            raise _fail("Title cannot be empty")
        success(f"Added todo {outcome.todo.id}: {escape(outcome.todo.title)}")

    @app.command("list")
    def list_cmd(config: ConfigOption = None) -> None:
        """List todos using the saved filters and sort order."""
        show_todos(open_runtime(config))

    @app.command("show")
    def show(
        todo_id: Annotated[int, typer.Argument(help="Todo ID")],
        config: ConfigOption = None,
    ) -> None:
        """Show one todo in detail."""
        runtime = open_runtime(config)
        todo = require_todo(runtime, todo_id)
        console.print(todo_detail(todo, today=runtime.today()))

    @app.command("edit")
    def edit(
        todo_id: Annotated[int, typer.Argument(help="Todo ID")],
        title: Annotated[
            str | None, typer.Option("--title", "-t", help="New title")
        ] = None,
        description: Annotated[
            str | None,
            typer.Option("--description", "-d", help="New description"),
        ] = None,
        category: Annotated[
            str | None, typer.Option("--category", help="New category")
        ] = None,
        due: Annotated[
            str | None,
            typer.Option("--due", help="Due date (ISO 8601 or natural language)"),
        ] = None,
        clear_due: Annotated[
            bool, typer.Option("--clear-due", help="Remove due date")
        ] = False,
        config: ConfigOption = None,
    ) -> None:
        """Update a todo's fields."""
        from docket.cli.dates import parse_due

        if all(v is None for v in (title, description, category, due)) and not clear_due:
            raise _fail(
                "at least one of --title, --description, --category, --due "
                "or --clear-due is required"
            )

        runtime = open_runtime(config)
        manager = runtime.manager
        require_todo(runtime, todo_id)

        fields: dict[str, object] = {}
        if title is not None:
            fields["title"] = title
        if description is not None:
            fields["description"] = description
        try:
            if category is not None:
                fields["category"] = parse_category(category)
        except ValueError as e:
            raise _fail(escape(str(e))) from None
        if clear_due:
            fields["due_date"] = None
        elif due is not None:
            parsed = parse_due(due, runtime.config.timezone)
            if parsed is None:
                raise _fail(f"Could not parse due date: {due}")
            fields["due_date"] = parsed

        manager.start_edit(todo_id)
        try:
            for field, value in fields.items():
                manager.edit_field(field, value)
        except ValueError as e:
            manager.cancel_edit()
            raise _fail(escape(str(e))) from None

        outcome = manager.submit_edit()
        if outcome.todo is None:
            manager.cancel_edit()
            raise _fail("Title cannot be empty")
        success(f"Updated todo {todo_id}")

    @app.command("toggle")
    def toggle(
        todo_id: Annotated[int, typer.Argument(help="Todo ID")],
        config: ConfigOption = None,
    ) -> None:
        """Flip a todo between incomplete and complete."""
        runtime = open_runtime(config)
        require_todo(runtime, todo_id)
        outcome = runtime.manager.toggle_status(todo_id)
        if outcome.todo is None:
            return
        if not outcome.todo.is_complete:
            dim(f"Todo {todo_id} reopened")
        elif not runtime.config.effects.cue:
            success(f"Todo {todo_id} complete")

    @app.command("delete")
    def delete(
        todo_id: Annotated[int, typer.Argument(help="Todo ID")],
        force: Annotated[
            bool, typer.Option("--force", "-f", help="Skip confirmation")
        ] = False,
        config: ConfigOption = None,
    ) -> None:
        """Delete a todo and its history."""
        from docket.session.manager import DELETE_PROMPT

        runtime = open_runtime(config)
        todo = require_todo(runtime, todo_id)
        confirmed = confirm_or_cancel(DELETE_PROMPT, force)
        if runtime.manager.delete(todo_id, confirmed=confirmed).change:
            success(f"Deleted todo {todo_id}: {escape(todo.title)}")
