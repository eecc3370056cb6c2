"""Rich renderables for todos, their details and history."""

from __future__ import annotations

from datetime import date, datetime

from rich.console import Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from docket.cli.console import create_table
from docket.todos import HistoryEntry, HistoryNavigator, Todo, TodoStats


def format_date(value: date) -> str:
    return value.strftime("%a, %b %d, %Y")


def format_timestamp(value: datetime) -> str:
    return value.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _status_markup(todo: Todo) -> str:
    if todo.is_complete:
        return "[green]complete[/green]"
    return "[cyan]incomplete[/cyan]"


def _due_markup(todo: Todo, today: date) -> str:
    if todo.due_date is None:
        return "[dim]-[/dim]"
    label = format_date(todo.due_date)
    if todo.is_overdue(today):
        return f"[red]{label} (OVERDUE)[/red]"
    return label


def todo_table(
    todos: list[Todo],
    *,
    today: date,
    editing_id: int | None = None,
) -> Table:
    table = create_table(
        "Your Todos",
        [
            ("ID", "dim"),
            ("Status", ""),
            ("Title", ""),
            ("Category", "magenta"),
            ("Due", ""),
            ("Description", "dim"),
        ],
    )
    for todo in todos:
        title = escape(todo.title)
        if todo.id == editing_id:
            title = f"{title} [yellow](editing)[/yellow]"
        description = todo.description
        if len(description) > 40:
            description = description[:40] + "..."
        description = escape(description)
        table.add_row(
            str(todo.id),
            _status_markup(todo),
            title,
            todo.category.label,
            _due_markup(todo, today),
            description,
        )
    return table


def stats_line(stats: TodoStats) -> str:
    return f"[dim]{stats}[/dim]"


def _entry_lines(entry: HistoryEntry) -> list[str]:
    data = entry.data
    lines = [
        f"[dim]{format_timestamp(entry.timestamp)}[/dim]",
        f"[bold]Action:[/bold] {entry.action}",
        f"[bold]Title:[/bold] {escape(data.title)}",
        f"[bold]Category:[/bold] {data.category}",
        f"[bold]Status:[/bold] {data.status}",
    ]
    if data.due_date:
        lines.append(f"[bold]Due:[/bold] {format_date(data.due_date)}")
    if data.description:
        lines.append(f"[bold]Description:[/bold] {escape(data.description)}")
    return lines


def todo_detail(todo: Todo, *, today: date) -> Panel:
    lines = [
        f"[bold]Status:[/bold] {_status_markup(todo)}",
        f"[bold]Category:[/bold] {todo.category.label}",
        f"[bold]Due:[/bold] {_due_markup(todo, today)}",
        f"[bold]Created:[/bold] {format_timestamp(todo.created_at)}",
        f"[bold]Revisions:[/bold] {len(todo.history)}",
    ]
    if todo.description:
        lines.append("")
        lines.append(escape(todo.description))
    return Panel("\n".join(lines), title=f"#{todo.id} {escape(todo.title)}")


def history_panel(todo: Todo, navigator: HistoryNavigator) -> Panel:
    """The selected entry, followed by the full timeline with it marked."""
    position = navigator.index_for(todo)
    current = navigator.current_entry(todo)

    timeline = Table.grid(padding=(0, 1))
    for index, entry in enumerate(todo.history):
        marker = "▶" if index == position else " "
        style = "bold" if index == position else "dim"
        timeline.add_row(
            marker,
            Text(format_timestamp(entry.timestamp), style=style),
            Text(str(entry.action), style=style),
            Text(entry.data.title, style=style),
        )

    body = Group("\n".join(_entry_lines(current)), Text(""), timeline)
    return Panel(
        body,
        title=f"Todo History: #{todo.id}",
        subtitle=f"{position + 1} of {len(todo.history)}",
    )
