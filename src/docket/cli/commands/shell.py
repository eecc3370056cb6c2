"""Interactive shell command.

The shell keeps one session open, runs the autosave loop alongside the
prompt, and re-renders after every command that changed something.
"""

from __future__ import annotations

import asyncio
import shlex
from collections.abc import Awaitable, Callable
from datetime import date
from typing import Annotated

import typer
from rich.markup import escape

from docket.cli.commands.todo import parse_category, show_todos
from docket.cli.console import console, dim, error, success, warning
from docket.cli.dates import parse_due
from docket.cli.render import history_panel, todo_detail
from docket.cli.runtime import ConfigOption, Runtime, open_runtime
from docket.session import AutosaveWatcher, Outcome
from docket.session.manager import DELETE_PROMPT

HELP_TEXT = """\
Commands
  add TITLE [description=..] [category=..] [due=..]
  list                       show the current view
  show ID                    show one todo
  edit ID [field=value ..]   start editing; with fields, apply them at once
  set FIELD VALUE            change a field of the todo being edited
  submit | cancel            apply or discard the edit
  toggle ID                  flip complete/incomplete
  delete ID                  delete after confirmation
  filter FIELD VALUE         text, status or category
  filter reset               clear every filter
  sort FIELD                 due_date or title; repeat to flip direction
  history ID                 open a todo's history at the newest entry
  prev | next                step through the open history
  close                      close the history panel
  save                       write the session now
  help | quit"""


class ShellError(Exception):
    """A command line that could not be run."""


def _parse_int(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ShellError(f"Expected a todo ID, got {value!r}") from None


def _parse_pairs(args: list[str]) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if not sep:
            raise ShellError(f"Expected field=value, got {arg!r}")
        pairs[key.strip()] = value
    return pairs


class Shell:
    """Line-oriented front end over a SessionManager."""

    def __init__(
        self,
        runtime: Runtime,
        confirm: Callable[[str], bool] = typer.confirm,
    ):
        self._runtime = runtime
        self._manager = runtime.manager
        self._confirm = confirm
        self._handlers: dict[str, Callable[[list[str]], Awaitable[None]]] = {
            "add": self._add,
            "list": self._list,
            "ls": self._list,
            "show": self._show,
            "edit": self._edit,
            "set": self._set,
            "submit": self._submit,
            "cancel": self._cancel,
            "toggle": self._toggle,
            "delete": self._delete,
            "filter": self._filter,
            "sort": self._sort,
            "history": self._history,
            "prev": self._prev,
            "next": self._next,
            "close": self._close,
            "save": self._save,
            "help": self._help,
        }

    async def handle(self, line: str) -> bool:
        """Run one command line. Returns False when the shell should exit."""
        try:
            words = shlex.split(line)
        except ValueError as e:
            error(escape(str(e)))
            return True
        if not words:
            return True

        name, args = words[0].lower(), words[1:]
        if name in ("quit", "exit"):
            return False

        handler = self._handlers.get(name)
        if handler is None:
            error(f"Unknown command: {escape(name)} (try 'help')")
            return True

        try:
            await handler(args)
        except (ShellError, ValueError) as e:
            error(escape(str(e)))
        return True

    async def run(self, prompt: str = "docket> ") -> None:
        while True:
            try:
                line = await asyncio.to_thread(console.input, prompt)
            except EOFError:
                break
            if not await self.handle(line):
                break

    # -- rendering ----------------------------------------------------------

    def _render(self, outcome: Outcome) -> None:
        if outcome.change:
            show_todos(self._runtime)

    def _render_history(self) -> None:
        history = self._manager.state.history
        if history.active_id is None:
            return
        todo = self._manager.get(history.active_id)
        if todo is not None:
            console.print(history_panel(todo, history))

    def _show_buffer(self) -> None:
        buffer = self._manager.state.edit_buffer
        if buffer is None:
            return
        due = buffer.due_date.isoformat() if buffer.due_date else "-"
        title = escape(repr(buffer.title))
        console.print(
            f"[yellow]Editing todo {self._manager.state.editing_id}[/yellow] "
            f"title={title} category={buffer.category.value!r} due={due}"
        )
        if buffer.description:
            dim(f"description={escape(repr(buffer.description))}")

    def _due(self, text: str) -> date | None:
        if not text.strip():
            return None
        parsed = parse_due(text, self._runtime.config.timezone)
        if parsed is None:
            raise ShellError(f"Could not parse due date: {text}")
        return parsed

    def _coerce(self, field: str, value: str) -> object:
        if field == "category":
            return parse_category(value)
        if field == "due_date" or field == "due":
            return self._due(value)
        return value

    # -- commands -----------------------------------------------------------

    async def _add(self, args: list[str]) -> None:
        if not args:
            raise ShellError("Usage: add TITLE [field=value ..]")
        title, pairs = args[0], _parse_pairs(args[1:])
        unknown = set(pairs) - {"description", "category", "due"}
        if unknown:
            raise ShellError(f"Unknown field(s): {', '.join(sorted(unknown))}")
        outcome = self._manager.add(
            title,
            pairs.get("description", ""),
            parse_category(pairs["category"]) if "category" in pairs else None,
            self._due(pairs.get("due", "")),
        )
        if outcome.todo is None:
            raise ShellError("Title cannot be empty")
        success(f"Added todo {outcome.todo.id}: {escape(outcome.todo.title)}")
        self._render(outcome)

    async def _list(self, args: list[str]) -> None:
        show_todos(self._runtime)

    async def _show(self, args: list[str]) -> None:
        if len(args) != 1:
            raise ShellError("Usage: show ID")
        todo = self._manager.get(_parse_int(args[0]))
        if todo is None:
            raise ShellError(f"Todo {args[0]} not found")
        console.print(todo_detail(todo, today=self._runtime.today()))

    async def _edit(self, args: list[str]) -> None:
        if not args:
            raise ShellError("Usage: edit ID [field=value ..]")
        todo_id = _parse_int(args[0])
        pairs = _parse_pairs(args[1:])
        if not self._manager.start_edit(todo_id).change:
            raise ShellError(f"Todo {todo_id} not found")
        if not pairs:
            self._show_buffer()
            return
        try:
            for field, value in pairs.items():
                field = "due_date" if field == "due" else field
                self._manager.edit_field(field, self._coerce(field, value))
        except (ShellError, ValueError):
            self._manager.cancel_edit()
            raise
        await self._submit([])

    async def _set(self, args: list[str]) -> None:
        if len(args) < 1:
            raise ShellError("Usage: set FIELD VALUE")
        if self._manager.state.editing_id is None:
            raise ShellError("Nothing is being edited (use 'edit ID')")
        field = "due_date" if args[0] == "due" else args[0]
        value = " ".join(args[1:])
        self._manager.edit_field(field, self._coerce(field, value))
        self._show_buffer()

    async def _submit(self, args: list[str]) -> None:
        todo_id = self._manager.state.editing_id
        if todo_id is None:
            raise ShellError("Nothing is being edited")
        outcome = self._manager.submit_edit()
        if outcome.todo is None:
            raise ShellError("Title cannot be empty")
        success(f"Updated todo {todo_id}")
        self._render(outcome)

    async def _cancel(self, args: list[str]) -> None:
        if self._manager.cancel_edit().change:
            dim("Edit cancelled")

    async def _toggle(self, args: list[str]) -> None:
        if len(args) != 1:
            raise ShellError("Usage: toggle ID")
        outcome = self._manager.toggle_status(_parse_int(args[0]))
        if outcome.todo is None:
            raise ShellError(f"Todo {args[0]} not found")
        if not outcome.todo.is_complete:
            dim(f"Todo {outcome.todo.id} reopened")
        elif not self._runtime.config.effects.cue:
            success(f"Todo {outcome.todo.id} complete")
        self._render(outcome)

    async def _delete(self, args: list[str]) -> None:
        if len(args) != 1:
            raise ShellError("Usage: delete ID")
        todo_id = _parse_int(args[0])
        if self._manager.get(todo_id) is None:
            raise ShellError(f"Todo {todo_id} not found")
        confirmed = await asyncio.to_thread(self._confirm, DELETE_PROMPT)
        outcome = self._manager.delete(todo_id, confirmed=confirmed)
        if not outcome.change:
            dim("Cancelled")
            return
        success(f"Deleted todo {todo_id}")
        self._render(outcome)

    async def _filter(self, args: list[str]) -> None:
        if args == ["reset"]:
            self._render(self._manager.reset_filters())
            return
        if not args:
            raise ShellError("Usage: filter FIELD VALUE | filter reset")
        field, value = args[0], " ".join(args[1:])
        if field == "category" and value != "all":
            value = parse_category(value)
        self._render(self._manager.set_filter(field, value))

    async def _sort(self, args: list[str]) -> None:
        if len(args) != 1:
            raise ShellError("Usage: sort FIELD")
        outcome = self._manager.set_sort(args[0])
        sort = self._manager.state.sort
        dim(f"Sorted by {sort.by} ({sort.direction})")
        self._render(outcome)

    async def _history(self, args: list[str]) -> None:
        if len(args) != 1:
            raise ShellError("Usage: history ID")
        if not self._manager.open_history(_parse_int(args[0])).change:
            raise ShellError(f"Todo {args[0]} not found")
        self._render_history()

    async def _step(self, delta: int) -> None:
        active_id = self._manager.state.history.active_id
        if active_id is None:
            raise ShellError("No history panel is open (use 'history ID')")
        self._manager.navigate_history(active_id, delta)
        self._render_history()

    async def _prev(self, args: list[str]) -> None:
        await self._step(-1)

    async def _next(self, args: list[str]) -> None:
        await self._step(1)

    async def _close(self, args: list[str]) -> None:
        if self._manager.close_history().change:
            dim("History closed")

    async def _save(self, args: list[str]) -> None:
        self._manager.save()
        dim("Saved")

    async def _help(self, args: list[str]) -> None:
        console.print(HELP_TEXT, markup=False, highlight=False)


async def run_shell(runtime: Runtime) -> None:
    """Run the prompt loop with autosave active for its lifetime."""
    watcher: AutosaveWatcher | None = None
    if runtime.config.autosave.enabled:
        watcher = AutosaveWatcher(
            runtime.manager, interval=runtime.config.autosave.interval
        )
        await watcher.start()
    try:
        await Shell(runtime).run()
    finally:
        if watcher is not None:
            await watcher.stop()


def register(app: typer.Typer) -> None:
    """Register the shell command."""

    @app.command("shell")
    def shell(
        quiet: Annotated[
            bool, typer.Option("--quiet", "-q", help="Skip the initial listing")
        ] = False,
        config: ConfigOption = None,
    ) -> None:
        """Start an interactive session."""
        runtime = open_runtime(config)
        if not quiet:
            show_todos(runtime)
        dim("Type 'help' for commands, 'quit' to exit.")
        try:
            asyncio.run(run_shell(runtime))
        except KeyboardInterrupt:
            warning("Interrupted")
