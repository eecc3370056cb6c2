"""Configuration inspection commands."""

from pathlib import Path
from typing import Annotated

import click
import typer

from docket.cli.console import console, create_table, dim, error


def register(app: typer.Typer) -> None:
    """Register the config command."""

    @app.command()
    def config(
        action: Annotated[
            str | None,
            typer.Argument(help="Action: show, path"),
        ] = None,
        path: Annotated[
            Path | None,
            typer.Option(
                "--path",
                "-p",
                help="Path to config file (default: search docket.toml, "
                "$DOCKET_HOME/config.toml)",
            ),
        ] = None,
    ) -> None:
        """Inspect configuration."""
        if action is None:
            ctx = click.get_current_context()
            click.echo(ctx.get_help())
            raise typer.Exit(0)

        from docket.cli.runtime import open_runtime
        from docket.config.paths import get_all_paths

        if action == "show":
            runtime = open_runtime(path)
            settings = runtime.config

            table = create_table(
                "Effective Configuration",
                [("Setting", "cyan"), ("Value", "green")],
            )
            table.add_row("storage.backend", settings.storage.backend)
            table.add_row("storage.path", str(settings.storage.path))
            table.add_row("storage.key", settings.storage.key)
            table.add_row("autosave.enabled", str(settings.autosave.enabled))
            table.add_row("autosave.interval", f"{settings.autosave.interval:g}s")
            table.add_row("effects.chime", str(settings.effects.chime))
            table.add_row("effects.cue", str(settings.effects.cue))
            table.add_row("default_category", settings.default_category.value)
            table.add_row("timezone", settings.timezone)
            console.print(table)

        elif action == "path":
            for name, value in get_all_paths().items():
                exists = "" if value.exists() else " [dim](missing)[/dim]"
                console.print(f"[bold]{name}:[/bold] {value}{exists}")
            if path is not None:
                dim(f"explicit config: {path.expanduser()}")

        else:
            error(f"Unknown action: {action}")
            console.print("Valid actions: show, path")
            raise typer.Exit(1)
