"""Main CLI application."""

from typing import Annotated

import typer

from docket.cli.commands import config, history, shell, todo, view

app = typer.Typer(
    name="docket",
    help="Docket - todo lists with revision history",
    no_args_is_help=True,
)


@app.callback()
def main(
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Log level (DEBUG, INFO, WARNING, ERROR); default from "
            "DOCKET_LOG_LEVEL or WARNING",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Shortcut for --log-level DEBUG"),
    ] = False,
    log_file: Annotated[
        bool,
        typer.Option("--log-file", help="Also write JSONL logs under $DOCKET_HOME/logs"),
    ] = False,
) -> None:
    """Docket - todo lists with revision history."""
    from docket.logging import configure_logging

    configure_logging(
        level="DEBUG" if verbose else log_level,
        use_rich=True,
        log_to_file=log_file,
    )


todo.register(app)
view.register(app)
history.register(app)
shell.register(app)
config.register(app)


if __name__ == "__main__":
    app()
