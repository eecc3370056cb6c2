"""CLI command modules."""

from docket.cli.commands import config, history, shell, todo, view

__all__ = [
    "config",
    "history",
    "shell",
    "todo",
    "view",
]
