"""Shared runtime bootstrap helpers for CLI entrypoints."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from datetime import UTC, date, datetime, tzinfo
from pathlib import Path
from typing import Annotated
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import typer
from pydantic import ValidationError
from rich.markup import escape

from docket.cli.console import TerminalEffects, console, error, warning
from docket.config import DocketConfig, load_config
from docket.persistence import get_persistence_adapter
from docket.session import SessionManager
from docket.session.manager import ConfirmFn

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to configuration file",
    ),
]


@dataclass(slots=True)
class Runtime:
    """Composed dependencies for CLI command handlers."""

    config: DocketConfig
    manager: SessionManager

    @property
    def tz(self) -> tzinfo:
        try:
            return ZoneInfo(self.config.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            return UTC

    def today(self) -> date:
        return datetime.now(self.tz).date()


def bootstrap_runtime(
    *,
    config_path: Path | None = None,
    confirm: ConfirmFn | None = None,
) -> Runtime:
    """Load config and hydrate the session it points at."""
    config = load_config(config_path)
    adapter = get_persistence_adapter(config.storage)
    manager = SessionManager.load(
        adapter,
        key=config.storage.key,
        effects=TerminalEffects(config.effects),
        confirm=confirm,
        default_category=config.default_category,
    )
    if manager.recovered:
        warning("Saved state was unreadable; starting from an empty session")
    return Runtime(config=config, manager=manager)


def open_runtime(config_path: Path | None = None) -> Runtime:
    """bootstrap_runtime for command handlers: config problems exit with 1."""
    try:
        return bootstrap_runtime(config_path=config_path)
    except FileNotFoundError as e:
        error(escape(str(e)))
        raise typer.Exit(1) from None
    except tomllib.TOMLDecodeError as e:
        error(f"Invalid TOML: {escape(str(e))}")
        raise typer.Exit(1) from None
    except ValidationError as e:
        error("Configuration validation failed:")
        for err in e.errors():
            loc = ".".join(str(x) for x in err["loc"])
            console.print(f"  [yellow]{loc}[/yellow]: {escape(err['msg'])}")
        raise typer.Exit(1) from None
