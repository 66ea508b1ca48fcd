"""Shared helpers for mailcli commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from mailcli.config import MailcliError, load_config
from mailcli.logging import configure_logging

if TYPE_CHECKING:
    from box import Box

console = Console()
error_console = Console(stderr=True)


@dataclass
class CliState:
    """Global options captured by the root callback.

    Attributes:
        config_path: Explicit ``--config`` file.
        log_level: Explicit ``--log-level``; the config value applies when None.
    """

    config_path: Path | None = None
    log_level: str | None = None


def exit_error(message: str, code: int = 1) -> NoReturn:
    """Print an error on stderr and exit with ``code``."""
    error_console.print(f"[red]Error:[/] {escape(message)}")
    raise typer.Exit(code=code)


def get_state(ctx: typer.Context) -> CliState:
    """Return the root CLI state, or defaults when invoked standalone."""
    state = ctx.find_object(CliState)
    return state if state is not None else CliState()


def load_cli_config(state: CliState) -> Box:
    """Load the configuration for a command, exiting on failure.

    Applies ``logging.level`` from the configuration unless ``--log-level``
    was given.
    """
    try:
        config = load_config(state.config_path)
    except MailcliError as e:
        exit_error(f"Failed to load configuration: {e}")

    if state.log_level is None:
        level = (config.get("logging") or {}).get("level")
        try:
            configure_logging(level)
        except ValueError as e:
            exit_error(f"Invalid logging.level in configuration: {e}")
    return config


__all__ = [
    "CliState",
    "console",
    "error_console",
    "exit_error",
    "get_state",
    "load_cli_config",
]
