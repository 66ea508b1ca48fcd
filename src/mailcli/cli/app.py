"""Root Typer application for mailcli."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from mailcli.cli.commands.email import email_app
from mailcli.cli.common import CliState, console
from mailcli.logging import configure_logging
from mailcli.meta import __app_name__, __description__, __version__

app = typer.Typer(
    name=__app_name__,
    help=__description__,
    no_args_is_help=True,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"{__app_name__} {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: Annotated[  # pylint: disable=unused-argument
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Configuration file (default: $MAILCLI_CONFIG, ./mailcli.conf.yml, ~/.config/mailcli/).",
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            "-l",
            help="Log level (TRACE, DEBUG, INFO, SUCCESS, WARNING, ERROR) or preset (dev, prod, verbose).",
        ),
    ] = None,
) -> None:
    """Compose and send a single email from the command line."""
    if log_level is not None:
        try:
            configure_logging(log_level)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--log-level") from e
    ctx.obj = CliState(config_path=config, log_level=log_level)


app.add_typer(email_app, name="email")


if __name__ == "__main__":
    app()
