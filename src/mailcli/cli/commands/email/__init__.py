"""``mailcli email`` command group."""

from __future__ import annotations

import typer

from .mailers import list_mailers
from .new import new_email

email_app = typer.Typer(
    help="Compose and send email messages.",
    no_args_is_help=True,
)

email_app.command("new")(new_email)
email_app.command("mailers")(list_mailers)

__all__ = ["email_app"]
