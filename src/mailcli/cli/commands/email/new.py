"""Create and send a simple email message."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.prompt import Prompt

from mailcli.cli.common import console, exit_error, get_state, load_cli_config
from mailcli.config import MailcliError
from mailcli.mail import DEFAULT_MAILER_ALIAS, EmailComposer, SendOptions, TransportRegistry
from mailcli.mail.message import DEFAULT_CHARSET, DEFAULT_CONTENT_TYPE
from mailcli.mail.registry import DEFAULT_MAILER_NAME


def load_registry(ctx: typer.Context) -> TransportRegistry:
    """Build the mailer registry from the effective configuration."""
    config = load_cli_config(get_state(ctx))
    try:
        return TransportRegistry.from_config(config)
    except MailcliError as e:
        exit_error(str(e))


def ask(label: str) -> str:
    """Prompt until a non-empty answer is given."""
    while True:
        answer = Prompt.ask(f"[bold]{label}[/]", console=console)
        if answer.strip():
            return answer
        console.print(f"[yellow]{label} cannot be empty.[/]")


def new_email(
    ctx: typer.Context,
    sender: Annotated[
        str | None,
        typer.Option("--from", "-f", help="The from address of the message."),
    ] = None,
    to: Annotated[
        str | None,
        typer.Option("--to", "-t", help="The to address of the message (comma separated for several)."),
    ] = None,
    subject: Annotated[
        str | None,
        typer.Option("--subject", help="The subject of the message."),
    ] = None,
    body: Annotated[
        str | None,
        typer.Option("--body", "-b", help="The body of the message, or its file path with --body-input=file."),
    ] = None,
    mailer: Annotated[
        str,
        typer.Option("--mailer", "-m", help="The mailer name."),
    ] = DEFAULT_MAILER_NAME,
    content_type: Annotated[
        str,
        typer.Option("--content-type", help="The body content type of the message."),
    ] = DEFAULT_CONTENT_TYPE,
    charset: Annotated[
        str,
        typer.Option("--charset", help="The body charset of the message."),
    ] = DEFAULT_CHARSET,
    body_input: Annotated[
        str,
        typer.Option("--body-input", help="The source the body comes from [stdin|file]."),
    ] = "stdin",
) -> None:
    """Create and send a simple email message.

    Missing from, to, subject and body values are prompted for.

    Examples:
        # Fully interactive, default mailer
        mailcli email new

        # Custom mailer and content type
        mailcli email new -m custom_mailer --content-type text/plain

        # Read the body from a file (--body holds the path)
        mailcli email new --body-input=file -b /path/to/file
    """
    registry = load_registry(ctx)
    if not registry.has(DEFAULT_MAILER_ALIAS):
        exit_error(
            f"No default mailer is configured (mail.default_mailer is '{registry.default_name}'). "
            "Declare it under 'mail.mailers' in mailcli.conf.yml."
        )

    options = SendOptions(
        mailer=mailer,
        sender=sender,
        to=to,
        subject=subject,
        body=body,
        content_type=content_type,
        charset=charset,
        body_input=body_input,
    )

    try:
        sent = EmailComposer(registry, prompt=ask).run(options)
    except MailcliError as e:
        exit_error(str(e))

    console.print(f"[green]Sent {sent} emails[/]")


__all__ = ["ask", "load_registry", "new_email"]
