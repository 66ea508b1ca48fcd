"""List configured mailers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import typer
from rich.table import Table

from mailcli.cli.common import console
from mailcli.mail import TransportRegistry

from .new import load_registry


def _endpoint(definition: Mapping[str, Any]) -> str:
    """Return ``host:port`` for network transports, ``-`` otherwise."""
    host = definition.get("host")
    if not host:
        return "-"
    port = definition.get("port")
    return f"{host}:{port}" if port else str(host)


def _security(definition: Mapping[str, Any]) -> str:
    if definition.get("transport") != "smtp":
        return "-"
    if definition.get("use_ssl"):
        return "ssl"
    if definition.get("use_starttls", True):
        return "starttls"
    return "[yellow]plain[/]"


def _create_table(registry: TransportRegistry) -> Table:
    table = Table(title="Configured Mailers", show_lines=False)
    table.add_column("Name", style="cyan")
    table.add_column("Transport", style="green")
    table.add_column("Endpoint")
    table.add_column("Security", justify="center")
    table.add_column("User", style="dim")

    for name in registry.names():
        definition = registry.definition(name) or {}
        label = f"{name} [bold](default)[/]" if name == registry.default_name else name
        table.add_row(
            label,
            str(definition.get("transport", "-")),
            _endpoint(definition),
            _security(definition),
            str(definition.get("username") or "-"),
        )
    return table


def list_mailers(ctx: typer.Context) -> None:
    """List the mailers declared in the configuration.

    Passwords are never displayed.
    """
    registry = load_registry(ctx)
    names = registry.names()

    if not names:
        console.print("[yellow]No mailers configured.[/]")
        console.print("[dim]Add mailers under 'mail.mailers' in mailcli.conf.yml.[/]")
        raise typer.Exit(code=0)

    console.print(_create_table(registry))
    if registry.default_name not in names:
        console.print(f"\n[yellow]Default mailer '{registry.default_name}' is not declared.[/]")
    else:
        console.print(f"\n[dim]{len(names)} mailer(s), default: {registry.default_name}[/]")


__all__ = ["list_mailers"]
