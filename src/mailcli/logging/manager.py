"""Logging setup for mailcli.

Registers two extra levels on the standard :mod:`logging` module:

- ``TRACE`` (5): protocol-level detail, e.g. the SMTP conversation
- ``SUCCESS`` (25): positive outcomes, between INFO and WARNING

Output goes to stderr through :class:`rich.logging.RichHandler` so it never
mixes with the command result printed on stdout.
"""

from __future__ import annotations

import logging
from types import SimpleNamespace

from rich.console import Console
from rich.logging import RichHandler

TRACE_LEVEL = 5
SUCCESS_LEVEL = 25

LOGGING_LEVEL = SimpleNamespace(
    TRACE=TRACE_LEVEL,
    DEBUG=logging.DEBUG,
    INFO=logging.INFO,
    SUCCESS=SUCCESS_LEVEL,
    WARNING=logging.WARNING,
    ERROR=logging.ERROR,
    CRITICAL=logging.CRITICAL,
)

#: Named shortcuts accepted wherever a level is expected. Level names win
#: over presets, so a preset must never reuse a level name.
FALLBACK_PRESETS: dict[str, int] = {
    "dev": logging.DEBUG,
    "prod": logging.WARNING,
    "verbose": TRACE_LEVEL,
}

ROOT_LOGGER_NAME = "mailcli"

logging.addLevelName(TRACE_LEVEL, "TRACE")
logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")


class _MailcliRichHandler(RichHandler):
    """RichHandler subclass so our handler can be recognised and replaced."""


def resolve_level(level: str | int | None) -> int:
    """Turn a level name, preset name or number into a numeric level.

    Args:
        level: ``"trace"``, ``"INFO"``, ``"dev"``, ``10``... None means WARNING.

    Returns:
        The numeric logging level.

    Raises:
        ValueError: If the name is neither a level nor a preset.

    Examples:
        >>> resolve_level("trace")
        5
        >>> resolve_level("prod")
        30
    """
    if level is None:
        return logging.WARNING
    if isinstance(level, int):
        return level

    key = level.strip()
    value = getattr(LOGGING_LEVEL, key.upper(), None)
    if value is not None:
        return int(value)
    preset = FALLBACK_PRESETS.get(key.lower())
    if preset is None:
        raise ValueError(f"Unknown log level '{level}'")
    return preset


def configure_logging(level: str | int | None = None, *, console: Console | None = None) -> logging.Logger:
    """Attach a Rich handler to the ``mailcli`` logger.

    Calling this again replaces the handler installed by a previous call, so
    the level can be changed at runtime.

    Args:
        level: Level name, preset name or numeric level.
        console: Console to write to (defaults to stderr).

    Returns:
        The configured ``mailcli`` logger.
    """
    numeric = resolve_level(level)
    logger = logging.getLogger(ROOT_LOGGER_NAME)

    for handler in logger.handlers[:]:
        if isinstance(handler, _MailcliRichHandler):
            logger.removeHandler(handler)

    handler = _MailcliRichHandler(
        console=console or Console(stderr=True),
        show_path=numeric <= logging.DEBUG,
        rich_tracebacks=False,
    )
    handler.setLevel(numeric)
    logger.addHandler(handler)
    logger.setLevel(numeric)
    return logger


__all__ = [
    "FALLBACK_PRESETS",
    "LOGGING_LEVEL",
    "ROOT_LOGGER_NAME",
    "SUCCESS_LEVEL",
    "TRACE_LEVEL",
    "configure_logging",
    "resolve_level",
]
