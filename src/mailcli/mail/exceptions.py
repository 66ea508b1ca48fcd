"""Specialized exceptions raised by the mailcli.mail module.

Exception hierarchy::

    MailcliError
        MailError (base for all mail errors)
            MailConfigurationError (invalid transport settings, also ValueError)
            MailValidationError (invalid message fields, also ValueError)
            MailTransportError (delivery failure)
            UnknownMailerError (named mailer not registered)
            FileReadError (body file missing or unreadable)
            InvalidBodySourceError (body-input not stdin/file, also ValueError)
"""

from __future__ import annotations

from mailcli.config.exceptions import MailcliError


class MailError(MailcliError):
    """Base exception for all mail module errors."""


class MailConfigurationError(MailError, ValueError):
    """A mailer definition or transport setting is invalid."""


class MailValidationError(MailError, ValueError):
    """A message field is missing or malformed."""


class MailTransportError(MailError):
    """The transport failed to connect or deliver."""


class UnknownMailerError(MailError):
    """The requested mailer is not registered.

    Attributes:
        name: The mailer name that was requested.
        available: Names of the registered mailers.
    """

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        """Initialize UnknownMailerError.

        Args:
            name: The mailer name that was requested.
            available: Names of the registered mailers.
        """
        message = f'The mailer "{name}" does not exist'
        if available:
            message += f" (available: {', '.join(available)})"
        super().__init__(message)
        self.name = name
        self.available = available or []


class FileReadError(MailError):
    """The body file could not be read.

    Attributes:
        path: The file path that was read.
        reason: Description of the failure.
    """

    def __init__(self, path: str, reason: str) -> None:
        """Initialize FileReadError.

        Args:
            path: The file path that was read.
            reason: Description of the failure.
        """
        super().__init__(f"Could not get contents from {path}: {reason}")
        self.path = path
        self.reason = reason


class InvalidBodySourceError(MailError, ValueError):
    """The body source is neither ``stdin`` nor ``file``.

    Attributes:
        value: The rejected body source.
    """

    def __init__(self, value: str) -> None:
        """Initialize InvalidBodySourceError.

        Args:
            value: The rejected body source.
        """
        super().__init__(f'Body-input option should be "stdin" or "file", got "{value}"')
        self.value = value


__all__ = [
    "FileReadError",
    "InvalidBodySourceError",
    "MailConfigurationError",
    "MailError",
    "MailTransportError",
    "MailValidationError",
    "UnknownMailerError",
]
