"""Compose and send email through named transports."""

from mailcli.mail.composer import BodySource, EmailComposer, SendOptions, read_body_file
from mailcli.mail.exceptions import (
    FileReadError,
    InvalidBodySourceError,
    MailConfigurationError,
    MailError,
    MailTransportError,
    MailValidationError,
    UnknownMailerError,
)
from mailcli.mail.message import MessageSpec
from mailcli.mail.registry import DEFAULT_MAILER_ALIAS, TransportRegistry
from mailcli.mail.transport import MailTransport

__all__ = [
    "DEFAULT_MAILER_ALIAS",
    "BodySource",
    "EmailComposer",
    "FileReadError",
    "InvalidBodySourceError",
    "MailConfigurationError",
    "MailError",
    "MailTransport",
    "MailTransportError",
    "MailValidationError",
    "MessageSpec",
    "SendOptions",
    "TransportRegistry",
    "UnknownMailerError",
    "read_body_file",
]
