"""Compose one email from options and prompts, then send it.

The composer runs these steps in order:

1. Resolve the transport for the requested mailer.
2. Prompt for each of from, to, subject and body that was not supplied.
3. Resolve the body: used verbatim (``stdin``) or read from the path given
   as the body (``file``).
4. Build a :class:`~mailcli.mail.message.MessageSpec`.
5. Start the transport, send, and stop it on every exit path.

Nothing is retried: any failure propagates once the transport is released.

Note:
    In ``file`` mode the ``body`` option (or the answer to the ``Body``
    prompt) is the path of the file to read, not the body text.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path

from mailcli.mail.exceptions import FileReadError, InvalidBodySourceError
from mailcli.mail.message import DEFAULT_CHARSET, DEFAULT_CONTENT_TYPE, MessageSpec, normalize_charset
from mailcli.mail.registry import DEFAULT_MAILER_NAME, TransportRegistry

log = logging.getLogger(__name__)

#: Prompted fields, in prompt order, mapped to their prompt labels.
PROMPTED_FIELDS: tuple[tuple[str, str], ...] = (
    ("sender", "From"),
    ("to", "To"),
    ("subject", "Subject"),
    ("body", "Body"),
)

PromptFn = Callable[[str], str]
ReadFileFn = Callable[[str], bytes]


class BodySource(str, Enum):
    """Where the body option's content comes from.

    Attributes:
        STDIN: The body option is the literal body text.
        FILE: The body option is a path whose contents become the body.
    """

    STDIN = "stdin"
    FILE = "file"


@dataclass(frozen=True, slots=True)
class SendOptions:
    """Options of one send invocation.

    ``None`` fields are prompted for. ``content_type`` and ``charset`` are
    never prompted.

    Attributes:
        mailer: Name of the mailer to send with.
        sender: From address.
        to: Recipient address(es), comma separated.
        subject: Subject line.
        body: Body text, or a file path when ``body_input`` is ``file``.
        content_type: Body MIME type.
        charset: Body charset.
        body_input: ``stdin`` or ``file``.
    """

    mailer: str = DEFAULT_MAILER_NAME
    sender: str | None = None
    to: str | None = None
    subject: str | None = None
    body: str | None = None
    content_type: str = DEFAULT_CONTENT_TYPE
    charset: str = DEFAULT_CHARSET
    body_input: str = BodySource.STDIN.value


def read_body_file(path: str) -> bytes:
    """Read a body file as raw bytes.

    Raises:
        FileReadError: If the path does not exist or cannot be read.
    """
    try:
        return Path(path).expanduser().read_bytes()
    except OSError as e:
        raise FileReadError(path, e.strerror or str(e)) from e


def parse_body_source(value: str | BodySource) -> BodySource:
    """Return the :class:`BodySource` for ``value``.

    Raises:
        InvalidBodySourceError: If ``value`` is neither ``stdin`` nor ``file``.

    Examples:
        >>> parse_body_source("file")
        <BodySource.FILE: 'file'>
    """
    try:
        return BodySource(value)
    except ValueError as e:
        raise InvalidBodySourceError(str(value)) from e


class EmailComposer:
    """Collect message fields and send them through a registered mailer.

    Args:
        registry: Registry the mailer is looked up in.
        prompt: Called with a field label for every missing field; returns
            the value to use. Blocks until the value is available.
        read_file: Returns the raw contents of a body file.
    """

    def __init__(
        self,
        registry: TransportRegistry,
        prompt: PromptFn,
        read_file: ReadFileFn = read_body_file,
    ) -> None:
        self._registry = registry
        self._prompt = prompt
        self._read_file = read_file

    def complete(self, options: SendOptions) -> SendOptions:
        """Return ``options`` with every missing prompted field filled in."""
        answers: dict[str, str] = {}
        for field_name, label in PROMPTED_FIELDS:
            if getattr(options, field_name) is None:
                answers[field_name] = self._prompt(label)
        return replace(options, **answers) if answers else options

    def resolve_body(self, options: SendOptions) -> str:
        """Return the body text according to ``options.body_input``.

        Raises:
            InvalidBodySourceError: If the body source is unknown.
            FileReadError: If the body file cannot be read or decoded.
            MailValidationError: If the charset is unknown.
        """
        source = parse_body_source(options.body_input)
        body = options.body or ""
        if source is BodySource.STDIN:
            return body

        try:
            content = self._read_file(body)
        except OSError as e:
            raise FileReadError(body, e.strerror or str(e)) from e
        charset = normalize_charset(options.charset)
        try:
            return content.decode(charset)
        except UnicodeDecodeError as e:
            raise FileReadError(body, f"content is not valid {charset}") from e

    def build_message(self, options: SendOptions) -> MessageSpec:
        """Prompt for missing fields, resolve the body and build the message."""
        options = self.complete(options)
        body = self.resolve_body(options)
        return MessageSpec(
            sender=options.sender or "",
            to=options.to or "",
            subject=options.subject or "",
            body=body,
            content_type=options.content_type,
            charset=options.charset,
        )

    def run(self, options: SendOptions) -> int:
        """Compose and send one message.

        Args:
            options: Invocation options.

        Returns:
            Number of recipients the message was delivered to.

        Raises:
            UnknownMailerError: If the mailer is not registered.
            InvalidBodySourceError: If ``body_input`` is not stdin/file.
            FileReadError: If the body file cannot be read.
            MailValidationError: If a message field is invalid.
            MailTransportError: If the transport fails.
        """
        transport = self._registry.get(options.mailer)
        log.debug("Using mailer '%s' (%s)", options.mailer, type(transport).__name__)

        draft = self.build_message(options)
        message = draft.to_email_message()

        with transport.session():
            sent = transport.send(message)

        log.info("Sent %d email(s) via mailer '%s'", sent, options.mailer)
        return sent


__all__ = [
    "PROMPTED_FIELDS",
    "BodySource",
    "EmailComposer",
    "SendOptions",
    "parse_body_source",
    "read_body_file",
]
