"""Message value built by the composer.

:class:`MessageSpec` holds the validated fields of one email and converts
them into an :class:`email.message.EmailMessage` for the transports.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import getaddresses, parseaddr

from mailcli.mail.exceptions import MailValidationError

DEFAULT_CONTENT_TYPE = "text/html"
DEFAULT_CHARSET = "UTF8"

_HEADER_FIELDS = ("sender", "to", "subject")


def normalize_charset(charset: str) -> str:
    """Return the canonical codec name for a charset label.

    Args:
        charset: Charset label such as ``UTF8`` or ``latin-1``.

    Returns:
        The MIME-friendly codec name (``utf-8``, ``iso8859-1``...).

    Raises:
        MailValidationError: If Python does not know the charset or it is
            not a text encoding.

    Examples:
        >>> normalize_charset("UTF8")
        'utf-8'
    """
    try:
        name = codecs.lookup(charset).name
        # Rejects bytes-to-bytes codecs such as base64 or zlib.
        "".encode(name)
    except LookupError as e:
        raise MailValidationError(f"Unknown charset '{charset}'") from e
    return name


def split_content_type(content_type: str) -> tuple[str, str]:
    """Split ``maintype/subtype`` into its two lowercase parts.

    Raises:
        MailValidationError: If the value is not ``maintype/subtype``.
    """
    maintype, sep, subtype = content_type.strip().partition("/")
    if not sep or not maintype or not subtype or "/" in subtype:
        raise MailValidationError(f"Invalid content type '{content_type}', expected 'maintype/subtype'")
    return maintype.lower(), subtype.lower()


def _validate_address(field_name: str, address: str) -> None:
    _, addr = parseaddr(address)
    local, sep, domain = addr.rpartition("@")
    if not sep or not local or not domain:
        raise MailValidationError(f"Invalid {field_name} address '{address}'")


@dataclass(frozen=True, slots=True)
class MessageSpec:
    """Validated fields of a single email.

    Attributes:
        sender: The ``From`` address.
        to: One or more comma-separated recipient addresses.
        subject: Subject line.
        body: Body content.
        content_type: Body MIME type (``text/html`` by default).
        charset: Body charset (``UTF8`` by default).

    Examples:
        >>> draft = MessageSpec(sender="a@x.com", to="b@x.com", subject="Hi", body="Hello")
        >>> draft.recipients
        ('b@x.com',)
    """

    sender: str
    to: str
    subject: str
    body: str
    content_type: str = DEFAULT_CONTENT_TYPE
    charset: str = DEFAULT_CHARSET

    def __post_init__(self) -> None:
        """Validate field values.

        Raises:
            MailValidationError: If a field is empty or malformed.
        """
        for field_name in ("sender", "to", "subject", "body", "content_type", "charset"):
            value = getattr(self, field_name)
            if value is None or not str(value).strip():
                raise MailValidationError(f"Message field '{field_name}' is required")

        for field_name in _HEADER_FIELDS:
            if any(char in getattr(self, field_name) for char in "\r\n"):
                raise MailValidationError(f"Message field '{field_name}' must not contain line breaks")

        _validate_address("sender", self.sender)
        if not self.recipients:
            raise MailValidationError(f"No valid recipient address in '{self.to}'")
        for address in self.recipients:
            _validate_address("recipient", address)
        split_content_type(self.content_type)
        normalize_charset(self.charset)

    @property
    def recipients(self) -> tuple[str, ...]:
        """Recipient addresses parsed from ``to``."""
        return tuple(addr for _, addr in getaddresses([self.to]) if addr)

    def to_email_message(self) -> EmailMessage:
        """Build the MIME message handed to a transport.

        Returns:
            A single-part :class:`EmailMessage`.
        """
        maintype, subtype = split_content_type(self.content_type)
        charset = normalize_charset(self.charset)

        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = self.to
        message["Subject"] = self.subject

        if maintype == "text":
            message.set_content(self.body, subtype=subtype, charset=charset)
        else:
            message.set_content(self.body.encode(charset), maintype=maintype, subtype=subtype)
        return message


__all__ = [
    "DEFAULT_CHARSET",
    "DEFAULT_CONTENT_TYPE",
    "MessageSpec",
    "normalize_charset",
    "split_content_type",
]
