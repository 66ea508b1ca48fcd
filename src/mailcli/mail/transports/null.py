"""Transport that accepts every message and delivers nothing.

Useful as a dry-run mailer: the composer runs end to end and reports how
many recipients would have received the message.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mailcli.mail.transport import MailTransport, message_recipients

if TYPE_CHECKING:
    from email.message import EmailMessage

__all__ = ["NullTransport"]

log = logging.getLogger(__name__)


class NullTransport(MailTransport):
    """Discard messages, counting their recipients."""

    def __init__(self) -> None:
        self.sent_count = 0

    def send(self, message: EmailMessage) -> int:
        """Count the To/Cc/Bcc recipients of ``message`` and drop it."""
        recipients = message_recipients(message)
        log.info("Null transport discarded message %r for %d recipient(s)", message.get("Subject"), len(recipients))
        self.sent_count += len(recipients)
        return len(recipients)
