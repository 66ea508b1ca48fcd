"""Transport contract used by the composer.

A transport is started, sends one or more messages, then stopped. Each
``send`` reports how many recipients accepted the message.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from email.utils import getaddresses
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator
    from email.message import EmailMessage

log = logging.getLogger(__name__)


def message_recipients(message: EmailMessage) -> list[str]:
    """Return the addresses found in the To, Cc and Bcc headers of ``message``."""
    fields = [value for header in ("To", "Cc", "Bcc") for value in message.get_all(header, [])]
    return [addr for _, addr in getaddresses(fields) if addr]


class MailTransport(ABC):
    """Base class for mail delivery backends.

    Subclasses implement :meth:`send`; connection-oriented transports also
    override :meth:`start` and :meth:`stop` and call ``super()`` so that
    :attr:`is_started` stays accurate.
    """

    _started: bool = False

    @property
    def is_started(self) -> bool:
        """Return True between :meth:`start` and :meth:`stop`."""
        return self._started

    def start(self) -> None:
        """Acquire the transport (open connections, authenticate...)."""
        self._started = True

    def stop(self) -> None:
        """Release the transport. Safe to call when not started."""
        self._started = False

    @abstractmethod
    def send(self, message: EmailMessage) -> int:
        """Deliver ``message``.

        Args:
            message: The message to deliver.

        Returns:
            Number of recipients the message was delivered to.

        Raises:
            MailTransportError: If delivery fails.
        """

    @contextmanager
    def session(self) -> Iterator[MailTransport]:
        """Start the transport and stop it on every exit path.

        ``stop()`` is only called when ``start()`` returned normally.

        Examples:
            >>> with transport.session() as active:  # doctest: +SKIP
            ...     active.send(message)
        """
        self.start()
        log.debug("Transport %s started", type(self).__name__)
        try:
            yield self
        finally:
            self.stop()
            log.debug("Transport %s stopped", type(self).__name__)


__all__ = ["MailTransport", "message_recipients"]
