"""SMTP transport backed by :mod:`smtplib`.

The connection is opened by :meth:`SMTPTransport.start` and closed by
:meth:`SMTPTransport.stop`, so several messages can share one session.

Examples:
    Send through a relay with STARTTLS and authentication::

        from mailcli.mail.transports.smtp import SMTPCredentials, SMTPTransport

        transport = SMTPTransport(
            "smtp.example.com",
            credentials=SMTPCredentials(username="bot", password="secret"),
        )
        with transport.session():
            transport.send(message)
"""

from __future__ import annotations

import io
import logging
import smtplib
import ssl
from contextlib import contextmanager, redirect_stderr
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from mailcli.logging import TRACE_LEVEL
from mailcli.mail.exceptions import MailConfigurationError, MailTransportError
from mailcli.mail.transport import MailTransport, message_recipients

if TYPE_CHECKING:
    from collections.abc import Iterator
    from email.message import EmailMessage

__all__ = ["SMTPCredentials", "SMTPSecurity", "SMTPTransport"]

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SMTPCredentials:
    """Login credentials for an SMTP server.

    Attributes:
        username: Account name. No login happens when empty.
        password: Account password.
    """

    username: str | None = None
    password: str | None = None


@dataclass(frozen=True, slots=True)
class SMTPSecurity:
    """Transport security options.

    Attributes:
        use_ssl: Connect with implicit TLS (``SMTP_SSL``, usually port 465).
        use_starttls: Upgrade a plain connection with STARTTLS when offered.
            Ignored when ``use_ssl`` is set.
        verify_certificates: Verify the server certificate chain.
    """

    use_ssl: bool = False
    use_starttls: bool = True
    verify_certificates: bool = True

    def ssl_context(self) -> ssl.SSLContext:
        """Build the SSL context used for SSL and STARTTLS."""
        context = ssl.create_default_context()
        if not self.verify_certificates:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context


@contextmanager
def _capture_smtp_debug() -> Iterator[io.StringIO]:
    """Redirect stderr, where smtplib prints its debug output, into a buffer."""
    buffer = io.StringIO()
    with redirect_stderr(buffer):
        yield buffer


def _log_smtp_debug_output(buffer: io.StringIO) -> None:
    """Log captured smtplib debug lines at TRACE level."""
    if not log.isEnabledFor(TRACE_LEVEL):
        return

    for raw_line in buffer.getvalue().splitlines():
        line = raw_line.strip()
        if not line:
            continue
        if line.startswith("send:"):
            log.log(TRACE_LEVEL, "[SMTP] >>> %s", line[len("send:") :].strip())
        elif line.startswith("reply:"):
            log.log(TRACE_LEVEL, "[SMTP] <<< %s", line[len("reply:") :].strip())
        else:
            log.log(TRACE_LEVEL, "[SMTP] %s", line)


def _first_common_name(entries: Any) -> str | None:
    """Return the commonName from a ``getpeercert()`` subject/issuer tuple."""
    try:
        for rdn in entries:
            for key, value in rdn:
                if key == "commonName":
                    return str(value)
    except (TypeError, ValueError):
        return None
    return None


def _extract_ssl_info(sock: ssl.SSLSocket | None) -> dict[str, Any]:
    """Collect TLS session details from a connected socket.

    Every lookup is best effort: a failing accessor only drops its keys.

    Args:
        sock: The socket of a connected SMTP client, or None.

    Returns:
        Dictionary with ``version``, ``cipher_*``, ``peer_cn``, ``issuer_cn``,
        ``valid_from`` and ``valid_until`` when available.
    """
    if sock is None:
        return {}

    info: dict[str, Any] = {}
    try:
        info["version"] = sock.version()
    except Exception:  # pylint: disable=broad-exception-caught
        info["version"] = "unknown"

    try:
        cipher = sock.cipher()
    except Exception:  # pylint: disable=broad-exception-caught
        cipher = None
    if cipher:
        info["cipher_name"], info["cipher_protocol"], info["cipher_bits"] = cipher

    try:
        cert = sock.getpeercert()
    except Exception:  # pylint: disable=broad-exception-caught
        cert = None
    if cert:
        peer_cn = _first_common_name(cert.get("subject", ()))
        if peer_cn:
            info["peer_cn"] = peer_cn
        issuer_cn = _first_common_name(cert.get("issuer", ()))
        if issuer_cn:
            info["issuer_cn"] = issuer_cn
        if "notBefore" in cert:
            info["valid_from"] = cert["notBefore"]
        if "notAfter" in cert:
            info["valid_until"] = cert["notAfter"]
    return info


class SMTPTransport(MailTransport):
    """Synchronous SMTP transport.

    Args:
        host: SMTP server host name.
        port: SMTP server port (default: 587).
        credentials: Optional login credentials.
        security: TLS options (default: STARTTLS when offered).
        timeout: Socket timeout in seconds (default: 30.0).

    Raises:
        MailConfigurationError: If *host* is empty, *port* is out of range or
            *timeout* is not positive.
    """

    def __init__(
        self,
        host: str,
        *,
        port: int = 587,
        credentials: SMTPCredentials | None = None,
        security: SMTPSecurity | None = None,
        timeout: float = 30.0,
    ) -> None:
        if not host:
            raise MailConfigurationError("SMTP host is required")
        if not 0 < port < 65536:
            raise MailConfigurationError(f"Invalid SMTP port {port}")
        if timeout <= 0:
            raise MailConfigurationError("Timeout must be greater than 0")

        self._host = host
        self._port = port
        self._credentials = credentials or SMTPCredentials()
        self._security = security or SMTPSecurity()
        self._timeout = timeout
        self._client: smtplib.SMTP | None = None

    @property
    def host(self) -> str:
        """SMTP server host name."""
        return self._host

    @property
    def port(self) -> int:
        """SMTP server port."""
        return self._port

    @contextmanager
    def _traced(self) -> Iterator[None]:
        """Capture smtplib debug output and replay it as TRACE records."""
        if not log.isEnabledFor(TRACE_LEVEL):
            yield
            return
        # Replay only once stderr is restored, the log handler writes there too.
        captured = io.StringIO()
        try:
            with _capture_smtp_debug() as captured:
                yield
        finally:
            _log_smtp_debug_output(captured)

    def _connect(self) -> smtplib.SMTP:
        context = self._security.ssl_context()
        if self._security.use_ssl:
            client: smtplib.SMTP = smtplib.SMTP_SSL(
                host=self._host, port=self._port, timeout=self._timeout, context=context
            )
        else:
            client = smtplib.SMTP(host=self._host, port=self._port, timeout=self._timeout)

        try:
            self._handshake(client, context)
        except BaseException:
            client.close()
            raise
        return client

    def _handshake(self, client: smtplib.SMTP, context: ssl.SSLContext) -> None:
        if log.isEnabledFor(TRACE_LEVEL):
            client.set_debuglevel(1)

        client.ehlo()
        if not self._security.use_ssl and self._security.use_starttls and client.has_extn("STARTTLS"):
            client.starttls(context=context)
            client.ehlo()

        if log.isEnabledFor(TRACE_LEVEL):
            ssl_info = _extract_ssl_info(getattr(client, "sock", None))
            if ssl_info:
                log.log(TRACE_LEVEL, "[SMTP] TLS session: %s", ssl_info)

        if self._credentials.username:
            client.login(self._credentials.username, self._credentials.password or "")

    def start(self) -> None:
        """Open the SMTP session (connect, EHLO, STARTTLS, login).

        Raises:
            MailTransportError: If the connection or login fails.
        """
        if self._client is not None:
            return

        log.debug("Connecting to SMTP server %s:%d", self._host, self._port)
        try:
            with self._traced():
                self._client = self._connect()
        except (smtplib.SMTPException, OSError) as e:
            raise MailTransportError(f"SMTP connection to {self._host}:{self._port} failed: {e}") from e
        super().start()

    def stop(self) -> None:
        """Close the SMTP session. QUIT failures are logged, never raised."""
        client, self._client = self._client, None
        super().stop()
        if client is None:
            return

        try:
            with self._traced():
                client.quit()
        except (smtplib.SMTPException, OSError) as e:
            log.debug("SMTP QUIT failed, closing socket: %s", e)
            client.close()

    def send(self, message: EmailMessage) -> int:
        """Send ``message`` over the open session.

        Args:
            message: The message to send.

        Returns:
            Number of recipients accepted by the server.

        Raises:
            MailTransportError: If the transport is not started, every
                recipient is refused, or the server reports an error.
        """
        if self._client is None:
            raise MailTransportError("SMTP transport is not started")

        recipients = message_recipients(message)
        try:
            with self._traced():
                refused = self._client.send_message(message) or {}
        except (smtplib.SMTPException, OSError) as e:
            raise MailTransportError(f"SMTP delivery failed: {e}") from e

        for address, (code, reply) in refused.items():
            log.warning("Recipient %s refused: %s %s", address, code, reply)
        sent = len(recipients) - len(refused)
        log.debug("SMTP server accepted %d of %d recipient(s)", sent, len(recipients))
        return sent
