"""Transport implementations for mail delivery.

Available transports:
    - SMTPTransport: Standard SMTP protocol (``transport: smtp``)
    - NullTransport: Dry run, delivers nothing (``transport: null``)
"""

from mailcli.mail.transports.null import NullTransport
from mailcli.mail.transports.smtp import SMTPCredentials, SMTPSecurity, SMTPTransport

__all__ = [
    "NullTransport",
    "SMTPCredentials",
    "SMTPSecurity",
    "SMTPTransport",
]
