#!/usr/bin/env python3
"""Send test emails via Ethereal Email fake SMTP service.

Ethereal Email (https://ethereal.email) is a free fake SMTP service
for testing email sending without delivering to real mailboxes.

Setup:
    1. Go to https://ethereal.email and create a free account
    2. Copy your credentials (user/pass)
    3. Set environment variables:
       export ETHEREAL_USER="your-user@ethereal.email"
       export ETHEREAL_PASS="your-password"

Usage:
    pip install -e .
    python examples/mail/smtp_ethereal.py

The same mailer can be declared in mailcli.conf.yml for the CLI:

    mail:
      default_mailer: ethereal
      mailers:
        ethereal:
          transport: smtp
          host: smtp.ethereal.email
          port: 587
          username: ${ETHEREAL_USER}
          password: ${ETHEREAL_PASS}

After running, check your Ethereal inbox to see the captured email:
    https://ethereal.email/messages
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from mailcli.logging import configure_logging
from mailcli.mail import EmailComposer, SendOptions, TransportRegistry
from mailcli.mail.transports.smtp import SMTPCredentials, SMTPSecurity, SMTPTransport

# Ethereal SMTP configuration
ETHEREAL_HOST = "smtp.ethereal.email"
ETHEREAL_PORT = 587


def get_ethereal_credentials() -> SMTPCredentials:
    """Load Ethereal credentials from environment variables.

    Raises:
        SystemExit: If credentials are not configured.
    """
    user = os.getenv("ETHEREAL_USER")
    password = os.getenv("ETHEREAL_PASS")

    if not user or not password:
        print("=" * 60)
        print("ERROR: Ethereal credentials not configured!")
        print("=" * 60)
        print()
        print("To use this example:")
        print("  1. Create a free account at https://ethereal.email")
        print("  2. Set environment variables:")
        print('     export ETHEREAL_USER="your-user@ethereal.email"')
        print('     export ETHEREAL_PASS="your-password"')
        print()
        sys.exit(1)

    return SMTPCredentials(username=user, password=password)


def create_registry(credentials: SMTPCredentials) -> TransportRegistry:
    """Register an Ethereal SMTP transport as the default mailer."""
    registry = TransportRegistry()
    registry.register(
        "default",
        SMTPTransport(
            ETHEREAL_HOST,
            port=ETHEREAL_PORT,
            credentials=credentials,
            security=SMTPSecurity(use_starttls=True),
            timeout=30.0,
        ),
    )
    return registry


def no_prompt(label: str) -> str:
    """Every field is supplied, so the composer never asks."""
    raise RuntimeError(f"unexpected prompt for {label}")


def send_plain_email(composer: EmailComposer, address: str) -> None:
    """Send a simple plain-text email via Ethereal."""
    print("-" * 60)
    print("Example 1: Plain text email")
    print("-" * 60)

    sent = composer.run(
        SendOptions(
            sender=address,
            to=address,  # Send to ourselves
            subject="Test from mailcli - Plain Text",
            body="Hello from mailcli!\n\nThis is a plain-text test email sent via Ethereal SMTP.",
            content_type="text/plain",
        )
    )
    print(f"Sent {sent} emails")
    print()


def send_html_file(composer: EmailComposer, address: str) -> None:
    """Send an HTML body read from a file, like --body-input=file."""
    print("-" * 60)
    print("Example 2: HTML body from a file")
    print("-" * 60)

    body_file = Path(__file__).with_name("ethereal_body.html")
    body_file.write_text(
        "<html><body><h1>Hello from mailcli!</h1><p>This body was read from a file.</p></body></html>",
        encoding="utf-8",
    )
    try:
        sent = composer.run(
            SendOptions(
                sender=address,
                to=address,
                subject="Test from mailcli - HTML file",
                body=str(body_file),
                body_input="file",
            )
        )
    finally:
        body_file.unlink()
    print(f"Sent {sent} emails")
    print()


def main() -> None:
    """Run all Ethereal SMTP examples."""
    configure_logging("INFO")
    credentials = get_ethereal_credentials()
    composer = EmailComposer(create_registry(credentials), prompt=no_prompt)
    address = credentials.username or ""

    print("=" * 60)
    print("ETHEREAL EMAIL SMTP EXAMPLES")
    print("=" * 60)
    print()
    print(f"SMTP Server: {ETHEREAL_HOST}:{ETHEREAL_PORT}")
    print()

    send_plain_email(composer, address)
    send_html_file(composer, address)

    print("=" * 60)
    print("All examples completed!")
    print()
    print("View your emails at: https://ethereal.email/messages")
    print("=" * 60)


if __name__ == "__main__":  # pragma: no cover - manual example
    main()
