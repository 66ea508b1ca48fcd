"""Shared pytest fixtures for the mailcli test suite."""

from __future__ import annotations

# Disable Rich colors and force wide terminal BEFORE any imports
# Rich checks these at import time
import os

os.environ["NO_COLOR"] = "1"
os.environ["TERM"] = "dumb"
os.environ["FORCE_COLOR"] = "0"
os.environ["COLUMNS"] = "200"  # Prevent text wrapping in CLI output

import logging
from collections.abc import Iterator
from email.message import EmailMessage
from pathlib import Path

import pytest

from mailcli.logging import ROOT_LOGGER_NAME
from mailcli.mail import MailTransport, MailTransportError, TransportRegistry
from mailcli.mail.transport import message_recipients

# pylint: disable=redefined-outer-name


class RecordingTransport(MailTransport):
    """Transport double recording lifecycle calls and sent messages."""

    def __init__(self, *, result: int | None = None, fail_on_send: bool = False) -> None:
        """Configure the returned count and failure mode."""
        self.calls: list[str] = []
        self.sent: list[EmailMessage] = []
        self.result = result
        self.fail_on_send = fail_on_send

    def start(self) -> None:
        """Record start."""
        self.calls.append("start")
        super().start()

    def stop(self) -> None:
        """Record stop."""
        self.calls.append("stop")
        super().stop()

    def send(self, message: EmailMessage) -> int:
        """Record the message, or raise in failure mode."""
        self.calls.append("send")
        if self.fail_on_send:
            raise MailTransportError("boom")
        self.sent.append(message)
        return self.result if self.result is not None else len(message_recipients(message))


@pytest.fixture
def transport() -> RecordingTransport:
    """Return a recording transport that reports one delivery per recipient."""
    return RecordingTransport()


@pytest.fixture
def registry(transport: RecordingTransport) -> TransportRegistry:
    """Return a registry whose default mailer is the recording transport."""
    reg = TransportRegistry()
    reg.register("default", transport)
    return reg


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run with an empty cwd and HOME so no user configuration is picked up."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("MAILCLI_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def make_transport() -> type[RecordingTransport]:
    """Expose the recording transport class for tests needing custom settings."""
    return RecordingTransport


@pytest.fixture(autouse=True)
def _reset_mailcli_logger() -> Iterator[None]:
    """Drop handlers and levels installed by configure_logging during a test."""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
