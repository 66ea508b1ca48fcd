"""Tests for the email composer."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from mailcli.mail import (
    BodySource,
    EmailComposer,
    FileReadError,
    InvalidBodySourceError,
    MailTransportError,
    MailValidationError,
    SendOptions,
    TransportRegistry,
    UnknownMailerError,
)
from mailcli.mail.composer import parse_body_source, read_body_file

# pylint: disable=redefined-outer-name


class PromptRecorder:
    """Prompt double answering from a dict and recording asked labels."""

    def __init__(self, answers: dict[str, str] | None = None) -> None:
        """Store the canned answers."""
        self.answers = answers or {}
        self.labels: list[str] = []

    def __call__(self, label: str) -> str:
        """Return the canned answer for ``label``."""
        self.labels.append(label)
        return self.answers[label]


def _fail_read(path: str) -> bytes:  # pragma: no cover - must not be called
    pytest.fail(f"read_file must not be called (path={path})")


FULL = {
    "sender": "a@x.com",
    "to": "b@x.com",
    "subject": "Hi",
    "body": "Hello",
}


class TestPrompting:
    """Prompts only happen for missing fields."""

    def test_no_prompt_when_all_fields_supplied(self, registry: TransportRegistry) -> None:
        """Fully specified options never call the prompt."""
        prompt = PromptRecorder()
        composer = EmailComposer(registry, prompt=prompt, read_file=_fail_read)

        composer.run(SendOptions(**FULL))

        assert prompt.labels == []

    def test_prompts_only_missing_fields_in_order(self, registry: TransportRegistry, transport: Any) -> None:
        """Prompt count equals the number of missing fields."""
        prompt = PromptRecorder({"From": "me@x.com", "Body": "Typed body"})
        composer = EmailComposer(registry, prompt=prompt)

        composer.run(SendOptions(to="b@x.com", subject="Hi"))

        assert prompt.labels == ["From", "Body"]
        message = transport.sent[0]
        assert message["From"] == "me@x.com"
        assert message.get_content().strip() == "Typed body"

    def test_prompts_everything_when_nothing_supplied(self, registry: TransportRegistry) -> None:
        """All four fields are prompted for in a fixed order."""
        prompt = PromptRecorder({"From": "a@x.com", "To": "b@x.com", "Subject": "S", "Body": "B"})
        EmailComposer(registry, prompt=prompt).run(SendOptions())

        assert prompt.labels == ["From", "To", "Subject", "Body"]

    def test_empty_string_is_not_prompted(self, registry: TransportRegistry) -> None:
        """Only None counts as missing; an empty value fails validation."""
        prompt = PromptRecorder()
        composer = EmailComposer(registry, prompt=prompt)

        with pytest.raises(MailValidationError, match="subject"):
            composer.run(SendOptions(**{**FULL, "subject": ""}))
        assert prompt.labels == []


class TestBodySource:
    """Body resolution from stdin or a file."""

    def test_stdin_uses_body_verbatim(self, registry: TransportRegistry, transport: Any) -> None:
        """The body option is the literal body in stdin mode."""
        composer = EmailComposer(registry, prompt=PromptRecorder(), read_file=_fail_read)
        composer.run(SendOptions(**{**FULL, "body": "<p>Hello</p>"}))

        assert transport.sent[0].get_content().strip() == "<p>Hello</p>"

    def test_file_reads_exact_contents(self, tmp_path: Path, registry: TransportRegistry) -> None:
        """File mode populates the body with the file contents, byte for byte."""
        content = "Line one\r\nLine two\nété ☃\n"
        body_file = tmp_path / "body.html"
        body_file.write_bytes(content.encode("utf-8"))

        composer = EmailComposer(registry, prompt=PromptRecorder())
        built = composer.build_message(SendOptions(**{**FULL, "body": str(body_file), "body_input": "file"}))

        assert built.body.encode("utf-8") == body_file.read_bytes()

    def test_file_path_can_come_from_body_prompt(self, tmp_path: Path, registry: TransportRegistry) -> None:
        """In file mode the Body prompt answer is the file path."""
        body_file = tmp_path / "body.txt"
        body_file.write_text("From file", encoding="utf-8")
        prompt = PromptRecorder({"Body": str(body_file)})

        composer = EmailComposer(registry, prompt=prompt)
        built = composer.build_message(SendOptions(**{**FULL, "body": None, "body_input": "file"}))

        assert built.body == "From file"

    def test_file_uses_injected_reader(self, registry: TransportRegistry) -> None:
        """The read_file collaborator receives the body option as path."""
        seen: list[str] = []

        def reader(path: str) -> bytes:
            seen.append(path)
            return b"injected"

        composer = EmailComposer(registry, prompt=PromptRecorder(), read_file=reader)
        built = composer.build_message(SendOptions(**{**FULL, "body": "/some/file", "body_input": "file"}))

        assert seen == ["/some/file"]
        assert built.body == "injected"

    def test_file_decoded_with_charset(self, tmp_path: Path, registry: TransportRegistry) -> None:
        """The file is decoded with the message charset."""
        body_file = tmp_path / "latin.txt"
        body_file.write_bytes("café".encode("latin-1"))

        composer = EmailComposer(registry, prompt=PromptRecorder())
        built = composer.build_message(
            SendOptions(**{**FULL, "body": str(body_file), "body_input": "file", "charset": "latin-1"})
        )

        assert built.body == "café"

    def test_missing_file_raises_and_never_sends(
        self, tmp_path: Path, registry: TransportRegistry, transport: Any
    ) -> None:
        """A non-existent path yields FileReadError and no transport activity."""
        missing = tmp_path / "missing.txt"
        composer = EmailComposer(registry, prompt=PromptRecorder())

        with pytest.raises(FileReadError) as exc_info:
            composer.run(SendOptions(**{**FULL, "body": str(missing), "body_input": "file"}))

        assert exc_info.value.path == str(missing)
        assert transport.calls == []

    def test_undecodable_file_raises(self, tmp_path: Path, registry: TransportRegistry) -> None:
        """Bytes invalid in the charset are reported as FileReadError."""
        body_file = tmp_path / "binary.bin"
        body_file.write_bytes(b"\xff\xfe\xfa")

        composer = EmailComposer(registry, prompt=PromptRecorder())
        with pytest.raises(FileReadError, match="utf-8"):
            composer.build_message(SendOptions(**{**FULL, "body": str(body_file), "body_input": "file"}))

    def test_reader_oserror_is_wrapped(self, registry: TransportRegistry) -> None:
        """OSError from a custom reader becomes FileReadError."""

        def reader(path: str) -> bytes:
            raise PermissionError(13, "Permission denied", path)

        composer = EmailComposer(registry, prompt=PromptRecorder(), read_file=reader)
        with pytest.raises(FileReadError, match="Permission denied"):
            composer.build_message(SendOptions(**{**FULL, "body": "/root/secret", "body_input": "file"}))

    def test_invalid_body_source_before_transport(self, registry: TransportRegistry, transport: Any) -> None:
        """An unknown body source fails before any transport interaction."""
        composer = EmailComposer(registry, prompt=PromptRecorder(), read_file=_fail_read)

        with pytest.raises(InvalidBodySourceError) as exc_info:
            composer.run(SendOptions(**{**FULL, "body_input": "clipboard"}))

        assert exc_info.value.value == "clipboard"
        assert transport.calls == []

    def test_parse_body_source(self) -> None:
        """Known values map to the enum, others raise."""
        assert parse_body_source("stdin") is BodySource.STDIN
        assert parse_body_source(BodySource.FILE) is BodySource.FILE
        with pytest.raises(InvalidBodySourceError):
            parse_body_source("STDIN")

    def test_header_injection_never_sends(self, registry: TransportRegistry, transport: Any) -> None:
        """A prompted subject with a line break fails validation before start()."""
        prompt = PromptRecorder({"Subject": "Hi\nBcc: evil@x.com"})

        with pytest.raises(MailValidationError, match="subject"):
            EmailComposer(registry, prompt=prompt).run(SendOptions(**{**FULL, "subject": None}))
        assert transport.calls == []

    def test_non_text_charset_in_file_mode(self, tmp_path: Path, registry: TransportRegistry) -> None:
        """A bytes codec as charset is a validation error, not a decode crash."""
        body_file = tmp_path / "body.txt"
        body_file.write_text("Hello", encoding="utf-8")

        composer = EmailComposer(registry, prompt=PromptRecorder())
        with pytest.raises(MailValidationError, match="base64"):
            composer.build_message(
                SendOptions(**{**FULL, "body": str(body_file), "body_input": "file", "charset": "base64"})
            )


class TestTransportLifecycle:
    """Start/stop pairing around send."""

    def test_start_send_stop_in_order(self, registry: TransportRegistry, transport: Any) -> None:
        """A successful run starts, sends and stops exactly once."""
        sent = EmailComposer(registry, prompt=PromptRecorder()).run(SendOptions(**FULL))

        assert sent == 1
        assert transport.calls == ["start", "send", "stop"]
        assert transport.is_started is False

    def test_stop_called_when_send_raises(self, make_transport: Any) -> None:
        """stop() runs exactly once even if send() fails."""
        failing = make_transport(fail_on_send=True)
        reg = TransportRegistry()
        reg.register("default", failing)

        with pytest.raises(MailTransportError, match="boom"):
            EmailComposer(reg, prompt=PromptRecorder()).run(SendOptions(**FULL))

        assert failing.calls == ["start", "send", "stop"]

    def test_returns_transport_count(self, make_transport: Any) -> None:
        """The composer reports the count returned by the transport."""
        reg = TransportRegistry()
        reg.register("default", make_transport(result=3))

        assert EmailComposer(reg, prompt=PromptRecorder()).run(SendOptions(**FULL)) == 3

    def test_unknown_mailer_never_starts(self, registry: TransportRegistry, transport: Any) -> None:
        """An unregistered mailer raises before prompting or starting."""
        prompt = PromptRecorder()

        with pytest.raises(UnknownMailerError) as exc_info:
            EmailComposer(registry, prompt=prompt).run(SendOptions(mailer="marketing"))

        assert exc_info.value.name == "marketing"
        assert exc_info.value.available == ["default"]
        assert prompt.labels == []
        assert transport.calls == []

    def test_uses_named_mailer(self, registry: TransportRegistry, make_transport: Any, transport: Any) -> None:
        """The mailer option selects the transport."""
        other = make_transport()
        registry.register("bulk", other)

        EmailComposer(registry, prompt=PromptRecorder()).run(SendOptions(mailer="bulk", **FULL))

        assert other.calls == ["start", "send", "stop"]
        assert transport.calls == []


class TestMessageFields:
    """Content type and charset flow into the MIME message."""

    def test_defaults_to_html_utf8(self, registry: TransportRegistry, transport: Any) -> None:
        """Default content type is text/html and charset UTF8."""
        EmailComposer(registry, prompt=PromptRecorder()).run(SendOptions(**FULL))

        message = transport.sent[0]
        assert message.get_content_type() == "text/html"
        assert message.get_content_charset() == "utf-8"
        assert message["Subject"] == "Hi"
        assert message["To"] == "b@x.com"

    def test_custom_content_type(self, registry: TransportRegistry, transport: Any) -> None:
        """Custom content type is applied as given."""
        EmailComposer(registry, prompt=PromptRecorder()).run(SendOptions(content_type="text/plain", **FULL))

        assert transport.sent[0].get_content_type() == "text/plain"


def test_read_body_file_missing(tmp_path: Path) -> None:
    """The default reader raises FileReadError for missing paths."""
    with pytest.raises(FileReadError, match="Could not get contents from"):
        read_body_file(str(tmp_path / "nope.txt"))


def test_read_body_file_returns_bytes(tmp_path: Path) -> None:
    """The default reader returns raw bytes."""
    path = tmp_path / "raw.bin"
    path.write_bytes(b"a\r\nb")
    assert read_body_file(str(path)) == b"a\r\nb"
