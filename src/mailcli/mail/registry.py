"""Named mailer lookup.

Mailers are declared in the ``mail`` section of ``mailcli.conf.yml``::

    mail:
      default_mailer: default
      mailers:
        default:
          transport: smtp
          host: smtp.example.com
          port: 587
          username: bot
          password: ${SMTP_PASSWORD}
        "null":
          transport: "null"

Transports are built on first :meth:`TransportRegistry.get` and cached. The
name ``mailer`` is an alias of the default mailer.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from mailcli.mail.exceptions import MailConfigurationError, UnknownMailerError
from mailcli.mail.transport import MailTransport
from mailcli.mail.transports.null import NullTransport
from mailcli.mail.transports.smtp import SMTPCredentials, SMTPSecurity, SMTPTransport

log = logging.getLogger(__name__)

#: Alias resolving to the configured default mailer.
DEFAULT_MAILER_ALIAS = "mailer"

DEFAULT_MAILER_NAME = "default"

_SMTP_KEYS = frozenset(
    {"transport", "host", "port", "username", "password", "use_ssl", "use_starttls", "verify_certificates", "timeout"}
)


def _as_bool(name: str, key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise MailConfigurationError(f"Mailer '{name}': '{key}' must be true or false, got {value!r}")


def _build_smtp(name: str, definition: Mapping[str, Any]) -> SMTPTransport:
    unknown = set(definition) - _SMTP_KEYS
    if unknown:
        raise MailConfigurationError(f"Mailer '{name}': unknown option(s) {', '.join(sorted(unknown))}")

    try:
        port = int(definition.get("port", 587))
        timeout = float(definition.get("timeout", 30.0))
    except (TypeError, ValueError) as e:
        raise MailConfigurationError(f"Mailer '{name}': {e}") from e

    security = SMTPSecurity(
        use_ssl=_as_bool(name, "use_ssl", definition.get("use_ssl", False)),
        use_starttls=_as_bool(name, "use_starttls", definition.get("use_starttls", True)),
        verify_certificates=_as_bool(name, "verify_certificates", definition.get("verify_certificates", True)),
    )
    credentials = SMTPCredentials(
        username=definition.get("username") or None,
        password=definition.get("password") or None,
    )
    return SMTPTransport(
        str(definition.get("host") or ""),
        port=port,
        credentials=credentials,
        security=security,
        timeout=timeout,
    )


def _build_null(name: str, definition: Mapping[str, Any]) -> NullTransport:
    unknown = set(definition) - {"transport"}
    if unknown:
        raise MailConfigurationError(f"Mailer '{name}': unknown option(s) {', '.join(sorted(unknown))}")
    return NullTransport()


#: Transport builders keyed by the ``transport`` option.
TRANSPORT_BUILDERS: dict[str, Callable[[str, Mapping[str, Any]], MailTransport]] = {
    "smtp": _build_smtp,
    "null": _build_null,
}


def build_transport(name: str, definition: Mapping[str, Any]) -> MailTransport:
    """Instantiate the transport described by a mailer definition.

    Args:
        name: Mailer name (for error messages).
        definition: Mapping with a ``transport`` key and its options.

    Returns:
        A new, not yet started transport.

    Raises:
        MailConfigurationError: If the transport type is unknown or an
            option is invalid.
    """
    kind = definition.get("transport")
    builder = TRANSPORT_BUILDERS.get(str(kind))
    if builder is None:
        raise MailConfigurationError(
            f"Mailer '{name}': unknown transport {kind!r} (expected one of: {', '.join(sorted(TRANSPORT_BUILDERS))})"
        )
    return builder(name, definition)


class TransportRegistry:
    """Lookup of mail transports by mailer name.

    Args:
        definitions: Mailer definitions keyed by name.
        default_mailer: Name the ``mailer`` alias resolves to.

    Examples:
        >>> registry = TransportRegistry({"null": {"transport": "null"}}, default_mailer="null")
        >>> registry.has("mailer")
        True
        >>> registry.names()
        ['null']
    """

    def __init__(
        self,
        definitions: Mapping[str, Mapping[str, Any]] | None = None,
        *,
        default_mailer: str = DEFAULT_MAILER_NAME,
    ) -> None:
        self._definitions: dict[str, Mapping[str, Any]] = dict(definitions or {})
        self._transports: dict[str, MailTransport] = {}
        self.default_name = default_mailer

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> TransportRegistry:
        """Build a registry from the loaded configuration.

        Args:
            config: Full configuration mapping (the ``mail`` section is used).

        Raises:
            MailConfigurationError: If the ``mail`` section is malformed.
        """
        mail_section = config.get("mail") or {}
        if not isinstance(mail_section, Mapping):
            raise MailConfigurationError("'mail' configuration section must be a mapping")

        mailers = mail_section.get("mailers") or {}
        if not isinstance(mailers, Mapping):
            raise MailConfigurationError("'mail.mailers' must be a mapping of mailer definitions")
        for name, definition in mailers.items():
            if not isinstance(definition, Mapping):
                raise MailConfigurationError(f"Mailer '{name}' must be a mapping")

        default_mailer = str(mail_section.get("default_mailer") or DEFAULT_MAILER_NAME)
        log.debug("Registered mailers: %s (default: %s)", ", ".join(map(str, mailers)) or "none", default_mailer)
        return cls({str(k): v for k, v in mailers.items()}, default_mailer=default_mailer)

    def _resolve(self, name: str) -> str:
        return self.default_name if name == DEFAULT_MAILER_ALIAS else name

    def names(self) -> list[str]:
        """Return the registered mailer names, sorted."""
        return sorted(set(self._definitions) | set(self._transports))

    def has(self, name: str) -> bool:
        """Return True if ``name`` (or the ``mailer`` alias) is registered."""
        resolved = self._resolve(name)
        return resolved in self._transports or resolved in self._definitions

    def register(self, name: str, transport: MailTransport) -> None:
        """Register a ready-made transport under ``name``."""
        self._transports[name] = transport

    def definition(self, name: str) -> Mapping[str, Any] | None:
        """Return the configured definition of ``name``, if any."""
        return self._definitions.get(self._resolve(name))

    def get(self, name: str) -> MailTransport:
        """Return the transport registered as ``name``.

        Raises:
            UnknownMailerError: If no such mailer is registered.
            MailConfigurationError: If its definition is invalid.
        """
        resolved = self._resolve(name)
        transport = self._transports.get(resolved)
        if transport is not None:
            return transport

        definition = self._definitions.get(resolved)
        if definition is None:
            raise UnknownMailerError(name, self.names())

        transport = build_transport(resolved, definition)
        self._transports[resolved] = transport
        return transport


__all__ = [
    "DEFAULT_MAILER_ALIAS",
    "DEFAULT_MAILER_NAME",
    "TRANSPORT_BUILDERS",
    "TransportRegistry",
    "build_transport",
]
