"""Base exceptions shared by every mailcli module.

Exception hierarchy::

    MailcliError
        ConfigError (base for configuration errors)
            ConfigFileNotFoundError (explicit config file missing)
            ConfigFormatError (unparsable or malformed config file)
"""

from __future__ import annotations


class MailcliError(Exception):
    """Base exception for all mailcli errors."""


class ConfigError(MailcliError):
    """Base exception for configuration errors."""


class ConfigFileNotFoundError(ConfigError, FileNotFoundError):
    """An explicitly requested configuration file does not exist.

    Attributes:
        path: The path that was looked up.
    """

    def __init__(self, path: str) -> None:
        """Initialize ConfigFileNotFoundError.

        Args:
            path: The path that was looked up.
        """
        super().__init__(f"Configuration file not found: {path}")
        self.path = path


class ConfigFormatError(ConfigError, ValueError):
    """A configuration file could not be parsed or has the wrong shape."""


__all__ = [
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "MailcliError",
]
