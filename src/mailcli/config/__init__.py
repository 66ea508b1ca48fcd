"""Configuration loading (``mailcli.conf.yml``)."""

from mailcli.config.exceptions import ConfigError, ConfigFileNotFoundError, ConfigFormatError, MailcliError
from mailcli.config.loader import find_config_file, load_config

__all__ = [
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "MailcliError",
    "find_config_file",
    "load_config",
]
