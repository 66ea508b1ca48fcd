"""Configuration loading for mailcli.

The packaged ``mailcli.conf.yml`` always provides the defaults. The first
user file found in the search order below is deep-merged over it:

1. Explicit path (``mailcli --config PATH``)
2. ``$MAILCLI_CONFIG``
3. ``./mailcli.conf.yml``
4. ``~/.config/mailcli/mailcli.conf.yml``

String values support ``${VAR}`` and ``${VAR:-default}`` substitution. A
mailer declared under ``mail.mailers`` replaces the packaged mailer of the
same name instead of being merged into it.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from box import Box

from mailcli.config.exceptions import ConfigError, ConfigFileNotFoundError, ConfigFormatError

log = logging.getLogger(__name__)

CONFIG_FILENAME = "mailcli.conf.yml"
CONFIG_ENV_VAR = "MAILCLI_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / CONFIG_FILENAME

# Sections whose entries a user file replaces instead of merging into.
_REPLACED_ENTRIES = frozenset({("mail", "mailers")})

# ${VAR} or ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([a-zA-Z_][a-zA-Z0-9_]*)(?::-([^}]*))?\}")


def _expand_env_vars(value: str, source: str | None = None) -> str:
    """Expand environment variables in a string value.

    Args:
        value: String potentially containing ``${VAR}`` patterns.
        source: Source file for error messages.

    Returns:
        String with environment variables expanded.

    Raises:
        ConfigError: If a required variable is not set.

    Examples:
        >>> os.environ["MAILCLI_DOC_HOST"] = "smtp.example.com"
        >>> _expand_env_vars("${MAILCLI_DOC_HOST}")
        'smtp.example.com'
        >>> _expand_env_vars("${MAILCLI_DOC_MISSING:-localhost}")
        'localhost'
    """

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default_value = match.group(2)

        env_value = os.environ.get(var_name)
        if env_value is not None:
            return env_value
        if default_value is not None:
            return default_value

        where = f" (required by {source})" if source else ""
        raise ConfigError(
            f"Environment variable '{var_name}' is not set{where}. Use ${{VAR:-default}} for optional variables."
        )

    return _ENV_VAR_PATTERN.sub(replacer, value)


def _expand_env_vars_recursive(data: Any, source: str | None = None) -> Any:
    """Recursively expand environment variables in dicts, lists and strings."""
    if isinstance(data, dict):
        return {k: _expand_env_vars_recursive(v, source) for k, v in data.items()}
    if isinstance(data, list):
        return [_expand_env_vars_recursive(item, source) for item in data]
    if isinstance(data, str):
        return _expand_env_vars(data, source)
    return data


def _deep_merge(
    base: dict[str, Any],
    override: dict[str, Any],
    _path: tuple[str, ...] = (),
) -> dict[str, Any]:
    """Return ``base`` updated recursively with ``override``.

    Entries of the sections listed in ``_REPLACED_ENTRIES`` are replaced
    whole: a user mailer definition never inherits keys from a packaged one.

    Examples:
        >>> _deep_merge({"a": {"x": 1, "y": 2}}, {"a": {"y": 3}})
        {'a': {'x': 1, 'y': 3}}
    """
    merged = dict(base)
    for key, value in override.items():
        if _path not in _REPLACED_ENTRIES and isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value, (*_path, key))
        else:
            merged[key] = value
    return merged


def _read_yaml(path: Path) -> dict[str, Any]:
    """Parse a YAML file that must contain a mapping (or nothing)."""
    try:
        with path.open(encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except yaml.YAMLError as e:
        raise ConfigFormatError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFormatError(f"Configuration root must be a mapping in {path}, got {type(data).__name__}")
    return data


def find_config_file(path: str | Path | None = None) -> Path | None:
    """Locate the user configuration file.

    Args:
        path: Explicit path. Must exist when given.

    Returns:
        The first existing candidate, or None when only defaults apply.

    Raises:
        ConfigFileNotFoundError: If an explicit path (argument or
            ``$MAILCLI_CONFIG``) does not exist.
    """
    explicit = path if path is not None else os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        candidate = Path(explicit).expanduser()
        if not candidate.is_file():
            raise ConfigFileNotFoundError(str(candidate))
        return candidate

    for candidate in (
        Path.cwd() / CONFIG_FILENAME,
        Path.home() / ".config" / "mailcli" / CONFIG_FILENAME,
    ):
        if candidate.is_file():
            return candidate
    return None


def load_config(path: str | Path | None = None) -> Box:
    """Load the effective configuration.

    Args:
        path: Optional explicit configuration file.

    Returns:
        Configuration as a ``Box`` (attribute and key access).

    Raises:
        ConfigFileNotFoundError: If an explicit file is missing.
        ConfigFormatError: If a file is not valid YAML or not a mapping.
        ConfigError: If a required environment variable is not set.
    """
    data = _read_yaml(DEFAULT_CONFIG_PATH)

    user_file = find_config_file(path)
    if user_file is not None:
        log.debug("Loading configuration from %s", user_file)
        data = _deep_merge(data, _read_yaml(user_file))
    else:
        log.debug("No user configuration found, using packaged defaults")

    source = str(user_file or DEFAULT_CONFIG_PATH)
    return Box(_expand_env_vars_recursive(data, source), default_box=False)


__all__ = [
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "DEFAULT_CONFIG_PATH",
    "find_config_file",
    "load_config",
]
