"""Logging helpers with TRACE and SUCCESS levels."""

from mailcli.logging.manager import (
    FALLBACK_PRESETS,
    LOGGING_LEVEL,
    ROOT_LOGGER_NAME,
    SUCCESS_LEVEL,
    TRACE_LEVEL,
    configure_logging,
    resolve_level,
)

__all__ = [
    "FALLBACK_PRESETS",
    "LOGGING_LEVEL",
    "ROOT_LOGGER_NAME",
    "SUCCESS_LEVEL",
    "TRACE_LEVEL",
    "configure_logging",
    "resolve_level",
]
