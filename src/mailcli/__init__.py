"""mailcli - compose and send one email from command-line options or prompts."""

from __future__ import annotations

from mailcli.config import load_config
from mailcli.logging import configure_logging
from mailcli.mail import EmailComposer, MessageSpec, SendOptions, TransportRegistry
from mailcli.meta import __version__

__all__ = [
    "EmailComposer",
    "MessageSpec",
    "SendOptions",
    "TransportRegistry",
    "__version__",
    "configure_logging",
    "load_config",
]
