# src/fwharness/telemetry/logger/processors.py

"""
Custom structlog processors used by the fwharness logging setup.
"""

import logging
from typing import Any

from structlog.typing import EventDict, WrappedLogger

# Keys that are useful while binding context but noisy in rendered output.
_EXTRA_KEYS = ("emoji_key",)


def add_emoji_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Prefixes the event with an emoji chosen by `emoji_key` or by level."""
    from fwharness.telemetry.logger.base import LOG_EMOJIS

    emoji_key: Any = event_dict.get("emoji_key")
    if emoji_key is None:
        emoji_key = logging.getLevelName(method_name.upper())
    emoji = LOG_EMOJIS.get(emoji_key, LOG_EMOJIS["general"])
    event = event_dict.get("event")
    if isinstance(event, str):
        event_dict["event"] = f"{emoji} {event}"
    return event_dict


def remove_extra_keys_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Drops helper keys before rendering."""
    for key in _EXTRA_KEYS:
        event_dict.pop(key, None)
    return event_dict

# 🔼⚙️
