# src/fwharness/telemetry/logger/__init__.py

from .base import LOG_EMOJIS, StructLogger, setup_logging

__all__ = ["LOG_EMOJIS", "StructLogger", "setup_logging"]

# 🔼⚙️
