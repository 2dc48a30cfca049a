#
# src/fwharness/telemetry/__init__.py
#
"""
Logging setup for fwharness.
"""
from .logger import StructLogger, setup_logging

__all__ = ["StructLogger", "setup_logging"]

# 🔼⚙️
