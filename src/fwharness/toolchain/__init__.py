#
# src/fwharness/toolchain/__init__.py
#
"""
Host toolchain discovery sub-package for fwharness.
"""
from .protocols import ToolchainProvider
from .xcode import XcodeToolchain, parse_version

__all__ = [
    "ToolchainProvider",
    "XcodeToolchain",
    "parse_version",
]

# 🔼⚙️
