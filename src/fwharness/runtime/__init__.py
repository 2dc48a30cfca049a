#
# src/fwharness/runtime/__init__.py
#
"""
Build and execution pipeline for framework tests.
"""
from .builder import TestExecutableBuilder
from .coordinator import FrameworkCoordinator
from .driver import TestExecutionDriver, TestReport, build_environment
from .factory import create_driver

__all__ = [
    "FrameworkCoordinator",
    "TestExecutableBuilder",
    "TestExecutionDriver",
    "TestReport",
    "build_environment",
    "create_driver",
]

# 🔼⚙️
