#
# src/fwharness/process/__init__.py
#
"""
External process execution sub-package for fwharness.
"""
from .factory import get_process_runner
from .protocols import ProcessResult, ProcessRunner
from .subprocess_runner import SimulatorProcessRunner, SubprocessRunner

__all__ = [
    "ProcessResult",
    "ProcessRunner",
    "SimulatorProcessRunner",
    "SubprocessRunner",
    "get_process_runner",
]

# 🔼⚙️
