#
# src/fwharness/process/protocols.py
#
"""
Defines protocols and data structures for external process execution.
"""
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from attrs import define


@define(frozen=True, slots=True)
class ProcessResult:
    """
    Captured outcome of a single external process invocation.
    """
    stdout: str
    stderr: str
    exit_code: int

    @property
    def success(self) -> bool:
        return self.exit_code == 0


@runtime_checkable
class ProcessRunner(Protocol):
    """
    Protocol for something that can execute an external program and wait for it.
    """
    def run(
        self,
        executable: str,
        args: Sequence[str],
        working_dir: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ProcessResult:
        """
        Runs the executable and blocks until it exits.

        Args:
            executable: Path or name of the program to launch.
            args: Arguments passed after the executable.
            working_dir: The directory to run in, or None to inherit.
            env: The complete environment for the child, or None to inherit.

        Returns:
            A ProcessResult with separately captured stdout and stderr.
            The exit code is never interpreted here.
        """
        ...

# 🔼⚙️
