#
# src/fwharness/toolchain/protocols.py
#
"""
Defines the protocol for host toolchain discovery.
"""
from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class ToolchainProvider(Protocol):
    """
    Answers questions about the locally installed Apple toolchain.

    Implementations may shell out; tests use an in-memory fake.
    """
    def toolchain_root(self) -> Path:
        """Root of the active toolchain (contains usr/bin/swiftc)."""
        ...

    def additional_tools_dir(self) -> Path:
        """Directory whose bin/ holds auxiliary tools such as bitcode-build-tool."""
        ...

    def sdk_path(self, sdk_name: str) -> str:
        """Absolute path of the named SDK."""
        ...

    def latest_simulator_runtime(self, runtime_key: str, os_version_min: str) -> Path | None:
        """
        Bundle path of the newest available simulator runtime whose identifier
        starts with runtime_key and whose version is at least os_version_min,
        or None when the toolchain exposes no such runtime.
        """
        ...

    def host_os_version(self) -> str:
        """Version string of the host operating system, e.g. '14.2.1'."""
        ...

# 🔼⚙️
