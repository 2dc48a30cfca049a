#
# src/fwharness/toolchain/xcode.py
#
"""
ToolchainProvider backed by an installed Xcode, queried through xcrun.
"""
import json
import platform
import re
from pathlib import Path

import structlog

from fwharness.exceptions import ExternalToolFailure
from fwharness.process.protocols import ProcessRunner
from fwharness.process.subprocess_runner import SubprocessRunner
from fwharness.toolchain.protocols import ToolchainProvider

log = structlog.get_logger("toolchain.xcode")

XCRUN = "/usr/bin/xcrun"
XCODE_SELECT = "/usr/bin/xcode-select"
DEFAULT_TOOLCHAIN = Path("Toolchains") / "XcodeDefault.xctoolchain"


def parse_version(version: str) -> tuple[int, ...]:
    """
    '10.14.4' -> (10, 14, 4). Each component contributes its leading digits
    only ('17.0b2' -> (17, 0)); parsing stops at a component without any.
    """
    parts = []
    for chunk in version.strip().split("."):
        match = re.match(r"\d+", chunk)
        if match is None:
            break
        parts.append(int(match.group()))
    return tuple(parts)


class XcodeToolchain(ToolchainProvider):
    """Discovers SDKs, toolchain and simulator runtimes of the selected Xcode."""

    def __init__(
        self,
        runner: ProcessRunner | None = None,
        developer_dir: Path | None = None,
        additional_tools_dir: Path | None = None,
    ):
        self._runner = runner or SubprocessRunner()
        self._developer_dir = developer_dir
        self._additional_tools_dir = additional_tools_dir

    def _query(self, executable: str, args: list[str]) -> str:
        result = self._runner.run(executable, args)
        if not result.success:
            raise ExternalToolFailure(Path(executable).name, [executable, *args], result)
        return result.stdout.strip()

    def developer_dir(self) -> Path:
        if self._developer_dir is None:
            self._developer_dir = Path(self._query(XCODE_SELECT, ["-p"]))
            log.debug("Discovered developer dir", path=str(self._developer_dir))
        return self._developer_dir

    def toolchain_root(self) -> Path:
        return self.developer_dir() / DEFAULT_TOOLCHAIN

    def additional_tools_dir(self) -> Path:
        if self._additional_tools_dir is not None:
            return self._additional_tools_dir
        return self.developer_dir() / "usr"

    def sdk_path(self, sdk_name: str) -> str:
        return self._query(XCRUN, ["--sdk", sdk_name, "--show-sdk-path"])

    def latest_simulator_runtime(self, runtime_key: str, os_version_min: str) -> Path | None:
        output = self._query(XCRUN, ["simctl", "list", "runtimes", "--json"])
        try:
            runtimes = json.loads(output).get("runtimes", [])
        except json.JSONDecodeError as e:
            log.warning("Unparseable simctl output, ignoring runtimes", error=str(e))
            return None

        minimum = parse_version(os_version_min)
        candidates = [
            runtime
            for runtime in runtimes
            if runtime.get("identifier", "").startswith(runtime_key)
            and runtime.get("isAvailable", True)
            and runtime.get("bundlePath")
            and parse_version(runtime.get("version", "0")) >= minimum
        ]
        if not candidates:
            return None

        latest = max(candidates, key=lambda runtime: parse_version(runtime.get("version", "0")))
        log.debug(
            "Selected simulator runtime",
            identifier=latest.get("identifier"),
            version=latest.get("version"),
        )
        return Path(latest["bundlePath"])

    def host_os_version(self) -> str:
        return platform.mac_ver()[0]

# 🔼⚙️
