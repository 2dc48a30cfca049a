#
# tests/unit/test_xcode_toolchain.py
#
"""
Tests for the xcrun-backed toolchain provider.
"""

import json
from pathlib import Path

import pytest

from fwharness.exceptions import ExternalToolFailure
from fwharness.process import ProcessResult
from fwharness.toolchain import ToolchainProvider, XcodeToolchain, parse_version

IOS_KEY = "com.apple.CoreSimulator.SimRuntime.iOS"

RUNTIMES = {
    "runtimes": [
        {
            "identifier": "com.apple.CoreSimulator.SimRuntime.iOS-16-4",
            "version": "16.4",
            "isAvailable": True,
            "bundlePath": "/Runtimes/iOS 16.4.simruntime",
        },
        {
            "identifier": "com.apple.CoreSimulator.SimRuntime.iOS-17-2",
            "version": "17.2",
            "isAvailable": True,
            "bundlePath": "/Runtimes/iOS 17.2.simruntime",
        },
        {
            "identifier": "com.apple.CoreSimulator.SimRuntime.iOS-18-0",
            "version": "18.0",
            "isAvailable": False,
            "bundlePath": "/Runtimes/iOS 18.0.simruntime",
        },
        {
            "identifier": "com.apple.CoreSimulator.SimRuntime.tvOS-17-2",
            "version": "17.2",
            "isAvailable": True,
            "bundlePath": "/Runtimes/tvOS 17.2.simruntime",
        },
    ]
}


def _xcrun_responder(simctl_output: str):
    def respond(executable: str, args: list[str]) -> ProcessResult:
        if args[:2] == ["simctl", "list"]:
            return ProcessResult(simctl_output, "", 0)
        if args[:1] == ["--sdk"]:
            return ProcessResult(f"/SDKs/{args[1]}.sdk\n", "", 0)
        return ProcessResult("", "unexpected", 1)

    return respond


class TestParseVersion:
    def test_numeric_comparison_not_lexicographic(self) -> None:
        assert parse_version("10.14.4") > parse_version("10.9")
        assert parse_version("14.2.1") >= parse_version("10.14.4")

    def test_stops_at_non_numeric_component(self) -> None:
        assert parse_version("17.0b2") == (17, 0)
        assert parse_version("") == ()

    def test_suffix_digits_do_not_leak_into_component(self) -> None:
        assert parse_version("10.9b12") == (10, 9)
        assert parse_version("10.9b12") < parse_version("10.14.4")
        assert parse_version("15.0rc1.3") == (15, 0, 3)
        assert parse_version("beta.1") == ()


class TestXcodeToolchain:
    def test_picks_newest_available_runtime(self, runner_factory) -> None:
        runner = runner_factory(_xcrun_responder(json.dumps(RUNTIMES)))
        toolchain = XcodeToolchain(runner=runner, developer_dir=Path("/Xcode/Developer"))

        assert toolchain.latest_simulator_runtime(IOS_KEY, "9.0") == Path("/Runtimes/iOS 17.2.simruntime")
        assert runner.calls[0]["args"] == ["simctl", "list", "runtimes", "--json"]

    def test_respects_minimum_version(self, runner_factory) -> None:
        runner = runner_factory(_xcrun_responder(json.dumps(RUNTIMES)))
        toolchain = XcodeToolchain(runner=runner, developer_dir=Path("/Xcode/Developer"))

        assert toolchain.latest_simulator_runtime(IOS_KEY, "17.3") is None

    def test_no_runtime_metadata_returns_none(self, runner_factory) -> None:
        runner = runner_factory(_xcrun_responder("{}"))
        toolchain = XcodeToolchain(runner=runner, developer_dir=Path("/Xcode/Developer"))

        assert toolchain.latest_simulator_runtime(IOS_KEY, "9.0") is None

    def test_sdk_path_is_stripped(self, runner_factory) -> None:
        runner = runner_factory(_xcrun_responder("{}"))
        toolchain = XcodeToolchain(runner=runner, developer_dir=Path("/Xcode/Developer"))

        assert toolchain.sdk_path("iphoneos") == "/SDKs/iphoneos.sdk"

    def test_paths_derive_from_developer_dir(self) -> None:
        toolchain = XcodeToolchain(developer_dir=Path("/Xcode/Developer"))

        assert toolchain.toolchain_root() == Path("/Xcode/Developer/Toolchains/XcodeDefault.xctoolchain")
        assert toolchain.additional_tools_dir() == Path("/Xcode/Developer/usr")
        assert isinstance(toolchain, ToolchainProvider)

    def test_developer_dir_discovered_once(self, runner_factory) -> None:
        runner = runner_factory(lambda executable, args: ProcessResult("/Apps/Xcode.app/Contents/Developer\n", "", 0))
        toolchain = XcodeToolchain(runner=runner)

        toolchain.toolchain_root()
        toolchain.additional_tools_dir()

        assert runner.executables() == ["/usr/bin/xcode-select"]

    def test_failing_query_raises(self, runner_factory) -> None:
        runner = runner_factory(lambda executable, args: ProcessResult("", "no such sdk", 1))
        toolchain = XcodeToolchain(runner=runner, developer_dir=Path("/Xcode/Developer"))

        with pytest.raises(ExternalToolFailure, match="no such sdk"):
            toolchain.sdk_path("bogus")
