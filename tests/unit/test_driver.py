#
# tests/unit/test_driver.py
#
"""
End-to-end and state machine tests for the TestExecutionDriver.
"""

from pathlib import Path

import pytest

from fwharness.bitcode import BitcodeValidator
from fwharness.config import TestRunConfig
from fwharness.exceptions import ExternalToolFailure, TestExecutionFailure
from fwharness.process import ProcessResult
from fwharness.runtime import FrameworkCoordinator, TestExecutableBuilder, TestExecutionDriver
from fwharness.runtime.driver import build_environment, has_system_runtime
from fwharness.state import RunState
from fwharness.targets import SIMULATOR_LIBRARY_PATH_KEY, Target, TargetResolver

BASE_ENV = {"PATH": "/usr/bin:/bin", "HOME": "/Users/test"}


@pytest.fixture
def make_driver(output_root: Path, framework_bundle_factory):
    def _make(config: TestRunConfig, runner, toolchain, target: Target = Target.MACOS_X64, **kwargs):
        for framework in config.frameworks:
            framework_bundle_factory(config.test_name, target.value, framework.artifact)
        resolver = TargetResolver(toolchain)
        coordinator = FrameworkCoordinator(BitcodeValidator(resolver, runner, []), runner)
        builder = TestExecutableBuilder(
            resolver,
            coordinator,
            runner,
            target=target,
            output_root=output_root,
            harness_main=Path("/harness/main.swift"),
        )
        return TestExecutionDriver(config, builder, resolver, runner, base_env=BASE_ENV, **kwargs)

    return _make


def _fail_compiler(executable: str, args: list[str]) -> ProcessResult:
    if executable.endswith("swiftc"):
        return ProcessResult("", "error: cannot find 'foo' in scope", 1)
    return ProcessResult("", "", 0)


def _fail_test_binary(executable: str, args: list[str]) -> ProcessResult:
    if executable.endswith("swiftTestExecutable"):
        return ProcessResult("[ RUN ] testValues\nFAILED", "assertion failed", 134)
    return ProcessResult("", "", 0)


class TestEndToEnd:
    def test_passing_run(
        self, make_driver, recording_runner, fake_toolchain, single_framework_config, output_root: Path
    ) -> None:
        driver = make_driver(single_framework_config, recording_runner, fake_toolchain)

        report = driver.run()

        assert report.state is RunState.PASSED
        assert report.passed
        assert driver.state.status is RunState.PASSED
        report.raise_for_failure()

        executable = output_root / "values" / "swiftTestExecutable"
        last = recording_runner.calls[-1]
        assert last["executable"] == str(executable)
        assert last["args"] == []
        assert last["working_dir"] == output_root

    def test_compiler_failure_never_runs_executable(
        self, make_driver, runner_factory, fake_toolchain, single_framework_config
    ) -> None:
        runner = runner_factory(_fail_compiler)
        driver = make_driver(single_framework_config, runner, fake_toolchain)

        with pytest.raises(ExternalToolFailure):
            driver.run()

        assert driver.state.status is RunState.NOT_BUILT
        assert not any(e.endswith("swiftTestExecutable") for e in runner.executables())

    def test_failing_test_binary_is_reported(
        self, make_driver, runner_factory, fake_toolchain, single_framework_config
    ) -> None:
        driver = make_driver(single_framework_config, runner_factory(_fail_test_binary), fake_toolchain)

        report = driver.run()

        assert report.state is RunState.FAILED
        assert driver.state.error_message == "Execution of swiftTestExecutable failed with exit code: 134"
        rendered = report.render()
        assert "swiftTestExecutable" in rendered
        assert "[ RUN ] testValues" in rendered
        assert "assertion failed" in rendered
        with pytest.raises(TestExecutionFailure) as exc_info:
            report.raise_for_failure()
        assert "assertion failed" in str(exc_info.value)

    def test_hooks_run_before_transitions(
        self, make_driver, recording_runner, fake_toolchain, single_framework_config
    ) -> None:
        seen: list[tuple[str, RunState]] = []
        driver = make_driver(
            single_framework_config,
            recording_runner,
            fake_toolchain,
            before_build=lambda d: seen.append(("build", d.state.status)),
            before_run=lambda d: seen.append(("run", d.state.status)),
        )

        driver.run()

        assert seen == [("build", RunState.NOT_BUILT), ("run", RunState.BUILT)]

    def test_execute_requires_build(
        self, make_driver, recording_runner, fake_toolchain, single_framework_config
    ) -> None:
        driver = make_driver(single_framework_config, recording_runner, fake_toolchain)

        with pytest.raises(RuntimeError):
            driver.execute()
        assert recording_runner.calls == []


class TestEnvironment:
    def test_new_macos_host_gets_no_override(
        self, make_driver, recording_runner, toolchain_factory, single_framework_config
    ) -> None:
        toolchain = toolchain_factory(host_version="14.2.1")
        driver = make_driver(single_framework_config, recording_runner, toolchain)

        driver.run()

        assert recording_runner.calls[-1]["env"] == BASE_ENV

    def test_old_macos_host_gets_library_path(
        self, make_driver, recording_runner, toolchain_factory, single_framework_config
    ) -> None:
        toolchain = toolchain_factory(host_version="10.13.6")
        driver = make_driver(single_framework_config, recording_runner, toolchain)

        driver.run()

        env = recording_runner.calls[-1]["env"]
        assert env["DYLD_LIBRARY_PATH"] == str(toolchain.root / "usr/lib/swift-5.0/macosx")
        assert env["HOME"] == "/Users/test"

    def test_policy_can_be_disabled(
        self, make_driver, recording_runner, toolchain_factory, single_framework_config
    ) -> None:
        toolchain = toolchain_factory(host_version="14.2.1")
        driver = make_driver(single_framework_config, recording_runner, toolchain, min_host_version=None)

        driver.run()

        assert "DYLD_LIBRARY_PATH" in recording_runner.calls[-1]["env"]

    def test_simulator_uses_simctl_child_key(
        self, make_driver, recording_runner, toolchain_factory, single_framework_config
    ) -> None:
        runtime = Path("/Runtimes/iOS.simruntime")
        toolchain = toolchain_factory(runtimes={"com.apple.CoreSimulator.SimRuntime.iOS": runtime})
        driver = make_driver(single_framework_config, recording_runner, toolchain, target=Target.IOS_X64)

        driver.run()

        env = recording_runner.calls[-1]["env"]
        assert env[SIMULATOR_LIBRARY_PATH_KEY] == str(runtime / "Contents/Resources/RuntimeRoot/usr/lib/swift")
        assert "DYLD_LIBRARY_PATH" not in env

    def test_same_path_different_keys(self, fake_toolchain) -> None:
        resolver = TargetResolver(fake_toolchain)

        simulator = build_environment(resolver.resolve(Target.WATCHOS_X64), "14.0", "10.14.4")
        device = build_environment(resolver.resolve(Target.WATCHOS_ARM64), "14.0", "10.14.4")

        assert list(simulator) != list(device)
        assert len(simulator) == len(device) == 1

    def test_only_macos_family_uses_system_runtime(self, fake_toolchain) -> None:
        resolver = TargetResolver(fake_toolchain)

        assert has_system_runtime(resolver.resolve(Target.MACOS_X64), "10.14.4", "10.14.4")
        assert not has_system_runtime(resolver.resolve(Target.MACOS_X64), "10.9.5", "10.14.4")
        assert not has_system_runtime(resolver.resolve(Target.MACOS_X64), "", "10.14.4")
        assert not has_system_runtime(resolver.resolve(Target.IOS_ARM64), "14.0", "10.14.4")
