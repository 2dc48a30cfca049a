#
# src/fwharness/runtime/driver.py
#
"""
Drives one framework test through build, execution and verdict.
"""

import os
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import assert_never

import structlog
from attrs import define

from fwharness.config.models import TestRunConfig
from fwharness.exceptions import TestExecutionFailure
from fwharness.process.protocols import ProcessResult, ProcessRunner
from fwharness.runtime.builder import TestExecutableBuilder
from fwharness.state import RunState, TestRunState
from fwharness.targets import PlatformFamily, PlatformMetadata, TargetResolver
from fwharness.telemetry import StructLogger
from fwharness.toolchain.xcode import parse_version

log: StructLogger = structlog.get_logger("runtime.driver")

Hook = Callable[["TestExecutionDriver"], None]


def has_system_runtime(
    metadata: PlatformMetadata,
    host_os_version: str,
    min_host_version: str | None,
) -> bool:
    """
    True when the host OS already provides the Swift runtime for this target,
    in which case no library path override must be exported.
    """
    if not min_host_version:
        return False
    match metadata.family:
        case PlatformFamily.MACOS:
            host = parse_version(host_os_version)
            return bool(host) and host >= parse_version(min_host_version)
        case PlatformFamily.IOS | PlatformFamily.TVOS | PlatformFamily.WATCHOS:
            return False
        case _:
            assert_never(metadata.family)


def build_environment(
    metadata: PlatformMetadata,
    host_os_version: str,
    min_host_version: str | None,
) -> dict[str, str]:
    """The environment delta for running a test executable of this target."""
    if has_system_runtime(metadata, host_os_version, min_host_version):
        return {}
    return {metadata.library_path_key: str(metadata.runtime_library_dir)}


@define(frozen=True, slots=True)
class TestReport:
    """Outcome of an executed test binary."""

    __test__ = False

    test_name: str
    executable: Path
    state: RunState
    result: ProcessResult

    @property
    def passed(self) -> bool:
        return self.state is RunState.PASSED

    def raise_for_failure(self) -> None:
        if not self.passed:
            raise TestExecutionFailure(self.executable.name, self.result)

    def render(self) -> str:
        return f"{self.executable.name}\nstdout: {self.result.stdout}\nstderr: {self.result.stderr}"


class TestExecutionDriver:
    """
    Moves a run through NOT_BUILT -> BUILT -> RAN -> PASSED/FAILED.

    Errors from the build stage propagate and leave the state at NOT_BUILT.
    """

    __test__ = False

    def __init__(
        self,
        config: TestRunConfig,
        builder: TestExecutableBuilder,
        resolver: TargetResolver,
        runner: ProcessRunner,
        min_host_version: str | None = "10.14.4",
        base_env: Mapping[str, str] | None = None,
        before_build: Hook | None = None,
        before_run: Hook | None = None,
    ):
        self.config = config
        self.builder = builder
        self.resolver = resolver
        self.runner = runner
        self.min_host_version = min_host_version
        self.base_env = base_env
        self.before_build = before_build
        self.before_run = before_run
        self.state = TestRunState(test_name=config.test_name)
        self.executable: Path | None = None
        self._log = log.bind(test_name=config.test_name, target=builder.target.value)

    def build(self) -> Path:
        if self.before_build:
            self.before_build(self)
        self.executable = self.builder.build(self.config)
        self.state.transition(RunState.BUILT)
        return self.executable

    def environment(self) -> dict[str, str]:
        metadata = self.resolver.resolve(self.builder.target)
        delta = build_environment(
            metadata,
            self.resolver.toolchain.host_os_version(),
            self.min_host_version,
        )
        self._log.debug("Environment override", delta=delta)
        inherited = os.environ if self.base_env is None else self.base_env
        return {**inherited, **delta}

    def execute(self) -> TestReport:
        if self.state.status is not RunState.BUILT or self.executable is None:
            raise RuntimeError(f"Cannot run test '{self.config.test_name}' before it is built")
        if self.before_run:
            self.before_run(self)

        env = self.environment()
        self._log.info("Running test executable", executable=str(self.executable), emoji_key="run")
        result = self.runner.run(str(self.executable), [], working_dir=self.builder.output_root, env=env)
        self.state.transition(RunState.RAN)

        name = self.executable.name
        self._log.info("Test output", executable=name, stdout=result.stdout, stderr=result.stderr)
        if result.success:
            self.state.transition(RunState.PASSED)
            self._log.info("Test passed", executable=name, emoji_key="success")
        else:
            self.state.transition(
                RunState.FAILED,
                f"Execution of {name} failed with exit code: {result.exit_code}",
            )
            self._log.error("Test failed", executable=name, exit_code=result.exit_code, emoji_key="fail")

        return TestReport(
            test_name=self.config.test_name,
            executable=self.executable,
            state=self.state.status,
            result=result,
        )

    def run(self) -> TestReport:
        self.build()
        return self.execute()

# 🔼⚙️
