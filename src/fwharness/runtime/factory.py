#
# src/fwharness/runtime/factory.py
#
"""
Wires configuration, toolchain and process runners into a ready driver.
"""
from pathlib import Path

import structlog

from fwharness.bitcode import BitcodeValidator
from fwharness.config.models import HarnessConfig
from fwharness.exceptions import ConfigurationError
from fwharness.process.factory import get_process_runner
from fwharness.process.protocols import ProcessRunner
from fwharness.process.subprocess_runner import SubprocessRunner
from fwharness.runtime.builder import TestExecutableBuilder
from fwharness.runtime.coordinator import FrameworkCoordinator
from fwharness.runtime.driver import TestExecutionDriver
from fwharness.targets import Target, TargetResolver
from fwharness.toolchain.protocols import ToolchainProvider
from fwharness.toolchain.xcode import XcodeToolchain

log = structlog.get_logger("runtime.factory")


def create_driver(
    config: HarnessConfig,
    test_name: str,
    target: Target | str | None = None,
    output_root: Path | None = None,
    toolchain: ToolchainProvider | None = None,
    runner: ProcessRunner | None = None,
) -> TestExecutionDriver:
    """
    Builds a TestExecutionDriver for a declared test.

    Explicit arguments take precedence over the loaded configuration.
    """
    test_config = config.tests.get(test_name)
    if test_config is None:
        raise ConfigurationError(
            f"Unknown test: '{test_name}'. Available tests: {sorted(config.tests)}"
        )

    global_config = config.global_config
    tools = config.tools
    effective_target = Target.parse(target) if target is not None else global_config.target
    effective_root = Path(output_root) if output_root is not None else global_config.output_root

    runner = runner or SubprocessRunner()
    toolchain = toolchain or XcodeToolchain(
        runner=runner,
        developer_dir=tools.developer_dir,
        additional_tools_dir=tools.additional_tools_dir,
    )
    resolver = TargetResolver(toolchain)
    validator = BitcodeValidator(resolver, runner, tools.interpreter_candidates)
    coordinator = FrameworkCoordinator(validator, runner, tools.codesign)
    builder = TestExecutableBuilder(
        resolver,
        coordinator,
        runner,
        target=effective_target,
        output_root=effective_root,
        harness_main=global_config.harness_main,
        compiler=tools.compiler,
    )
    executor = get_process_runner(
        resolver.resolve(effective_target),
        simulator_device=global_config.simulator_device,
        base_runner=runner,
    )
    log.debug(
        "Driver created",
        test_name=test_name,
        target=effective_target.value,
        output_root=str(effective_root),
    )
    return TestExecutionDriver(
        test_config,
        builder,
        resolver,
        executor,
        min_host_version=global_config.system_runtime_min_host_version,
    )

# 🔼⚙️
