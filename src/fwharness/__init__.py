#
# src/fwharness/__init__.py
#
"""
fwharness: builds a test executable against prebuilt frameworks, runs it
for a target, and reports pass or fail.
"""

from fwharness.config import (
    BuildArtifactPaths,
    FrameworkDescriptor,
    TestRunConfig,
    TestRunConfigBuilder,
    load_config,
)
from fwharness.process import ProcessResult, ProcessRunner, SubprocessRunner
from fwharness.runtime import (
    FrameworkCoordinator,
    TestExecutableBuilder,
    TestExecutionDriver,
    TestReport,
    create_driver,
)
from fwharness.state import RunState
from fwharness.stub import generate_provider_stub
from fwharness.targets import PlatformMetadata, Target, TargetResolver

__all__ = [
    "BuildArtifactPaths",
    "FrameworkCoordinator",
    "FrameworkDescriptor",
    "PlatformMetadata",
    "ProcessResult",
    "ProcessRunner",
    "RunState",
    "SubprocessRunner",
    "Target",
    "TargetResolver",
    "TestExecutableBuilder",
    "TestExecutionDriver",
    "TestReport",
    "TestRunConfig",
    "TestRunConfigBuilder",
    "create_driver",
    "generate_provider_stub",
    "load_config",
]

# 🔼⚙️
