#
# src/fwharness/process/factory.py
#
"""
Factory for choosing the ProcessRunner that executes a built test binary.
"""
import structlog

from fwharness.process.protocols import ProcessRunner
from fwharness.process.subprocess_runner import SimulatorProcessRunner, SubprocessRunner
from fwharness.targets import PlatformMetadata

log = structlog.get_logger("process.factory")


def get_process_runner(
    metadata: PlatformMetadata,
    simulator_device: str = "booted",
    base_runner: ProcessRunner | None = None,
) -> ProcessRunner:
    """
    Returns a runner able to execute binaries built for the given target.

    Simulator targets go through simctl, everything else runs on the host.
    """
    runner = base_runner or SubprocessRunner()
    if metadata.is_simulator:
        log.debug(
            "Using simulator runner",
            target=metadata.target.value,
            device=simulator_device,
        )
        return SimulatorProcessRunner(device=simulator_device, runner=runner)
    log.debug("Using local runner", target=metadata.target.value)
    return runner

# 🔼⚙️
