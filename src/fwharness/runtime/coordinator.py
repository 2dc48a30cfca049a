#
# src/fwharness/runtime/coordinator.py
#
"""
Prepares externally built frameworks for linking: bitcode check and signing.
"""

from collections.abc import Sequence
from pathlib import Path

import structlog

from fwharness.bitcode import BitcodeValidator
from fwharness.config.models import DEFAULT_CODESIGN_COMMAND, BuildArtifactPaths, FrameworkDescriptor
from fwharness.exceptions import ExternalToolFailure, MissingFrameworkError
from fwharness.process.protocols import ProcessRunner
from fwharness.targets import Target
from fwharness.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.coordinator")


class FrameworkCoordinator:
    """Walks the frameworks of a run in link order and stops at the first failure."""

    def __init__(
        self,
        validator: BitcodeValidator,
        runner: ProcessRunner,
        codesign_command: Sequence[str] = DEFAULT_CODESIGN_COMMAND,
    ):
        self.validator = validator
        self.runner = runner
        self.codesign_command = tuple(codesign_command)

    def codesign(self, bundle: Path) -> None:
        executable, *args = self.codesign_command
        args = [*args, str(bundle)]
        result = self.runner.run(executable, args)
        if not result.success:
            log.error("Code signing failed", bundle=str(bundle), exit_code=result.exit_code, emoji_key="fail")
            raise ExternalToolFailure("codesign", [executable, *args], result)
        log.info("Signed framework", bundle=str(bundle), emoji_key="sign")

    def coordinate(
        self,
        frameworks: Sequence[FrameworkDescriptor],
        paths: BuildArtifactPaths,
        target: Target,
        full_bitcode: bool,
        codesign: bool,
    ) -> list[Path]:
        """
        Validates and optionally signs each framework bundle.

        Returns:
            The bundle directories, in declared order.
        """
        bundles: list[Path] = []
        for framework in frameworks:
            bundle = paths.framework_bundle(framework.artifact)
            binary = paths.framework_binary(framework.artifact)
            fw_log = log.bind(framework=framework.name, artifact=framework.artifact)

            if not bundle.is_dir():
                fw_log.error("Framework bundle missing", bundle=str(bundle), emoji_key="fail")
                raise MissingFrameworkError(framework.name, str(bundle))

            self.validator.validate(binary, target, full_bitcode)
            if codesign:
                self.codesign(bundle)
            fw_log.debug("Framework ready")
            bundles.append(bundle)
        return bundles

# 🔼⚙️
