#
# src/fwharness/bitcode.py
#
"""
Validation of full bitcode embedding in built framework binaries.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import assert_never

import structlog

from fwharness.config.models import DEFAULT_INTERPRETER_CANDIDATES
from fwharness.exceptions import ExternalToolFailure, MissingInterpreterError
from fwharness.process.protocols import ProcessRunner
from fwharness.targets import Target, TargetResolver, sdk_name_for

log = structlog.get_logger("bitcode")

BITCODE_TOOL_NAME = "bitcode-build-tool"


def bitcode_sdk_for(target: Target) -> str | None:
    """SDK to validate against, or None where the tool has no simulator support."""
    match target:
        case Target.IOS_X64 | Target.TVOS_X64 | Target.WATCHOS_X86 | Target.WATCHOS_X64:
            return None
        case (
            Target.IOS_ARM32
            | Target.IOS_ARM64
            | Target.TVOS_ARM64
            | Target.WATCHOS_ARM32
            | Target.WATCHOS_ARM64
            | Target.MACOS_X64
        ):
            return sdk_name_for(target)
        case _:
            assert_never(target)


def find_interpreter(candidates: Sequence[str]) -> Path:
    """Returns the first candidate that exists on disk."""
    for candidate in candidates:
        path = Path(candidate)
        if path.exists():
            return path
    raise MissingInterpreterError(list(candidates))


class BitcodeValidator:
    """Runs bitcode-build-tool against framework binaries built with full bitcode."""

    def __init__(
        self,
        resolver: TargetResolver,
        runner: ProcessRunner,
        interpreter_candidates: Sequence[str] = DEFAULT_INTERPRETER_CANDIDATES,
    ):
        self.resolver = resolver
        self.runner = runner
        self.interpreter_candidates = tuple(interpreter_candidates)

    def validate(self, framework_binary: Path, target: Target | str, full_bitcode: bool) -> None:
        """
        Raises ExternalToolFailure when the validator rejects the binary.

        Only full bitcode embedding is checked; simulator targets are skipped.
        """
        if not full_bitcode:
            return
        target = Target.parse(target)
        sdk = bitcode_sdk_for(target)
        if sdk is None:
            log.debug("Bitcode validation not supported for simulators, skipping", target=target.value)
            return

        metadata = self.resolver.resolve(target)
        sdk_path = self.resolver.sdk_path(metadata)
        tool = self.resolver.toolchain.additional_tools_dir() / "bin" / BITCODE_TOOL_NAME
        interpreter = find_interpreter(self.interpreter_candidates)
        # The tool wants a trailing separator on the toolchain bin dir.
        tool_bin_dir = f"{metadata.toolchain_bin_dir}/"

        # -B keeps the interpreter from writing .pyc files next to the Xcode tool.
        args = ["-B", str(tool), "--sdk", sdk_path, "-v", "-t", tool_bin_dir, str(framework_binary)]
        validate_log = log.bind(framework_binary=str(framework_binary), target=target.value)
        validate_log.info("Validating bitcode embedding", emoji_key="validate")

        result = self.runner.run(str(interpreter), args)
        if not result.success:
            validate_log.error("Bitcode validation failed", exit_code=result.exit_code, emoji_key="fail")
            raise ExternalToolFailure(BITCODE_TOOL_NAME, [str(interpreter), *args], result)
        validate_log.info("Bitcode validation passed", emoji_key="success")

# 🔼⚙️
