#
# src/fwharness/targets.py
#
"""
Supported test targets and the resolution of their toolchain metadata.

Every mapping over Target below is an exhaustive match ending in
assert_never, so a type checker flags each site when a member is added.
"""

from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, assert_never

import structlog
from attrs import define, field

from fwharness.exceptions import UnsupportedTargetError

if TYPE_CHECKING:
    from fwharness.toolchain.protocols import ToolchainProvider

log = structlog.get_logger("targets")

SIMULATOR_LIBRARY_PATH_KEY = "SIMCTL_CHILD_DYLD_LIBRARY_PATH"
LIBRARY_PATH_KEY = "DYLD_LIBRARY_PATH"


class PlatformFamily(Enum):
    IOS = "ios"
    TVOS = "tvos"
    WATCHOS = "watchos"
    MACOS = "macos"


class Target(Enum):
    """Closed set of targets the harness can build and run tests for."""

    IOS_X64 = "ios_x64"
    IOS_ARM32 = "ios_arm32"
    IOS_ARM64 = "ios_arm64"
    TVOS_X64 = "tvos_x64"
    TVOS_ARM64 = "tvos_arm64"
    WATCHOS_X86 = "watchos_x86"
    WATCHOS_X64 = "watchos_x64"
    WATCHOS_ARM32 = "watchos_arm32"
    WATCHOS_ARM64 = "watchos_arm64"
    MACOS_X64 = "macos_x64"

    @classmethod
    def parse(cls, value: "Target | str") -> "Target":
        """Accepts a Target or its name in any case; anything else is unsupported."""
        if isinstance(value, Target):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise UnsupportedTargetError(value)

    @property
    def family(self) -> PlatformFamily:
        match self:
            case Target.IOS_X64 | Target.IOS_ARM32 | Target.IOS_ARM64:
                return PlatformFamily.IOS
            case Target.TVOS_X64 | Target.TVOS_ARM64:
                return PlatformFamily.TVOS
            case Target.WATCHOS_X86 | Target.WATCHOS_X64 | Target.WATCHOS_ARM32 | Target.WATCHOS_ARM64:
                return PlatformFamily.WATCHOS
            case Target.MACOS_X64:
                return PlatformFamily.MACOS
            case _:
                assert_never(self)

    @property
    def is_simulator(self) -> bool:
        match self:
            case Target.IOS_X64 | Target.TVOS_X64 | Target.WATCHOS_X86 | Target.WATCHOS_X64:
                return True
            case (
                Target.IOS_ARM32
                | Target.IOS_ARM64
                | Target.TVOS_ARM64
                | Target.WATCHOS_ARM32
                | Target.WATCHOS_ARM64
                | Target.MACOS_X64
            ):
                return False
            case _:
                assert_never(self)


def sdk_name_for(target: Target) -> str:
    """The SDK (and Swift runtime platform directory) name for a target."""
    match target:
        case Target.IOS_X64:
            return "iphonesimulator"
        case Target.IOS_ARM32 | Target.IOS_ARM64:
            return "iphoneos"
        case Target.TVOS_X64:
            return "appletvsimulator"
        case Target.TVOS_ARM64:
            return "appletvos"
        case Target.WATCHOS_X86 | Target.WATCHOS_X64:
            return "watchsimulator"
        case Target.WATCHOS_ARM32 | Target.WATCHOS_ARM64:
            return "watchos"
        case Target.MACOS_X64:
            return "macosx"
        case _:
            assert_never(target)


def _architecture_for(target: Target) -> str:
    match target:
        case Target.IOS_X64 | Target.TVOS_X64 | Target.WATCHOS_X64 | Target.MACOS_X64:
            return "x86_64"
        case Target.WATCHOS_X86:
            return "i386"
        case Target.IOS_ARM32:
            return "armv7"
        case Target.WATCHOS_ARM32:
            return "armv7k"
        case Target.IOS_ARM64 | Target.TVOS_ARM64:
            return "arm64"
        case Target.WATCHOS_ARM64:
            return "arm64_32"
        case _:
            assert_never(target)


def os_version_min_for(family: PlatformFamily) -> str:
    match family:
        case PlatformFamily.IOS | PlatformFamily.TVOS:
            return "9.0"
        case PlatformFamily.WATCHOS:
            return "2.0"
        case PlatformFamily.MACOS:
            return "10.11"
        case _:
            assert_never(family)


def _simulator_runtime_key_for(family: PlatformFamily) -> str | None:
    match family:
        case PlatformFamily.IOS:
            return "com.apple.CoreSimulator.SimRuntime.iOS"
        case PlatformFamily.TVOS:
            return "com.apple.CoreSimulator.SimRuntime.tvOS"
        case PlatformFamily.WATCHOS:
            return "com.apple.CoreSimulator.SimRuntime.watchOS"
        case PlatformFamily.MACOS:
            return None
        case _:
            assert_never(family)


def library_path_key_for(target: Target) -> str:
    """Name of the environment variable that carries the runtime library path."""
    if target.is_simulator:
        return SIMULATOR_LIBRARY_PATH_KEY
    return LIBRARY_PATH_KEY


@define(frozen=True, slots=True)
class PlatformMetadata:
    """Toolchain facts for one target, derived on demand."""

    target: Target
    sdk_name: str
    toolchain_root: Path
    os_version_min: str
    simulator_runtime_key: str | None = field(default=None)
    simulator_runtime_path: Path | None = field(default=None)

    @property
    def family(self) -> PlatformFamily:
        return self.target.family

    @property
    def is_simulator(self) -> bool:
        return self.target.is_simulator

    @property
    def triple(self) -> str:
        """LLVM target triple passed to the compiler."""
        suffix = "-simulator" if self.is_simulator else ""
        return f"{_architecture_for(self.target)}-apple-{self.family.value}{self.os_version_min}{suffix}"

    @property
    def toolchain_bin_dir(self) -> Path:
        return self.toolchain_root / "usr" / "bin"

    @property
    def default_runtime_library_dir(self) -> Path:
        """Swift runtime shipped inside the toolchain itself."""
        return self.toolchain_root / "usr" / "lib" / "swift-5.0" / self.sdk_name

    @property
    def runtime_library_dir(self) -> Path:
        """Directory containing libswiftCore.dylib for this target."""
        if self.simulator_runtime_path is not None:
            return self.simulator_runtime_path / "Contents" / "Resources" / "RuntimeRoot" / "usr" / "lib" / "swift"
        return self.default_runtime_library_dir

    @property
    def library_path_key(self) -> str:
        return library_path_key_for(self.target)


class TargetResolver:
    """Maps a Target to its PlatformMetadata using an injected toolchain provider."""

    def __init__(self, toolchain: "ToolchainProvider"):
        self.toolchain = toolchain

    def resolve(self, target: Target | str) -> PlatformMetadata:
        resolved = Target.parse(target)
        family = resolved.family
        os_version_min = os_version_min_for(family)
        runtime_key = _simulator_runtime_key_for(family) if resolved.is_simulator else None

        runtime_path: Path | None = None
        if runtime_key is not None:
            runtime_path = self.toolchain.latest_simulator_runtime(runtime_key, os_version_min)
            if runtime_path is None:
                # Older toolchains expose no simulator runtime metadata;
                # the toolchain-bundled Swift runtime is used instead.
                log.info(
                    "No simulator runtime found, falling back to toolchain runtime",
                    target=resolved.value,
                    runtime_key=runtime_key,
                )

        metadata = PlatformMetadata(
            target=resolved,
            sdk_name=sdk_name_for(resolved),
            toolchain_root=Path(self.toolchain.toolchain_root()),
            os_version_min=os_version_min,
            simulator_runtime_key=runtime_key,
            simulator_runtime_path=runtime_path,
        )
        log.debug(
            "Resolved target metadata",
            target=resolved.value,
            sdk=metadata.sdk_name,
            runtime_library_dir=str(metadata.runtime_library_dir),
        )
        return metadata

    def sdk_path(self, metadata: PlatformMetadata) -> str:
        return self.toolchain.sdk_path(metadata.sdk_name)

# 🔼⚙️
