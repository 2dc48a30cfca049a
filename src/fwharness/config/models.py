#
# config/models.py
#
"""
Attrs-based data models for fwharness configuration structure.
"""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from attrs import define, field, mutable

from fwharness.exceptions import MissingFieldError
from fwharness.stub import Language, collect_sources
from fwharness.targets import Target

PROVIDER_FILE_NAME = "provider.swift"
EXECUTABLE_FILE_NAME = "swiftTestExecutable"
DEFAULT_CODESIGN_COMMAND = ("/usr/bin/codesign", "--verbose", "-s", "-")
DEFAULT_INTERPRETER_CANDIDATES = ("/usr/bin/python3", "/usr/local/bin/python3")


# --- Validators and converters ---
def _validate_log_level(inst: Any, attr: Any, value: str) -> None:
    """Validator for standard logging level names."""
    valid = logging._nameToLevel.keys()
    if value.upper() not in valid:
        raise ValueError(f"Invalid log_level '{value}'. Must be one of {list(valid)}.")


def _validate_non_empty(inst: Any, attr: Any, value: Any) -> None:
    """Validator ensures a string or collection is not empty."""
    if not value:
        raise ValueError(f"Field '{attr.name}' must not be empty")


def _to_paths(values: Iterable[str | Path]) -> tuple[Path, ...]:
    if isinstance(values, (str, Path)):
        values = [values]
    return tuple(Path(v) for v in values)


def _to_strs(values: Iterable[str]) -> tuple[str, ...]:
    if isinstance(values, str):
        values = [values]
    return tuple(str(v) for v in values)


def _to_optional_path(value: str | Path | None) -> Path | None:
    return Path(value) if value else None


# --- Test description models ---
@define(frozen=True, slots=True)
class FrameworkDescriptor:
    """A framework the test executable links against. Built externally."""
    name: str = field(validator=_validate_non_empty)
    sources: tuple[Path, ...] = field(factory=tuple, converter=_to_paths)
    bitcode: bool = field(default=False)
    artifact: str = field()
    library: str | None = field(default=None)
    opts: tuple[str, ...] = field(factory=tuple, converter=_to_strs)

    @artifact.default
    def _artifact_defaults_to_name(self) -> str:
        return self.name


@define(frozen=True, slots=True)
class TestRunConfig:
    """Everything needed to build and run one framework test."""
    __test__ = False

    test_name: str = field(validator=_validate_non_empty)
    sources: tuple[Path, ...] = field(converter=_to_paths, validator=_validate_non_empty)
    frameworks: tuple[FrameworkDescriptor, ...] = field(converter=tuple, validator=_validate_non_empty)
    full_bitcode: bool = field(default=False)
    codesign: bool = field(default=True)


@mutable(slots=True)
class TestRunConfigBuilder:
    """
    Collects test settings step by step and fails fast on missing fields.

    Frameworks keep their insertion order, which is also the link order.
    """
    __test__ = False

    _test_name: str | None = field(default=None)
    _sources: list[Path] = field(factory=list, init=False)
    _frameworks: list[FrameworkDescriptor] = field(factory=list, init=False)
    _full_bitcode: bool = field(default=False, init=False)
    _codesign: bool = field(default=True, init=False)

    def test_name(self, name: str) -> "TestRunConfigBuilder":
        self._test_name = name
        return self

    def add_sources(self, *paths: str | Path) -> "TestRunConfigBuilder":
        self._sources.extend(Path(p) for p in paths)
        return self

    def add_framework(
        self,
        name: str,
        sources: Iterable[str | Path] = (),
        bitcode: bool = False,
        artifact: str | None = None,
        library: str | None = None,
        opts: Iterable[str] = (),
    ) -> FrameworkDescriptor:
        descriptor = FrameworkDescriptor(
            name=name,
            sources=collect_sources(sources, Language.KOTLIN),
            bitcode=bitcode,
            artifact=artifact or name,
            library=library,
            opts=tuple(opts),
        )
        self._frameworks.append(descriptor)
        return descriptor

    def full_bitcode(self, enabled: bool = True) -> "TestRunConfigBuilder":
        self._full_bitcode = enabled
        return self

    def codesign(self, enabled: bool = True) -> "TestRunConfigBuilder":
        self._codesign = enabled
        return self

    def build(self) -> TestRunConfig:
        if not self._test_name:
            raise MissingFieldError("test_name")
        if not self._sources:
            raise MissingFieldError("sources")
        if not self._frameworks:
            raise MissingFieldError("frameworks")
        return TestRunConfig(
            test_name=self._test_name,
            sources=tuple(self._sources),
            frameworks=tuple(self._frameworks),
            full_bitcode=self._full_bitcode,
            codesign=self._codesign,
        )


@define(frozen=True, slots=True)
class BuildArtifactPaths:
    """Paths derived for one run. Recomputed on every run, never stored."""
    output_root: Path = field(converter=Path)
    test_name: str = field()
    target_name: str = field()

    @property
    def test_dir(self) -> Path:
        return self.output_root / self.test_name

    @property
    def framework_dir(self) -> Path:
        return self.test_dir / self.target_name

    def framework_bundle(self, artifact: str) -> Path:
        return self.framework_dir / f"{artifact}.framework"

    def framework_binary(self, artifact: str) -> Path:
        return self.framework_bundle(artifact) / artifact

    @property
    def stub_path(self) -> Path:
        return self.test_dir / PROVIDER_FILE_NAME

    @property
    def executable_path(self) -> Path:
        return self.test_dir / EXECUTABLE_FILE_NAME


# --- Harness-wide settings ---
@define(frozen=True, slots=True)
class ToolsConfig:
    """Locations and command lines of the external tools."""
    compiler: str | None = field(default=None)
    codesign: tuple[str, ...] = field(default=DEFAULT_CODESIGN_COMMAND, converter=_to_strs, validator=_validate_non_empty)
    interpreter_candidates: tuple[str, ...] = field(
        default=DEFAULT_INTERPRETER_CANDIDATES, converter=_to_strs
    )
    developer_dir: Path | None = field(default=None, converter=_to_optional_path)
    additional_tools_dir: Path | None = field(default=None, converter=_to_optional_path)


@define(frozen=True, slots=True)
class GlobalConfig:
    """Global default settings for fwharness."""
    log_level: str = field(default="INFO", validator=_validate_log_level)
    output_root: Path = field(default=Path("build/fwharness"), converter=Path)
    target: Target = field(default=Target.MACOS_X64, converter=Target.parse)
    harness_main: Path = field(default=Path("framework/main.swift"), converter=Path)
    # Hosts at or above this version ship the Swift runtime; empty disables.
    system_runtime_min_host_version: str | None = field(default="10.14.4")
    simulator_device: str = field(default="booted")

    @property
    def numeric_log_level(self) -> int:
        return logging.getLevelName(self.log_level.upper())


@define(frozen=True, slots=True)
class HarnessConfig:
    """Root configuration object for the fwharness application."""
    tests: dict[str, TestRunConfig] = field(factory=dict)
    global_config: GlobalConfig = field(factory=GlobalConfig, metadata={"toml_name": "global"})
    tools: ToolsConfig = field(factory=ToolsConfig)

# 🔼⚙️
