import os
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

import pytest

from fwharness.config import TestRunConfig, TestRunConfigBuilder
from fwharness.process import ProcessResult


class FakeToolchain:
    """In-memory ToolchainProvider."""

    def __init__(
        self,
        root: Path = Path("/Xcode/Toolchains/XcodeDefault.xctoolchain"),
        tools_dir: Path = Path("/Xcode/usr"),
        runtimes: dict[str, Path] | None = None,
        host_version: str = "13.0",
    ):
        self.root = root
        self.tools_dir = tools_dir
        self.runtimes = runtimes or {}
        self.host_version = host_version
        self.runtime_queries: list[tuple[str, str]] = []

    def toolchain_root(self) -> Path:
        return self.root

    def additional_tools_dir(self) -> Path:
        return self.tools_dir

    def sdk_path(self, sdk_name: str) -> str:
        return f"/SDKs/{sdk_name}.sdk"

    def latest_simulator_runtime(self, runtime_key: str, os_version_min: str) -> Path | None:
        self.runtime_queries.append((runtime_key, os_version_min))
        return self.runtimes.get(runtime_key)

    def host_os_version(self) -> str:
        return self.host_version


class RecordingRunner:
    """ProcessRunner that records calls and answers from a rule function."""

    def __init__(self, respond: Callable[[str, list[str]], ProcessResult] | None = None):
        self.calls: list[dict] = []
        self._respond = respond or (lambda executable, args: ProcessResult("", "", 0))

    def run(
        self,
        executable: str,
        args: Sequence[str],
        working_dir: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ProcessResult:
        call = {
            "executable": str(executable),
            "args": [str(a) for a in args],
            "working_dir": working_dir,
            "env": dict(env) if env is not None else None,
        }
        self.calls.append(call)
        return self._respond(call["executable"], call["args"])

    def executables(self) -> list[str]:
        return [c["executable"] for c in self.calls]


@pytest.fixture
def fake_toolchain() -> FakeToolchain:
    return FakeToolchain()


@pytest.fixture
def recording_runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def output_root(tmp_path: Path) -> Path:
    root = tmp_path / "out"
    root.mkdir()
    return root


@pytest.fixture
def test_sources(tmp_path: Path) -> list[Path]:
    src = tmp_path / "swift"
    src.mkdir()
    source = src / "values.swift"
    source.write_text("func ValuesTests() {}\n")
    return [source]


@pytest.fixture
def single_framework_config(test_sources: list[Path]) -> TestRunConfig:
    builder = TestRunConfigBuilder().test_name("values").add_sources(*test_sources).codesign(False)
    builder.add_framework("Values", sources=["testData/values"])
    return builder.build()


def make_framework_bundle(output_root: Path, test_name: str, target: str, artifact: str) -> Path:
    bundle = output_root / test_name / target / f"{artifact}.framework"
    bundle.mkdir(parents=True)
    (bundle / artifact).write_bytes(b"\xcf\xfa\xed\xfe")
    return bundle


@pytest.fixture
def framework_bundle_factory(output_root: Path):
    def _make(test_name: str, target: str, artifact: str) -> Path:
        return make_framework_bundle(output_root, test_name, target, artifact)

    return _make


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for key in list(os.environ):
        if key.startswith("FWHARNESS_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def runner_factory():
    """Builds RecordingRunner instances with a custom response rule."""
    return RecordingRunner


@pytest.fixture
def toolchain_factory():
    """Builds FakeToolchain instances with custom settings."""
    return FakeToolchain
