#
# src/fwharness/runtime/builder.py
#
"""
Builds the final test executable from test sources, the generated provider
stub and the fixed harness main routine.
"""

from pathlib import Path

import structlog

from fwharness.config.models import BuildArtifactPaths, TestRunConfig
from fwharness.exceptions import ExternalToolFailure
from fwharness.process.protocols import ProcessRunner
from fwharness.runtime.coordinator import FrameworkCoordinator
from fwharness.stub import Language, collect_sources, write_provider_stub
from fwharness.targets import PlatformMetadata, Target, TargetResolver
from fwharness.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.builder")


class TestExecutableBuilder:
    """Coordinates frameworks, writes the stub, then compiles and links."""

    __test__ = False

    def __init__(
        self,
        resolver: TargetResolver,
        coordinator: FrameworkCoordinator,
        runner: ProcessRunner,
        target: Target | str,
        output_root: Path,
        harness_main: Path,
        compiler: str | None = None,
    ):
        self.resolver = resolver
        self.coordinator = coordinator
        self.runner = runner
        self.target = Target.parse(target)
        self.output_root = Path(output_root)
        self.harness_main = Path(harness_main)
        self.compiler = compiler

    def paths_for(self, config: TestRunConfig) -> BuildArtifactPaths:
        return BuildArtifactPaths(self.output_root, config.test_name, self.target.value)

    def compile_arguments(
        self,
        config: TestRunConfig,
        metadata: PlatformMetadata,
        paths: BuildArtifactPaths,
        sources: list[Path],
        sdk_path: str,
    ) -> list[str]:
        framework_dir = str(paths.framework_dir)
        args = [
            "-g",
            "-sdk", sdk_path,
            "-target", metadata.triple,
            "-Xlinker", "-rpath", "-Xlinker", "@executable_path/Frameworks",
            "-Xlinker", "-rpath", "-Xlinker", framework_dir,
            "-F", framework_dir,
            "-Xcc", "-Werror",  # Fail on warnings in framework headers.
        ]
        if config.full_bitcode:
            args.append("-embed-bitcode")
        args.extend(str(source) for source in sources)
        args.extend(["-o", str(paths.executable_path)])
        return args

    def build(self, config: TestRunConfig) -> Path:
        """
        Produces {output_root}/{test_name}/swiftTestExecutable.

        Raises:
            ExternalToolFailure: If signing, bitcode validation or compilation fails.
        """
        build_log = log.bind(test_name=config.test_name, target=self.target.value)
        paths = self.paths_for(config)

        build_log.info("Preparing frameworks", count=len(config.frameworks), emoji_key="build")
        self.coordinator.coordinate(
            config.frameworks,
            paths,
            self.target,
            full_bitcode=config.full_bitcode,
            codesign=config.codesign,
        )

        test_sources = collect_sources(config.sources, Language.SWIFT)
        stub = write_provider_stub(paths.stub_path, test_sources)

        metadata = self.resolver.resolve(self.target)
        sdk_path = self.resolver.sdk_path(metadata)
        compiler = self.compiler or str(metadata.toolchain_bin_dir / "swiftc")
        sources = [*test_sources, stub, self.harness_main]
        args = self.compile_arguments(config, metadata, paths, sources, sdk_path)

        build_log.info("Compiling test executable", compiler=compiler, sources=len(sources), emoji_key="build")
        result = self.runner.run(compiler, args)
        if not result.success:
            build_log.error("Compilation failed", exit_code=result.exit_code, emoji_key="fail")
            raise ExternalToolFailure("compiler", [compiler, *args], result)

        build_log.info("Test executable built", executable=str(paths.executable_path), emoji_key="success")
        return paths.executable_path

# 🔼⚙️
