#
# src/fwharness/process/subprocess_runner.py
#
"""
Process runners built on the subprocess module.
"""
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path

import structlog

from fwharness.exceptions import ProcessLaunchError
from fwharness.process.protocols import ProcessResult, ProcessRunner

log = structlog.get_logger("process.runner")


class SubprocessRunner(ProcessRunner):
    """
    Implements the ProcessRunner protocol by spawning a local child process.
    """
    def run(
        self,
        executable: str,
        args: Sequence[str],
        working_dir: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ProcessResult:
        """
        Executes the program with subprocess.run, capturing both streams.
        """
        command = [str(executable), *[str(a) for a in args]]
        runner_log = log.bind(
            command=" ".join(command),
            working_dir=str(working_dir) if working_dir else None,
        )
        runner_log.info("Executing command")

        try:
            # cwd and env are handed to the same spawn call, the child never
            # sees a partially applied environment.
            completed = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=working_dir,
                env=dict(env) if env is not None else None,
                check=False,
            )
        except OSError as e:
            runner_log.error("Command could not be launched", command_executable=command[0])
            raise ProcessLaunchError(command[0], details=e) from e

        stdout = completed.stdout.decode("utf-8", errors="replace")
        stderr = completed.stderr.decode("utf-8", errors="replace")

        runner_log.info("Command finished", exit_code=completed.returncode)
        runner_log.debug(
            "Command output",
            stdout_len=len(stdout),
            stderr_len=len(stderr),
        )

        return ProcessResult(stdout=stdout, stderr=stderr, exit_code=completed.returncode)


class SimulatorProcessRunner(ProcessRunner):
    """
    Runs executables inside a simulator through `xcrun simctl spawn`.

    Environment variables prefixed with SIMCTL_CHILD_ are forwarded by simctl
    to the spawned process with the prefix stripped.
    """
    def __init__(self, device: str = "booted", runner: ProcessRunner | None = None):
        self.device = device
        self._runner = runner or SubprocessRunner()

    def run(
        self,
        executable: str,
        args: Sequence[str],
        working_dir: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ProcessResult:
        log.debug("Spawning in simulator", device=self.device, executable=str(executable))
        return self._runner.run(
            "/usr/bin/xcrun",
            ["simctl", "spawn", self.device, str(executable), *args],
            working_dir=working_dir,
            env=env,
        )

# 🔼⚙️
