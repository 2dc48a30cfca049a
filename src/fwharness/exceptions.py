#
# src/fwharness/exceptions.py
#
"""
Custom exceptions for the fwharness framework test harness.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fwharness.process.protocols import ProcessResult


class FwHarnessError(Exception):
    """Base class for all harness errors."""

    pass


class ConfigurationError(FwHarnessError):
    """Raised when configuration is missing, malformed, or inconsistent."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        full_message = message
        if path:
            full_message += f" (Config: '{path}')"
        super().__init__(full_message)


class MissingFieldError(ConfigurationError):
    """Raised by the config builder when a required field was never set."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Required field '{field_name}' is not set")


class UnsupportedTargetError(ConfigurationError):
    """Raised for a target that the harness does not know how to handle."""

    def __init__(self, target: object):
        self.target = target
        super().__init__(f"Test target '{target}' is not supported")


class MissingFrameworkError(FwHarnessError):
    """An externally built framework bundle is not where it is expected."""

    def __init__(self, framework: str, bundle_path: str):
        self.framework = framework
        self.bundle_path = bundle_path
        super().__init__(f"Framework '{framework}' was not built: '{bundle_path}' does not exist")


class MissingInterpreterError(FwHarnessError):
    """None of the candidate interpreter paths exist on this host."""

    def __init__(self, candidates: list[str]):
        self.candidates = list(candidates)
        super().__init__(f"Can't find an interpreter, tried: {', '.join(self.candidates)}")


class ProcessLaunchError(FwHarnessError):
    """The executable could not be started at all."""

    def __init__(self, executable: str, details: Exception | None = None):
        self.executable = executable
        self.details = details
        super().__init__(f"Failed to launch '{executable}'. Is it installed and executable?")
        if details:
            self.add_note(f"Original error: {type(details).__name__}: {details}")


def _format_output(result: "ProcessResult") -> str:
    return f"--- STDOUT ---\n{result.stdout}\n--- STDERR ---\n{result.stderr}"


class ExternalToolFailure(FwHarnessError):
    """Compiler, code signer or bitcode validator exited with a non-zero code."""

    def __init__(self, tool: str, command: list[str], result: "ProcessResult"):
        self.tool = tool
        self.command = list(command)
        self.result = result
        super().__init__(
            f"{tool} failed with exit code {result.exit_code}: {' '.join(self.command)}\n"
            f"{_format_output(result)}"
        )


class TestExecutionFailure(FwHarnessError):
    """The built test executable exited with a non-zero code."""

    __test__ = False

    def __init__(self, executable: str, result: "ProcessResult"):
        self.executable = executable
        self.result = result
        super().__init__(
            f"Execution of {executable} failed with exit code: {result.exit_code}\n"
            f"{_format_output(result)}"
        )


# 🔼⚙️
