# src/fwharness/cli/main.py

"""
Command line entry point for fwharness.

Commands build a test executable for one configured test, run it on the
selected target and report the result. Logging options live on the group so
that every subcommand shares them.
"""

from importlib.metadata import PackageNotFoundError, version

import click
import structlog

from fwharness.cli.config_cmds import config_cli
from fwharness.cli.run_cmds import run_cli, targets_cli
from fwharness.cli.utils import logging_options, setup_logging_from_context
from fwharness.telemetry import StructLogger

try:
    __version__ = version("fwharness")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

log: StructLogger = structlog.get_logger("cli.main")

EPILOG = """\b
Environment:
  FWHARNESS_CONF         configuration file (default: fwharness.toml)
  FWHARNESS_TARGET       target to build and run for
  FWHARNESS_OUTPUT_ROOT  directory holding the prebuilt framework bundles
  FWHARNESS_LOG_LEVEL    log level
"""


@click.group(context_settings={"help_option_names": ["-h", "--help"]}, epilog=EPILOG)
@click.version_option(__version__, "-V", "--version", package_name="fwharness")
@logging_options
@click.pass_context
def cli(
    ctx: click.Context,
    log_level: str | None,
    log_file: str | None,
    json_logs: bool | None,
):
    """
    fwharness: compile a test executable against prebuilt frameworks and run it.

    Frameworks are validated for embedded bitcode and code signed before the
    test sources are compiled and linked against them. The executable then runs
    on the host, a device or a simulator, depending on the target.

    Settings are taken from command line options first, then FWHARNESS_*
    environment variables, then fwharness.toml, then built-in defaults.
    """
    ctx.ensure_object(dict)

    ctx.obj["LOG_LEVEL"] = log_level
    ctx.obj["LOG_FILE"] = log_file
    ctx.obj["JSON_LOGS"] = bool(json_logs)

    # Logs go to stderr at WARNING unless asked otherwise; stdout carries the report.
    setup_logging_from_context(ctx, default_log_level="WARNING")
    log.debug(
        "fwharness starting",
        command=ctx.invoked_subcommand,
        log_level=log_level,
        log_file=log_file,
    )


cli.add_command(config_cli)
cli.add_command(run_cli)
cli.add_command(targets_cli)

if __name__ == "__main__":
    cli()

# 🖥️⚙️
