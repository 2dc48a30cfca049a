# src/fwharness/cli/run_cmds.py

from pathlib import Path

import click
import structlog

from fwharness.cli.utils import config_path_option, logging_options, setup_logging_from_context
from fwharness.config import load_config
from fwharness.exceptions import FwHarnessError
from fwharness.runtime import create_driver
from fwharness.state import STATE_EMOJI_MAP
from fwharness.targets import Target, os_version_min_for, sdk_name_for
from fwharness.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.run")

TARGET_CHOICES = click.Choice([t.value for t in Target], case_sensitive=False)


@click.command(name="run")
@click.argument("test_name")
@config_path_option
@click.option(
    "-t",
    "--target",
    type=TARGET_CHOICES,
    default=None,
    help="Target to build and run for (overrides config and FWHARNESS_TARGET).",
)
@click.option(
    "-o",
    "--output-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding framework builds and test outputs.",
)
@logging_options
@click.pass_context
def run_cli(
    ctx: click.Context,
    test_name: str,
    config_path: Path,
    target: str | None,
    output_root: Path | None,
    **kwargs,
):
    """Build the test executable for TEST_NAME and run it."""
    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
    )
    log.info("Executing 'run' command", test_name=test_name, config_path=str(config_path))

    try:
        config = load_config(config_path)
        driver = create_driver(config, test_name, target=target, output_root=output_root)
        report = driver.run()
    except FwHarnessError as e:
        log.error("Test run aborted", test_name=test_name, error=str(e))
        click.echo(f"Error: {e}", err=True)
        ctx.exit(2)

    click.echo(report.render())
    click.echo(f"{STATE_EMOJI_MAP[report.state]} {test_name}: {report.state.name}")
    if not report.passed:
        ctx.exit(1)


@click.command(name="targets")
@logging_options
@click.pass_context
def targets_cli(ctx: click.Context, **kwargs):
    """List supported targets and their platform facts."""
    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
    )
    for target in Target:
        kind = "simulator" if target.is_simulator else "device"
        click.echo(
            f"{target.value:<14} {target.family.value:<8} {kind:<10} "
            f"{sdk_name_for(target):<18} min {os_version_min_for(target.family)}"
        )

# 🔼⚙️
