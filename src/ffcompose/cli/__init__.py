"""CLI module for ffcompose."""

import logging
import sys
from pathlib import Path

import click

from ffcompose.cli.exit_codes import ExitCode
from ffcompose.config import get_config
from ffcompose.exceptions import ConfigError
from ffcompose.logging import configure_logging

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(package_name="ffcompose")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Config file (default: ~/.ffcompose/config.toml).",
)
@click.option(
    "--ffmpeg-binary-path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to the ffmpeg executable (default: looked up in PATH).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    ffmpeg_binary_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """ffcompose - Compose and run ffmpeg commands from job files."""
    ctx.ensure_object(dict)

    try:
        config = get_config(
            config_path,
            ffmpeg_path=ffmpeg_binary_path,
            log_level=log_level,
            log_file=log_file,
            log_format="json" if log_json else None,
        )
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.CONFIG_ERROR)

    configure_logging(config.logging)
    logger.debug(
        "ffcompose starting: ffmpeg=%s, progress_period=%s",
        config.ffmpeg.binary_path or "PATH",
        config.ffmpeg.progress_period,
    )
    ctx.obj["config"] = config


# Defer import to avoid circular dependency
def _register_commands():
    from ffcompose.cli.render import render_command
    from ffcompose.cli.run import run_command

    main.add_command(render_command)
    main.add_command(run_command)


_register_commands()
