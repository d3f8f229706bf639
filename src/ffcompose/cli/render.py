"""CLI render command: compile a job file without running ffmpeg."""

import json
import logging
from pathlib import Path

import click

from ffcompose.cli.exit_codes import ExitCode
from ffcompose.cli.output import error_exit, format_command_line, load_job_or_exit
from ffcompose.config import FFComposeConfig
from ffcompose.exceptions import OptionError

logger = logging.getLogger(__name__)


@click.command("render")
@click.argument("job_file", type=click.Path(path_type=Path))
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output argv and environment additions as JSON.",
)
@click.pass_context
def render_command(ctx: click.Context, job_file: Path, json_output: bool) -> None:
    """Print the ffmpeg command compiled from a job file.

    JOB_FILE is a YAML job description. Nothing is executed, so ffmpeg
    does not need to be installed.
    """
    config: FFComposeConfig = ctx.obj["config"]
    job = load_job_or_exit(job_file, json_output)

    try:
        command = job.command()
    except OptionError as e:
        logger.debug("Compilation failed at %s", " -> ".join(e.path))
        error_exit(str(e), ExitCode.OPTION_ERROR, json_output)

    binary = config.ffmpeg.binary_path or "ffmpeg"
    if json_output:
        click.echo(
            json.dumps(
                {"argv": command.argv(binary), "env": command.env},
                indent=2,
            )
        )
    else:
        click.echo(format_command_line(command, binary))
