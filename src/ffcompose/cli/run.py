"""CLI run command: execute a job file with live progress."""

import logging
from datetime import timedelta
from pathlib import Path

import click

from ffcompose.cli.exit_codes import ExitCode
from ffcompose.cli.output import (
    error_exit,
    format_progress,
    format_summary,
    load_job_or_exit,
)
from ffcompose.config import FFComposeConfig
from ffcompose.exceptions import ExecutionError, OptionError, ToolNotFoundError
from ffcompose.executor import FFmpegRunner
from ffcompose.progress import (
    DefaultStdErrParser,
    DefaultStdErrResults,
    ProgressAggregator,
    percent_complete,
)

logger = logging.getLogger(__name__)

# Number of trailing stderr lines shown when ffmpeg fails
STDERR_TAIL_LINES = 10


def _stderr_tail(stderr: bytes, lines: int = STDERR_TAIL_LINES) -> list[str]:
    """Last non-empty stderr lines, with progress rewrites collapsed."""
    text = stderr.decode("utf-8", errors="replace")
    result = [line.split("\r")[-1].rstrip() for line in text.splitlines()]
    return [line for line in result if line][-lines:]


@click.command("run")
@click.argument("job_file", type=click.Path(path_type=Path))
@click.option(
    "--progress-period",
    type=float,
    default=None,
    help="Seconds between progress updates (default: from config, 1.0).",
)
@click.option(
    "--duration",
    type=float,
    default=None,
    help="Expected output duration in seconds; enables percentage output.",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Do not print progress lines.",
)
@click.pass_context
def run_command(
    ctx: click.Context,
    job_file: Path,
    progress_period: float | None,
    duration: float | None,
    quiet: bool,
) -> None:
    """Run ffmpeg for a job file and report progress.

    JOB_FILE is a YAML job description. Progress lines go to stderr; a
    summary is printed once ffmpeg exits successfully.
    """
    config: FFComposeConfig = ctx.obj["config"]
    period = (
        progress_period
        if progress_period is not None
        else config.ffmpeg.progress_period
    )
    if period <= 0:
        raise click.BadParameter(
            "must be positive", param_hint="'--progress-period'"
        )

    job = load_job_or_exit(job_file)
    expected = timedelta(seconds=duration) if duration is not None else None
    aggregator = ProgressAggregator()

    def on_progress(results: DefaultStdErrResults) -> None:
        if not aggregator.add_sample(results):
            return
        if quiet:
            return
        percent = percent_complete(results, expected) if expected else None
        click.echo(format_progress(results, percent), err=True)

    runner = FFmpegRunner(config=config.ffmpeg)
    runner.set_stderr_parser(DefaultStdErrParser(on_progress, period=period))

    try:
        runner.execute(job.global_options, job.inputs, job.output)
    except OptionError as e:
        error_exit(str(e), ExitCode.OPTION_ERROR)
    except ToolNotFoundError as e:
        error_exit(str(e), ExitCode.TOOL_NOT_AVAILABLE)
    except ExecutionError as e:
        logger.debug("Run failed: %s", e)
        if e.cause is not None:
            error_exit(f"Could not start ffmpeg: {e.cause}", ExitCode.TOOL_NOT_AVAILABLE)
        for line in _stderr_tail(e.stderr):
            click.echo(f"  {line}", err=True)
        error_exit(
            f"ffmpeg exited with code {e.returncode}", ExitCode.OPERATION_FAILED
        )
    except KeyboardInterrupt:
        click.echo("\nInterrupted - ffmpeg was stopped.", err=True)
        raise SystemExit(ExitCode.INTERRUPTED) from None

    click.echo(format_summary(aggregator.summarize()))
