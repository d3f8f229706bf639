"""CLI output formatting for JSON and human-readable output.

This module provides consistent error handling and the progress/summary
formatting shared by the CLI commands.
"""

from __future__ import annotations

import json
import shlex
import sys
from datetime import timedelta
from pathlib import Path
from typing import NoReturn

import click

from ffcompose.cli.exit_codes import ExitCode
from ffcompose.command import FFmpegCommand
from ffcompose.exceptions import JobFileError
from ffcompose.jobs import Job, load_job
from ffcompose.progress import DefaultStdErrResults, ProgressSummary


def error_exit(
    message: str,
    code: ExitCode | int,
    json_output: bool = False,
) -> NoReturn:
    """Exit with formatted error message.

    Args:
        message: Error message to display.
        code: Exit code to use (ExitCode enum or int).
        json_output: Whether to format output as JSON.
    """
    if isinstance(code, ExitCode):
        code_name = code.name
        exit_value = int(code)
    else:
        code_name = "UNKNOWN_ERROR"
        exit_value = code

    if json_output:
        click.echo(
            json.dumps(
                {
                    "status": "failed",
                    "error": {
                        "code": code_name,
                        "message": message,
                    },
                }
            ),
            err=True,
        )
    else:
        click.echo(f"Error: {message}", err=True)

    sys.exit(exit_value)


def load_job_or_exit(job_path: Path, json_output: bool = False) -> Job:
    """Load a job file, exiting with the matching code on failure."""
    if not job_path.exists():
        error_exit(f"Job file not found: {job_path}", ExitCode.JOB_NOT_FOUND, json_output)
    try:
        return load_job(job_path)
    except JobFileError as e:
        error_exit(str(e), ExitCode.JOB_VALIDATION_ERROR, json_output)


def format_command_line(command: FFmpegCommand, binary: str | Path) -> str:
    """Render a command as a copy-pasteable shell line.

    Environment additions are emitted as leading VAR=value assignments.
    """
    parts = [f"{key}={shlex.quote(value)}" for key, value in sorted(command.env.items())]
    parts.append(shlex.join(command.argv(binary)))
    return " ".join(parts)


def format_timedelta(value: timedelta) -> str:
    """Format a duration as HH:MM:SS.cc, like ffmpeg does."""
    centiseconds = round(value.total_seconds() * 100)
    seconds, centis = divmod(centiseconds, 100)
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{centis:02d}"


def format_progress(results: DefaultStdErrResults, percent: float | None = None) -> str:
    """Format one progress sample as a single status line."""
    parts: list[str] = []
    if percent is not None:
        parts.append(f"{percent:5.1f}%")
    if results.frame is not None:
        parts.append(f"frame={results.frame}")
    if results.fps is not None:
        parts.append(f"fps={results.fps}")
    if results.time is not None:
        parts.append(f"time={format_timedelta(results.time)}")
    if results.bitrate is not None:
        parts.append(f"bitrate={results.bitrate / 1000:.1f}kbit/s")
    if results.speed is not None:
        parts.append(f"speed={results.speed:g}x")
    return " ".join(parts)


def format_summary(summary: ProgressSummary) -> str:
    """Format aggregated progress metrics for display after a run."""
    lines = ["Transcode complete."]
    if summary.total_frames is not None:
        lines.append(f"  Frames:      {summary.total_frames}")
    if summary.last_time is not None:
        lines.append(f"  Duration:    {format_timedelta(summary.last_time)}")
    if summary.avg_fps is not None:
        lines.append(
            f"  FPS:         {summary.avg_fps:.1f} avg, {summary.peak_fps} peak"
        )
    if summary.avg_bitrate is not None:
        lines.append(f"  Bitrate:     {summary.avg_bitrate / 1000:.1f} kbit/s avg")
    lines.append(f"  Samples:     {summary.sample_count}")
    return "\n".join(lines)
