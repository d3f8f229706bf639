"""FFmpeg process runner.

Launches a compiled FFmpegCommand, accumulates stderr in a background
thread and, when a StdErrParser is installed, feeds it periodic snapshots
of that stderr so callers receive progress while the transcode runs.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess  # nosec B404 - subprocess is required for FFmpeg invocation
import threading
from collections.abc import Mapping, Sequence
from datetime import datetime
from pathlib import Path

from ffcompose.command import FFmpegCommand, build_command
from ffcompose.config.models import FFmpegConfig
from ffcompose.exceptions import ExecutionError, ToolNotFoundError
from ffcompose.executor.buffer import StderrBuffer
from ffcompose.options.models import GlobalOptions, Input, Output
from ffcompose.progress.parser import StdErrParser

logger = logging.getLogger(__name__)


class FFmpegRunner:
    """Runs ffmpeg commands with optional progress parsing and cancellation.

    Example:
        >>> runner = FFmpegRunner()
        >>> runner.set_stderr_parser(DefaultStdErrParser(print))
        >>> runner.execute(None, [Input("in.mp4")], Output("out.mp4"))
    """

    TOOL_NAME: str = "ffmpeg"
    POLL_INTERVAL: float = 0.1  # Seconds between cancellation checks
    STDERR_DRAIN_TIMEOUT: float = 5.0  # Timeout for draining stderr after exit
    READ_CHUNK_SIZE: int = 65536

    def __init__(
        self,
        binary_path: str | Path | None = None,
        config: FFmpegConfig | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            binary_path: Explicit ffmpeg path. Takes precedence over config.
            config: FFmpeg configuration (binary path fallback).
        """
        self._explicit_path = Path(binary_path) if binary_path else None
        self._config = config or FFmpegConfig()
        self._binary_path: Path | None = None
        self._parser: StdErrParser | None = None

    @property
    def binary_path(self) -> Path:
        """Get path to ffmpeg, verifying availability.

        Resolution order: explicit path, configured path, PATH lookup.

        Raises:
            ToolNotFoundError: If ffmpeg cannot be located.
        """
        if self._binary_path is None:
            self._binary_path = self._resolve_binary()
        return self._binary_path

    def _resolve_binary(self) -> Path:
        for candidate in (self._explicit_path, self._config.binary_path):
            if candidate is not None:
                return candidate
        found = shutil.which(self.TOOL_NAME)
        if found is None:
            raise ToolNotFoundError(self.TOOL_NAME)
        return Path(found)

    def set_stderr_parser(self, parser: StdErrParser | None) -> None:
        """Install the parser fed with stderr snapshots (None to remove it)."""
        self._parser = parser

    def execute(
        self,
        global_options: GlobalOptions | None,
        inputs: Sequence[Input],
        output: Output,
        *,
        cancel: threading.Event | None = None,
        env: Mapping[str, str] | None = None,
        cwd: str | Path | None = None,
    ) -> None:
        """Compile the option model and run the resulting command.

        Raises:
            OptionError: If compilation fails. ffmpeg is not started.
            ExecutionError: If ffmpeg fails to start or exits non-zero.
            ToolNotFoundError: If ffmpeg cannot be located.
        """
        command = build_command(global_options, inputs, output)
        self.run(command, cancel=cancel, env=env, cwd=cwd)

    def run(
        self,
        command: FFmpegCommand,
        *,
        cancel: threading.Event | None = None,
        env: Mapping[str, str] | None = None,
        cwd: str | Path | None = None,
    ) -> None:
        """Run a compiled command and wait for it to exit.

        Stdout is discarded. Stderr is captured in full and, when a parser
        is installed, handed to it every parser.period seconds. Errors
        raised by the parser are logged and do not stop the process.

        Args:
            command: The compiled command.
            cancel: Event that kills the process when set.
            env: Extra environment variables, applied before command.env.
            cwd: Working directory for the process.

        Raises:
            ExecutionError: If ffmpeg fails to start, exits non-zero or is
                cancelled. Carries the argv and all captured stderr.
            ToolNotFoundError: If ffmpeg cannot be located.
        """
        argv = command.argv(self.binary_path)
        process_env = {**os.environ, **(env or {}), **command.env}

        logger.info("Running ffmpeg", extra={"argv": argv})
        try:
            process = subprocess.Popen(  # nosec B603
                argv,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                env=process_env,
                cwd=cwd,
            )
        except OSError as e:
            raise ExecutionError(argv, b"", cause=e) from e

        buffer = StderrBuffer()
        stop_event = threading.Event()

        def read_stderr() -> None:
            """Copy stderr chunks into the buffer until EOF."""
            try:
                assert process.stderr is not None
                while True:
                    chunk = process.stderr.read1(self.READ_CHUNK_SIZE)
                    if not chunk:
                        break
                    buffer.append(chunk)
            except (ValueError, OSError) as e:
                # Pipe closed or process terminated
                logger.debug("Stderr reader stopped: %s", e)

        reader_thread = threading.Thread(target=read_stderr, daemon=True)
        reader_thread.start()

        ticker_thread: threading.Thread | None = None
        parser = self._parser
        if parser is not None:

            def tick() -> None:
                """Feed stderr snapshots to the parser until stopped."""
                while not stop_event.wait(parser.period):
                    try:
                        parser.process(datetime.now(), buffer.snapshot())
                    except Exception as e:
                        logger.warning("Stderr parser error: %s", e)

            ticker_thread = threading.Thread(target=tick, daemon=True)
            ticker_thread.start()

        cancelled = False
        try:
            if cancel is None:
                process.wait()
            else:
                while process.poll() is None:
                    if cancel.wait(self.POLL_INTERVAL):
                        logger.info("Cancelling ffmpeg", extra={"pid": process.pid})
                        process.kill()
                        process.wait()
                        cancelled = True
                        break
        except BaseException:
            # Interrupted while waiting (e.g. KeyboardInterrupt): don't leave
            # ffmpeg running behind us
            process.kill()
            process.wait()
            raise
        finally:
            stop_event.set()
            reader_thread.join(timeout=self.STDERR_DRAIN_TIMEOUT)
            if reader_thread.is_alive():
                logger.warning("Stderr reader did not finish draining in time")
            if ticker_thread is not None:
                ticker_thread.join()
            if process.stderr is not None:
                process.stderr.close()

        stderr = buffer.snapshot()
        if cancelled:
            raise ExecutionError(
                argv, stderr, returncode=process.returncode, cancelled=True
            )
        context = {"pid": process.pid, "returncode": process.returncode}
        if process.returncode != 0:
            logger.warning(
                "ffmpeg exited with code %d", process.returncode, extra=context
            )
            raise ExecutionError(argv, stderr, returncode=process.returncode)

        logger.debug(
            "ffmpeg finished successfully",
            extra={**context, "stderr_bytes": len(stderr)},
        )
