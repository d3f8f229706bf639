"""FFmpeg stderr progress parsing.

FFmpeg rewrites its status line in place using carriage returns:

    frame=17448 fps=254 q=31.0 size=  176032kB time=00:11:38.14 bitrate=2065.5kbits/s speed=10.2x\r

The parser is polled on a fixed period with a snapshot of everything
written to stderr so far. Each tick looks at the last line, picks the most
recently completed status record and decodes it.

Each tick is stateless: if no new record was completed between two ticks,
the same record is decoded and delivered again. Consumers that need one
callback per record should deduplicate on frame/time (see
ProgressAggregator).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

from ffcompose.exceptions import FormatError
from ffcompose.options.values import parse_number

logger = logging.getLogger(__name__)

DEFAULT_PERIOD: float = 1.0


@dataclass
class DefaultStdErrResults:
    """One progress sample decoded from an ffmpeg status record.

    Fields are None when their key was absent or failed to parse.
    """

    bitrate: float | None = None  # bits/s
    fps: int | None = None
    frame: int | None = None
    q: float | None = None
    size: int | None = None  # bits
    speed: float | None = None
    time: timedelta | None = None


class StdErrParser(Protocol):
    """Protocol for objects that consume ffmpeg's stderr while it runs."""

    @property
    def period(self) -> float:
        """Seconds between two process() calls."""
        ...

    def process(self, tick: datetime, buffer: bytes) -> None:
        """Handle a snapshot of everything written to stderr so far.

        Args:
            tick: Time of the tick.
            buffer: Stderr contents; only ever grows between calls.
        """
        ...


def _parse_time(value: str) -> timedelta | None:
    """Parse HH:MM:SS.cc where the fraction is in centiseconds."""
    whole, _, fraction = value.partition(".")
    parts = whole.split(":")
    if len(parts) < 3:
        return None
    try:
        hours, minutes, seconds = (int(p) for p in parts[:3])
        centiseconds = int(fraction) if fraction else 0
    except ValueError:
        return None
    # Raises OverflowError for absurd hour counts; the caller leaves time unset
    return timedelta(
        hours=hours,
        minutes=minutes,
        seconds=seconds,
        milliseconds=centiseconds * 10,
    )


def _decode_value(results: DefaultStdErrResults, key: str, value: str) -> None:
    """Store value under key, leaving the field unset if it doesn't parse."""
    try:
        if key == "frame":
            results.frame = int(value)
        elif key == "fps":
            results.fps = int(float(value))
        elif key == "q":
            results.q = float(value)
        elif key == "size":
            results.size = int(parse_number(value).to_float())
        elif key == "bitrate":
            # Only the kbits/s unit is emitted by current ffmpeg builds
            results.bitrate = float(value.removesuffix("kbits/s")) * 1000
        elif key == "speed":
            results.speed = float(value.removesuffix("x"))
        elif key == "time":
            parsed = _parse_time(value)
            if parsed is not None:
                results.time = parsed
    except (ValueError, OverflowError, FormatError) as e:
        logger.debug("Ignoring unparseable progress value %s=%r: %s", key, value, e)


def parse_results(record: str | bytes) -> DefaultStdErrResults:
    """Decode one status record into a DefaultStdErrResults.

    The record is split on "="; each piece holds the value of the pending
    key as its first whitespace token and, when it has several tokens, the
    next key as its last one. This copes with ffmpeg's inconsistent padding
    (e.g. "size=  176032kB").

    Args:
        record: A single status record, without carriage returns.

    Returns:
        Decoded sample; unknown keys are ignored.
    """
    if isinstance(record, bytes):
        record = record.decode("utf-8", errors="replace")

    results = DefaultStdErrResults()
    key: str | None = None
    for idx, piece in enumerate(record.split("=")):
        tokens = piece.split()
        if not tokens:
            continue
        if key is not None:
            _decode_value(results, key, tokens[0])
        if len(tokens) > 1 or idx == 0:
            key = tokens[-1]
        else:
            key = None
    return results


def latest_record(buffer: bytes) -> bytes | None:
    """Return the most recently completed status record, if any.

    Only the last line is considered. Its final carriage-return segment is
    still being written, so the record before it is the latest complete one.
    """
    last_line = buffer.split(b"\n")[-1]
    segments = last_line.split(b"\r")
    if len(segments) < 2:
        return None
    return segments[-2]


class DefaultStdErrParser:
    """Default StdErrParser delivering DefaultStdErrResults to a callback."""

    def __init__(
        self,
        callback: Callable[[DefaultStdErrResults], None],
        period: float = DEFAULT_PERIOD,
    ) -> None:
        """Initialize the parser.

        Args:
            callback: Called once per tick with the latest sample.
            period: Seconds between ticks.
        """
        if period <= 0:
            raise ValueError(f"period must be positive, got {period}")
        self._callback = callback
        self._period = period

    @property
    def period(self) -> float:
        return self._period

    def process(self, tick: datetime, buffer: bytes) -> None:
        record = latest_record(buffer)
        if record is None:
            return
        self._callback(parse_results(record))
