"""Value types and formatters for ffmpeg flag arguments.

This module converts semantic values (numeric shorthand, ratios, scales,
durations) into the textual form ffmpeg expects, and parses numeric
shorthand back. It also holds the named constants used by option fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum

from ffcompose.exceptions import FormatError

# SI/binary prefix ranks, keyed by lowercase prefix
_PREFIX_RANKS: dict[str, int] = {"": 0, "k": 1, "m": 2, "g": 3, "t": 4, "p": 5}


class LogLevel(Enum):
    """ffmpeg -loglevel values."""

    QUIET = "quiet"  # Show nothing at all
    PANIC = "panic"  # Only fatal errors which could lead to a crash
    FATAL = "fatal"  # Errors after which the process cannot continue
    ERROR = "error"  # All errors, including recoverable ones
    WARNING = "warning"
    INFO = "info"  # ffmpeg's default
    VERBOSE = "verbose"
    DEBUG = "debug"
    TRACE = "trace"


class DeinterlacingMode(Enum):
    """Deinterlacing modes for -deint (hardware decoders)."""

    ADAPTIVE = "adaptive"
    BOB = "bob"
    WEAVE = "weave"


class Coder(Enum):
    """Entropy coder values for -coder."""

    AC = "ac"
    CABAC = "cabac"
    CAVLC = "cavlc"
    DEFAULT = "default"
    VLC = "vlc"


class Preset(Enum):
    """x264/x265 style encoder presets."""

    ULTRAFAST = "ultrafast"
    SUPERFAST = "superfast"
    VERYFAST = "veryfast"
    FASTER = "faster"
    FAST = "fast"
    MEDIUM = "medium"
    SLOW = "slow"
    SLOWER = "slower"
    VERYSLOW = "veryslow"


class Profile(Enum):
    """H.264 profiles."""

    BASELINE = "baseline"
    MAIN = "main"
    HIGH = "high"
    HIGH10 = "high10"
    HIGH422 = "high422"
    HIGH444 = "high444"


class Tune(Enum):
    """x264 tunes."""

    ANIMATION = "animation"
    FASTDECODE = "fastdecode"
    FILM = "film"
    GRAIN = "grain"
    STILLIMAGE = "stillimage"
    ZEROLATENCY = "zerolatency"


def enum_text(value: Enum | str) -> str:
    """Return the flag text for an enum member or a raw string."""
    if isinstance(value, Enum):
        return str(value.value)
    return value


def format_float(value: float, digits: int = 3) -> str:
    """Format a float with a fixed number of decimals (e.g., 29.97 -> "29.970")."""
    return f"{value:.{digits}f}"


def format_seconds(value: timedelta) -> str:
    """Format a duration as seconds with millisecond precision."""
    return format_float(value.total_seconds(), 3)


@dataclass(frozen=True)
class Number:
    """A magnitude that can be written with ffmpeg's unit shorthand.

    "12kiB" is Number(12.0, prefix="k", binary_multiple=True,
    byte_multiple=True), i.e. 12 * 1024 * 8 bits.

    Attributes:
        value: Numeric value before multipliers.
        prefix: SI prefix, one of "", k, M, G, T, P (case-insensitive).
        binary_multiple: Use powers of 1024 instead of powers of 1000.
        byte_multiple: Multiply the value by 8.
    """

    value: int | float
    prefix: str = ""
    binary_multiple: bool = False
    byte_multiple: bool = False

    def __post_init__(self) -> None:
        """Validate value type and prefix."""
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise TypeError(
                f"Number value must be int or float, got {type(self.value).__name__}"
            )
        if self.prefix.lower() not in _PREFIX_RANKS:
            raise FormatError(
                f"{self.value}{self.prefix}", f"unknown prefix {self.prefix!r}"
            )

    def render(self) -> str:
        """Render the shorthand text (e.g., "3MiB", "2.5k")."""
        if isinstance(self.value, float):
            text = format_float(self.value, 3).rstrip("0").rstrip(".")
        else:
            text = str(self.value)
        text += self.prefix
        if self.binary_multiple:
            text += "i"
        if self.byte_multiple:
            text += "B"
        return text

    def to_float(self) -> float:
        """Resolve the shorthand to a plain number of units."""
        result = float(self.value)
        if self.byte_multiple:
            result *= 8
        base = 1024.0 if self.binary_multiple else 1000.0
        return result * base ** _PREFIX_RANKS[self.prefix.lower()]

    def __str__(self) -> str:
        return self.render()


def parse_number(text: str) -> Number:
    """Parse numeric shorthand such as "176032kB" or "12MiB".

    Strips an optional trailing "B" (byte multiple), then an optional "i"
    (binary multiple), then a prefix letter if the last character is not a
    digit. The remainder must parse as a float.

    Args:
        text: Shorthand token.

    Returns:
        Parsed Number with a float value.

    Raises:
        FormatError: If the token is empty, the prefix is unknown, or the
            numeric remainder does not parse.
    """
    remainder = text
    byte_multiple = False
    binary_multiple = False
    prefix = ""

    if remainder.endswith("B"):
        byte_multiple = True
        remainder = remainder[:-1]
    if remainder.endswith("i"):
        binary_multiple = True
        remainder = remainder[:-1]
    if not remainder:
        raise FormatError(text, "missing numeric value")
    if not remainder[-1].isdigit():
        prefix = remainder[-1]
        remainder = remainder[:-1]
        if prefix.lower() not in _PREFIX_RANKS:
            raise FormatError(text, f"unknown prefix {prefix!r}")

    try:
        value = float(remainder)
    except ValueError:
        raise FormatError(text, f"{remainder!r} is not a number") from None

    return Number(
        value=value,
        prefix=prefix,
        binary_multiple=binary_multiple,
        byte_multiple=byte_multiple,
    )


@dataclass(frozen=True)
class Ratio:
    """A ratio such as a sample aspect ratio (1/1)."""

    antecedent: int
    consequent: int

    def render(self) -> str:
        return f"{self.antecedent}/{self.consequent}"


@dataclass(frozen=True)
class Scale:
    """Target dimensions for the scale filters.

    An unset dimension renders as -1, which tells ffmpeg to preserve the
    aspect ratio.
    """

    width: int | None = None
    height: int | None = None

    def render(self) -> str:
        width = self.width if self.width is not None else -1
        height = self.height if self.height is not None else -1
        return f"w={width}:h={height}"
