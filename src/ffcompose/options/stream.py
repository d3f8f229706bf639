"""Stream specifiers and stream-scoped option binding.

A stream-scoped option renders as ``-<flag>[:<specifier>] <value>``, e.g.
``-codec:v h264`` or ``-b:a:1 128k``. The value is formatted by a per-flag
formatter that rejects values of the wrong type.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from ffcompose.exceptions import TypeMismatchError
from ffcompose.options.values import Number

T = TypeVar("T")

# Formats a value for a flag, raising TypeMismatchError on a wrong type
ValueFormatter = Callable[[str, object], str]


class StreamType(Enum):
    """Stream types addressable by a stream specifier."""

    AUDIO = "a"
    SUBTITLE = "s"
    VIDEO = "v"
    VIDEO_NOT_THUMBNAIL = "V"  # Video streams that are not attached pictures


@dataclass(frozen=True)
class StreamSpecifier:
    """Selects one or more streams of an input or output.

    Rendering precedence: a non-empty name wins outright; otherwise the
    type (if set) optionally followed by ``:index``; an index alone renders
    as the bare index.
    """

    type: StreamType | None = None
    index: int | None = None
    name: str | None = None

    def render(self) -> str:
        if self.name:
            return self.name
        text = self.type.value if self.type is not None else ""
        if self.index is not None:
            if text:
                text += ":"
            text += str(self.index)
        return text

    def __str__(self) -> str:
        return self.render()


def parse_stream_specifier(text: str) -> StreamSpecifier:
    """Parse the textual form of a stream specifier.

    "v" and "a:1" map to type/index, "2" to a bare index. Anything else
    (e.g. "m:language:eng" or a filter pad label) is kept verbatim as the
    specifier name.

    Raises:
        ValueError: If text is empty.
    """
    text = text.strip()
    if not text:
        raise ValueError("stream specifier cannot be empty")
    if text.isdigit():
        return StreamSpecifier(index=int(text))

    type_text, _, index_text = text.partition(":")
    stream_types = {t.value: t for t in StreamType}
    if type_text in stream_types:
        if not index_text:
            return StreamSpecifier(type=stream_types[type_text])
        if index_text.isdigit():
            return StreamSpecifier(type=stream_types[type_text], index=int(index_text))
    return StreamSpecifier(name=text)


@dataclass(frozen=True)
class StreamOption(Generic[T]):
    """An option value optionally scoped to a stream."""

    value: T
    stream: StreamSpecifier | None = None

    def render(self, flag: str, formatter: ValueFormatter) -> tuple[str, str]:
        """Render the flag and its formatted value.

        Args:
            flag: Flag name including the dash (e.g., "-codec").
            formatter: Formatter for this flag's value type.

        Returns:
            Tuple of (flag with optional specifier, formatted value).

        Raises:
            TypeMismatchError: If the formatter rejects the value.
        """
        name = flag
        if self.stream is not None:
            name += ":" + self.stream.render()
        return name, formatter(flag, self.value)


def format_string(flag: str, value: object) -> str:
    """Format a string-valued option."""
    if isinstance(value, Enum) and isinstance(value.value, str):
        return value.value
    if not isinstance(value, str):
        raise TypeMismatchError(flag, "a string", value)
    return value


def format_int(flag: str, value: object) -> str:
    """Format an int-valued option."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeMismatchError(flag, "an int", value)
    return str(value)


def format_number(flag: str, value: object) -> str:
    """Format a Number-valued option (e.g., bitrates)."""
    if not isinstance(value, Number):
        raise TypeMismatchError(flag, "a Number", value)
    return value.render()


def format_filter(flag: str, value: object) -> str:
    """Format a FilterOptions-valued option."""
    from ffcompose.options.filters import FilterOptions

    if not isinstance(value, FilterOptions):
        raise TypeMismatchError(flag, "a FilterOptions", value)
    return value.render()

