"""Typed option model for ffmpeg invocations.

This package provides the value formatters (numeric shorthand, ratios,
scales), stream specifiers, filter graphs and the nested option objects
that render themselves into an ffmpeg argument list.
"""

from ffcompose.options.filters import (
    ComplexFilterOption,
    FilterOptions,
    render_filter_graph,
)
from ffcompose.options.models import (
    ENV_FORCE_COLOR,
    ENV_FORCE_NOCOLOR,
    DecodingOptions,
    EncodingOptions,
    GlobalOptions,
    Input,
    InputOptions,
    LogOptions,
    MapOption,
    Output,
    OutputOptions,
)
from ffcompose.options.stream import (
    StreamOption,
    StreamSpecifier,
    StreamType,
    format_filter,
    format_int,
    format_number,
    format_string,
    parse_stream_specifier,
)
from ffcompose.options.values import (
    Coder,
    DeinterlacingMode,
    LogLevel,
    Number,
    Preset,
    Profile,
    Ratio,
    Scale,
    Tune,
    parse_number,
)

__all__ = [
    "Coder",
    "ComplexFilterOption",
    "DecodingOptions",
    "DeinterlacingMode",
    "ENV_FORCE_COLOR",
    "ENV_FORCE_NOCOLOR",
    "EncodingOptions",
    "FilterOptions",
    "GlobalOptions",
    "Input",
    "InputOptions",
    "LogLevel",
    "LogOptions",
    "MapOption",
    "Number",
    "Output",
    "OutputOptions",
    "Preset",
    "Profile",
    "Ratio",
    "Scale",
    "StreamOption",
    "StreamSpecifier",
    "StreamType",
    "Tune",
    "format_filter",
    "format_int",
    "format_number",
    "format_string",
    "parse_number",
    "parse_stream_specifier",
    "render_filter_graph",
]
