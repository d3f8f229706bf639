"""ffcompose - typed ffmpeg command composition with live progress.

Build an option model, compile it into an ffmpeg argument vector and run
it while a stderr parser reports progress:

    runner = FFmpegRunner()
    runner.set_stderr_parser(DefaultStdErrParser(print))
    runner.execute(
        GlobalOptions(overwrite=True),
        [Input("in.mp4")],
        Output("out.mp4"),
    )
"""

from ffcompose.command import FFmpegCommand, build_command
from ffcompose.exceptions import (
    ConfigError,
    ExecutionError,
    FFComposeError,
    FormatError,
    JobFileError,
    OptionError,
    ToolNotFoundError,
    TypeMismatchError,
)
from ffcompose.executor import FFmpegRunner
from ffcompose.options import (
    DecodingOptions,
    EncodingOptions,
    GlobalOptions,
    Input,
    InputOptions,
    LogOptions,
    MapOption,
    Number,
    Output,
    OutputOptions,
    StreamOption,
    StreamSpecifier,
    StreamType,
    parse_number,
)
from ffcompose.progress import (
    DefaultStdErrParser,
    DefaultStdErrResults,
    StdErrParser,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "DecodingOptions",
    "DefaultStdErrParser",
    "DefaultStdErrResults",
    "EncodingOptions",
    "ExecutionError",
    "FFComposeError",
    "FFmpegCommand",
    "FFmpegRunner",
    "FormatError",
    "GlobalOptions",
    "Input",
    "InputOptions",
    "JobFileError",
    "LogOptions",
    "MapOption",
    "Number",
    "OptionError",
    "Output",
    "OutputOptions",
    "StdErrParser",
    "StreamOption",
    "StreamSpecifier",
    "StreamType",
    "ToolNotFoundError",
    "TypeMismatchError",
    "__version__",
    "build_command",
    "parse_number",
]
