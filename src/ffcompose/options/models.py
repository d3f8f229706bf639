"""Option model for ffmpeg invocations.

Each option type appends its flags to an argument list (and, for log
colors, to an environment mapping) in a fixed order. The ordering matters:
ffmpeg applies per-file options to the next -i or output path, so the
order of these methods mirrors:

    ffmpeg [global_options] {[input_file_options] -i input_url} ...
        {[output_file_options] output_url}

Optional fields use None for "flag omitted"; a present zero value still
emits the flag.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import timedelta

from ffcompose.exceptions import OptionError, TypeMismatchError
from ffcompose.options.filters import (
    ComplexFilterOption,
    FilterOptions,
    render_filter_graph,
)
from ffcompose.options.stream import (
    StreamOption,
    StreamSpecifier,
    ValueFormatter,
    format_filter,
    format_int,
    format_number,
    format_string,
)
from ffcompose.options.values import (
    Coder,
    DeinterlacingMode,
    LogLevel,
    Number,
    Preset,
    Profile,
    Tune,
    enum_text,
    format_float,
    format_seconds,
)

# Environment variables understood by libavutil's logger
ENV_FORCE_COLOR = "AV_LOG_FORCE_COLOR"
ENV_FORCE_NOCOLOR = "AV_LOG_FORCE_NOCOLOR"


def _append_stream_option(
    args: list[str],
    flag: str,
    option: StreamOption,
    formatter: ValueFormatter,
    index: int | None = None,
) -> None:
    try:
        args.extend(option.render(flag, formatter))
    except TypeMismatchError as e:
        raise OptionError(flag, e, index=index) from e


def _append_stream_options(
    args: list[str],
    flag: str,
    options: Sequence[StreamOption] | None,
    formatter: ValueFormatter,
) -> None:
    """Append a repeatable stream option, stopping at the first bad entry."""
    for idx, option in enumerate(options or ()):
        _append_stream_option(args, flag, option, formatter, index=idx)


@dataclass
class LogOptions:
    """Logging behaviour of the ffmpeg process.

    Attributes:
        color: Force (True) or disable (False) colored output via the
            environment. None leaves ffmpeg's detection alone.
        level: -loglevel value.
        repeated: Prefix the level with "repeat+" so repeated lines are
            not collapsed.
    """

    color: bool | None = None
    level: LogLevel | str | None = None
    repeated: bool = False

    def append_to(self, args: list[str], env: dict[str, str]) -> None:
        if self.color is not None:
            env[ENV_FORCE_COLOR if self.color else ENV_FORCE_NOCOLOR] = "1"
        if self.level:
            value = enum_text(self.level)
            if self.repeated:
                value = "repeat+" + value
            args.extend(["-loglevel", value])


@dataclass
class GlobalOptions:
    """Options that apply to the whole ffmpeg invocation.

    Attributes:
        hide_banner: Suppress the copyright/build banner.
        log: Log options.
        overwrite: True emits -y, False emits -n, None leaves the prompt.
        no_stats: Disable the periodic progress line (-nostats). Progress
            parsing needs the stats line, so leave this off when a parser
            is installed.
        report: Dump the command line and console output to a
            program-YYYYMMDD-HHMMSS.log file (implies -loglevel verbose).
    """

    hide_banner: bool = False
    log: LogOptions | None = None
    overwrite: bool | None = None
    no_stats: bool = False
    report: bool = False

    def append_to(self, args: list[str], env: dict[str, str]) -> None:
        if self.hide_banner:
            args.append("-hide_banner")
        if self.log is not None:
            self.log.append_to(args, env)
        if self.overwrite is not None:
            args.append("-y" if self.overwrite else "-n")
        if self.no_stats:
            args.append("-nostats")
        if self.report:
            args.append("-report")


@dataclass
class DecodingOptions:
    """Decoding options for an input file.

    Attributes:
        codec: Decoder to force, optionally per stream (-c).
        deinterlacing_mode: Hardware decoder deinterlacing (-deint).
        drop_second_field: Drop the second field of interlaced frames.
        duration: Limit how much of the input is read (-t). Only emitted
            when positive.
        hardware_acceleration: Hardware acceleration method (-hwaccel).
        hardware_acceleration_device: Device index for -hwaccel_device;
            only emitted together with hardware_acceleration.
        position: Seek position in the input (-ss). Only emitted when
            positive.
    """

    codec: StreamOption[str] | None = None
    deinterlacing_mode: DeinterlacingMode | str | None = None
    drop_second_field: bool | None = None
    duration: timedelta | None = None
    hardware_acceleration: str | None = None
    hardware_acceleration_device: int | None = None
    position: timedelta | None = None

    def append_to(self, args: list[str], env: dict[str, str]) -> None:
        if self.hardware_acceleration:
            args.extend(["-hwaccel", self.hardware_acceleration])
            if self.hardware_acceleration_device is not None:
                args.extend(
                    ["-hwaccel_device", str(self.hardware_acceleration_device)]
                )
        if self.deinterlacing_mode:
            args.extend(["-deint", enum_text(self.deinterlacing_mode)])
        if self.duration is not None and self.duration > timedelta(0):
            args.extend(["-t", format_seconds(self.duration)])
        if self.position is not None and self.position > timedelta(0):
            args.extend(["-ss", format_seconds(self.position)])
        if self.drop_second_field is not None:
            args.extend(["-drop_second_field", "1" if self.drop_second_field else "0"])
        if self.codec is not None:
            _append_stream_option(args, "-c", self.codec, format_string)


@dataclass
class InputOptions:
    """Per-input options."""

    decoding: DecodingOptions | None = None

    def append_to(self, args: list[str], env: dict[str, str]) -> None:
        if self.decoding is not None:
            try:
                self.decoding.append_to(args, env)
            except OptionError as e:
                raise OptionError("decoding", e) from e


@dataclass
class Input:
    """An input file (or URL) and its options."""

    path: str
    options: InputOptions | None = None

    def append_to(self, args: list[str], env: dict[str, str]) -> None:
        if self.options is not None:
            try:
                self.options.append_to(args, env)
            except OptionError as e:
                raise OptionError("options", e) from e
        args.extend(["-i", str(self.path)])


@dataclass
class EncodingOptions:
    """Encoding options for an output file.

    Fields render in a fixed order, see append_to(). List fields are
    repeatable and stream-scoped; a value of the wrong type in one of them
    raises OptionError carrying the flag and the entry's index.

    complex_filter (a literal graph string) takes precedence over
    complex_filters (structured chains) when both are set.
    """

    audio_samplerate: int | None = None
    b_frames: int | None = None
    bitrate: list[StreamOption[Number]] | None = None
    b_strategy: int | None = None
    buf_size: Number | None = None
    codec: list[StreamOption[str]] | None = None
    coder: Coder | str | None = None
    complex_filter: str | None = None
    complex_filters: list[ComplexFilterOption] | None = None
    constant_quality: float | None = None
    crf: int | None = None
    filters: list[StreamOption[FilterOptions]] | None = None
    framerate: float | None = None
    frames: list[StreamOption[int]] | None = None
    gop: int | None = None
    keyint_min: int | None = None
    level: float | None = None
    maxrate: list[StreamOption[Number]] | None = None
    minrate: list[StreamOption[Number]] | None = None
    preset: Preset | str | None = None
    profile: Profile | str | None = None
    quality: list[StreamOption[int]] | None = None
    rate_control: str | None = None
    sc_threshold: int | None = None
    tune: Tune | str | None = None

    def append_to(self, args: list[str], env: dict[str, str]) -> None:
        if self.audio_samplerate is not None:
            args.extend(["-ar", str(self.audio_samplerate)])
        if self.b_frames is not None:
            args.extend(["-bf", str(self.b_frames)])
        _append_stream_options(args, "-b", self.bitrate, format_number)
        if self.b_strategy is not None:
            args.extend(["-b_strategy", str(self.b_strategy)])
        if self.buf_size is not None:
            args.extend(["-bufsize", self.buf_size.render()])
        _append_stream_options(args, "-codec", self.codec, format_string)
        if self.coder:
            args.extend(["-coder", enum_text(self.coder)])
        if self.complex_filter:
            args.extend(["-filter_complex", self.complex_filter])
        elif self.complex_filters:
            args.extend(["-filter_complex", render_filter_graph(self.complex_filters)])
        if self.constant_quality is not None:
            args.extend(["-cq", format_float(self.constant_quality, 3)])
        if self.crf is not None:
            args.extend(["-crf", str(self.crf)])
        _append_stream_options(args, "-filter", self.filters, format_filter)
        if self.framerate is not None:
            args.extend(["-r", format_float(self.framerate, 3)])
        if self.gop is not None:
            args.extend(["-g", str(self.gop)])
        if self.keyint_min is not None:
            args.extend(["-keyint_min", str(self.keyint_min)])
        if self.level is not None:
            args.extend(["-level", format_float(self.level, 1)])
        _append_stream_options(args, "-maxrate", self.maxrate, format_number)
        _append_stream_options(args, "-minrate", self.minrate, format_number)
        if self.preset:
            args.extend(["-preset", enum_text(self.preset)])
        if self.profile:
            args.extend(["-profile", enum_text(self.profile)])
        _append_stream_options(args, "-q", self.quality, format_int)
        if self.rate_control:
            args.extend(["-rc", self.rate_control])
        if self.sc_threshold is not None:
            args.extend(["-sc_threshold", str(self.sc_threshold)])
        if self.tune:
            args.extend(["-tune", enum_text(self.tune)])
        _append_stream_options(args, "-frames", self.frames, format_int)


@dataclass
class MapOption:
    """Selects input streams for the output (-map).

    Attributes:
        input_file_id: Zero-based index of the input file.
        stream: Streams of that input to map; None maps all of them.
    """

    input_file_id: int
    stream: StreamSpecifier | None = None

    def append_to(self, args: list[str], env: dict[str, str]) -> None:
        value = str(self.input_file_id)
        if self.stream is not None:
            value += ":" + self.stream.render()
        args.extend(["-map", value])


@dataclass
class OutputOptions:
    """Per-output options: stream maps, encoding and container format."""

    map: list[MapOption] | None = None
    encoding: EncodingOptions | None = None
    format: str | None = None

    def append_to(self, args: list[str], env: dict[str, str]) -> None:
        for option in self.map or ():
            option.append_to(args, env)
        if self.encoding is not None:
            try:
                self.encoding.append_to(args, env)
            except OptionError as e:
                raise OptionError("encoding", e) from e
        if self.format:
            args.extend(["-f", self.format])


@dataclass
class Output:
    """The output file (or URL) and its options."""

    path: str
    options: OutputOptions | None = None

    def append_to(self, args: list[str], env: dict[str, str]) -> None:
        if self.options is not None:
            try:
                self.options.append_to(args, env)
            except OptionError as e:
                raise OptionError("options", e) from e
        args.append(str(self.path))

