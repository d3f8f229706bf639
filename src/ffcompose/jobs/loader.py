"""Job file loading and conversion.

Reads a YAML job file, validates it with the models in
ffcompose.jobs.models and converts it into the option model accepted by
build_command() and FFmpegRunner.execute().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ffcompose.command import FFmpegCommand, build_command
from ffcompose.exceptions import JobFileError
from ffcompose.jobs.models import (
    ComplexFilterModel,
    DecodingModel,
    EncodingModel,
    FilterModel,
    GlobalModel,
    InputModel,
    JobModel,
    NumberValue,
    OutputModel,
    ScaleModel,
)
from ffcompose.options.filters import ComplexFilterOption, FilterOptions
from ffcompose.options.models import (
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
    parse_stream_specifier,
)
from ffcompose.options.values import Number, Ratio, Scale, parse_number

logger = logging.getLogger(__name__)


@dataclass
class Job:
    """A loaded job: everything needed to compile one ffmpeg command."""

    inputs: list[Input]
    output: Output
    global_options: GlobalOptions | None = None
    source: Path | None = field(default=None, compare=False)

    def command(self) -> FFmpegCommand:
        """Compile the job into an ffmpeg command.

        Raises:
            OptionError: If an option fails to render.
        """
        return build_command(self.global_options, self.inputs, self.output)


def load_job(job_path: Path) -> Job:
    """Load and validate a job from a YAML file.

    Args:
        job_path: Path to the YAML job file.

    Returns:
        Validated Job.

    Raises:
        JobFileError: If the job file is missing or invalid.
    """
    if not job_path.exists():
        raise JobFileError(f"Job file not found: {job_path}")

    try:
        with open(job_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise JobFileError(f"Invalid YAML syntax: {e}") from e
    except OSError as e:
        raise JobFileError(f"Cannot read job file {job_path}: {e}") from e

    if data is None:
        raise JobFileError("Job file is empty")

    if not isinstance(data, dict):
        raise JobFileError("Job file must be a YAML mapping")

    job = load_job_from_dict(data)
    job.source = job_path
    logger.debug("Loaded job %s with %d input(s)", job_path, len(job.inputs))
    return job


def load_job_from_dict(data: dict[str, Any]) -> Job:
    """Load and validate a job from a dictionary.

    Raises:
        JobFileError: If the job data is invalid.
    """
    try:
        model = JobModel.model_validate(data)
    except ValidationError as e:
        message, loc = _format_validation_error(e)
        raise JobFileError(message, field=loc) from e

    return _convert_job(model)


def _format_validation_error(error: ValidationError) -> tuple[str, str | None]:
    """Format a Pydantic validation error into a message and field location."""
    errors = error.errors()
    if errors:
        first_error = errors[0]
        loc = ".".join(str(x) for x in first_error.get("loc", []))
        msg = first_error.get("msg", str(error))
        if loc:
            return f"Job validation failed: {loc}: {msg}", loc
        return f"Job validation failed: {msg}", None
    return f"Job validation failed: {error}", None


def _to_number(value: NumberValue) -> Number:
    if isinstance(value, str):
        return parse_number(value)
    return Number(value)


def _to_stream(text: str | None) -> StreamSpecifier | None:
    return parse_stream_specifier(text) if text is not None else None


def _to_seconds(value: float | None) -> timedelta | None:
    return timedelta(seconds=value) if value is not None else None


def _to_scale(model: ScaleModel | None) -> Scale | None:
    if model is None:
        return None
    return Scale(width=model.width, height=model.height)


def _to_filter(model: FilterModel) -> FilterOptions:
    sar = None
    if model.sar is not None:
        antecedent, _, consequent = model.sar.replace("/", ":").partition(":")
        sar = Ratio(int(antecedent), int(consequent))
    return FilterOptions(
        sar=sar,
        scale=_to_scale(model.scale),
        scale_npp=_to_scale(model.scale_npp),
        select=model.select,
    )


def _to_complex_filter(model: ComplexFilterModel) -> ComplexFilterOption:
    return ComplexFilterOption(
        filters=list(model.filters),
        input_streams=[parse_stream_specifier(s) for s in model.inputs],
        output_streams=[parse_stream_specifier(s) for s in model.outputs],
    )


def _convert_global(model: GlobalModel) -> GlobalOptions:
    log = None
    if model.log is not None:
        log = LogOptions(
            color=model.log.color,
            level=model.log.level,
            repeated=model.log.repeated,
        )
    return GlobalOptions(
        hide_banner=model.hide_banner,
        log=log,
        overwrite=model.overwrite,
        no_stats=model.no_stats,
        report=model.report,
    )


def _convert_decoding(model: DecodingModel) -> DecodingOptions:
    codec = None
    if model.codec is not None:
        codec = StreamOption(model.codec.value, _to_stream(model.codec.stream))
    return DecodingOptions(
        codec=codec,
        deinterlacing_mode=model.deinterlacing_mode,
        drop_second_field=model.drop_second_field,
        duration=_to_seconds(model.duration),
        hardware_acceleration=model.hardware_acceleration,
        hardware_acceleration_device=model.hardware_acceleration_device,
        position=_to_seconds(model.position),
    )


def _convert_input(model: InputModel) -> Input:
    options = None
    if model.decoding is not None:
        options = InputOptions(decoding=_convert_decoding(model.decoding))
    return Input(path=model.path, options=options)


def _convert_encoding(model: EncodingModel) -> EncodingOptions:
    def numbers(items):
        if items is None:
            return None
        return [StreamOption(_to_number(i.value), _to_stream(i.stream)) for i in items]

    def plain(items):
        if items is None:
            return None
        return [StreamOption(i.value, _to_stream(i.stream)) for i in items]

    filters = None
    if model.filters is not None:
        filters = [
            StreamOption(_to_filter(i.value), _to_stream(i.stream))
            for i in model.filters
        ]

    complex_filters = None
    if model.complex_filters is not None:
        complex_filters = [_to_complex_filter(c) for c in model.complex_filters]

    return EncodingOptions(
        audio_samplerate=model.audio_samplerate,
        b_frames=model.b_frames,
        bitrate=numbers(model.bitrate),
        b_strategy=model.b_strategy,
        buf_size=_to_number(model.buf_size) if model.buf_size is not None else None,
        codec=plain(model.codec),
        coder=model.coder,
        complex_filter=model.complex_filter,
        complex_filters=complex_filters,
        constant_quality=model.constant_quality,
        crf=model.crf,
        filters=filters,
        framerate=model.framerate,
        frames=plain(model.frames),
        gop=model.gop,
        keyint_min=model.keyint_min,
        level=model.level,
        maxrate=numbers(model.maxrate),
        minrate=numbers(model.minrate),
        preset=model.preset,
        profile=model.profile,
        quality=plain(model.quality),
        rate_control=model.rate_control,
        sc_threshold=model.sc_threshold,
        tune=model.tune,
    )


def _convert_output(model: OutputModel) -> Output:
    has_options = model.map or model.encoding is not None or model.format
    options = None
    if has_options:
        options = OutputOptions(
            map=[
                MapOption(input_file_id=m.input, stream=_to_stream(m.stream))
                for m in model.map or ()
            ]
            or None,
            encoding=(
                _convert_encoding(model.encoding)
                if model.encoding is not None
                else None
            ),
            format=model.format,
        )
    return Output(path=model.path, options=options)


def _convert_job(model: JobModel) -> Job:
    global_options = None
    if model.global_options is not None:
        global_options = _convert_global(model.global_options)
    return Job(
        inputs=[_convert_input(i) for i in model.inputs],
        output=_convert_output(model.output),
        global_options=global_options,
    )
