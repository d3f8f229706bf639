"""Pydantic models for job file parsing.

A job file describes one ffmpeg invocation:

    global:
      hide_banner: true
      overwrite: true
      log: {level: error}
    inputs:
      - path: in.mp4
        decoding: {codec: h264_cuvid, hardware_acceleration: cuda}
    output:
      path: out.mp4
      map: [{input: 0, stream: v}]
      encoding:
        codec: [{value: h264_nvenc, stream: v}]
        bitrate: [{value: 4M, stream: v}]

Stream-scoped fields take either a bare value (applies to every stream)
or a mapping with ``value`` and ``stream``.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ffcompose.options.stream import parse_stream_specifier
from ffcompose.options.values import (
    Coder,
    DeinterlacingMode,
    LogLevel,
    Preset,
    Profile,
    Tune,
    parse_number,
)

_RATIO_PATTERN = re.compile(r"^\s*(\d+)\s*[/:]\s*(\d+)\s*$")

NumberValue = str | int | float


def _validate_number(value: NumberValue) -> NumberValue:
    """Check that value is a number or valid numeric shorthand."""
    if isinstance(value, str):
        parse_number(value)
    return value


def _validate_stream(value: str | None) -> str | None:
    if value is not None:
        parse_stream_specifier(value)
    return value


class _StreamScopedModel(BaseModel):
    """Base for stream-scoped values; a bare value is wrapped as {value: ...}."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    stream: str | None = None

    @model_validator(mode="before")
    @classmethod
    def wrap_bare_value(cls, data: Any) -> Any:
        if isinstance(data, dict) and "value" in data:
            return data
        return {"value": data}

    @field_validator("stream")
    @classmethod
    def validate_stream(cls, v: str | None) -> str | None:
        """Validate stream specifier text."""
        return _validate_stream(v)


class StringOptionModel(_StreamScopedModel):
    """Stream-scoped string (codec names)."""

    value: str = Field(min_length=1)


class IntOptionModel(_StreamScopedModel):
    """Stream-scoped integer (quality, frame counts)."""

    value: int


class NumberOptionModel(_StreamScopedModel):
    """Stream-scoped numeric shorthand (bitrates)."""

    value: NumberValue

    @field_validator("value")
    @classmethod
    def validate_value(cls, v: NumberValue) -> NumberValue:
        """Validate numeric shorthand."""
        return _validate_number(v)


class ScaleModel(BaseModel):
    """Scale filter dimensions; a missing side keeps the aspect ratio."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    width: int | None = None
    height: int | None = None


class FilterModel(BaseModel):
    """Simple filter chain (-filter)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    sar: str | None = None
    scale: ScaleModel | None = None
    scale_npp: ScaleModel | None = None
    select: str | None = None

    @field_validator("sar")
    @classmethod
    def validate_sar(cls, v: str | None) -> str | None:
        """Validate sample aspect ratio text (e.g., "1:1" or "16/9")."""
        if v is not None and _RATIO_PATTERN.match(v) is None:
            raise ValueError(
                f"Invalid sar '{v}'. Must be two integers separated by "
                "':' or '/' (e.g., '1:1')."
            )
        return v


class FilterOptionModel(_StreamScopedModel):
    """Stream-scoped filter chain."""

    value: FilterModel


class ComplexFilterModel(BaseModel):
    """One chain of a -filter_complex graph."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    filters: list[str] = Field(min_length=1)
    inputs: list[str] = Field(default_factory=list)
    outputs: list[str] = Field(default_factory=list)

    @field_validator("inputs", "outputs")
    @classmethod
    def validate_streams(cls, v: list[str]) -> list[str]:
        """Validate filter pad specifiers."""
        for item in v:
            _validate_stream(item)
        return v


class LogModel(BaseModel):
    """ffmpeg logging options."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    color: bool | None = None
    level: LogLevel | None = None
    repeated: bool = False


class GlobalModel(BaseModel):
    """Global options."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    hide_banner: bool = False
    log: LogModel | None = None
    overwrite: bool | None = None
    no_stats: bool = False
    report: bool = False


class DecodingModel(BaseModel):
    """Input decoding options. Durations are in seconds."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    codec: StringOptionModel | None = None
    deinterlacing_mode: DeinterlacingMode | None = None
    drop_second_field: bool | None = None
    duration: float | None = Field(default=None, ge=0)
    hardware_acceleration: str | None = None
    hardware_acceleration_device: int | None = Field(default=None, ge=0)
    position: float | None = Field(default=None, ge=0)


class InputModel(BaseModel):
    """One input file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    path: str = Field(min_length=1)
    decoding: DecodingModel | None = None


class EncodingModel(BaseModel):
    """Output encoding options."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    audio_samplerate: int | None = Field(default=None, gt=0)
    b_frames: int | None = None
    bitrate: list[NumberOptionModel] | None = None
    b_strategy: int | None = None
    buf_size: NumberValue | None = None
    codec: list[StringOptionModel] | None = None
    coder: Coder | None = None
    complex_filter: str | None = None
    complex_filters: list[ComplexFilterModel] | None = None
    constant_quality: float | None = None
    crf: int | None = None
    filters: list[FilterOptionModel] | None = None
    framerate: float | None = Field(default=None, gt=0)
    frames: list[IntOptionModel] | None = None
    gop: int | None = None
    keyint_min: int | None = None
    level: float | None = None
    maxrate: list[NumberOptionModel] | None = None
    minrate: list[NumberOptionModel] | None = None
    preset: Preset | None = None
    profile: Profile | None = None
    quality: list[IntOptionModel] | None = None
    rate_control: str | None = None
    sc_threshold: int | None = None
    tune: Tune | None = None

    @field_validator("buf_size")
    @classmethod
    def validate_buf_size(cls, v: NumberValue | None) -> NumberValue | None:
        """Validate numeric shorthand."""
        if v is None:
            return v
        return _validate_number(v)

    @model_validator(mode="after")
    def validate_single_complex_filter(self) -> EncodingModel:
        """Reject setting both forms of the complex filter graph."""
        if self.complex_filter and self.complex_filters:
            raise ValueError(
                "complex_filter and complex_filters are mutually exclusive"
            )
        return self


class MapModel(BaseModel):
    """Stream selection (-map)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    input: int = Field(ge=0)
    stream: str | None = None

    @field_validator("stream")
    @classmethod
    def validate_stream(cls, v: str | None) -> str | None:
        """Validate stream specifier text."""
        return _validate_stream(v)


class OutputModel(BaseModel):
    """The output file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    path: str = Field(min_length=1)
    format: str | None = None
    map: list[MapModel] | None = None
    encoding: EncodingModel | None = None


class JobModel(BaseModel):
    """Top-level job file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    global_options: GlobalModel | None = Field(default=None, alias="global")
    inputs: list[InputModel] = Field(min_length=1)
    output: OutputModel

    @model_validator(mode="after")
    def validate_map_inputs(self) -> JobModel:
        """Ensure -map entries reference declared inputs."""
        if self.output.map:
            for entry in self.output.map:
                if entry.input >= len(self.inputs):
                    raise ValueError(
                        f"map references input {entry.input} but only "
                        f"{len(self.inputs)} input(s) are declared"
                    )
        return self
