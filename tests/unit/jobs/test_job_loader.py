"""Unit tests for YAML job file loading."""

from datetime import timedelta
from pathlib import Path

import pytest

from ffcompose.exceptions import JobFileError
from ffcompose.jobs import Job, load_job, load_job_from_dict
from ffcompose.options import (
    Coder,
    DecodingOptions,
    LogLevel,
    MapOption,
    Number,
    StreamOption,
    StreamSpecifier,
    StreamType,
)
from ffcompose.options.filters import ComplexFilterOption, FilterOptions
from ffcompose.options.values import Ratio, Scale

VIDEO = StreamSpecifier(type=StreamType.VIDEO)

FULL_JOB = """\
global:
  hide_banner: true
  overwrite: true
  log:
    level: error
    color: false
inputs:
  - path: in.mp4
    decoding:
      codec: {value: h264_cuvid, stream: v}
      hardware_acceleration: cuda
      position: 1.5
      duration: 30
  - path: music.flac
output:
  path: out.mp4
  format: mp4
  map:
    - {input: 0, stream: v}
    - {input: 1, stream: a}
  encoding:
    codec:
      - {value: h264_nvenc, stream: v}
      - {value: aac, stream: a}
    bitrate:
      - {value: 4M, stream: v}
      - {value: 128000, stream: a}
    buf_size: 8M
    coder: cabac
    filters:
      - value: {sar: "1:1", scale: {width: 1280}}
        stream: v
    quality:
      - 2
"""


@pytest.fixture
def job_file(tmp_path: Path) -> Path:
    path = tmp_path / "job.yaml"
    path.write_text(FULL_JOB)
    return path


class TestLoadJob:
    """Tests for load_job()."""

    def test_loads_full_job(self, job_file: Path) -> None:
        """Should load global options and inputs from a full job."""
        job = load_job(job_file)

        assert isinstance(job, Job)
        assert job.source == job_file
        assert job.global_options is not None
        assert job.global_options.hide_banner is True
        assert job.global_options.overwrite is True
        assert job.global_options.log.level == LogLevel.ERROR
        assert job.global_options.log.color is False
        assert [i.path for i in job.inputs] == ["in.mp4", "music.flac"]

    def test_decoding_conversion(self, job_file: Path) -> None:
        """Should convert decoding fields into DecodingOptions."""
        decoding = load_job(job_file).inputs[0].options.decoding

        assert decoding == DecodingOptions(
            codec=StreamOption("h264_cuvid", VIDEO),
            hardware_acceleration="cuda",
            position=timedelta(seconds=1.5),
            duration=timedelta(seconds=30),
        )

    def test_output_conversion(self, job_file: Path) -> None:
        """Should convert map and encoding fields into the option model."""
        output = load_job(job_file).output
        encoding = output.options.encoding

        assert output.path == "out.mp4"
        assert output.options.format == "mp4"
        assert output.options.map == [
            MapOption(0, VIDEO),
            MapOption(1, StreamSpecifier(type=StreamType.AUDIO)),
        ]
        assert encoding.bitrate == [
            StreamOption(Number(4.0, prefix="M"), VIDEO),
            StreamOption(Number(128000), StreamSpecifier(type=StreamType.AUDIO)),
        ]
        assert encoding.buf_size == Number(8.0, prefix="M")
        assert encoding.coder == Coder.CABAC
        assert encoding.filters == [
            StreamOption(
                FilterOptions(sar=Ratio(1, 1), scale=Scale(width=1280)), VIDEO
            )
        ]
        assert encoding.quality == [StreamOption(2)]

    def test_command(self, job_file: Path) -> None:
        """Should compile the loaded job into the expected command."""
        command = load_job(job_file).command()

        assert command.env == {"AV_LOG_FORCE_NOCOLOR": "1"}
        assert command.args == [
            "-hide_banner",
            "-loglevel", "error",
            "-y",
            "-hwaccel", "cuda",
            "-t", "30.000",
            "-ss", "1.500",
            "-c:v", "h264_cuvid",
            "-i", "in.mp4",
            "-i", "music.flac",
            "-map", "0:v",
            "-map", "1:a",
            "-b:v", "4M",
            "-b:a", "128000",
            "-bufsize", "8M",
            "-codec:v", "h264_nvenc",
            "-codec:a", "aac",
            "-coder", "cabac",
            "-filter:v", "setsar=1/1,scale=w=1280:h=-1",
            "-q", "2",
            "-f", "mp4",
            "out.mp4",
        ]  # fmt: skip

    def test_missing_file(self, tmp_path: Path) -> None:
        """Should raise JobFileError for a missing file."""
        with pytest.raises(JobFileError, match="not found"):
            load_job(tmp_path / "missing.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        """Should raise JobFileError for an empty file."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        with pytest.raises(JobFileError, match="empty"):
            load_job(path)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Should raise JobFileError for malformed YAML."""
        path = tmp_path / "bad.yaml"
        path.write_text("inputs: [unclosed\n")
        with pytest.raises(JobFileError, match="Invalid YAML"):
            load_job(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        """Should raise JobFileError when the document isn't a mapping."""
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(JobFileError, match="mapping"):
            load_job(path)


class TestLoadJobFromDict:
    """Tests for load_job_from_dict() validation."""

    def minimal(self, **output) -> dict:
        return {"inputs": [{"path": "in.mp4"}], "output": {"path": "out.mp4", **output}}

    def test_minimal(self) -> None:
        """Should accept a job with one input and an output path."""
        job = load_job_from_dict(self.minimal())
        assert job.global_options is None
        assert job.command().args == ["-i", "in.mp4", "out.mp4"]

    def test_unknown_field_rejected(self) -> None:
        """Should name the misspelled field."""
        data = self.minimal()
        data["output"]["encodng"] = {}
        with pytest.raises(JobFileError) as exc_info:
            load_job_from_dict(data)
        assert exc_info.value.field == "output.encodng"

    def test_inputs_required(self) -> None:
        """Should require at least one input."""
        with pytest.raises(JobFileError) as exc_info:
            load_job_from_dict({"inputs": [], "output": {"path": "out.mp4"}})
        assert exc_info.value.field == "inputs"

    def test_bad_number_shorthand(self) -> None:
        """Should reject an unknown unit in numeric shorthand."""
        data = self.minimal(encoding={"bitrate": [{"value": "4X", "stream": "v"}]})
        with pytest.raises(JobFileError) as exc_info:
            load_job_from_dict(data)
        assert exc_info.value.field == "output.encoding.bitrate.0.value"
        assert "4X" in str(exc_info.value)

    def test_bad_enum(self) -> None:
        """Should reject a preset that ffmpeg doesn't know."""
        data = self.minimal(encoding={"preset": "warp-speed"})
        with pytest.raises(JobFileError) as exc_info:
            load_job_from_dict(data)
        assert exc_info.value.field == "output.encoding.preset"

    def test_map_must_reference_input(self) -> None:
        """Should reject a map entry for an undeclared input."""
        data = self.minimal(map=[{"input": 1}])
        with pytest.raises(JobFileError, match="only 1 input"):
            load_job_from_dict(data)

    def test_complex_filter_forms_are_exclusive(self) -> None:
        """Should reject both complex filter forms together."""
        data = self.minimal(
            encoding={
                "complex_filter": "[0:v]null[v]",
                "complex_filters": [{"filters": ["null"]}],
            }
        )
        with pytest.raises(JobFileError, match="mutually exclusive"):
            load_job_from_dict(data)

    def test_complex_filters(self) -> None:
        """Should convert structured complex filter chains."""
        data = self.minimal(
            encoding={
                "complex_filters": [
                    {"filters": ["hflip"], "inputs": ["0:v"], "outputs": ["flipped"]}
                ]
            }
        )
        encoding = load_job_from_dict(data).output.options.encoding
        assert encoding.complex_filters == [
            ComplexFilterOption(
                filters=["hflip"],
                input_streams=[StreamSpecifier(name="0:v")],
                output_streams=[StreamSpecifier(name="flipped")],
            )
        ]

    def test_bare_stream_values(self) -> None:
        """Stream-scoped fields accept a bare value for all streams."""
        data = self.minimal(encoding={"codec": ["libx264"], "frames": [100]})
        encoding = load_job_from_dict(data).output.options.encoding
        assert encoding.codec == [StreamOption("libx264")]
        assert encoding.frames == [StreamOption(100)]

    def test_bad_sar(self) -> None:
        """Should reject a sar that isn't a ratio."""
        data = self.minimal(encoding={"filters": [{"sar": "square"}]})
        with pytest.raises(JobFileError, match="sar"):
            load_job_from_dict(data)

    def test_negative_position_rejected(self) -> None:
        """Should reject a negative seek position."""
        data = {
            "inputs": [{"path": "in.mp4", "decoding": {"position": -1}}],
            "output": {"path": "out.mp4"},
        }
        with pytest.raises(JobFileError) as exc_info:
            load_job_from_dict(data)
        assert exc_info.value.field == "inputs.0.decoding.position"
