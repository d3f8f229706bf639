"""Unit tests for ffmpeg command compilation."""

import pytest

from ffcompose.command import FFmpegCommand, build_command
from ffcompose.exceptions import OptionError
from ffcompose.options import (
    DecodingOptions,
    EncodingOptions,
    GlobalOptions,
    Input,
    InputOptions,
    LogOptions,
    LogLevel,
    Number,
    Output,
    OutputOptions,
    StreamOption,
    StreamSpecifier,
    StreamType,
)


class TestBuildCommand:
    """Tests for build_command()."""

    def test_minimal(self) -> None:
        """Should compile one input and one output with no options."""
        command = build_command(None, [Input("in.mp4")], Output("out.mp4"))
        assert command.args == ["-i", "in.mp4", "out.mp4"]
        assert command.env == {}

    def test_section_order(self) -> None:
        """Global options, then each input, then the output."""
        command = build_command(
            GlobalOptions(hide_banner=True, overwrite=True),
            [Input("a.mp4"), Input("b.wav")],
            Output(
                "out.mp4",
                OutputOptions(
                    encoding=EncodingOptions(
                        codec=[StreamOption("h264", StreamSpecifier(type=StreamType.VIDEO))]
                    )
                ),
            ),
        )
        assert command.args == [
            "-hide_banner",
            "-y",
            "-i",
            "a.mp4",
            "-i",
            "b.wav",
            "-codec:v",
            "h264",
            "out.mp4",
        ]

    def test_collects_environment(self) -> None:
        """Should merge environment additions from the global options."""
        command = build_command(
            GlobalOptions(log=LogOptions(color=False, level=LogLevel.ERROR)),
            [Input("in.mp4")],
            Output("out.mp4"),
        )
        assert command.env == {"AV_LOG_FORCE_NOCOLOR": "1"}
        assert command.args[:2] == ["-loglevel", "error"]

    def test_output_error_is_wrapped(self) -> None:
        """An output failure should carry the full path to the bad entry."""
        output = Output(
            "out.mp4",
            OutputOptions(
                encoding=EncodingOptions(
                    bitrate=[StreamOption(Number(1, prefix="M")), StreamOption(5)]
                )
            ),
        )
        with pytest.raises(OptionError) as exc_info:
            build_command(None, [Input("in.mp4")], output)
        error = exc_info.value
        assert error.path == ["output", "options", "encoding", "-b #1"]
        assert error.innermost.option == "-b"
        assert error.innermost.index == 1
        assert "Adapting output failed" in str(error)

    def test_input_error_carries_index(self) -> None:
        """An input failure should name the input by index."""
        bad = Input(
            "b.mp4", InputOptions(decoding=DecodingOptions(codec=StreamOption(1)))
        )
        with pytest.raises(OptionError) as exc_info:
            build_command(None, [Input("a.mp4"), bad], Output("out.mp4"))
        assert exc_info.value.label == "input #1"
        assert exc_info.value.path[0] == "input #1"


class TestFFmpegCommand:
    """Tests for FFmpegCommand helpers."""

    def test_argv_prepends_binary(self) -> None:
        """argv() should put the binary first."""
        command = FFmpegCommand(args=["-i", "in.mp4", "out.mp4"])
        assert command.argv("/usr/bin/ffmpeg") == [
            "/usr/bin/ffmpeg",
            "-i",
            "in.mp4",
            "out.mp4",
        ]

    def test_str_quotes_arguments(self) -> None:
        """str() should shell-quote arguments."""
        command = FFmpegCommand(args=["-i", "my movie.mp4", "out.mp4"])
        assert str(command) == "-i 'my movie.mp4' out.mp4"
