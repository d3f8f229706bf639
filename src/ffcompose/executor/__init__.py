"""Process execution for compiled ffmpeg commands."""

from ffcompose.executor.buffer import StderrBuffer
from ffcompose.executor.ffmpeg import FFmpegRunner

__all__ = [
    "FFmpegRunner",
    "StderrBuffer",
]
