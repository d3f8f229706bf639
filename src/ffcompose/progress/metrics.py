"""Progress metrics aggregation.

This module collects DefaultStdErrResults samples while ffmpeg runs and
computes summary statistics once it is done.
"""

from dataclasses import dataclass, field
from datetime import timedelta

from ffcompose.progress.parser import DefaultStdErrResults


@dataclass
class ProgressSummary:
    """Summary of aggregated progress samples.

    Attributes:
        avg_fps: Average encoding frames per second.
        peak_fps: Peak encoding frames per second.
        avg_bitrate: Average output bitrate in bits per second.
        total_frames: Last reported frame count.
        last_time: Last reported output timestamp.
        sample_count: Number of distinct samples collected.
    """

    avg_fps: float | None = None
    peak_fps: int | None = None
    avg_bitrate: float | None = None
    total_frames: int | None = None
    last_time: timedelta | None = None
    sample_count: int = 0


@dataclass
class ProgressAggregator:
    """Collects progress samples and aggregates them on request.

    The default parser delivers the same sample again when ffmpeg has not
    completed a new status record between two ticks; such repeats of the
    previous sample are skipped here.

    Usage:
        aggregator = ProgressAggregator()
        parser = DefaultStdErrParser(aggregator.add_sample)
        ...
        summary = aggregator.summarize()
    """

    fps_samples: list[int] = field(default_factory=list)
    bitrate_samples: list[float] = field(default_factory=list)
    last_frame: int | None = None
    last_time: timedelta | None = None
    sample_count: int = 0
    _previous: DefaultStdErrResults | None = field(default=None, repr=False)

    def add_sample(self, results: DefaultStdErrResults) -> bool:
        """Add a progress sample.

        Args:
            results: Sample decoded by the stderr parser.

        Returns:
            False if the sample repeated the previous one and was skipped.
        """
        if results == self._previous:
            return False
        self._previous = results
        self.sample_count += 1

        # FPS of 0 happens while ffmpeg is still starting up
        if results.fps is not None and results.fps > 0:
            self.fps_samples.append(results.fps)
        if results.bitrate is not None and results.bitrate > 0:
            self.bitrate_samples.append(results.bitrate)
        if results.frame is not None:
            self.last_frame = results.frame
        if results.time is not None:
            self.last_time = results.time
        return True

    def summarize(self) -> ProgressSummary:
        """Compute aggregate metrics from collected samples."""
        avg_fps: float | None = None
        peak_fps: int | None = None
        avg_bitrate: float | None = None

        if self.fps_samples:
            avg_fps = sum(self.fps_samples) / len(self.fps_samples)
            peak_fps = max(self.fps_samples)
        if self.bitrate_samples:
            avg_bitrate = sum(self.bitrate_samples) / len(self.bitrate_samples)

        return ProgressSummary(
            avg_fps=avg_fps,
            peak_fps=peak_fps,
            avg_bitrate=avg_bitrate,
            total_frames=self.last_frame,
            last_time=self.last_time,
            sample_count=self.sample_count,
        )

    def reset(self) -> None:
        """Clear all collected samples."""
        self.fps_samples.clear()
        self.bitrate_samples.clear()
        self.last_frame = None
        self.last_time = None
        self.sample_count = 0
        self._previous = None


def percent_complete(
    results: DefaultStdErrResults, duration: timedelta | None
) -> float:
    """Calculate progress percentage from a sample's output time.

    Args:
        results: Progress sample.
        duration: Total duration of the output, if known.

    Returns:
        Progress percentage (0.0 to 100.0), or 0.0 if unknown.
    """
    if duration is None or duration <= timedelta(0) or results.time is None:
        return 0.0
    return max(0.0, min(100.0, results.time / duration * 100))
