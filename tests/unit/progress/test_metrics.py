"""Unit tests for progress metrics aggregation."""

from datetime import timedelta

import pytest

from ffcompose.progress.metrics import (
    ProgressAggregator,
    ProgressSummary,
    percent_complete,
)
from ffcompose.progress.parser import DefaultStdErrResults


def sample(
    frame: int | None = None,
    fps: int | None = None,
    bitrate: float | None = None,
    seconds: float | None = None,
) -> DefaultStdErrResults:
    return DefaultStdErrResults(
        frame=frame,
        fps=fps,
        bitrate=bitrate,
        time=timedelta(seconds=seconds) if seconds is not None else None,
    )


class TestProgressAggregator:
    """Tests for ProgressAggregator."""

    def test_empty_summary(self) -> None:
        """Should return an empty summary before any sample."""
        summary = ProgressAggregator().summarize()
        assert summary == ProgressSummary()

    def test_aggregates_samples(self) -> None:
        """Should average fps and bitrate and keep the latest frame and time."""
        aggregator = ProgressAggregator()
        aggregator.add_sample(sample(frame=10, fps=20, bitrate=1000.0, seconds=1))
        aggregator.add_sample(sample(frame=40, fps=40, bitrate=3000.0, seconds=2))

        summary = aggregator.summarize()

        assert summary.avg_fps == 30.0
        assert summary.peak_fps == 40
        assert summary.avg_bitrate == 2000.0
        assert summary.total_frames == 40
        assert summary.last_time == timedelta(seconds=2)
        assert summary.sample_count == 2

    def test_skips_repeated_sample(self) -> None:
        """A sample equal to the previous one is not counted twice."""
        aggregator = ProgressAggregator()
        assert aggregator.add_sample(sample(frame=10, fps=25)) is True
        assert aggregator.add_sample(sample(frame=10, fps=25)) is False
        assert aggregator.add_sample(sample(frame=20, fps=25)) is True

        assert aggregator.summarize().sample_count == 2

    def test_zero_fps_ignored(self) -> None:
        """Samples reporting fps=0 should not drag the average down."""
        aggregator = ProgressAggregator()
        aggregator.add_sample(sample(frame=0, fps=0))
        aggregator.add_sample(sample(frame=5, fps=10))

        summary = aggregator.summarize()
        assert summary.avg_fps == 10.0
        assert summary.peak_fps == 10

    def test_reset(self) -> None:
        """Should discard all samples."""
        aggregator = ProgressAggregator()
        aggregator.add_sample(sample(frame=10, fps=25))
        aggregator.reset()

        assert aggregator.summarize() == ProgressSummary()
        # The previous sample is forgotten too
        assert aggregator.add_sample(sample(frame=10, fps=25)) is True


class TestPercentComplete:
    """Tests for percent_complete()."""

    def test_halfway(self) -> None:
        """Should compute the share of the expected duration."""
        assert percent_complete(sample(seconds=30), timedelta(minutes=1)) == 50.0

    def test_clamped(self) -> None:
        """Should not exceed 100 percent."""
        assert percent_complete(sample(seconds=90), timedelta(minutes=1)) == 100.0

    @pytest.mark.parametrize("duration", [None, timedelta(0)])
    def test_unknown_duration(self, duration: timedelta | None) -> None:
        """Should return 0 without a usable expected duration."""
        assert percent_complete(sample(seconds=30), duration) == 0.0

    def test_missing_time(self) -> None:
        """Should return 0 when the sample has no time."""
        assert percent_complete(sample(frame=1), timedelta(minutes=1)) == 0.0
