"""FFmpeg progress parsing and aggregation."""

from ffcompose.progress.metrics import (
    ProgressAggregator,
    ProgressSummary,
    percent_complete,
)
from ffcompose.progress.parser import (
    DEFAULT_PERIOD,
    DefaultStdErrParser,
    DefaultStdErrResults,
    StdErrParser,
    latest_record,
    parse_results,
)

__all__ = [
    "DEFAULT_PERIOD",
    "DefaultStdErrParser",
    "DefaultStdErrResults",
    "ProgressAggregator",
    "ProgressSummary",
    "StdErrParser",
    "latest_record",
    "parse_results",
    "percent_complete",
]
