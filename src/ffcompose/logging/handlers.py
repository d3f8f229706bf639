"""Log formatters for ffcompose.

Both formatters surface the structured context that ffcompose attaches to
its records through ``extra=`` (argv, pid, returncode, ...). JSONFormatter
nests it under a "context" key; TextFormatter appends it as key=value pairs.
"""

from __future__ import annotations

import json
import logging
import shlex
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries, plus the ones Formatter.format() adds
_RESERVED_ATTRS: frozenset[str] = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Return the fields passed to a logging call via ``extra=``."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


def _format_context_value(value: Any) -> str:
    # Argument vectors render as a shell command line
    if isinstance(value, (list, tuple)):
        return shlex.join(str(item) for item in value)
    return str(value)


class TextFormatter(logging.Formatter):
    """Plain text formatter that appends record context as key=value."""

    DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def __init__(self) -> None:
        super().__init__(self.DEFAULT_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = record_context(record)
        if not context:
            return line
        pairs = ", ".join(
            f"{key}={_format_context_value(value)}"
            for key, value in sorted(context.items())
        )
        # Keep the traceback, if any, below the context
        head, sep, tail = line.partition("\n")
        return f"{head} [{pairs}]{sep}{tail}"


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Keys: timestamp (ISO-8601 UTC), level, message, logger (omitted for
    root), context (omitted when empty) and exception (when exc_info is set).
    Non-JSON values in the context are rendered with str().
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if record.name != "root":
            entry["logger"] = record.name

        context = record_context(record)
        if context:
            entry["context"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
