"""Centralized exit codes for all CLI commands.

Exit code ranges:
    0: Success
    1-9: Interruption
    10-19: Validation errors (job file, config, options)
    20-29: Target/file errors
    30-39: Tool/dependency errors
    40-49: Operation errors
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for ffcompose CLI commands."""

    # Success (0)
    SUCCESS = 0

    # Interruption (1-9)
    INTERRUPTED = 2  # Ctrl+C / SIGINT

    # Validation errors (10-19)
    JOB_VALIDATION_ERROR = 10
    CONFIG_ERROR = 11
    OPTION_ERROR = 12

    # Target/file errors (20-29)
    JOB_NOT_FOUND = 20

    # Tool/dependency errors (30-39)
    TOOL_NOT_AVAILABLE = 30

    # Operation errors (40-49)
    OPERATION_FAILED = 40
