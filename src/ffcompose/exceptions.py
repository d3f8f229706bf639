"""Exception types for ffcompose.

This module provides specific exception types for the compile and execute
stages, enabling callers to handle different error conditions appropriately:

- FormatError: a numeric shorthand token could not be parsed
- TypeMismatchError: an option value does not match its flag's formatter
- OptionError: wraps a nested failure with the option name/index
- ExecutionError: ffmpeg failed to start or exited non-zero
"""

from __future__ import annotations


class FFComposeError(Exception):
    """Base exception for ffcompose errors.

    All library exceptions inherit from this class, allowing callers
    to catch every ffcompose error with a single except clause if desired.
    """


class FormatError(FFComposeError, ValueError):
    """Raised when a numeric shorthand token cannot be parsed.

    Attributes:
        token: The text that failed to parse.
        reason: Short description of what was wrong.
    """

    def __init__(self, token: str, reason: str) -> None:
        self.token = token
        self.reason = reason
        super().__init__(f"Invalid number shorthand {token!r}: {reason}")


class TypeMismatchError(FFComposeError, TypeError):
    """Raised when an option value's type does not match its flag.

    Attributes:
        flag: Flag name the value was rendered for (e.g., "-b").
        expected: Name of the expected value type.
        value: The offending value.
    """

    def __init__(self, flag: str, expected: str, value: object) -> None:
        self.flag = flag
        self.expected = expected
        self.value = value
        super().__init__(
            f"Value for {flag} should be {expected}, got {type(value).__name__}"
        )


class OptionError(FFComposeError):
    """Raised when rendering an option fails.

    Wraps the child failure with the identity of the option that was being
    rendered. OptionErrors nest: compiling an output whose encoding options
    hold a bad bitrate yields output -> encoding -> -b #idx.

    Attributes:
        option: Option name (e.g., "encoding", "-b", "input").
        cause: The underlying exception.
        index: Zero-based position within a repeatable list, if any.
    """

    def __init__(
        self, option: str, cause: Exception, index: int | None = None
    ) -> None:
        self.option = option
        self.cause = cause
        self.index = index
        super().__init__(f"Adapting {self.label} failed: {cause}")

    @property
    def label(self) -> str:
        """Option name with its index suffix (e.g., "-b #1")."""
        if self.index is None:
            return self.option
        return f"{self.option} #{self.index}"

    @property
    def path(self) -> list[str]:
        """Labels of the nested OptionErrors, outermost first."""
        labels = [self.label]
        cause = self.cause
        while isinstance(cause, OptionError):
            labels.append(cause.label)
            cause = cause.cause
        return labels

    @property
    def innermost(self) -> OptionError:
        """Deepest OptionError in the chain."""
        current = self
        while isinstance(current.cause, OptionError):
            current = current.cause
        return current


class ExecutionError(FFComposeError):
    """Raised when ffmpeg fails to start or exits with a non-zero code.

    Attributes:
        argv: Full argument vector, binary included.
        stderr: Everything ffmpeg wrote to stderr.
        returncode: Process exit code, None if it never started.
        cause: Underlying exception (e.g., OSError on spawn), if any.
        cancelled: True if the process was killed by cancellation.
    """

    def __init__(
        self,
        argv: list[str],
        stderr: bytes,
        returncode: int | None = None,
        cause: Exception | None = None,
        cancelled: bool = False,
    ) -> None:
        self.argv = argv
        self.stderr = stderr
        self.returncode = returncode
        self.cause = cause
        self.cancelled = cancelled
        if cancelled:
            reason = "was cancelled"
        elif cause is not None:
            reason = f"failed to start ({cause})"
        else:
            reason = f"exited with code {returncode}"
        stderr_text = stderr.decode("utf-8", errors="replace").strip()
        super().__init__(
            f"Running {' '.join(argv)} {reason} with stderr {stderr_text!r}"
        )


class ToolNotFoundError(FFComposeError, RuntimeError):
    """Raised when the ffmpeg binary cannot be located."""

    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(
            f"Required tool not available: {tool_name}. "
            "Install it or set FFCOMPOSE_FFMPEG_PATH."
        )


class JobFileError(FFComposeError):
    """Raised when a job file cannot be loaded or validated.

    Attributes:
        field: Dotted location of the offending field, if known.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)


class ConfigError(FFComposeError):
    """Raised when a configuration file cannot be parsed or is invalid."""
