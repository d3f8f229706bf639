"""Structured logging module for ffcompose.

Provides configurable logging with JSON format support and file rotation.
"""

from ffcompose.logging.config import configure_logging
from ffcompose.logging.handlers import JSONFormatter, TextFormatter, record_context

__all__ = [
    "JSONFormatter",
    "TextFormatter",
    "configure_logging",
    "record_context",
]
