"""Logging integration for faultline errors.

This package wraps Python's ``logging`` module with opinionated stdout
defaults, structured context propagation and error-aware formatters.
"""

from .config import (
    ContextFilter,
    JsonFormatter,
    PlainFormatter,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
)
from .context import (
    LogContext,
    bind_context,
    bind_error_context,
    clear_context,
    get_context,
    log_context,
)
from .sink import log_to_logger, logger_sink

__all__ = [
    "ContextFilter",
    "JsonFormatter",
    "LogContext",
    "PlainFormatter",
    "bind_context",
    "bind_error_context",
    "clear_context",
    "configure_logging",
    "configure_logging_from_settings",
    "get_context",
    "get_logger",
    "log_context",
    "log_to_logger",
    "logger_sink",
]
