"""Bridges from ``log_error`` to the standard ``logging`` hierarchy."""

from __future__ import annotations

import logging
from typing import Any, Callable

from packages.faultline.formatting.fields import LogOptions, log_error

from . import fields

LogSink = Callable[..., None]


def logger_sink(logger: logging.Logger, level: int = logging.ERROR) -> LogSink:
    """Return a ``log_func`` that emits one record on ``logger``.

    The alternating field list becomes ``extra={"error_fields": {...}}``
    so the faultline formatters can render it.
    """

    def sink(message: str, *pairs: Any) -> None:
        error_fields = {
            str(pairs[index]): pairs[index + 1] for index in range(0, len(pairs) - 1, 2)
        }
        logger.log(level, message, extra={fields.ERROR_FIELDS: error_fields})

    return sink


def log_to_logger(
    err: BaseException | None,
    logger: logging.Logger,
    *,
    level: int = logging.ERROR,
    options: LogOptions | None = None,
) -> None:
    """Log ``err`` once on ``logger`` with its flattened fields."""
    log_error(err, logger_sink(logger, level), options)
