"""Stdout logging configuration with error-aware formatters.

Design goals:
- Emit logs to stdout with one handler, replacing existing root handlers.
- Render native errors through the redacting schema instead of raw
  tracebacks, so the process-wide stack policy also covers log output.
- Append flattened error fields and bound context to every record.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import IO, Any

from packages.faultline.config.models import FaultlineSettings
from packages.faultline.errors.node import ErrorNode
from packages.faultline.formatting.schema import error_to_schema

from . import fields
from .context import bind_context, get_context


class ContextFilter(logging.Filter):
    """Inject the bound logging context into each log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = get_context()
        setattr(record, "context", context)
        for key, value in context.items():
            # Bound keys never replace LogRecord attributes such as msg.
            if key not in record.__dict__:
                setattr(record, key, value)
        return True


def _merge_user_keys(payload: dict[str, Any], extras: dict[str, Any]) -> None:
    for key, value in extras.items():
        name = str(key)
        if name in fields.CORE_KEYS:
            name = fields.SHADOWED_KEY_PREFIX + name
        payload[name] = value


def _record_error(record: logging.LogRecord) -> ErrorNode | None:
    if not record.exc_info:
        return None
    exc = record.exc_info[1]
    return exc if isinstance(exc, ErrorNode) else None


class JsonFormatter(logging.Formatter):
    """Emit newline-delimited JSON logs with stable core fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            fields.TIMESTAMP: datetime.now(UTC).isoformat(),
            fields.LEVEL: record.levelname,
            fields.LOGGER: record.name,
            fields.MESSAGE: record.getMessage(),
        }

        context = getattr(record, "context", None)
        if isinstance(context, dict):
            _merge_user_keys(payload, context)

        error_fields = getattr(record, fields.ERROR_FIELDS, None)
        if isinstance(error_fields, dict):
            _merge_user_keys(payload, error_fields)

        node = _record_error(record)
        if node is not None:
            payload[fields.ERROR] = error_to_schema(node).model_dump(
                mode="json", by_alias=True, exclude_none=True
            )
        elif record.exc_info:
            payload[fields.EXCEPTION] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str, separators=(",", ":"))


class PlainFormatter(logging.Formatter):
    """Human-readable formatter that still appends structured context."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )

    def format(self, record: logging.LogRecord) -> str:
        node = _record_error(record)
        if node is not None:
            # The traceback would bypass stack redaction; the error text stands in.
            saved = record.exc_info, record.exc_text
            record.exc_info, record.exc_text = None, None
            try:
                message = super().format(record)
            finally:
                record.exc_info, record.exc_text = saved
        else:
            message = super().format(record)

        extras: dict[str, Any] = {}
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            extras.update(context)
        error_fields = getattr(record, fields.ERROR_FIELDS, None)
        if isinstance(error_fields, dict):
            extras.update(error_fields)
        if not extras:
            return message
        suffix = " ".join(f"{key}={value}" for key, value in extras.items())
        return f"{message} {suffix}"


def configure_logging(
    *,
    level: str = "INFO",
    json_output: bool = True,
    service: str | None = None,
    environment: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Configure root logging with a single stdout handler.

    This function is idempotent for handler setup: existing root handlers are
    replaced to avoid duplicate emissions when called multiple times.
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level.upper())

    handler = logging.StreamHandler(stream=stream or sys.stdout)
    handler.setLevel(level.upper())
    handler.addFilter(ContextFilter())
    handler.setFormatter(JsonFormatter() if json_output else PlainFormatter())

    root.addHandler(handler)

    seed_context: dict[str, str] = {}
    if service:
        seed_context[fields.SERVICE] = service
    if environment:
        seed_context[fields.ENVIRONMENT] = environment
    if seed_context:
        bind_context(**seed_context)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger using Python's standard logging hierarchy."""
    return logging.getLogger(name)


def configure_logging_from_settings(settings: FaultlineSettings) -> None:
    """Configure logging from the ``logging`` subtree of a settings snapshot."""
    configure_logging(
        level=settings.logging.level,
        json_output=settings.logging.json_output,
        service=settings.logging.service,
        environment=settings.logging.environment,
    )
