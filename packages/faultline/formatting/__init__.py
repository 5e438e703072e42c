"""Rendering of error chains as text, JSON, log fields and HTTP status."""

from .fields import (
    DEFAULT_LOG_OPTIONS,
    MINIMAL_LOG_OPTIONS,
    VERBOSE_LOG_OPTIONS,
    LogOptions,
    StackFormat,
    log_error,
    log_fields,
    log_fields_map,
)
from .http import http_code
from .render import RenderMode, render, render_full
from .schema import ErrorSchema, error_to_json, error_to_schema
from .text import format_message, format_with_context, format_with_fields

__all__ = [
    "DEFAULT_LOG_OPTIONS",
    "MINIMAL_LOG_OPTIONS",
    "VERBOSE_LOG_OPTIONS",
    "ErrorSchema",
    "LogOptions",
    "RenderMode",
    "StackFormat",
    "error_to_json",
    "error_to_schema",
    "format_message",
    "format_with_context",
    "format_with_fields",
    "http_code",
    "log_error",
    "log_fields",
    "log_fields_map",
    "render",
    "render_full",
]
