"""Flattened key/value output for structured loggers.

``log_fields`` returns an alternating ``[key, value, ...]`` list that can be
passed straight to variadic logging calls. Order is stable: message, user
fields (outer node first), then metadata, tracing ids, timing, origin frame
and stack. Unset metadata is omitted and redacted values are replaced before
they leave this module.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable

from packages.faultline.errors.chain import ensure_error
from packages.faultline.errors.node import ErrorNode
from packages.faultline.errors.types import ErrorCategory, ErrorClass, ErrorSeverity, safe_value
from packages.faultline.stack.config import StackTraceConfig
from packages.faultline.stack.render import (
    call_chain,
    format_stack,
    format_stack_full,
    origin_fields,
    resolve_config,
    stack_to_json,
)
from packages.faultline.tracing import span_ids

LogFunc = Callable[..., Any]


class StackFormat(str, Enum):
    """Representation of the stack inside log fields."""

    STRING = "string"
    LIST = "list"
    FULL = "full"
    JSON = "json"


@dataclass(frozen=True)
class LogOptions:
    """Switches controlling which keys ``log_fields`` emits."""

    include_message: bool = True
    include_user_fields: bool = True
    include_id: bool = True
    include_class: bool = True
    include_category: bool = True
    include_severity: bool = True
    include_retryable: bool = True
    include_tracing: bool = True
    include_created: bool = False
    include_function: bool = True
    include_file: bool = False
    include_line: bool = False
    include_stack: bool = False
    stack_format: StackFormat = StackFormat.JSON
    field_prefix: str = "error_"


DEFAULT_LOG_OPTIONS = LogOptions()

VERBOSE_LOG_OPTIONS = LogOptions(
    include_created=True,
    include_file=True,
    include_line=True,
    include_stack=True,
)

MINIMAL_LOG_OPTIONS = LogOptions(
    include_id=False,
    include_class=False,
    include_category=False,
    include_retryable=False,
    include_tracing=False,
    include_function=False,
)


def log_fields(
    err: BaseException | None,
    options: LogOptions | None = None,
    *,
    stack_config: StackTraceConfig | None = None,
) -> list[Any]:
    """Return the alternating key/value list for ``err``."""
    node = ensure_error(err)
    if node is None:
        return []
    opts = options or DEFAULT_LOG_OPTIONS
    prefix = opts.field_prefix
    output: list[Any] = []

    def add(key: str, value: Any) -> None:
        output.append(key)
        output.append(value)

    if opts.include_message:
        add(f"{prefix}message", str(node))
    if opts.include_user_fields:
        for key, value in node.all_fields:
            add(key, safe_value(value))
    if opts.include_class and node.error_class is not ErrorClass.UNSPECIFIED:
        add(f"{prefix}class", node.error_class.value)
    if opts.include_category and node.category is not ErrorCategory.UNSPECIFIED:
        add(f"{prefix}category", node.category.value)
    if opts.include_severity and node.severity is not ErrorSeverity.UNSPECIFIED:
        add(f"{prefix}severity", node.severity.value)
    if opts.include_id and node.id:
        add(f"{prefix}id", node.id)
    if opts.include_retryable and node.retryable:
        add(f"{prefix}retryable", True)
    if opts.include_tracing:
        trace_id, span_id, parent_span_id = span_ids(node.span)
        if trace_id:
            add("trace_id", trace_id)
        if span_id:
            add("span_id", span_id)
        if parent_span_id:
            add("parent_span_id", parent_span_id)
    if opts.include_created and node.created_at is not None:
        add(f"{prefix}created", node.created_at.isoformat())

    snapshot = node.origin_stack
    config = resolve_config(stack_config)
    if opts.include_function or opts.include_file or opts.include_line:
        origin = origin_fields(snapshot, config)
        if opts.include_function and "function" in origin:
            add(f"{prefix}function", origin["function"])
        if opts.include_file and "file" in origin:
            add(f"{prefix}file", origin["file"])
        if opts.include_line and "line" in origin:
            add(f"{prefix}line", origin["line"])
    if opts.include_stack and snapshot:
        add(f"{prefix}stack", _stack_value(snapshot, config, opts.stack_format))
    return output


def log_fields_map(
    err: BaseException | None,
    options: LogOptions | None = None,
    *,
    stack_config: StackTraceConfig | None = None,
) -> dict[str, Any]:
    """Return ``log_fields`` as a dict; later duplicate keys win."""
    flat = log_fields(err, options, stack_config=stack_config)
    return {str(flat[index]): flat[index + 1] for index in range(0, len(flat) - 1, 2)}


def log_error(
    err: BaseException | None,
    log_func: LogFunc | None,
    options: LogOptions | None = None,
    *,
    stack_config: StackTraceConfig | None = None,
) -> None:
    """Call ``log_func(message, *fields)`` exactly once for ``err``.

    Nothing is logged for ``None``. A foreign exception is logged as its
    text alone since it carries no structured metadata.
    """
    if err is None or log_func is None:
        return
    if not isinstance(err, ErrorNode):
        log_func(str(err))
        return
    opts = replace(options or DEFAULT_LOG_OPTIONS, include_message=False)
    log_func(str(err), *log_fields(err, opts, stack_config=stack_config))


def _stack_value(snapshot: Any, config: StackTraceConfig, stack_format: StackFormat) -> Any:
    if stack_format is StackFormat.JSON:
        return stack_to_json(snapshot, config)
    if stack_format is StackFormat.FULL:
        return format_stack_full(snapshot, config)
    if stack_format is StackFormat.LIST:
        return call_chain(snapshot, config)
    return format_stack(snapshot, config)
