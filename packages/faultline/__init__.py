"""faultline: structured errors with metadata, chains and redacted stacks.

Typical use::

    from packages import faultline as fl

    err = fl.new("user not found", "user_id", 123, fl.ErrorClass.NOT_FOUND)
    fl.http_code(err)          # 404
    fl.log_fields(err)         # ["error_message", "user not found", "user_id", 123, ...]
"""

from .errors import (
    MAX_FIELDS_COUNT,
    MAX_KEY_LENGTH,
    MAX_MESSAGE_LENGTH,
    MAX_STACK_DEPTH,
    MAX_VALUE_LENGTH,
    MISSING_FIELD_PLACEHOLDER,
    REDACTED_PLACEHOLDER,
    ErrorCategory,
    ErrorClass,
    ErrorMeta,
    ErrorNode,
    ErrorSeverity,
    ErrorTemplate,
    LightError,
    Redacted,
    ensure_error,
    error_id,
    fields,
    find_error,
    formatter,
    from_exception,
    has_class,
    is_error,
    iter_chain,
    iter_nodes,
    new,
    new_light,
    new_template,
    redact,
    retryable,
    root_cause,
    stack_trace,
    templates,
    unwrap,
    with_span,
    wrap,
    wrap_light,
)
from .collections import (
    ErrorGatherer,
    ErrorList,
    ErrorSet,
    MultiError,
    add_to_gatherer,
    clear_gathered_errors,
    disable_gatherer,
    enable_gatherer,
    error_key,
    gatherer_enabled,
    get_gathered_errors,
    id_key,
    join,
    message_key,
    reset_gatherer,
    set_gatherer_key_getter,
)
from .defaults import (
    auto_capture_enabled,
    get_default_formatter,
    get_default_stack_trace_config,
    reset_defaults,
    set_auto_capture,
    set_default_formatter,
    set_default_stack_sampling_rate,
    set_default_stack_trace_config,
)
from .formatting import (
    ErrorSchema,
    LogOptions,
    RenderMode,
    StackFormat,
    error_to_json,
    error_to_schema,
    format_message,
    format_with_context,
    format_with_fields,
    http_code,
    log_error,
    log_fields,
    log_fields_map,
    render,
    render_full,
)
from .stack import (
    DEVELOPMENT,
    DISABLED,
    PRODUCTION,
    STRICT,
    StackFrame,
    StackSnapshot,
    StackTraceConfig,
    capture_stack,
    format_stack,
    format_stack_full,
    preset,
    stack_to_json,
)
from .tracing import OtelSpan, TraceSpan

__all__ = [
    "DEVELOPMENT",
    "DISABLED",
    "MAX_FIELDS_COUNT",
    "MAX_KEY_LENGTH",
    "MAX_MESSAGE_LENGTH",
    "MAX_STACK_DEPTH",
    "MAX_VALUE_LENGTH",
    "MISSING_FIELD_PLACEHOLDER",
    "PRODUCTION",
    "REDACTED_PLACEHOLDER",
    "STRICT",
    "ErrorCategory",
    "ErrorClass",
    "ErrorGatherer",
    "ErrorList",
    "ErrorMeta",
    "ErrorNode",
    "ErrorSchema",
    "ErrorSet",
    "ErrorSeverity",
    "ErrorTemplate",
    "LightError",
    "LogOptions",
    "MultiError",
    "OtelSpan",
    "Redacted",
    "RenderMode",
    "StackFormat",
    "StackFrame",
    "StackSnapshot",
    "StackTraceConfig",
    "TraceSpan",
    "add_to_gatherer",
    "auto_capture_enabled",
    "capture_stack",
    "clear_gathered_errors",
    "disable_gatherer",
    "enable_gatherer",
    "ensure_error",
    "error_id",
    "error_key",
    "error_to_json",
    "error_to_schema",
    "fields",
    "find_error",
    "format_message",
    "format_stack",
    "format_stack_full",
    "format_with_context",
    "format_with_fields",
    "formatter",
    "from_exception",
    "gatherer_enabled",
    "get_default_formatter",
    "get_default_stack_trace_config",
    "get_gathered_errors",
    "has_class",
    "http_code",
    "id_key",
    "is_error",
    "iter_chain",
    "iter_nodes",
    "join",
    "log_error",
    "log_fields",
    "log_fields_map",
    "message_key",
    "new",
    "new_light",
    "new_template",
    "preset",
    "redact",
    "render",
    "render_full",
    "reset_defaults",
    "reset_gatherer",
    "retryable",
    "root_cause",
    "set_auto_capture",
    "set_default_formatter",
    "set_default_stack_sampling_rate",
    "set_default_stack_trace_config",
    "set_gatherer_key_getter",
    "stack_to_json",
    "stack_trace",
    "templates",
    "unwrap",
    "with_span",
    "wrap",
    "wrap_light",
]
