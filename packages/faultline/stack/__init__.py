"""Stack capture, redaction presets and policy-driven rendering."""

from .capture import StackFrame, StackSnapshot, capture_stack
from .config import (
    DEVELOPMENT,
    DISABLED,
    MAX_STACK_DEPTH,
    PRESETS,
    PRODUCTION,
    STRICT,
    StackTraceConfig,
    preset,
)
from .render import (
    call_chain,
    format_stack,
    format_stack_full,
    origin_fields,
    render_frame,
    stack_to_json,
)

__all__ = [
    "DEVELOPMENT",
    "DISABLED",
    "MAX_STACK_DEPTH",
    "PRESETS",
    "PRODUCTION",
    "STRICT",
    "StackFrame",
    "StackSnapshot",
    "StackTraceConfig",
    "call_chain",
    "capture_stack",
    "format_stack",
    "format_stack_full",
    "origin_fields",
    "preset",
    "render_frame",
    "stack_to_json",
]
