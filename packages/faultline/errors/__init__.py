"""Native error values: taxonomy, construction options, chains and templates."""

from . import template as templates
from .chain import (
    ensure_error,
    find_error,
    has_class,
    is_error,
    iter_chain,
    iter_nodes,
    root_cause,
    unwrap,
)
from .light import LightError, new_light, wrap_light
from .node import ErrorMeta, ErrorNode, new, wrap
from .normalize import from_exception
from .options import (
    Option,
    error_id,
    fields,
    formatter,
    retryable,
    stack_trace,
    with_span,
)
from .template import ErrorTemplate, new_template
from .types import (
    MAX_FIELDS_COUNT,
    MAX_KEY_LENGTH,
    MAX_MESSAGE_LENGTH,
    MAX_STACK_DEPTH,
    MAX_VALUE_LENGTH,
    MISSING_FIELD_PLACEHOLDER,
    REDACTED_PLACEHOLDER,
    ErrorCategory,
    ErrorClass,
    ErrorSeverity,
    Redacted,
    redact,
)

__all__ = [
    "MAX_FIELDS_COUNT",
    "MAX_KEY_LENGTH",
    "MAX_MESSAGE_LENGTH",
    "MAX_STACK_DEPTH",
    "MAX_VALUE_LENGTH",
    "MISSING_FIELD_PLACEHOLDER",
    "REDACTED_PLACEHOLDER",
    "ErrorCategory",
    "ErrorClass",
    "ErrorMeta",
    "ErrorNode",
    "ErrorSeverity",
    "ErrorTemplate",
    "LightError",
    "Option",
    "Redacted",
    "ensure_error",
    "error_id",
    "fields",
    "find_error",
    "formatter",
    "from_exception",
    "has_class",
    "is_error",
    "iter_chain",
    "iter_nodes",
    "new",
    "new_light",
    "new_template",
    "redact",
    "retryable",
    "root_cause",
    "stack_trace",
    "templates",
    "unwrap",
    "with_span",
    "wrap",
    "wrap_light",
]
