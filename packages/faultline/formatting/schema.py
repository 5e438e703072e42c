"""Serializable error documents.

``ErrorSchema`` is the wire shape of a whole chain: resolved metadata, the
per-node messages, merged fields with redaction applied, span ids and the
stack rendered under the active redaction policy.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from packages.faultline.errors.chain import ensure_error, iter_nodes
from packages.faultline.errors.types import safe_value, value_to_text
from packages.faultline.stack.config import StackTraceConfig
from packages.faultline.stack.render import resolve_config, stack_to_json
from packages.faultline.tracing import span_ids

_JSON_SCALARS = (str, int, float, bool, type(None))


class ErrorSchema(BaseModel):
    """JSON document describing one error chain."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = ""
    error_class: str = Field(default="unspecified", alias="class")
    category: str = "unspecified"
    severity: str = "unspecified"
    message: str = ""
    messages: list[str] = Field(default_factory=list)
    fields: list[tuple[str, Any]] = Field(default_factory=list)
    retryable: bool = False
    created_at: datetime | None = None
    template: str | None = None
    trace_id: str | None = None
    span_id: str | None = None
    parent_span_id: str | None = None
    stack_trace: list[dict[str, Any]] | None = None


def error_to_schema(
    err: BaseException, *, stack_config: StackTraceConfig | None = None
) -> ErrorSchema:
    """Build the serializable document for ``err``."""
    node = ensure_error(err)
    if node is None:
        raise ValueError("cannot describe a missing error")
    messages = [link.message for link in iter_nodes(node) if link.message]
    leaf = node.leaf
    if leaf is not None:
        messages.append(str(leaf) or type(leaf).__name__)
    trace_id, span_id, parent_span_id = span_ids(node.span)
    snapshot = node.origin_stack
    config = resolve_config(stack_config)
    template = node.template
    return ErrorSchema(
        id=node.id,
        error_class=node.error_class.value,
        category=node.category.value,
        severity=node.severity.value,
        message=str(node),
        messages=messages,
        fields=[(key, json_value(value)) for key, value in node.all_fields],
        retryable=node.retryable,
        created_at=node.created_at,
        template=template.message_template if template is not None else None,
        trace_id=trace_id or None,
        span_id=span_id or None,
        parent_span_id=parent_span_id or None,
        stack_trace=stack_to_json(snapshot, config) if snapshot else None,
    )


def error_to_json(
    err: BaseException | None, *, stack_config: StackTraceConfig | None = None
) -> str:
    """Return the compact JSON document for ``err``; ``null`` for ``None``."""
    if err is None:
        return "null"
    schema = error_to_schema(err, stack_config=stack_config)
    return schema.model_dump_json(by_alias=True, exclude_none=True)


def json_value(value: Any) -> Any:
    """Return a redacted value that JSON encoding accepts."""
    value = safe_value(value)
    if isinstance(value, _JSON_SCALARS):
        return value
    if isinstance(value, (list, tuple)) and all(isinstance(item, _JSON_SCALARS) for item in value):
        return [safe_value(item) for item in value]
    return value_to_text(value)
