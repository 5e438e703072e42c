"""Opaque span references and the OpenTelemetry adapter.

Errors only hold a span; they never start, end or propagate one. Binding a
span records the error and its fields on it, and renderers read the span's
ids for correlation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping, Protocol, runtime_checkable

from opentelemetry import trace as otel_trace
from opentelemetry.trace.status import Status, StatusCode

from packages.faultline.errors.types import value_to_text

if TYPE_CHECKING:
    from packages.faultline.errors.node import ErrorNode

ATTRIBUTE_PREFIX = "error."


@runtime_checkable
class TraceSpan(Protocol):
    """Minimal span interface an error can be bound to."""

    def record_error(self, err: BaseException) -> None:
        """Record one error on the span."""

    def set_attributes(self, attributes: Mapping[str, str]) -> None:
        """Attach attributes to the span."""

    @property
    def trace_id(self) -> str: ...

    @property
    def span_id(self) -> str: ...

    @property
    def parent_span_id(self) -> str: ...


@dataclass(frozen=True)
class OtelSpan:
    """``TraceSpan`` adapter over an ``opentelemetry.trace.Span``."""

    span: otel_trace.Span

    def record_error(self, err: BaseException) -> None:
        self.span.record_exception(err)
        self.span.set_status(Status(StatusCode.ERROR, str(err)))

    def set_attributes(self, attributes: Mapping[str, str]) -> None:
        self.span.set_attributes({key: str(value) for key, value in attributes.items()})

    @property
    def trace_id(self) -> str:
        context = self.span.get_span_context()
        if not context.is_valid:
            return ""
        return otel_trace.format_trace_id(context.trace_id)

    @property
    def span_id(self) -> str:
        context = self.span.get_span_context()
        if not context.is_valid:
            return ""
        return otel_trace.format_span_id(context.span_id)

    @property
    def parent_span_id(self) -> str:
        # Only SDK spans expose their parent context.
        parent = getattr(self.span, "parent", None)
        if parent is None or not getattr(parent, "is_valid", False):
            return ""
        return otel_trace.format_span_id(parent.span_id)


def as_trace_span(span: Any) -> TraceSpan | None:
    """Return a ``TraceSpan`` view of ``span`` or ``None`` when unsupported."""
    if span is None:
        return None
    if isinstance(span, otel_trace.Span):
        return OtelSpan(span)
    if isinstance(span, TraceSpan):
        return span
    return None


def span_attributes(err: ErrorNode) -> dict[str, str]:
    """Flatten an error's metadata and fields into span attributes."""
    attributes = {
        f"{ATTRIBUTE_PREFIX}class": err.error_class.value,
        f"{ATTRIBUTE_PREFIX}category": err.category.value,
        f"{ATTRIBUTE_PREFIX}severity": err.severity.value,
        f"{ATTRIBUTE_PREFIX}retryable": str(err.retryable).lower(),
    }
    if err.id:
        attributes[f"{ATTRIBUTE_PREFIX}id"] = err.id
    for key, value in err.all_fields:
        attributes.setdefault(f"{ATTRIBUTE_PREFIX}{key}", value_to_text(value))
    return attributes


def record_on_span(span: Any, err: ErrorNode) -> None:
    """Record ``err`` and its attributes on ``span`` when it is a known span type."""
    adapted = as_trace_span(span)
    if adapted is None:
        return
    adapted.record_error(err)
    adapted.set_attributes(span_attributes(err))


def span_ids(span: Any) -> tuple[str, str, str]:
    """Return ``(trace_id, span_id, parent_span_id)``; empty strings when unknown."""
    adapted = as_trace_span(span)
    if adapted is None:
        return "", "", ""
    return adapted.trace_id, adapted.span_id, adapted.parent_span_id
