"""Tests for span binding and trace correlation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from opentelemetry import trace as otel_trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.trace.status import StatusCode

from packages.faultline import (
    ErrorClass,
    OtelSpan,
    TraceSpan,
    error_to_schema,
    log_fields_map,
    new,
    redact,
    with_span,
    wrap,
)
from packages.faultline.tracing import as_trace_span, span_attributes, span_ids


@dataclass
class FakeSpan:
    """In-memory span satisfying the ``TraceSpan`` protocol."""

    trace_id: str = "trace-1"
    span_id: str = "span-1"
    parent_span_id: str = ""
    errors: list[BaseException] = field(default_factory=list)
    attributes: dict[str, str] = field(default_factory=dict)

    def record_error(self, err: BaseException) -> None:
        self.errors.append(err)

    def set_attributes(self, attributes: Mapping[str, str]) -> None:
        self.attributes.update(attributes)


def test_fake_span_satisfies_protocol() -> None:
    """Duck-typed spans are accepted as trace spans."""
    span = FakeSpan()

    assert isinstance(span, TraceSpan)
    assert as_trace_span(span) is span
    assert as_trace_span(object()) is None
    assert as_trace_span(None) is None


def test_span_option_records_error_on_construction() -> None:
    """Binding a span at construction records the error and its fields."""
    span = FakeSpan()

    err = new("charge failed", ErrorClass.EXTERNAL, "order_id", 9, "card", redact("4111"), with_span(span))

    assert span.errors == [err]
    assert span.attributes["error.class"] == "external"
    assert span.attributes["error.order_id"] == "9"
    assert span.attributes["error.card"] == "[REDACTED]"
    assert span.attributes["error.id"] == err.id
    assert err.span is span


def test_with_span_mutator_records_copy() -> None:
    """with_span returns a bound copy and records that copy."""
    span = FakeSpan()
    base = new("boom")

    bound = base.with_span(span)

    assert bound is not base
    assert base.span is None
    assert span.errors == [bound]


def test_outer_nodes_inherit_inner_span() -> None:
    """The nearest bound span is used for correlation ids."""
    span = FakeSpan(parent_span_id="parent-1")
    err = wrap(new("inner", with_span(span)), "outer")

    fields = log_fields_map(err)

    assert err.span is span
    assert fields["trace_id"] == "trace-1"
    assert fields["span_id"] == "span-1"
    assert fields["parent_span_id"] == "parent-1"
    assert span_ids(None) == ("", "", "")


def test_unknown_span_values_are_ignored() -> None:
    """Unsupported span objects are kept but produce no ids."""
    err = new("boom", with_span("not-a-span"))

    assert err.span == "not-a-span"
    assert "trace_id" not in log_fields_map(err)


def test_span_attributes_prefer_outer_fields() -> None:
    """Duplicate keys keep the outermost value."""
    err = wrap(new("inner", "key", "inner"), "outer", "key", "outer")

    assert span_attributes(err)["error.key"] == "outer"


def test_opentelemetry_span_records_exception_and_ids() -> None:
    """SDK spans receive an exception event, error status and attributes."""
    tracer = TracerProvider().get_tracer("faultline.tests")

    with tracer.start_as_current_span("parent") as parent:
        with tracer.start_as_current_span("child") as child:
            err = new("db down", ErrorClass.UNAVAILABLE, "table", "users").with_span(child)

    assert isinstance(as_trace_span(child), OtelSpan)
    assert [event.name for event in child.events] == ["exception"]
    assert child.status.status_code is StatusCode.ERROR
    assert child.attributes["error.class"] == "unavailable"
    assert child.attributes["error.table"] == "users"

    schema = error_to_schema(err)
    context = child.get_span_context()
    assert schema.trace_id == otel_trace.format_trace_id(context.trace_id)
    assert schema.span_id == otel_trace.format_span_id(context.span_id)
    assert schema.parent_span_id == otel_trace.format_span_id(parent.get_span_context().span_id)


def test_invalid_opentelemetry_span_has_no_ids() -> None:
    """Non-recording spans produce empty correlation ids."""
    err = new("boom", with_span(otel_trace.INVALID_SPAN))

    assert span_ids(err.span) == ("", "", "")
    assert error_to_schema(err).trace_id is None
