"""Tests for segment formatters, structured fields and chain rendering."""

from __future__ import annotations

import json
from typing import Any

import pytest

from packages.faultline import (
    DEVELOPMENT,
    REDACTED_PLACEHOLDER,
    STRICT,
    ErrorCategory,
    ErrorClass,
    ErrorSeverity,
    LogOptions,
    RenderMode,
    StackFormat,
    error_to_json,
    error_to_schema,
    format_with_context,
    format_with_fields,
    formatter,
    http_code,
    log_error,
    log_fields,
    log_fields_map,
    new,
    redact,
    render,
    retryable,
    set_default_formatter,
    set_default_stack_trace_config,
    stack_trace,
    templates,
    wrap,
)
from packages.faultline.formatting import MINIMAL_LOG_OPTIONS, VERBOSE_LOG_OPTIONS


def test_default_formatter_renders_message_only() -> None:
    """Fields stay out of str() unless a formatter opts in."""
    assert str(new("boom", "k", 1)) == "boom"


def test_format_with_fields_applies_redaction() -> None:
    """Redacted values never appear in formatted text."""
    err = new("save failed", "user", "bob", "token", redact("s3cret"), formatter(format_with_fields))

    assert str(err) == "save failed user=bob token=[REDACTED]"
    assert "s3cret" not in repr(err)


def test_default_formatter_can_be_swapped() -> None:
    """The process default formatter applies to nodes without an override."""
    err = wrap(new("inner", ErrorClass.VALIDATION, "k", 1), "outer", ErrorSeverity.HIGH)

    set_default_formatter(format_with_context)

    assert str(err) == "outer [high]: inner k=1 [validation]"

    set_default_formatter(None)

    assert str(err) == "outer: inner"


def test_per_node_formatter_overrides_default() -> None:
    """A node formatter wins over the process default for that segment only."""
    inner = new("inner", "k", 1, formatter(format_with_fields))
    outer = wrap(inner, "outer", "hidden", 2)

    assert str(outer) == "outer: inner k=1"


def test_failing_formatter_propagates() -> None:
    """Formatter exceptions are not swallowed by rendering."""
    err = new("boom", formatter(lambda node: str(1 // 0)))

    with pytest.raises(ZeroDivisionError):
        str(err)


def test_user_not_found_scenario() -> None:
    """A not-found error exposes its text, fields, class and status."""
    err = new("user not found", "user_id", 123).with_class(ErrorClass.NOT_FOUND)

    assert str(err) == "user not found"
    assert http_code(err) == 404
    flat = log_fields(err)
    assert flat[:2] == ["error_message", "user not found"]
    assert flat[2:4] == ["user_id", 123]
    assert flat[4:6] == ["error_class", "not_found"]
    assert flat[6:8] == ["error_id", err.id]
    assert len(flat) == 8


def test_log_fields_order_and_metadata() -> None:
    """Metadata keys follow user fields in a stable order."""
    err = wrap(
        new("inner", "user_id", 7, ErrorCategory.DATABASE),
        "outer",
        "request_id",
        "r1",
        ErrorSeverity.HIGH,
        retryable(),
    )

    keys = log_fields(err)[0::2]

    assert keys == [
        "error_message",
        "request_id",
        "user_id",
        "error_category",
        "error_severity",
        "error_id",
        "error_retryable",
    ]


def test_log_fields_redacts_values() -> None:
    """Sensitive values are replaced before they reach a logger."""
    err = new("login failed", "password", redact("hunter2"))

    assert log_fields_map(err)["password"] == REDACTED_PLACEHOLDER


def test_log_fields_for_none_and_foreign_errors() -> None:
    """None yields nothing; foreign errors are normalized first."""
    assert log_fields(None) == []

    fields = log_fields_map(ValueError("bad"))

    assert fields["error_message"] == "bad"
    assert fields["error_class"] == "validation"
    assert fields["exception_type"] == "ValueError"


def test_log_fields_custom_prefix_and_minimal_options() -> None:
    """Options control the prefix and which keys are emitted."""
    err = new("boom", ErrorClass.INTERNAL)

    flat = log_fields(err, LogOptions(field_prefix="err.", include_id=False))

    assert flat == ["err.message", "boom", "err.class", "internal"]


def test_log_fields_include_origin_function() -> None:
    """Captured stacks contribute the redacted origin function."""
    err = new("boom", stack_trace())

    fields = log_fields_map(err)

    assert fields["error_function"] == "test_log_fields_include_origin_function"
    assert "error_file" not in fields


def test_log_fields_stack_formats() -> None:
    """Stack values follow the requested representation."""
    err = new("boom", stack_trace(DEVELOPMENT))
    base = LogOptions(include_stack=True)

    as_json = log_fields_map(err, base)["error_stack"]
    as_list = log_fields_map(err, LogOptions(include_stack=True, stack_format=StackFormat.LIST))[
        "error_stack"
    ]
    as_text = log_fields_map(err, LogOptions(include_stack=True, stack_format=StackFormat.STRING))[
        "error_stack"
    ]

    assert as_json[0]["function"] == "test_log_fields_stack_formats"
    assert as_list[0] == "test_log_fields_stack_formats"
    assert as_text.startswith("test_log_fields_stack_formats (")


def test_log_error_calls_sink_once_without_message_key() -> None:
    """log_error passes the message first and the fields after it."""
    calls: list[tuple[Any, ...]] = []
    err = new("user not found", "user_id", 123, ErrorClass.NOT_FOUND)

    log_error(err, lambda *args: calls.append(args))

    assert len(calls) == 1
    message, *rest = calls[0]
    assert message == "user not found"
    assert "error_message" not in rest
    assert rest[:4] == ["user_id", 123, "error_class", "not_found"]


def test_log_error_skips_none_and_logs_foreign_text() -> None:
    """Nothing is logged for None; foreign errors log their text only."""
    calls: list[tuple[Any, ...]] = []

    log_error(None, lambda *args: calls.append(args))
    log_error(RuntimeError("plain"), lambda *args: calls.append(args))

    assert calls == [("plain",)]


def test_render_modes() -> None:
    """Each render mode returns its representation."""
    err = new("boom", ErrorClass.NOT_FOUND, "user_id", 7)

    assert render(err) == "boom"
    assert render(err, RenderMode.FIELDS) == log_fields(err)
    assert json.loads(render(err, RenderMode.JSON))["class"] == "not_found"
    assert render(None) == ""
    assert render(None, RenderMode.FIELDS) == []


def test_full_rendering_lists_metadata_and_fields() -> None:
    """The full dump has the text, a metadata line and merged fields."""
    err = new("boom", ErrorClass.NOT_FOUND, "user_id", 7, "token", redact("abc"))

    text = f"{err:full}"
    lines = text.splitlines()

    assert text == render(err, RenderMode.FULL)
    assert lines[0] == "boom"
    assert lines[1] == (
        f"[class=not_found category=unspecified severity=unspecified id={err.id} retryable=false]"
    )
    assert lines[2:] == ["Fields:", "\tuser_id: 7", f"\ttoken: {REDACTED_PLACEHOLDER}"]


def test_full_rendering_includes_stack_when_captured() -> None:
    """A captured stack is dumped under the active redaction policy."""
    err = new("boom", stack_trace(DEVELOPMENT))

    text = render(err, RenderMode.FULL)

    assert "Stack trace:" in text
    assert "\ttest_full_rendering_includes_stack_when_captured" in text


def test_plain_format_spec_pads_text() -> None:
    """Other format specs apply to the rendered text."""
    assert f"{new('ab'):>4}" == "  ab"


def test_error_to_json_document() -> None:
    """The JSON document carries resolved metadata and redacted fields."""
    err = wrap(
        ValueError("io failure"),
        "save failed",
        ErrorClass.INTERNAL,
        "user_id",
        7,
        "password",
        redact("hunter2"),
    )

    data = json.loads(error_to_json(err))

    assert data["class"] == "internal"
    assert data["message"] == "save failed: io failure"
    assert data["messages"] == ["save failed", "io failure"]
    assert data["fields"] == [["user_id", 7], ["password", REDACTED_PLACEHOLDER]]
    assert data["id"] == err.id
    assert "hunter2" not in error_to_json(err)
    assert "trace_id" not in data
    assert "stack_trace" not in data
    assert error_to_json(None) == "null"


def test_error_schema_records_template_pattern() -> None:
    """Template-built errors expose their pattern in the document."""
    err = templates.NOT_FOUND_ERROR.new("user")

    schema = error_to_schema(err)

    assert schema.template == "{} not found"
    assert schema.error_class == "not_found"
    assert schema.severity == "medium"


def test_error_to_schema_rejects_none() -> None:
    """A document cannot describe a missing error."""
    with pytest.raises(ValueError):
        error_to_schema(None)  # type: ignore[arg-type]


def test_verbose_and_minimal_log_options() -> None:
    """Preset option bundles widen or narrow the emitted keys."""
    err = new("boom", ErrorClass.INTERNAL, "k", 1, stack_trace(DEVELOPMENT))

    verbose = log_fields_map(err, VERBOSE_LOG_OPTIONS)
    minimal = log_fields(err, MINIMAL_LOG_OPTIONS)

    assert verbose["error_created"] == err.created_at.isoformat()
    assert verbose["error_file"].endswith("test_formatting.py")
    assert isinstance(verbose["error_line"], int)
    assert verbose["error_stack"][0]["function"] == "test_verbose_and_minimal_log_options"
    assert minimal == ["error_message", "boom", "k", 1]


def test_rendering_a_foreign_exception_is_repeatable() -> None:
    """The same foreign exception renders to identical output every time."""
    exc = ValueError("bad input")

    first = render(exc, RenderMode.JSON)
    second = render(exc, RenderMode.JSON)

    assert first == second
    assert json.loads(first)["id"] == ""
    assert render(exc, RenderMode.FULL) == render(exc, RenderMode.FULL)
    assert log_fields(exc) == log_fields(exc)
    assert "error_id" not in log_fields_map(exc)


def test_strict_default_redacts_whole_node_output() -> None:
    """Full text, JSON and verbose fields hide locations once the default is strict."""
    err = wrap(new("inner", "user_id", 7, stack_trace(DEVELOPMENT)), "outer")
    function_name = "test_strict_default_redacts_whole_node_output"
    assert function_name in render(err, RenderMode.FULL)

    set_default_stack_trace_config(STRICT)

    full = render(err, RenderMode.FULL)
    document = render(err, RenderMode.JSON)
    verbose = log_fields_map(err, VERBOSE_LOG_OPTIONS)
    verbose_text = json.dumps(verbose, default=str)

    for output in (full, document, verbose_text):
        assert function_name not in output
        assert "test_formatting" not in output
        assert __file__ not in output
    assert "Stack trace:" in full
    assert "[some_function]" in full
    assert verbose["error_function"] == "[some_function]"
    assert verbose["error_file"] == "[some_file]"
    assert "error_line" not in verbose
    assert all(set(frame) == {"function", "file"} for frame in verbose["error_stack"])
