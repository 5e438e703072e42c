"""Tests for fixed-arity error templates."""

from __future__ import annotations

import logging
from dataclasses import FrozenInstanceError

import pytest

from packages.faultline import (
    MISSING_FIELD_PLACEHOLDER,
    ErrorCategory,
    ErrorClass,
    ErrorSeverity,
    http_code,
    new_template,
    templates,
)
from packages.faultline.errors.template import count_placeholders


def test_builtin_not_found_template() -> None:
    """The not-found template fills its pattern and sets its taxonomy."""
    err = templates.NOT_FOUND_ERROR.new("user")

    assert str(err) == "user not found"
    assert err.error_class is ErrorClass.NOT_FOUND
    assert err.severity is ErrorSeverity.MEDIUM
    assert err.template is templates.NOT_FOUND_ERROR
    assert http_code(err) == 404


def test_template_properties_reflect_options() -> None:
    """Templates expose the taxonomy carried by their options."""
    template = templates.VALIDATION_ERROR

    assert template.arity == 1
    assert template.error_class is ErrorClass.VALIDATION
    assert template.category is ErrorCategory.USER_INPUT
    assert template.severity is ErrorSeverity.LOW


def test_extra_arguments_become_construction_arguments() -> None:
    """Arguments beyond the arity are folded as fields and directives."""
    template = new_template("order {} failed", ErrorClass.INTERNAL)

    err = template.new(42, "order_id", 42, ErrorSeverity.HIGH)

    assert str(err) == "order 42 failed"
    assert err.fields == (("order_id", 42),)
    assert err.severity is ErrorSeverity.HIGH
    assert err.error_class is ErrorClass.INTERNAL


def test_later_options_override_template_options() -> None:
    """Call-site directives win over the template's own."""
    err = templates.VALIDATION_ERROR.new("email", ErrorSeverity.HIGH)

    assert str(err) == "failed validation: email"
    assert err.severity is ErrorSeverity.HIGH


def test_too_few_arguments_keeps_raw_pattern(caplog: pytest.LogCaptureFixture) -> None:
    """Missing arguments leave the pattern unformatted and log a warning."""
    template = new_template("{} to {}")

    with caplog.at_level(logging.WARNING, logger="packages.faultline.errors.template"):
        err = template.new("a")

    assert err.message == "{} to {}"
    assert err.fields == (("a", MISSING_FIELD_PLACEHOLDER),)
    assert any("too few arguments" in record.getMessage() for record in caplog.records)


def test_template_wrap_keeps_cause() -> None:
    """Wrapping through a template appends the cause text."""
    err = templates.DATABASE_ERROR.wrap(ValueError("io"), "insert")

    assert str(err) == "database error: insert: io"
    assert err.category is ErrorCategory.DATABASE
    assert err.cause is not None


def test_retryable_templates() -> None:
    """Transient templates mark their errors retryable."""
    assert templates.TIMEOUT_ERROR.new("fetch").retryable is True
    assert templates.CONFLICT_ERROR.new("row").retryable is False


@pytest.mark.parametrize(
    ("pattern", "expected"),
    [
        ("no placeholders", 0),
        ("{} and {}", 2),
        ("{0} then {1} then {0}", 2),
        ("{{literal}} {}", 1),
        ("{} {name}", 1),
    ],
)
def test_count_placeholders(pattern: str, expected: int) -> None:
    """Arity counts positional replacement fields only."""
    assert count_placeholders(pattern) == expected


def test_templates_are_immutable() -> None:
    """Template fields cannot be reassigned."""
    template = new_template("{} failed")

    with pytest.raises(FrozenInstanceError):
        template.message_template = "changed"  # type: ignore[misc]
