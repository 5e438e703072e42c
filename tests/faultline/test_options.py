"""Tests for construction argument folding."""

from __future__ import annotations

import pytest

from packages.faultline import (
    MAX_FIELDS_COUNT,
    MAX_KEY_LENGTH,
    MAX_MESSAGE_LENGTH,
    MISSING_FIELD_PLACEHOLDER,
    ErrorClass,
    ErrorSeverity,
    error_id,
    fields,
    new,
    retryable,
    wrap,
)
from packages.faultline.errors.options import Directives, is_directive, parse_args


def test_key_value_pairs_keep_order_and_duplicates() -> None:
    """Field pairs should be stored in argument order, duplicates included."""
    err = new("m", "k", 1, "k", 2, "other", "x")

    assert err.fields == (("k", 1), ("k", 2), ("other", "x"))


def test_dangling_key_gets_missing_placeholder() -> None:
    """A trailing key without a value should be padded."""
    err = new("m", "a", 1, "b")

    assert err.fields == (("a", 1), ("b", MISSING_FIELD_PLACEHOLDER))


def test_key_followed_by_directive_gets_missing_placeholder() -> None:
    """Directives are never consumed as field values."""
    err = new("m", "a", ErrorClass.VALIDATION, "b", 2)

    assert err.fields == (("a", MISSING_FIELD_PLACEHOLDER), ("b", 2))
    assert err.error_class is ErrorClass.VALIDATION


def test_plain_strings_are_keys_even_when_they_match_enum_values() -> None:
    """Only enum members are directives; their raw values are ordinary keys."""
    err = new("m", "validation", 1)

    assert err.error_class is ErrorClass.UNSPECIFIED
    assert err.fields == (("validation", 1),)


def test_same_kind_directives_are_last_wins() -> None:
    """Repeated directives of one kind should keep the last value."""
    err = new("m", ErrorSeverity.LOW, ErrorSeverity.HIGH, error_id("a"), error_id("b"))

    assert err.severity is ErrorSeverity.HIGH
    assert err.id == "b"


def test_fields_option_accepts_pairs_mappings_and_keywords() -> None:
    """fields() should expand mappings in place and append keywords last."""
    err = new("m", fields("a", 1, {"b": 2}, c=3))

    assert err.fields == (("a", 1), ("b", 2), ("c", 3))


def test_non_string_keys_are_stringified_and_truncated() -> None:
    """Keys should be coerced to text and capped in length."""
    long_key = "k" * (MAX_KEY_LENGTH + 20)
    err = new("m", 42, "answer", long_key, "v")

    assert err.fields[0] == ("42", "answer")
    assert err.fields[1][0] == "k" * MAX_KEY_LENGTH


def test_messages_are_truncated() -> None:
    """Messages longer than the limit should be cut."""
    err = new("x" * (MAX_MESSAGE_LENGTH + 50))

    assert len(err.message) == MAX_MESSAGE_LENGTH


def test_field_count_is_capped() -> None:
    """Pairs beyond the per-node limit should be dropped."""
    args: list[object] = []
    for index in range(MAX_FIELDS_COUNT + 50):
        args.extend([f"k{index}", index])

    err = new("m", *args)

    assert len(err.fields) == MAX_FIELDS_COUNT
    assert err.fields[-1] == (f"k{MAX_FIELDS_COUNT - 1}", MAX_FIELDS_COUNT - 1)


def test_with_fields_respects_field_cap() -> None:
    """Appending fields to a full node should not grow it."""
    args: list[object] = []
    for index in range(MAX_FIELDS_COUNT):
        args.extend([f"k{index}", index])
    err = new("m", *args)

    assert len(err.with_fields("extra", 1).fields) == MAX_FIELDS_COUNT


def test_retryable_resolution_uses_nearest_explicit_flag() -> None:
    """An explicit False on an outer node overrides an inner True."""
    inner = new("inner", retryable())

    assert inner.retryable is True
    assert wrap(inner, "outer").retryable is True
    assert wrap(inner, "outer", retryable(False)).retryable is False


def test_explicit_error_id_is_used() -> None:
    """error_id() should replace the generated id."""
    assert new("m", error_id("req-42")).id == "req-42"


def test_is_directive() -> None:
    """Enum members and options are directives; other values are not."""
    assert is_directive(ErrorClass.NOT_FOUND)
    assert is_directive(retryable())
    assert not is_directive("not_found")
    assert not is_directive(3)


def test_parse_args_folds_into_existing_directives() -> None:
    """Later arguments fold over directives that are passed in."""
    base = parse_args([ErrorClass.INTERNAL, "a", 1])
    folded = parse_args([ErrorClass.TIMEOUT, "b", 2], into=base)

    assert folded is base
    assert folded.error_class is ErrorClass.TIMEOUT
    assert folded.fields == [("a", 1), ("b", 2)]


def test_apply_rejects_unknown_directive() -> None:
    """Only known directive types can be applied."""
    with pytest.raises(TypeError):
        Directives().apply("not a directive")
