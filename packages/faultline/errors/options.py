"""Construction directives for ``new``/``wrap`` and their left fold.

Arguments after the message form a flat sequence. Taxonomy enum members and
``Option`` values are directives; anything else is a field key whose value is
the next argument. Directives of the same kind are last-wins, while field
pairs keep their order and duplicates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping, Sequence

from packages.faultline.errors.types import (
    MAX_FIELDS_COUNT,
    MAX_KEY_LENGTH,
    MISSING_FIELD_PLACEHOLDER,
    ErrorCategory,
    ErrorClass,
    ErrorSeverity,
    truncate,
)
from packages.faultline.stack.config import StackTraceConfig

if TYPE_CHECKING:
    from packages.faultline.errors.node import ErrorNode

logger = logging.getLogger(__name__)

FieldPair = tuple[str, Any]


class Option:
    """Base type for tagged construction options."""

    __slots__ = ()


@dataclass(frozen=True, slots=True)
class ErrorIdOption(Option):
    value: str


@dataclass(frozen=True, slots=True)
class RetryableOption(Option):
    value: bool = True


@dataclass(frozen=True, slots=True)
class StackTraceOption(Option):
    """Request stack capture, optionally under a specific capture config."""

    config: StackTraceConfig | None = None
    skip: int = 0


@dataclass(frozen=True, slots=True)
class FormatterOption(Option):
    func: Callable[["ErrorNode"], str]


@dataclass(frozen=True, slots=True)
class SpanOption(Option):
    span: Any


@dataclass(frozen=True, slots=True)
class FieldsOption(Option):
    pairs: tuple[FieldPair, ...] = ()


def error_id(value: str) -> ErrorIdOption:
    """Set an explicit id instead of a generated one."""
    return ErrorIdOption(str(value))


def retryable(flag: bool = True) -> RetryableOption:
    return RetryableOption(bool(flag))


def stack_trace(config: StackTraceConfig | None = None, skip: int = 0) -> StackTraceOption:
    """Capture the call stack when the error is built."""
    return StackTraceOption(config=config, skip=max(0, skip))


def formatter(func: Callable[["ErrorNode"], str]) -> FormatterOption:
    return FormatterOption(func)


def with_span(span: Any) -> SpanOption:
    return SpanOption(span)


def fields(*pairs: Any, **named: Any) -> FieldsOption:
    """Bundle explicit field pairs.

    Positional arguments alternate key and value; a mapping is expanded in
    place. Keyword arguments follow the positional pairs.
    """
    collected: list[FieldPair] = []
    flat: list[Any] = []
    for item in pairs:
        if isinstance(item, Mapping):
            collected.extend(pairs_from_flat(flat))
            flat = []
            collected.extend((normalize_key(key), value) for key, value in item.items())
        else:
            flat.append(item)
    collected.extend(pairs_from_flat(flat))
    collected.extend((normalize_key(key), value) for key, value in named.items())
    return FieldsOption(tuple(collected))


def normalize_key(key: Any) -> str:
    return truncate(str(key), MAX_KEY_LENGTH)


def pairs_from_flat(items: Sequence[Any]) -> list[FieldPair]:
    """Pair up an alternating key/value sequence, padding a dangling key."""
    output: list[FieldPair] = []
    for index in range(0, len(items), 2):
        key = normalize_key(items[index])
        value = items[index + 1] if index + 1 < len(items) else MISSING_FIELD_PLACEHOLDER
        output.append((key, value))
    return output


def is_directive(value: Any) -> bool:
    """Return ``True`` for arguments that are never field keys or values."""
    return isinstance(value, (Option, ErrorClass, ErrorCategory, ErrorSeverity))


@dataclass(slots=True)
class Directives:
    """Result of folding one argument list."""

    error_class: ErrorClass = ErrorClass.UNSPECIFIED
    category: ErrorCategory = ErrorCategory.UNSPECIFIED
    severity: ErrorSeverity = ErrorSeverity.UNSPECIFIED
    error_id: str | None = None
    retryable: bool | None = None
    stack: StackTraceOption | None = None
    formatter: Callable[["ErrorNode"], str] | None = None
    span: Any = None
    fields: list[FieldPair] = field(default_factory=list)

    def apply(self, option: Any) -> None:
        """Fold one directive into the accumulated state."""
        if isinstance(option, ErrorClass):
            self.error_class = option
        elif isinstance(option, ErrorCategory):
            self.category = option
        elif isinstance(option, ErrorSeverity):
            self.severity = option
        elif isinstance(option, ErrorIdOption):
            self.error_id = option.value
        elif isinstance(option, RetryableOption):
            self.retryable = option.value
        elif isinstance(option, StackTraceOption):
            self.stack = option
        elif isinstance(option, FormatterOption):
            self.formatter = option.func
        elif isinstance(option, SpanOption):
            self.span = option.span
        elif isinstance(option, FieldsOption):
            self.add_fields(option.pairs)
        else:
            raise TypeError(f"not a construction directive: {option!r}")

    def add_fields(self, pairs: Iterable[FieldPair]) -> None:
        for pair in pairs:
            if len(self.fields) >= MAX_FIELDS_COUNT:
                logger.debug(
                    "field limit reached; dropping extra pairs",
                    extra={"limit": MAX_FIELDS_COUNT},
                )
                return
            self.fields.append(pair)


def parse_args(args: Sequence[Any], into: Directives | None = None) -> Directives:
    """Fold ``args`` left to right into a ``Directives`` value."""
    directives = into if into is not None else Directives()
    index = 0
    while index < len(args):
        arg = args[index]
        if is_directive(arg):
            directives.apply(arg)
            index += 1
            continue
        key = normalize_key(arg)
        if index + 1 < len(args) and not is_directive(args[index + 1]):
            directives.add_fields([(key, args[index + 1])])
            index += 2
        else:
            directives.add_fields([(key, MISSING_FIELD_PLACEHOLDER)])
            index += 1
    return directives
