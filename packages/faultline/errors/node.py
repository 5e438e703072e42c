"""The native error value and its wrapping chain.

An ``ErrorNode`` is one link: its own message, a frozen ``ErrorMeta`` and an
optional cause. Causes are always older values, so every chain is finite and
acyclic. It ends in ``None`` or in a foreign exception that is treated as an
opaque leaf.

Resolved accessors (``error_class``, ``severity`` and friends) walk from the
head and return the first explicitly set value. ``with_*`` methods return a
new node. Nodes are not locked, so a node should only be changed by its
owner before it is shared with other threads.
"""

from __future__ import annotations

import random
import secrets
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Iterator, Sequence

from packages.faultline import defaults
from packages.faultline.errors.options import (
    Directives,
    FieldPair,
    fields as fields_option,
    parse_args,
)
from packages.faultline.errors.types import (
    MAX_FIELDS_COUNT,
    MAX_MESSAGE_LENGTH,
    ErrorCategory,
    ErrorClass,
    ErrorSeverity,
    thaw_exception_state,
    truncate,
)
from packages.faultline.stack.capture import StackSnapshot, capture_stack
from packages.faultline.stack.config import MAX_STACK_DEPTH

if TYPE_CHECKING:
    from packages.faultline.errors.template import ErrorTemplate

SegmentFormatter = Callable[["ErrorNode"], str]

SEGMENT_SEPARATOR = ": "


@dataclass(frozen=True, slots=True)
class ErrorMeta:
    """Attributes set explicitly on one node; unset values stay at defaults."""

    error_class: ErrorClass = ErrorClass.UNSPECIFIED
    category: ErrorCategory = ErrorCategory.UNSPECIFIED
    severity: ErrorSeverity = ErrorSeverity.UNSPECIFIED
    error_id: str | None = None
    retryable: bool | None = None
    fields: tuple[FieldPair, ...] = ()
    formatter: SegmentFormatter | None = None
    span: Any = None
    template: ErrorTemplate | None = None


@thaw_exception_state
@dataclass(frozen=True, eq=False)
class ErrorNode(Exception):
    """One link in an error chain."""

    message: str = ""
    meta: ErrorMeta = field(default_factory=ErrorMeta)
    cause: BaseException | None = None
    stack: StackSnapshot | None = None
    created_at: datetime | None = field(default_factory=lambda: datetime.now(UTC))

    light: ClassVar[bool] = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "__cause__", self.cause)

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self.message, self.meta, self.cause, self.stack, self.created_at))

    # -- chain walking -------------------------------------------------

    @property
    def linked_cause(self) -> BaseException | None:
        """Return ``cause``, else a cause attached later by ``raise ... from``."""
        if self.cause is not None:
            return self.cause
        return self.__cause__

    def nodes(self) -> Iterator[ErrorNode]:
        """Yield this node and every native node below it."""
        seen: set[int] = set()
        current: BaseException | None = self
        while isinstance(current, ErrorNode) and id(current) not in seen:
            seen.add(id(current))
            yield current
            current = current.linked_cause

    @property
    def leaf(self) -> BaseException | None:
        """Return the foreign exception ending the chain, if any."""
        last: ErrorNode = self
        for node in self.nodes():
            last = node
        below = last.linked_cause
        return None if isinstance(below, ErrorNode) else below

    # -- resolved accessors ----------------------------------------------

    @property
    def error_class(self) -> ErrorClass:
        for node in self.nodes():
            if node.meta.error_class is not ErrorClass.UNSPECIFIED:
                return node.meta.error_class
        return ErrorClass.UNSPECIFIED

    @property
    def category(self) -> ErrorCategory:
        for node in self.nodes():
            if node.meta.category is not ErrorCategory.UNSPECIFIED:
                return node.meta.category
        return ErrorCategory.UNSPECIFIED

    @property
    def severity(self) -> ErrorSeverity:
        for node in self.nodes():
            if node.meta.severity is not ErrorSeverity.UNSPECIFIED:
                return node.meta.severity
        return ErrorSeverity.UNSPECIFIED

    @property
    def id(self) -> str:
        """Return the nearest id in the chain, or an empty string."""
        for node in self.nodes():
            if node.meta.error_id:
                return node.meta.error_id
        return ""

    @property
    def retryable(self) -> bool:
        for node in self.nodes():
            if node.meta.retryable is not None:
                return node.meta.retryable
        return False

    @property
    def span(self) -> Any:
        for node in self.nodes():
            if node.meta.span is not None:
                return node.meta.span
        return None

    @property
    def template(self) -> ErrorTemplate | None:
        for node in self.nodes():
            if node.meta.template is not None:
                return node.meta.template
        return None

    @property
    def effective_message(self) -> str:
        """Return the own message, else the nearest message further down."""
        for node in self.nodes():
            if node.message:
                return node.message
        leaf = self.leaf
        return str(leaf) if leaf is not None else ""

    @property
    def fields(self) -> tuple[FieldPair, ...]:
        """Return the nearest node's own fields."""
        for node in self.nodes():
            if node.meta.fields:
                return node.meta.fields
        return ()

    @property
    def all_fields(self) -> tuple[FieldPair, ...]:
        """Return every native node's fields, outer node first."""
        merged: list[FieldPair] = []
        for node in self.nodes():
            merged.extend(node.meta.fields)
        return tuple(merged)

    @property
    def origin_stack(self) -> StackSnapshot | None:
        """Return the innermost captured snapshot, where the failure began."""
        found: StackSnapshot | None = None
        for node in self.nodes():
            if node.stack is not None:
                found = node.stack
        return found

    def has_stack(self) -> bool:
        return self.origin_stack is not None

    # -- copy-on-write mutators ----------------------------------------

    def _with_meta(self, **changes: Any) -> ErrorNode:
        return replace(self, meta=replace(self.meta, **changes))

    def with_fields(self, *pairs: Any, **named: Any) -> ErrorNode:
        """Return a copy with extra fields appended to this node's own."""
        return self.with_field_pairs(fields_option(*pairs, **named).pairs)

    def with_field_pairs(self, pairs: Sequence[FieldPair]) -> ErrorNode:
        """Return a copy with already-normalized pairs appended."""
        room = max(0, MAX_FIELDS_COUNT - len(self.meta.fields))
        return self._with_meta(fields=self.meta.fields + tuple(pairs[:room]))

    def with_class(self, error_class: ErrorClass) -> ErrorNode:
        return self._with_meta(error_class=ErrorClass(error_class))

    def with_category(self, category: ErrorCategory) -> ErrorNode:
        return self._with_meta(category=ErrorCategory(category))

    def with_severity(self, severity: ErrorSeverity) -> ErrorNode:
        return self._with_meta(severity=ErrorSeverity(severity))

    def with_id(self, error_id: str) -> ErrorNode:
        return self._with_meta(error_id=str(error_id))

    def with_retryable(self, flag: bool = True) -> ErrorNode:
        return self._with_meta(retryable=bool(flag))

    def with_formatter(self, formatter: SegmentFormatter | None) -> ErrorNode:
        return self._with_meta(formatter=formatter)

    def with_span(self, span: Any) -> ErrorNode:
        """Return a copy bound to ``span`` and record the error on it."""
        from packages.faultline.tracing import record_on_span

        updated = self._with_meta(span=span)
        record_on_span(span, updated)
        return updated

    # -- rendering -------------------------------------------------------

    def segment(self) -> str:
        """Render this node alone with its formatter or the default one."""
        formatter = self.meta.formatter or defaults.get_default_formatter()
        return formatter(self)

    def __str__(self) -> str:
        parts = [segment for segment in (node.segment() for node in self.nodes()) if segment]
        leaf = self.leaf
        if leaf is not None:
            parts.append(str(leaf) or type(leaf).__name__)
        if parts:
            return SEGMENT_SEPARATOR.join(parts)
        return self._fallback_text()

    def _fallback_text(self) -> str:
        taxonomy = " ".join(
            value.value
            for value in (self.category, self.error_class)
            if value.value != "unspecified"
        )
        if taxonomy:
            return taxonomy
        return self.severity.label or "error"

    def __format__(self, format_spec: str) -> str:
        if format_spec == "full":
            from packages.faultline.formatting.render import RenderMode, render

            return render(self, RenderMode.FULL)
        return format(str(self), format_spec)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


def new(message: Any = "", *args: Any) -> ErrorNode:
    """Build a root node from a message and construction arguments."""
    return build(ErrorNode, message, None, args)


def wrap(cause: BaseException | None, message: Any = "", *args: Any) -> ErrorNode:
    """Build a node whose cause is ``cause``.

    ``cause`` may be ``None``: the result is then a causeless node, exactly
    as if ``new`` had been called. Callers that require a cause must check
    for ``None`` before wrapping.
    """
    return build(ErrorNode, message, cause, args)


def build(
    node_type: type[ErrorNode],
    message: Any,
    cause: BaseException | None,
    args: Sequence[Any],
    *,
    directives: Directives | None = None,
    template: ErrorTemplate | None = None,
    stack_skip: int = 0,
) -> ErrorNode:
    """Fold ``args`` and assemble one node of ``node_type``."""
    if cause is not None and not isinstance(cause, BaseException):
        raise TypeError(f"cause must be an exception or None, got {type(cause).__name__}")
    folded = parse_args(args, into=directives)
    meta = ErrorMeta(
        error_class=folded.error_class,
        category=folded.category,
        severity=folded.severity,
        error_id=folded.error_id if folded.error_id else _generate_id(node_type),
        retryable=folded.retryable,
        fields=tuple(folded.fields),
        formatter=folded.formatter,
        span=folded.span,
        template=template,
    )
    text = message if isinstance(message, str) else ("" if message is None else str(message))
    kwargs: dict[str, Any] = {
        "message": truncate(text, MAX_MESSAGE_LENGTH),
        "meta": meta,
        "cause": cause,
        "stack": None if node_type.light else _capture(folded, stack_skip),
    }
    if node_type.light:
        kwargs["created_at"] = None
    node = node_type(**kwargs)
    if folded.span is not None:
        from packages.faultline.tracing import record_on_span

        record_on_span(folded.span, node)
    return node


def _generate_id(node_type: type[ErrorNode]) -> str | None:
    if node_type.light:
        return None
    return secrets.token_hex(8)


def _capture(folded: Directives, stack_skip: int) -> StackSnapshot | None:
    if folded.stack is None and not defaults.auto_capture_enabled():
        return None
    config = folded.stack.config if folded.stack and folded.stack.config else None
    if config is None:
        config = defaults.get_default_stack_trace_config()
    if not config.enabled:
        return None
    if config.sampling_rate < 1.0 and random.random() >= config.sampling_rate:
        return None
    skip = stack_skip + (folded.stack.skip if folded.stack else 0)
    max_frames = config.max_frames if config.max_frames > 0 else MAX_STACK_DEPTH
    return capture_stack(skip=skip, max_frames=max_frames)
