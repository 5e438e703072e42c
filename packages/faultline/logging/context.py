"""Correlation fields attached to every log line.

The current ``LogContext`` lives in a ``contextvars`` slot, so threads and
asyncio tasks each see their own. A context is an immutable ordered run of
``(key, text)`` pairs held to the same limits as error fields: keys are cut
to ``MAX_KEY_LENGTH``, at most ``MAX_FIELDS_COUNT`` keys are kept, and
values are stored as redaction-safe text.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Iterator, Mapping

from packages.faultline.errors.node import ErrorNode
from packages.faultline.errors.types import (
    MAX_FIELDS_COUNT,
    MAX_KEY_LENGTH,
    truncate,
    value_to_text,
)


@dataclass(frozen=True, slots=True)
class LogContext:
    pairs: tuple[tuple[str, str], ...] = ()

    def bind(self, values: Mapping[str, object]) -> LogContext:
        """Return a context with ``values`` set; ``None`` values are skipped."""
        merged = dict(self.pairs)
        for key, value in values.items():
            if value is None:
                continue
            name = truncate(str(key), MAX_KEY_LENGTH)
            if name not in merged and len(merged) >= MAX_FIELDS_COUNT:
                continue
            merged[name] = value_to_text(value)
        return LogContext(tuple(merged.items()))

    def without(self, keys: tuple[str, ...]) -> LogContext:
        dropped = set(keys)
        return LogContext(tuple(pair for pair in self.pairs if pair[0] not in dropped))

    def as_dict(self) -> dict[str, str]:
        return dict(self.pairs)


_LOG_CONTEXT: ContextVar[LogContext] = ContextVar("faultline_log_context", default=LogContext())


def get_context() -> dict[str, str]:
    """Return the current context as a new dict."""
    return _LOG_CONTEXT.get().as_dict()


def bind_context(**values: object) -> None:
    if values:
        _LOG_CONTEXT.set(_LOG_CONTEXT.get().bind(values))


def bind_error_context(err: BaseException | None) -> None:
    """Bind the id and class of ``err`` so later lines correlate with it.

    Foreign exceptions and errors without an id or class bind nothing.
    """
    if not isinstance(err, ErrorNode):
        return
    values: dict[str, object] = {}
    if err.id:
        values["error_id"] = err.id
    if err.error_class.value != "unspecified":
        values["error_class"] = err.error_class.value
    bind_context(**values)


def clear_context(*keys: str) -> None:
    """Drop ``keys``, or every key when none are named."""
    if not keys:
        _LOG_CONTEXT.set(LogContext())
        return
    _LOG_CONTEXT.set(_LOG_CONTEXT.get().without(keys))


@contextmanager
def log_context(values: Mapping[str, object]) -> Iterator[None]:
    """Bind ``values`` for the duration of a block."""
    token = _LOG_CONTEXT.set(_LOG_CONTEXT.get().bind(values))
    try:
        yield
    finally:
        _LOG_CONTEXT.reset(token)
