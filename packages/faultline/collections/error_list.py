"""Thread-safe error collections.

Both collections guard their storage with one ``RLock`` for their whole
lifetime. Insertion order is the order in which callers acquired the lock.
Readers receive snapshots, never the backing list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from threading import RLock
from typing import Any, Iterator

from packages.faultline.collections.keys import (
    KeyGetter,
    message_key,
    rekey,
    resolve_key_getter,
)
from packages.faultline.collections.multi import MultiError
from packages.faultline.errors.node import ErrorNode, new, wrap
from packages.faultline.errors.options import FieldPair, fields as fields_option
from packages.faultline.errors.types import ErrorCategory, ErrorClass, ErrorSeverity


@dataclass(eq=False)
class ErrorList:
    """Ordered, append-only collection of errors.

    Collection-level metadata is applied to added native errors that leave
    the same attribute unset. Since nodes are immutable the stored entry is
    the updated copy.
    """

    error_class: ErrorClass = ErrorClass.UNSPECIFIED
    category: ErrorCategory = ErrorCategory.UNSPECIFIED
    severity: ErrorSeverity = ErrorSeverity.UNSPECIFIED
    retryable: bool | None = None
    fields: tuple[FieldPair, ...] = ()
    _errors: list[BaseException] = field(default_factory=list, init=False, repr=False)
    _lock: RLock = field(default_factory=RLock, init=False, repr=False)

    def with_fields(self, *pairs: Any, **named: Any) -> ErrorList:
        """Add collection-level fields applied to every later native entry."""
        with self._lock:
            self.fields = self.fields + fields_option(*pairs, **named).pairs
        return self

    def add(self, err: BaseException | None) -> None:
        """Append ``err``; ``None`` is ignored and foreign errors are kept as given."""
        if err is None:
            return
        with self._lock:
            self._insert(self._apply_defaults(err))

    def new(self, message: Any = "", *args: Any) -> ErrorNode:
        """Build a node with ``new`` and add it; return the stored entry."""
        return self._add_built(new(message, *args))

    def wrap(self, cause: BaseException | None, message: Any = "", *args: Any) -> ErrorNode:
        """Build a node with ``wrap`` and add it; return the stored entry."""
        return self._add_built(wrap(cause, message, *args))

    def err(self) -> BaseException | None:
        """Fold the collection into one error value without changing it."""
        with self._lock:
            entries = tuple(self._errors)
        if not entries:
            return None
        if len(entries) == 1:
            return entries[0]
        return MultiError(errors=entries)

    def get_all(self) -> list[BaseException]:
        with self._lock:
            return list(self._errors)

    def clear(self) -> None:
        with self._lock:
            self._errors.clear()

    def remove(self, index: int) -> bool:
        """Remove the entry at ``index``; return ``False`` when out of range."""
        with self._lock:
            if index < 0 or index >= len(self._errors):
                return False
            del self._errors[index]
            return True

    def copy(self) -> ErrorList:
        with self._lock:
            clone = ErrorList(
                error_class=self.error_class,
                category=self.category,
                severity=self.severity,
                retryable=self.retryable,
                fields=self.fields,
            )
            clone._errors = list(self._errors)
        return clone

    def first(self) -> BaseException | None:
        with self._lock:
            return self._errors[0] if self._errors else None

    def last(self) -> BaseException | None:
        with self._lock:
            return self._errors[-1] if self._errors else None

    def is_empty(self) -> bool:
        return len(self) == 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._errors)

    def __iter__(self) -> Iterator[BaseException]:
        return iter(self.get_all())

    def _add_built(self, node: ErrorNode) -> ErrorNode:
        with self._lock:
            stored = self._apply_defaults(node)
            self._insert(stored)
        return stored  # type: ignore[return-value]

    def _insert(self, err: BaseException) -> None:
        self._errors.append(err)

    def _apply_defaults(self, err: BaseException) -> BaseException:
        if not isinstance(err, ErrorNode):
            return err
        node = err
        if self.error_class is not ErrorClass.UNSPECIFIED and node.error_class is ErrorClass.UNSPECIFIED:
            node = node.with_class(self.error_class)
        if self.category is not ErrorCategory.UNSPECIFIED and node.category is ErrorCategory.UNSPECIFIED:
            node = node.with_category(self.category)
        if self.severity is not ErrorSeverity.UNSPECIFIED and node.severity is ErrorSeverity.UNSPECIFIED:
            node = node.with_severity(self.severity)
        if self.retryable is not None and all(link.meta.retryable is None for link in node.nodes()):
            node = node.with_retryable(self.retryable)
        if self.fields:
            node = node.with_field_pairs(self.fields)
        return node


@dataclass(eq=False)
class ErrorSet(ErrorList):
    """``ErrorList`` that keeps only the first error per dedup key.

    Later duplicates are counted, not stored. The key is computed and checked
    in the same critical section as the insert.
    """

    key_getter: KeyGetter = message_key
    _seen: dict[str, int] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self.key_getter = resolve_key_getter(self.key_getter)

    def with_key_getter(self, key_getter: KeyGetter | str) -> ErrorSet:
        """Swap the key getter and re-key stored entries.

        Entries that collide under the new getter collapse into the first
        one, and their counts are summed.
        """
        resolved = resolve_key_getter(key_getter)
        with self._lock:
            self._errors, self._seen = rekey(self._errors, self._seen, self.key_getter, resolved)
            self.key_getter = resolved
        return self

    def count(self, err_or_key: BaseException | str) -> int:
        """Return how many times an error (or a raw key) was added."""
        with self._lock:
            key = err_or_key if isinstance(err_or_key, str) else self.key_getter(err_or_key)
            return self._seen.get(key, 0)

    def err(self) -> BaseException | None:
        with self._lock:
            entries = tuple(self._errors)
            counts = tuple(self._seen.get(self.key_getter(entry), 1) for entry in entries)
        if not entries:
            return None
        if len(entries) == 1:
            return entries[0]
        return MultiError(errors=entries, counts=counts)

    def clear(self) -> None:
        with self._lock:
            self._errors.clear()
            self._seen.clear()

    def remove(self, index: int) -> bool:
        with self._lock:
            if index < 0 or index >= len(self._errors):
                return False
            removed = self._errors.pop(index)
            self._seen.pop(self.key_getter(removed), None)
            return True

    def copy(self) -> ErrorSet:
        with self._lock:
            clone = ErrorSet(
                error_class=self.error_class,
                category=self.category,
                severity=self.severity,
                retryable=self.retryable,
                fields=self.fields,
                key_getter=self.key_getter,
            )
            clone._errors = list(self._errors)
            clone._seen = dict(self._seen)
        return clone

    def _insert(self, err: BaseException) -> None:
        key = self.key_getter(err)
        if key in self._seen:
            self._seen[key] += 1
            return
        self._seen[key] = 1
        self._errors.append(err)
