"""Chain inspection helpers that work across native and foreign exceptions.

Native nodes expose their cause through ``linked_cause`` (``cause``, else a
cause attached by ``raise ... from``); foreign exceptions are followed
through the standard ``__cause__`` link. Walks are iterative and guard
against cycles, so arbitrarily deep chains are safe.
"""

from __future__ import annotations

from typing import Iterator, TypeVar

from packages.faultline.errors.node import ErrorNode
from packages.faultline.errors.types import ErrorClass

E = TypeVar("E", bound=BaseException)


def unwrap(err: BaseException | None) -> BaseException | None:
    """Return the direct cause of ``err``, or ``None``."""
    if err is None:
        return None
    if isinstance(err, ErrorNode):
        return err.linked_cause
    return err.__cause__


def iter_chain(err: BaseException | None) -> Iterator[BaseException]:
    """Yield ``err`` and every cause below it, native or foreign."""
    seen: set[int] = set()
    current = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = unwrap(current)


def iter_nodes(err: BaseException | None) -> Iterator[ErrorNode]:
    """Yield native nodes from the head, stopping at the first foreign link."""
    for link in iter_chain(err):
        if not isinstance(link, ErrorNode):
            return
        yield link


def is_error(err: BaseException | None, target: BaseException | None) -> bool:
    """Return whether ``target`` appears anywhere in the chain of ``err``.

    Links match by identity. Two native nodes also match when they share a
    non-empty id, so copies made by ``with_*`` still match their original.
    """
    if err is None or target is None:
        return err is target
    target_id = target.id if isinstance(target, ErrorNode) else ""
    for link in iter_chain(err):
        if link is target:
            return True
        if target_id and isinstance(link, ErrorNode) and link.id == target_id:
            return True
    return False


def find_error(err: BaseException | None, exc_type: type[E]) -> E | None:
    """Return the first link that is an instance of ``exc_type``."""
    for link in iter_chain(err):
        if isinstance(link, exc_type):
            return link
    return None


def has_class(err: BaseException | None, error_class: ErrorClass) -> bool:
    """Return whether any native node in the chain sets ``error_class``."""
    return any(node.meta.error_class is error_class for node in iter_nodes(err))


def root_cause(err: BaseException | None) -> BaseException | None:
    """Return the deepest link of the chain."""
    last: BaseException | None = None
    for link in iter_chain(err):
        last = link
    return last


def ensure_error(err: BaseException | None) -> ErrorNode | None:
    """Return a native view of ``err``.

    Native nodes are returned unchanged. Foreign exceptions are normalized
    into a light node, so rendering the same exception twice yields the same
    output: no id or timestamp is invented for it.
    """
    if err is None or isinstance(err, ErrorNode):
        return err
    from packages.faultline.errors.normalize import from_exception

    return from_exception(err, light=True)
