"""Deduplication key getters for sets and the gatherer."""

from __future__ import annotations

from typing import Callable, Final

from packages.faultline.errors.node import ErrorNode

KeyGetter = Callable[[BaseException], str]


def message_key(err: BaseException) -> str:
    """Key by the effective message, falling back to the rendered text."""
    if isinstance(err, ErrorNode) and err.effective_message:
        return err.effective_message
    return str(err)


def id_key(err: BaseException) -> str:
    """Key by error id, falling back to the rendered text."""
    if isinstance(err, ErrorNode) and err.id:
        return err.id
    return str(err)


def error_key(err: BaseException) -> str:
    return str(err)


KEY_GETTERS: Final[dict[str, KeyGetter]] = {
    "message": message_key,
    "id": id_key,
    "error": error_key,
}


def resolve_key_getter(key_getter: KeyGetter | str | None) -> KeyGetter:
    """Resolve a callable or a named key getter; ``None`` means ``message``."""
    if key_getter is None:
        return message_key
    if callable(key_getter):
        return key_getter
    name = key_getter.strip().lower()
    if name not in KEY_GETTERS:
        raise ValueError(
            f"Unknown key getter {key_getter!r}; expected one of {sorted(KEY_GETTERS)}"
        )
    return KEY_GETTERS[name]


def rekey(
    entries: list[BaseException],
    seen: dict[str, int],
    old: KeyGetter,
    new: KeyGetter,
) -> tuple[list[BaseException], dict[str, int]]:
    """Recompute dedup state for ``entries`` under a new key getter.

    Entries that collide under ``new`` collapse into the first one and their
    counts are summed.
    """
    kept: list[BaseException] = []
    counts: dict[str, int] = {}
    for entry in entries:
        times = seen.get(old(entry), 1)
        key = new(entry)
        if key in counts:
            counts[key] += times
            continue
        counts[key] = times
        kept.append(entry)
    return kept, counts
