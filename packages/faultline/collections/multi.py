"""Combined error value produced by collections."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator

from packages.faultline.errors.types import thaw_exception_state


@thaw_exception_state
@dataclass(frozen=True, eq=False)
class MultiError(Exception):
    """Immutable, ordered group of errors rendered as one message.

    ``counts`` is set by deduplicating collections and holds the number of
    times each entry was seen.
    """

    errors: tuple[BaseException, ...] = ()
    counts: tuple[int, ...] | None = None

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self.errors, self.counts))

    def __iter__(self) -> Iterator[BaseException]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    def __str__(self) -> str:
        if not self.errors:
            return ""
        if len(self.errors) == 1 and self.counts is None:
            return str(self.errors[0])
        parts: list[str] = []
        for index, err in enumerate(self.errors):
            entry = f"({index + 1}) {err}"
            if self.counts is not None:
                entry += f" [{self.counts[index]}]"
            parts.append(entry)
        return f"multiple errors ({len(self.errors)}): " + "; ".join(parts)

    def __repr__(self) -> str:
        return f"MultiError({len(self.errors)} errors)"


def join(*errors: BaseException | None) -> BaseException | None:
    """Fold errors into one value.

    ``None`` entries are dropped. Returns ``None`` when nothing is left, the
    sole error when one is left, and a ``MultiError`` otherwise.
    """
    present = tuple(err for err in errors if err is not None)
    if not present:
        return None
    if len(present) == 1:
        return present[0]
    return MultiError(errors=present)
