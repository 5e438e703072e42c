"""Process-wide error gatherer.

The gatherer deduplicates like ``ErrorSet`` and is disabled by default. While
disabled, ``add`` returns before any key is computed, so call sites can
gather unconditionally without paying rendering costs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from threading import Event, RLock

from packages.faultline.collections.keys import KeyGetter, message_key, rekey, resolve_key_getter

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class ErrorGatherer:
    key_getter: KeyGetter = message_key
    _enabled: Event = field(default_factory=Event, init=False, repr=False)
    _errors: list[BaseException] = field(default_factory=list, init=False, repr=False)
    _seen: dict[str, int] = field(default_factory=dict, init=False, repr=False)
    _lock: RLock = field(default_factory=RLock, init=False, repr=False)

    @property
    def enabled(self) -> bool:
        return self._enabled.is_set()

    def enable(self) -> None:
        self._enabled.set()

    def disable(self) -> None:
        self._enabled.clear()

    def set_key_getter(self, key_getter: KeyGetter | str | None) -> None:
        """Swap the key getter and re-key gathered entries."""
        resolved = resolve_key_getter(key_getter)
        with self._lock:
            self._errors, self._seen = rekey(self._errors, self._seen, self.key_getter, resolved)
            self.key_getter = resolved

    def add(self, err: BaseException | None) -> bool:
        """Gather ``err``; return ``True`` when it was stored as a new entry."""
        if not self._enabled.is_set() or err is None:
            return False
        with self._lock:
            key = self.key_getter(err)
            if key in self._seen:
                self._seen[key] += 1
                return False
            self._seen[key] = 1
            self._errors.append(err)
            gathered = len(self._errors)
        logger.debug("error gathered", extra={"gathered_count": gathered})
        return True

    def get_all(self) -> list[BaseException]:
        with self._lock:
            return list(self._errors)

    def count(self, err_or_key: BaseException | str) -> int:
        with self._lock:
            key = err_or_key if isinstance(err_or_key, str) else self.key_getter(err_or_key)
            return self._seen.get(key, 0)

    def clear(self) -> None:
        with self._lock:
            self._errors.clear()
            self._seen.clear()

    def reset(self) -> None:
        """Clear entries, disable, and restore the default key getter."""
        self.disable()
        with self._lock:
            self._errors.clear()
            self._seen.clear()
            self.key_getter = message_key


_GATHERER = ErrorGatherer()


def get_gatherer() -> ErrorGatherer:
    return _GATHERER


def enable_gatherer() -> None:
    _GATHERER.enable()


def disable_gatherer() -> None:
    _GATHERER.disable()


def gatherer_enabled() -> bool:
    return _GATHERER.enabled


def add_to_gatherer(err: BaseException | None) -> bool:
    """Add ``err`` to the process-wide gatherer when gathering is enabled."""
    return _GATHERER.add(err)


def get_gathered_errors() -> list[BaseException]:
    """Return a snapshot of gathered errors in insertion order."""
    return _GATHERER.get_all()


def clear_gathered_errors() -> None:
    _GATHERER.clear()


def set_gatherer_key_getter(key_getter: KeyGetter | str | None) -> None:
    """Replace the dedup key getter; accepts a callable or ``message``/``id``/``error``."""
    _GATHERER.set_key_getter(key_getter)


def reset_gatherer() -> None:
    """Restore the process-wide gatherer to its initial state."""
    _GATHERER.reset()
