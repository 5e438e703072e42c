"""Thread-safe error lists, deduplicating sets and the process-wide gatherer."""

from .error_list import ErrorList, ErrorSet
from .gatherer import (
    ErrorGatherer,
    add_to_gatherer,
    clear_gathered_errors,
    disable_gatherer,
    enable_gatherer,
    gatherer_enabled,
    get_gatherer,
    get_gathered_errors,
    reset_gatherer,
    set_gatherer_key_getter,
)
from .keys import KEY_GETTERS, KeyGetter, error_key, id_key, message_key, resolve_key_getter
from .multi import MultiError, join

__all__ = [
    "KEY_GETTERS",
    "ErrorGatherer",
    "ErrorList",
    "ErrorSet",
    "KeyGetter",
    "MultiError",
    "add_to_gatherer",
    "clear_gathered_errors",
    "disable_gatherer",
    "enable_gatherer",
    "error_key",
    "gatherer_enabled",
    "get_gatherer",
    "get_gathered_errors",
    "id_key",
    "join",
    "message_key",
    "reset_gatherer",
    "resolve_key_getter",
    "set_gatherer_key_getter",
]
