"""Canonical error taxonomy and security limits for faultline errors.

Classes drive routing (HTTP status mapping), categories are informational
domain tags, and severities rank urgency. Every enum carries an
``UNSPECIFIED`` member that doubles as the library-wide default.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Final

from packages.faultline.stack.config import MAX_STACK_DEPTH

MAX_MESSAGE_LENGTH: Final[int] = 1000
MAX_KEY_LENGTH: Final[int] = 128
MAX_VALUE_LENGTH: Final[int] = 1024
MAX_FIELDS_COUNT: Final[int] = 100

REDACTED_PLACEHOLDER: Final[str] = "[REDACTED]"
MISSING_FIELD_PLACEHOLDER: Final[str] = "<missing>"


class ErrorClass(str, Enum):
    """Routing class of an error; maps onto HTTP-style status codes."""

    UNSPECIFIED = "unspecified"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    PERMISSION_DENIED = "permission_denied"
    UNAUTHENTICATED = "unauthenticated"
    TIMEOUT = "timeout"
    CONFLICT = "conflict"
    RATE_LIMITED = "rate_limited"
    TEMPORARY = "temporary"
    UNAVAILABLE = "unavailable"
    INTERNAL = "internal"
    CANCELLED = "cancelled"
    NOT_IMPLEMENTED = "not_implemented"
    SECURITY = "security"
    CRITICAL = "critical"
    EXTERNAL = "external"
    DATA_LOSS = "data_loss"
    RESOURCE_EXHAUSTED = "resource_exhausted"


class ErrorCategory(str, Enum):
    """Free-form domain tag; informational only."""

    UNSPECIFIED = "unspecified"
    DATABASE = "database"
    NETWORK = "network"
    OS = "os"
    AUTH = "auth"
    SECURITY = "security"
    PAYMENT = "payment"
    API = "api"
    BUSINESS_LOGIC = "business_logic"
    CACHE = "cache"
    CONFIG = "config"
    EXTERNAL = "external"
    USER_INPUT = "user_input"
    EVENTS = "events"
    MONITORING = "monitoring"
    NOTIFICATIONS = "notifications"
    STORAGE = "storage"
    PROCESSING = "processing"
    ANALYTICS = "analytics"
    AI = "ai"


class ErrorSeverity(str, Enum):
    """Severity levels, lowest to highest."""

    UNSPECIFIED = "unspecified"
    INFO = "info"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def label(self) -> str:
        """Return a short bracketed label, empty when unspecified."""
        return _SEVERITY_LABELS[self]


_SEVERITY_LABELS: Final[dict[ErrorSeverity, str]] = {
    ErrorSeverity.UNSPECIFIED: "",
    ErrorSeverity.INFO: "[INFO]",
    ErrorSeverity.LOW: "[LOW]",
    ErrorSeverity.MEDIUM: "[MED]",
    ErrorSeverity.HIGH: "[HIGH]",
    ErrorSeverity.CRITICAL: "[CRIT]",
}


@dataclass(frozen=True, slots=True)
class Redacted:
    """Field value wrapper whose content never appears in any rendering."""

    value: Any

    def __str__(self) -> str:
        return REDACTED_PLACEHOLDER

    def __repr__(self) -> str:
        return f"Redacted({REDACTED_PLACEHOLDER})"


def redact(value: Any) -> Redacted:
    """Mark a field value as sensitive."""
    return Redacted(value)


_EXCEPTION_STATE: Final[frozenset[str]] = frozenset(
    {"__traceback__", "__context__", "__cause__", "__suppress_context__", "__notes__"}
)


def thaw_exception_state(cls: type[BaseException]) -> type[BaseException]:
    """Let a frozen dataclass exception accept interpreter-managed state.

    ``contextlib`` and ``add_note`` assign ``__traceback__``/``__notes__``
    from Python code; dataclass fields stay frozen.
    """
    frozen_setattr = cls.__setattr__

    def __setattr__(self: BaseException, name: str, value: Any) -> None:
        if name in _EXCEPTION_STATE:
            object.__setattr__(self, name, value)
            return
        frozen_setattr(self, name, value)

    cls.__setattr__ = __setattr__  # type: ignore[method-assign, assignment]
    return cls


def truncate(value: str, limit: int) -> str:
    """Cut ``value`` down to at most ``limit`` characters."""
    if len(value) <= limit:
        return value
    return value[:limit]


def safe_value(value: Any) -> Any:
    """Return a render-safe field value: redacted markers and long strings collapse."""
    if isinstance(value, Redacted):
        return REDACTED_PLACEHOLDER
    if isinstance(value, str):
        return truncate(value, MAX_VALUE_LENGTH)
    return value


def value_to_text(value: Any) -> str:
    """Stringify a field value for text output, honoring redaction and limits."""
    if value is None:
        return ""
    if isinstance(value, Redacted):
        return REDACTED_PLACEHOLDER
    if isinstance(value, bytes):
        text = value.decode("utf-8", errors="replace")
    elif isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        text = ",".join(value)
    else:
        text = str(value)
    return truncate(text, MAX_VALUE_LENGTH)
