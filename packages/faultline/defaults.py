"""Process-wide defaults for error construction and rendering.

Each slot is written rarely (typically once at startup) and read on every
relevant call. All access goes through one lock so a setter takes effect for
every call made after it returns. ``reset_defaults`` restores the initial
state and exists mainly for test isolation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from threading import RLock
from typing import TYPE_CHECKING, Callable

from packages.faultline.stack.config import DISABLED, PRODUCTION, StackTraceConfig, preset

if TYPE_CHECKING:
    from packages.faultline.errors.node import ErrorNode

SegmentFormatter = Callable[["ErrorNode"], str]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Defaults:
    """Mutable holder for the global slots."""

    stack_trace_config: StackTraceConfig = PRODUCTION
    formatter: SegmentFormatter | None = None
    auto_capture: bool = False
    _lock: RLock = field(default_factory=RLock)


_state = _Defaults()


def get_default_stack_trace_config() -> StackTraceConfig:
    """Return the stack config used when no per-call config is supplied."""
    with _state._lock:
        return _state.stack_trace_config


def set_default_stack_trace_config(config: StackTraceConfig | str | None) -> None:
    """Replace the default stack config.

    Accepts a config value or a preset name. ``None`` disables stack output.
    """
    if config is None:
        resolved = DISABLED
    elif isinstance(config, str):
        resolved = preset(config)
    else:
        resolved = config
    with _state._lock:
        _state.stack_trace_config = resolved
    logger.debug("default stack trace config updated", extra={"enabled": resolved.enabled})


def set_default_stack_sampling_rate(rate: float) -> None:
    """Capture stacks for only ``rate`` of the errors built with the default config."""
    with _state._lock:
        _state.stack_trace_config = _state.stack_trace_config.with_sampling_rate(rate)
        applied = _state.stack_trace_config.sampling_rate
    logger.debug("default stack sampling rate updated", extra={"sampling_rate": applied})


def get_default_formatter() -> SegmentFormatter:
    """Return the segment formatter applied to nodes without an override."""
    with _state._lock:
        current = _state.formatter
    if current is not None:
        return current
    from packages.faultline.formatting.text import format_message

    return format_message


def set_default_formatter(formatter: SegmentFormatter | None) -> None:
    """Swap the default segment formatter; ``None`` restores the built-in."""
    with _state._lock:
        _state.formatter = formatter


def auto_capture_enabled() -> bool:
    """Return whether every new node captures a stack without a directive."""
    with _state._lock:
        return _state.auto_capture


def set_auto_capture(enabled: bool) -> None:
    with _state._lock:
        _state.auto_capture = bool(enabled)


def reset_defaults() -> None:
    """Restore every slot to its initial value."""
    with _state._lock:
        _state.stack_trace_config = PRODUCTION
        _state.formatter = None
        _state.auto_capture = False
