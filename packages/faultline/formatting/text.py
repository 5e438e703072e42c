"""Segment formatters: render one node of a chain as text.

A segment formatter receives a single node and returns its part of the
joined ``str()`` output. Fields are rendered with redaction applied.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from packages.faultline.errors.types import value_to_text

if TYPE_CHECKING:
    from packages.faultline.errors.node import ErrorNode


def format_message(err: ErrorNode) -> str:
    """Render only the node's own message."""
    return err.message


def format_fields(err: ErrorNode) -> str:
    return " ".join(f"{key}={value_to_text(value)}" for key, value in err.meta.fields)


def format_with_fields(err: ErrorNode) -> str:
    """Render the message followed by the node's own ``key=value`` fields."""
    return " ".join(part for part in (err.message, format_fields(err)) if part)


def format_with_context(err: ErrorNode) -> str:
    """Render message and fields, then the node's own taxonomy in brackets."""
    taxonomy = " ".join(
        value.value
        for value in (err.meta.error_class, err.meta.category, err.meta.severity)
        if value.value != "unspecified"
    )
    base = format_with_fields(err)
    if not taxonomy:
        return base
    return f"{base} [{taxonomy}]" if base else f"[{taxonomy}]"
