"""Whole-chain rendering in the supported output modes."""

from __future__ import annotations

from enum import Enum
from typing import Any

from packages.faultline.errors.chain import ensure_error
from packages.faultline.errors.node import ErrorNode
from packages.faultline.errors.types import value_to_text
from packages.faultline.formatting.fields import log_fields
from packages.faultline.formatting.schema import error_to_json
from packages.faultline.stack.config import StackTraceConfig
from packages.faultline.stack.render import format_stack_full, resolve_config


class RenderMode(str, Enum):
    TEXT = "text"
    FULL = "full"
    JSON = "json"
    FIELDS = "fields"


def render(
    err: BaseException | None,
    mode: RenderMode = RenderMode.TEXT,
    *,
    stack_config: StackTraceConfig | None = None,
) -> str | list[Any]:
    """Render ``err`` in ``mode``.

    ``FIELDS`` returns the flat key/value list; every other mode returns
    text. ``None`` renders as an empty string (or an empty list).
    """
    mode = RenderMode(mode)
    if mode is RenderMode.FIELDS:
        return log_fields(err, stack_config=stack_config)
    if err is None:
        return ""
    if mode is RenderMode.JSON:
        return error_to_json(err, stack_config=stack_config)
    if mode is RenderMode.FULL:
        return render_full(err, stack_config=stack_config)
    return str(err)


def render_full(err: BaseException, *, stack_config: StackTraceConfig | None = None) -> str:
    """Return the detailed multi-line dump of a chain.

    The first line is the joined message. A metadata line and the merged
    fields follow, then the stack of the innermost captured snapshot.
    """
    node = ensure_error(err)
    if node is None:
        return ""
    lines = [str(node), _metadata_line(node)]
    merged = node.all_fields
    if merged:
        lines.append("Fields:")
        lines.extend(f"\t{key}: {value_to_text(value)}" for key, value in merged)
    snapshot = node.origin_stack
    if snapshot is not None:
        lines.append("Stack trace:")
        lines.append(format_stack_full(snapshot, resolve_config(stack_config)))
    return "\n".join(lines)


def _metadata_line(node: ErrorNode) -> str:
    parts = [
        f"class={node.error_class.value}",
        f"category={node.category.value}",
        f"severity={node.severity.value}",
    ]
    if node.id:
        parts.append(f"id={node.id}")
    parts.append(f"retryable={str(node.retryable).lower()}")
    return "[" + " ".join(parts) + "]"
