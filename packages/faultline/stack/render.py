"""Policy-driven rendering of captured stacks.

Every function here is a pure function of ``(snapshot, config)``. When no
config is passed the process-wide default is read, so a snapshot captured
under a permissive policy is still redacted when the default is tightened
later. There is no rendering path that skips the config.
"""

from __future__ import annotations

import os
from typing import Any

from packages.faultline import defaults
from packages.faultline.stack.capture import StackFrame, StackSnapshot
from packages.faultline.stack.config import (
    DISABLED_PLACEHOLDER,
    HIDDEN_FRAME_PLACEHOLDER,
    StackTraceConfig,
)


def resolve_config(config: StackTraceConfig | None) -> StackTraceConfig:
    """Return ``config`` or the process-wide default when absent."""
    if config is not None:
        return config
    return defaults.get_default_stack_trace_config()


def visible_frames(
    snapshot: StackSnapshot | None, config: StackTraceConfig | None = None
) -> tuple[StackFrame, ...]:
    """Select the frames a config allows to be shown."""
    cfg = resolve_config(config)
    if snapshot is None or not cfg.enabled:
        return ()
    frames = snapshot.frames
    if not cfg.show_all_code_frames:
        frames = tuple(frame for frame in frames if frame.is_user)
    if cfg.max_frames > 0:
        frames = frames[: cfg.max_frames]
    return frames


def function_label(frame: StackFrame, config: StackTraceConfig) -> str:
    """Return the function identifier allowed by ``config``."""
    if not config.show_function_names:
        return config.function_redacted
    if config.show_package_names:
        return frame.qualified_function
    return frame.short_function


def file_label(frame: StackFrame, config: StackTraceConfig) -> str:
    """Return the file location allowed by ``config``."""
    if not config.show_file_names:
        location = config.file_name_redacted
    elif config.show_full_paths:
        location = frame.file
    else:
        location = extract_path_elements(frame.file, config.path_elements)
    if config.show_line_numbers:
        return f"{location}:{frame.line}"
    return location


def render_frame(frame: StackFrame, config: StackTraceConfig | None = None) -> str:
    """Render one frame as ``function (file:line)``."""
    cfg = resolve_config(config)
    if not cfg.enabled:
        return DISABLED_PLACEHOLDER
    return f"{function_label(frame, cfg)} ({file_label(frame, cfg)})"


def format_stack(
    snapshot: StackSnapshot | None, config: StackTraceConfig | None = None
) -> str:
    """Return a single-line summary, innermost frame first."""
    cfg = resolve_config(config)
    if not cfg.enabled:
        return DISABLED_PLACEHOLDER
    frames = visible_frames(snapshot, cfg)
    if not frames:
        return HIDDEN_FRAME_PLACEHOLDER if snapshot else ""
    return " -> ".join(render_frame(frame, cfg) for frame in frames)


def format_stack_full(
    snapshot: StackSnapshot | None, config: StackTraceConfig | None = None
) -> str:
    """Return a multi-line dump with one indented frame per entry."""
    cfg = resolve_config(config)
    if not cfg.enabled:
        return DISABLED_PLACEHOLDER
    frames = visible_frames(snapshot, cfg)
    if not frames:
        return "\t" + HIDDEN_FRAME_PLACEHOLDER if snapshot else ""
    lines: list[str] = []
    for frame in frames:
        lines.append("\t" + function_label(frame, cfg))
        lines.append("\t\t" + file_label(frame, cfg))
    return "\n".join(lines)


def stack_to_json(
    snapshot: StackSnapshot | None, config: StackTraceConfig | None = None
) -> list[dict[str, Any]]:
    """Return JSON-friendly frame dicts with the same redaction as text output."""
    cfg = resolve_config(config)
    output: list[dict[str, Any]] = []
    for frame in visible_frames(snapshot, cfg):
        entry: dict[str, Any] = {
            "function": function_label(frame, cfg),
            "file": _file_only(frame, cfg),
        }
        if cfg.show_file_names or cfg.show_function_names:
            entry["type"] = frame.frame_type
        if cfg.show_line_numbers:
            entry["line"] = frame.line
        output.append(entry)
    return output


def call_chain(
    snapshot: StackSnapshot | None,
    config: StackTraceConfig | None = None,
    *,
    limit: int = 5,
) -> list[str]:
    """Return up to ``limit`` user function labels leading to the error."""
    cfg = resolve_config(config)
    frames = [frame for frame in visible_frames(snapshot, cfg) if frame.is_user]
    return [function_label(frame, cfg) for frame in frames[:limit]]


def origin_fields(
    snapshot: StackSnapshot | None, config: StackTraceConfig | None = None
) -> dict[str, Any]:
    """Return redacted ``function``/``file``/``line`` of the originating frame."""
    cfg = resolve_config(config)
    frames = visible_frames(snapshot, cfg)
    if not frames:
        return {}
    origin = next((frame for frame in frames if frame.is_user), frames[0])
    output: dict[str, Any] = {
        "function": function_label(origin, cfg),
        "file": _file_only(origin, cfg),
    }
    if cfg.show_line_numbers:
        output["line"] = origin.line
    return output


def extract_path_elements(path: str, path_elements: int) -> str:
    """Keep the last ``path_elements + 1`` components of ``path``."""
    if path_elements < 0:
        return path
    if path_elements == 0:
        return os.path.basename(path)
    parts = [part for part in os.path.normpath(path).split(os.sep) if part]
    keep = min(path_elements + 1, len(parts))
    return os.sep.join(parts[len(parts) - keep :])


def _file_only(frame: StackFrame, config: StackTraceConfig) -> str:
    if not config.show_file_names:
        return config.file_name_redacted
    if config.show_full_paths:
        return frame.file
    return extract_path_elements(frame.file, config.path_elements)
