"""Call-stack capture.

Frames are read straight from the interpreter when an error is constructed
and frozen into a ``StackSnapshot``. Nothing is formatted here; rendering is
deferred to ``packages.faultline.stack.render`` so one snapshot can be shown
under different redaction policies.
"""

from __future__ import annotations

import os
import sys
import sysconfig
from dataclasses import dataclass
from types import FrameType
from typing import Final, Iterator

from packages.faultline.stack.config import MAX_STACK_DEPTH, StackTraceConfig

_LIBRARY_ROOT: Final[str] = os.path.dirname(os.path.dirname(os.path.realpath(__file__))) + os.sep
_STDLIB_ROOTS: Final[tuple[str, ...]] = tuple(
    {
        os.path.realpath(path) + os.sep
        for key in ("stdlib", "platstdlib")
        if (path := sysconfig.get_paths().get(key))
    }
)
_SITE_MARKERS: Final[tuple[str, ...]] = ("site-packages", "dist-packages")


@dataclass(frozen=True, slots=True)
class StackFrame:
    """One captured call frame."""

    function: str
    module: str
    file: str
    line: int

    @property
    def file_name(self) -> str:
        """Return the base file name."""
        return os.path.basename(self.file)

    @property
    def short_function(self) -> str:
        """Return the unqualified function name."""
        return self.function.rsplit(".", 1)[-1]

    @property
    def qualified_function(self) -> str:
        """Return ``module.function`` when the module is known."""
        if not self.module:
            return self.function
        return f"{self.module}.{self.function}"

    @property
    def is_test(self) -> bool:
        name = self.file_name
        return (
            name.startswith("test_")
            or name.endswith("_test.py")
            or name == "conftest.py"
            or self.short_function.startswith("test_")
        )

    @property
    def is_stdlib(self) -> bool:
        if self.file.startswith("<"):
            return True
        if any(marker in self.file for marker in _SITE_MARKERS):
            return False
        return any(self.file.startswith(root) for root in _STDLIB_ROOTS)

    @property
    def is_internal(self) -> bool:
        """Return ``True`` for frames inside the library itself."""
        if self.is_test:
            return False
        return self.file.startswith(_LIBRARY_ROOT)

    @property
    def is_user(self) -> bool:
        return not self.is_stdlib and not self.is_internal

    @property
    def frame_type(self) -> str:
        if self.is_stdlib:
            return "stdlib"
        if self.is_test:
            return "test"
        if self.is_internal:
            return "internal"
        return "user"


@dataclass(frozen=True, slots=True)
class StackSnapshot:
    """Immutable, ordered (innermost first) sequence of captured frames."""

    frames: tuple[StackFrame, ...] = ()

    def __len__(self) -> int:
        return len(self.frames)

    def __iter__(self) -> Iterator[StackFrame]:
        return iter(self.frames)

    def __bool__(self) -> bool:
        return bool(self.frames)

    def user_frames(self) -> tuple[StackFrame, ...]:
        """Return frames that belong to application code."""
        return tuple(frame for frame in self.frames if frame.is_user)

    def top_user_frame(self) -> StackFrame | None:
        """Return the innermost application frame, where the error originated."""
        for frame in self.frames:
            if frame.is_user:
                return frame
        return None

    def contains_function(self, name: str) -> bool:
        return any(
            frame.short_function == name or frame.function == name
            for frame in self.frames
        )

    def filter_by_module(self, module: str) -> tuple[StackFrame, ...]:
        return tuple(frame for frame in self.frames if frame.module == module)

    def __str__(self) -> str:
        from packages.faultline.stack.render import format_stack

        return format_stack(self)

    def render(self, config: StackTraceConfig | None = None) -> str:
        """Return the single-line summary under ``config`` or the process default."""
        from packages.faultline.stack.render import format_stack

        return format_stack(self, config)

    def render_full(self, config: StackTraceConfig | None = None) -> str:
        """Return the multi-line dump under ``config`` or the process default."""
        from packages.faultline.stack.render import format_stack_full

        return format_stack_full(self, config)


def capture_stack(*, skip: int = 0, max_frames: int = MAX_STACK_DEPTH) -> StackSnapshot:
    """Capture the caller's stack, innermost first.

    Library frames are always dropped so the snapshot starts at the code that
    constructed the error. ``skip`` drops that many further frames.
    """
    limit = MAX_STACK_DEPTH if max_frames <= 0 else min(max_frames, MAX_STACK_DEPTH)
    frames: list[StackFrame] = []
    remaining_skip = max(0, skip)
    for frame in _walk(sys._getframe(1)):
        captured = _to_frame(frame)
        if captured.is_internal:
            continue
        if remaining_skip:
            remaining_skip -= 1
            continue
        frames.append(captured)
        if len(frames) >= limit:
            break
    return StackSnapshot(frames=tuple(frames))


def _walk(frame: FrameType | None) -> Iterator[FrameType]:
    while frame is not None:
        yield frame
        frame = frame.f_back


def _to_frame(frame: FrameType) -> StackFrame:
    code = frame.f_code
    module = frame.f_globals.get("__name__", "")
    return StackFrame(
        function=getattr(code, "co_qualname", code.co_name),
        module=module if isinstance(module, str) else "",
        file=_absolute(code.co_filename),
        line=frame.f_lineno or 0,
    )


def _absolute(filename: str) -> str:
    if filename.startswith("<"):
        return filename
    return os.path.realpath(filename)
