"""Stack trace rendering configuration and named presets."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Final

DEFAULT_FUNCTION_REDACTED: Final[str] = "[some_function]"
DEFAULT_FILE_NAME_REDACTED: Final[str] = "[some_file]"
DISABLED_PLACEHOLDER: Final[str] = "[disabled]"
HIDDEN_FRAME_PLACEHOLDER: Final[str] = "[hidden]"
MAX_STACK_DEPTH: Final[int] = 50


@dataclass(frozen=True, slots=True)
class StackTraceConfig:
    """Controls which stack details may appear in rendered output.

    ``path_elements`` keeps the last N+1 path components when full paths are
    hidden: ``-1`` keeps the full path, ``0`` keeps only the file name.
    ``max_frames`` of ``0`` means no cap. ``sampling_rate`` is the fraction
    of errors that capture a stack at all, clamped to ``0.0``..``1.0``.
    """

    enabled: bool = True
    show_file_names: bool = True
    show_full_paths: bool = True
    path_elements: int = -1
    show_function_names: bool = True
    show_package_names: bool = True
    show_line_numbers: bool = True
    show_all_code_frames: bool = True
    function_redacted: str = DEFAULT_FUNCTION_REDACTED
    file_name_redacted: str = DEFAULT_FILE_NAME_REDACTED
    max_frames: int = 0
    sampling_rate: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "sampling_rate", min(1.0, max(0.0, float(self.sampling_rate))))

    def with_max_frames(self, max_frames: int) -> StackTraceConfig:
        """Return a copy with a different frame cap."""
        return replace(self, max_frames=max(0, max_frames))

    def with_sampling_rate(self, rate: float) -> StackTraceConfig:
        """Return a copy capturing stacks for a fraction of errors."""
        return replace(self, sampling_rate=rate)


DEVELOPMENT: Final[StackTraceConfig] = StackTraceConfig()

PRODUCTION: Final[StackTraceConfig] = StackTraceConfig(
    show_full_paths=False,
    path_elements=1,
    show_package_names=False,
    show_all_code_frames=False,
    max_frames=10,
)

STRICT: Final[StackTraceConfig] = StackTraceConfig(
    show_file_names=False,
    show_full_paths=False,
    path_elements=0,
    show_function_names=False,
    show_package_names=False,
    show_line_numbers=False,
    max_frames=3,
)

DISABLED: Final[StackTraceConfig] = StackTraceConfig(
    enabled=False,
    show_file_names=False,
    show_full_paths=False,
    path_elements=0,
    show_function_names=False,
    show_package_names=False,
    show_line_numbers=False,
    show_all_code_frames=False,
)

PRESETS: Final[dict[str, StackTraceConfig]] = {
    "development": DEVELOPMENT,
    "production": PRODUCTION,
    "strict": STRICT,
    "disabled": DISABLED,
}


def preset(name: str) -> StackTraceConfig:
    """Resolve a preset by case-insensitive name."""
    key = name.strip().lower()
    if key not in PRESETS:
        raise ValueError(
            f"Unknown stack trace preset {name!r}; expected one of {sorted(PRESETS)}"
        )
    return PRESETS[key]
