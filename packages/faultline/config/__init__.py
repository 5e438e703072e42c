"""Public API for faultline configuration utilities."""

from .apply import apply_settings
from .loader import check_config_file, check_environment, load_settings, settings_class_for
from .models import (
    DEFAULT_CONFIG_PATH,
    FaultlineSettings,
    GathererSettings,
    LoggingSettings,
    StackSettings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "FaultlineSettings",
    "GathererSettings",
    "LoggingSettings",
    "StackSettings",
    "apply_settings",
    "check_config_file",
    "check_environment",
    "load_settings",
    "settings_class_for",
]
