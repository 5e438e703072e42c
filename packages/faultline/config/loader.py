"""Settings loading on top of the ``FaultlineSettings`` sources.

Precedence is owned by the model: CLI params (init kwargs), then
``FAULTLINE_`` environment variables, then the YAML file, then model
defaults. This module points the YAML source at a chosen file and checks
the inputs the model would otherwise accept silently: a YAML file that is
not a mapping, and ``FAULTLINE_`` variables that name no setting.

Environment variable format:
- Prefix: ``FAULTLINE_``
- Nested keys: ``__`` separator
- Example: ``FAULTLINE_STACK__PRESET=strict`` -> ``stack.preset = "strict"``
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel
from pydantic_settings import SettingsConfigDict

from .models import DEFAULT_CONFIG_PATH, FaultlineSettings

ENV_PREFIX = FaultlineSettings.model_config.get("env_prefix", "FAULTLINE_")
ENV_DELIMITER = FaultlineSettings.model_config.get("env_nested_delimiter", "__")


def load_settings(
    *,
    cli_params: Mapping[str, Any] | None = None,
    config_path: str | Path | None = None,
    strict_env: bool = True,
) -> FaultlineSettings:
    """Build one validated settings snapshot.

    Raises ``ValueError`` for a non-mapping YAML file or, with
    ``strict_env``, for unknown ``FAULTLINE_`` variables. Raises
    ``pydantic.ValidationError`` for values the models reject.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    check_config_file(path)
    if strict_env:
        check_environment(os.environ)
    return settings_class_for(path)(**dict(cli_params or {}))


@lru_cache(maxsize=8)
def settings_class_for(path: Path) -> type[FaultlineSettings]:
    """Return a ``FaultlineSettings`` subclass whose YAML source reads ``path``."""

    class ScopedFaultlineSettings(FaultlineSettings):
        model_config = SettingsConfigDict(yaml_file=path)

    return ScopedFaultlineSettings


def check_config_file(path: Path) -> None:
    """Reject a YAML file whose top level is not a mapping of known sections."""
    if not path.is_file():
        return
    with path.open("r", encoding="utf-8") as handle:
        parsed = yaml.safe_load(handle)
    if parsed is None:
        return
    if not isinstance(parsed, dict):
        raise ValueError(f"Config file must contain a top-level mapping: {path}")
    unknown = sorted(str(key) for key in parsed if key not in FaultlineSettings.model_fields)
    if unknown:
        raise ValueError(f"Unknown sections in {path}: {', '.join(unknown)}")


def check_environment(environ: Mapping[str, str]) -> None:
    """Reject ``FAULTLINE_`` variables that do not name a setting.

    ``FAULTLINE_STAK__PRESET`` would otherwise be ignored without a trace.
    """
    unknown = sorted(
        name
        for name in environ
        if name.upper().startswith(ENV_PREFIX) and not _names_setting(name[len(ENV_PREFIX) :])
    )
    if unknown:
        raise ValueError(f"Unknown faultline environment variables: {', '.join(unknown)}")


def _names_setting(suffix: str) -> bool:
    path = [segment.lower() for segment in suffix.split(ENV_DELIMITER)]
    model: type[BaseModel] = FaultlineSettings
    for index, segment in enumerate(path):
        field = model.model_fields.get(segment)
        if field is None:
            return False
        annotation = field.annotation
        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            if index == len(path) - 1:
                return True
            model = annotation
            continue
        return index == len(path) - 1
    return False
