"""Typed configuration models for faultline process-wide settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "faultline" / "faultline.yaml"

PresetName = Literal["development", "production", "strict", "disabled"]
KeyGetterName = Literal["message", "id", "error"]


class StackSettings(BaseModel):
    """Stack capture and redaction defaults."""

    preset: PresetName = "production"
    auto_capture: bool = False
    max_frames: int | None = Field(default=None, ge=0)
    sampling_rate: float = Field(default=1.0, ge=0.0, le=1.0)


class GathererSettings(BaseModel):
    """Process-wide gatherer toggle and dedup key."""

    enabled: bool = False
    key: KeyGetterName = "message"


class LoggingSettings(BaseModel):
    """Structured logging configuration for applications using faultline."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = True
    service: str = "faultline"
    environment: str = "dev"


class FaultlineSettings(BaseSettings):
    """Root settings resolved from init/env/yaml/defaults sources."""

    model_config = SettingsConfigDict(
        env_prefix="FAULTLINE_",
        env_nested_delimiter="__",
        extra="ignore",
        nested_model_default_partial_update=True,
        yaml_file=DEFAULT_CONFIG_PATH,
        yaml_file_encoding="utf-8",
    )

    stack: StackSettings = Field(default_factory=StackSettings)
    gatherer: GathererSettings = Field(default_factory=GathererSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Apply precedence: init > env > yaml > model defaults."""
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls),
        )
