"""Configuration management for tasktable."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated
import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class TaskTableSettings(BaseSettings):
    """Runtime configuration sourced from environment variables and optional .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    backend: str = Field(default="shell", validation_alias="TASKTABLE_BACKEND")
    task_path: str | None = Field(default=None, validation_alias="TASK_PATH")
    timew_path: str | None = Field(default=None, validation_alias="TIMEW_PATH")
    task_hooks_dir: Path = Field(
        default=Path("~/.task/hooks"), validation_alias="TASKTABLE_TASK_HOOKS_DIR"
    )
    data_path: Path = Field(
        default=Path("~/.local/share/tasktable/taskdb"), validation_alias="TASKTABLE_DATA_PATH"
    )
    report_paths: Annotated[tuple[Path, ...], NoDecode] = Field(
        default=(Path("reports"),), validation_alias="TASKTABLE_REPORT_PATHS"
    )
    default_report: str = Field(default="next", validation_alias="TASKTABLE_DEFAULT_REPORT")
    log_level: str = Field(default="INFO", validation_alias="TASKTABLE_LOG_LEVEL")
    description_width: int = Field(default=100, validation_alias="TASKTABLE_DESCRIPTION_WIDTH")
    vague_precise: bool = Field(default=False, validation_alias="TASKTABLE_VAGUE_PRECISE")
    duration_human_readable: bool = Field(
        default=True, validation_alias="TASKTABLE_DURATION_HUMAN_READABLE"
    )
    tracking_enabled: bool = Field(default=True, validation_alias="TASKTABLE_TRACKING_ENABLED")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(
                "TASKTABLE_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG"
            )
        return normalized

    @field_validator("backend")
    @classmethod
    def _normalize_backend(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in {"shell", "embedded"}:
            raise ValueError("TASKTABLE_BACKEND must be either 'shell' or 'embedded'")
        return normalized

    @field_validator("report_paths", mode="before")
    @classmethod
    def _parse_report_paths(cls, value):
        if value is None or value == "":
            return (Path("reports"),)
        if isinstance(value, (list, tuple)):
            return tuple(Path(str(item)) for item in value)
        if isinstance(value, str):
            parts = [part.strip() for part in value.split(os.pathsep) if part.strip()]
            return tuple(Path(part) for part in parts) or (Path("reports"),)
        raise TypeError("TASKTABLE_REPORT_PATHS must be a list of paths or a path-separated string")

    @field_validator("description_width")
    @classmethod
    def _validate_description_width(cls, value: int) -> int:
        if value < 0:
            raise ValueError("TASKTABLE_DESCRIPTION_WIDTH must be >= 0")
        return value


@lru_cache(maxsize=1)
def get_settings() -> TaskTableSettings:
    """Return cached settings instance."""

    settings = TaskTableSettings()
    settings.data_path = settings.data_path.expanduser().resolve()
    settings.task_hooks_dir = settings.task_hooks_dir.expanduser().resolve()
    settings.report_paths = tuple(path.expanduser().resolve() for path in settings.report_paths)
    return settings


__all__ = ["TaskTableSettings", "get_settings"]
