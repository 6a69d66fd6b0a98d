"""Undo/redo settings and loading."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from flexbackup.errors import ConfigValidationError, ErrorContext

DEFAULT_MOMENT_MARKER = "/undoable/"
DEFAULT_UNDO_TYPE = "UndoRedo.undo"
DEFAULT_REDO_TYPE = "UndoRedo.redo"
DEFAULT_APPLY_TYPE = "UndoRedo.apply"


class UndoSettings(BaseSettings):
    """Configuration for undoable transitions."""

    model_config = SettingsConfigDict(
        env_prefix="FLEXBACKUP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    history_limit: int | None = None
    moment_marker: str = DEFAULT_MOMENT_MARKER
    undo_type: str = DEFAULT_UNDO_TYPE
    redo_type: str = DEFAULT_REDO_TYPE
    apply_type: str = DEFAULT_APPLY_TYPE

    @field_validator("history_limit", mode="before")
    @classmethod
    def validate_history_limit(cls, v: Any) -> Any:
        if v is None:
            return None
        if isinstance(v, str) and v.strip().lower() in ("", "none", "null"):
            return None
        try:
            limit = int(v)
        except (TypeError, ValueError):
            raise ConfigValidationError(
                message=f"history_limit must be an integer, got {v!r}",
                field="history_limit",
                value=v,
            ) from None
        if limit < 0:
            raise ConfigValidationError(
                message="history_limit cannot be negative",
                field="history_limit",
                value=v,
            )
        return limit

    @field_validator("moment_marker")
    @classmethod
    def validate_moment_marker(cls, v: str) -> str:
        if not v:
            raise ConfigValidationError(
                message="moment_marker cannot be empty",
                field="moment_marker",
                value=v,
            )
        return v

    @model_validator(mode="after")
    def validate_control_types(self) -> UndoSettings:
        control = {
            "undo_type": self.undo_type,
            "redo_type": self.redo_type,
            "apply_type": self.apply_type,
        }
        if len(set(control.values())) != len(control):
            raise ConfigValidationError(
                message=f"Control action types must be distinct: {control}",
                field="undo_type",
                value=control,
            )
        for name, value in control.items():
            if not value:
                raise ConfigValidationError(
                    message=f"{name} cannot be empty",
                    field=name,
                    value=value,
                )
            if self.moment_marker in value:
                raise ConfigValidationError(
                    message=f"{name} {value!r} contains the moment marker {self.moment_marker!r}",
                    field=name,
                    value=value,
                    context=ErrorContext(extra={"moment_marker": self.moment_marker}),
                )
        return self


def load_settings(config_path: str | Path | None = None) -> UndoSettings:
    """Load settings from file and environment.

    Priority: env vars > config file > defaults
    """
    config_data: dict[str, Any] = {}

    if config_path is not None:
        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path) as f:
                config_data = yaml.safe_load(f) or {}
            if not isinstance(config_data, dict):
                raise ConfigValidationError(
                    message=f"Settings file {config_path} must contain a mapping",
                    value=config_data,
                )

    env_overrides = _get_env_overrides()
    config_data.update(env_overrides)

    return UndoSettings(**config_data)


def _get_env_overrides() -> dict[str, Any]:
    """Get settings overrides from environment variables."""
    overrides: dict[str, Any] = {}

    env_mappings = {
        "FLEXBACKUP_HISTORY_LIMIT": "history_limit",
        "FLEXBACKUP_MOMENT_MARKER": "moment_marker",
        "FLEXBACKUP_UNDO_TYPE": "undo_type",
        "FLEXBACKUP_REDO_TYPE": "redo_type",
        "FLEXBACKUP_APPLY_TYPE": "apply_type",
    }

    for env_key, config_key in env_mappings.items():
        value = os.environ.get(env_key)
        if value is not None:
            overrides[config_key] = value

    return overrides
