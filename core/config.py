"""Configuration management for the hook engine."""

from __future__ import annotations

import json
import os
from copy import deepcopy
from pathlib import Path
from typing import Any

import tomllib
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigError, wrap_exception

ENV_PREFIX = "HOOKS__"


class AppConfig(BaseModel):
    """Application runtime config."""

    model_config = ConfigDict(extra="allow")

    name: str = "hook-engine"
    debug: bool = False


class HooksConfig(BaseModel):
    """Registration defaults and reserved hook names."""

    model_config = ConfigDict(extra="forbid")

    default_priority: int = 10
    default_accepted_args: int = Field(default=1, ge=1)
    all_hook: str = "all"
    unknown_bucket: str = "unknown"

    @field_validator("all_hook", "unknown_bucket")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("reserved hook names must not be empty")
        return value


class DeprecationConfig(BaseModel):
    """Behavior of deprecated hook notices."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    emit_warnings: bool = True
    log_level: str = "WARNING"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(extra="allow")

    level: str = "INFO"
    format: str = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
    file_path: str | None = None
    json_format: bool = False


class EngineConfig(BaseModel):
    """Top-level engine configuration model."""

    model_config = ConfigDict(extra="allow")

    app: AppConfig = Field(default_factory=AppConfig)
    hooks: HooksConfig = Field(default_factory=HooksConfig)
    deprecation: DeprecationConfig = Field(default_factory=DeprecationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigManager:
    """Load and validate engine configuration from TOML files."""

    def __init__(self, defaults: EngineConfig | None = None) -> None:
        self._defaults = defaults or EngineConfig()

    @property
    def defaults(self) -> EngineConfig:
        """Return default configuration."""
        return self._defaults

    def load(self, path: str | Path) -> EngineConfig:
        """Load TOML file and merge with defaults before validation.

        Raises:
            ConfigError: If the file cannot be read, parsed or validated.
        """
        config_path = Path(path)
        try:
            with config_path.open("rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise wrap_exception(
                exc,
                ConfigError,
                f"Cannot load config file: {config_path}",
                context={"path": str(config_path)},
            ) from exc

        return self.from_dict(data)

    def from_dict(self, data: dict[str, Any]) -> EngineConfig:
        """Validate configuration from dict, merged onto defaults and env vars."""
        merged = _deep_merge(
            self._defaults.model_dump(mode="python"),
            data,
        )
        merged_with_env = _apply_env_overrides(merged)
        try:
            return EngineConfig.model_validate(merged_with_env)
        except ValidationError as exc:
            raise wrap_exception(
                exc,
                ConfigError,
                "Invalid engine configuration",
                context={"errors": exc.error_count()},
            ) from exc


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = deepcopy(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply env overrides using HOOKS__A__B style keys."""
    overridden = deepcopy(config)

    for key, raw_value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue

        path = key[len(ENV_PREFIX) :].strip("_")
        if not path:
            continue

        keys = [part.lower() for part in path.split("__") if part]
        if not keys:
            continue

        _set_nested(overridden, keys, _parse_env_value(raw_value))

    return overridden


def _set_nested(root: dict[str, Any], keys: list[str], value: Any) -> None:
    current: dict[str, Any] = root
    for key in keys[:-1]:
        child = current.get(key)
        if not isinstance(child, dict):
            child = {}
            current[key] = child
        current = child
    current[keys[-1]] = value


def _parse_env_value(raw: str) -> Any:
    lowered = raw.strip().lower()
    if lowered in {"true", "false"}:
        return lowered == "true"

    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw
