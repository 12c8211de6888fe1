"""Unit tests for configuration manager."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.config import ConfigManager, EngineConfig
from core.exceptions import ConfigError


def _write_toml(path: Path, content: str) -> None:
    path.write_text(content.strip() + "\n", encoding="utf-8")


def test_defaults() -> None:
    """Default config should match the registration defaults."""
    config = EngineConfig()

    assert config.hooks.default_priority == 10
    assert config.hooks.default_accepted_args == 1
    assert config.hooks.all_hook == "all"
    assert config.hooks.unknown_bucket == "unknown"
    assert config.deprecation.enabled is True
    assert config.logging.level == "INFO"


def test_load_toml(tmp_path: Path) -> None:
    """ConfigManager should load TOML and merge onto defaults."""
    config_file = tmp_path / "hooks.toml"
    _write_toml(
        config_file,
        """
        [hooks]
        default_priority = 20

        [deprecation]
        emit_warnings = false

        [logging]
        level = "DEBUG"
        """,
    )

    config = ConfigManager().load(config_file)

    assert config.hooks.default_priority == 20
    assert config.hooks.default_accepted_args == 1
    assert config.deprecation.emit_warnings is False
    assert config.deprecation.enabled is True
    assert config.logging.level == "DEBUG"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """HOOKS__SECTION__KEY variables should override file values."""
    monkeypatch.setenv("HOOKS__HOOKS__DEFAULT_PRIORITY", "5")
    monkeypatch.setenv("HOOKS__DEPRECATION__ENABLED", "false")

    config = ConfigManager().from_dict({"hooks": {"default_priority": 20}})

    assert config.hooks.default_priority == 5
    assert config.deprecation.enabled is False


def test_invalid_values_raise_config_error() -> None:
    """Validation failures should surface as ConfigError."""
    with pytest.raises(ConfigError) as exc_info:
        ConfigManager().from_dict({"hooks": {"default_accepted_args": 0}})

    assert exc_info.value.code == "CONFIG_ERROR"
    assert exc_info.value.cause is not None


def test_empty_reserved_name_is_rejected() -> None:
    """The all hook name must not be empty."""
    with pytest.raises(ConfigError):
        ConfigManager().from_dict({"hooks": {"all_hook": ""}})


def test_unknown_hooks_key_is_rejected() -> None:
    """The hooks section should forbid unknown keys."""
    with pytest.raises(ConfigError):
        ConfigManager().from_dict({"hooks": {"default_prio": 1}})


def test_malformed_toml_raises_config_error(tmp_path: Path) -> None:
    """Broken TOML should be wrapped in ConfigError."""
    config_file = tmp_path / "broken.toml"
    config_file.write_text("[hooks\n", encoding="utf-8")

    with pytest.raises(ConfigError) as exc_info:
        ConfigManager().load(config_file)

    assert exc_info.value.context == {"path": str(config_file)}


def test_missing_file_raises_config_error(tmp_path: Path) -> None:
    """A missing file should be wrapped in ConfigError."""
    with pytest.raises(ConfigError):
        ConfigManager().load(tmp_path / "missing.toml")
