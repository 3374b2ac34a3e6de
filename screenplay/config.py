"""Configuration loader for screenplay

Configurable values come from config/config.yaml (or the file named by the
SCREENPLAY_CONFIG environment variable).

Configuration is validated at load time using Pydantic.
Typos and invalid values fail fast with clear error messages.

Usage:
    from screenplay.config import load_config, get, get_validated_config

    # Load and validate (optional, happens lazily otherwise)
    load_config("config/config.yaml")

    # Get values by dot-path
    timeout = get("verification.timeout_seconds")

    # Or use the typed config object (preferred)
    config = get_validated_config()
    timeout = config.verification.timeout_seconds
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from .config_schema import AppConfig, load_validated_config, validate_config_dict

logger = logging.getLogger(__name__)

# Global config instances
_config: dict[str, Any] | None = None
_validated_config: AppConfig | None = None

# Default config path
DEFAULT_CONFIG_PATH: Path = Path(__file__).parent.parent / "config" / "config.yaml"
CONFIG_ENV_VAR = "SCREENPLAY_CONFIG"


def _resolve_path(config_path: str | Path | None) -> Path | None:
    """Pick the config file: explicit path, then env var, then the default.

    Returns None when nothing was asked for and the default file is absent,
    in which case schema defaults apply.
    """
    if config_path:
        return Path(config_path)

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    if DEFAULT_CONFIG_PATH.exists():
        return DEFAULT_CONFIG_PATH
    return None


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """Load and validate configuration from YAML file.

    Validates the config against the Pydantic schema. Invalid configs
    raise a ValidationError with details about what's wrong.

    Args:
        config_path: Path to config file. Defaults to $SCREENPLAY_CONFIG,
            then config/config.yaml.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If an explicitly requested config file doesn't exist.
        pydantic.ValidationError: If config is invalid.
    """
    global _config, _validated_config

    path = _resolve_path(config_path)
    if path is None:
        logger.debug("No config file found, using schema defaults")
        _validated_config = AppConfig()
    else:
        _validated_config = load_validated_config(path)

    _config = _validated_config.model_dump()
    return _config


def configure_logging(level: str | None = None) -> None:
    """Set the screenplay logger level, for applications that want it.

    Loading config never touches logger levels; call this from an entry
    point or test setup. Defaults to logging.level from config.
    """
    if level is None:
        level = get_validated_config().logging.level
    logging.getLogger("screenplay").setLevel(level.upper())


def get_config() -> dict[str, Any]:
    """Get the loaded configuration dict. Loads default if not already loaded.

    For typed access, use get_validated_config() instead.
    """
    global _config
    if _config is None:
        load_config()
    if _config is None:
        raise RuntimeError("Config failed to load. Call load_config() first.")
    return _config


def get_validated_config() -> AppConfig:
    """Get the validated configuration object.

    Returns a typed AppConfig instance with IDE autocompletion support.
    Loads default config if not already loaded.
    """
    global _validated_config
    if _validated_config is None:
        load_config()
    if _validated_config is None:
        raise RuntimeError("Validated config failed to load. Call load_config() first.")
    return _validated_config


def get(key: str, default: Any = None) -> Any:
    """Get a config value by dot-separated key path.

    Examples:
        get("verification.timeout_seconds")
        get("logging.ability")
    """
    config: dict[str, Any] = get_config()
    keys: list[str] = key.split(".")

    value: Any = config
    for k in keys:
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return default

    return value


def set_config_value(key: str, value: Any) -> None:
    """Set a config value by dot-separated key path.

    Used for runtime overrides (e.g., in test setup). The result is
    re-validated, so invalid values raise pydantic.ValidationError and
    leave the previous config in place.

    Args:
        key: Dot-separated key path (e.g., "verification.timeout_seconds")
        value: Value to set
    """
    global _config, _validated_config

    if _config is None:
        load_config()

    if _config is None:
        raise RuntimeError("Config failed to load. Call load_config() first.")

    updated = _copy_nested(_config)
    keys = key.split(".")
    target = updated

    # Navigate to parent
    for k in keys[:-1]:
        if k not in target:
            target[k] = {}
        target = target[k]

    # Set the value
    target[keys[-1]] = value

    _validated_config = validate_config_dict(updated)
    _config = _validated_config.model_dump()


def _copy_nested(config: dict[str, Any]) -> dict[str, Any]:
    return {
        k: _copy_nested(v) if isinstance(v, dict) else v
        for k, v in config.items()
    }


def reset_config() -> None:
    """Forget the loaded config so the next access reloads it."""
    global _config, _validated_config
    _config = None
    _validated_config = None
