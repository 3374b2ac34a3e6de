"""Pydantic schema for configuration validation.

All config values are validated at load time. Typos and invalid values
fail fast with clear error messages.

Usage:
    from screenplay.config_schema import load_validated_config, AppConfig
    config = load_validated_config("config/config.yaml")
    # config is now a validated AppConfig instance
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# BASE MODEL WITH STRICT VALIDATION
# =============================================================================

class StrictModel(BaseModel):
    """Base model that rejects unknown fields (catches typos)."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# VERIFICATION MODEL
# =============================================================================

class VerificationConfig(StrictModel):
    """Settings for verifying answers that may still change."""

    timeout_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Single bound for one and_verify call while answers are pending"
    )
    poll_interval: float = Field(
        default=0.05,
        gt=0,
        description="Default interval between fetches for polling inquisitors"
    )


# =============================================================================
# LOGGING MODEL
# =============================================================================

class LoggingConfig(StrictModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Level for the screenplay logger"
    )
    ability: str | None = Field(
        default="log",
        description="Ability called with each action description (null disables)"
    )

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, value: Any) -> Any:
        """Accept lower-case level names."""
        if isinstance(value, str):
            return value.upper()
        return value

    @field_validator("ability")
    @classmethod
    def non_empty_ability(cls, value: str | None) -> str | None:
        """Empty ability names disable ability logging."""
        if value is not None and not value.strip():
            return None
        return value


# =============================================================================
# ROOT MODEL
# =============================================================================

class AppConfig(StrictModel):
    """Root configuration model."""

    verification: VerificationConfig = Field(default_factory=VerificationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_validated_config(config_path: str | Path = "config/config.yaml") -> AppConfig:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to config YAML file.

    Returns:
        Validated AppConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid (with detailed error message).
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw_config = yaml.safe_load(f) or {}

    return AppConfig.model_validate(raw_config)


def validate_config_dict(config_dict: dict[str, Any]) -> AppConfig:
    """Validate a configuration dictionary.

    Args:
        config_dict: Configuration as a dictionary.

    Returns:
        Validated AppConfig instance.

    Raises:
        pydantic.ValidationError: If config is invalid.
    """
    return AppConfig.model_validate(config_dict)


__all__ = [
    "StrictModel",
    "VerificationConfig",
    "LoggingConfig",
    "AppConfig",
    "load_validated_config",
    "validate_config_dict",
]
