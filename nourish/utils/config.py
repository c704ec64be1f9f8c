"""
Configuration Management

Loads configuration from YAML files with environment variable resolution.
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator


DEFAULT_BOOST_POINTS = {
    "hangout": 40.0,
    "call": 35.0,
    "text": 25.0,
    "social_touch": 5.0,
}


class HealthConfig(BaseModel):
    """Relationship health tuning."""
    decay_rate_per_day: float = Field(default=5.0, ge=0.0)
    boost_points: dict[str, float] = Field(default_factory=DEFAULT_BOOST_POINTS.copy)
    ghost_threshold_days: int = Field(default=30, ge=0)
    default_backdate_days: int = Field(default=14, ge=0)
    clamp_backdated_interactions: bool = True
    decay_clock_from_contact: bool = False
    timezone: str = "UTC"

    @field_validator("boost_points", mode="before")
    @classmethod
    def _fill_missing_boosts(cls, value: Any) -> Any:
        """Types left out of a partial override keep their default points."""
        if isinstance(value, dict):
            return {**DEFAULT_BOOST_POINTS, **value}
        return value

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value

    @model_validator(mode="after")
    def _boosts_follow_contact_richness(self) -> "HealthConfig":
        points = [self.boost_points[name] for name in DEFAULT_BOOST_POINTS]
        if any(p < 0 for p in points):
            raise ValueError("Boost points must be non-negative")
        if points != sorted(points, reverse=True):
            raise ValueError(
                "Boost points must satisfy hangout >= call >= text >= social_touch"
            )
        return self


class BirthdayConfig(BaseModel):
    """Birthday reminder configuration."""
    soon_days: int = Field(default=7, ge=0)


class StoreConfig(BaseModel):
    """Persistence configuration."""
    path: str = "~/.nourish/nourish.json"
    seed_sample_data: bool = False

    @property
    def resolved_path(self) -> Path:
        return Path(self.path).expanduser()


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    file: Optional[str] = None


class Config(BaseModel):
    """Root configuration object."""
    health: HealthConfig = Field(default_factory=HealthConfig)
    birthdays: BirthdayConfig = Field(default_factory=BirthdayConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _resolve_env_vars(data: Any) -> Any:
    """Recursively resolve environment variables in config values.

    Supports ${VAR_NAME} and ${VAR_NAME:-default} syntax.
    """
    if isinstance(data, str):
        if data.startswith("${") and data.endswith("}"):
            var_expr = data[2:-1]
            if ":-" in var_expr:
                var_name, default = var_expr.split(":-", 1)
                return os.environ.get(var_name, default)
            return os.environ.get(var_expr, data)
        return data
    elif isinstance(data, dict):
        return {k: _resolve_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_vars(item) for item in data]
    return data


def load_config(
    config_path: Optional[Path] = None,
    local_config_path: Optional[Path] = None,
) -> Config:
    """Load configuration from YAML files.

    Args:
        config_path: Path to main config file (default: config.yaml)
        local_config_path: Path to local overrides (default: config.local.yaml
            next to the main config file)

    Returns:
        Merged and validated Config object
    """
    project_root = Path(__file__).parent.parent.parent

    if config_path is None:
        config_path = project_root / "config.yaml"
    config_path = Path(config_path)
    if local_config_path is None:
        local_config_path = config_path.parent / "config.local.yaml"

    config_data: dict[str, Any] = {}

    if config_path.exists():
        with open(config_path) as f:
            config_data = yaml.safe_load(f) or {}

    # Merge local overrides
    if local_config_path.exists():
        with open(local_config_path) as f:
            local_data = yaml.safe_load(f) or {}
            config_data = _deep_merge(config_data, local_data)

    config_data = _resolve_env_vars(config_data)

    return Config(**config_data)


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result
