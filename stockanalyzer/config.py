"""Configuration loading for StockAnalyzer.

Settings live in ``~/.config/stockanalyzer/config.toml``. A missing file
means defaults; environment variables override individual values.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import pytz
import toml
from pydantic import BaseModel, Field, ValidationError, field_validator

from stockanalyzer.errors import InvalidParameterError
from stockanalyzer.providers.base import INTERVALS, RANGES

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "stockanalyzer" / "config.toml"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ProviderConfig(BaseModel):
    """Market data provider settings."""

    timeout: float = Field(default=30.0, gt=0, description="Seconds allowed per provider request")

    model_config = {"frozen": True}


class AnalysisConfig(BaseModel):
    """Analysis defaults."""

    trend_history_range: str = Field(default="1y", description="History range for trend analysis")
    technical_history_ranges: dict[str, str] = Field(
        default_factory=lambda: {"daily": "1y", "weekly": "5y", "monthly": "max"},
        description="History range per interval for technical analysis",
    )
    market_timezone: str = Field(
        default="America/New_York", description="Timezone for prediction start dates"
    )
    prediction_seed: Optional[int] = Field(default=None, description="Seed for prediction paths")

    model_config = {"frozen": True}

    @field_validator("trend_history_range")
    @classmethod
    def _check_range(cls, value: str) -> str:
        if value not in RANGES:
            raise ValueError(f"unknown history range '{value}'")
        return value

    @field_validator("technical_history_ranges")
    @classmethod
    def _check_ranges(cls, value: dict[str, str]) -> dict[str, str]:
        for interval, history_range in value.items():
            if interval not in INTERVALS:
                raise ValueError(f"unknown interval '{interval}'")
            if history_range not in RANGES:
                raise ValueError(f"unknown history range '{history_range}'")
        return value

    @field_validator("market_timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        if value not in pytz.all_timezones_set:
            raise ValueError(f"unknown timezone '{value}'")
        return value


class OpenAIConfig(BaseModel):
    """LLM enrichment settings."""

    model: str = Field(default="gpt-5.2", description="Model used by agents")
    enrichment_timeout: float = Field(default=60.0, gt=0, description="Seconds allowed for enrichment")

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = Field(default="WARNING", description="Root log level")

    model_config = {"frozen": True}

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level '{value}'")
        return level


class AppConfig(BaseModel):
    """Complete application configuration."""

    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


def get_config_path() -> Path:
    """Config file path, honouring STOCKANALYZER_CONFIG."""
    override = os.environ.get("STOCKANALYZER_CONFIG")
    return Path(override).expanduser() if override else DEFAULT_CONFIG_PATH


def _apply_env_overrides(data: dict) -> dict:
    """Overlay environment variables on raw config data."""
    level = os.environ.get("STOCKANALYZER_LOG_LEVEL")
    if level:
        data.setdefault("logging", {})["level"] = level

    timeout = os.environ.get("STOCKANALYZER_TIMEOUT")
    if timeout:
        try:
            data.setdefault("provider", {})["timeout"] = float(timeout)
        except ValueError as e:
            raise InvalidParameterError("STOCKANALYZER_TIMEOUT", f"not a number: {timeout}") from e

    model = os.environ.get("OPENAI_MODEL")
    if model:
        data.setdefault("openai", {})["model"] = model

    return data


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Load configuration from TOML plus environment overrides.

    Args:
        path: Config file path. Defaults to get_config_path().

    Returns:
        AppConfig. Defaults are used for a missing file or missing keys.

    Raises:
        InvalidParameterError: If the file is not valid TOML or holds
            invalid values.
    """
    config_path = path or get_config_path()

    data: dict = {}
    if config_path.exists():
        try:
            data = toml.load(config_path)
        except toml.TomlDecodeError as e:
            raise InvalidParameterError("config", f"{config_path} is not valid TOML: {e}") from e
        logger.debug("Loaded config from %s", config_path)

    data = _apply_env_overrides(data)

    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise InvalidParameterError("config", str(e)) from e
