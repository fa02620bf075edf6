"""
Configuration state for the availability optimizer.

Single source of truth for run configuration, combining a YAML file,
an environment-specific YAML overlay, environment variable overrides
and command-line overrides, with pydantic validation throughout.
"""

import logging
import os
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from availability_optimizer.optimization.models import Strategy
from availability_optimizer.optimization.strategies import (
    DEFAULT_MAX_CONCURRENCY,
    StrategyPolicy,
)

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""


# =============================================================================
# PYDANTIC MODELS - Type-Safe Configuration
# =============================================================================


class BaseVariables(BaseModel):
    """Query variables shared by every chunk request."""

    appointment_type_id: str = Field(default="436561")
    provider_id: str = Field(default="6775393")
    state: str = Field(default="CA", min_length=2, max_length=2)
    timezone: str = Field(default="America/Chicago")

    @field_validator("state")
    @classmethod
    def normalize_state(cls, v: str) -> str:
        return v.upper()

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject timezone names the IANA database does not know."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    def to_query_variables(self) -> dict[str, str]:
        """GraphQL variable names for the base variables."""
        return {
            "appointmentTypeId": self.appointment_type_id,
            "providerId": self.provider_id,
            "state": self.state,
            "timezone": self.timezone,
        }

    class Config:
        extra = "forbid"


class HttpClientSettings(BaseModel):
    """HTTP transport settings."""

    timeout: float = Field(default=30.0, gt=0)
    verify_ssl: bool = Field(default=True)

    class Config:
        extra = "forbid"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO")
    json_logs: bool = Field(default=False)
    include_timestamp: bool = Field(default=True)

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    class Config:
        extra = "forbid"


class OptimizerSettings(BaseModel):
    """
    Root configuration for one optimizer run.

    `strategies`, when set, replaces the list generated by `strategy_policy`.
    """

    endpoint: str | None = Field(default=None)
    base_variables: BaseVariables = Field(default_factory=BaseVariables)
    days_ahead: int = Field(default=30, ge=1, le=366)
    iterations: int = Field(default=5, ge=1)
    headers: dict[str, str] = Field(
        default_factory=lambda: {"Content-Type": "application/json"}
    )
    strategies: list[Strategy] | None = Field(default=None)
    strategy_policy: StrategyPolicy = Field(default=StrategyPolicy.GRID)
    max_concurrency: int = Field(default=DEFAULT_MAX_CONCURRENCY, ge=1)
    results_dir: str = Field(default=".")

    http: HttpClientSettings = Field(default_factory=HttpClientSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    env: str = Field(default="dev")
    config_dir: str = Field(default="./config")

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str | None) -> str | None:
        if not v:
            return None
        if not v.startswith(("http://", "https://")):
            raise ValueError("Endpoint must start with http:// or https://")
        return v

    def require_endpoint(self) -> str:
        """Return the endpoint or fail before any work starts."""
        if not self.endpoint:
            raise ConfigurationError(
                "GraphQL endpoint is required (--endpoint or GRAPHQL_ENDPOINT env var)"
            )
        return self.endpoint

    def snapshot(self) -> dict[str, Any]:
        """Inputs of the run as written into the results document."""
        return self.model_dump(
            mode="json",
            exclude={"logging", "env", "config_dir", "http"},
        )

    class Config:
        extra = "forbid"


# =============================================================================
# CONFIG LOADER - Clean, Validated Loading
# =============================================================================


class ConfigLoader:
    """
    Load and validate configuration.

    Merges, later sources winning:
      1. Model defaults (hardcoded)
      2. optimizer.yaml from config_dir
      3. env/<env>.yaml from config_dir
      4. Environment variable overrides
      5. Explicit overrides (command line)
    """

    CONFIG_FILE = "optimizer.yaml"

    def __init__(self, config_dir: str = "./config", env: str | None = None):
        self.config_dir = Path(config_dir)
        self._yaml_cache: dict[Path, Any] = {}
        self.env = env or os.getenv("OPTIMIZER_ENV", "dev")

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        """Load YAML file with caching; a missing file means defaults."""
        if path in self._yaml_cache:
            return self._yaml_cache[path]

        if not path.exists():
            logger.debug(f"Config file not found (using defaults): {path}")
            return {}

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Top level of {path} must be a mapping")

        self._yaml_cache[path] = data
        logger.debug(f"Loaded config: {path}")
        return data

    def _apply_env_overrides(self, config: dict[str, Any]) -> dict[str, Any]:
        """Apply environment variable overrides to config."""
        env_config: dict[str, Any] = {}

        if endpoint := os.getenv("GRAPHQL_ENDPOINT"):
            env_config["endpoint"] = endpoint

        if days_ahead := os.getenv("OPTIMIZER_DAYS_AHEAD"):
            env_config["days_ahead"] = days_ahead

        if iterations := os.getenv("OPTIMIZER_ITERATIONS"):
            env_config["iterations"] = iterations

        if results_dir := os.getenv("OPTIMIZER_RESULTS_DIR"):
            env_config["results_dir"] = results_dir

        if log_level := os.getenv("LOG_LEVEL"):
            env_config["logging"] = {"level": log_level}

        return self._merge_dicts(config, env_config)

    def _merge_dicts(self, base: dict, override: dict) -> dict:
        """Deep merge override into base dict."""
        result = base.copy()
        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._merge_dicts(result[key], value)
            else:
                result[key] = value
        return result

    def load(self, overrides: dict[str, Any] | None = None) -> OptimizerSettings:
        """
        Load complete configuration state.

        Args:
            overrides: Highest-priority values, nested like the YAML file.
                None values are ignored so unset CLI flags fall through.

        Returns:
            OptimizerSettings: Validated configuration object

        Raises:
            ConfigurationError: If a file is malformed or validation fails
        """
        logger.debug(f"Loading configuration from {self.config_dir} (env: {self.env})")

        config = self._load_yaml(self.config_dir / self.CONFIG_FILE)
        config = self._merge_dicts(
            config, self._load_yaml(self.config_dir / "env" / f"{self.env}.yaml")
        )
        config = self._apply_env_overrides(config)

        if overrides:
            config = self._merge_dicts(config, _drop_none(overrides))

        try:
            state = OptimizerSettings(
                **{**config, "env": self.env, "config_dir": str(self.config_dir)}
            )
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

        logger.debug(
            f"Configuration loaded: days_ahead={state.days_ahead}, "
            f"iterations={state.iterations}, policy={state.strategy_policy.value}"
        )
        return state


def _drop_none(values: dict[str, Any]) -> dict[str, Any]:
    cleaned = {}
    for key, value in values.items():
        if isinstance(value, dict):
            value = _drop_none(value)
            if not value:
                continue
        elif value is None:
            continue
        cleaned[key] = value
    return cleaned


def get_config(
    config_dir: str | None = None,
    overrides: dict[str, Any] | None = None,
) -> OptimizerSettings:
    """
    Load the run configuration.

    Args:
        config_dir: Override config directory. Defaults to OPTIMIZER_CONFIG_DIR or ./config
        overrides: Highest-priority values (e.g. parsed CLI flags)
    """
    if config_dir is None:
        config_dir = os.getenv("OPTIMIZER_CONFIG_DIR", "./config")
        if not Path(config_dir).exists():
            logger.debug(f"Config directory not found at {config_dir}, using defaults")

    return ConfigLoader(config_dir=config_dir).load(overrides)
