"""
Configuration exports for the availability optimizer.

Usage:
    from availability_optimizer.config import get_config
    settings = get_config(overrides={"days_ahead": 14})
"""

from .state import (
    BaseVariables,
    ConfigLoader,
    ConfigurationError,
    HttpClientSettings,
    LoggingConfig,
    OptimizerSettings,
    get_config,
)

__all__ = [
    "BaseVariables",
    "ConfigLoader",
    "ConfigurationError",
    "HttpClientSettings",
    "LoggingConfig",
    "OptimizerSettings",
    "get_config",
]
