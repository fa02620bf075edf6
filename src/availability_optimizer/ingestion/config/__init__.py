"""Ingestion configuration value objects."""

from .value_objects import AvailabilityClientConfig, HttpClientConfig

__all__ = ["AvailabilityClientConfig", "HttpClientConfig"]
