"""
Observability for optimizer runs: structured logging with layer and
component context so every trial, batch and fetch can be traced.
"""

from .logging import (
    get_ingestion_logger,
    get_logger,
    get_optimization_logger,
    get_reporting_logger,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "get_ingestion_logger",
    "get_optimization_logger",
    "get_reporting_logger",
]
