"""
Utilities Module - Shared Helper Functions
===========================================

Provides shared utilities used across multiple layers:
- Date utilities
"""

from availability_optimizer.common.utils.date_utils import (
    add_days,
    days_between,
    format_date,
    local_today,
    utc_now,
)

__all__ = [
    "add_days",
    "days_between",
    "format_date",
    "local_today",
    "utc_now",
]
