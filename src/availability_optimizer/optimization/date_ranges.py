"""
Date-range partitioner for chunked availability queries.

Responsibility: Split a span of days into contiguous, inclusive chunks.
Does NOT execute queries.

Example (days_ahead=30, days_per_chunk=7, today=2024-01-01):

    2024-01-01 -> 2024-01-07
    2024-01-08 -> 2024-01-14
    2024-01-15 -> 2024-01-21
    2024-01-22 -> 2024-01-28
    2024-01-29 -> 2024-01-30   (remainder chunk)
"""

from datetime import date

from availability_optimizer.common.utils.date_utils import add_days, local_today
from availability_optimizer.optimization.models import DateRange


def generate_date_ranges(
    days_per_chunk: int,
    days_ahead: int,
    today: date | None = None,
) -> list[DateRange]:
    """
    Partition [today, today + days_ahead) into chunks of days_per_chunk days.

    Args:
        days_per_chunk: Calendar days covered by each chunk
        days_ahead: Total calendar days to cover, starting today
        today: Anchor date; defaults to the current local date

    Returns:
        ceil(days_ahead / days_per_chunk) ranges; only the last may be shorter

    Raises:
        ValueError: If either argument is not a positive integer
    """
    if days_per_chunk < 1:
        raise ValueError(f"days_per_chunk must be positive, got {days_per_chunk}")
    if days_ahead < 1:
        raise ValueError(f"days_ahead must be positive, got {days_ahead}")

    anchor = today or local_today()
    last_day = add_days(anchor, days_ahead - 1)

    ranges = []
    current_start = anchor
    while current_start <= last_day:
        current_end = min(add_days(current_start, days_per_chunk - 1), last_day)
        ranges.append(DateRange(start=current_start, end=current_end))
        current_start = add_days(current_end, 1)

    return ranges
