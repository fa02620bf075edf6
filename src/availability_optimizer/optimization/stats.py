"""
Latency statistics for strategy trials.

Percentiles use linear interpolation between order statistics:
idx = (n - 1) * p over the sorted samples. Standard deviation is the
population form (divide by n).
"""

import math
from collections.abc import Sequence

from availability_optimizer.optimization.models import PercentileMetrics

PERCENTILES = {
    "p25": 0.25,
    "p50": 0.50,
    "p75": 0.75,
    "p90": 0.90,
    "p95": 0.95,
    "p99": 0.99,
}


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """
    Interpolated percentile of already-sorted samples.

    Args:
        sorted_values: Samples in ascending order
        p: Percentile as a fraction in [0, 1]

    Returns:
        Interpolated value, or nan when there are no samples
    """
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"Percentile must be within [0, 1], got {p}")
    if not sorted_values:
        return math.nan

    index = (len(sorted_values) - 1) * p
    lower = math.floor(index)
    upper = math.ceil(index)
    if lower == upper:
        return float(sorted_values[lower])

    weight = index - lower
    return sorted_values[lower] * (1 - weight) + sorted_values[upper] * weight


def calculate_percentiles(values: Sequence[float]) -> PercentileMetrics:
    """
    Summarize a set of latency samples.

    An empty sample set yields nan for every field; callers must treat
    such metrics as unusable (see PercentileMetrics.is_valid).
    """
    if not values:
        return PercentileMetrics(
            p0=math.nan,
            p25=math.nan,
            p50=math.nan,
            p75=math.nan,
            p90=math.nan,
            p95=math.nan,
            p99=math.nan,
            p100=math.nan,
            mean=math.nan,
            std_dev=math.nan,
        )

    ordered = sorted(values)
    count = len(ordered)
    mean = sum(ordered) / count
    variance = sum((value - mean) ** 2 for value in ordered) / count

    return PercentileMetrics(
        p0=float(ordered[0]),
        p100=float(ordered[-1]),
        mean=mean,
        std_dev=math.sqrt(variance),
        **{name: percentile(ordered, p) for name, p in PERCENTILES.items()},
    )
