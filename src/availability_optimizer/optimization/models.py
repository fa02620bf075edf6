"""Domain models for strategy evaluation.

Every model here is created once and never mutated afterwards:
- DateRange: one inclusive chunk of the queried span
- Strategy: a (days per query, concurrency) configuration under test
- BatchResult: outcome of one bounded-concurrency batch
- TrialMeasurement: one latency sample for one trial
- PercentileMetrics: order statistics over trial durations
- StrategyResult / OptimizationReport: aggregated run output
"""

import math
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Generic, TypeVar

from availability_optimizer.common.utils.date_utils import days_between, format_date

T = TypeVar("T")


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar-date range for a single query."""

    start: date
    end: date

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"DateRange start {self.start} is after end {self.end}")

    @property
    def days(self) -> int:
        """Number of calendar days covered, both ends included."""
        return days_between(self.start, self.end)

    def to_dict(self) -> dict[str, str]:
        return {"start": format_date(self.start), "end": format_date(self.end)}


@dataclass(frozen=True)
class Strategy:
    """A chunking/concurrency configuration under test."""

    name: str
    days_per_query: int
    concurrency: int

    def __post_init__(self):
        if self.days_per_query < 1:
            raise ValueError(
                f"days_per_query must be positive, got {self.days_per_query}"
            )
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be positive, got {self.concurrency}")


@dataclass(frozen=True)
class BatchResult(Generic[T]):
    """Outcome of running a batch of operations with bounded concurrency."""

    results: tuple[T, ...]
    errors: tuple[BaseException, ...]
    duration_ms: float

    @property
    def error_count(self) -> int:
        return len(self.errors)


@dataclass(frozen=True)
class TrialMeasurement:
    """One trial of a strategy.

    duration_ms is None when the batch call itself raised (failed trial).
    chunk_errors counts per-chunk failures that were absorbed by the batch.
    """

    iteration: int
    duration_ms: float | None
    chunk_errors: int = 0

    @property
    def failed(self) -> bool:
        return self.duration_ms is None


@dataclass(frozen=True)
class PercentileMetrics:
    """Latency distribution summary in milliseconds."""

    p0: float
    p25: float
    p50: float
    p75: float
    p90: float
    p95: float
    p99: float
    p100: float
    mean: float
    std_dev: float

    @property
    def is_valid(self) -> bool:
        """False for statistics computed over an empty sample set."""
        return not math.isnan(self.p50)


@dataclass(frozen=True)
class StrategySummary:
    """Strategy as reported: the configuration plus the query count it produced."""

    name: str
    total_queries: int
    days_per_query: int
    concurrency: int


@dataclass(frozen=True)
class StrategyResult:
    """Aggregated outcome of all trials for one strategy."""

    strategy: StrategySummary
    metrics: PercentileMetrics
    measurements: tuple[float, ...]
    total_time: float
    average_time_per_query: float
    errors: int
    trials: tuple[TrialMeasurement, ...] = ()

    @property
    def chunk_errors(self) -> int:
        """Per-chunk failures absorbed across all trials."""
        return sum(trial.chunk_errors for trial in self.trials)


@dataclass(frozen=True)
class OptimizationReport:
    """Ranked results and the recommended strategy for one run."""

    results: list[StrategyResult]
    recommendation: StrategyResult
    snapshot_path: Path | None = None
