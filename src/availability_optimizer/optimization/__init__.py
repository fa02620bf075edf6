"""
Strategy evaluation: date partitioning, bounded-concurrency execution,
latency statistics and reporting.

The orchestrator and its container import configuration, which itself
imports these models; load them from their modules directly:

    from availability_optimizer.optimization.optimizer import AvailabilityQueryOptimizer
    from availability_optimizer.optimization.dependency_container import (
        OptimizerDependencyContainer,
    )
"""

from .date_ranges import generate_date_ranges
from .executor import (
    build_query_variables,
    execute_queries_with_concurrency,
    run_with_concurrency,
)
from .models import (
    BatchResult,
    DateRange,
    OptimizationReport,
    PercentileMetrics,
    Strategy,
    StrategyResult,
    StrategySummary,
    TrialMeasurement,
)
from .stats import calculate_percentiles, percentile
from .strategies import (
    StrategyPolicy,
    build_strategies,
    generate_capped_strategies,
    generate_default_strategies,
    get_quick_strategies,
)

__all__ = [
    "BatchResult",
    "DateRange",
    "OptimizationReport",
    "PercentileMetrics",
    "Strategy",
    "StrategyPolicy",
    "StrategyResult",
    "StrategySummary",
    "TrialMeasurement",
    "build_query_variables",
    "build_strategies",
    "calculate_percentiles",
    "execute_queries_with_concurrency",
    "generate_capped_strategies",
    "generate_date_ranges",
    "generate_default_strategies",
    "get_quick_strategies",
    "percentile",
    "run_with_concurrency",
]
