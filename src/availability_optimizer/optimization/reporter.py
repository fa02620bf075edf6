"""
Optimization reporter for progress logging and summary tables.

Responsibility: Format and log progress/results.
Does NOT rank strategies or execute trials.
"""

import logging

from availability_optimizer.optimization.models import Strategy, StrategyResult

logger = logging.getLogger(__name__)

TABLE_HEADER = (
    "Strategy         | Queries | Days/Q | Conc | p50 (ms) | p90 (ms) "
    "| p99 (ms) | Mean (ms) | Errors"
)
TABLE_RULE = (
    "-----------------|---------|--------|------|----------|----------"
    "|----------|-----------|-------"
)


class OptimizationReporter:
    """
    Reports optimizer progress and results.

    Implements IOptimizationReporter protocol.

    Single Responsibility: Format and log progress metrics without making
    ranking decisions.
    """

    def log_run_header(
        self, endpoint: str, days_ahead: int, iterations: int, strategy_count: int
    ) -> None:
        logger.info("=== Availability Query Performance Optimizer ===")
        logger.info(f"Endpoint: {endpoint}")
        logger.info(f"Days ahead: {days_ahead}")
        logger.info(f"Iterations per strategy: {iterations}")
        logger.info(f"Testing {strategy_count} strategies...")

    def log_strategy_start(
        self, strategy: Strategy, total_queries: int, iterations: int
    ) -> None:
        logger.info(f"Testing strategy: {strategy.name}")
        logger.info(f"  - Days per query: {strategy.days_per_query}")
        logger.info(f"  - Total queries: {total_queries}")
        logger.info(f"  - Concurrency: {strategy.concurrency}")
        logger.info(f"  - Iterations: {iterations}")

    def log_iteration(
        self,
        strategy: Strategy,
        iteration: int,
        iterations: int,
        duration_ms: float | None,
        chunk_errors: int = 0,
    ) -> None:
        """
        Log one finished trial.

        Args:
            strategy: Strategy under test
            iteration: 1-based trial number
            iterations: Total trials for the strategy
            duration_ms: Trial latency, or None when the trial failed
            chunk_errors: Chunk requests that failed inside the trial
        """
        outcome = "ERROR" if duration_ms is None else f"{duration_ms:.2f}ms"
        if chunk_errors:
            outcome += f" ({chunk_errors} chunk errors)"
        logger.info(f"  - Iteration {iteration}/{iterations}... {outcome}")

    def log_summary(self, results: list[StrategyResult]) -> None:
        """
        Log the ranked results table.

        Args:
            results: Strategy results, already ranked
        """
        logger.info("=== Results Summary ===")
        logger.info(TABLE_HEADER)
        logger.info(TABLE_RULE)
        for result in results:
            logger.info(format_result_row(result))

    def log_recommendation(self, recommendation: StrategyResult) -> None:
        strategy = recommendation.strategy
        logger.info("=== Recommendation ===")
        logger.info(f"Best strategy: {strategy.name}")
        logger.info(f"  - {strategy.days_per_query} days per query")
        logger.info(f"  - {strategy.concurrency} concurrent requests")
        logger.info(
            f"  - Median response time: {recommendation.metrics.p50:.2f}ms"
        )
        logger.info(f"  - 99th percentile: {recommendation.metrics.p99:.2f}ms")
        if recommendation.errors:
            logger.warning(
                f"  - Every strategy had failed trials; "
                f"{strategy.name} failed {recommendation.errors}"
            )

    def log_top_strategies(self, results: list[StrategyResult], limit: int = 5) -> None:
        logger.info(f"Top {min(limit, len(results))} Strategies:")
        for index, result in enumerate(results[:limit], start=1):
            logger.info(f"{index}. {result.strategy.name}")
            logger.info(
                f"   - Response time: p50={result.metrics.p50:.0f}ms, "
                f"p99={result.metrics.p99:.0f}ms"
            )
            logger.info(
                f"   - Configuration: {result.strategy.days_per_query} days/query, "
                f"{result.strategy.concurrency} concurrent"
            )

    def log_implementation_hint(self, recommendation: StrategyResult) -> None:
        logger.info("Implementation Suggestion:")
        logger.info(f"DAYS_PER_QUERY = {recommendation.strategy.days_per_query}")
        logger.info(f"MAX_CONCURRENCY = {recommendation.strategy.concurrency}")

    def log_improvement(
        self, results: list[StrategyResult], recommendation: StrategyResult
    ) -> None:
        """Log the speedup over a single whole-month query, when it was tested."""
        improvement = improvement_over_baseline(results, recommendation)
        if improvement is None:
            return
        logger.info(
            f"Expected improvement: {improvement:.1f}% faster than "
            f"single 30-day query"
        )


def format_result_row(result: StrategyResult) -> str:
    strategy = result.strategy
    metrics = result.metrics
    return (
        f"{strategy.name:<16} | "
        f"{strategy.total_queries:>7} | "
        f"{strategy.days_per_query:>6} | "
        f"{strategy.concurrency:>4} | "
        f"{metrics.p50:>8.0f} | "
        f"{metrics.p90:>8.0f} | "
        f"{metrics.p99:>8.0f} | "
        f"{metrics.mean:>9.0f} | "
        f"{result.errors:>6}"
    )


def improvement_over_baseline(
    results: list[StrategyResult], recommendation: StrategyResult
) -> float | None:
    """
    Percent reduction of median latency versus the 30d-1c baseline.

    Returns None when the baseline was not tested or has no usable median.
    """
    baseline = next(
        (
            r
            for r in results
            if r.strategy.days_per_query == 30 and r.strategy.concurrency == 1
        ),
        None,
    )
    if baseline is None or not baseline.metrics.is_valid:
        return None
    if baseline.metrics.p50 == 0:
        return None
    return (
        (baseline.metrics.p50 - recommendation.metrics.p50)
        / baseline.metrics.p50
        * 100
    )
