"""
Availability Query Optimizer
Benchmarks chunking/concurrency strategies and recommends the fastest.

Responsibilities:
- Run every strategy's trials sequentially (partition -> execute -> measure)
- Aggregate trial latencies into percentile metrics
- Rank strategies and pick a recommendation
- NOT responsible for: fetching, presentation, persistence (delegated to
  injected collaborators)
"""

import math
from datetime import date

from availability_optimizer.config.state import OptimizerSettings
from availability_optimizer.infrastructure.observability import get_optimization_logger
from availability_optimizer.optimization.date_ranges import generate_date_ranges
from availability_optimizer.optimization.executor import (
    execute_queries_with_concurrency,
)
from availability_optimizer.optimization.models import (
    OptimizationReport,
    Strategy,
    StrategyResult,
    StrategySummary,
    TrialMeasurement,
)
from availability_optimizer.optimization.persistence import build_snapshot
from availability_optimizer.optimization.ports import (
    IOptimizationReporter,
    IQueryFetcher,
    IResultsStore,
)
from availability_optimizer.optimization.stats import calculate_percentiles
from availability_optimizer.optimization.strategies import build_strategies


def _p50_sort_key(result: StrategyResult) -> tuple[bool, float]:
    p50 = result.metrics.p50
    return (math.isnan(p50), p50)


def rank_results(results: list[StrategyResult]) -> list[StrategyResult]:
    """
    Order results by ascending median latency.

    Strategies without a usable median (every trial failed, p50 is nan)
    sort after all others. Ties keep their input order.
    """
    return sorted(results, key=_p50_sort_key)


def select_recommendation(ranked: list[StrategyResult]) -> StrategyResult:
    """
    Pick the fastest strategy that had no failed trials.

    Falls back to the fastest strategy overall when every strategy failed
    at least one trial.

    Raises:
        ValueError: If no results were given
    """
    if not ranked:
        raise ValueError("Cannot recommend a strategy from an empty result set")
    return next((r for r in ranked if r.errors == 0), ranked[0])


class AvailabilityQueryOptimizer:
    """
    Evaluates query strategies against a live endpoint.

    Strategies run one after another and so do their trials; only the
    chunk requests inside one trial overlap. Each trial's wall-clock time
    is therefore not skewed by other trials.
    """

    def __init__(
        self,
        settings: OptimizerSettings,
        fetcher: IQueryFetcher,
        reporter: IOptimizationReporter | None = None,
        results_store: IResultsStore | None = None,
        today: date | None = None,
    ):
        """
        Initialize optimizer with injected collaborators.

        Args:
            settings: Validated run configuration
            fetcher: Performs one chunk request
            reporter: Receives progress and results (optional)
            results_store: Persists the run snapshot (optional)
            today: Anchor date for partitioning; defaults to the local date per trial
        """
        self.settings = settings
        self.fetcher = fetcher
        self.reporter = reporter
        self.results_store = results_store
        self.today = today
        self.base_variables = settings.base_variables.to_query_variables()

    def strategies(self) -> list[Strategy]:
        """Configured strategies, or the catalog produced by the configured policy."""
        if self.settings.strategies:
            return list(self.settings.strategies)
        return build_strategies(
            self.settings.strategy_policy,
            self.settings.days_ahead,
            self.settings.max_concurrency,
        )

    async def test_strategy(self, strategy: Strategy) -> StrategyResult:
        """
        Run all trials for one strategy and aggregate them.

        A trial whose batch call raises is counted as an error and produces
        no latency sample. Chunk failures inside a trial are absorbed by the
        executor and only recorded on the trial.
        """
        iterations = self.settings.iterations
        days_ahead = self.settings.days_ahead
        total_queries = len(
            generate_date_ranges(strategy.days_per_query, days_ahead, self.today)
        )
        log = get_optimization_logger(
            "optimizer",
            strategy=strategy.name,
            days_per_query=strategy.days_per_query,
            concurrency=strategy.concurrency,
        )

        if self.reporter:
            self.reporter.log_strategy_start(strategy, total_queries, iterations)

        trials: list[TrialMeasurement] = []
        measurements: list[float] = []
        failed_trials = 0

        for iteration in range(1, iterations + 1):
            try:
                ranges = generate_date_ranges(
                    strategy.days_per_query, days_ahead, self.today
                )
                batch = await execute_queries_with_concurrency(
                    ranges,
                    self.base_variables,
                    strategy.concurrency,
                    self.fetcher,
                )
            except Exception as e:
                failed_trials += 1
                trial = TrialMeasurement(iteration=iteration, duration_ms=None)
                log.error("trial_failed", iteration=iteration, error=str(e))
            else:
                measurements.append(batch.duration_ms)
                trial = TrialMeasurement(
                    iteration=iteration,
                    duration_ms=batch.duration_ms,
                    chunk_errors=batch.error_count,
                )
                log.debug(
                    "trial_completed",
                    iteration=iteration,
                    duration_ms=round(batch.duration_ms, 2),
                    chunk_errors=batch.error_count,
                )

            trials.append(trial)
            if self.reporter:
                self.reporter.log_iteration(
                    strategy,
                    iteration,
                    iterations,
                    trial.duration_ms,
                    trial.chunk_errors,
                )

        total_time = sum(measurements)

        return StrategyResult(
            strategy=StrategySummary(
                name=strategy.name,
                total_queries=total_queries,
                days_per_query=strategy.days_per_query,
                concurrency=strategy.concurrency,
            ),
            metrics=calculate_percentiles(measurements),
            measurements=tuple(measurements),
            total_time=total_time,
            average_time_per_query=total_time / (total_queries * iterations),
            errors=failed_trials,
            trials=tuple(trials),
        )

    async def optimize(self) -> OptimizationReport:
        """
        Evaluate every strategy, rank them and pick a recommendation.

        Returns:
            OptimizationReport with ranked results, recommendation and,
            when a results store is configured, the snapshot path

        Raises:
            ValueError: If there are no strategies to evaluate
        """
        strategies = self.strategies()
        if not strategies:
            raise ValueError(
                f"No strategies to evaluate for days_ahead={self.settings.days_ahead}"
            )

        log = get_optimization_logger("optimizer")
        log.info(
            "optimization_started",
            strategies=len(strategies),
            days_ahead=self.settings.days_ahead,
            iterations=self.settings.iterations,
        )

        if self.reporter:
            self.reporter.log_run_header(
                self.settings.endpoint or "",
                self.settings.days_ahead,
                self.settings.iterations,
                len(strategies),
            )

        results = []
        for strategy in strategies:
            results.append(await self.test_strategy(strategy))

        ranked = rank_results(results)
        recommendation = select_recommendation(ranked)

        log.info(
            "optimization_completed",
            recommendation=recommendation.strategy.name,
            p50_ms=recommendation.metrics.p50,
            failed_strategies=sum(1 for r in ranked if r.errors),
        )

        if self.reporter:
            self.reporter.log_summary(ranked)
            self.reporter.log_recommendation(recommendation)

        snapshot_path = None
        if self.results_store:
            snapshot_path = self.results_store.save(
                build_snapshot(self.settings.snapshot(), ranked, recommendation)
            )

        return OptimizationReport(
            results=ranked,
            recommendation=recommendation,
            snapshot_path=snapshot_path,
        )
