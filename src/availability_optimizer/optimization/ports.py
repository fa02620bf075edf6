"""Optimization abstractions.

Separates orchestration logic from its collaborators:
- Query fetching: How one date-range chunk is requested
- Reporting: How progress and results are presented
- Result storage: How a run snapshot is persisted
"""

from pathlib import Path
from typing import Any, Protocol

from availability_optimizer.optimization.models import Strategy, StrategyResult


class IQueryFetcher(Protocol):
    """Abstraction for fetching one chunk of availability.

    Single Responsibility: Execute one request for one set of query variables.
    The optimizer only observes latency and success/failure; the payload
    shape is opaque.
    """

    async def fetch(self, variables: dict[str, str]) -> Any:
        """Fetch availability for one date range.

        Args:
            variables: Base query variables plus startDate/endDate

        Returns:
            Parsed response payload

        Raises:
            AvailabilityQueryError: On transport, HTTP or GraphQL failures
        """
        ...


class IOptimizationReporter(Protocol):
    """Abstraction for reporting optimizer progress and results.

    Single Responsibility: Format and present progress/results.
    Does NOT make ranking decisions.
    """

    def log_run_header(
        self, endpoint: str, days_ahead: int, iterations: int, strategy_count: int
    ) -> None:
        ...

    def log_strategy_start(
        self, strategy: Strategy, total_queries: int, iterations: int
    ) -> None:
        ...

    def log_iteration(
        self,
        strategy: Strategy,
        iteration: int,
        iterations: int,
        duration_ms: float | None,
        chunk_errors: int = 0,
    ) -> None:
        """Report one finished trial; duration_ms is None for a failed trial."""
        ...

    def log_summary(self, results: list[StrategyResult]) -> None:
        """Render the ranked results table."""
        ...

    def log_recommendation(self, recommendation: StrategyResult) -> None:
        ...


class IResultsStore(Protocol):
    """Abstraction for persisting a run snapshot.

    Single Responsibility: Serialize {timestamp, config, results,
    recommendation} somewhere durable.
    """

    def save(self, snapshot: dict[str, Any]) -> Path:
        """Persist the snapshot and return where it was written."""
        ...
