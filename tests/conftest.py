"""
Shared fixtures for optimizer tests.
"""

import asyncio
from datetime import date
from typing import Any

import pytest

from availability_optimizer.config.state import OptimizerSettings
from availability_optimizer.optimization.models import (
    StrategyResult,
    StrategySummary,
    TrialMeasurement,
)
from availability_optimizer.optimization.stats import calculate_percentiles


class RecordingFetcher:
    """
    In-memory IQueryFetcher.

    Records every variables dict it receives and tracks how many fetches
    were in flight at once. Fails for any startDate listed in fail_on.
    """

    def __init__(self, delay: float = 0.0, fail_on: set[str] | None = None):
        self.delay = delay
        self.fail_on = fail_on or set()
        self.calls: list[dict[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, variables: dict[str, str]) -> Any:
        self.calls.append(variables)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if variables.get("startDate") in self.fail_on:
                raise RuntimeError(f"chunk {variables['startDate']} failed")
            return {
                "availableSlotsForRange": [
                    {"date": variables.get("startDate"), "is_available": True}
                ]
            }
        finally:
            self.in_flight -= 1


@pytest.fixture
def today() -> date:
    return date(2024, 1, 1)


@pytest.fixture
def recording_fetcher() -> RecordingFetcher:
    return RecordingFetcher()


@pytest.fixture
def settings(tmp_path) -> OptimizerSettings:
    """Small, fast run configuration writing into a temp directory."""
    return OptimizerSettings(
        endpoint="https://api.example.com/graphql",
        days_ahead=14,
        iterations=2,
        results_dir=str(tmp_path),
    )


@pytest.fixture
def result_factory():
    """Build a StrategyResult from trial durations (None marks a failed trial)."""

    def build(
        days_per_query: int,
        concurrency: int,
        durations: list[float | None],
        name: str | None = None,
        total_queries: int = 1,
    ) -> StrategyResult:
        measurements = [d for d in durations if d is not None]
        total_time = sum(measurements)
        return StrategyResult(
            strategy=StrategySummary(
                name=name or f"{days_per_query}d-{concurrency}c",
                total_queries=total_queries,
                days_per_query=days_per_query,
                concurrency=concurrency,
            ),
            metrics=calculate_percentiles(measurements),
            measurements=tuple(measurements),
            total_time=total_time,
            average_time_per_query=total_time / (total_queries * len(durations)),
            errors=sum(1 for d in durations if d is None),
            trials=tuple(
                TrialMeasurement(iteration=i, duration_ms=d)
                for i, d in enumerate(durations, start=1)
            ),
        )

    return build


@pytest.fixture
def fetcher_factory():
    """RecordingFetcher class, for tests that need a delay or failing chunks."""
    return RecordingFetcher
