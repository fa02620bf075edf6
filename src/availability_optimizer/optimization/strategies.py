"""
Strategy catalog: candidate (days per query, concurrency) pairs to benchmark.

Two generation policies are kept side by side:
- grid: every chunk size crossed with a fixed menu of concurrency levels
- capped: one strategy per chunk size, concurrency = min(query count, cap)

The quick catalog is a fixed set of five strategies for fast iteration.
"""

import math
from enum import Enum

from availability_optimizer.optimization.models import Strategy

CHUNK_SIZES: tuple[int, ...] = (1, 2, 3, 5, 7, 10, 14, 21, 30)
CONCURRENCY_LEVELS: tuple[int, ...] = (1, 3, 5, 10, 20)
DEFAULT_MAX_CONCURRENCY = 30


class StrategyPolicy(str, Enum):
    """Supported strategy-generation policies."""

    GRID = "grid"
    CAPPED = "capped"
    QUICK = "quick"


def query_count(days_ahead: int, days_per_query: int) -> int:
    """Number of queries needed to cover days_ahead in days_per_query chunks."""
    return math.ceil(days_ahead / days_per_query)


def strategy_name(days_per_query: int, concurrency: int) -> str:
    return f"{days_per_query}d-{concurrency}c"


def generate_default_strategies(days_ahead: int) -> list[Strategy]:
    """
    Grid policy: chunk sizes x concurrency levels.

    Pairings where concurrency exceeds the number of queries the chunk
    size produces are dropped, since the extra slots would never be used.
    """
    strategies = []
    for chunk_size in (size for size in CHUNK_SIZES if size <= days_ahead):
        total_queries = query_count(days_ahead, chunk_size)
        for concurrency in CONCURRENCY_LEVELS:
            if concurrency > total_queries:
                continue
            strategies.append(
                Strategy(
                    name=strategy_name(chunk_size, concurrency),
                    days_per_query=chunk_size,
                    concurrency=concurrency,
                )
            )
    return strategies


def generate_capped_strategies(
    days_ahead: int,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
) -> list[Strategy]:
    """
    Capped policy: run every query of a chunk size at once, up to max_concurrency.
    """
    if max_concurrency < 1:
        raise ValueError(f"max_concurrency must be positive, got {max_concurrency}")

    strategies = []
    for chunk_size in (size for size in CHUNK_SIZES if size <= days_ahead):
        concurrency = min(query_count(days_ahead, chunk_size), max_concurrency)
        strategies.append(
            Strategy(
                name=strategy_name(chunk_size, concurrency),
                days_per_query=chunk_size,
                concurrency=concurrency,
            )
        )
    return strategies


def get_quick_strategies() -> list[Strategy]:
    """Five hand-picked strategies from full parallelism down to a single query."""
    return [
        Strategy(name="single-day-high", days_per_query=1, concurrency=30),
        Strategy(name="three-day-high", days_per_query=3, concurrency=10),
        Strategy(name="weekly-medium", days_per_query=7, concurrency=4),
        Strategy(name="biweekly-low", days_per_query=14, concurrency=2),
        Strategy(name="monthly-single", days_per_query=30, concurrency=1),
    ]


def build_strategies(
    policy: StrategyPolicy | str,
    days_ahead: int,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
) -> list[Strategy]:
    """Resolve a policy name to its strategy list."""
    policy = StrategyPolicy(policy)
    if policy is StrategyPolicy.GRID:
        return generate_default_strategies(days_ahead)
    if policy is StrategyPolicy.CAPPED:
        return generate_capped_strategies(days_ahead, max_concurrency)
    return get_quick_strategies()
