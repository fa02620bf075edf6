"""
Bounded-concurrency batch executor.

Responsibility: Run independent async operations with at most N in flight.
Does NOT retry, cancel, or time out operations.

A fixed pool of min(N, K) workers pulls from a shared queue. A worker
starts the next queued operation as soon as its current one settles,
so the window slides on every completion instead of waiting for a
whole batch to drain:

    concurrency=3, 7 operations
    worker 0: op0 ----> op3 --> op6
    worker 1: op1 -> op4 -------->
    worker 2: op2 ------> op5 --->
"""

import asyncio
import functools
import time
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any, TypeVar

from availability_optimizer.common.utils.date_utils import format_date
from availability_optimizer.infrastructure.observability import get_optimization_logger
from availability_optimizer.optimization.models import BatchResult, DateRange
from availability_optimizer.optimization.ports import IQueryFetcher

T = TypeVar("T")

Operation = Callable[[], Awaitable[T]]


async def run_with_concurrency(
    operations: Sequence[Operation[T]],
    concurrency: int,
) -> BatchResult[T]:
    """
    Execute operations with at most `concurrency` of them in flight.

    Every operation is started exactly once. A failing operation is
    recorded in `errors` and never affects its siblings. The call
    returns once every operation has settled.

    Args:
        operations: Zero-argument async callables
        concurrency: Maximum number of simultaneously running operations

    Returns:
        BatchResult with successful results (completion order), errors,
        and elapsed wall-clock milliseconds from first dispatch to last completion

    Raises:
        ValueError: If concurrency < 1
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be at least 1, got {concurrency}")

    queue: asyncio.Queue[Operation[T]] = asyncio.Queue()
    for operation in operations:
        queue.put_nowait(operation)

    results: list[T] = []
    errors: list[BaseException] = []

    async def worker() -> None:
        while True:
            try:
                operation = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            try:
                results.append(await operation())
            except Exception as e:
                errors.append(e)

    worker_count = min(concurrency, queue.qsize())

    start = time.perf_counter()
    await asyncio.gather(*(worker() for _ in range(worker_count)))
    duration_ms = (time.perf_counter() - start) * 1000

    if errors:
        get_optimization_logger("executor", concurrency=concurrency).warning(
            "batch_errors",
            error_count=len(errors),
            operations=len(operations),
            first_error=str(errors[0]),
        )

    return BatchResult(
        results=tuple(results), errors=tuple(errors), duration_ms=duration_ms
    )


def build_query_variables(
    date_range: DateRange, base_variables: Mapping[str, str]
) -> dict[str, str]:
    """Merge base variables with the range's startDate/endDate."""
    return {
        **base_variables,
        "startDate": format_date(date_range.start),
        "endDate": format_date(date_range.end),
    }


async def execute_queries_with_concurrency(
    ranges: Sequence[DateRange],
    base_variables: Mapping[str, str],
    concurrency: int,
    fetcher: IQueryFetcher,
) -> BatchResult[Any]:
    """
    Fetch every date range through `fetcher` with bounded concurrency.

    Args:
        ranges: Date ranges to query, one request each
        base_variables: Query variables shared by every request
        concurrency: Maximum requests in flight
        fetcher: Collaborator performing one request

    Returns:
        BatchResult of the fetched payloads
    """
    operations = [
        functools.partial(fetcher.fetch, build_query_variables(r, base_variables))
        for r in ranges
    ]

    log = get_optimization_logger("executor", concurrency=concurrency)
    log.debug("batch_started", queries=len(operations))
    batch = await run_with_concurrency(operations, concurrency)
    log.debug(
        "batch_completed",
        queries=len(operations),
        succeeded=len(batch.results),
        failed=batch.error_count,
        duration_ms=round(batch.duration_ms, 2),
    )
    return batch
