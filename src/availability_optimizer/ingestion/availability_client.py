"""
Production availability client.

Applies a chosen (days per query, max concurrency) strategy, usually the
one recommended by the optimizer, to real lookups:

    async with AiohttpClient() as http:
        fetcher = GraphQLAvailabilityFetcher(http, endpoint, headers=auth_headers)
        client = AvailabilityClient(
            AvailabilityClientConfig(endpoint, days_per_query=7, max_concurrency=4),
            fetcher,
        )
        results = await client.query_availability(base_variables, days_ahead=30)
        slots = collect_slots(results)

Requests go out in fixed batches of max_concurrency; the next batch starts
after the previous one has fully settled, optionally after request_delay
seconds. Failures are captured per result, never raised.
"""

import asyncio
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from availability_optimizer.infrastructure.observability import get_ingestion_logger
from availability_optimizer.ingestion.adapters.graphql.exceptions import (
    AvailabilityQueryError,
    GraphQLResponseError,
)
from availability_optimizer.ingestion.config.value_objects import (
    AvailabilityClientConfig,
)
from availability_optimizer.optimization.date_ranges import generate_date_ranges
from availability_optimizer.optimization.executor import build_query_variables
from availability_optimizer.optimization.models import DateRange
from availability_optimizer.optimization.ports import IQueryFetcher


@dataclass(frozen=True)
class AvailabilityResult:
    """Outcome of one date-range query."""

    date_range: DateRange
    data: Any = None
    errors: list[dict[str, Any]] = field(default_factory=list)
    execution_time_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return not self.errors


class AvailabilityClient:
    """
    Queries availability over a span of days with batched concurrency.

    Single Responsibility: Chunk the span and schedule chunk requests.
    Does NOT build requests or parse responses (delegated to the fetcher).
    """

    def __init__(self, config: AvailabilityClientConfig, fetcher: IQueryFetcher):
        """
        Args:
            config: Strategy and pacing configuration
            fetcher: Collaborator performing one chunk request
        """
        self.config = config
        self.fetcher = fetcher
        self.log = get_ingestion_logger(
            "availability-client",
            days_per_query=config.days_per_query,
            max_concurrency=config.max_concurrency,
        )

    async def query_availability(
        self,
        base_variables: Mapping[str, str],
        days_ahead: int,
        start: date | None = None,
    ) -> list[AvailabilityResult]:
        """
        Query availability for days_ahead days starting at `start` (default today).

        Returns:
            One AvailabilityResult per date range, in range order
        """
        ranges = generate_date_ranges(self.config.days_per_query, days_ahead, start)
        self.log.info(
            "querying_availability",
            days_ahead=days_ahead,
            queries=len(ranges),
        )
        return await self._execute_in_batches(base_variables, ranges)

    async def _execute_in_batches(
        self, base_variables: Mapping[str, str], ranges: list[DateRange]
    ) -> list[AvailabilityResult]:
        results: list[AvailabilityResult] = []
        batch_size = self.config.max_concurrency

        for offset in range(0, len(ranges), batch_size):
            batch = ranges[offset : offset + batch_size]
            results.extend(
                await asyncio.gather(
                    *(self._execute_one(base_variables, r) for r in batch)
                )
            )

            more_batches = offset + batch_size < len(ranges)
            if self.config.request_delay > 0 and more_batches:
                await asyncio.sleep(self.config.request_delay)

        failed = sum(1 for result in results if not result.ok)
        if failed:
            self.log.warning("queries_failed", failed=failed, total=len(results))

        return results

    async def _execute_one(
        self, base_variables: Mapping[str, str], date_range: DateRange
    ) -> AvailabilityResult:
        start = time.perf_counter()
        try:
            data = await self.fetcher.fetch(
                build_query_variables(date_range, base_variables)
            )
        except GraphQLResponseError as e:
            errors = e.errors or [{"message": str(e)}]
        except AvailabilityQueryError as e:
            errors = [{"message": str(e), "status_code": e.status_code}]
        except Exception as e:
            errors = [{"message": str(e)}]
        else:
            return AvailabilityResult(
                date_range=date_range,
                data=data,
                execution_time_ms=_elapsed_ms(start),
            )

        return AvailabilityResult(
            date_range=date_range,
            errors=errors,
            execution_time_ms=_elapsed_ms(start),
        )


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


def collect_slots(results: list[AvailabilityResult]) -> list[dict[str, Any]]:
    """Flatten availableSlotsForRange rows from successful results."""
    slots: list[dict[str, Any]] = []
    for result in results:
        if result.ok and isinstance(result.data, dict):
            slots.extend(result.data.get("availableSlotsForRange") or [])
    return slots
