"""
Tests for the bounded-concurrency executor.
"""

import asyncio
from dataclasses import FrozenInstanceError

import pytest
from structlog.testing import capture_logs

from availability_optimizer.optimization.date_ranges import generate_date_ranges
from availability_optimizer.optimization.executor import (
    build_query_variables,
    execute_queries_with_concurrency,
    run_with_concurrency,
)

BASE_VARIABLES = {
    "appointmentTypeId": "436561",
    "providerId": "6775393",
    "state": "CA",
    "timezone": "America/Chicago",
}


class TestRunWithConcurrency:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("concurrency,operations,expected", [(3, 10, 3), (20, 5, 5), (1, 4, 1)])
    async def test_in_flight_bounded_by_min_of_limit_and_count(
        self, concurrency, operations, expected
    ):
        in_flight = 0
        peak = 0

        async def operation():
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return True

        batch = await run_with_concurrency(
            [operation for _ in range(operations)], concurrency
        )

        assert peak == expected
        assert len(batch.results) == operations
        assert batch.errors == ()

    @pytest.mark.asyncio
    async def test_every_operation_runs_exactly_once(self):
        started: list[int] = []

        def make(index):
            async def operation():
                started.append(index)
                await asyncio.sleep(0)
                return index

            return operation

        batch = await run_with_concurrency([make(i) for i in range(12)], 5)

        assert sorted(started) == list(range(12))
        assert sorted(batch.results) == list(range(12))

    @pytest.mark.asyncio
    async def test_failures_are_isolated(self):
        async def ok():
            await asyncio.sleep(0)
            return "ok"

        async def boom():
            raise RuntimeError("boom")

        batch = await run_with_concurrency([ok, boom, ok, boom, ok], 2)

        assert batch.results == ("ok", "ok", "ok")
        assert batch.error_count == 2
        assert all(isinstance(e, RuntimeError) for e in batch.errors)

    @pytest.mark.asyncio
    async def test_failures_logged_as_one_warning(self):
        async def boom():
            raise RuntimeError("boom")

        with capture_logs() as logs:
            await run_with_concurrency([boom, boom], 2)

        warnings = [entry for entry in logs if entry["event"] == "batch_errors"]
        assert len(warnings) == 1
        assert warnings[0]["log_level"] == "warning"
        assert warnings[0]["error_count"] == 2
        assert warnings[0]["operations"] == 2
        assert warnings[0]["concurrency"] == 2
        assert warnings[0]["first_error"] == "boom"

    @pytest.mark.asyncio
    async def test_clean_batch_logs_no_warning(self):
        async def ok():
            return "ok"

        with capture_logs() as logs:
            await run_with_concurrency([ok, ok], 2)

        assert not [entry for entry in logs if entry["event"] == "batch_errors"]

    @pytest.mark.asyncio
    async def test_result_is_read_only(self):
        async def ok():
            return "ok"

        batch = await run_with_concurrency([ok], 1)

        assert isinstance(batch.results, tuple)
        assert isinstance(batch.errors, tuple)
        with pytest.raises(FrozenInstanceError):
            batch.results = ()

    @pytest.mark.asyncio
    async def test_window_slides_on_each_completion(self):
        """A queued operation starts as soon as any slot frees up."""
        third_started = asyncio.Event()

        async def slow():
            await third_started.wait()
            return "slow"

        async def fast():
            return "fast"

        async def third():
            third_started.set()
            return "third"

        batch = await asyncio.wait_for(
            run_with_concurrency([slow, fast, third], 2), timeout=1.0
        )

        assert batch.results == ("fast", "third", "slow")

    @pytest.mark.asyncio
    async def test_empty_batch(self):
        batch = await run_with_concurrency([], 3)

        assert batch.results == ()
        assert batch.errors == ()
        assert batch.duration_ms >= 0

    @pytest.mark.asyncio
    async def test_rejects_zero_concurrency(self):
        with pytest.raises(ValueError):
            await run_with_concurrency([], 0)

    @pytest.mark.asyncio
    async def test_measures_wall_clock(self):
        async def nap():
            await asyncio.sleep(0.02)

        batch = await run_with_concurrency([nap, nap], 2)

        assert 15 <= batch.duration_ms < 1000


def test_build_query_variables(today):
    (first,) = generate_date_ranges(7, 7, today=today)

    assert build_query_variables(first, BASE_VARIABLES) == {
        **BASE_VARIABLES,
        "startDate": "2024-01-01",
        "endDate": "2024-01-07",
    }


class TestExecuteQueriesWithConcurrency:
    @pytest.mark.asyncio
    async def test_one_fetch_per_range(self, today, fetcher_factory):
        fetcher = fetcher_factory(delay=0.005)
        ranges = generate_date_ranges(3, 30, today=today)

        batch = await execute_queries_with_concurrency(ranges, BASE_VARIABLES, 4, fetcher)

        assert len(fetcher.calls) == 10
        assert fetcher.max_in_flight == 4
        assert len(batch.results) == 10
        assert {call["startDate"] for call in fetcher.calls} == {
            r.to_dict()["start"] for r in ranges
        }
        assert all(call["providerId"] == "6775393" for call in fetcher.calls)

    @pytest.mark.asyncio
    async def test_failed_chunks_are_counted(self, today, fetcher_factory):
        fetcher = fetcher_factory(fail_on={"2024-01-08"})
        ranges = generate_date_ranges(7, 14, today=today)

        batch = await execute_queries_with_concurrency(ranges, BASE_VARIABLES, 2, fetcher)

        assert batch.error_count == 1
        assert len(batch.results) == 1
        assert "2024-01-08" in str(batch.errors[0])
