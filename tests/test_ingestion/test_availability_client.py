"""
Tests for the production availability client.
"""

from unittest.mock import AsyncMock, patch

import pytest

from availability_optimizer.ingestion.adapters.graphql import (
    GraphQLResponseError,
    ServerError,
)
from availability_optimizer.ingestion.availability_client import (
    AvailabilityClient,
    AvailabilityResult,
    collect_slots,
)
from availability_optimizer.ingestion.config.value_objects import (
    AvailabilityClientConfig,
)
from availability_optimizer.optimization.date_ranges import generate_date_ranges

ENDPOINT = "https://api.example.com/graphql"
BASE_VARIABLES = {
    "appointmentTypeId": "436561",
    "providerId": "6775393",
    "state": "CA",
    "timezone": "America/Chicago",
}


def client_config(**kwargs):
    return AvailabilityClientConfig(endpoint=ENDPOINT, **kwargs)


class TestQueryAvailability:
    @pytest.mark.asyncio
    async def test_results_follow_range_order(self, fetcher_factory, today):
        fetcher = fetcher_factory(delay=0.001)
        client = AvailabilityClient(client_config(days_per_query=7, max_concurrency=2), fetcher)

        results = await client.query_availability(BASE_VARIABLES, days_ahead=30, start=today)

        assert [r.date_range.to_dict()["start"] for r in results] == [
            "2024-01-01",
            "2024-01-08",
            "2024-01-15",
            "2024-01-22",
            "2024-01-29",
        ]
        assert all(r.ok for r in results)
        assert fetcher.max_in_flight == 2
        assert fetcher.calls[0]["endDate"] == "2024-01-07"

    @pytest.mark.asyncio
    async def test_failures_captured_not_raised(self, today):
        fetcher = AsyncMock()
        fetcher.fetch.side_effect = [
            {"availableSlotsForRange": [{"date": "2024-01-01"}]},
            ServerError("HTTP error! status: 502", status_code=502, endpoint=ENDPOINT),
            GraphQLResponseError("GraphQL errors", errors=[{"message": "bad provider"}]),
        ]
        client = AvailabilityClient(client_config(days_per_query=1, max_concurrency=1), fetcher)

        results = await client.query_availability(BASE_VARIABLES, days_ahead=3, start=today)

        assert [r.ok for r in results] == [True, False, False]
        assert results[1].errors == [
            {"message": "HTTP error! status: 502", "status_code": 502}
        ]
        assert results[2].errors == [{"message": "bad provider"}]
        assert all(r.execution_time_ms >= 0 for r in results)

    @pytest.mark.asyncio
    async def test_unexpected_fetcher_error_is_captured(self, fetcher_factory, today):
        fetcher = fetcher_factory(fail_on={"2024-01-02"})
        client = AvailabilityClient(client_config(days_per_query=1, max_concurrency=3), fetcher)

        results = await client.query_availability(BASE_VARIABLES, days_ahead=3, start=today)

        assert [r.ok for r in results] == [True, False, True]
        assert results[1].errors == [{"message": "chunk 2024-01-02 failed"}]
        assert results[0].data["availableSlotsForRange"][0]["date"] == "2024-01-01"
        assert len(fetcher.calls) == 3

    @pytest.mark.asyncio
    async def test_delay_between_batches_only(self, today):
        fetcher = AsyncMock()
        fetcher.fetch.return_value = {"availableSlotsForRange": []}
        client = AvailabilityClient(
            client_config(days_per_query=1, max_concurrency=2, request_delay=0.25),
            fetcher,
        )

        with patch(
            "availability_optimizer.ingestion.availability_client.asyncio.sleep",
            new=AsyncMock(),
        ) as sleep:
            results = await client.query_availability(
                BASE_VARIABLES, days_ahead=5, start=today
            )

        assert len(results) == 5
        assert sleep.await_count == 2
        sleep.assert_awaited_with(0.25)


def test_collect_slots_skips_failures(today):
    first, second = generate_date_ranges(1, 2, today=today)
    results = [
        AvailabilityResult(
            date_range=first,
            data={"availableSlotsForRange": [{"date": "a"}, {"date": "b"}]},
        ),
        AvailabilityResult(date_range=second, errors=[{"message": "down"}]),
    ]

    assert collect_slots(results) == [{"date": "a"}, {"date": "b"}]


@pytest.mark.parametrize(
    "kwargs",
    [{"days_per_query": 0}, {"max_concurrency": 0}, {"request_delay": -1.0}],
)
def test_client_config_validation(kwargs):
    with pytest.raises(ValueError):
        client_config(**kwargs)
