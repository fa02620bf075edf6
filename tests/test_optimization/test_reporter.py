"""
Tests for the console reporter.
"""

import logging

import pytest

from availability_optimizer.optimization.models import Strategy
from availability_optimizer.optimization.reporter import (
    TABLE_HEADER,
    OptimizationReporter,
    format_result_row,
    improvement_over_baseline,
)

REPORTER_LOGGER = "availability_optimizer.optimization.reporter"


@pytest.fixture
def reporter_log(caplog):
    caplog.set_level(logging.INFO, logger=REPORTER_LOGGER)
    return caplog


def test_format_result_row(result_factory):
    result = result_factory(7, 3, [100.4, 200.6, None], total_queries=5)

    row = format_result_row(result)

    assert row.startswith("7d-3c            |       5 |      7 |    3 |")
    assert row.endswith("|      1")
    assert len(row.split("|")) == len(TABLE_HEADER.split("|"))


class TestImprovementOverBaseline:
    def test_percent_faster_than_monthly_single(self, result_factory):
        baseline = result_factory(30, 1, [1000.0])
        best = result_factory(7, 3, [250.0])

        assert improvement_over_baseline([best, baseline], best) == pytest.approx(75.0)

    def test_none_without_baseline(self, result_factory):
        best = result_factory(7, 3, [250.0])

        assert improvement_over_baseline([best], best) is None

    def test_none_when_baseline_never_succeeded(self, result_factory):
        baseline = result_factory(30, 1, [None])
        best = result_factory(7, 3, [250.0])

        assert improvement_over_baseline([best, baseline], best) is None


class TestOptimizationReporter:
    def test_iteration_lines(self, reporter_log):
        reporter = OptimizationReporter()
        strategy = Strategy("7d-3c", 7, 3)

        reporter.log_iteration(strategy, 1, 5, 123.456)
        reporter.log_iteration(strategy, 2, 5, None)
        reporter.log_iteration(strategy, 3, 5, 99.0, chunk_errors=2)

        assert reporter_log.messages == [
            "  - Iteration 1/5... 123.46ms",
            "  - Iteration 2/5... ERROR",
            "  - Iteration 3/5... 99.00ms (2 chunk errors)",
        ]

    def test_summary_table(self, reporter_log, result_factory):
        results = [result_factory(7, 3, [100.0]), result_factory(30, 1, [400.0])]

        OptimizationReporter().log_summary(results)

        assert reporter_log.messages[1] == TABLE_HEADER
        assert reporter_log.messages[3].startswith("7d-3c")
        assert reporter_log.messages[4].startswith("30d-1c")

    def test_recommendation_warns_when_it_had_failures(self, reporter_log, result_factory):
        OptimizationReporter().log_recommendation(result_factory(7, 3, [100.0, None]))

        warnings = [r for r in reporter_log.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "7d-3c" in warnings[0].getMessage()

    def test_implementation_hint(self, reporter_log, result_factory):
        OptimizationReporter().log_implementation_hint(result_factory(7, 4, [100.0]))

        assert "DAYS_PER_QUERY = 7" in reporter_log.messages
        assert "MAX_CONCURRENCY = 4" in reporter_log.messages

    def test_top_strategies_limited(self, reporter_log, result_factory):
        results = [result_factory(d, 1, [float(d)]) for d in (1, 2, 3, 5, 7, 10)]

        OptimizationReporter().log_top_strategies(results, limit=5)

        assert reporter_log.messages[0] == "Top 5 Strategies:"
        assert "5. 7d-1c" in reporter_log.messages
        assert not any(m.startswith("6.") for m in reporter_log.messages)

    def test_improvement_skipped_without_baseline(self, reporter_log, result_factory):
        best = result_factory(7, 3, [100.0])

        OptimizationReporter().log_improvement([best], best)

        assert reporter_log.messages == []
