#!/usr/bin/env python3
"""
Availability query optimizer command line.

Benchmarks chunk-size/concurrency strategies against a GraphQL endpoint,
prints a ranked table and saves a JSON snapshot of the run.

Examples:
    availability-optimizer --endpoint https://api.example.com/graphql
    availability-optimizer --quick --days 14 --iterations 3
    GRAPHQL_ENDPOINT=https://api.example.com/graphql availability-optimizer --policy capped
"""

import argparse
import asyncio
import sys
from collections.abc import Sequence
from typing import Any

from dotenv import load_dotenv

from availability_optimizer.config.state import (
    ConfigurationError,
    OptimizerSettings,
    get_config,
)
from availability_optimizer.infrastructure.observability import (
    get_logger,
    setup_logging,
)
from availability_optimizer.optimization.dependency_container import (
    OptimizerDependencyContainer,
)
from availability_optimizer.optimization.models import OptimizationReport
from availability_optimizer.optimization.reporter import OptimizationReporter
from availability_optimizer.optimization.strategies import StrategyPolicy


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="availability-optimizer",
        description="Find the fastest chunking/concurrency strategy for availability queries",
    )
    parser.add_argument(
        "-e",
        "--endpoint",
        help="GraphQL endpoint URL (defaults to GRAPHQL_ENDPOINT)",
    )
    parser.add_argument("-p", "--provider", help="Provider ID (default: 6775393)")
    parser.add_argument(
        "-a", "--appointment", help="Appointment type ID (default: 436561)"
    )
    parser.add_argument("-s", "--state", help="State code (default: CA)")
    parser.add_argument(
        "-t", "--timezone", help="IANA timezone (default: America/Chicago)"
    )
    parser.add_argument(
        "-d", "--days", type=int, help="Days ahead to query (default: 30)"
    )
    parser.add_argument(
        "-i",
        "--iterations",
        type=int,
        help="Trials per strategy (default: 5)",
    )
    parser.add_argument(
        "--quick",
        action="store_true",
        help="Test the five quick strategies only",
    )
    parser.add_argument(
        "--policy",
        choices=[StrategyPolicy.GRID.value, StrategyPolicy.CAPPED.value],
        help="Strategy generation policy (default: grid)",
    )
    parser.add_argument(
        "--results-dir", help="Directory for the JSON results file (default: .)"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        default=None,
        help="Emit structured logs as JSON",
    )
    return parser


def build_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Map parsed flags onto the settings layout; unset flags stay None."""
    policy = StrategyPolicy.QUICK.value if args.quick else args.policy
    return {
        "endpoint": args.endpoint,
        "base_variables": {
            "provider_id": args.provider,
            "appointment_type_id": args.appointment,
            "state": args.state,
            "timezone": args.timezone,
        },
        "days_ahead": args.days,
        "iterations": args.iterations,
        "strategy_policy": policy,
        "results_dir": args.results_dir,
        "logging": {"level": args.log_level, "json_logs": args.json_logs},
    }


async def run_optimization(settings: OptimizerSettings) -> OptimizationReport:
    async with OptimizerDependencyContainer(settings) as container:
        optimizer = container.create_optimizer()
        return await optimizer.optimize()


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    load_dotenv()

    try:
        settings = get_config(overrides=build_overrides(args))
        settings.require_endpoint()
    except ConfigurationError as e:
        setup_logging(level=args.log_level or "INFO", json_logs=False)
        get_logger(__name__, layer="cli", component="optimize").error(
            "configuration_error", error=str(e)
        )
        return 1

    setup_logging(
        level=settings.logging.level,
        json_logs=settings.logging.json_logs,
        include_timestamp=settings.logging.include_timestamp,
    )
    log = get_logger(__name__, layer="cli", component="optimize")

    try:
        report = asyncio.run(run_optimization(settings))
    except Exception as e:
        log.error("optimization_failed", error=str(e), exc_info=True)
        return 1

    reporter = OptimizationReporter()
    reporter.log_top_strategies(report.results, limit=5)
    reporter.log_implementation_hint(report.recommendation)
    reporter.log_improvement(report.results, report.recommendation)

    log.info(
        "run_completed",
        recommendation=report.recommendation.strategy.name,
        results_file=str(report.snapshot_path) if report.snapshot_path else None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
