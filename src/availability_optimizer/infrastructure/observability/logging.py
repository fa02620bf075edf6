"""
Structured logging for the availability optimizer.

Every entry is an event name plus key/value context:

    {
        "app": "availability-optimizer",
        "layer": "optimization",
        "component": "optimizer",
        "strategy": "7d-3c",
        "event": "trial_failed",
        "iteration": 2,
        "error": "...",
        "severity": "ERROR"
    }

Layers:
    - infrastructure: config, persistence plumbing
    - ingestion: GraphQL fetcher, HTTP transport, availability client
    - optimization: partitioning, bounded execution, statistics, ranking
    - reporting: console reporter, results store
    - cli: command line entrypoint

Console tables from the reporter bypass structlog and use plain stdlib
loggers; both end up on the same root handler.
"""

import logging
import sys
from typing import Any, Literal

import structlog
from structlog.types import EventDict, Processor

Layer = Literal["infrastructure", "ingestion", "optimization", "reporting", "cli"]

APP_NAME = "availability-optimizer"

_SEVERITY_BY_LEVEL = {
    "debug": "DEBUG",
    "info": "INFO",
    "warning": "WARNING",
    "error": "ERROR",
    "critical": "CRITICAL",
}


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Stamp the application name so optimizer runs can be filtered out of shared logs."""
    event_dict.setdefault("app", APP_NAME)
    return event_dict


def add_severity_level(
    logger: Any, method_name: str, event_dict: EventDict
) -> EventDict:
    """Mirror structlog's lowercase level as an upper-case `severity` field."""
    if "level" in event_dict:
        event_dict["severity"] = _SEVERITY_BY_LEVEL.get(event_dict["level"], "INFO")
    return event_dict


def _build_processors(json_logs: bool, include_timestamp: bool) -> list[Processor]:
    processors: list[Processor] = []
    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    processors += [
        structlog.contextvars.merge_contextvars,
        add_app_context,
        structlog.stdlib.add_log_level,
        add_severity_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        )
    return processors


def setup_logging(
    level: str = "INFO",
    json_logs: bool = True,
    include_timestamp: bool = True,
) -> None:
    """
    Route structlog through stdlib logging on stdout.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL; unknown names mean INFO
        json_logs: JSON lines when True, colored console output otherwise
        include_timestamp: Prefix every entry with an ISO timestamp

    Usage:
        >>> setup_logging(level="DEBUG", json_logs=False)
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger().setLevel(log_level)

    structlog.configure(
        processors=_build_processors(json_logs, include_timestamp),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(
    name: str | None = None,
    layer: Layer | None = None,
    component: str | None = None,
    **initial_context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Logger bound to its place in the architecture.

    Args:
        name: stdlib logger name, also bound as `module`
        layer: Architectural layer
        component: Component within the layer
        **initial_context: Extra key/value pairs bound to every entry

    Usage:
        >>> log = get_logger(__name__, layer="cli", component="optimize")
        >>> log.error("configuration_error", error="...")
    """
    bound = {
        key: value
        for key, value in (("layer", layer), ("component", component), ("module", name))
        if value
    }
    bound.update(initial_context)

    logger = structlog.get_logger(name)
    return logger.bind(**bound) if bound else logger


# ============================================================================
# Layer-Specific Logger Factories
# ============================================================================


def get_ingestion_logger(
    component: str,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Logger for the ingestion layer.

    Usage:
        >>> log = get_ingestion_logger("graphql-fetcher", endpoint="https://...")
        >>> log.debug("query_sent", start_date="2024-01-01")
    """
    return get_logger("ingestion", layer="ingestion", component=component, **context)


def get_optimization_logger(
    component: str,
    strategy: str | None = None,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Logger for the optimization layer.

    Args:
        component: "executor", "optimizer", ...
        strategy: Name of the strategy under test, when there is one
        **context: Extra context such as concurrency or days_per_query
    """
    if strategy:
        context = {"strategy": strategy, **context}
    return get_logger(
        "optimization", layer="optimization", component=component, **context
    )


def get_reporting_logger(
    component: str,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """Logger for the reporting layer (console reporter, results store)."""
    return get_logger("reporting", layer="reporting", component=component, **context)
