"""
Results persistence: one JSON snapshot per optimizer run.

Document layout:
    {
        "timestamp": "2024-01-01T12:00:00+00:00",
        "config": {...},            # run inputs
        "results": [...],           # ranked StrategyResult records
        "recommendation": {...}     # recommended strategy summary
    }

Non-finite floats (statistics over zero successful trials) are written
as null so the document stays valid JSON.
"""

import json
import math
from collections.abc import Callable
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any

from availability_optimizer.common.utils.date_utils import format_date, utc_now
from availability_optimizer.infrastructure.observability import get_reporting_logger
from availability_optimizer.optimization.models import StrategyResult

RESULTS_FILE_PREFIX = "optimization-results"


def build_snapshot(
    config: dict[str, Any],
    results: list[StrategyResult],
    recommendation: StrategyResult,
    timestamp: datetime | None = None,
) -> dict[str, Any]:
    """Assemble the run document from inputs and ranked outputs."""
    timestamp = timestamp or utc_now()
    return {
        "timestamp": timestamp.isoformat(),
        "config": config,
        "results": [asdict(result) for result in results],
        "recommendation": asdict(recommendation.strategy),
    }


def sanitize_for_json(value: Any) -> Any:
    """Recursively replace nan/inf with None."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: sanitize_for_json(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [sanitize_for_json(item) for item in value]
    return value


class JsonResultsStore:
    """
    Writes run snapshots as pretty-printed JSON.

    Implements IResultsStore protocol. The file name is derived from the
    snapshot date: <results_dir>/optimization-results-YYYY-MM-DD.json.
    A second run on the same day overwrites the first.
    """

    def __init__(
        self,
        results_dir: str | Path = ".",
        clock: Callable[[], datetime] = utc_now,
    ):
        self.results_dir = Path(results_dir)
        self.clock = clock

    def path_for(self, moment: datetime) -> Path:
        return self.results_dir / f"{RESULTS_FILE_PREFIX}-{format_date(moment)}.json"

    def save(self, snapshot: dict[str, Any]) -> Path:
        path = self.path_for(self.clock())
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(sanitize_for_json(snapshot), f, indent=2, allow_nan=False)

        get_reporting_logger("results-store").info(
            "results_saved",
            path=str(path),
            strategies=len(snapshot.get("results", [])),
        )
        return path
