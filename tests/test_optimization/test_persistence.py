"""
Tests for the JSON results store.
"""

import json
import math
from datetime import UTC, datetime

from availability_optimizer.optimization.persistence import (
    JsonResultsStore,
    build_snapshot,
    sanitize_for_json,
)

FIXED_NOW = datetime(2024, 3, 5, 14, 30, tzinfo=UTC)


def test_sanitize_replaces_non_finite_floats():
    assert sanitize_for_json(
        {"a": math.nan, "b": [1.5, math.inf], "c": ("x", -math.inf), "d": 3}
    ) == {"a": None, "b": [1.5, None], "c": ["x", None], "d": 3}


def test_build_snapshot_layout(result_factory):
    best = result_factory(7, 3, [100.0, 110.0])
    broken = result_factory(1, 30, [None])

    snapshot = build_snapshot(
        {"days_ahead": 30}, [best, broken], best, timestamp=FIXED_NOW
    )

    assert snapshot["timestamp"] == "2024-03-05T14:30:00+00:00"
    assert snapshot["config"] == {"days_ahead": 30}
    assert snapshot["recommendation"]["name"] == "7d-3c"
    assert snapshot["results"][0]["metrics"]["p50"] == 105.0
    assert snapshot["results"][1]["trials"] == [
        {"iteration": 1, "duration_ms": None, "chunk_errors": 0}
    ]


class TestJsonResultsStore:
    def test_file_named_after_run_date(self, tmp_path):
        store = JsonResultsStore(tmp_path, clock=lambda: FIXED_NOW)

        path = store.save({"results": []})

        assert path == tmp_path / "optimization-results-2024-03-05.json"
        assert json.loads(path.read_text()) == {"results": []}

    def test_creates_missing_directory(self, tmp_path):
        store = JsonResultsStore(tmp_path / "nested" / "runs", clock=lambda: FIXED_NOW)

        path = store.save({"results": []})

        assert path.exists()

    def test_nan_written_as_null(self, tmp_path, result_factory):
        broken = result_factory(1, 30, [None, None])
        store = JsonResultsStore(tmp_path, clock=lambda: FIXED_NOW)

        path = store.save(build_snapshot({}, [broken], broken, timestamp=FIXED_NOW))

        text = path.read_text()
        assert "NaN" not in text
        document = json.loads(text)
        assert document["results"][0]["metrics"]["p50"] is None
        assert document["results"][0]["errors"] == 2
