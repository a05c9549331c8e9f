from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from console.history import HISTORY_CAPACITY, HistoryBuffer, history_point


def _stats(i: int) -> dict:
    return {
        "timestamp": 1700000000 + i,
        "total_requests": i,
        "requests_by_app": {"google.com": i * 2},
        "errors_by_app": {},
    }


def test_history_keeps_most_recent_twenty_oldest_first() -> None:
    buffer = HistoryBuffer()
    for i in range(25):
        assert buffer.record(_stats(i))

    points = buffer.points()
    assert len(points) == HISTORY_CAPACITY == 20
    assert [p["requests"] for p in points] == list(range(5, 25))


def test_missing_timestamp_is_skipped() -> None:
    buffer = HistoryBuffer()
    buffer.record(_stats(1))

    assert buffer.record({"error": "Stats not found"}) is False
    assert buffer.record({"total_requests": 3}) is False
    assert buffer.record({"timestamp": 0, "total_requests": 3}) is False

    assert len(buffer) == 1


def test_point_carries_time_requests_and_domains() -> None:
    point = history_point(_stats(3))
    assert point["requests"] == 3
    assert point["google.com"] == 6
    assert point["time"] == datetime.fromtimestamp(1700000003).strftime("%H:%M:%S")


def test_axis_keys_win_over_domain_names() -> None:
    point = history_point({"timestamp": 1700000000, "total_requests": 7, "requests_by_app": {"requests": 99}})
    assert point["requests"] == 7


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        HistoryBuffer(0)
