from __future__ import annotations

import json
import shutil
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from control.models import Outcome
from control.services.telemetry_source import CommandTail, FileTail, TelemetrySource, build_tailer


@pytest.fixture()
def source(tmp_path: Path) -> TelemetrySource:
    return TelemetrySource(tmp_path / "stats.json", tmp_path / "traffic.log")


def _write_stats(source: TelemetrySource, payload) -> None:
    source.stats_file.write_text(json.dumps(payload), encoding="utf-8")


def test_snapshot_missing_file(source: TelemetrySource) -> None:
    assert source.get_snapshot().outcome == Outcome.NOT_FOUND


def test_snapshot_empty_file_counts_as_missing(source: TelemetrySource) -> None:
    source.stats_file.write_text("", encoding="utf-8")
    assert source.get_snapshot().outcome == Outcome.NOT_FOUND


def test_snapshot_half_written_file_is_parse_error(source: TelemetrySource) -> None:
    source.stats_file.write_text('{"timestamp": 17000', encoding="utf-8")
    result = source.get_snapshot()
    assert result.outcome == Outcome.PARSE_ERROR
    assert result.detail


@pytest.mark.parametrize(
    "payload",
    [
        [1, 2, 3],
        {"total_requests": 5},
        {"timestamp": 1700000000, "total_requests": "lots"},
        {"timestamp": 1700000000, "total_requests": 5, "requests_by_app": {"a": "x"}},
        {"timestamp": 1700000000, "total_requests": -1},
    ],
)
def test_snapshot_wrong_shape_is_parse_error(source: TelemetrySource, payload) -> None:
    _write_stats(source, payload)
    assert source.get_snapshot().outcome == Outcome.PARSE_ERROR


def test_snapshot_valid_payload_is_forwarded(source: TelemetrySource) -> None:
    _write_stats(
        source,
        {
            "timestamp": 1700000000,
            "total_requests": 100,
            "requests_by_app": {"google.com": 60, "slack.com": 40},
            "errors_by_app": {"slack.com": 25},
            "uptime": 12,
        },
    )
    result = source.get_snapshot()

    assert result.ok
    dumped = result.value.model_dump()
    assert dumped["timestamp"] == 1700000000
    assert dumped["requests_by_app"] == {"google.com": 60, "slack.com": 40}
    assert dumped["errors_by_app"] == {"slack.com": 25}
    assert dumped["uptime"] == 12


def test_snapshot_maps_default_to_empty(source: TelemetrySource) -> None:
    _write_stats(source, {"timestamp": 1700000000.5, "total_requests": 0})
    snapshot = source.get_snapshot().value
    assert snapshot.requests_by_app == {}
    assert snapshot.errors_by_app == {}


def test_log_tail_missing_file_is_empty(source: TelemetrySource) -> None:
    result = source.get_log_tail()
    assert result.ok
    assert result.value == []


def test_log_tail_returns_last_non_empty_lines_in_order(source: TelemetrySource) -> None:
    lines = []
    for i in range(60):
        lines.append(f"event {i}")
        if i % 10 == 0:
            lines.append("")
    source.log_file.write_text("\n".join(lines) + "\n", encoding="utf-8")

    tail = source.get_log_tail(50).value

    assert len(tail) == 50
    assert tail[0] == "event 10"
    assert tail[-1] == "event 59"


def test_log_tail_short_file(source: TelemetrySource) -> None:
    source.log_file.write_text("one\ntwo\n", encoding="utf-8")
    assert source.get_log_tail(50).value == ["one", "two"]


def test_build_tailer_defaults_to_file() -> None:
    assert isinstance(build_tailer("file"), FileTail)
    assert isinstance(build_tailer("bogus"), FileTail)
    assert isinstance(build_tailer("command"), CommandTail)


@pytest.mark.skipif(shutil.which("tail") is None, reason="tail binary not available")
def test_command_tail_matches_file_tail(tmp_path: Path) -> None:
    log = tmp_path / "traffic.log"
    log.write_text("\n".join(f"line {i}" if i % 3 else "" for i in range(200)) + "\n", encoding="utf-8")

    assert CommandTail().read(log, 50) == FileTail().read(log, 50)


def test_command_tail_keeps_whitespace_only_lines_like_file_tail(tmp_path: Path) -> None:
    log = tmp_path / "traffic.log"
    log.write_text("".join(f"line {i}\n   \n" for i in range(60)), encoding="utf-8")

    expected = FileTail().read(log, 50)

    assert expected[0] == "line 35"
    assert "   " in expected
    assert CommandTail().read(log, 50) == expected


def test_command_tail_failure_is_read_failure(tmp_path: Path) -> None:
    source = TelemetrySource(
        tmp_path / "stats.json",
        tmp_path / "traffic.log",
        tailer=CommandTail(binary=str(tmp_path / "no-such-tail")),
    )
    source.log_file.write_text("x\n", encoding="utf-8")

    result = source.get_log_tail()

    assert result.outcome == Outcome.READ_FAILED
