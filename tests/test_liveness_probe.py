from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path
from types import SimpleNamespace

import psutil
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from control.models import RunState
from control.services.liveness_probe import ProcessTableProbe, SystemctlProbe, build_probe


def _runner_returning(output: str):
    calls = []

    def runner(cmd, timeout):
        calls.append(cmd)
        return output

    runner.calls = calls
    return runner


def _runner_raising(exc: Exception):
    def runner(cmd, timeout):
        raise exc

    return runner


@pytest.mark.parametrize(
    "output,expected",
    [
        ("active\n", RunState.RUNNING),
        ("inactive\n", RunState.STOPPED),
        ("failed\n", RunState.STOPPED),
        ("activating\n", RunState.STOPPED),
    ],
)
def test_systemctl_answers_map_to_run_state(output: str, expected: RunState) -> None:
    runner = _runner_returning(output)
    result = SystemctlProbe(runner=runner).query_status("sdwan-traffic-gen")

    assert result.state == expected
    assert result.error is None
    assert runner.calls == [["systemctl", "is-active", "sdwan-traffic-gen"]]


def test_systemctl_empty_answer_is_unknown() -> None:
    result = SystemctlProbe(runner=_runner_returning("")).query_status("svc")
    assert result.state == RunState.UNKNOWN
    assert result.error


@pytest.mark.parametrize(
    "exc",
    [
        FileNotFoundError("systemctl"),
        PermissionError("denied"),
        subprocess.TimeoutExpired(["systemctl"], 1.0),
        OSError("exec format error"),
    ],
)
def test_systemctl_invocation_failure_is_unknown(exc: Exception) -> None:
    result = SystemctlProbe(runner=_runner_raising(exc)).query_status("svc")
    assert result.state == RunState.UNKNOWN
    assert result.error


def test_systemctl_missing_binary_message() -> None:
    result = SystemctlProbe(runner=_runner_raising(FileNotFoundError())).query_status("svc")
    assert result.error == "systemctl not available"


def _proc(pid: int, name: str, cmdline):
    return SimpleNamespace(pid=pid, info={"name": name, "cmdline": cmdline})


def test_process_table_finds_generator() -> None:
    procs = [
        _proc(10, "bash", ["bash"]),
        _proc(11, "bash", ["/bin/bash", "/opt/sdwan-traffic-gen/traffic-generator.sh"]),
    ]
    probe = ProcessTableProbe(process_iter=lambda attrs: iter(procs))
    assert probe.query_status("sdwan-traffic-gen").state == RunState.RUNNING


def test_process_table_ignores_own_process() -> None:
    procs = [_proc(os.getpid(), "python", ["python", "--service", "sdwan-traffic-gen"])]
    probe = ProcessTableProbe(process_iter=lambda attrs: iter(procs))
    assert probe.query_status("sdwan-traffic-gen").state == RunState.STOPPED


def test_process_table_scan_failure_is_unknown() -> None:
    def boom(attrs):
        raise psutil.AccessDenied()

    result = ProcessTableProbe(process_iter=boom).query_status("sdwan-traffic-gen")
    assert result.state == RunState.UNKNOWN


def test_build_probe_selects_backend() -> None:
    assert isinstance(build_probe("process"), ProcessTableProbe)
    assert isinstance(build_probe("systemctl", timeout=3), SystemctlProbe)
    assert isinstance(build_probe("nonsense"), SystemctlProbe)
