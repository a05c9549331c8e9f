"""
Liveness Probe

Asks an out-of-band mechanism whether the traffic generator is running.
The dashboard does not own the generator's lifecycle; it only observes it.

Backends:
- SystemctlProbe: `systemctl is-active <service>` (default on Linux hosts)
- ProcessTableProbe: psutil scan of the process table, for hosts without
  systemd or when the generator is started by hand

A probe never raises. Any failure to obtain a definitive answer collapses to
RunState.UNKNOWN with the reason attached.
"""

import logging
import os
import subprocess
from typing import Callable, List, Optional

import psutil

from control.models import ProbeResult, RunState

logger = logging.getLogger(__name__)


def _run_command(cmd: List[str], timeout: Optional[float]) -> str:
    proc = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    return proc.stdout


class SystemctlProbe:
    name = "systemctl"

    def __init__(
        self,
        binary: str = "systemctl",
        timeout: Optional[float] = None,
        runner: Callable[[List[str], Optional[float]], str] = _run_command,
    ):
        self.binary = binary
        self.timeout = timeout
        self.runner = runner

    def query_status(self, service_name: str) -> ProbeResult:
        # is-active exits non-zero for anything but "active"; the answer is on stdout either way
        try:
            output = self.runner([self.binary, "is-active", service_name], self.timeout)
        except FileNotFoundError:
            return ProbeResult(RunState.UNKNOWN, f"{self.binary} not available")
        except subprocess.TimeoutExpired:
            return ProbeResult(RunState.UNKNOWN, f"{self.binary} timed out after {self.timeout}s")
        except (OSError, ValueError, subprocess.SubprocessError) as exc:
            logger.warning(f"Liveness query for {service_name} failed: {exc}")
            return ProbeResult(RunState.UNKNOWN, str(exc))

        lines = (output or "").strip().splitlines()
        answer = lines[0].strip() if lines else ""
        if not answer:
            return ProbeResult(RunState.UNKNOWN, f"{self.binary} returned no state")
        if answer == "active":
            return ProbeResult(RunState.RUNNING)
        return ProbeResult(RunState.STOPPED)


class ProcessTableProbe:
    name = "process"

    def __init__(self, process_iter: Callable = psutil.process_iter):
        self.process_iter = process_iter

    def query_status(self, service_name: str) -> ProbeResult:
        own_pid = os.getpid()
        try:
            for proc in self.process_iter(["name", "cmdline"]):
                if proc.pid == own_pid:
                    continue
                info = proc.info
                name = info.get("name") or ""
                cmdline = " ".join(info.get("cmdline") or [])
                if service_name in name or service_name in cmdline:
                    return ProbeResult(RunState.RUNNING)
        except (psutil.Error, OSError) as exc:
            logger.warning(f"Process table scan for {service_name} failed: {exc}")
            return ProbeResult(RunState.UNKNOWN, str(exc))
        return ProbeResult(RunState.STOPPED)


def build_probe(backend: str, timeout: Optional[float] = None):
    if backend == ProcessTableProbe.name:
        return ProcessTableProbe()
    if backend != SystemctlProbe.name:
        logger.warning(f"Unknown probe backend '{backend}', using '{SystemctlProbe.name}'")
    return SystemctlProbe(timeout=timeout)
