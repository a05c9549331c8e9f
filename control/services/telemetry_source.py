"""
Telemetry Source

Read-only view of what the traffic generator writes to its log directory:
the latest stats snapshot (stats.json) and the tail of traffic.log.
Both files belong to the producer and are never modified here.
"""

import json
import logging
import subprocess
from collections import deque
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from control.models import Outcome, StatsSnapshot, StoreResult

logger = logging.getLogger(__name__)

DEFAULT_TAIL_LINES = 50


class FileTail:
    """Native tail: stream the file and keep the last non-empty lines."""

    name = "file"

    def read(self, path: Path, lines: int) -> List[str]:
        window: deque = deque(maxlen=lines)
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            for raw in f:
                line = raw.rstrip("\r\n")
                if line:
                    window.append(line)
        return list(window)


class CommandTail:
    """Tail via the system `tail` binary, for very large logs."""

    name = "command"

    def __init__(self, binary: str = "tail", timeout: Optional[float] = None):
        self.binary = binary
        self.timeout = timeout

    def read(self, path: Path, lines: int) -> List[str]:
        # Blank lines inside the raw window are dropped below, so ask for a
        # wider window and trim back to `lines` afterwards
        try:
            proc = subprocess.run(
                [self.binary, "-n", str(lines * 2), str(path)],
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
                check=True,
            )
        except FileNotFoundError as exc:
            # Missing binary, not a missing log
            raise OSError(f"{self.binary} not available") from exc
        kept = [line for line in (raw.rstrip("\r") for raw in proc.stdout.split("\n")) if line]
        if len(kept) < lines:
            # Short file or a blank-heavy window; a full read is exact
            return FileTail().read(path, lines)
        return kept[-lines:]


def build_tailer(backend: str, timeout: Optional[float] = None):
    if backend == CommandTail.name:
        return CommandTail(timeout=timeout)
    if backend != FileTail.name:
        logger.warning(f"Unknown tail backend '{backend}', using '{FileTail.name}'")
    return FileTail()


class TelemetrySource:
    def __init__(self, stats_file: Path, log_file: Path, tailer=None):
        self.stats_file = Path(stats_file)
        self.log_file = Path(log_file)
        self.tailer = tailer or FileTail()

    def get_snapshot(self) -> StoreResult[StatsSnapshot]:
        """
        Load the most recent stats snapshot.

        NOT_FOUND when the file is missing or empty (the producer may be
        mid-rewrite), PARSE_ERROR when it is not a StatsSnapshot-shaped JSON
        object, READ_FAILED on any other I/O error.
        """
        try:
            with open(self.stats_file, "r", encoding="utf-8") as f:
                content = f.read()
        except FileNotFoundError:
            return StoreResult.failure(Outcome.NOT_FOUND)
        except UnicodeDecodeError as exc:
            logger.warning(f"Stats file is not valid UTF-8: {exc}")
            return StoreResult.failure(Outcome.PARSE_ERROR, str(exc))
        except OSError as exc:
            logger.error(f"Failed to read {self.stats_file}: {exc}")
            return StoreResult.failure(Outcome.READ_FAILED, str(exc))

        if not content.strip():
            return StoreResult.failure(Outcome.NOT_FOUND)

        try:
            data = json.loads(content)
        except ValueError as exc:
            logger.warning(f"Stats file is not valid JSON: {exc}")
            return StoreResult.failure(Outcome.PARSE_ERROR, str(exc))

        try:
            snapshot = StatsSnapshot.model_validate(data)
        except ValidationError as exc:
            logger.warning(f"Stats file has unexpected shape: {exc.error_count()} error(s)")
            return StoreResult.failure(Outcome.PARSE_ERROR, str(exc))

        return StoreResult.success(snapshot)

    def get_log_tail(self, lines: int = DEFAULT_TAIL_LINES) -> StoreResult[List[str]]:
        if lines <= 0:
            return StoreResult.success([])
        if not self.log_file.exists():
            return StoreResult.success([])
        try:
            return StoreResult.success(self.tailer.read(self.log_file, lines))
        except FileNotFoundError:
            # Rotated away between the existence check and the read
            return StoreResult.success([])
        except (OSError, subprocess.SubprocessError) as exc:
            logger.error(f"Failed to tail {self.log_file}: {exc}")
            return StoreResult.failure(Outcome.READ_FAILED, str(exc))
