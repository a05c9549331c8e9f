"""
Config Store

Reads and rewrites the two line-oriented files the traffic generator consumes:

- applications.txt: one `domain|weight|endpoint` rule per line, `#` comments
- interfaces.txt: one interface identifier per line

Every write is read-modify-write against the current file on disk; nothing is
cached between calls. Writes land via a temp file and os.replace so a reader
never observes a half-written file. A per-file lock serializes writers inside
this process only: a second dashboard process (or a hand edit) still races,
and the last writer wins.
"""

import logging
import os
import re
import stat
import threading
from pathlib import Path
from typing import Dict, List

from control.models import ApplicationRule, Outcome, StoreResult

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = "|"
COMMENT_PREFIX = "#"
LEADING_DIGITS_RE = re.compile(r"^\s*(\d+)")

_locks_guard = threading.Lock()
_file_locks: Dict[str, threading.Lock] = {}


def _lock_for(path: Path) -> threading.Lock:
    key = str(path.resolve())
    with _locks_guard:
        lock = _file_locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _file_locks[key] = lock
        return lock


def is_rule_line(line: str) -> bool:
    return bool(line.strip()) and not line.startswith(COMMENT_PREFIX)


def parse_weight(raw: str) -> int:
    """Leading decimal digits of the weight field; anything else is 0."""
    match = LEADING_DIGITS_RE.match(raw or "")
    return int(match.group(1)) if match else 0


def parse_rule(line: str) -> ApplicationRule:
    parts = line.split(FIELD_SEPARATOR)
    domain = parts[0]
    weight = parse_weight(parts[1]) if len(parts) > 1 else 0
    endpoint = parts[2].rstrip("\r") if len(parts) > 2 else ""
    return ApplicationRule(domain=domain, weight=weight, endpoint=endpoint)


def with_weight(line: str, weight: int) -> str:
    """Return a `domain|...` rule line with only its second field replaced."""
    parts = line.split(FIELD_SEPARATOR)
    parts[1] = str(weight)
    return FIELD_SEPARATOR.join(parts)


def atomic_write(path: Path, content: str) -> None:
    tmp_path = path.with_name(f".{path.name}.{os.getpid()}.tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        if path.exists():
            os.chmod(tmp_path, stat.S_IMODE(path.stat().st_mode))
        os.replace(tmp_path, path)
    except OSError:
        try:
            tmp_path.unlink()
        except OSError:
            pass
        raise


class ConfigStore:
    """File-backed access to the application weights and interface list."""

    def __init__(self, apps_file: Path, interfaces_file: Path):
        self.apps_file = Path(apps_file)
        self.interfaces_file = Path(interfaces_file)

    def _read(self, path: Path) -> str:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()

    # ------------------------------------------------------------------
    # Applications
    # ------------------------------------------------------------------

    def list_applications(self) -> StoreResult[List[ApplicationRule]]:
        try:
            content = self._read(self.apps_file)
        except FileNotFoundError:
            logger.info(f"Applications file not found: {self.apps_file}")
            return StoreResult.failure(Outcome.NOT_FOUND)
        except OSError as exc:
            logger.error(f"Failed to read {self.apps_file}: {exc}")
            return StoreResult.failure(Outcome.READ_FAILED, str(exc))

        rules = [parse_rule(line) for line in content.split("\n") if is_rule_line(line)]

        seen = set()
        duplicates = set()
        for rule in rules:
            if rule.domain in seen:
                duplicates.add(rule.domain)
            seen.add(rule.domain)
        if duplicates:
            logger.warning(f"Duplicate domains in {self.apps_file.name}: {sorted(duplicates)}")

        return StoreResult.success(rules)

    def set_application_weight(self, domain: str, weight: int) -> StoreResult[int]:
        """
        Rewrite the weight of every line starting with `domain|`.

        Returns the number of lines changed. An unknown domain is a
        successful no-op and the file is left untouched.
        """
        prefix = f"{domain}{FIELD_SEPARATOR}"
        with _lock_for(self.apps_file):
            try:
                content = self._read(self.apps_file)
            except OSError as exc:
                logger.error(f"Failed to read {self.apps_file} for update: {exc}")
                return StoreResult.failure(Outcome.READ_FAILED, str(exc))

            updated = 0
            lines = content.split("\n")
            for idx, line in enumerate(lines):
                if is_rule_line(line) and line.startswith(prefix):
                    lines[idx] = with_weight(line, weight)
                    updated += 1

            if updated == 0:
                logger.warning(f"No rule for domain '{domain}' in {self.apps_file.name}; nothing written")
                return StoreResult.success(0)

            try:
                atomic_write(self.apps_file, "\n".join(lines))
            except OSError as exc:
                logger.error(f"Failed to write {self.apps_file}: {exc}")
                return StoreResult.failure(Outcome.WRITE_FAILED, str(exc))

        logger.info(f"Set weight of '{domain}' to {weight} ({updated} line(s))")
        return StoreResult.success(updated)

    # ------------------------------------------------------------------
    # Interfaces
    # ------------------------------------------------------------------

    def list_interfaces(self) -> StoreResult[List[str]]:
        try:
            content = self._read(self.interfaces_file)
        except FileNotFoundError:
            return StoreResult.success([])
        except OSError as exc:
            logger.error(f"Failed to read {self.interfaces_file}: {exc}")
            return StoreResult.failure(Outcome.READ_FAILED, str(exc))
        interfaces = [line.rstrip("\r") for line in content.split("\n") if is_rule_line(line)]
        return StoreResult.success(interfaces)

    def replace_interfaces(self, interfaces: List[str]) -> StoreResult[None]:
        content = "\n".join(interfaces)
        if content:
            content += "\n"
        with _lock_for(self.interfaces_file):
            try:
                atomic_write(self.interfaces_file, content)
            except OSError as exc:
                logger.error(f"Failed to write {self.interfaces_file}: {exc}")
                return StoreResult.failure(Outcome.WRITE_FAILED, str(exc))
        logger.info(f"Replaced interface list ({len(interfaces)} entries)")
        return StoreResult.success()
