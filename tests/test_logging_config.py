from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from shared.logging_config import level_from_name, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logging():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    # Detached so setup_logging's force=True cannot close pytest's own handlers
    root.handlers[:] = []
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


@pytest.mark.parametrize(
    "name,expected",
    [("debug", logging.DEBUG), (" WARNING ", logging.WARNING), (None, logging.INFO), ("chatty", logging.INFO)],
)
def test_level_from_name(name, expected) -> None:
    assert level_from_name(name) == expected


def test_setup_logging_writes_tagged_lines_to_file(tmp_path: Path) -> None:
    log_file = tmp_path / "nested" / "control.log"

    logger = setup_logging("control", level=logging.INFO, log_file=str(log_file))
    logger.info("probe answered running")
    for handler in logging.getLogger().handlers:
        handler.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "[CONTROL] INFO - probe answered running" in text
    assert logging.getLogger("urllib3").level == logging.WARNING
    assert logging.getLogger("uvicorn.access").propagate is True
