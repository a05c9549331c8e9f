"""
Logging configuration for the traffic generator dashboard services.

Both components (the control API and the console that polls it) log through
the root logger with a component tag, so their output can share one journal.
"""

import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# The console polls three endpoints every couple of seconds; per-request
# connection logs from these would drown everything else at DEBUG.
CHATTY_LOGGERS = ("urllib3", "requests")

# Loggers uvicorn configures for itself; pointed back at the root handlers.
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def level_from_name(name: Optional[str], default=logging.INFO) -> int:
    """Translate a level name such as 'debug' into a logging constant."""
    if not name:
        return default
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else default


def component_format(component_name: str) -> str:
    return f'[%(asctime)s] [{component_name.upper()}] %(levelname)s - %(message)s'


def _quiet(names: Iterable[str], level: int) -> None:
    for name in names:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def _adopt(names: Iterable[str]) -> None:
    for name in names:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True


def setup_logging(
    component_name: str,
    level=logging.INFO,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None
):
    """
    Configure logging for a dashboard component.

    Args:
        component_name: Component identifier ('control' or 'console')
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path; its directory is created if missing
        format_string: Custom format string (default tags lines with the component)

    Returns:
        The component's logger
    """
    if format_string is None:
        format_string = component_format(component_name)
    formatter = logging.Formatter(format_string, datefmt=DATE_FORMAT)

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    _quiet(CHATTY_LOGGERS, level)
    _adopt(SERVER_LOGGERS)

    logger = logging.getLogger(component_name)
    logger.info(
        f"{component_name.upper()} logging initialized "
        f"(level={logging.getLevelName(level)}, file={log_file or '-'})"
    )
    return logger
