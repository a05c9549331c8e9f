"""
Rolling traffic history for the dashboard chart.

Each successful stats poll becomes one HistoryPoint; only the most recent
HISTORY_CAPACITY points are kept, oldest evicted first.
"""

from collections import deque
from datetime import datetime
from typing import Any, Dict, List, Optional

HISTORY_CAPACITY = 20
TIME_FORMAT = "%H:%M:%S"


def history_point(stats: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Derive a chart point from a stats payload.

    Returns None when the payload has no timestamp (the generator has not
    written a snapshot yet, or the API answered with an error body).
    """
    timestamp = stats.get("timestamp") if isinstance(stats, dict) else None
    if not timestamp or isinstance(timestamp, bool):
        return None
    try:
        label = datetime.fromtimestamp(float(timestamp)).strftime(TIME_FORMAT)
    except (TypeError, ValueError, OverflowError, OSError):
        return None

    point: Dict[str, Any] = {}
    by_app = stats.get("requests_by_app")
    if isinstance(by_app, dict):
        point.update(by_app)
    # Axis keys win over a domain that happens to share their name
    point["time"] = label
    point["requests"] = stats.get("total_requests", 0)
    return point


class HistoryBuffer:
    """Fixed-capacity FIFO of history points."""

    def __init__(self, capacity: int = HISTORY_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._points: deque = deque(maxlen=capacity)

    def append(self, point: Dict[str, Any]) -> None:
        self._points.append(point)

    def record(self, stats: Dict[str, Any]) -> bool:
        """Append the point derived from `stats`; False if it was skipped."""
        point = history_point(stats)
        if point is None:
            return False
        self.append(point)
        return True

    def points(self) -> List[Dict[str, Any]]:
        return list(self._points)

    def clear(self) -> None:
        self._points.clear()

    def __len__(self) -> int:
        return len(self._points)
