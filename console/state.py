"""
Dashboard view state.

Holds the last known good value of each sub-view (stats, status, logs) plus
the rolling history. Every mutation goes through the apply_* methods under a
single lock so the poll threads and the web view never see a torn update.
"""

import logging
import threading
from datetime import datetime
from typing import Any, Dict, List, Optional

from console.history import HISTORY_CAPACITY, HistoryBuffer

logger = logging.getLogger(__name__)

RUN_STATES = ("running", "stopped", "unknown")
LOGS_PLACEHOLDER = "Waiting for logs... (Make sure traffic logs exist)"


def success_rate(total_requests: int, total_errors: int) -> str:
    """Percentage of successful requests, one decimal. No traffic reads as 100.0."""
    if not total_requests:
        return "100.0"
    return f"{(total_requests - total_errors) / total_requests * 100:.1f}"


def derived_metrics(stats: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not stats:
        return {"total_requests": 0, "total_errors": 0, "success_rate": "100.0", "active_apps": 0}
    total_requests = stats.get("total_requests") or 0
    total_errors = sum((stats.get("errors_by_app") or {}).values())
    return {
        "total_requests": total_requests,
        "total_errors": total_errors,
        "success_rate": success_rate(total_requests, total_errors),
        "active_apps": len(stats.get("requests_by_app") or {}),
    }


class DashboardState:
    def __init__(self, history_capacity: int = HISTORY_CAPACITY):
        self._lock = threading.Lock()
        self.history = HistoryBuffer(history_capacity)
        self.stats: Optional[Dict[str, Any]] = None
        self.status: str = "unknown"
        self.status_error: Optional[str] = None
        self.logs: List[str] = []
        self.errors: Dict[str, str] = {}
        self.updated_at: Dict[str, datetime] = {}

    def apply_stats(self, payload: Any) -> bool:
        """Take a /api/stats body. Bodies without a timestamp are ignored."""
        if not isinstance(payload, dict) or not payload.get("timestamp"):
            return False
        with self._lock:
            if not self.history.record(payload):
                return False
            self.stats = payload
            self.errors.pop("stats", None)
            self.updated_at["stats"] = datetime.now()
        return True

    def apply_status(self, payload: Any) -> None:
        status = payload.get("status") if isinstance(payload, dict) else None
        with self._lock:
            self.status = status if status in RUN_STATES else "unknown"
            self.status_error = payload.get("error") if isinstance(payload, dict) else None
            self.errors.pop("status", None)
            self.updated_at["status"] = datetime.now()

    def apply_logs(self, payload: Any) -> bool:
        logs = payload.get("logs") if isinstance(payload, dict) else None
        if not isinstance(logs, list):
            return False
        with self._lock:
            self.logs = [str(line) for line in logs]
            self.errors.pop("logs", None)
            self.updated_at["logs"] = datetime.now()
        return True

    def mark_failure(self, view: str, error: str) -> None:
        """Record a failed fetch; the sub-view keeps its last good value."""
        with self._lock:
            self.errors[view] = error
            if view == "status":
                self.status = "unknown"
                self.status_error = error

    def render(self) -> Dict[str, Any]:
        """View model for the dashboard page, recomputed on every call."""
        with self._lock:
            stats = dict(self.stats) if self.stats else None
            logs = list(self.logs)
            view = {
                "status": self.status,
                "status_error": self.status_error,
                "cards": derived_metrics(stats),
                "history": self.history.points(),
                "logs": logs,
                "logs_placeholder": None if logs else LOGS_PLACEHOLDER,
                "errors": dict(self.errors),
                "updated_at": {k: v.isoformat(timespec="seconds") for k, v in self.updated_at.items()},
            }
        view["stats"] = stats
        return view
