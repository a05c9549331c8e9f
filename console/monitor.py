"""
Dashboard poller for the console.

Polls the control API in a background thread and feeds DashboardState.
Each tick fires the stats, status and logs fetches concurrently and does not
wait for them: a view whose previous fetch is still in flight skips the tick,
so one slow or failing endpoint never delays the others or stops the cadence.

Lifecycle: start() subscribes (first poll runs immediately), stop() cancels.
Every start/stop bumps a generation counter, and a response is applied only
if its generation is still current, so a fetch that lands after stop() is
dropped instead of touching a torn-down view.
"""

import atexit
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Callable, Dict, List, Optional

import requests

from console.state import DashboardState

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 2.0

ENDPOINTS = {
    "stats": "/api/stats",
    "status": "/api/status",
    "logs": "/api/logs",
}


class DashboardPoller:
    def __init__(
        self,
        api_base_url: str = "http://127.0.0.1:3001",
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        state: Optional[DashboardState] = None,
        session: Optional[requests.Session] = None,
        request_timeout: float = 5.0,
    ):
        self.api_base_url = api_base_url.rstrip("/")
        self.poll_interval = poll_interval
        self.state = state or DashboardState()
        self.request_timeout = request_timeout

        self._session = session or requests.Session()
        self._owns_session = session is None
        self._executor = ThreadPoolExecutor(max_workers=len(ENDPOINTS), thread_name_prefix="dashboard-fetch")
        self._appliers: Dict[str, Callable[[Any], Any]] = {
            "stats": self.state.apply_stats,
            "status": self.state.apply_status,
            "logs": self.state.apply_logs,
        }

        self._inflight: Dict[str, Future] = {}
        self._inflight_lock = threading.Lock()

        self._lock = threading.Lock()
        self._generation = 0
        self._running = False
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._exit_hook_registered = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def start(self):
        with self._lock:
            if self._running:
                return
            self._running = True
            self._generation += 1
            self._stop_event = threading.Event()
            generation = self._generation
        self._thread = threading.Thread(
            target=self._poll_loop, args=(generation, self._stop_event), daemon=True
        )
        self._thread.start()
        logger.info(f"Dashboard poller started ({self.api_base_url}, every {self.poll_interval}s)")

    def stop(self):
        with self._lock:
            if not self._running:
                return
            self._running = False
            self._generation += 1
            self._stop_event.set()
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout=5)
        logger.info("Dashboard poller stopped")

    def close(self):
        """Stop polling and release the HTTP session and fetch workers."""
        self.stop()
        self._executor.shutdown(wait=False)
        if self._owns_session:
            self._session.close()

    def close_at_exit(self):
        """Register close() to run at interpreter exit, once per poller."""
        with self._lock:
            if self._exit_hook_registered:
                return
            self._exit_hook_registered = True
        atexit.register(self.close)

    def _poll_loop(self, generation: int, stop_event: threading.Event):
        while not stop_event.is_set():
            try:
                self._dispatch(generation)
            except Exception as exc:
                logger.warning(f"Dashboard poll failed: {exc}")
            stop_event.wait(self.poll_interval)

    def _dispatch(self, generation: int) -> List[Future]:
        """
        Submit one fetch per view and return without waiting for them.

        A view whose previous fetch is still in flight skips this tick, so a
        hung endpoint holds at most one worker and never delays the others.
        """
        submitted = []
        with self._inflight_lock:
            for view in ENDPOINTS:
                pending = self._inflight.get(view)
                if pending is not None and not pending.done():
                    logger.debug(f"Skipping {view} fetch, previous one still in flight")
                    continue
                future = self._executor.submit(self._fetch, view, generation)
                self._inflight[view] = future
                submitted.append(future)
        return submitted

    def poll_once(self, generation: Optional[int] = None):
        """Run one tick and wait for the fetches it started."""
        if generation is None:
            generation = self.generation
        wait(self._dispatch(generation))

    def _http_get(self, path: str) -> Any:
        response = self._session.get(f"{self.api_base_url}{path}", timeout=self.request_timeout)
        response.raise_for_status()
        return response.json()

    def _fetch(self, view: str, generation: int):
        try:
            payload = self._http_get(ENDPOINTS[view])
        except Exception as exc:
            with self._lock:
                if generation == self._generation:
                    logger.warning(f"Fetch of {view} failed: {exc}")
                    self.state.mark_failure(view, str(exc))
            return
        self._apply(view, payload, generation)

    def _apply(self, view: str, payload: Any, generation: int) -> bool:
        # Held across the apply so stop() cannot slip in between check and write
        with self._lock:
            if generation != self._generation:
                logger.debug(f"Dropping late {view} response (generation {generation})")
                return False
            self._appliers[view](payload)
        return True
