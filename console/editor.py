"""
Configuration editor backing the console's config page.

Keeps a local working copy of the application weights and interface list.
Weight changes are local until save_weight(); interface edits are local
until save_interfaces() posts the whole list.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

DEFAULT_INTERFACE = "eth0"


class ConfigEditor:
    def __init__(
        self,
        api_base_url: str = "http://127.0.0.1:3001",
        session: Optional[requests.Session] = None,
        request_timeout: float = 10.0,
    ):
        self.api_base_url = api_base_url.rstrip("/")
        self.request_timeout = request_timeout
        self._session = session or requests.Session()

        self.apps: List[Dict[str, Any]] = []
        self.interfaces: List[str] = []
        self.loading = True
        self.saving = False
        self.error: Optional[str] = None

    def call_api(self, method: str, path: str, **kwargs) -> Tuple[bool, Any, Optional[str]]:
        try:
            resp = self._session.request(
                method, f"{self.api_base_url}{path}", timeout=self.request_timeout, **kwargs
            )
        except Exception as exc:
            return False, None, str(exc)

        try:
            payload = resp.json()
        except Exception:
            payload = {"raw": resp.text}

        if 200 <= resp.status_code < 300 and not (isinstance(payload, dict) and "error" in payload):
            return True, payload, None

        if isinstance(payload, dict):
            error = payload.get("error") or payload.get("raw")
            if payload.get("details"):
                error = f"{error}: {payload['details']}"
        else:
            error = str(payload)
        return False, payload, f"HTTP {resp.status_code}: {error}"

    def load(self) -> bool:
        """Fetch apps and interfaces together; either may fail on its own."""
        self.loading = True
        with ThreadPoolExecutor(max_workers=2) as pool:
            apps_future = pool.submit(self.call_api, "GET", "/api/config/apps")
            ifaces_future = pool.submit(self.call_api, "GET", "/api/config/interfaces")
            apps_ok, apps_payload, apps_error = apps_future.result()
            ifaces_ok, ifaces_payload, ifaces_error = ifaces_future.result()

        self.apps = apps_payload if apps_ok and isinstance(apps_payload, list) else []
        self.interfaces = ifaces_payload if ifaces_ok and isinstance(ifaces_payload, list) else []
        errors = [e for e in (apps_error, ifaces_error) if e]
        self.error = "; ".join(errors) if errors else None
        self.loading = False
        if self.error:
            logger.warning(f"Config load incomplete: {self.error}")
        return not errors

    # ------------------------------------------------------------------
    # Application weights
    # ------------------------------------------------------------------

    def change_weight(self, domain: str, weight: int) -> None:
        """Local-only update, applied to every entry with this domain."""
        for app in self.apps:
            if app.get("domain") == domain:
                app["weight"] = weight

    def save_weight(self, domain: str, weight: int) -> bool:
        self.change_weight(domain, weight)
        ok, _, error = self.call_api("POST", "/api/config/apps", json={"domain": domain, "weight": weight})
        if not ok:
            logger.error(f"Save of weight for {domain} failed: {error}")
            self.error = error
        return ok

    # ------------------------------------------------------------------
    # Interfaces
    # ------------------------------------------------------------------

    def add_interface(self, name: str = DEFAULT_INTERFACE) -> None:
        self.interfaces.append(name)

    def remove_interface(self, idx: int) -> None:
        if 0 <= idx < len(self.interfaces):
            del self.interfaces[idx]

    def update_interface(self, idx: int, value: str) -> None:
        if 0 <= idx < len(self.interfaces):
            self.interfaces[idx] = value

    def save_interfaces(self) -> bool:
        self.saving = True
        try:
            ok, _, error = self.call_api("POST", "/api/config/interfaces", json={"interfaces": self.interfaces})
        finally:
            self.saving = False
        if not ok:
            logger.error(f"Save of interfaces failed: {error}")
            self.error = error
        return ok
