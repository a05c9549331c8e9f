from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from control.config import Settings
from control.models import ProbeResult, RunState


class FakeResponse:
    def __init__(self, payload: Any, status_code: int = 200):
        self._payload = payload
        self.status_code = status_code
        self.text = str(payload)

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise RuntimeError(f"HTTP {self.status_code}")


class FakeSession:
    """Stands in for requests.Session; routes are keyed by path suffix."""

    def __init__(self, routes: Optional[Dict[str, Any]] = None):
        self.routes: Dict[str, Any] = dict(routes or {})
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []

    def _respond(self, method: str, url: str, **kwargs) -> FakeResponse:
        self.calls.append((method, url, kwargs))
        for path, answer in self.routes.items():
            if url.endswith(path):
                if isinstance(answer, Exception):
                    raise answer
                if isinstance(answer, FakeResponse):
                    return answer
                return FakeResponse(answer)
        raise ConnectionError(f"no route for {url}")

    def get(self, url: str, **kwargs) -> FakeResponse:
        return self._respond("GET", url, **kwargs)

    def request(self, method: str, url: str, **kwargs) -> FakeResponse:
        return self._respond(method, url, **kwargs)

    def close(self) -> None:
        pass


class FakeProbe:
    def __init__(self, result: ProbeResult):
        self.result = result
        self.queried: List[str] = []

    def query_status(self, service_name: str) -> ProbeResult:
        self.queried.append(service_name)
        return self.result


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    config_dir = tmp_path / "config"
    log_dir = tmp_path / "logs"
    config_dir.mkdir()
    log_dir.mkdir()
    return Settings(config_dir=config_dir, log_dir=log_dir, service_name="sdwan-traffic-gen")


@pytest.fixture()
def fake_probe() -> FakeProbe:
    return FakeProbe(ProbeResult(RunState.RUNNING))


@pytest.fixture()
def api_client(settings: Settings, fake_probe: FakeProbe):
    from fastapi.testclient import TestClient

    from control.service import create_app

    return TestClient(create_app(settings, probe=fake_probe))


@pytest.fixture()
def fake_session_cls():
    return FakeSession


@pytest.fixture()
def fake_response_cls():
    return FakeResponse
