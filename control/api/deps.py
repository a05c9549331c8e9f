from typing import Any, Dict, List

from fastapi import Request
from pydantic import ValidationError

from control.config import Settings
from control.services.config_store import ConfigStore
from control.services.telemetry_source import TelemetrySource


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_config_store(request: Request) -> ConfigStore:
    return request.app.state.config_store


def get_telemetry(request: Request) -> TelemetrySource:
    return request.app.state.telemetry


def get_probe(request: Request):
    return request.app.state.probe


def validation_details(exc: ValidationError) -> List[Dict[str, Any]]:
    """JSON-safe subset of pydantic's error list."""
    return [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
