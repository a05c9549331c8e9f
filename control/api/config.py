"""
Configuration Files API

Endpoints:
- GET  /api/config/apps: application rules from applications.txt
- POST /api/config/apps: set the weight of one domain
- GET  /api/config/interfaces: interface list from interfaces.txt
- POST /api/config/interfaces: replace the whole interface list

Absent files are soft failures (HTTP 200 with an error body or an empty
list). Malformed requests are 400s, I/O errors are 500s carrying the OS error
text for the operator.
"""

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from typing import Any
import logging

from control.api.deps import get_config_store, validation_details
from control.models import AppWeightUpdate, InterfacesUpdate, Outcome, error_body
from control.services.config_store import ConfigStore, is_rule_line

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/config", tags=["config"])


def _bad_request(error: str, details: Any = None) -> JSONResponse:
    return JSONResponse(status_code=400, content=error_body(error, details))


def _server_error(error: str, details: Any = None) -> JSONResponse:
    return JSONResponse(status_code=500, content=error_body(error, details))


@router.get("/apps")
def list_apps(store: ConfigStore = Depends(get_config_store)):
    result = store.list_applications()
    if result.ok:
        return [rule.model_dump() for rule in result.value]
    if result.outcome == Outcome.NOT_FOUND:
        return {"error": "Config not found"}
    return _server_error("Read failed", result.detail)


@router.post("/apps")
def update_app_weight(payload: Any = Body(default=None), store: ConfigStore = Depends(get_config_store)):
    if not isinstance(payload, dict) or not payload.get("domain") or payload.get("weight") is None:
        return _bad_request("Missing fields")

    try:
        update = AppWeightUpdate.model_validate(payload)
    except ValidationError as exc:
        return _bad_request("Invalid format", validation_details(exc))

    result = store.set_application_weight(update.domain, update.weight)
    if result.ok:
        return {"success": True}
    if result.outcome == Outcome.WRITE_FAILED:
        return _server_error("Write failed", result.detail)
    return _server_error("Read failed", result.detail)


@router.get("/interfaces")
def list_interfaces(store: ConfigStore = Depends(get_config_store)):
    result = store.list_interfaces()
    if result.ok:
        return result.value
    return _server_error("Read failed", result.detail)


@router.post("/interfaces")
def replace_interfaces(payload: Any = Body(default=None), store: ConfigStore = Depends(get_config_store)):
    if not isinstance(payload, dict) or not isinstance(payload.get("interfaces"), list):
        return _bad_request("Invalid format")

    try:
        update = InterfacesUpdate.model_validate(payload)
    except ValidationError as exc:
        return _bad_request("Invalid format", validation_details(exc))

    # One identifier per line; an embedded newline would split an entry in two
    if any("\n" in iface or "\r" in iface for iface in update.interfaces):
        return _bad_request("Invalid format", "interface names must be single-line")

    # Blank and comment entries would be written but never listed back
    if not all(is_rule_line(iface) for iface in update.interfaces):
        return _bad_request("Invalid format", "interface names must be non-blank and not start with #")

    result = store.replace_interfaces(update.interfaces)
    if result.ok:
        return {"success": True}
    return _server_error("Write failed", result.detail)
