"""
Run State API

GET /api/status reports whether the traffic generator is running. The state
is derived fresh on every request and never cached.
"""

from fastapi import APIRouter, Depends
import logging

from control.api.deps import get_probe, get_settings
from control.config import Settings
from control.models import RunState

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["status"])


@router.get("/status")
def get_status(settings: Settings = Depends(get_settings), probe=Depends(get_probe)):
    result = probe.query_status(settings.service_name)
    if result.state == RunState.UNKNOWN:
        return {"status": result.state.value, "error": result.error or "status unavailable"}
    return {"status": result.state.value}
