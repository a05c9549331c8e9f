from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from control.api.deps import get_settings, get_telemetry
from control.config import Settings
from control.services.telemetry_source import TelemetrySource

router = APIRouter(prefix="/api", tags=["telemetry"])


@router.get("/logs")
def get_logs(
    settings: Settings = Depends(get_settings),
    telemetry: TelemetrySource = Depends(get_telemetry),
):
    """Last lines of traffic.log, oldest first. A missing log is an empty list."""
    result = telemetry.get_log_tail(settings.log_tail_lines)
    if result.ok:
        return {"logs": result.value}
    return JSONResponse(
        status_code=500,
        content={"logs": [], "error": "Read failed", "details": result.detail},
    )
