from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from control.api.deps import get_telemetry
from control.models import Outcome, error_body
from control.services.telemetry_source import TelemetrySource

router = APIRouter(prefix="/api", tags=["telemetry"])


@router.get("/stats")
def get_stats(telemetry: TelemetrySource = Depends(get_telemetry)):
    """
    Latest stats snapshot, forwarded as written by the generator.
    Absence and garbage are soft failures reported in the body.
    """
    result = telemetry.get_snapshot()
    if result.ok:
        return result.value.model_dump()
    if result.outcome == Outcome.NOT_FOUND:
        return {"error": "Stats not found"}
    if result.outcome == Outcome.PARSE_ERROR:
        return {"error": "Invalid JSON"}
    return JSONResponse(status_code=500, content=error_body("Read failed", result.detail))
