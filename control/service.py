"""
Control API Service Entrypoint

FastAPI application exposing the traffic generator's on-disk state:
run status, stats snapshot, log tail and the two configuration files.
The app holds no cache; every request goes back to disk or the probe.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from typing import Optional
import logging

from control.api import config, logs, stats, status
from control.config import Settings, load_settings
from control.services.config_store import ConfigStore
from control.services.liveness_probe import build_probe
from control.services.telemetry_source import TelemetrySource, build_tailer

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, probe=None, tailer=None) -> FastAPI:
    """
    Build the control API.

    Args:
        settings: Resolved paths and knobs (default: read from the environment)
        probe: Liveness probe override (default: backend named in settings)
        tailer: Log tail override (default: backend named in settings)
    """
    settings = settings or load_settings()

    app = FastAPI(title="Traffic Generator Control API")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.config_store = ConfigStore(settings.apps_file, settings.interfaces_file)
    app.state.telemetry = TelemetrySource(
        settings.stats_file,
        settings.traffic_log_file,
        tailer=tailer or build_tailer(settings.tail_backend),
    )
    app.state.probe = probe or build_probe(settings.probe_backend, settings.probe_timeout)

    app.include_router(status.router)
    app.include_router(stats.router)
    app.include_router(config.router)
    app.include_router(logs.router)

    @app.exception_handler(RequestValidationError)
    async def invalid_body_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Rejected malformed request to {request.url.path}")
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Internal error", "details": str(exc)})

    @app.get("/")
    def root():
        return {
            "service": "control",
            "message": "Traffic generator control API running",
        }

    logger.info(f"Control API configured: {settings.describe()}")
    return app
