"""
Control API Launcher

Starts the control API that mirrors the traffic generator's on-disk state.

This service provides:
- Run status of the generator via the service manager (or process table)
- Latest stats snapshot and the tail of traffic.log
- Read/edit access to applications.txt and interfaces.txt

Usage:
    python scripts/run_control_service.py --host 0.0.0.0 --port 3001

Environment Variables:
    TRAFFICGEN_API_PORT (or PORT): API port (default: 3001)
    TRAFFICGEN_API_BIND_HOST: Bind address (default: 0.0.0.0)
    TRAFFICGEN_CONFIG_DIR (or CONFIG_DIR): directory of applications.txt / interfaces.txt
    TRAFFICGEN_LOG_DIR (or LOG_DIR): directory of stats.json / traffic.log
    TRAFFICGEN_SERVICE_NAME: service queried for liveness (default: sdwan-traffic-gen)
    TRAFFICGEN_LOG_LEVEL: logging level (default: INFO)
"""
import argparse
import os
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import uvicorn

from control.config import API_PORT, load_settings
from shared.logging_config import level_from_name, setup_logging


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the traffic generator control API")
    parser.add_argument("--host", default=os.getenv("TRAFFICGEN_API_BIND_HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=API_PORT)
    parser.add_argument("--log-file", default=os.getenv("TRAFFICGEN_API_LOG_FILE"))
    args = parser.parse_args()

    setup_logging("control", level=level_from_name(os.getenv("TRAFFICGEN_LOG_LEVEL")), log_file=args.log_file)
    settings = load_settings()

    print("=" * 60)
    print("Traffic Generator Control API")
    print("=" * 60)
    print(f"API Address: {args.host}:{args.port}")
    print(f"Config dir: {settings.config_dir}")
    print(f"Log dir: {settings.log_dir}")
    print(f"Service: {settings.service_name} (probe: {settings.probe_backend})")
    print("=" * 60)

    uvicorn.run(
        "control.service:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=False,
        log_config=None,  # keep the handlers installed by setup_logging
    )


if __name__ == "__main__":
    main()
