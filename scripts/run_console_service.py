"""
Console Service Launcher

Starts the dashboard console.

Architecture:
-------------
- Flask web server (port 5000)
- Background poller (fetches stats, status and logs every 2 seconds)
- Rolling history of the last 20 stats samples, held in memory only

Usage:
------
python scripts/run_console_service.py

Environment Variables:
----------------------
TRAFFICGEN_API_BASE_URL: control API base URL (default: http://127.0.0.1:3001)
TRAFFICGEN_CONSOLE_PORT: Flask server port (default: 5000)
TRAFFICGEN_CONSOLE_BIND_HOST: Flask bind address (default: 0.0.0.0)
TRAFFICGEN_CONSOLE_DEBUG: Enable Flask debug mode (default: false)
TRAFFICGEN_POLL_INTERVAL: seconds between polls (default: 2)
"""

import os
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from console.service import create_app
from control.config import API_BASE_URL, CONSOLE_PORT, POLL_INTERVAL_SECONDS
from shared.logging_config import level_from_name, setup_logging


def main():
    """Main entrypoint for the console service."""
    bind_host = os.getenv("TRAFFICGEN_CONSOLE_BIND_HOST", "0.0.0.0")
    debug = os.getenv("TRAFFICGEN_CONSOLE_DEBUG", "false").lower() in {"true", "1", "yes"}

    setup_logging("console", level=level_from_name(os.getenv("TRAFFICGEN_LOG_LEVEL")))

    print("=" * 60)
    print("Traffic Generator Console")
    print("=" * 60)
    print(f"Control API: {API_BASE_URL}")
    print(f"Bind Address: {bind_host}:{CONSOLE_PORT}")
    print(f"Poll interval: {POLL_INTERVAL_SECONDS}s")
    print(f"Debug Mode: {debug}")
    print("=" * 60)

    app = create_app()

    try:
        app.run(
            host=bind_host,
            port=CONSOLE_PORT,
            debug=debug,
            use_reloader=False  # Avoid double poller thread startup
        )
    except KeyboardInterrupt:
        print("\nShutting down console...")
        return 0
    except Exception as e:
        print(f"\nError running console: {e}")
        import traceback
        traceback.print_exc()
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
