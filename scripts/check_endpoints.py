"""Smoke-check a running control API: every read endpoint answers with JSON."""
import os
import sys

import requests

endpoints = ['/api/status', '/api/stats', '/api/config/apps', '/api/config/interfaces', '/api/logs']
base_url = os.getenv("TRAFFICGEN_API_BASE_URL", "http://127.0.0.1:3001").rstrip("/")


def main() -> int:
    failures = 0
    for ep in endpoints:
        try:
            r = requests.get(f"{base_url}{ep}", timeout=5)
            body = r.json()
            note = body.get("error") if isinstance(body, dict) else f"{len(body)} item(s)"
            print(f"{ep}: {r.status_code} {note or ''}".rstrip())
            if r.status_code >= 500:
                failures += 1
        except Exception as e:
            print(f"{ep}: ERROR - {e}")
            failures += 1
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
