import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SYSTEM_LOG_DIR = Path("/var/log/sdwan-traffic-gen")

APPS_FILENAME = "applications.txt"
INTERFACES_FILENAME = "interfaces.txt"
STATS_FILENAME = "stats.json"
TRAFFIC_LOG_FILENAME = "traffic.log"


def _env(name: str, *fallbacks: str, default: Optional[str] = None) -> Optional[str]:
    for key in (name,) + fallbacks:
        raw = os.getenv(key)
        if raw is not None and str(raw).strip():
            return str(raw).strip()
    return default


def _int_env(name: str, default: int, *fallbacks: str) -> int:
    raw = _env(name, *fallbacks, default=str(default))
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: Optional[float]) -> Optional[float]:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _default_log_dir() -> Path:
    # Fall back to a repo-local directory when the system log dir is absent (dev mode)
    if SYSTEM_LOG_DIR.exists():
        return SYSTEM_LOG_DIR
    return PROJECT_ROOT / "logs"


API_PORT = _int_env("TRAFFICGEN_API_PORT", 3001, "PORT")
CONSOLE_PORT = _int_env("TRAFFICGEN_CONSOLE_PORT", 5000)
API_BASE_URL = str(_env("TRAFFICGEN_API_BASE_URL", default=f"http://127.0.0.1:{API_PORT}")).strip()
POLL_INTERVAL_SECONDS = _float_env("TRAFFICGEN_POLL_INTERVAL", 2.0)


@dataclass
class Settings:
    """Resolved paths and knobs for one control API instance."""

    config_dir: Path
    log_dir: Path
    service_name: str = "sdwan-traffic-gen"
    probe_backend: str = "systemctl"
    probe_timeout: Optional[float] = None
    tail_backend: str = "file"
    log_tail_lines: int = 50
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @property
    def apps_file(self) -> Path:
        return self.config_dir / APPS_FILENAME

    @property
    def interfaces_file(self) -> Path:
        return self.config_dir / INTERFACES_FILENAME

    @property
    def stats_file(self) -> Path:
        return self.log_dir / STATS_FILENAME

    @property
    def traffic_log_file(self) -> Path:
        return self.log_dir / TRAFFIC_LOG_FILENAME

    def describe(self) -> dict:
        return {
            "config_dir": str(self.config_dir),
            "log_dir": str(self.log_dir),
            "service_name": self.service_name,
            "probe_backend": self.probe_backend,
            "tail_backend": self.tail_backend,
        }


def load_settings() -> Settings:
    """Build settings from the environment."""
    config_dir = _env("TRAFFICGEN_CONFIG_DIR", "CONFIG_DIR")
    log_dir = _env("TRAFFICGEN_LOG_DIR", "LOG_DIR")
    origins = _env("TRAFFICGEN_CORS_ORIGINS", default="*")
    return Settings(
        config_dir=Path(config_dir) if config_dir else PROJECT_ROOT / "config",
        log_dir=Path(log_dir) if log_dir else _default_log_dir(),
        service_name=_env("TRAFFICGEN_SERVICE_NAME", default="sdwan-traffic-gen"),
        probe_backend=_env("TRAFFICGEN_PROBE_BACKEND", default="systemctl").lower(),
        probe_timeout=_float_env("TRAFFICGEN_PROBE_TIMEOUT", None),
        tail_backend=_env("TRAFFICGEN_TAIL_BACKEND", default="file").lower(),
        log_tail_lines=_int_env("TRAFFICGEN_LOG_TAIL_LINES", 50),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
    )
