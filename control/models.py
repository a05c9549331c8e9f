from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union
import enum

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

# ============================================================================
# ENUM DEFINITIONS
# ============================================================================

class RunState(str, enum.Enum):
    """Run state of the external traffic generator"""
    RUNNING = "running"
    STOPPED = "stopped"
    UNKNOWN = "unknown"

class Outcome(str, enum.Enum):
    """Tagged result of a file-backed store operation"""
    OK = "ok"
    NOT_FOUND = "not_found"
    PARSE_ERROR = "parse_error"
    READ_FAILED = "read_failed"
    WRITE_FAILED = "write_failed"

# ============================================================================
# RESULT TYPES
# ============================================================================

@dataclass
class StoreResult(Generic[T]):
    """Outcome of a store call plus its value or error detail"""
    outcome: Outcome
    value: Optional[T] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome == Outcome.OK

    @classmethod
    def success(cls, value: Optional[T] = None) -> "StoreResult[T]":
        return cls(Outcome.OK, value)

    @classmethod
    def failure(cls, outcome: Outcome, detail: Optional[str] = None) -> "StoreResult[T]":
        return cls(outcome, None, detail)


@dataclass
class ProbeResult:
    """Liveness answer; error is set only when the state is UNKNOWN"""
    state: RunState
    error: Optional[str] = None

# ============================================================================
# DOMAIN MODELS
# ============================================================================

class ApplicationRule(BaseModel):
    """One `domain|weight|endpoint` line of the applications file"""
    domain: str
    weight: int = Field(ge=0)
    endpoint: str = ""


class StatsSnapshot(BaseModel):
    """Point-in-time telemetry written by the traffic generator"""
    model_config = ConfigDict(extra="allow")

    timestamp: Union[int, float]
    total_requests: int = Field(ge=0)
    requests_by_app: Dict[str, int] = Field(default_factory=dict)
    errors_by_app: Dict[str, int] = Field(default_factory=dict)

# ============================================================================
# REQUEST BODIES
# ============================================================================

class AppWeightUpdate(BaseModel):
    domain: str = Field(min_length=1)
    weight: int = Field(ge=0, strict=True)


class InterfacesUpdate(BaseModel):
    interfaces: List[str]


def error_body(error: str, details: Any = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": error}
    if details is not None:
        body["details"] = details
    return body
