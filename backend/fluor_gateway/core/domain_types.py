"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - FunctionName, TriggerName wrap str: never compare bare strings across entity kinds
    - HTTP methods are kept as the caller sent them (case-sensitive, no normalization)
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (view models go straight to FastAPI)
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

FunctionName = NewType("FunctionName", str)
TriggerName = NewType("TriggerName", str)


# ─── Constants ───────────────────────────────────────────────────

HEALTHY_SENTINEL = "ok"
INVOCATION_PREFIX = "/function"
BODYLESS_METHODS = frozenset({"GET", "HEAD"})


# ─── Enums ───────────────────────────────────────────────────────

class Language(str, Enum):
    """Function source language. Informational only to the gateway."""
    PYTHON = "python"
    RUST = "rust"
    GO = "go"


class SystemStatus(str, Enum):
    """Tri-state system status, derived from the liveness probe each cycle."""
    OPERATIONAL = "Operational"
    DEGRADED = "Degraded"
    DOWN = "Down"


class ProbeFailureReason(str, Enum):
    """Why a single probe produced no payload."""
    TIMEOUT = "timeout"
    CONNECTION_ERROR = "connection_error"
    PARSE_ERROR = "parse_error"
    HTTP_ERROR = "http_error"


class ProbeName(str, Enum):
    """Probes issued by the status aggregator."""
    FUNCTIONS = "functions"
    FUNCTION = "function"
    TRIGGERS = "triggers"
    HEALTH = "health"
    METRICS = "metrics"
    LOGS = "logs"
