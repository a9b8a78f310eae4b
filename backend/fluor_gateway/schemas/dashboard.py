"""Dashboard Schemas: view models produced by one aggregation cycle.

Invariants:
    - Every data field is independently optional: None is the absence marker
      for a probe that failed, never a default like 0 or []
    - status is always present (derived, never absent)
    - probes lists every probe issued in the cycle, successful or not

Design Decisions:
    - ProbeReport carries reason/latency so the presentation layer can explain gaps
      instead of rendering an opaque failure screen
"""

from datetime import datetime

from pydantic import BaseModel

from fluor_gateway.core.domain_types import (
    ProbeFailureReason, ProbeName, SystemStatus,
)
from fluor_gateway.schemas.registry import (
    ExecutionMetric, Function, HealthPayload, LogEntry, Trigger,
)


class ProbeReport(BaseModel):
    """Outcome of one probe in one cycle."""
    name: ProbeName
    ok: bool
    latency_ms: float
    completed_at: datetime
    reason: ProbeFailureReason | None = None
    detail: str | None = None


class DashboardView(BaseModel):
    """Merged, partially-populated system overview."""
    status: SystemStatus
    function_count: int | None = None
    trigger_count: int | None = None
    health: HealthPayload | None = None
    metrics: list[ExecutionMetric] | None = None
    logs: list[LogEntry] | None = None
    probes: list[ProbeReport]
    generated_at: datetime


class FunctionDetailView(BaseModel):
    """Merged view of one function: definition, routes, metrics, logs."""
    name: str
    function: Function | None = None
    triggers: list[Trigger] | None = None
    metrics: list[ExecutionMetric] | None = None
    logs: list[LogEntry] | None = None
    probes: list[ProbeReport]
    generated_at: datetime
