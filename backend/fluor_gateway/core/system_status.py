"""System Status: three-way decision over the liveness probe result.

Invariants:
    - The liveness probe is the sole input; counts, metrics and logs never affect status
    - Unreachable (timeout, connection error, non-2xx) -> Down
    - Reachable but unparsable, or status != HEALTHY_SENTINEL -> Degraded
    - Reachable and status == HEALTHY_SENTINEL -> Operational
"""

from typing import Protocol

from fluor_gateway.core.domain_types import (
    HEALTHY_SENTINEL, ProbeFailureReason, SystemStatus,
)
from fluor_gateway.core.probe_result import ProbeFailure, ProbeResult


class HealthLike(Protocol):
    status: str


def derive_system_status(liveness: "ProbeResult[HealthLike]") -> SystemStatus:
    """Derive SystemStatus from the liveness probe. Pure, never raises."""
    if isinstance(liveness, ProbeFailure):
        # A parse failure means the probe got an answer: the service is up but unwell
        if liveness.reason is ProbeFailureReason.PARSE_ERROR:
            return SystemStatus.DEGRADED
        return SystemStatus.DOWN
    if liveness.value.status == HEALTHY_SENTINEL:
        return SystemStatus.OPERATIONAL
    return SystemStatus.DEGRADED
