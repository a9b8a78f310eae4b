"""Probe Results: tagged union of a probe that fully succeeded or fully failed.

Invariants:
    - A ProbeResult is either ProbeSuccess (typed payload) or ProbeFailure (reason), never both
    - Both variants carry latency_ms and completed_at for the per-probe report
    - Instances are frozen: results are merged into the view model, never mutated

Design Decisions:
    - Two frozen dataclasses + Union alias over a single class with optional fields:
      isinstance() narrowing gives the type checker the payload type
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Generic, TypeVar, Union

from fluor_gateway.core.domain_types import ProbeFailureReason

T = TypeVar("T")


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ProbeSuccess(Generic[T]):
    value: T
    latency_ms: float
    completed_at: datetime = field(default_factory=_now)

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class ProbeFailure:
    reason: ProbeFailureReason
    detail: str
    latency_ms: float
    completed_at: datetime = field(default_factory=_now)

    @property
    def ok(self) -> bool:
        return False


ProbeResult = Union[ProbeSuccess[T], ProbeFailure]


def value_or_none(result: "ProbeResult[T]") -> T | None:
    """Payload of a successful probe, or None as the absence marker."""
    if isinstance(result, ProbeSuccess):
        return result.value
    return None
