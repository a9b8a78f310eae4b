"""Status Aggregator: concurrent fan-out of independent probes merged into one view.

Invariants:
    - All probes of a cycle start together (asyncio.gather) and are joined once all settle
    - Every probe is wrapped in asyncio.wait_for(probe_timeout): a stuck probe becomes
      ProbeFailure(TIMEOUT) and is cancelled, it never blocks the join
    - run_probe() never raises: every failure is absorbed into a ProbeFailure
    - One failed probe only blanks its own field; unrelated fields stay populated
    - SystemStatus comes from the health probe alone (core/system_status.py)
    - Stateless: nothing carries over between cycles

Design Decisions:
    - Probes are zero-arg coroutine factories keyed by ProbeName: the same runner
      serves the dashboard and the per-function detail view
    - Unexpected exceptions are logged with traceback and reported as connection errors,
      so a bug in one probe still cannot abort the cycle
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any

from fluor_gateway.core.domain_types import ProbeFailureReason, ProbeName
from fluor_gateway.core.errors import (
    PayloadParseError,
    ResourceNotFoundError,
    UpstreamResponseError,
    UpstreamTimeoutError,
    UpstreamUnreachableError,
)
from fluor_gateway.core.probe_result import (
    ProbeFailure, ProbeResult, ProbeSuccess, value_or_none,
)
from fluor_gateway.core.route_resolver import triggers_for_function
from fluor_gateway.core.system_status import derive_system_status
from fluor_gateway.infrastructure.registry_client import RegistryClient
from fluor_gateway.infrastructure.runtime_client import InvocationForwarder
from fluor_gateway.schemas.dashboard import (
    DashboardView, FunctionDetailView, ProbeReport,
)

logger = logging.getLogger(__name__)

Probe = Callable[[], Awaitable[Any]]


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


def _classify(exc: Exception) -> ProbeFailureReason:
    """Map a probe exception onto the failure taxonomy."""
    if isinstance(exc, (asyncio.TimeoutError, UpstreamTimeoutError)):
        return ProbeFailureReason.TIMEOUT
    if isinstance(exc, PayloadParseError):
        return ProbeFailureReason.PARSE_ERROR
    if isinstance(exc, UpstreamResponseError):
        return ProbeFailureReason.HTTP_ERROR
    return ProbeFailureReason.CONNECTION_ERROR


async def run_probe(name: ProbeName, probe: Probe, timeout: float) -> ProbeResult:
    """Run one probe under its deadline. Never raises (except cancellation)."""
    start = time.perf_counter()
    try:
        value = await asyncio.wait_for(probe(), timeout)
    except (
        asyncio.TimeoutError,
        UpstreamUnreachableError,
        UpstreamResponseError,
        PayloadParseError,
    ) as e:
        reason = _classify(e)
        detail = str(e) or f"no result within {timeout}s"
        logger.warning(
            f"Probe {name.value} failed: {detail}",
            extra={"probe": name.value, "reason": reason.value},
        )
        return ProbeFailure(reason, detail, _elapsed_ms(start))
    except Exception as e:
        logger.error(
            f"Probe {name.value} raised unexpectedly: {e}",
            exc_info=True, extra={"probe": name.value},
        )
        return ProbeFailure(
            ProbeFailureReason.CONNECTION_ERROR, type(e).__name__, _elapsed_ms(start),
        )
    return ProbeSuccess(value, _elapsed_ms(start))


async def run_probes(
    probes: dict[ProbeName, Probe], timeout: float,
) -> dict[ProbeName, ProbeResult]:
    """Fan out every probe concurrently, join when all have settled."""
    results = await asyncio.gather(
        *(run_probe(name, probe, timeout) for name, probe in probes.items()),
    )
    return dict(zip(probes, results))


def build_reports(results: dict[ProbeName, ProbeResult]) -> list[ProbeReport]:
    reports = []
    for name, result in results.items():
        if isinstance(result, ProbeFailure):
            reports.append(ProbeReport(
                name=name, ok=False, latency_ms=result.latency_ms,
                completed_at=result.completed_at,
                reason=result.reason, detail=result.detail,
            ))
        else:
            reports.append(ProbeReport(
                name=name, ok=True, latency_ms=result.latency_ms,
                completed_at=result.completed_at,
            ))
    return reports


def _count(items: list | None) -> int | None:
    return None if items is None else len(items)


class StatusAggregator:
    """Builds dashboard and per-function views from independent probes."""

    def __init__(
        self,
        registry: RegistryClient,
        forwarder: InvocationForwarder,
        probe_timeout: float = 3.0,
    ):
        self.registry = registry
        self.forwarder = forwarder
        self.probe_timeout = probe_timeout

    async def aggregate(self) -> DashboardView:
        """One aggregation cycle. Never raises: gaps become None fields."""
        results = await run_probes({
            ProbeName.FUNCTIONS: self.registry.list_functions,
            ProbeName.TRIGGERS: self.registry.list_triggers,
            ProbeName.HEALTH: self.forwarder.health,
            ProbeName.METRICS: self.registry.overall_metrics,
            ProbeName.LOGS: self.registry.recent_logs,
        }, self.probe_timeout)

        status = derive_system_status(results[ProbeName.HEALTH])
        failed = [n.value for n, r in results.items() if isinstance(r, ProbeFailure)]
        if failed:
            logger.info(f"Aggregation degraded: {failed} failed, status {status.value}")

        return DashboardView(
            status=status,
            function_count=_count(value_or_none(results[ProbeName.FUNCTIONS])),
            trigger_count=_count(value_or_none(results[ProbeName.TRIGGERS])),
            health=value_or_none(results[ProbeName.HEALTH]),
            metrics=value_or_none(results[ProbeName.METRICS]),
            logs=value_or_none(results[ProbeName.LOGS]),
            probes=build_reports(results),
            generated_at=datetime.now(timezone.utc),
        )

    async def function_detail(self, name: str) -> FunctionDetailView:
        """Per-function view. Raises ResourceNotFoundError only when the
        registry answered and does not know the function."""

        async def routes():
            return triggers_for_function(await self.registry.list_triggers(), name)

        results = await run_probes({
            ProbeName.FUNCTION: lambda: self.registry.get_function(name),
            ProbeName.TRIGGERS: routes,
            ProbeName.METRICS: lambda: self.registry.function_metrics(name),
            ProbeName.LOGS: lambda: self.registry.function_logs(name),
        }, self.probe_timeout)

        lookup = results[ProbeName.FUNCTION]
        if isinstance(lookup, ProbeSuccess) and lookup.value is None:
            raise ResourceNotFoundError("Function", name)

        return FunctionDetailView(
            name=name,
            function=value_or_none(lookup),
            triggers=value_or_none(results[ProbeName.TRIGGERS]),
            metrics=value_or_none(results[ProbeName.METRICS]),
            logs=value_or_none(results[ProbeName.LOGS]),
            probes=build_reports(results),
            generated_at=datetime.now(timezone.utc),
        )
