"""Status Aggregator: fan-out/join with per-probe isolation and liveness-only status.

Invariants:
    - All probes failing -> Down, every data field None, no exception
    - Liveness ok + everything else failing -> Operational with only health populated
    - Liveness timeout -> Down, other probes still populated
    - A failed probe never blanks an unrelated field
    - Probes run concurrently: total latency tracks the slowest probe, not the sum
"""

import asyncio
import time

import httpx
import pytest

from fluor_gateway.core.domain_types import (
    ProbeFailureReason, ProbeName, SystemStatus,
)
from fluor_gateway.core.errors import ResourceNotFoundError
from fluor_gateway.core.probe_result import ProbeFailure, ProbeSuccess
from fluor_gateway.services.status_aggregator import (
    StatusAggregator, run_probe, run_probes,
)
from tests.services.fake_upstream import PROBE_TIMEOUT


@pytest.fixture
def aggregator(registry, forwarder):
    return StatusAggregator(registry, forwarder, probe_timeout=PROBE_TIMEOUT)


def _reports(view):
    return {p.name: p for p in view.probes}


# ─── Dashboard ──────────────────────────────────────────────────

async def test_all_probes_healthy(aggregator):
    view = await aggregator.aggregate()

    assert view.status is SystemStatus.OPERATIONAL
    assert view.function_count == 2
    assert view.trigger_count == 2
    assert view.health.status == "ok"
    assert [m.count for m in view.metrics] == [3, 5]
    assert view.logs[0].function_name == "f1"
    assert all(p.ok for p in view.probes)
    assert len(view.probes) == 5


async def test_all_probes_failing_is_down_with_nothing_populated(aggregator, fake):
    fake.fail_everything()

    view = await aggregator.aggregate()

    assert view.status is SystemStatus.DOWN
    assert view.function_count is None
    assert view.trigger_count is None
    assert view.health is None
    assert view.metrics is None
    assert view.logs is None
    assert not any(p.ok for p in view.probes)
    assert all(
        p.reason is ProbeFailureReason.CONNECTION_ERROR for p in view.probes
    )


async def test_liveness_alone_decides_operational(aggregator, fake):
    fake.fail_everything()
    del fake.errors["/function/healthz"]

    view = await aggregator.aggregate()

    assert view.status is SystemStatus.OPERATIONAL
    assert view.health.status == "ok"
    assert view.function_count is None
    assert view.trigger_count is None
    assert view.metrics is None
    assert view.logs is None


async def test_liveness_timeout_is_down_but_others_survive(aggregator, fake):
    fake.delays["/function/healthz"] = PROBE_TIMEOUT * 4

    view = await aggregator.aggregate()

    assert view.status is SystemStatus.DOWN
    health = _reports(view)[ProbeName.HEALTH]
    assert health.ok is False
    assert health.reason is ProbeFailureReason.TIMEOUT
    assert view.function_count == 2
    assert view.trigger_count == 2
    assert view.metrics is not None
    assert view.logs is not None


async def test_unhealthy_sentinel_is_degraded(aggregator, fake):
    fake.health = {"status": "degraded"}
    view = await aggregator.aggregate()
    assert view.status is SystemStatus.DEGRADED
    assert view.health.status == "degraded"


async def test_unparsable_liveness_is_degraded(aggregator, fake):
    fake.raw_bodies["/function/healthz"] = b"<html>teapot</html>"

    view = await aggregator.aggregate()

    assert view.status is SystemStatus.DEGRADED
    assert view.health is None
    assert _reports(view)[ProbeName.HEALTH].reason is ProbeFailureReason.PARSE_ERROR


async def test_liveness_missing_status_field_is_degraded(aggregator, fake):
    fake.health = {"healthy": True}
    view = await aggregator.aggregate()
    assert view.status is SystemStatus.DEGRADED


async def test_liveness_http_error_is_down(aggregator, fake):
    fake.statuses["/function/healthz"] = 503
    view = await aggregator.aggregate()
    assert view.status is SystemStatus.DOWN
    assert _reports(view)[ProbeName.HEALTH].reason is ProbeFailureReason.HTTP_ERROR


async def test_metrics_failure_keeps_counts(aggregator, fake):
    fake.errors["/telemetry/metrics/overall"] = httpx.ConnectError

    view = await aggregator.aggregate()

    assert view.metrics is None
    assert view.function_count == 2
    assert view.trigger_count == 2
    assert view.logs is not None
    assert view.status is SystemStatus.OPERATIONAL


async def test_malformed_list_is_parse_error(aggregator, fake):
    fake.raw_bodies["/functions"] = b'[{"nameless": true}]'

    view = await aggregator.aggregate()

    assert view.function_count is None
    assert _reports(view)[ProbeName.FUNCTIONS].reason is ProbeFailureReason.PARSE_ERROR
    assert view.trigger_count == 2


async def test_probes_run_concurrently(registry, forwarder, fake):
    delay = 0.2
    for path in (
        "/functions", "/triggers", "/function/healthz",
        "/telemetry/metrics/overall", "/telemetry/logs",
    ):
        fake.delays[path] = delay
    aggregator = StatusAggregator(registry, forwarder, probe_timeout=2.0)

    start = time.perf_counter()
    view = await aggregator.aggregate()
    elapsed = time.perf_counter() - start

    assert view.status is SystemStatus.OPERATIONAL
    assert elapsed < delay * 3  # sequential would take delay * 5


# ─── Probe runner ───────────────────────────────────────────────

async def test_run_probe_absorbs_unexpected_exceptions():
    async def broken():
        raise KeyError("bug")

    result = await run_probe(ProbeName.METRICS, broken, timeout=1.0)

    assert isinstance(result, ProbeFailure)
    assert result.reason is ProbeFailureReason.CONNECTION_ERROR
    assert result.detail == "KeyError"


async def test_run_probe_times_out_stuck_probe():
    async def stuck():
        await asyncio.sleep(10)

    result = await run_probe(ProbeName.LOGS, stuck, timeout=0.05)

    assert isinstance(result, ProbeFailure)
    assert result.reason is ProbeFailureReason.TIMEOUT
    assert result.latency_ms < 1000


async def test_run_probes_keys_results_by_name():
    async def one():
        return 1

    async def fails():
        raise ConnectionError("down")

    results = await run_probes(
        {ProbeName.FUNCTIONS: one, ProbeName.TRIGGERS: fails}, timeout=1.0,
    )

    assert isinstance(results[ProbeName.FUNCTIONS], ProbeSuccess)
    assert results[ProbeName.FUNCTIONS].value == 1
    assert isinstance(results[ProbeName.TRIGGERS], ProbeFailure)


# ─── Function detail ────────────────────────────────────────────

async def test_function_detail_merges_all_sources(aggregator):
    view = await aggregator.function_detail("f1")

    assert view.function.name == "f1"
    assert [t.name for t in view.triggers] == ["t1"]
    assert view.metrics is not None
    assert [e.body for e in view.logs] == ["Function f1 started"]


async def test_function_detail_unknown_function_is_not_found(aggregator):
    with pytest.raises(ResourceNotFoundError):
        await aggregator.function_detail("nope")


async def test_function_detail_lookup_failure_keeps_other_fields(aggregator, fake):
    fake.errors["/functions/f1"] = httpx.ConnectError

    view = await aggregator.function_detail("f1")

    assert view.function is None
    assert view.triggers is not None
    assert view.metrics is not None
    assert _reports(view)[ProbeName.FUNCTION].ok is False


async def test_function_detail_falls_back_to_list_scan(aggregator, fake):
    fake.statuses["/functions/f1"] = 405

    view = await aggregator.function_detail("f1")

    assert view.function.name == "f1"
    assert any(r.url.path == "/functions" for r in fake.requests)
