"""Registry Client: async reads (and relayed writes) against the external function registry.

Invariants:
    - Every read returns a fresh snapshot: nothing is cached between calls
    - Transport failures, non-2xx answers and malformed payloads raise typed errors
      (infrastructure/upstream.py); callers decide whether to absorb them
    - get_function() uses GET /functions/{name} first; the GET /functions scan only
      runs when list_fallback is enabled and the direct lookup did not succeed
    - Writes are relayed verbatim (status + body), never interpreted here
    - Names are always percent-encoded into a single path segment (entity_path)

Design Decisions:
    - One pooled httpx.AsyncClient per registry: safe for concurrent use across requests
    - transport parameter: tests inject httpx.MockTransport without patching
"""

import logging
from typing import Any

import httpx
from pydantic import TypeAdapter

from fluor_gateway.core.errors import UpstreamUnreachableError
from fluor_gateway.core.raw_response import RawResponse
from fluor_gateway.infrastructure.upstream import (
    decode, ensure_success, entity_path, send,
)
from fluor_gateway.schemas.registry import (
    ExecutionMetric, Function, LogEntry, Trigger,
)

logger = logging.getLogger(__name__)

_TARGET = "registry"

_functions = TypeAdapter(list[Function])
_function = TypeAdapter(Function)
_triggers = TypeAdapter(list[Trigger])
_metrics = TypeAdapter(list[ExecutionMetric])
_logs = TypeAdapter(list[LogEntry])


def function_path(name: str) -> str:
    return entity_path("functions", name)


def trigger_path(name: str) -> str:
    return entity_path("triggers", name)


class RegistryClient:
    """Reads functions, triggers and telemetry from the registry."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 5.0,
        list_fallback: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = httpx.AsyncClient(
            base_url=base_url, timeout=timeout_seconds, transport=transport,
        )
        self.list_fallback = list_fallback

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _get(self, url: str, adapter: TypeAdapter):
        response = await send(self.client, _TARGET, "GET", url)
        return decode(ensure_success(response, _TARGET), _TARGET, adapter)

    # ─── Functions & Triggers ────────────────────────────────────

    async def list_functions(self) -> list[Function]:
        return await self._get("/functions", _functions)

    async def get_function(self, name: str) -> Function | None:
        """Look up one function by name; None if the registry does not know it."""
        response = await send(self.client, _TARGET, "GET", function_path(name))
        if response.is_success:
            return decode(response, _TARGET, _function)
        if self.list_fallback:
            logger.info(
                f"Direct lookup for function {name} returned HTTP "
                f"{response.status_code}, scanning function list",
                extra={"function_name": name, "status_code": response.status_code},
            )
            return next(
                (f for f in await self.list_functions() if f.name == name), None,
            )
        if response.status_code == 404:
            return None
        ensure_success(response, _TARGET)
        return None

    async def list_triggers(self) -> list[Trigger]:
        return await self._get("/triggers", _triggers)

    async def get_trigger(self, name: str) -> Trigger | None:
        """Triggers have no lookup-by-name endpoint: scan the list."""
        return next((t for t in await self.list_triggers() if t.name == name), None)

    # ─── Telemetry ───────────────────────────────────────────────

    async def overall_metrics(self) -> list[ExecutionMetric]:
        return await self._get("/telemetry/metrics/overall", _metrics)

    async def recent_logs(self) -> list[LogEntry]:
        return await self._get("/telemetry/logs", _logs)

    async def function_metrics(self, name: str) -> list[ExecutionMetric]:
        url = entity_path("telemetry", "functions", name, "metrics")
        return await self._get(url, _metrics)

    async def function_logs(self, name: str) -> list[LogEntry]:
        url = entity_path("telemetry", "functions", name, "logs")
        return await self._get(url, _logs)

    # ─── Writes ──────────────────────────────────────────────────

    async def write(
        self, method: str, url: str, payload: dict[str, Any] | None = None,
    ) -> RawResponse:
        """Relay a write to the registry and return its answer untouched."""
        response = await send(self.client, _TARGET, method, url, json=payload)
        return RawResponse(
            status_code=response.status_code,
            body=response.content,
            content_type=response.headers.get("content-type"),
        )

    async def ping(self) -> bool:
        """Readiness check: registry reachable and answering GET /functions."""
        try:
            response = await send(self.client, _TARGET, "GET", "/functions")
        except UpstreamUnreachableError:
            return False
        return response.is_success
