"""Invocation Forwarder: issues the downstream request to the function runtime.

Invariants:
    - Request line is `{trigger.method} {runtime_url}/function{trigger.path}[?{query}]`,
      the caller's query string passed through unchanged
    - GET/HEAD never carry a body; other methods carry the caller's bytes verbatim
    - The runtime's status, body bytes and content type are relayed unchanged,
      including 4xx/5xx: "the function failed" is a successful forward
    - Only failing to reach the runtime raises (UpstreamUnreachableError / UpstreamTimeoutError)
    - Exactly one attempt per invocation: no retries

Design Decisions:
    - Redirects are not followed: a 3xx from a function is part of its response,
      relayed with its Location
    - Cancellation is the caller's job: the route cancels forward() when the inbound
      client disconnects, which aborts the pending httpx request
"""

import logging
import time

import httpx
from pydantic import TypeAdapter

from fluor_gateway.core.errors import ErrorContext
from fluor_gateway.core.invocation_policy import invocation_path, outbound_body
from fluor_gateway.core.raw_response import RawResponse
from fluor_gateway.infrastructure.upstream import decode, ensure_success, send
from fluor_gateway.schemas.registry import Function, HealthPayload, Trigger

logger = logging.getLogger(__name__)

_TARGET = "runtime"
_HEALTH_PATH = invocation_path("/healthz")
_health = TypeAdapter(HealthPayload)


class InvocationForwarder:
    """Forwards resolved invocations to the runtime and probes its liveness."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            follow_redirects=False,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def forward(
        self,
        trigger: Trigger,
        function: Function,
        body: bytes | None,
        content_type: str | None = None,
        query: str = "",
    ) -> RawResponse:
        """Invoke function through trigger and relay the raw response."""
        content = outbound_body(trigger.method, body)
        headers = {"content-type": content_type} if content and content_type else None
        url = invocation_path(trigger.path)
        if query:
            url = f"{url}?{query}"
        context = ErrorContext(
            method=trigger.method, path=trigger.path,
            function_name=function.name, trigger_name=trigger.name,
        )

        start = time.perf_counter()
        response = await send(
            self.client, _TARGET, trigger.method, url,
            content=content, headers=headers, context=context,
        )
        latency_ms = round((time.perf_counter() - start) * 1000, 2)

        logger.info(
            f"Function {function.name} answered {response.status_code}",
            extra={
                "function_name": function.name,
                "trigger_name": trigger.name,
                "method": trigger.method,
                "path": trigger.path,
                "status_code": response.status_code,
                "latency_ms": latency_ms,
            },
        )
        return RawResponse(
            status_code=response.status_code,
            body=response.content,
            content_type=response.headers.get("content-type"),
            location=response.headers.get("location"),
        )

    async def health(self) -> HealthPayload:
        """Liveness payload from the runtime's healthz function."""
        response = await send(self.client, _TARGET, "GET", _HEALTH_PATH)
        return decode(ensure_success(response, _TARGET), _TARGET, _health)
