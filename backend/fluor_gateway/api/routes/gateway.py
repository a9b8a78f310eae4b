"""Invocation Gateway Route: `{ANY} /function/{path}` resolved and forwarded to a function.

Invariants:
    - The function's status, body bytes, content type and Location are returned unchanged;
      every other response header is dropped
    - The query string is forwarded as-is and takes no part in route matching
    - No route -> 404 envelope; runtime unreachable -> 502/504 envelope (global handlers)
    - The trigger path is the request path minus the /function prefix, not normalized
    - A caller disconnect cancels the in-flight invocation; the 499 answer goes nowhere

Design Decisions:
    - content-type set as a raw header, not media_type: Starlette would append a charset
      to text/* types and the relay must stay byte-exact
    - Disconnects are watched on the ASGI receive channel: Starlette does not cancel a
      non-streaming endpoint when its client goes away
"""

import asyncio
import logging
from typing import Awaitable

from fastapi import APIRouter, Depends, Request, Response

from fluor_gateway.api.dependencies import get_gateway
from fluor_gateway.core.domain_types import INVOCATION_PREFIX
from fluor_gateway.core.invocation_policy import strip_invocation_prefix
from fluor_gateway.core.raw_response import RawResponse
from fluor_gateway.services.invocation_gateway import InvocationGateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix=INVOCATION_PREFIX, tags=["gateway"])

_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

# Client Closed Request: never seen by the caller, only by access logs
_CLIENT_CLOSED = 499


async def _wait_for_disconnect(request: Request) -> None:
    while (await request.receive())["type"] != "http.disconnect":
        pass


async def _unless_disconnected(
    request: Request, invocation: Awaitable[RawResponse],
) -> RawResponse | None:
    """Await invocation, cancelling it if the caller disconnects first (-> None)."""
    forward = asyncio.ensure_future(invocation)
    watcher = asyncio.ensure_future(_wait_for_disconnect(request))
    try:
        await asyncio.wait({forward, watcher}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        watcher.cancel()
        if not forward.done():
            forward.cancel()
    await asyncio.gather(forward, watcher, return_exceptions=True)
    if forward.cancelled():
        return None
    return forward.result()


@router.api_route("/{trigger_path:path}", methods=_METHODS)
async def invoke_function(
    trigger_path: str,
    request: Request,
    gateway: InvocationGateway = Depends(get_gateway),
):
    """Resolve the trigger for this request and relay the function's response."""
    path = strip_invocation_prefix(request.url.path)
    raw = await _unless_disconnected(request, gateway.invoke(
        request.method,
        path,
        await request.body(),
        request.headers.get("content-type"),
        query=request.url.query,
    ))
    if raw is None:
        logger.info(
            f"Caller disconnected, abandoned {request.method} {path}",
            extra={"method": request.method, "path": path},
        )
        return Response(status_code=_CLIENT_CLOSED)

    headers = {}
    if raw.content_type:
        headers["content-type"] = raw.content_type
    if raw.location:
        headers["location"] = raw.location
    return Response(content=raw.body, status_code=raw.status_code, headers=headers)
