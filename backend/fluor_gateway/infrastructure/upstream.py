"""Upstream Transport: one place that maps httpx failures onto the error hierarchy.

Invariants:
    - httpx.TimeoutException -> UpstreamTimeoutError
    - any other httpx.TransportError (connect, read, protocol) -> UpstreamUnreachableError
    - send() never inspects the status code: callers decide whether non-2xx is an error
    - decode() maps invalid JSON and shape mismatches to PayloadParseError
    - entity_path() percent-encodes every segment: a name never spills into the
      query, the fragment or a neighbouring segment

Design Decisions:
    - No retries here or in any caller: at-most-once is the only safe default for
      arbitrary-method invocations (ADR: resilience belongs to the caller)
"""

import logging
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from fluor_gateway.core.errors import (
    ErrorContext,
    PayloadParseError,
    UpstreamResponseError,
    UpstreamTimeoutError,
    UpstreamUnreachableError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def send(
    client: httpx.AsyncClient,
    target: str,
    method: str,
    url: str,
    *,
    context: ErrorContext | None = None,
    **kwargs: Any,
) -> httpx.Response:
    """Issue one request, translating transport failures. No retry."""
    try:
        return await client.request(method, url, **kwargs)
    except httpx.TimeoutException as e:
        timeout = client.timeout.read or client.timeout.connect or 0.0
        logger.warning(
            f"Timeout calling {target}: {method} {url}",
            extra={"method": method, "path": url},
        )
        raise UpstreamTimeoutError(target, timeout, context) from e
    except httpx.TransportError as e:
        logger.warning(
            f"Transport error calling {target}: {e!r}",
            extra={"method": method, "path": url},
        )
        raise UpstreamUnreachableError(target, type(e).__name__, context) from e


def ensure_success(response: httpx.Response, target: str) -> httpx.Response:
    if not response.is_success:
        raise UpstreamResponseError(target, response.status_code)
    return response


def decode(response: httpx.Response, target: str, adapter: TypeAdapter[T]) -> T:
    """Validate a JSON response body against adapter's type."""
    try:
        return adapter.validate_json(response.content)
    except ValidationError as e:
        raise PayloadParseError(target, f"{e.error_count()} validation error(s)") from e


def entity_path(*segments: str) -> str:
    """Registry path built from raw segments, e.g. ("functions", "f1?x") -> /functions/f1%3Fx."""
    return "/" + "/".join(quote(segment, safe="") for segment in segments)
