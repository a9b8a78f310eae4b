"""Invocation Policy: pure rules for shaping the downstream invocation request.

Invariants:
    - GET and HEAD never carry a body downstream, whatever the caller supplied
    - Every other method forwards the caller's bytes verbatim (no re-encoding)
    - The runtime path is the literal INVOCATION_PREFIX + trigger path
"""

from fluor_gateway.core.domain_types import BODYLESS_METHODS, INVOCATION_PREFIX


def allows_body(method: str) -> bool:
    return method not in BODYLESS_METHODS


def outbound_body(method: str, body: bytes | None) -> bytes | None:
    """Body to send downstream for this method, or None to send no body at all."""
    if not allows_body(method):
        return None
    return body or None


def invocation_path(trigger_path: str) -> str:
    """Runtime path under which a trigger's function is reached."""
    return f"{INVOCATION_PREFIX}{trigger_path}"


def strip_invocation_prefix(request_path: str) -> str:
    """Inbound gateway path -> trigger path (inverse of invocation_path)."""
    if request_path.startswith(INVOCATION_PREFIX):
        return request_path[len(INVOCATION_PREFIX):]
    return request_path
