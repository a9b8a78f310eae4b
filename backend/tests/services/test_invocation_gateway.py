"""Invocation Gateway: resolution + forwarding against a fake registry/runtime.

Invariants:
    - GET /hello resolves t1 and reaches the runtime at /function/hello without a body
    - Method mismatch on a known path is RouteNotFound and nothing is forwarded
    - Runtime responses (any status, any bytes) are relayed unchanged
    - Runtime transport failure is UpstreamUnreachableError, not a relayed response
    - A trigger pointing at a missing function is RegistryInconsistencyError
"""

import httpx
import pytest

from fluor_gateway.core.errors import (
    RegistryInconsistencyError,
    RouteNotFoundError,
    UpstreamTimeoutError,
    UpstreamUnreachableError,
)
from fluor_gateway.core.raw_response import RawResponse
from fluor_gateway.services.invocation_gateway import InvocationGateway
from tests.services.fake_upstream import function_dict, trigger_dict


@pytest.fixture
def gateway(registry, forwarder):
    return InvocationGateway(registry, forwarder)


class _RecordingForwarder:
    """Stands in for InvocationForwarder to capture the resolved trigger."""

    def __init__(self):
        self.calls = []

    async def forward(self, trigger, function, body, content_type=None, query=""):
        self.calls.append((trigger, function, body))
        return RawResponse(200, b"ok", "text/plain")


# ─── Resolution ─────────────────────────────────────────────────

async def test_get_hello_forwards_without_body(gateway, fake):
    raw = await gateway.invoke("GET", "/hello", b"should be dropped")

    assert raw == RawResponse(200, b"hello from f1", "text/plain")
    assert len(fake.invocations) == 1
    sent = fake.invocations[0]
    assert sent.method == "GET"
    assert sent.url.path == "/function/hello"
    assert sent.content == b""


async def test_method_mismatch_is_route_not_found(gateway, fake):
    with pytest.raises(RouteNotFoundError) as exc:
        await gateway.invoke("POST", "/hello", b"{}")
    assert exc.value.http_status == 404
    assert fake.invocations == []


async def test_unknown_path_is_route_not_found(gateway, fake):
    with pytest.raises(RouteNotFoundError):
        await gateway.invoke("GET", "/nope", None)
    assert fake.invocations == []


async def test_trigger_set_read_fresh_per_invocation(gateway, fake):
    with pytest.raises(RouteNotFoundError):
        await gateway.invoke("POST", "/echo", b"x")

    fake.triggers.append(trigger_dict("echo", "POST", "/echo", "f1"))
    raw = await gateway.invoke("POST", "/echo", b"x")
    assert raw.status_code == 200


async def test_duplicate_routes_use_first_trigger(registry, fake):
    fake.functions.append(function_dict("f2"))
    fake.triggers = [
        trigger_dict("first", "GET", "/dup", "f1"),
        trigger_dict("second", "GET", "/dup", "f2"),
    ]
    recorder = _RecordingForwarder()
    gateway = InvocationGateway(registry, recorder)

    await gateway.invoke("GET", "/dup", None)

    trigger, function, _ = recorder.calls[0]
    assert trigger.name == "first"
    assert function.name == "f1"


# ─── Body rule ──────────────────────────────────────────────────

async def test_post_body_forwarded_verbatim(gateway, fake):
    fake.triggers.append(trigger_dict("echo", "POST", "/echo", "f1"))
    payload = b'\x00\xff{"not": "validated"'

    await gateway.invoke("POST", "/echo", payload, "application/octet-stream")

    sent = fake.invocations[0]
    assert sent.method == "POST"
    assert sent.content == payload
    assert sent.headers["content-type"] == "application/octet-stream"


async def test_head_never_carries_body(gateway, fake):
    fake.triggers.append(trigger_dict("probe", "HEAD", "/probe", "f1"))

    await gateway.invoke("HEAD", "/probe", b"payload")

    assert fake.invocations[0].method == "HEAD"
    assert fake.invocations[0].content == b""


# ─── Relay ──────────────────────────────────────────────────────

async def test_function_error_status_is_relayed_not_raised(gateway, fake):
    fake.function_reply = (
        500, b"\x89PNG\r\n boom", {"content-type": "application/octet-stream"},
    )

    raw = await gateway.invoke("GET", "/hello", None)

    assert raw.status_code == 500
    assert raw.body == b"\x89PNG\r\n boom"
    assert raw.content_type == "application/octet-stream"


async def test_redirect_is_relayed_not_followed(gateway, fake):
    fake.function_reply = (302, b"", {"location": "http://elsewhere.test/"})

    raw = await gateway.invoke("GET", "/hello", None)

    assert raw.status_code == 302
    assert len(fake.invocations) == 1
    assert raw.location == "http://elsewhere.test/"


async def test_query_string_is_forwarded_but_not_matched(gateway, fake):
    raw = await gateway.invoke("GET", "/hello", None, query="a=1&b=two%20words")

    assert raw.status_code == 200
    sent = fake.invocations[0].url
    assert sent.path == "/function/hello"
    assert sent.query == b"a=1&b=two%20words"


async def test_missing_content_type_is_relayed_as_none(gateway, fake):
    fake.function_reply = (204, b"", {})
    raw = await gateway.invoke("GET", "/hello", None)
    assert raw.content_type is None


# ─── Failures ───────────────────────────────────────────────────

async def test_runtime_connection_failure_is_unreachable(gateway, fake):
    fake.errors["/function/hello"] = httpx.ConnectError

    with pytest.raises(UpstreamUnreachableError) as exc:
        await gateway.invoke("GET", "/hello", None)
    assert exc.value.target == "runtime"
    assert exc.value.context.trigger_name == "t1"


async def test_runtime_timeout_is_unreachable(gateway, fake):
    fake.errors["/function/hello"] = httpx.ReadTimeout

    with pytest.raises(UpstreamTimeoutError):
        await gateway.invoke("GET", "/hello", None)


async def test_forwarder_does_not_retry(gateway, fake):
    fake.errors["/function/hello"] = httpx.ConnectError

    with pytest.raises(UpstreamUnreachableError):
        await gateway.invoke("GET", "/hello", None)

    attempts = [r for r in fake.requests if r.url.path == "/function/hello"]
    assert len(attempts) == 1


async def test_trigger_to_missing_function_is_inconsistency(gateway, fake):
    fake.triggers.append(trigger_dict("ghost", "GET", "/ghost", "deleted-fn"))

    with pytest.raises(RegistryInconsistencyError) as exc:
        await gateway.invoke("GET", "/ghost", None)
    assert exc.value.function_name == "deleted-fn"
    assert fake.invocations == []


async def test_registry_down_is_unreachable(gateway, fake):
    fake.errors["/triggers"] = httpx.ConnectError

    with pytest.raises(UpstreamUnreachableError) as exc:
        await gateway.invoke("GET", "/hello", None)
    assert exc.value.target == "registry"
