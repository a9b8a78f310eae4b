"""Service test fixtures: fake upstream + real clients + FastAPI test client.

Invariants:
    - Every test gets a fresh FakeUpstream (no shared registry state)
    - Registry and runtime clients are the production classes, only the transport is fake
    - The clients singleton is patched for route tests: ASGITransport skips the lifespan

Design Decisions:
    - httpx.MockTransport over monkeypatching client methods: exercises URL building,
      body encoding and error mapping end to end
    - Short probe timeout (0.5s) keeps timeout tests fast
"""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

import fluor_gateway.infrastructure.clients as clients_module
from fluor_gateway.infrastructure.clients import UpstreamClients
from fluor_gateway.infrastructure.registry_client import RegistryClient
from fluor_gateway.infrastructure.runtime_client import InvocationForwarder
from fluor_gateway.main import app
from tests.services.fake_upstream import PROBE_TIMEOUT, FakeUpstream


@pytest.fixture
def fake():
    return FakeUpstream()


@pytest.fixture
async def registry(fake):
    client = RegistryClient(
        "http://registry.test", timeout_seconds=2.0,
        transport=httpx.MockTransport(fake),
    )
    yield client
    await client.aclose()


@pytest.fixture
async def forwarder(fake):
    client = InvocationForwarder(
        "http://runtime.test", timeout_seconds=2.0,
        transport=httpx.MockTransport(fake),
    )
    yield client
    await client.aclose()


@pytest.fixture
def upstream(registry, forwarder):
    return UpstreamClients(
        registry=registry, forwarder=forwarder, probe_timeout=PROBE_TIMEOUT,
    )


@pytest.fixture
async def client(upstream):
    """FastAPI test client with upstream clients patched in."""
    original = clients_module.upstream
    clients_module.upstream = upstream

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    clients_module.upstream = original
