"""Upstream Clients: process-wide registry and runtime clients, owned by the lifespan.

Invariants:
    - init_clients() runs once on startup, close_clients() once on shutdown
    - Dependencies fail loudly if used before init (no lazy construction)

Design Decisions:
    - Module-level singleton initialized on startup: FastAPI lifespan manages lifecycle
      (ADR: no global import side effects)
"""

import logging
from dataclasses import dataclass

from fluor_gateway.config import Settings
from fluor_gateway.infrastructure.registry_client import RegistryClient
from fluor_gateway.infrastructure.runtime_client import InvocationForwarder

logger = logging.getLogger(__name__)


@dataclass
class UpstreamClients:
    registry: RegistryClient
    forwarder: InvocationForwarder
    probe_timeout: float

    async def aclose(self) -> None:
        await self.registry.aclose()
        await self.forwarder.aclose()


# Singleton (initialized on startup)
upstream: UpstreamClients | None = None


def init_clients(settings: Settings) -> UpstreamClients:
    global upstream
    upstream = UpstreamClients(
        registry=RegistryClient(
            settings.registry_url,
            timeout_seconds=settings.registry_timeout_seconds,
            list_fallback=settings.registry_list_fallback,
        ),
        forwarder=InvocationForwarder(
            settings.runtime_url,
            timeout_seconds=settings.invoke_timeout_seconds,
        ),
        probe_timeout=settings.probe_timeout_seconds,
    )
    logger.info(
        f"Upstreams: registry={settings.registry_url} runtime={settings.runtime_url}",
    )
    return upstream


async def close_clients() -> None:
    global upstream
    if upstream is not None:
        await upstream.aclose()
        upstream = None


def get_upstream() -> UpstreamClients:
    """FastAPI dependency for the shared upstream clients."""
    if upstream is None:
        raise RuntimeError("Upstream clients not initialized")
    return upstream
