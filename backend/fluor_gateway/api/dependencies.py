"""Route Dependencies: build per-request services around the shared upstream clients."""

from fastapi import Depends

from fluor_gateway.infrastructure.clients import UpstreamClients, get_upstream
from fluor_gateway.services.invocation_gateway import InvocationGateway
from fluor_gateway.services.registry_admin import RegistryAdmin
from fluor_gateway.services.status_aggregator import StatusAggregator


def get_gateway(upstream: UpstreamClients = Depends(get_upstream)) -> InvocationGateway:
    return InvocationGateway(upstream.registry, upstream.forwarder)


def get_aggregator(upstream: UpstreamClients = Depends(get_upstream)) -> StatusAggregator:
    return StatusAggregator(
        upstream.registry, upstream.forwarder, probe_timeout=upstream.probe_timeout,
    )


def get_admin(upstream: UpstreamClients = Depends(get_upstream)) -> RegistryAdmin:
    return RegistryAdmin(upstream.registry)
