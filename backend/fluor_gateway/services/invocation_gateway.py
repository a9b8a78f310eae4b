"""Invocation Gateway: resolve an inbound (method, path) and forward it to the function.

Invariants:
    - Each invocation reads its own trigger snapshot: no route table survives the call
    - Routing looks at the path only; the query string rides along to the function
    - No matching trigger -> RouteNotFoundError (404), nothing is sent downstream
    - Trigger pointing at a missing function -> RegistryInconsistencyError (502), logged
    - Runtime unreachable -> UpstreamUnreachableError, distinct from any relayed response
    - Nothing is retried; nothing is written back to the registry

Design Decisions:
    - Duplicate bindings are logged, not rejected: resolve() already picks the first,
      and the registry owns uniqueness
"""

import logging

from fluor_gateway.core.errors import (
    ErrorContext, RegistryInconsistencyError, RouteNotFoundError,
)
from fluor_gateway.core.raw_response import RawResponse
from fluor_gateway.core.route_resolver import find_route_conflicts, resolve
from fluor_gateway.infrastructure.registry_client import RegistryClient
from fluor_gateway.infrastructure.runtime_client import InvocationForwarder

logger = logging.getLogger(__name__)


class InvocationGateway:
    """Resolver + forwarder, wired to a registry snapshot per call."""

    def __init__(self, registry: RegistryClient, forwarder: InvocationForwarder):
        self.registry = registry
        self.forwarder = forwarder

    async def invoke(
        self,
        method: str,
        path: str,
        body: bytes | None,
        content_type: str | None = None,
        query: str = "",
    ) -> RawResponse:
        triggers = await self.registry.list_triggers()
        trigger = resolve(triggers, method, path)
        if trigger is None:
            logger.info(
                f"No route for {method} {path}",
                extra={"method": method, "path": path},
            )
            raise RouteNotFoundError(method, path)

        conflicts = find_route_conflicts(triggers).get((method, path))
        if conflicts:
            logger.warning(
                f"Triggers {conflicts} share {method} {path}, using {trigger.name}",
                extra={"method": method, "path": path, "trigger_name": trigger.name},
            )

        function = await self.registry.get_function(trigger.function_name)
        if function is None:
            logger.warning(
                f"Trigger {trigger.name} points to missing function {trigger.function_name}",
                extra={"trigger_name": trigger.name, "function_name": trigger.function_name},
            )
            raise RegistryInconsistencyError(
                trigger.name, trigger.function_name,
                ErrorContext(method=method, path=path),
            )

        return await self.forwarder.forward(
            trigger, function, body, content_type, query=query,
        )
