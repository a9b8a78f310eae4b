"""Registry Admin: write passthrough to the registry with the readonly guard.

Invariants:
    - Updates and deletes fetch the current entity first; readonly entities are
      rejected with ReadOnlyResourceError and the write never reaches the registry
    - Unknown entity -> ResourceNotFoundError, again without a registry write
    - Creates carry only caller-settable fields (schemas forbid executable/readonly)
    - Registry answers to accepted writes are relayed as-is
"""

import logging

from fluor_gateway.core.errors import ReadOnlyResourceError, ResourceNotFoundError
from fluor_gateway.core.raw_response import RawResponse
from fluor_gateway.infrastructure.registry_client import (
    RegistryClient, function_path, trigger_path,
)
from fluor_gateway.schemas.registry import (
    Function, FunctionCreate, FunctionUpdate, Trigger, TriggerCreate, TriggerUpdate,
)

logger = logging.getLogger(__name__)


def ensure_writable(entity: Function | Trigger | None, kind: str, name: str):
    if entity is None:
        raise ResourceNotFoundError(kind, name)
    if entity.readonly:
        logger.warning(
            f"Rejected write to read-only {kind.lower()} {name}",
            extra={"error_code": "READ_ONLY_RESOURCE"},
        )
        raise ReadOnlyResourceError(kind, name)


class RegistryAdmin:
    """Guarded create/update/delete for functions and triggers."""

    def __init__(self, registry: RegistryClient):
        self.registry = registry

    # ─── Functions ───────────────────────────────────────────────

    async def create_function(self, body: FunctionCreate) -> RawResponse:
        return await self.registry.write(
            "POST", "/functions", body.model_dump(mode="json"),
        )

    async def update_function(self, name: str, body: FunctionUpdate) -> RawResponse:
        ensure_writable(await self.registry.get_function(name), "Function", name)
        payload = {"name": name, **body.model_dump(mode="json")}
        return await self.registry.write("PUT", function_path(name), payload)

    async def delete_function(self, name: str) -> RawResponse:
        ensure_writable(await self.registry.get_function(name), "Function", name)
        return await self.registry.write("DELETE", function_path(name))

    # ─── Triggers ────────────────────────────────────────────────

    async def create_trigger(self, body: TriggerCreate) -> RawResponse:
        return await self.registry.write(
            "POST", "/triggers", body.model_dump(mode="json", by_alias=True),
        )

    async def update_trigger(self, name: str, body: TriggerUpdate) -> RawResponse:
        ensure_writable(await self.registry.get_trigger(name), "Trigger", name)
        payload = {"name": name, **body.model_dump(mode="json", by_alias=True)}
        return await self.registry.write("PUT", trigger_path(name), payload)

    async def delete_trigger(self, name: str) -> RawResponse:
        ensure_writable(await self.registry.get_trigger(name), "Trigger", name)
        return await self.registry.write("DELETE", trigger_path(name))
