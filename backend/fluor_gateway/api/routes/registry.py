"""Registry Write Routes: guarded create/update/delete relayed to the registry.

Invariants:
    - Payloads validated by Pydantic before reaching the registry
    - Read-only entities -> 403, unknown entities -> 404, both without a registry write
    - Accepted writes return the registry's own status and body
"""

from fastapi import APIRouter, Depends, Response

from fluor_gateway.api.dependencies import get_admin
from fluor_gateway.core.raw_response import RawResponse
from fluor_gateway.schemas.registry import (
    FunctionCreate, FunctionUpdate, TriggerCreate, TriggerUpdate,
)
from fluor_gateway.services.registry_admin import RegistryAdmin

router = APIRouter(prefix="/api/v1", tags=["registry"])


def _relay(raw: RawResponse) -> Response:
    headers = {"content-type": raw.content_type} if raw.content_type else None
    return Response(content=raw.body, status_code=raw.status_code, headers=headers)


@router.post("/functions")
async def create_function(body: FunctionCreate, admin: RegistryAdmin = Depends(get_admin)):
    return _relay(await admin.create_function(body))


@router.put("/functions/{name}")
async def update_function(
    name: str, body: FunctionUpdate, admin: RegistryAdmin = Depends(get_admin),
):
    return _relay(await admin.update_function(name, body))


@router.delete("/functions/{name}")
async def delete_function(name: str, admin: RegistryAdmin = Depends(get_admin)):
    return _relay(await admin.delete_function(name))


@router.post("/triggers")
async def create_trigger(body: TriggerCreate, admin: RegistryAdmin = Depends(get_admin)):
    return _relay(await admin.create_trigger(body))


@router.put("/triggers/{name}")
async def update_trigger(
    name: str, body: TriggerUpdate, admin: RegistryAdmin = Depends(get_admin),
):
    return _relay(await admin.update_trigger(name, body))


@router.delete("/triggers/{name}")
async def delete_trigger(name: str, admin: RegistryAdmin = Depends(get_admin)):
    return _relay(await admin.delete_trigger(name))
