"""Dashboard Routes: aggregated system view and per-function view.

Invariants:
    - GET /api/v1/dashboard always answers 200: probe failures show up as None fields
      and in the probes report, never as an error status
    - GET /api/v1/dashboard/functions/{name} answers 404 only when the registry
      confirmed the function does not exist
"""

from fastapi import APIRouter, Depends

from fluor_gateway.api.dependencies import get_aggregator
from fluor_gateway.schemas.dashboard import DashboardView, FunctionDetailView
from fluor_gateway.services.status_aggregator import StatusAggregator

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardView)
async def get_dashboard(aggregator: StatusAggregator = Depends(get_aggregator)):
    """One aggregation cycle: status, counts, metrics, logs."""
    return await aggregator.aggregate()


@router.get("/functions/{name}", response_model=FunctionDetailView)
async def get_function_detail(
    name: str, aggregator: StatusAggregator = Depends(get_aggregator),
):
    """Definition, routes, metrics and logs of one function."""
    return await aggregator.function_detail(name)
