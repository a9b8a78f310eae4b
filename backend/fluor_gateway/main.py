"""Fluor Gateway: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map FluorGatewayError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Upstream clients created on startup and closed on shutdown via lifespan
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fluor_gateway.api.error_handlers import register_error_handlers
from fluor_gateway.api.routes import dashboard, gateway, health, registry
from fluor_gateway.config import get_settings
from fluor_gateway.infrastructure.clients import close_clients, init_clients
from fluor_gateway.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_clients(settings)
    logger.info("Fluor Gateway started")
    yield
    await close_clients()
    logger.info("Fluor Gateway shutting down")


app = FastAPI(
    title="Fluor Gateway", version="0.1.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(dashboard.router)
app.include_router(registry.router)
# Catch-all invocation namespace registered last
app.include_router(gateway.router)

register_error_handlers(app)
