"""Error Handlers: every gateway failure leaves as the same JSON envelope.

Invariants:
    - All three layers answer through FluorGatewayError.to_response(): same keys,
      timestamp and request context whether the failure was domain, validation or a bug
    - RequestValidationError -> InvalidRequestError (400) with one detail per bad field
    - Any other Exception -> InternalGatewayError (500): no exception text reaches the caller
    - Gateway errors never look like a relayed function response

Design Decisions:
    - Request method/path stamped into the context only where the raising code left it
      empty: RouteNotFoundError already records the trigger path, not the gateway path
    - Log level follows error severity: a missing route is routine, an unreachable runtime is not
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from fluor_gateway.core.errors import (
    ErrorSeverity, FluorGatewayError, InternalGatewayError, InvalidRequestError,
)

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.ERROR,
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(FluorGatewayError)
    async def gateway_error_handler(request: Request, exc: FluorGatewayError):
        return _respond(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        return _respond(request, InvalidRequestError(_field_details(exc)))

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}",
            exc_info=exc,
        )
        return _respond(request, InternalGatewayError())


def _respond(request: Request, exc: FluorGatewayError) -> JSONResponse:
    ctx = exc.context
    if ctx.method is None:
        ctx.method = request.method
    if ctx.path is None:
        ctx.path = request.url.path

    logger.log(
        _LOG_LEVELS[exc.severity],
        f"{exc.code}: {exc.message}",
        extra={
            "error_code": exc.code,
            "method": ctx.method,
            "path": ctx.path,
            "status_code": exc.http_status,
            "function_name": ctx.function_name,
            "trigger_name": ctx.trigger_name,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


def _field_details(exc: RequestValidationError) -> list[dict[str, str]]:
    return [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
