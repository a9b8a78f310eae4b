"""Error Hierarchy: typed, categorized exceptions for every gateway failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Caller errors (4xx) are recoverable; upstream errors (5xx) are gateway failures
    - to_response() produces the REST envelope used by all global handlers
    - A relayed function response is never represented here: only gateway-side failures

Design Decisions:
    - Single hierarchy with FluorGatewayError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - Probe failures are NOT exceptions at the aggregator boundary: they are absorbed
      into ProbeFailure values (core/probe_result.py)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    ROUTE_NOT_FOUND = "route_not_found"
    UPSTREAM = "upstream"
    REGISTRY_INCONSISTENCY = "registry_inconsistency"
    INTERNAL = "internal"
    TIMEOUT = "timeout"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    method: str | None = None
    path: str | None = None
    function_name: str | None = None
    trigger_name: str | None = None
    debug_info: dict[str, Any] | None = None


class FluorGatewayError(Exception):
    """Base exception for all gateway errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "method": self.context.method,
                    "path": self.context.path,
                    "function_name": self.context.function_name,
                    "trigger_name": self.context.trigger_name,
                },
            }
        }


# ─── Caller Errors (400-level) ──────────────────────────────────

class RouteNotFoundError(FluorGatewayError):
    """No trigger binds the requested (method, path)."""
    def __init__(self, method: str, path: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.method, ctx.path = method, path
        super().__init__(
            f"No trigger matches {method} {path}",
            "ROUTE_NOT_FOUND", ErrorCategory.ROUTE_NOT_FOUND,
            ErrorSeverity.INFO, ctx, 404,
        )
        self.method = method
        self.path = path


class ResourceNotFoundError(FluorGatewayError):
    """Requested registry entity does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class InvalidRequestError(FluorGatewayError):
    """Inbound body or parameters failed validation; details name each bad field."""
    def __init__(
        self, details: list[dict[str, str]], context: ErrorContext | None = None,
    ):
        super().__init__(
            "Invalid request data",
            "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.details = details

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["details"] = self.details
        return response


class ReadOnlyResourceError(FluorGatewayError):
    """Write attempted against a registry-managed (readonly) entity."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' is read-only",
            "READ_ONLY_RESOURCE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 403,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


# ─── Upstream Errors (500-level) ────────────────────────────────

class UpstreamUnreachableError(FluorGatewayError):
    """Gateway could not reach the function runtime or registry."""
    def __init__(self, target: str, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Upstream {target} unreachable: {reason}",
            "UPSTREAM_UNREACHABLE", ErrorCategory.UPSTREAM,
            ErrorSeverity.CRITICAL, context, 502,
        )
        self.target = target
        self.reason = reason


class UpstreamTimeoutError(UpstreamUnreachableError):
    """Upstream did not answer within the configured deadline."""
    def __init__(self, target: str, timeout_seconds: float, context: ErrorContext | None = None):
        super().__init__(target, f"no response within {timeout_seconds}s", context)
        self.code = "UPSTREAM_TIMEOUT"
        self.category = ErrorCategory.TIMEOUT
        self.http_status = 504
        self.timeout_seconds = timeout_seconds


class UpstreamResponseError(FluorGatewayError):
    """Registry answered, but with a non-success status."""
    def __init__(self, target: str, status_code: int, context: ErrorContext | None = None):
        super().__init__(
            f"Upstream {target} returned HTTP {status_code}",
            "UPSTREAM_RESPONSE_ERROR", ErrorCategory.UPSTREAM,
            ErrorSeverity.ERROR, context, 502,
        )
        self.target = target
        self.status_code = status_code


class PayloadParseError(FluorGatewayError):
    """Registry answered with a payload that does not match the expected shape."""
    def __init__(self, target: str, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Upstream {target} returned an unparsable payload: {reason}",
            "UPSTREAM_PAYLOAD_INVALID", ErrorCategory.UPSTREAM,
            ErrorSeverity.ERROR, context, 502,
        )
        self.target = target
        self.reason = reason


class RegistryInconsistencyError(FluorGatewayError):
    """Trigger references a function the registry no longer knows."""
    def __init__(
        self, trigger_name: str, function_name: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.trigger_name, ctx.function_name = trigger_name, function_name
        super().__init__(
            f"Trigger '{trigger_name}' points to missing function '{function_name}'",
            "REGISTRY_INCONSISTENCY", ErrorCategory.REGISTRY_INCONSISTENCY,
            ErrorSeverity.WARNING, ctx, 502,
        )
        self.trigger_name = trigger_name
        self.function_name = function_name


# ─── Gateway Errors ─────────────────────────────────────────────

class InternalGatewayError(FluorGatewayError):
    """Unexpected failure inside the gateway. The message never carries internals."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "An unexpected error occurred",
            "INTERNAL_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
