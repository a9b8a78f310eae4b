"""Registry Schemas: Pydantic models for entities owned by the external registry.

Invariants:
    - Function and Trigger are frozen snapshots: the gateway reads them, never mutates them
    - Trigger.function_name is serialized as "function" (registry wire name)
    - readonly defaults to False when the registry omits it
    - Create payloads never accept executable (assigned by the registry) nor readonly=True

Design Decisions:
    - Read models (Function, Trigger) tolerate unknown fields: registry may add columns
    - Write models (FunctionCreate, TriggerCreate) forbid them: validated at the boundary
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fluor_gateway.core.domain_types import Language


class Function(BaseModel):
    """Deployable unit of compute, addressed by name."""
    model_config = ConfigDict(frozen=True)

    name: str
    language: Language = Language.PYTHON
    executable: str = ""
    cpu: str = ""
    memory: str = ""
    readonly: bool = False


class Trigger(BaseModel):
    """Binding of (HTTP method, path) to a target function."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    method: str
    path: str
    function_name: str = Field(alias="function")
    readonly: bool = False


class HealthPayload(BaseModel):
    """Liveness payload: status is compared to the healthy sentinel."""
    status: str


class ExecutionMetric(BaseModel):
    """One bucket of an execution-count time series."""
    time_bucket: str
    count: int = Field(ge=0)


class LogEntry(BaseModel):
    """One log line as recorded by the registry's telemetry store."""
    timestamp: str
    level: str
    body: str
    trace_id: str = ""
    function_name: str = ""


# --- Write payloads -----------------------------------------------------------

class FunctionCreate(BaseModel):
    """Function creation: executable is assigned by the registry."""
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=128)
    language: Language
    cpu: str = Field(min_length=1)
    memory: str = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class FunctionUpdate(BaseModel):
    """Function update: name is immutable, taken from the URL."""
    model_config = ConfigDict(extra="forbid")

    language: Language
    cpu: str = Field(min_length=1)
    memory: str = Field(min_length=1)


class TriggerCreate(BaseModel):
    """Trigger creation: method and path are kept exactly as given."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str = Field(min_length=1, max_length=128)
    method: str = Field(min_length=1)
    path: str = Field(pattern=r"^/")
    function_name: str = Field(alias="function", min_length=1)


class TriggerUpdate(BaseModel):
    """Trigger update: name is immutable, taken from the URL."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    method: str = Field(min_length=1)
    path: str = Field(pattern=r"^/")
    function_name: str = Field(alias="function", min_length=1)
