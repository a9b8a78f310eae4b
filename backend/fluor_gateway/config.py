"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - Upstream base URLs are explicit settings passed to client constructors, never globals
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - runtime_url falls back to registry_url: the reference deployment serves both on one host
"""

from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Upstreams
    registry_url: str = "http://localhost:8080"
    runtime_url: str | None = None

    @field_validator("registry_url", "runtime_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        """Invocation paths start with '/', keep base URLs slash-free."""
        if isinstance(v, str):
            return v.rstrip("/")
        return v

    @model_validator(mode="after")
    def default_runtime_url(self) -> "Settings":
        if not self.runtime_url:
            self.runtime_url = self.registry_url
        return self

    # Timeouts (seconds)
    registry_timeout_seconds: float = Field(5.0, gt=0)
    invoke_timeout_seconds: float = Field(30.0, gt=0)
    probe_timeout_seconds: float = Field(3.0, gt=0)

    # Function lookup: scan GET /functions when GET /functions/{name} fails
    registry_list_fallback: bool = True

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
