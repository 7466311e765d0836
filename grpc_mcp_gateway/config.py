"""Gateway Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - output_format is always a valid OutputFormat
    - Plugin parameters override these per protoc run; env only sets defaults

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - MCP_GATEWAY_ prefix: protoc passes the caller's environment to plugins unchanged
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from grpc_mcp_gateway.core.domain_types import OutputFormat


class Settings(BaseSettings):
    """Gateway settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MCP_GATEWAY_", env_file=".env", case_sensitive=False, extra="ignore",
    )

    # Code generation
    output_format: OutputFormat = OutputFormat.PYTHON
    output_suffix: str = "_mcp"

    @field_validator("output_format", mode="before")
    @classmethod
    def lowercase_output_format(cls, v: str) -> str:
        """Accept PYTHON / Json / json alike."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    # Observability
    # Logs go to stderr; stdout carries the CodeGeneratorResponse
    log_level: str = "WARNING"
    log_format: str = "text"


@lru_cache
def get_settings() -> Settings:
    return Settings()
