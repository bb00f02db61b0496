"""Response bodies the gateway produces itself.

Successful upstream bodies are passed through untouched and have no model.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorEnvelope(BaseModel):
    """The only shape returned on non-2xx paths."""

    error: str
    status: int | None = None

    def to_content(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class AutocompleteUnavailable(BaseModel):
    suggestions: list[dict[str, Any]] = Field(default_factory=list)
    note: str = "Autocomplete not available"


class HealthReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool
    env_configured: bool = Field(alias="envConfigured")
    upstream_healthy: bool = Field(default=False, alias="upstreamHealthy")
    upstream_status: int | None = Field(default=None, alias="upstreamStatus")
    auth_header: str | None = Field(default=None, alias="authHeader")
    error: str | None = None
    timestamp: str | None = None

    def to_content(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
