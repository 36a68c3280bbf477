"""Domain models for Semantic Memory facade payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class HealthStatus(BaseModel):
    """Aggregate readiness of the store and the generation provider."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    service_ready: bool
    store_ready: bool
    provider_ready: bool
    detail: str
