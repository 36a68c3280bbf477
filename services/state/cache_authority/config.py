"""Pydantic settings for Cache Authority Service behavior."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from packages.recall_shared.config import RecallSettings, resolve_component_settings
from services.state.cache_authority.component import SERVICE_COMPONENT_ID


class CacheAuthoritySettings(BaseModel):
    """Cache Authority Service runtime behavior settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    key_prefix: str = "recall"

    @field_validator("key_prefix", mode="before")
    @classmethod
    def _validate_key_prefix(cls, value: object) -> object:
        """Reject blank key prefixes used to namespace every cache key."""
        if isinstance(value, str):
            normalized = value.strip()
            if normalized == "":
                raise ValueError("key_prefix must be non-empty")
            return normalized
        return value


def resolve_cache_authority_settings(
    settings: RecallSettings,
) -> CacheAuthoritySettings:
    """Resolve CAS settings from ``components.service.cache_authority``."""
    return resolve_component_settings(
        settings=settings,
        component_id=str(SERVICE_COMPONENT_ID),
        model=CacheAuthoritySettings,
    )
