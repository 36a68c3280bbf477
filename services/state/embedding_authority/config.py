"""Pydantic settings for the Embedding Authority Service component."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator

from packages.recall_shared.config import RecallSettings, resolve_component_settings
from services.state.embedding_authority.component import SERVICE_COMPONENT_ID


class EmbeddingAuthoritySettings(BaseModel):
    """Embedding store behavior settings.

    ``dimensions`` pins the vector length up front; when unset the first
    successful save establishes it.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    dimensions: int | None = Field(default=None, gt=0)
    default_list_limit: int = Field(default=100, ge=0)
    default_search_limit: int = Field(default=10, ge=0)
    default_similarity_threshold: float = 0.8

    @field_validator("default_similarity_threshold")
    @classmethod
    def _validate_threshold(cls, value: float) -> float:
        """Cosine thresholds only make sense inside ``[-1, 1]``."""
        if not math.isfinite(value) or value < -1.0 or value > 1.0:
            raise ValueError("default_similarity_threshold must be within [-1, 1]")
        return value


def resolve_embedding_authority_settings(
    settings: RecallSettings,
) -> EmbeddingAuthoritySettings:
    """Resolve EAS settings from ``components.service.embedding_authority``."""
    return resolve_component_settings(
        settings=settings,
        component_id=str(SERVICE_COMPONENT_ID),
        model=EmbeddingAuthoritySettings,
    )
