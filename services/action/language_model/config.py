"""Pydantic settings for the Language Model Service."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from packages.recall_shared.config import RecallSettings, resolve_component_settings
from services.action.language_model.component import SERVICE_COMPONENT_ID


class LanguageModelProfileSettings(BaseModel):
    """Provider and model selector for one kind of call."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    provider: str
    model: str

    @field_validator("provider", "model")
    @classmethod
    def _require_selector(cls, value: str) -> str:
        normalized = value.strip()
        if normalized == "":
            raise ValueError("must be non-empty")
        return normalized


class LanguageModelServiceSettings(BaseModel):
    """Model selectors and generation defaults for LMS calls."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    embedding: LanguageModelProfileSettings = LanguageModelProfileSettings(
        provider="openai", model="text-embedding-ada-002"
    )
    completion: LanguageModelProfileSettings = LanguageModelProfileSettings(
        provider="openai", model="gpt-3.5-turbo"
    )
    max_tokens: int = Field(default=1000, gt=0)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)


def resolve_language_model_service_settings(
    settings: RecallSettings,
) -> LanguageModelServiceSettings:
    """Resolve service settings from ``components.service.language_model``."""
    return resolve_component_settings(
        settings=settings,
        component_id=str(SERVICE_COMPONENT_ID),
        model=LanguageModelServiceSettings,
    )
