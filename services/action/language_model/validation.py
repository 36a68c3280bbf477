"""Pydantic ingress validation models for Language Model Service."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, StrictStr, field_validator


class _ValidationModel(BaseModel):
    """Base strict request-validation model."""

    model_config = ConfigDict(frozen=True, extra="forbid")


def _require_text(value: str) -> str:
    """Require non-blank input, passed to the provider verbatim."""
    if value.strip() == "":
        raise ValueError("must not be blank")
    return value


class GenerateVectorRequest(_ValidationModel):
    """Validated request shape for one embedding generation."""

    text: StrictStr

    @field_validator("text")
    @classmethod
    def _validate_text(cls, value: str) -> str:
        return _require_text(value)


class GenerateCompletionRequest(_ValidationModel):
    """Validated request shape for one completion generation."""

    prompt: StrictStr

    @field_validator("prompt")
    @classmethod
    def _validate_prompt(cls, value: str) -> str:
        return _require_text(value)
