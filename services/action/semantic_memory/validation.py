"""Request validation models for the Semantic Memory facade."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, field_validator


class SemanticSearchOptions(BaseModel):
    """Search options checked before any provider call is made."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    limit: StrictInt
    threshold: StrictFloat | StrictInt

    @field_validator("threshold")
    @classmethod
    def _validate_threshold(cls, value: float) -> float:
        converted = float(value)
        if not math.isfinite(converted) or converted < -1.0 or converted > 1.0:
            raise ValueError("must be a finite number within [-1, 1]")
        return converted
