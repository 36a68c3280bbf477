"""Language Model Service native package exports."""

from services.action.language_model.component import SERVICE_COMPONENT_ID
from services.action.language_model.domain import HealthStatus
from services.action.language_model.service import (
    LanguageModelService,
    build_language_model_service,
)

__all__ = [
    "SERVICE_COMPONENT_ID",
    "HealthStatus",
    "LanguageModelService",
    "build_language_model_service",
]
