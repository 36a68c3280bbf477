"""Semantic Memory facade package exports."""

from services.action.semantic_memory.component import SERVICE_COMPONENT_ID
from services.action.semantic_memory.domain import HealthStatus
from services.action.semantic_memory.service import (
    SemanticMemoryService,
    build_semantic_memory_service,
)

__all__ = [
    "SERVICE_COMPONENT_ID",
    "HealthStatus",
    "SemanticMemoryService",
    "build_semantic_memory_service",
]
