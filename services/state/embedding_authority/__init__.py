"""Embedding Authority Service native package exports."""

from services.state.embedding_authority.component import SERVICE_COMPONENT_ID
from services.state.embedding_authority.domain import (
    EmbeddingRecord,
    HealthStatus,
    RecordPage,
    SimilarityMatch,
)
from services.state.embedding_authority.service import (
    EmbeddingAuthorityService,
    build_embedding_authority_service,
)

__all__ = [
    "SERVICE_COMPONENT_ID",
    "EmbeddingAuthorityService",
    "EmbeddingRecord",
    "HealthStatus",
    "RecordPage",
    "SimilarityMatch",
    "build_embedding_authority_service",
]
