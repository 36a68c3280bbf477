"""Data-layer exports for Embedding Authority Service persistence."""

from services.state.embedding_authority.data.repository import SqlEmbeddingRepository
from services.state.embedding_authority.data.runtime import EmbeddingStoreRuntime

__all__ = ["EmbeddingStoreRuntime", "SqlEmbeddingRepository"]
