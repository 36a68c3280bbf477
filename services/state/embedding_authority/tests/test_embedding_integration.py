"""Real-provider integration tests for EAS against a live Postgres."""

from __future__ import annotations

import pytest

from packages.recall_shared.config import load_settings
from services.state.embedding_authority.service import (
    build_embedding_authority_service,
)
from tests.integration.helpers import real_provider_tests_enabled

pytestmark = pytest.mark.skipif(
    not real_provider_tests_enabled(),
    reason="set RECALL_RUN_INTEGRATION_REAL=1 to run real-provider integration tests",
)


def test_save_search_delete_roundtrip() -> None:
    """A saved record is searchable by vector and text, then deletable."""
    service = build_embedding_authority_service(settings=load_settings())
    existing = service.list_all(limit=1).records
    size = len(existing[0].vector) if existing else 3
    vector = [1.0] + [0.0] * (size - 1)

    record = service.save(text="integration marker text", vector=vector)
    try:
        matches = service.search_by_similarity(query_vector=vector, threshold=0.99)
        assert record.id in {match.record.id for match in matches}
        assert record.id in {
            found.id for found in service.search_by_text(query="MARKER", limit=50)
        }
    finally:
        assert service.delete(record_id=record.id) is True
