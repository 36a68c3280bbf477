"""Component declaration for the Semantic Memory facade service."""

from __future__ import annotations

from collections.abc import Mapping

from packages.recall_shared.components import ComponentId
from packages.recall_shared.config import RecallSettings

SERVICE_COMPONENT_ID = ComponentId("service_semantic_memory")


def build_component(
    *, settings: RecallSettings, components: Mapping[str, object]
) -> object:
    """Build the facade over the embedding store and language model services."""
    from services.action.semantic_memory.service import build_semantic_memory_service

    return build_semantic_memory_service(
        settings=settings,
        embedding_service=components.get("service_embedding_authority"),
        language_model=components.get("service_language_model"),
    )
