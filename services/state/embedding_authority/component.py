"""Component declaration for Embedding Authority Service."""

from __future__ import annotations

from collections.abc import Mapping

from packages.recall_shared.components import ComponentId
from packages.recall_shared.config import RecallSettings

SERVICE_COMPONENT_ID = ComponentId("service_embedding_authority")


def build_component(
    *, settings: RecallSettings, components: Mapping[str, object]
) -> object:
    """Build the embedding store over the already-built SQL substrate."""
    from services.state.embedding_authority.service import (
        build_embedding_authority_service,
    )

    return build_embedding_authority_service(
        settings=settings,
        postgres_substrate=components.get("substrate_postgres"),
    )
