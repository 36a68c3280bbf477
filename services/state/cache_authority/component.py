"""Component declaration for the Cache Authority Service."""

from __future__ import annotations

from collections.abc import Mapping

from packages.recall_shared.components import ComponentId
from packages.recall_shared.config import RecallSettings

SERVICE_COMPONENT_ID = ComponentId("service_cache_authority")


def build_component(
    *, settings: RecallSettings, components: Mapping[str, object]
) -> object:
    """Build the cache service over the already-built Redis substrate."""
    from services.state.cache_authority.service import build_cache_authority_service

    return build_cache_authority_service(
        settings=settings,
        backend=components.get("substrate_redis"),
    )
