"""Component declaration for Language Model Service."""

from __future__ import annotations

from collections.abc import Mapping

from packages.recall_shared.components import ComponentId
from packages.recall_shared.config import RecallSettings

SERVICE_COMPONENT_ID = ComponentId("service_language_model")


def build_component(
    *, settings: RecallSettings, components: Mapping[str, object]
) -> object:
    """Build the language model service over the LiteLLM adapter."""
    from services.action.language_model.service import build_language_model_service

    return build_language_model_service(
        settings=settings,
        adapter=components.get("adapter_litellm"),
    )
