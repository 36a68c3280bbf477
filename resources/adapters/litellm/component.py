"""Component declaration for LiteLLM adapter resource."""

from __future__ import annotations

from collections.abc import Mapping

from packages.recall_shared.components import ComponentId
from packages.recall_shared.config import RecallSettings

RESOURCE_COMPONENT_ID = ComponentId("adapter_litellm")


def build_component(
    *, settings: RecallSettings, components: Mapping[str, object]
) -> object:
    """Build the in-process LiteLLM adapter."""
    del components
    from resources.adapters.litellm.config import resolve_litellm_adapter_settings
    from resources.adapters.litellm.litellm_adapter import LiteLlmLibraryAdapter

    return LiteLlmLibraryAdapter(settings=resolve_litellm_adapter_settings(settings))
