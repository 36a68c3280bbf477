"""LiteLLM adapter resource exports."""

from resources.adapters.litellm.adapter import (
    AdapterChatResult,
    AdapterDependencyError,
    AdapterEmbeddingResult,
    AdapterError,
    AdapterHealthResult,
    AdapterInternalError,
    LiteLlmAdapter,
)
from resources.adapters.litellm.component import RESOURCE_COMPONENT_ID
from resources.adapters.litellm.config import (
    LiteLlmAdapterSettings,
    LiteLlmProviderSettings,
    resolve_litellm_adapter_settings,
)
from resources.adapters.litellm.litellm_adapter import LiteLlmLibraryAdapter

__all__ = [
    "AdapterChatResult",
    "AdapterDependencyError",
    "AdapterEmbeddingResult",
    "AdapterError",
    "AdapterHealthResult",
    "AdapterInternalError",
    "LiteLlmAdapter",
    "LiteLlmAdapterSettings",
    "LiteLlmLibraryAdapter",
    "LiteLlmProviderSettings",
    "RESOURCE_COMPONENT_ID",
    "resolve_litellm_adapter_settings",
]
