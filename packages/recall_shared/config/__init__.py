"""Public API for shared Recall configuration utilities."""

from .loader import load_settings
from .models import (
    DEFAULT_CONFIG_PATH,
    ComponentsSettings,
    HealthSettings,
    LoggingSettings,
    ObservabilitySettings,
    RecallSettings,
    resolve_component_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ComponentsSettings",
    "HealthSettings",
    "LoggingSettings",
    "ObservabilitySettings",
    "RecallSettings",
    "load_settings",
    "resolve_component_settings",
]
