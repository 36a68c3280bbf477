"""Composition root wiring Recall components into one process runtime."""

from packages.recall_core.health import (
    ComponentHealthResult,
    RuntimeHealthResult,
    evaluate_runtime_health,
)
from packages.recall_core.runtime import COMPONENT_MODULES, RecallRuntime

__all__ = [
    "COMPONENT_MODULES",
    "ComponentHealthResult",
    "RecallRuntime",
    "RuntimeHealthResult",
    "evaluate_runtime_health",
]
