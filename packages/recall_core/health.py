"""Aggregate readiness evaluation across running Recall components."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError

from pydantic import BaseModel, ConfigDict, Field


class ComponentHealthResult(BaseModel):
    """One component-level readiness result."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ready: bool
    detail: str = ""


class RuntimeHealthResult(BaseModel):
    """Aggregate readiness keyed by component id."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ready: bool
    components: dict[str, ComponentHealthResult] = Field(default_factory=dict)


def evaluate_runtime_health(
    *,
    components: Mapping[str, object],
    max_timeout_seconds: float,
) -> RuntimeHealthResult:
    """Evaluate every component's ``health()`` with one per-call timeout.

    An empty component set is never ready.
    """
    results = {
        component_id: _evaluate_component_health(
            component=component, max_timeout_seconds=max_timeout_seconds
        )
        for component_id, component in components.items()
    }
    return RuntimeHealthResult(
        ready=len(results) > 0 and all(item.ready for item in results.values()),
        components=results,
    )


def _evaluate_component_health(
    *, component: object, max_timeout_seconds: float
) -> ComponentHealthResult:
    health_fn = getattr(component, "health", None)
    if not callable(health_fn):
        return ComponentHealthResult(
            ready=False, detail="component does not expose health()"
        )

    executor = ThreadPoolExecutor(max_workers=1)
    try:
        future = executor.submit(health_fn)
        try:
            result = future.result(timeout=max_timeout_seconds)
        except FutureTimeoutError:
            return ComponentHealthResult(
                ready=False,
                detail=f"health() exceeded max timeout ({max_timeout_seconds:.3f}s)",
            )
        except Exception as exc:  # noqa: BLE001
            return ComponentHealthResult(
                ready=False, detail=f"health() raised {type(exc).__name__}"
            )
    finally:
        executor.shutdown(wait=False)

    ready, detail = _coerce_health_result(result)
    return ComponentHealthResult(ready=ready, detail=detail or "ok")


def _coerce_health_result(result: object) -> tuple[bool, str]:
    """Normalize ``ready``/``*_ready`` payload shapes into ready and detail."""
    if isinstance(result, bool):
        return result, "ok" if result else "not ready"

    if isinstance(result, BaseModel):
        values = result.model_dump(mode="python")
    elif dataclasses.is_dataclass(result) and not isinstance(result, type):
        values = dataclasses.asdict(result)
    elif isinstance(result, Mapping):
        values = dict(result)
    else:
        return False, "health() returned unsupported result"

    detail_value = values.get("detail")
    detail = detail_value if isinstance(detail_value, str) else ""

    ready_value = values.get("ready")
    if isinstance(ready_value, bool):
        return ready_value, detail

    ready_fields = [
        value
        for key, value in values.items()
        if key.endswith("_ready") and isinstance(value, bool)
    ]
    if ready_fields:
        return all(ready_fields), detail
    return False, "health() result missing readiness fields"
