"""Component instantiation and lifecycle for one Recall process.

Components are built from their ``component`` modules in dependency order:
substrates and adapters first, then the state services that own them, then
the action services composed over those. Each module exposes
``build_component(settings=, components=)`` and may expose optional
``after_boot`` and ``before_shutdown`` lifecycle hooks with the same keyword
signature.
"""

from __future__ import annotations

import importlib
from collections.abc import Callable, Mapping
from types import ModuleType, TracebackType

from packages.recall_core.health import RuntimeHealthResult, evaluate_runtime_health
from packages.recall_shared.config import RecallSettings
from packages.recall_shared.logging import get_logger

_LOGGER = get_logger(__name__)

COMPONENT_MODULES: tuple[str, ...] = (
    "resources.substrates.postgres.component",
    "resources.substrates.redis.component",
    "resources.adapters.litellm.component",
    "services.state.embedding_authority.component",
    "services.state.cache_authority.component",
    "services.action.language_model.component",
    "services.action.semantic_memory.component",
)

_COMPONENT_ID_ATTRIBUTES = ("SERVICE_COMPONENT_ID", "RESOURCE_COMPONENT_ID")


class RecallRuntime:
    """Build, start, and stop the full set of Recall components.

    ``start`` is not re-entrant; a stopped runtime may be started again and
    rebuilds every component from settings.
    """

    def __init__(
        self,
        *,
        settings: RecallSettings,
        modules: tuple[str, ...] = COMPONENT_MODULES,
        import_module: Callable[[str], ModuleType] = importlib.import_module,
    ) -> None:
        self._settings = settings
        self._modules = modules
        self._import_module = import_module
        self._loaded: dict[str, ModuleType] = {}
        self._components: dict[str, object] = {}

    @property
    def started(self) -> bool:
        return len(self._components) > 0

    @property
    def components(self) -> Mapping[str, object]:
        """Read-only view of built components keyed by component id."""
        return dict(self._components)

    def component(self, component_id: str) -> object:
        """Return one built component or raise ``KeyError`` when absent."""
        try:
            return self._components[component_id]
        except KeyError:
            raise KeyError(f"component '{component_id}' is not running") from None

    def start(self) -> None:
        """Instantiate every component, then run ``after_boot`` hooks."""
        if self.started:
            raise RuntimeError("runtime is already started")

        loaded = {_component_id(module): module for module in self._load_modules()}
        built: dict[str, object] = {}
        try:
            for component_id, module in loaded.items():
                built[component_id] = module.build_component(
                    settings=self._settings, components=built
                )
                _LOGGER.info(
                    "component instantiated", extra={"component_id": component_id}
                )
            self._loaded = loaded
            self._components = built
            self._run_hooks("after_boot", order=tuple(loaded))
        except Exception:
            self._loaded = loaded
            self._components = built
            self.stop()
            raise
        _LOGGER.info(
            "recall runtime started", extra={"component_count": len(built)}
        )

    def stop(self) -> None:
        """Run ``before_shutdown`` hooks in reverse build order; idempotent."""
        if not self.started:
            return
        try:
            self._run_hooks(
                "before_shutdown",
                order=tuple(reversed(tuple(self._components))),
                tolerate_failures=True,
            )
        finally:
            self._components = {}
            self._loaded = {}
        _LOGGER.info("recall runtime stopped")

    def health(self) -> RuntimeHealthResult:
        """Evaluate aggregate readiness over every running component."""
        return evaluate_runtime_health(
            components=self._components,
            max_timeout_seconds=self._settings.health.max_timeout_seconds,
        )

    def __enter__(self) -> RecallRuntime:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.stop()

    def _load_modules(self) -> list[ModuleType]:
        modules: list[ModuleType] = []
        for module_name in self._modules:
            module = self._import_module(module_name)
            if not callable(getattr(module, "build_component", None)):
                raise RuntimeError(
                    f"component module '{module_name}' does not expose "
                    "build_component(...)"
                )
            modules.append(module)
        return modules

    def _run_hooks(
        self,
        hook_name: str,
        *,
        order: tuple[str, ...],
        tolerate_failures: bool = False,
    ) -> None:
        for component_id in order:
            module = self._loaded.get(component_id)
            hook = getattr(module, hook_name, None)
            if not callable(hook) or component_id not in self._components:
                continue
            try:
                hook(settings=self._settings, components=self._components)
            except Exception:
                if not tolerate_failures:
                    raise
                _LOGGER.exception(
                    "component lifecycle hook failed",
                    extra={"component_id": component_id, "hook": hook_name},
                )
                continue
            _LOGGER.info(
                "component lifecycle hook completed",
                extra={"component_id": component_id, "hook": hook_name},
            )


def _component_id(module: ModuleType) -> str:
    for attribute in _COMPONENT_ID_ATTRIBUTES:
        value = getattr(module, attribute, None)
        if isinstance(value, str) and value != "":
            return value
    raise RuntimeError(
        f"component module '{module.__name__}' does not declare a component id"
    )
