"""Component declaration for the Redis substrate resource."""

from __future__ import annotations

from collections.abc import Mapping

from packages.recall_shared.components import ComponentId
from packages.recall_shared.config import RecallSettings

RESOURCE_COMPONENT_ID = ComponentId("substrate_redis")


def build_component(
    *, settings: RecallSettings, components: Mapping[str, object]
) -> object:
    """Build an unconnected Redis substrate from root settings."""
    del components
    from resources.substrates.redis.config import resolve_redis_settings
    from resources.substrates.redis.redis_substrate import RedisClientSubstrate

    return RedisClientSubstrate(settings=resolve_redis_settings(settings))


def after_boot(*, settings: RecallSettings, components: Mapping[str, object]) -> None:
    """Open the shared Redis connection once every component is built."""
    del settings
    components[str(RESOURCE_COMPONENT_ID)].connect()


def before_shutdown(
    *, settings: RecallSettings, components: Mapping[str, object]
) -> None:
    """Close the shared Redis connection."""
    del settings
    components[str(RESOURCE_COMPONENT_ID)].close()
