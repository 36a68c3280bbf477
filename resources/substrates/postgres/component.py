"""Component declaration for the Postgres substrate resource."""

from __future__ import annotations

from collections.abc import Mapping

from packages.recall_shared.components import ComponentId
from packages.recall_shared.config import RecallSettings

RESOURCE_COMPONENT_ID = ComponentId("substrate_postgres")


def build_component(
    *, settings: RecallSettings, components: Mapping[str, object]
) -> object:
    """Build the SQL substrate owning the shared engine."""
    del components
    from resources.substrates.postgres.config import resolve_postgres_settings
    from resources.substrates.postgres.substrate import SharedPostgresSubstrate

    return SharedPostgresSubstrate(settings=resolve_postgres_settings(settings))


def before_shutdown(
    *, settings: RecallSettings, components: Mapping[str, object]
) -> None:
    """Release pooled SQL connections."""
    del settings
    components[str(RESOURCE_COMPONENT_ID)].dispose()
