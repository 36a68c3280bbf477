"""Settings loading entrypoints with deterministic precedence.

The cascade is always:
1) Explicit init values
2) Environment variables
3) ``~/.config/recall/recall.yaml`` (or an explicit path)
4) Built-in defaults

Environment variable format:
- Prefix: ``RECALL_``
- Nested keys: ``__`` separator
- Example: ``RECALL_LOGGING__LEVEL=DEBUG`` -> ``logging.level = "DEBUG"``
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar

from .models import RecallSettings


def load_settings(
    *,
    config_path: str | Path | None = None,
    **overrides: Any,
) -> RecallSettings:
    """Build validated root settings, optionally from an explicit YAML path."""
    if config_path is None:
        return RecallSettings(**overrides)

    resolved_path = Path(config_path).expanduser()

    class _PathRecallSettings(RecallSettings):
        _config_path: ClassVar[Path] = resolved_path

    return _PathRecallSettings(**overrides)
