"""Component identity primitives shared by settings and runtime wiring.

A component id is ``<kind>_<name>`` where ``kind`` is one of ``service``,
``adapter`` or ``substrate``; it names both the settings namespace
``components.<kind>.<name>`` and the runtime component built from it.
"""

from __future__ import annotations

from typing import NewType

ComponentId = NewType("ComponentId", str)
