"""Ordered lookup over emulator catalog entries."""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from romlauncher.emulators.catalog import EMULATOR_DEFINITIONS
from romlauncher.models.emulator import EmulatorDefinition


class EmulatorRegistry:
    """Holds the emulator definitions the launcher may choose from.

    Registration order is preference order.
    """

    def __init__(self, definitions: Iterable[EmulatorDefinition] = ()) -> None:
        self._definitions: dict[str, EmulatorDefinition] = {}
        for definition in definitions:
            self.register(definition)

    @classmethod
    def default(cls) -> "EmulatorRegistry":
        """Registry preloaded with the built-in catalog."""
        registry = cls(EMULATOR_DEFINITIONS)
        logger.debug("Emulator catalog loaded: {}", registry.ids())
        return registry

    def register(self, definition: EmulatorDefinition) -> None:
        """Register a definition; re-registering an id replaces it in place."""
        self._definitions[definition.id] = definition

    def get(self, emulator_id: str) -> EmulatorDefinition | None:
        return self._definitions.get(emulator_id)

    def get_all(self) -> list[EmulatorDefinition]:
        return list(self._definitions.values())

    def ids(self) -> list[str]:
        return list(self._definitions.keys())

    def for_platform(self, platform: str) -> list[EmulatorDefinition]:
        return [d for d in self._definitions.values() if d.supports(platform)]

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, emulator_id: object) -> bool:
        return emulator_id in self._definitions
