"""Decide which emulator runs a given game."""

from __future__ import annotations

from loguru import logger

from romlauncher.config import Config
from romlauncher.emulators.locator import BinaryLocator
from romlauncher.emulators.registry import EmulatorRegistry
from romlauncher.errors import EmulatorDisabled, EmulatorNotInstalled, NoEmulatorForPlatform
from romlauncher.models.emulator import EmulatorDefinition, EmulatorStatus, ResolvedEmulator
from romlauncher.models.game import GameRecord


class EmulatorSelector:
    """Picks an emulator and its executable for a game.

    Preference order:

    1. the emulator explicitly requested by the caller, or the game's own
       ``preferred_emulator``, never silently replaced by another one;
    2. the user's default emulator for the game's platform;
    3. the first enabled, installed catalog entry supporting the platform.
    """

    def __init__(
        self,
        registry: EmulatorRegistry,
        locator: BinaryLocator,
        config: Config,
    ) -> None:
        self._registry = registry
        self._locator = locator
        self._cfg = config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def select_emulator(
        self,
        game: GameRecord,
        explicit_id: str | None = None,
    ) -> ResolvedEmulator:
        """Resolve the emulator for *game* or raise a :class:`LaunchError`."""
        preferred_id = explicit_id or game.preferred_emulator
        if preferred_id:
            return self._resolve_explicit(preferred_id)

        resolved = self.find_for_platform(game.platform)
        if resolved is None:
            raise NoEmulatorForPlatform(game.platform)
        return resolved

    def find_for_platform(self, platform: str) -> ResolvedEmulator | None:
        """Return the emulator that would run *platform* games, or ``None``."""
        default_id = self._cfg.get_default_emulator(platform)
        if default_id:
            definition = self._registry.get(default_id)
            if definition is not None and definition.supports(platform):
                resolved = self._try_resolve(definition)
                if resolved is not None:
                    return resolved
            logger.debug(
                "Default emulator {} for {} unusable; scanning catalog",
                default_id, platform,
            )

        for definition in self._registry.for_platform(platform):
            resolved = self._try_resolve(definition)
            if resolved is not None:
                return resolved
        return None

    def resolve_by_id(self, emulator_id: str) -> ResolvedEmulator | None:
        """Locate *emulator_id* regardless of platform or enable state."""
        definition = self._registry.get(emulator_id)
        if definition is None:
            return None
        path = self._locator.locate(definition)
        if path is None:
            return None
        return ResolvedEmulator(definition=definition, path=path)

    def detect_all(self) -> list[EmulatorStatus]:
        """Report every catalog entry with its install and enable state."""
        report: list[EmulatorStatus] = []
        for definition in self._registry.get_all():
            path = self._locator.locate(definition)
            report.append(EmulatorStatus(
                id=definition.id,
                name=definition.name,
                path=path,
                platforms=list(definition.platforms),
                installed=path is not None,
                enabled=self._cfg.is_emulator_enabled(definition.id),
                can_install=definition.can_install,
                download_url=definition.download_url,
            ))
        return report

    def installed(self) -> list[EmulatorStatus]:
        return [status for status in self.detect_all() if status.installed]

    def platforms_with_emulator(self) -> set[str]:
        """Platforms that at least one enabled, installed emulator can run."""
        platforms: set[str] = set()
        for definition in self._registry.get_all():
            if self._try_resolve(definition) is None:
                continue
            platforms.update(definition.platforms)
        return platforms

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _resolve_explicit(self, emulator_id: str) -> ResolvedEmulator:
        definition = self._registry.get(emulator_id)
        if definition is None:
            raise EmulatorNotInstalled(emulator_id)
        if not self._cfg.is_emulator_enabled(definition.id):
            raise EmulatorDisabled(definition.name)
        path = self._locator.locate(definition)
        if path is None:
            raise EmulatorNotInstalled(definition.name)
        return ResolvedEmulator(definition=definition, path=path)

    def _try_resolve(self, definition: EmulatorDefinition) -> ResolvedEmulator | None:
        if not self._cfg.is_emulator_enabled(definition.id):
            return None
        path = self._locator.locate(definition)
        if path is None:
            return None
        return ResolvedEmulator(definition=definition, path=path)
