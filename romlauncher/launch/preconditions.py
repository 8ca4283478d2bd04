"""Checks that must pass between emulator selection and process spawn."""

from __future__ import annotations

import os
from pathlib import Path

from loguru import logger

from romlauncher.bios import XBOX_FLASH, XBOX_HDD, XBOX_MCPX, get_bios_definition, is_bios_present
from romlauncher.config import Config
from romlauncher.core.path_resolver import get_appdata_dir
from romlauncher.errors import BiosFilesMissing, FirmwareMissing, RomFileNotFound
from romlauncher.launch.dolphin_config import DolphinConfigurator
from romlauncher.models.emulator import ResolvedEmulator
from romlauncher.models.game import GameRecord

# Disc platforms whose raw .bin track needs its .cue sheet to boot.
PLATFORMS_WITH_CUE = ("ps1", "saturn", "dreamcast")

FIRMWARE_EMULATORS = ("rpcs3",)
XBOX_BIOS_EMULATORS = ("xemu",)
CONTROLLER_EMULATORS = ("dolphin",)

XBOX_BIOS_IDS = (XBOX_MCPX, XBOX_FLASH, XBOX_HDD)


def resolve_rom_path(game: GameRecord) -> str:
    """Return the path to hand to the emulator for *game*.

    A ``.bin`` track on a cue-based disc platform is swapped for the
    sibling ``.cue`` of the same base name when one exists.
    """
    path = game.path
    stem, ext = os.path.splitext(path)
    if ext.lower() != ".bin" or game.platform not in PLATFORMS_WITH_CUE:
        return path
    cue_path = stem + ".cue"
    if os.path.isfile(cue_path):
        return cue_path
    return path


class PreconditionValidator:
    """Emulator-specific launch gates.

    Firmware, BIOS and ROM problems raise a :class:`LaunchError`;
    controller auto-configuration is best effort and only logged.
    """

    def __init__(
        self,
        config: Config,
        dolphin: DolphinConfigurator | None = None,
        appdata_dir: Path | None = None,
    ) -> None:
        self._cfg = config
        self._dolphin = dolphin
        self._appdata_dir = appdata_dir

    def validate(self, game: GameRecord, resolved: ResolvedEmulator) -> str:
        """Run every check for *resolved*; return the ROM path to launch."""
        self.check_firmware(resolved)
        self.check_bios(resolved)
        rom_path = self.check_rom(game)
        self.configure_controller(resolved)
        return rom_path

    def firmware_candidates(self, resolved: ResolvedEmulator) -> list[Path]:
        appdata = self._appdata_dir or get_appdata_dir()
        return [
            Path(resolved.path).parent / "dev_flash",
            appdata / "rpcs3" / "dev_flash",
        ]

    def check_firmware(self, resolved: ResolvedEmulator) -> None:
        if resolved.id not in FIRMWARE_EMULATORS:
            return
        candidates = self.firmware_candidates(resolved)
        if not any(candidate.is_dir() for candidate in candidates):
            logger.warning("No {} firmware in {}", resolved.name, [str(c) for c in candidates])
            raise FirmwareMissing(resolved.name)

    def check_bios(self, resolved: ResolvedEmulator) -> None:
        if resolved.id not in XBOX_BIOS_EMULATORS:
            return
        missing = [
            get_bios_definition(bios_id).name  # type: ignore[union-attr]
            for bios_id in XBOX_BIOS_IDS
            if not is_bios_present(self._cfg, bios_id)
        ]
        if missing:
            raise BiosFilesMissing(missing, resolved.name)

    def check_rom(self, game: GameRecord) -> str:
        rom_path = resolve_rom_path(game)
        if rom_path != game.path:
            logger.debug("Using cue sheet {} for {}", rom_path, game.path)
        if not os.path.exists(rom_path):
            raise RomFileNotFound(rom_path)
        return rom_path

    def configure_controller(self, resolved: ResolvedEmulator) -> bool:
        """Apply the stored controller profile; never fails the launch."""
        if resolved.id not in CONTROLLER_EMULATORS:
            return False
        controller_type = self._cfg.get("dolphin_controller_type") or "xbox"
        device_name = self._cfg.get("dolphin_device_name") or None
        try:
            dolphin = self._dolphin or DolphinConfigurator()
            dolphin.configure_controller(controller_type, device_name)
        except Exception as e:
            logger.warning("Failed to configure Dolphin controller: {}", e)
            return False
        return True
