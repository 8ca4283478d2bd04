"""Embedded core registry (the Core Manager).

Installed cores are recorded in ``<cores dir>/installed.json``; each core
lives in ``<cores dir>/<core id>/`` with its ``{core_name}-wasm.data`` file.
"""

from __future__ import annotations

import json
import shutil
from pathlib import Path

from loguru import logger

from romlauncher.config import Config
from romlauncher.models.core import CoreDefinition, CorePaths, InstalledCore

CORE_DEFINITIONS: tuple[CoreDefinition, ...] = (
    CoreDefinition("fceumm", "FCEUmm (NES)", ("nes",), "fceumm", 1_200_000),
    CoreDefinition("snes9x", "Snes9x (SNES)", ("snes",), "snes9x", 2_800_000),
    CoreDefinition(
        "genesis_plus_gx", "Genesis Plus GX (Genesis/Mega Drive)",
        ("genesis", "megadrive", "sms", "gamegear"), "genesis_plus_gx", 2_200_000,
    ),
    CoreDefinition("gambatte", "Gambatte (GB/GBC)", ("gb", "gbc"), "gambatte", 900_000),
    CoreDefinition("mgba", "mGBA (GBA)", ("gba",), "mgba", 1_800_000),
    CoreDefinition(
        "mupen64plus_next", "Mupen64Plus-Next (N64)", ("n64",), "mupen64plus_next", 7_500_000,
    ),
    CoreDefinition("melonds", "melonDS (NDS)", ("nds",), "melonds", 1_100_000),
    CoreDefinition(
        "pcsx_rearmed", "PCSX ReARMed (PlayStation)", ("ps1", "psx"), "pcsx_rearmed", 4_500_000,
    ),
)


class CoreManager:
    """Answers which embedded cores are installed and for what."""

    def __init__(self, config: Config) -> None:
        self._cfg = config

    @property
    def cores_dir(self) -> Path:
        return self._cfg.cores_dir

    @property
    def installed_file(self) -> Path:
        return self.cores_dir / "installed.json"

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_installed_cores(self) -> list[InstalledCore]:
        path = self.installed_file
        if not path.is_file():
            return []
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            return [InstalledCore.from_dict(entry) for entry in raw]
        except Exception as e:
            logger.error("Failed to load installed cores from {}: {}", path, e)
            return []

    def get_available_cores(self) -> list[tuple[CoreDefinition, bool]]:
        """Every known core paired with whether it is installed."""
        installed = {core.id for core in self.get_installed_cores()}
        return [(definition, definition.id in installed) for definition in CORE_DEFINITIONS]

    def get_core_for_platform(self, platform: str) -> InstalledCore | None:
        for core in self.get_installed_cores():
            if platform in core.platforms:
                return core
        return None

    def can_play_embedded(self, platform: str) -> bool:
        if not self._cfg.prefer_embedded:
            return False
        return self.get_core_for_platform(platform) is not None

    def get_core_paths(self, platform: str) -> CorePaths | None:
        core = self.get_core_for_platform(platform)
        if core is None:
            return None
        return CorePaths(data_path=core.data_path, core_name=core.core_name)

    def register_core(self, core: InstalledCore) -> None:
        """Record *core* as installed, replacing any entry with the same id."""
        cores = [c for c in self.get_installed_cores() if c.id != core.id]
        cores.append(core)
        self._save(cores)
        logger.info("Registered embedded core {} for {}", core.id, core.platforms)

    def delete_core(self, core_id: str) -> bool:
        core_dir = self.cores_dir / core_id
        if core_dir.is_dir():
            shutil.rmtree(core_dir)
        cores = self.get_installed_cores()
        remaining = [c for c in cores if c.id != core_id]
        self._save(remaining)
        return len(remaining) != len(cores)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _save(self, cores: list[InstalledCore]) -> None:
        self.cores_dir.mkdir(parents=True, exist_ok=True)
        with open(self.installed_file, "w", encoding="utf-8") as f:
            json.dump([c.to_dict() for c in cores], f, indent=2)
