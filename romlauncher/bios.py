"""BIOS / firmware file catalogue and status checks."""

from __future__ import annotations

import os
from dataclasses import dataclass

from romlauncher.config import Config


@dataclass(frozen=True)
class BiosDefinition:
    id: str
    name: str
    description: str
    platform: str
    required: bool
    filenames: tuple[str, ...]
    """Usual file names for this dump; informational only."""


@dataclass
class BiosStatus:
    id: str
    name: str
    description: str
    platform: str
    required: bool
    found: bool
    path: str | None


XBOX_MCPX = "xbox-mcpx"
XBOX_FLASH = "xbox-flash"
XBOX_HDD = "xbox-hdd"

BIOS_DEFINITIONS: tuple[BiosDefinition, ...] = (
    BiosDefinition(
        "ps1", "PS1 BIOS", "Required for DuckStation/RetroArch PS1 emulation", "ps1", True,
        ("scph1001.bin", "scph5501.bin", "scph7001.bin", "scph5500.bin", "scph5502.bin"),
    ),
    BiosDefinition(
        "ps2", "PS2 BIOS", "Required for PCSX2", "ps2", True,
        ("bios.bin", "ps2-bios.bin", "scph10000.bin", "scph39001.bin", "scph70012.bin"),
    ),
    BiosDefinition(
        "gba", "GBA BIOS", "Optional for mGBA/RetroArch (improves compatibility)", "gba", False,
        ("gba_bios.bin", "gba.bin"),
    ),
    BiosDefinition(
        "nds-arm7", "NDS ARM7 BIOS", "Required for melonDS", "nds", True,
        ("bios7.bin", "biosnds7.bin"),
    ),
    BiosDefinition(
        "nds-arm9", "NDS ARM9 BIOS", "Required for melonDS", "nds", True,
        ("bios9.bin", "biosnds9.bin"),
    ),
    BiosDefinition(
        "nds-firmware", "NDS Firmware", "Required for melonDS", "nds", True,
        ("firmware.bin", "nds_firmware.bin"),
    ),
    BiosDefinition(
        "3ds-aeskeys", "3DS AES Keys",
        "Optional for Azahar (needed for encrypted ROMs on older builds)", "3ds", False,
        ("aes_keys.txt", "aes_keys.bin"),
    ),
    BiosDefinition(
        XBOX_MCPX, "Xbox MCPX Boot ROM", "Required for xemu", "xbox", True,
        ("mcpx_1.0.bin", "mcpx.bin"),
    ),
    BiosDefinition(
        XBOX_FLASH, "Xbox Flash ROM (BIOS)", "Required for xemu", "xbox", True,
        ("Complex_4627.bin", "complex.bin", "xbox_flash.bin"),
    ),
    BiosDefinition(
        XBOX_HDD, "Xbox HDD Image", "Required for xemu", "xbox", True,
        ("xbox_hdd.qcow2",),
    ),
)


def get_bios_definition(bios_id: str) -> BiosDefinition | None:
    for definition in BIOS_DEFINITIONS:
        if definition.id == bios_id:
            return definition
    return None


def is_bios_present(config: Config, bios_id: str) -> bool:
    path = config.get_bios_path(bios_id)
    return bool(path) and os.path.exists(path)


def check_bios_status(config: Config) -> list[BiosStatus]:
    """Report every known BIOS with whether its configured file exists."""
    statuses: list[BiosStatus] = []
    for definition in BIOS_DEFINITIONS:
        found = is_bios_present(config, definition.id)
        statuses.append(BiosStatus(
            id=definition.id,
            name=definition.name,
            description=definition.description,
            platform=definition.platform,
            required=definition.required,
            found=found,
            path=config.get_bios_path(definition.id) if found else None,
        ))
    return statuses
