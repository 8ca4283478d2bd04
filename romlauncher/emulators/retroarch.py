"""RetroArch core selection.

RetroArch runs many consoles through per-platform libretro cores.  The
Windows standalone build keeps them in ``{retroarch}/cores/``; package
manager builds keep them in system directories such as
``/usr/lib/libretro/`` or ``~/Library/Application Support/RetroArch/cores/``.
When the core is not next to the executable we pass ``-L auto`` and let
RetroArch search its own directories.  A missing core is never fatal here.
"""

from __future__ import annotations

import os

from loguru import logger

from romlauncher.core.path_resolver import OS_DARWIN, OS_WINDOWS
from romlauncher.models.emulator import LaunchContext

AUTO_CORE = "auto"

RETROARCH_CORE_BY_PLATFORM: dict[str, str] = {
    "nes": "fceumm_libretro",
    "snes": "snes9x_libretro",
    "n64": "mupen64plus_next_libretro",
    "gb": "gambatte_libretro",
    "gbc": "gambatte_libretro",
    "gba": "mgba_libretro",
    "genesis": "genesis_plus_gx_libretro",
    "psp": "ppsspp_libretro",
    "nds": "desmume_libretro",
    "ps1": "beetle_psx_libretro",
    "arcade": "fbneo_libretro",
}


def core_extension(os_key: str) -> str:
    """Shared-library extension RetroArch cores use on *os_key*."""
    if os_key == OS_WINDOWS:
        return ".dll"
    if os_key == OS_DARWIN:
        return ".dylib"
    return ".so"


def find_core(platform: str, emulator_path: str, os_key: str) -> str | None:
    """Return ``{exe dir}/cores/{core}{ext}`` if it exists, else ``None``."""
    core_name = RETROARCH_CORE_BY_PLATFORM.get(platform)
    if not core_name:
        return None
    cores_dir = os.path.join(os.path.dirname(emulator_path), "cores")
    core_path = os.path.join(cores_dir, core_name + core_extension(os_key))
    if os.path.isfile(core_path):
        return core_path
    logger.debug("RetroArch core {} not beside executable; using auto", core_path)
    return None


def retroarch_args(rom_path: str, ctx: LaunchContext | None = None) -> list[str]:
    core = AUTO_CORE
    if ctx is not None:
        core = find_core(ctx.platform, ctx.emulator_path, ctx.os_key) or AUTO_CORE
    return ["--fullscreen", "-L", core, rom_path]
