"""Static catalog of supported external emulators.

Entries are listed in preference order: when a platform has no explicit
choice, the first enabled and installed entry that supports it wins.

Command lines are built by strategies looked up by name in
:data:`ARGUMENT_BUILDERS`; each strategy maps ``(rom_path, ctx)`` to the
argument list that follows the executable.
"""

from __future__ import annotations

from collections.abc import Callable

from romlauncher.emulators.retroarch import retroarch_args
from romlauncher.models.emulator import EmulatorDefinition, LaunchContext

ArgumentBuilder = Callable[[str, LaunchContext | None], list[str]]

ARGUMENT_BUILDERS: dict[str, ArgumentBuilder] = {
    "retroarch": retroarch_args,
    "dolphin": lambda rom, ctx=None: ["-b", "-e", rom],
    "batch_fullscreen": lambda rom, ctx=None: ["-batch", "-fullscreen", rom],
    "rpcs3": lambda rom, ctx=None: ["--no-gui", "--fullscreen", rom],
    "fullscreen": lambda rom, ctx=None: ["--fullscreen", rom],
    "xemu": lambda rom, ctx=None: ["-dvd_path", rom],
    "azahar": lambda rom, ctx=None: ["-f", rom],
    "rom_only": lambda rom, ctx=None: [rom],
}


def _windows_paths(*dirs: str, scoop: str | None = None) -> tuple[str, ...]:
    paths = list(dirs)
    if scoop:
        paths.append(f"%USERPROFILE%\\scoop\\apps\\{scoop}\\current")
    paths.append("%LOCALAPPDATA%\\Programs")
    return tuple(paths)


_LINUX_COMMON = ("/usr/bin", "~/.local/bin", "/snap/bin", "~/bin", "~/Applications")

_MAC_BREW = ("/opt/homebrew/bin", "/usr/local/bin")


EMULATOR_DEFINITIONS: tuple[EmulatorDefinition, ...] = (
    EmulatorDefinition(
        id="retroarch",
        name="RetroArch",
        executables={"windows": "retroarch.exe", "darwin": "retroarch", "linux": "retroarch"},
        platforms=("nes", "snes", "n64", "gb", "gbc", "gba", "nds", "genesis", "psp", "ps1", "arcade"),
        default_paths={
            "windows": _windows_paths(
                "C:\\RetroArch-Win64",
                "C:\\RetroArch",
                "C:\\Program Files\\RetroArch",
                "C:\\Program Files (x86)\\RetroArch",
                "C:\\ProgramData\\chocolatey\\bin",
                scoop="retroarch",
            ),
            "darwin": (
                "/Applications/RetroArch.app/Contents/MacOS",
                "~/Applications/RetroArch.app/Contents/MacOS",
            ) + _MAC_BREW,
            "linux": (
                "/usr/bin",
                "/usr/local/bin",
                "~/.local/bin",
                "/snap/bin",
                "~/bin",
                "~/Applications",
                "/var/lib/flatpak/app/org.libretro.RetroArch/current/active/files/bin",
            ),
        },
        launch_args="retroarch",
        download_url="https://www.retroarch.com/?page=platforms",
    ),
    EmulatorDefinition(
        id="dolphin",
        name="Dolphin",
        executables={"windows": "Dolphin.exe", "darwin": "dolphin-emu", "linux": "dolphin-emu"},
        platforms=("gamecube", "wii"),
        default_paths={
            "windows": _windows_paths(
                "C:\\Program Files\\Dolphin-x64",
                "C:\\Program Files\\Dolphin",
                "C:\\Dolphin-x64",
                "C:\\Dolphin",
                "C:\\ProgramData\\chocolatey\\bin",
                scoop="dolphin",
            ),
            "darwin": ("/Applications/Dolphin.app/Contents/MacOS",) + _MAC_BREW,
            "linux": (
                "/usr/bin",
                "/usr/local/bin",
                "~/.local/bin",
                "/snap/bin",
                "~/bin",
                "~/Applications",
                "/var/lib/flatpak/app/org.DolphinEmu.dolphin-emu/current/active/files/bin",
            ),
        },
        launch_args="dolphin",
        download_url="https://dolphin-emu.org/download/",
    ),
    EmulatorDefinition(
        id="duckstation",
        name="DuckStation",
        executables={
            "windows": "duckstation-qt-x64-ReleaseLTCG.exe",
            "darwin": "duckstation-qt",
            "linux": "duckstation-qt",
        },
        platforms=("ps1",),
        default_paths={
            "windows": _windows_paths(
                "C:\\Program Files\\DuckStation",
                "C:\\DuckStation",
                "C:\\ProgramData\\chocolatey\\bin",
                scoop="duckstation",
            ),
            "darwin": ("/Applications/DuckStation.app/Contents/MacOS",) + _MAC_BREW,
            "linux": _LINUX_COMMON + (
                "/var/lib/flatpak/app/org.duckstation.DuckStation/current/active/files/bin",
            ),
        },
        launch_args="batch_fullscreen",
        download_url="https://github.com/stenzek/duckstation/releases",
    ),
    EmulatorDefinition(
        id="pcsx2",
        name="PCSX2",
        executables={"windows": "pcsx2-qt.exe", "darwin": "pcsx2-qt", "linux": "pcsx2-qt"},
        platforms=("ps2",),
        default_paths={
            "windows": _windows_paths(
                "C:\\Program Files\\PCSX2",
                "C:\\Program Files (x86)\\PCSX2",
                "C:\\PCSX2",
                "C:\\ProgramData\\chocolatey\\bin",
                scoop="pcsx2",
            ),
            "darwin": ("/Applications/PCSX2.app/Contents/MacOS",) + _MAC_BREW,
            "linux": _LINUX_COMMON + (
                "/var/lib/flatpak/app/net.pcsx2.PCSX2/current/active/files/bin",
            ),
        },
        launch_args="batch_fullscreen",
        download_url="https://pcsx2.net/downloads/",
    ),
    EmulatorDefinition(
        id="rpcs3",
        name="RPCS3",
        executables={"windows": "rpcs3.exe", "darwin": "rpcs3", "linux": "rpcs3"},
        platforms=("ps3",),
        default_paths={
            "windows": _windows_paths(
                "C:\\Program Files\\RPCS3",
                "C:\\RPCS3",
                "C:\\ProgramData\\chocolatey\\bin",
                scoop="rpcs3",
            ),
            "darwin": ("/Applications/RPCS3.app/Contents/MacOS",) + _MAC_BREW,
            "linux": _LINUX_COMMON,
        },
        launch_args="rpcs3",
        download_url="https://rpcs3.net/download",
    ),
    EmulatorDefinition(
        id="ryujinx",
        name="Ryujinx",
        executables={"windows": "Ryujinx.exe", "darwin": "Ryujinx", "linux": "Ryujinx"},
        platforms=("switch",),
        default_paths={
            "windows": _windows_paths(
                "C:\\Program Files\\Ryujinx",
                "C:\\Ryujinx",
                "C:\\ProgramData\\chocolatey\\bin",
                scoop="ryujinx",
            ),
            "darwin": ("/Applications/Ryujinx.app/Contents/MacOS",) + _MAC_BREW,
            "linux": _LINUX_COMMON,
        },
        launch_args="fullscreen",
        download_url="https://github.com/GreemDev/Ryubing/releases",
    ),
    EmulatorDefinition(
        id="ppsspp",
        name="PPSSPP",
        executables={"windows": "PPSSPPWindows64.exe", "darwin": "ppsspp", "linux": "ppsspp"},
        platforms=("psp",),
        default_paths={
            "windows": _windows_paths(
                "C:\\Program Files\\PPSSPP",
                "C:\\PPSSPP",
                "C:\\ProgramData\\chocolatey\\bin",
                scoop="ppsspp",
            ),
            "darwin": ("/Applications/PPSSPP.app/Contents/MacOS",) + _MAC_BREW,
            "linux": _LINUX_COMMON + (
                "/var/lib/flatpak/app/org.ppsspp.PPSSPP/current/active/files/bin",
            ),
        },
        launch_args="fullscreen",
        download_url="https://www.ppsspp.org/downloads.html",
    ),
    EmulatorDefinition(
        id="xemu",
        name="xemu",
        executables={"windows": "xemu.exe", "darwin": "xemu", "linux": "xemu"},
        platforms=("xbox",),
        default_paths={
            "windows": (
                "C:\\Program Files\\xemu",
                "C:\\xemu",
                "%LOCALAPPDATA%\\Programs\\xemu",
                "%USERPROFILE%\\scoop\\apps\\xemu\\current",
            ),
            "darwin": ("/Applications/xemu.app/Contents/MacOS",) + _MAC_BREW,
            "linux": (
                "/usr/bin",
                "/usr/local/bin",
                "~/.local/bin",
                "/snap/bin",
                "~/bin",
                "~/Applications",
                "/var/lib/flatpak/app/app.xemu.xemu/current/active/files/bin",
            ),
        },
        launch_args="xemu",
        download_url="https://xemu.app/#download",
        skips_version_check=True,
    ),
    EmulatorDefinition(
        id="azahar",
        name="Azahar",
        executables={"windows": "azahar.exe", "darwin": "azahar", "linux": "azahar"},
        platforms=("3ds",),
        default_paths={
            "windows": (
                "C:\\Program Files\\Azahar",
                "C:\\Azahar",
                "%LOCALAPPDATA%\\Programs\\Azahar",
                "%USERPROFILE%\\scoop\\apps\\azahar\\current",
            ),
            "darwin": ("/Applications/Azahar.app/Contents/MacOS",) + _MAC_BREW,
            "linux": ("/usr/bin", "/usr/local/bin", "~/.local/bin", "~/bin", "~/Applications"),
        },
        launch_args="azahar",
        download_url="https://azahar-emu.org/",
    ),
    EmulatorDefinition(
        id="xenia",
        name="Xenia",
        executables={"windows": "xenia.exe", "darwin": "xenia", "linux": "xenia"},
        platforms=("xbox360",),
        default_paths={
            "windows": (
                "C:\\Program Files\\Xenia",
                "C:\\Xenia",
                "%LOCALAPPDATA%\\Programs\\Xenia",
                "%USERPROFILE%\\scoop\\apps\\xenia\\current",
            ),
            "darwin": (),
            "linux": (),
        },
        launch_args="rom_only",
        download_url="https://xenia.jp/download/",
        skips_version_check=True,
    ),
)


def get_definition(emulator_id: str) -> EmulatorDefinition | None:
    for definition in EMULATOR_DEFINITIONS:
        if definition.id == emulator_id:
            return definition
    return None


def definitions_for_platform(platform: str) -> list[EmulatorDefinition]:
    return [d for d in EMULATOR_DEFINITIONS if d.supports(platform)]


def build_launch_args(
    definition: EmulatorDefinition,
    rom_path: str,
    ctx: LaunchContext | None = None,
) -> list[str]:
    """Build the command-line arguments for launching *rom_path*.

    Unknown strategy names fall back to passing the ROM path alone.
    """
    builder = ARGUMENT_BUILDERS.get(definition.launch_args, ARGUMENT_BUILDERS["rom_only"])
    return list(builder(rom_path, ctx))
