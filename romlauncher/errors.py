"""Typed launch failures.

Each error carries a message meant to be shown to the user as-is: it names
the missing file, the missing emulator, or the setting to change.
"""

from __future__ import annotations


class LaunchError(Exception):
    """Base class for everything that can veto a launch or session start."""


class GameNotFound(LaunchError):
    def __init__(self, game_id: str) -> None:
        self.game_id = game_id
        super().__init__(f"Game not found: {game_id}")


class EmulatorNotInstalled(LaunchError):
    def __init__(self, emulator_name: str) -> None:
        self.emulator_name = emulator_name
        super().__init__(
            f"Emulator {emulator_name} not installed or path invalid. "
            "Configure it in Settings → Emulators."
        )


class EmulatorDisabled(LaunchError):
    def __init__(self, emulator_name: str) -> None:
        self.emulator_name = emulator_name
        super().__init__(
            f"Emulator {emulator_name} is disabled. "
            "Enable it in Settings → Emulators or pick another emulator for this game."
        )


class NoEmulatorForPlatform(LaunchError):
    def __init__(self, platform: str) -> None:
        self.platform = platform
        super().__init__(
            f"No emulator configured for {platform}. "
            f"Set one under Consoles → {platform.upper()}."
        )


class FirmwareMissing(LaunchError):
    def __init__(self, emulator_name: str = "RPCS3") -> None:
        self.emulator_name = emulator_name
        super().__init__(
            f"{emulator_name} firmware not installed.\n\n"
            "PS3 games require the official PlayStation 3 firmware to run.\n\n"
            "To install: Download firmware from the PlayStation website, "
            f"then in {emulator_name} go to File → Install Firmware."
        )


class BiosFilesMissing(LaunchError):
    def __init__(self, missing: list[str], emulator_name: str = "xemu") -> None:
        self.missing = list(missing)
        self.emulator_name = emulator_name
        super().__init__(
            f"Xbox BIOS files not configured: {', '.join(self.missing)}.\n\n"
            f"{emulator_name} requires MCPX Boot ROM, Flash ROM, and HDD Image to run.\n\n"
            f"Open {emulator_name} and configure these files in its Settings → System, "
            "then set the paths in Settings → BIOS Files."
        )


class RomFileNotFound(LaunchError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            f"ROM file not found: {path}. It may have been moved or deleted."
        )


class SpawnFailure(LaunchError):
    def __init__(self, executable: str, os_error: OSError) -> None:
        self.executable = executable
        self.os_error = os_error
        super().__init__(f"Failed to start {executable}: {os_error}")


class CoreNotInstalled(LaunchError):
    def __init__(self, platform: str, reason: str | None = None) -> None:
        self.platform = platform
        super().__init__(reason or f"No embedded core installed for {platform}")


class EmbeddedDisabled(LaunchError):
    def __init__(self) -> None:
        super().__init__(
            "Embedded emulation is disabled in settings. "
            "Turn on 'Prefer embedded emulation' or launch with an external emulator."
        )
