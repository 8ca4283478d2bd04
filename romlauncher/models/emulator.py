"""Data model for emulator catalog entries and detected installations."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class EmulatorDefinition:
    """Static description of one supported external emulator program."""

    id: str
    """Catalog identifier (e.g. 'retroarch', 'dolphin')."""

    name: str
    """Display name of the emulator (e.g. 'RetroArch', 'Dolphin')."""

    executables: dict[str, str]
    """Executable file name per OS key (``windows`` / ``darwin`` / ``linux``)."""

    platforms: tuple[str, ...]
    """Platform identifiers this emulator can run (e.g. ('gamecube', 'wii'))."""

    default_paths: dict[str, tuple[str, ...]] = field(default_factory=dict)
    """Ordered candidate install directories per OS key."""

    launch_args: str = "rom_only"
    """Name of the argument-building strategy in the catalog."""

    can_install: bool = True
    download_url: str | None = None

    skips_version_check: bool = False
    """Never ask the binary for a version; report it as merely installed."""

    supports_version_flag: bool = True
    """Whether ``<exe> --version`` prints something useful."""

    def executable_for(self, os_key: str) -> str:
        return self.executables.get(os_key) or self.executables.get("linux", self.id)

    def search_paths(self, os_key: str) -> tuple[str, ...]:
        return tuple(self.default_paths.get(os_key, ()))

    def supports(self, platform: str) -> bool:
        return platform in self.platforms

    def build_args(self, rom_path: str, ctx: LaunchContext | None = None) -> list[str]:
        """Arguments that follow the executable when launching *rom_path*."""
        from romlauncher.emulators.catalog import build_launch_args
        return build_launch_args(self, rom_path, ctx)


@dataclass(frozen=True)
class LaunchContext:
    """Extra information handed to argument builders."""

    platform: str
    emulator_path: str
    os_key: str = "linux"


@dataclass(frozen=True)
class ResolvedEmulator:
    """A catalog entry paired with a verified executable path.

    Built fresh on every launch attempt; never cached.
    """

    definition: EmulatorDefinition
    path: str

    @property
    def id(self) -> str:
        return self.definition.id

    @property
    def name(self) -> str:
        return self.definition.name


@dataclass
class EmulatorStatus:
    """One row of the detection report."""

    id: str
    name: str
    path: str | None
    platforms: list[str]
    installed: bool
    enabled: bool
    can_install: bool
    download_url: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "platforms": list(self.platforms),
            "installed": self.installed,
            "enabled": self.enabled,
            "can_install": self.can_install,
            "download_url": self.download_url,
        }
