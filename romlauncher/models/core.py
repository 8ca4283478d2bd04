"""Data model for embedded emulation cores."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CoreDefinition:
    """A core the launcher knows how to use, installed or not."""

    id: str
    name: str
    platforms: tuple[str, ...]
    core_name: str
    """EmulatorJS core name; the data file is ``{core_name}-wasm.data``."""

    size: int = 0
    """Approximate download size in bytes."""


@dataclass
class InstalledCore:
    """An entry of ``installed.json`` in the cores directory."""

    id: str
    name: str
    platforms: list[str]
    core_name: str
    data_path: str
    installed_at: str = ""
    version: str = "stable"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "platforms": list(self.platforms),
            "core_name": self.core_name,
            "data_path": self.data_path,
            "installed_at": self.installed_at,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict) -> InstalledCore:
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            platforms=list(data.get("platforms", [])),
            core_name=data.get("core_name", data["id"]),
            data_path=data.get("data_path", ""),
            installed_at=data.get("installed_at", ""),
            version=data.get("version", "stable"),
        )


@dataclass
class CorePaths:
    data_path: str
    core_name: str


@dataclass
class EmbeddedPlayCapability:
    can_play: bool
    reason: str | None = None
    core_name: str | None = None
