"""Launcher configuration management."""

import copy
import json
import platform
from pathlib import Path
from typing import Any, Optional

from loguru import logger


def _default_data_dir() -> Path:
    """Return the default data directory for the launcher."""
    if platform.system() == "Windows":
        return Path.home() / "Documents" / "RomLauncher"
    elif platform.system() == "Darwin":
        return Path.home() / "Library" / "Application Support" / "RomLauncher"
    else:
        return Path.home() / ".config" / "RomLauncher"


_DEFAULT_CONFIG: dict[str, Any] = {
    "rom_folders": [],
    "library_path": "",
    "emulator_paths": {},
    "default_emulator_per_platform": {},
    "emulator_enabled": {},
    "bios_paths": {},
    "prefer_embedded": True,
    "embedded_cores_path": "",
    "dolphin_controller_type": "xbox",
    "dolphin_device_name": "",
}


class Config:
    """Singleton launcher configuration.

    Every key of ``_DEFAULT_CONFIG`` is always present, so ``get`` on a
    known key never comes back empty-handed.
    """

    _instance: Optional["Config"] = None
    _data: dict[str, Any]
    _path: Path
    _data_dir: Path

    def __new__(
        cls,
        config_path: Optional[Path] = None,
        data_dir: Optional[Path] = None,
    ) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(
        self,
        config_path: Optional[Path] = None,
        data_dir: Optional[Path] = None,
    ) -> None:
        if self._initialized:  # type: ignore[has-type]
            return
        self._initialized = True
        self._data_dir = data_dir or _default_data_dir()
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._path = config_path or (self._data_dir / "config.json")
        self._data = copy.deepcopy(_DEFAULT_CONFIG)
        self._load()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def library_path(self) -> Path:
        p = self._data.get("library_path", "")
        if p:
            return Path(p)
        return self._data_dir / "library.json"

    @property
    def cores_dir(self) -> Path:
        p = self._data.get("embedded_cores_path", "")
        if p:
            return Path(p)
        return self._data_dir / "cores"

    @property
    def prefer_embedded(self) -> bool:
        return bool(self._data.get("prefer_embedded", True))

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._save()

    def is_emulator_enabled(self, emulator_id: str) -> bool:
        """Emulators are enabled unless explicitly switched off."""
        enabled = self._data.get("emulator_enabled") or {}
        return enabled.get(emulator_id, True) is not False

    def set_emulator_enabled(self, emulator_id: str, enabled: bool) -> None:
        flags = dict(self._data.get("emulator_enabled") or {})
        flags[emulator_id] = bool(enabled)
        self.set("emulator_enabled", flags)

    def get_emulator_path(self, emulator_id: str) -> str:
        """Return the user-configured executable path, or ``""``."""
        return (self._data.get("emulator_paths") or {}).get(emulator_id, "")

    def set_emulator_path(self, emulator_id: str, path: str | None) -> None:
        """Store a custom executable path; ``None`` or ``""`` clears it."""
        paths = dict(self._data.get("emulator_paths") or {})
        if path:
            paths[emulator_id] = str(path)
        else:
            paths.pop(emulator_id, None)
        self.set("emulator_paths", paths)

    def get_default_emulator(self, platform_id: str) -> str:
        return (self._data.get("default_emulator_per_platform") or {}).get(platform_id, "")

    def set_default_emulator(self, platform_id: str, emulator_id: str | None) -> None:
        defaults = dict(self._data.get("default_emulator_per_platform") or {})
        if emulator_id:
            defaults[platform_id] = emulator_id
        else:
            defaults.pop(platform_id, None)
        self.set("default_emulator_per_platform", defaults)

    def get_bios_path(self, bios_id: str) -> str:
        return (self._data.get("bios_paths") or {}).get(bios_id, "")

    def set_bios_path(self, bios_id: str, path: str) -> None:
        paths = dict(self._data.get("bios_paths") or {})
        paths[bios_id] = str(path)
        self.set("bios_paths", paths)

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _load(self) -> None:
        if self._path.exists():
            try:
                with open(self._path, "r", encoding="utf-8") as f:
                    saved = json.load(f)
                self._data.update(saved)
                logger.info("Configuration loaded from {}", self._path)
            except Exception as e:
                logger.warning("Failed to load config, using defaults: {}", e)
        else:
            self._save()

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=4, ensure_ascii=False)
        except Exception as e:
            logger.error("Failed to save config: {}", e)

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton (for testing)."""
        cls._instance = None
