"""Dolphin controller auto-configuration.

Writes a GameCube pad profile (``GCPadNew.ini``) for the player's
controller and plugs a standard controller into port 1 (``Dolphin.ini``).
"""

from __future__ import annotations

import configparser
import shutil
from pathlib import Path

from loguru import logger

from romlauncher.core.path_resolver import (
    OS_DARWIN,
    OS_WINDOWS,
    current_os_key,
    get_documents_dir,
)

CONTROLLER_TYPES = ("xbox", "playstation", "nintendo", "generic")

# Dolphin SIDevice values: 0 = None, 6 = Standard Controller.
SI_DEVICE_NONE = "0"
SI_DEVICE_STANDARD = "6"

_CALIBRATION = "100.00 141.42 100.00 141.42 100.00 141.42 100.00 141.42"

# Xbox pads are named by SDL even on Windows; other pads use XInput on
# Windows and raw SDL indices elsewhere.
_XBOX_SDL = {
    "Buttons/A": "Button S",
    "Buttons/B": "Button E",
    "Buttons/X": "Button W",
    "Buttons/Y": "Button N",
    "Buttons/Z": "Shoulder R",
    "Buttons/Start": "Start",
    "Main Stick/Up": "Left Y+",
    "Main Stick/Down": "Left Y-",
    "Main Stick/Left": "Left X-",
    "Main Stick/Right": "Left X+",
    "Main Stick/Modifier": "Shift",
    "C-Stick/Up": "Right Y+",
    "C-Stick/Down": "Right Y-",
    "C-Stick/Left": "Right X-",
    "C-Stick/Right": "Right X+",
    "C-Stick/Modifier": "Ctrl",
    "Triggers/L": "Trigger L",
    "Triggers/R": "Trigger R",
    "D-Pad/Up": "Pad N",
    "D-Pad/Down": "Pad S",
    "D-Pad/Left": "Pad W",
    "D-Pad/Right": "Pad E",
}

_XINPUT = {
    "Buttons/A": "Button A",
    "Buttons/B": "Button B",
    "Buttons/X": "Button X",
    "Buttons/Y": "Button Y",
    "Buttons/Z": "Shoulder R",
    "Buttons/Start": "Button Start",
    "Main Stick/Up": "Left Y-",
    "Main Stick/Down": "Left Y+",
    "Main Stick/Left": "Left X-",
    "Main Stick/Right": "Left X+",
    "Main Stick/Modifier": "Thumb L",
    "C-Stick/Up": "Right Y-",
    "C-Stick/Down": "Right Y+",
    "C-Stick/Left": "Right X-",
    "C-Stick/Right": "Right X+",
    "C-Stick/Modifier": "Thumb R",
    "Triggers/L": "Trigger L",
    "Triggers/R": "Trigger R",
    "D-Pad/Up": "Pad N",
    "D-Pad/Down": "Pad S",
    "D-Pad/Left": "Pad W",
    "D-Pad/Right": "Pad E",
}

_SDL_GENERIC = {
    "Buttons/A": "Button 0",
    "Buttons/B": "Button 1",
    "Buttons/X": "Button 2",
    "Buttons/Y": "Button 3",
    "Buttons/Z": "Button 5",
    "Buttons/Start": "Button 7",
    "Main Stick/Up": "Axis 1-",
    "Main Stick/Down": "Axis 1+",
    "Main Stick/Left": "Axis 0-",
    "Main Stick/Right": "Axis 0+",
    "Main Stick/Modifier": "Thumb L",
    "C-Stick/Up": "Axis 3-",
    "C-Stick/Down": "Axis 3+",
    "C-Stick/Left": "Axis 2-",
    "C-Stick/Right": "Axis 2+",
    "C-Stick/Modifier": "Thumb R",
    "Triggers/L": "Axis 4+",
    "Triggers/R": "Axis 5+",
    "D-Pad/Up": "Hat 0 N",
    "D-Pad/Down": "Hat 0 S",
    "D-Pad/Left": "Hat 0 W",
    "D-Pad/Right": "Hat 0 E",
}

# Emission order inside a [GCPadN] section.
_KEY_ORDER = (
    "Buttons/A", "Buttons/B", "Buttons/X", "Buttons/Y", "Buttons/Z", "Buttons/Start",
    "Main Stick/Up", "Main Stick/Down", "Main Stick/Left", "Main Stick/Right",
    "Main Stick/Modifier",
    "C-Stick/Up", "C-Stick/Down", "C-Stick/Left", "C-Stick/Right",
    "C-Stick/Modifier",
    "Triggers/L", "Triggers/R",
    "D-Pad/Up", "D-Pad/Down", "D-Pad/Left", "D-Pad/Right",
)


def default_config_dir(os_key: str | None = None) -> Path:
    """Return Dolphin's user configuration directory for *os_key*."""
    os_key = os_key or current_os_key()
    if os_key == OS_WINDOWS:
        return get_documents_dir() / "Dolphin Emulator" / "Config"
    if os_key == OS_DARWIN:
        return Path.home() / "Library" / "Application Support" / "Dolphin" / "Config"
    return Path.home() / ".config" / "dolphin-emu"


def _device_for(controller_type: str, device_name: str | None, os_key: str) -> str:
    if device_name:
        return f"SDL/0/{device_name}"
    if controller_type == "xbox":
        return "SDL/0/Xbox One Controller"
    if os_key == OS_WINDOWS:
        return "XInput/0/Gamepad"
    return "SDL/0/Gamepad"


def _mapping_for(controller_type: str, os_key: str) -> dict[str, str]:
    if controller_type == "xbox":
        return _XBOX_SDL
    if os_key == OS_WINDOWS:
        return _XINPUT
    # PlayStation and Nintendo pads report the standard positional layout.
    return _SDL_GENERIC


def generate_gcpad_section(
    controller_type: str,
    player_index: int = 1,
    device_name: str | None = None,
    os_key: str | None = None,
) -> str:
    """Render one ``[GCPadN]`` section mapped for *controller_type*."""
    os_key = os_key or current_os_key()
    mapping = _mapping_for(controller_type, os_key)
    lines = [f"[GCPad{player_index}]", f"Device = {_device_for(controller_type, device_name, os_key)}"]
    for key in _KEY_ORDER:
        lines.append(f"{key} = `{mapping[key]}`")
        if key == "Main Stick/Modifier":
            lines.append("Main Stick/Modifier/Range = 50.0")
            lines.append(f"Main Stick/Calibration = {_CALIBRATION}")
        elif key == "C-Stick/Modifier":
            lines.append("C-Stick/Modifier/Range = 50.0")
            lines.append(f"C-Stick/Calibration = {_CALIBRATION}")
    lines.append("Rumble/Motor = `Motor L`|`Motor R`")
    return "\n".join(lines) + "\n"


def generate_gcpad_ini(
    controller_type: str,
    device_name: str | None = None,
    os_key: str | None = None,
) -> str:
    """Render a full ``GCPadNew.ini``; ports 2-4 are left to Dolphin's defaults."""
    header = [
        "# Dolphin GCPad Configuration",
        "# Auto-generated by ROM Launcher",
        f"# Controller Type: {controller_type}",
    ]
    if device_name:
        header.append(f"# Device Name: {device_name}")
    port1 = generate_gcpad_section(controller_type, 1, device_name, os_key)
    return "\n".join(header) + "\n\n" + port1 + "\n[GCPad2]\n[GCPad3]\n[GCPad4]\n"


class DolphinConfigurator:
    """Applies controller profiles to a Dolphin user config directory."""

    def __init__(self, config_dir: Path | None = None, os_key: str | None = None) -> None:
        self._os_key = os_key or current_os_key()
        self._config_dir = config_dir or default_config_dir(self._os_key)

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    @property
    def gcpad_path(self) -> Path:
        return self._config_dir / "GCPadNew.ini"

    def has_config(self) -> bool:
        return self.gcpad_path.is_file()

    def configure_controller(self, controller_type: str, device_name: str | None = None) -> Path:
        """Write the pad profile for *controller_type* and enable port 1.

        Raises ``ValueError`` for an unknown controller type and ``OSError``
        when the Dolphin config directory is not writable.
        """
        if controller_type not in CONTROLLER_TYPES:
            raise ValueError(f"Unknown controller type: {controller_type}")

        self._config_dir.mkdir(parents=True, exist_ok=True)
        self._enable_port_one()

        if self.gcpad_path.exists():
            shutil.copyfile(self.gcpad_path, self._config_dir / "GCPadNew.ini.backup")
        self.gcpad_path.write_text(
            generate_gcpad_ini(controller_type, device_name, self._os_key),
            encoding="utf-8",
        )

        suffix = f" (device: {device_name})" if device_name else ""
        logger.info(
            "Configured Dolphin GCPad for {} controller{} at {}",
            controller_type, suffix, self.gcpad_path,
        )
        return self.gcpad_path

    def _enable_port_one(self) -> None:
        """Set ``[Core] SIDevice0 = 6`` in Dolphin.ini, keeping everything else."""
        ini_path = self._config_dir / "Dolphin.ini"
        parser = configparser.ConfigParser(strict=False, interpolation=None)
        parser.optionxform = str  # type: ignore[assignment,method-assign]
        if ini_path.is_file():
            parser.read(str(ini_path), encoding="utf-8")

        if not parser.has_section("Core"):
            parser.add_section("Core")
            for port in range(1, 4):
                parser.set("Core", f"SIDevice{port}", SI_DEVICE_NONE)
        parser.set("Core", "SIDevice0", SI_DEVICE_STANDARD)

        with open(ini_path, "w", encoding="utf-8") as f:
            parser.write(f)
        logger.debug("Enabled GCPad controller port 1 in {}", ini_path)
