"""Cross-platform path helpers for emulator search locations.

Candidate install directories in the emulator catalog are written in the
host OS's own notation and may carry placeholders:

    ``~``        → the user's home directory (every OS)
    ``%VAR%``    → environment variable ``VAR`` (Windows only)

On Windows the "Documents" folder can be relocated by the user (e.g. to
``D:\\Documents``).  ``Path.home() / "Documents"`` does **not** reflect
this, so :func:`get_documents_dir` asks the Windows Shell API instead.
"""

from __future__ import annotations

import os
import platform
import re
from collections.abc import Mapping
from pathlib import Path

from loguru import logger

OS_WINDOWS = "windows"
OS_DARWIN = "darwin"
OS_LINUX = "linux"

_ENV_VAR_RE = re.compile(r"%([^%]+)%")


def current_os_key() -> str:
    """Return the catalog key for the running OS."""
    system = platform.system()
    if system == "Windows":
        return OS_WINDOWS
    if system == "Darwin":
        return OS_DARWIN
    return OS_LINUX


# CSIDL ids understood by SHGetFolderPathW.
_CSIDL_BY_FOLDER = {
    "Documents": 0x0005,
    "RoamingAppData": 0x001A,
    "LocalAppData": 0x001C,
}
_MAX_PATH = 260


def _get_windows_known_folder(folder_id: str) -> Path | None:
    """Ask the Windows Shell where *folder_id* lives.

    Returns ``None`` for unknown ids, off Windows, or when the call fails.
    """
    csidl = _CSIDL_BY_FOLDER.get(folder_id)
    if csidl is None:
        return None
    try:
        import ctypes

        shell32 = ctypes.windll.shell32  # type: ignore[attr-defined]
        buf = ctypes.create_unicode_buffer(_MAX_PATH)
        hresult = shell32.SHGetFolderPathW(None, csidl, None, 0, buf)
    except (AttributeError, OSError) as e:
        logger.debug("Shell folder lookup for {} unavailable: {}", folder_id, e)
        return None
    if hresult != 0 or not buf.value:
        return None
    return Path(buf.value)


def get_home_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Return the user home directory, honouring ``HOME``/``USERPROFILE``."""
    env = os.environ if environ is None else environ
    home = env.get("HOME") or env.get("USERPROFILE")
    return Path(home) if home else Path.home()


def get_documents_dir() -> Path:
    """Return the real user Documents directory."""
    result: Path | None = None
    if current_os_key() == OS_WINDOWS:
        result = _get_windows_known_folder("Documents")

    if result is None or not result.exists():
        result = Path.home() / "Documents"
    return result


def get_appdata_dir(
    os_key: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """Return the per-user application-data root for *os_key*.

    Windows: ``%APPDATA%`` (Roaming); macOS: ``~/Library/Application Support``;
    Linux: ``$XDG_CONFIG_HOME`` or ``~/.config``.
    """
    os_key = os_key or current_os_key()
    env = os.environ if environ is None else environ

    if os_key == OS_WINDOWS:
        appdata = env.get("APPDATA")
        if appdata:
            return Path(appdata)
        known = _get_windows_known_folder("RoamingAppData")
        if known is not None:
            return known
        return get_home_dir(env) / "AppData" / "Roaming"
    if os_key == OS_DARWIN:
        return get_home_dir(env) / "Library" / "Application Support"
    xdg = env.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return get_home_dir(env) / ".config"


def expand_search_path(
    raw: str,
    os_key: str | None = None,
    environ: Mapping[str, str] | None = None,
    home: Path | str | None = None,
) -> str:
    """Expand ``~`` and, on Windows, ``%VAR%`` placeholders in *raw*.

    Unknown environment variables expand to an empty string.
    """
    os_key = os_key or current_os_key()
    env = os.environ if environ is None else environ
    out = raw

    if out.startswith("~"):
        home_dir = str(home) if home is not None else str(get_home_dir(env))
        rest = out[1:].lstrip("/\\")
        out = os.path.join(home_dir, rest) if rest else home_dir

    if os_key == OS_WINDOWS and "%" in out:
        out = _ENV_VAR_RE.sub(lambda m: env.get(m.group(1), ""), out)

    return out
