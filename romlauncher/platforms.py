"""Platform detection from ROM file paths."""

from __future__ import annotations

import os
import re

UNKNOWN_PLATFORM = "unknown"

EXTENSION_PLATFORM_MAP: dict[str, str] = {
    ".nes": "nes", ".nez": "nes",
    ".sfc": "snes", ".smc": "snes",
    ".n64": "n64", ".z64": "n64", ".v64": "n64",
    ".gb": "gb",
    ".gbc": "gbc",
    ".gba": "gba",
    ".nds": "nds",
    ".3ds": "3ds", ".cia": "3ds",
    ".md": "genesis", ".gen": "genesis", ".smd": "genesis",
    ".iso": UNKNOWN_PLATFORM,
    ".bin": UNKNOWN_PLATFORM,
    ".cue": UNKNOWN_PLATFORM,
    ".pkg": "ps3",
    ".pbp": "psp",
    ".nsp": "switch", ".xci": "switch",
    ".gcm": "gamecube", ".gcz": "gamecube", ".rvz": "gamecube",
    ".wbfs": "wii", ".wia": "wii",
    ".chd": UNKNOWN_PLATFORM,
    ".cso": "psp",
    ".gdi": "dreamcast", ".cdi": "dreamcast",
}

# Substring hints for ambiguous extensions.  First match wins, so more
# specific platforms (ps3) must come before general ones (ps1 / "playstation").
PLATFORM_HINTS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("ps3", ("ps3", "playstation 3", "playstation3", "rpcs3", "ps 3", "ps-3")),
    ("ps2", ("ps2", "playstation 2", "playstation2")),
    ("ps1", ("ps1", "psx", "playstation", "playstation 1")),
    ("psp", ("psp", "playstation portable")),
    ("wii", ("wii",)),
    ("gamecube", ("gamecube", "gc", "game cube")),
    ("switch", ("switch", "ns", "nintendo switch")),
    ("saturn", ("saturn", "sega saturn")),
    ("dreamcast", ("dreamcast", "dc", "sega dreamcast")),
    ("genesis", ("genesis", "megadrive", "mega drive", "sega genesis")),
    ("snes", ("snes", "super nintendo", "super famicom", "sfc")),
    ("nes", ("nes", "nintendo entertainment", "famicom")),
    ("n64", ("n64", "nintendo 64")),
    ("arcade", ("arcade", "mame", "fbneo")),
)

_PAREN_TAG_RE = re.compile(r"\s*\([^)]*\)")
_BRACKET_TAG_RE = re.compile(r"\s*\[[^\]]*\]")


def _split_ext(path: str) -> tuple[str, str]:
    base = os.path.basename(path.replace("\\", "/"))
    stem, ext = os.path.splitext(base)
    return stem, ext.lower()


def supported_extensions() -> set[str]:
    return set(EXTENSION_PLATFORM_MAP)


def detect_platform_from_path(file_path: str) -> str:
    """Guess the platform of *file_path*.

    The extension decides unless it is ambiguous (``.iso``, ``.bin`` …);
    then the filename, parent folder, grandparent folder and finally the
    whole path are searched for platform hints, in that order.
    """
    stem, ext = _split_ext(file_path)
    platform = EXTENSION_PLATFORM_MAP.get(ext)
    if platform and platform != UNKNOWN_PLATFORM:
        return platform

    lower_path = file_path.lower().replace("\\", "/")
    segments = lower_path.split("/")

    to_check = [stem.lower()]
    if len(segments) >= 2:
        to_check.append(segments[-2])
    if len(segments) >= 3:
        to_check.append(segments[-3])
    to_check.append(lower_path)

    for segment in to_check:
        for platform_id, hints in PLATFORM_HINTS:
            if any(hint in segment for hint in hints):
                return platform_id

    return UNKNOWN_PLATFORM


def title_from_filename(file_path: str) -> str:
    """Strip extension and ``(…)`` / ``[…]`` tags: ``Game (USA) [!].sfc`` → ``Game``."""
    stem, _ = _split_ext(file_path)
    title = _PAREN_TAG_RE.sub("", stem)
    title = _BRACKET_TAG_RE.sub("", title)
    return title.strip()
