"""Data model for library game records."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime


def _now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


@dataclass
class GameRecord:
    """One ROM in the library."""

    id: str
    title: str
    platform: str
    path: str
    """Absolute path of the ROM or disc image on disk."""

    preferred_emulator: str | None = None
    """Emulator id chosen for this game only; overrides platform defaults."""

    play_time: int = 0
    """Cumulative minutes played.  Only ever grows, by whole sessions."""

    last_played: str | None = None
    added_at: str = field(default_factory=_now_iso)
    is_favorite: bool = False

    @classmethod
    def field_names(cls) -> set[str]:
        return {f.name for f in fields(cls)}

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "platform": self.platform,
            "path": self.path,
            "preferred_emulator": self.preferred_emulator,
            "play_time": self.play_time,
            "last_played": self.last_played,
            "added_at": self.added_at,
            "is_favorite": self.is_favorite,
        }

    @classmethod
    def from_dict(cls, data: dict) -> GameRecord:
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            platform=data.get("platform", "unknown"),
            path=data.get("path", ""),
            preferred_emulator=data.get("preferred_emulator") or None,
            play_time=int(data.get("play_time") or 0),
            last_played=data.get("last_played"),
            added_at=data.get("added_at") or _now_iso(),
            is_favorite=bool(data.get("is_favorite", False)),
        )
