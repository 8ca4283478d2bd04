"""Data model for play sessions and their notifications."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SessionState(str, Enum):
    """Lifecycle of one external launch."""

    IDLE = "idle"
    SPAWNING = "spawning"
    RUNNING = "running"
    ENDED = "ended"


class SessionSource(str, Enum):
    EXTERNAL = "external"    # Spawned emulator process
    EMBEDDED = "embedded"    # In-process core, nothing spawned


@dataclass
class Session:
    """An active play session; exists only between start and end."""

    game_id: str
    started_at: float
    """Wall-clock start, in seconds since the epoch."""


@dataclass(frozen=True)
class SessionEnded:
    """Notification sent once a session's play time has been persisted."""

    game_id: str
    duration_minutes: int
    source: SessionSource = SessionSource.EXTERNAL
