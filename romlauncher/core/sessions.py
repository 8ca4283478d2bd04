"""Play-session bookkeeping shared by the external and embedded trackers.

Sessions are keyed by game id.  Starting a game that already has an active
session replaces the recorded start time, so when two instances of the same
game overlap, whichever exits first is credited from the *later* start.
This mirrors how the library has always counted and is left as-is.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from loguru import logger

from romlauncher.core.events import EventBus
from romlauncher.library import Library
from romlauncher.models.session import Session, SessionEnded, SessionSource

MS_PER_MINUTE = 60_000


def elapsed_to_minutes(elapsed_ms: float) -> int:
    """Whole minutes in *elapsed_ms*, floored and never negative."""
    return max(0, int(elapsed_ms) // MS_PER_MINUTE)


class SessionTracker:
    """Owns the active-session map and credits play time on session end.

    A single lock serialises the session map and the play-time update so
    exit watchers running on background threads cannot interleave.
    """

    def __init__(
        self,
        library: Library,
        events: EventBus,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._library = library
        self._events = events
        self._clock = clock
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def now(self) -> float:
        return self._clock()

    def begin(self, game_id: str) -> Session:
        session = Session(game_id=game_id, started_at=self._clock())
        with self._lock:
            if game_id in self._sessions:
                logger.warning("Game {} already has an active session; restarting its clock", game_id)
            self._sessions[game_id] = session
        logger.info("Session started for {}", game_id)
        return session

    def is_active(self, game_id: str) -> bool:
        with self._lock:
            return game_id in self._sessions

    def get(self, game_id: str) -> Session | None:
        with self._lock:
            return self._sessions.get(game_id)

    def active_games(self) -> list[str]:
        with self._lock:
            return list(self._sessions)

    def end(
        self,
        game_id: str,
        topic: str,
        source: SessionSource,
        elapsed_ms: float | None = None,
        fallback_started_at: float | None = None,
    ) -> int:
        """Close the session of *game_id* and credit its play time.

        The duration comes from *elapsed_ms* when given, otherwise from the
        recorded start time (or *fallback_started_at* when no session is
        recorded).  With neither, the session counts as zero minutes.
        Never raises; persistence failures are logged.
        """
        with self._lock:
            session = self._sessions.pop(game_id, None)
            now = self._clock()
            if elapsed_ms is None:
                started_at = session.started_at if session is not None else fallback_started_at
                elapsed_ms = (now - started_at) * 1000 if started_at is not None else 0
            minutes = elapsed_to_minutes(elapsed_ms)
            self._credit(game_id, minutes)

        logger.info("Session ended for {} after {} minute(s)", game_id, minutes)
        self._events.emit(topic, SessionEnded(game_id=game_id, duration_minutes=minutes, source=source))
        return minutes

    def _credit(self, game_id: str, minutes: int) -> None:
        try:
            game = self._library.get_game(game_id)
            if game is None:
                logger.warning("Game {} vanished from the library; play time not recorded", game_id)
                return
            self._library.update_game(game_id, {"play_time": (game.play_time or 0) + minutes})
        except Exception as e:
            logger.error("Failed to record play time for {}: {}", game_id, e)
