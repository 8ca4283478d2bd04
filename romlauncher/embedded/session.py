"""Play sessions for games running in an embedded core.

Nothing is spawned here: the presentation layer runs the core and tells
us when the game starts and stops.
"""

from __future__ import annotations

import os
from datetime import datetime

from loguru import logger

from romlauncher.config import Config
from romlauncher.core.events import EMBEDDED_SESSION_ENDED
from romlauncher.core.sessions import SessionTracker
from romlauncher.embedded.cores import CoreManager
from romlauncher.errors import CoreNotInstalled, EmbeddedDisabled, GameNotFound, RomFileNotFound
from romlauncher.library import Library
from romlauncher.models.core import EmbeddedPlayCapability
from romlauncher.models.session import SessionSource

# Library platform id → EmulatorJS system name.
PLATFORM_TO_SYSTEM: dict[str, str] = {
    "nes": "nes",
    "snes": "snes",
    "n64": "n64",
    "gb": "gb",
    "gbc": "gbc",
    "gba": "gba",
    "genesis": "segaMD",
    "megadrive": "segaMD",
    "sms": "segaMS",
    "gamegear": "segaGG",
    "ps1": "psx",
    "psx": "psx",
}


class EmbeddedSessionTracker:
    def __init__(
        self,
        library: Library,
        config: Config,
        cores: CoreManager,
        sessions: SessionTracker,
    ) -> None:
        self._library = library
        self._cfg = config
        self._cores = cores
        self._sessions = sessions

    def check_can_play(self, platform: str) -> EmbeddedPlayCapability:
        if not self._cfg.prefer_embedded:
            return EmbeddedPlayCapability(False, "Embedded emulation is disabled in settings")

        paths = self._cores.get_core_paths(platform)
        if paths is None:
            return EmbeddedPlayCapability(False, f"No embedded core installed for {platform}")
        if not os.path.exists(paths.data_path):
            return EmbeddedPlayCapability(False, "Core data file is missing. Please reinstall the core.")

        return EmbeddedPlayCapability(True, core_name=paths.core_name)

    def start_session(self, game_id: str) -> None:
        """Validate and open an embedded session; raises a ``LaunchError``."""
        game = self._library.get_game(game_id)
        if game is None:
            raise GameNotFound(game_id)

        capability = self.check_can_play(game.platform)
        if not capability.can_play:
            if not self._cfg.prefer_embedded:
                raise EmbeddedDisabled()
            raise CoreNotInstalled(game.platform, capability.reason)

        if not os.path.exists(game.path):
            raise RomFileNotFound(game.path)

        session = self._sessions.begin(game_id)
        stamp = datetime.fromtimestamp(session.started_at).isoformat(timespec="seconds")
        try:
            self._library.update_game(game_id, {"last_played": stamp})
        except Exception as e:
            logger.error("Failed to update last played for {}: {}", game_id, e)
        logger.info("Embedded session for {} on core {}", game_id, capability.core_name)

    def end_session(self, game_id: str, elapsed_ms: float | None = None) -> int:
        """Close the session and credit play time; never raises.

        *elapsed_ms* (reported by the core's host) wins over the recorded
        start time.  Ending a session that was never started counts zero
        minutes unless *elapsed_ms* says otherwise.
        """
        return self._sessions.end(
            game_id,
            EMBEDDED_SESSION_ENDED,
            SessionSource.EMBEDDED,
            elapsed_ms=elapsed_ms,
        )

    def get_rom_path(self, game_id: str) -> str | None:
        game = self._library.get_game(game_id)
        return game.path if game is not None else None

    def get_game_info(self, game_id: str) -> dict[str, str] | None:
        game = self._library.get_game(game_id)
        if game is None:
            return None
        return {"path": game.path, "platform": game.platform, "title": game.title}

    def get_system(self, platform: str) -> str:
        """EmulatorJS system name for *platform*; unknown ids pass through."""
        return PLATFORM_TO_SYSTEM.get(platform, platform)
