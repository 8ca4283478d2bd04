"""Routes a play request to either the embedded core or an external emulator."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from romlauncher.embedded.cores import CoreManager
from romlauncher.embedded.session import EmbeddedSessionTracker
from romlauncher.errors import GameNotFound
from romlauncher.launch.launcher import GameLauncher, LaunchHandle
from romlauncher.library import Library
from romlauncher.models.game import GameRecord

MODE_EMBEDDED = "embedded"
MODE_EXTERNAL = "external"


@dataclass
class PlayResult:
    game_id: str
    mode: str
    handle: LaunchHandle | None = None
    """Set for external launches only."""

    system: str | None = None
    """EmulatorJS system name, set for embedded sessions only."""

    @property
    def embedded(self) -> bool:
        return self.mode == MODE_EMBEDDED


class Player:
    """Picks exactly one session tracker for each play request.

    The embedded core is used only when the caller did not ask for an
    emulator, the game has no preferred emulator and an embedded core is
    available for its platform.
    """

    def __init__(
        self,
        library: Library,
        cores: CoreManager,
        launcher: GameLauncher,
        embedded: EmbeddedSessionTracker,
    ) -> None:
        self._library = library
        self._cores = cores
        self._launcher = launcher
        self._embedded = embedded

    def should_embed(self, game_id: str, emulator_id: str | None = None) -> bool:
        return self._embed_target(game_id, emulator_id) is not None

    def play(self, game_id: str, emulator_id: str | None = None) -> PlayResult:
        game = self._embed_target(game_id, emulator_id)
        if game is not None:
            self._embedded.start_session(game_id)
            logger.info("Playing {} in the embedded core", game_id)
            return PlayResult(game_id, MODE_EMBEDDED, system=self._embedded.get_system(game.platform))

        handle = self._launcher.launch(game_id, emulator_id)
        return PlayResult(game_id, MODE_EXTERNAL, handle=handle)

    def _embed_target(self, game_id: str, emulator_id: str | None) -> GameRecord | None:
        """The game record when it should run in the embedded core, else ``None``."""
        game = self._library.get_game(game_id)
        if game is None:
            raise GameNotFound(game_id)
        if emulator_id or game.preferred_emulator:
            return None
        if not self._cores.can_play_embedded(game.platform):
            return None
        return game
