"""Launches games in external emulators and tracks the resulting sessions."""

from __future__ import annotations

import os
import subprocess
import threading
from collections.abc import Callable
from datetime import datetime
from typing import Any

from loguru import logger

from romlauncher.config import Config
from romlauncher.core.events import SESSION_ENDED
from romlauncher.core.path_resolver import current_os_key
from romlauncher.core.sessions import SessionTracker
from romlauncher.emulators.selection import EmulatorSelector
from romlauncher.errors import GameNotFound, SpawnFailure
from romlauncher.launch.preconditions import PreconditionValidator
from romlauncher.library import Library
from romlauncher.models.emulator import LaunchContext, ResolvedEmulator
from romlauncher.models.session import SessionSource, SessionState

# Fallbacks for running on a non-Windows interpreter.
_DETACHED_PROCESS = getattr(subprocess, "DETACHED_PROCESS", 0x00000008)
_CREATE_NEW_PROCESS_GROUP = getattr(subprocess, "CREATE_NEW_PROCESS_GROUP", 0x00000200)


def _detach_kwargs() -> dict[str, Any]:
    """Popen options that let the emulator outlive the launcher."""
    if os.name == "nt":
        return {"creationflags": _DETACHED_PROCESS | _CREATE_NEW_PROCESS_GROUP}
    return {"start_new_session": True}


class LaunchHandle:
    """State of one launched emulator process.

    ``launch`` returns as soon as the process is spawned; the handle moves
    to ``ENDED`` later, from the exit watcher thread.
    """

    def __init__(self, game_id: str, emulator: ResolvedEmulator, args: list[str]) -> None:
        self.game_id = game_id
        self.emulator = emulator
        self.args = args
        self.state = SessionState.IDLE
        self.pid: int | None = None
        self.started_at: float | None = None
        self.returncode: int | None = None
        self.duration_minutes: int | None = None
        self._ended = threading.Event()
        self._lock = threading.Lock()

    @property
    def command(self) -> list[str]:
        return [self.emulator.path, *self.args]

    @property
    def ended(self) -> bool:
        return self._ended.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the session has been closed; ``False`` on timeout."""
        return self._ended.wait(timeout)

    def _claim_end(self) -> bool:
        with self._lock:
            if self.state == SessionState.ENDED:
                return False
            self.state = SessionState.ENDED
            return True

    def __repr__(self) -> str:
        return f"<LaunchHandle {self.game_id} {self.emulator.id} {self.state.value}>"


class GameLauncher:
    """Resolves, validates and spawns the emulator for a game."""

    def __init__(
        self,
        library: Library,
        config: Config,
        selector: EmulatorSelector,
        validator: PreconditionValidator,
        sessions: SessionTracker,
        popen: Callable[..., Any] = subprocess.Popen,
        os_key: str | None = None,
    ) -> None:
        self._library = library
        self._cfg = config
        self._selector = selector
        self._validator = validator
        self._sessions = sessions
        self._popen = popen
        self._os_key = os_key or current_os_key()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def launch(self, game_id: str, emulator_id: str | None = None) -> LaunchHandle:
        """Start *game_id* in its emulator.

        Returns once the process has been spawned.  Raises a
        :class:`~romlauncher.errors.LaunchError` when the game, emulator,
        firmware, BIOS or ROM is missing, or when the OS refuses to spawn.
        """
        game = self._library.get_game(game_id)
        if game is None:
            raise GameNotFound(game_id)

        resolved = self._selector.select_emulator(game, emulator_id)
        rom_path = self._validator.validate(game, resolved)

        ctx = LaunchContext(platform=game.platform, emulator_path=resolved.path, os_key=self._os_key)
        args = resolved.definition.build_args(rom_path, ctx)
        handle = LaunchHandle(game_id, resolved, args)

        logger.info("Launching {} with {}: {}", game.title or game_id, resolved.name, handle.command)
        handle.state = SessionState.SPAWNING
        try:
            process = self._spawn(handle.command, resolved.path)
        except OSError as e:
            handle.state = SessionState.ENDED
            handle._ended.set()
            logger.error("Failed to spawn {}: {}", resolved.path, e)
            raise SpawnFailure(resolved.path, e) from e

        session = self._sessions.begin(game_id)
        handle.pid = getattr(process, "pid", None)
        handle.started_at = session.started_at
        handle.state = SessionState.RUNNING
        self._touch_last_played(game_id, session.started_at)

        watcher = threading.Thread(
            target=self._watch_exit,
            args=(process, handle),
            name=f"exit-watch-{game_id}",
            daemon=True,
        )
        watcher.start()
        return handle

    def open_emulator(self, emulator_id: str) -> bool:
        """Open an emulator without a game (e.g. to reach its settings)."""
        resolved = self._selector.resolve_by_id(emulator_id)
        if resolved is None:
            return False
        try:
            self._spawn([resolved.path], resolved.path)
        except OSError as e:
            logger.error("Failed to open {}: {}", resolved.name, e)
            return False
        return True

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _spawn(self, command: list[str], executable: str) -> Any:
        return self._popen(
            command,
            cwd=os.path.dirname(executable) or None,
            env=os.environ.copy(),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            close_fds=True,
            **_detach_kwargs(),
        )

    def _touch_last_played(self, game_id: str, started_at: float) -> None:
        stamp = datetime.fromtimestamp(started_at).isoformat(timespec="seconds")
        try:
            self._library.update_game(game_id, {"last_played": stamp})
        except Exception as e:
            logger.error("Failed to update last played for {}: {}", game_id, e)

    def _watch_exit(self, process: Any, handle: LaunchHandle) -> None:
        try:
            handle.returncode = process.wait()
        except Exception as e:
            logger.error("Lost track of {} (pid {}): {}", handle.emulator.name, handle.pid, e)
        self._finish(handle)

    def _finish(self, handle: LaunchHandle) -> None:
        if not handle._claim_end():
            return
        try:
            handle.duration_minutes = self._sessions.end(
                handle.game_id,
                SESSION_ENDED,
                SessionSource.EXTERNAL,
                fallback_started_at=handle.started_at,
            )
            logger.info(
                "{} exited (code {}) after {} minute(s)",
                handle.emulator.name, handle.returncode, handle.duration_minutes,
            )
        except Exception as e:
            logger.error("Failed to close session for {}: {}", handle.game_id, e)
        finally:
            handle._ended.set()
