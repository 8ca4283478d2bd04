"""JSON-backed game library (the Library Store).

The file holds ``{"games": [GameRecord.to_dict(), …]}``.  Every write is
persisted immediately.
"""

from __future__ import annotations

import json
import threading
import uuid
from dataclasses import replace
from pathlib import Path
from typing import Any

from loguru import logger

from romlauncher.models.game import GameRecord
from romlauncher.platforms import (
    UNKNOWN_PLATFORM,
    detect_platform_from_path,
    supported_extensions,
    title_from_filename,
)


class Library:
    """Persists game records and exposes lookup / merge-update."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._games: dict[str, GameRecord] = {}
        self._lock = threading.RLock()
        self._load()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def path(self) -> Path:
        return self._path

    def get_game(self, game_id: str) -> GameRecord | None:
        with self._lock:
            game = self._games.get(game_id)
            return replace(game) if game is not None else None

    def get_games(self) -> list[GameRecord]:
        with self._lock:
            return sorted(
                (replace(g) for g in self._games.values()),
                key=lambda g: g.title.lower(),
            )

    def add_game(self, game: GameRecord) -> GameRecord:
        with self._lock:
            self._games[game.id] = replace(game)
            self._save()
        return game

    def update_game(self, game_id: str, patch: dict[str, Any]) -> GameRecord | None:
        """Merge *patch* into the stored record and persist it.

        Unknown keys are ignored.  Returns the updated record, or ``None``
        if no game has that id.
        """
        known = GameRecord.field_names() - {"id"}
        with self._lock:
            game = self._games.get(game_id)
            if game is None:
                return None
            changes = {k: v for k, v in patch.items() if k in known}
            ignored = set(patch) - set(changes)
            if ignored:
                logger.debug("Ignoring unknown game fields: {}", sorted(ignored))
            updated = replace(game, **changes)
            self._games[game_id] = updated
            self._save()
            return replace(updated)

    def delete_game(self, game_id: str) -> bool:
        with self._lock:
            if self._games.pop(game_id, None) is None:
                return False
            self._save()
            return True

    def scan_folders(self, folders: list[str | Path]) -> list[GameRecord]:
        """Add every new ROM found under *folders*; return the new records."""
        extensions = supported_extensions()
        found: list[Path] = []
        for folder in folders:
            root = Path(folder)
            if not root.is_dir():
                logger.warning("ROM folder does not exist: {}", root)
                continue
            try:
                for child in sorted(root.rglob("*")):
                    if child.is_file() and child.suffix.lower() in extensions:
                        found.append(child)
            except OSError as e:
                logger.error("Failed to scan folder {}: {}", root, e)

        added: list[GameRecord] = []
        with self._lock:
            known_paths = {g.path for g in self._games.values()}
            for file_path in found:
                path_str = str(file_path)
                if path_str in known_paths:
                    continue
                game = GameRecord(
                    id=str(uuid.uuid4()),
                    title=title_from_filename(path_str),
                    platform=detect_platform_from_path(path_str),
                    path=path_str,
                )
                self._games[game.id] = game
                known_paths.add(path_str)
                added.append(replace(game))
            self._save()

        logger.info("Library scan added {} game(s)", len(added))
        return added

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except Exception as e:
            logger.error("Failed to load library {}: {}", self._path, e)
            return

        updated = False
        for raw in data.get("games", []):
            try:
                game = GameRecord.from_dict(raw)
            except KeyError as e:
                logger.warning("Skipping malformed library entry (missing {})", e)
                continue
            # Re-detect games stored before their platform could be guessed.
            if game.platform == UNKNOWN_PLATFORM:
                detected = detect_platform_from_path(game.path)
                if detected != UNKNOWN_PLATFORM:
                    game.platform = detected
                    updated = True
            self._games[game.id] = game

        logger.info("Library loaded: {} game(s) from {}", len(self._games), self._path)
        if updated:
            self._save()

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"games": [g.to_dict() for g in self._games.values()]}
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
